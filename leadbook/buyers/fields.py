"""Comparable buyer fields.

The fixed table of business fields that take part in change history,
each with an explicit accessor and equality rule. System fields (id,
owner, timestamps) are deliberately absent.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from leadbook.buyers.models import BuyerFields

Comparator = Callable[[Any, Any], bool]


def plain(value: Any) -> Any:
    """Wire form of a field value: enums become their string value."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [plain(item) for item in value]
    return value


def scalar_equal(old: Any, new: Any) -> bool:
    """Primitive equality on wire values."""
    return plain(old) == plain(new)


def tag_set_equal(old: Iterable[str] | None, new: Iterable[str] | None) -> bool:
    """Tags are a set: order and repeats do not count as a change."""
    return frozenset(old or ()) == frozenset(new or ())


@dataclass(frozen=True)
class ComparableField:
    """A diffable field: name, accessor and equality rule."""

    name: str
    get: Callable[[BuyerFields], Any]
    equals: Comparator = scalar_equal

    def changed(self, before: BuyerFields, after: BuyerFields) -> bool:
        return not self.equals(self.get(before), self.get(after))


COMPARABLE_FIELDS: tuple[ComparableField, ...] = (
    ComparableField("full_name", lambda b: b.full_name),
    ComparableField("email", lambda b: b.email),
    ComparableField("phone", lambda b: b.phone),
    ComparableField("city", lambda b: b.city),
    ComparableField("property_type", lambda b: b.property_type),
    ComparableField("bhk", lambda b: b.bhk),
    ComparableField("purpose", lambda b: b.purpose),
    ComparableField("budget_min", lambda b: b.budget_min),
    ComparableField("budget_max", lambda b: b.budget_max),
    ComparableField("timeline", lambda b: b.timeline),
    ComparableField("source", lambda b: b.source),
    ComparableField("status", lambda b: b.status),
    ComparableField("notes", lambda b: b.notes),
    ComparableField("tags", lambda b: b.tags, equals=tag_set_equal),
)

EDITABLE_FIELD_NAMES: frozenset[str] = frozenset(f.name for f in COMPARABLE_FIELDS)
