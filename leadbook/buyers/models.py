"""Buyer lead domain models.

Contains the Pydantic models for buyer records, their change history,
and the create/patch payloads accepted by the updater.
"""

import re
from datetime import datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from leadbook.buyers.enums import BHK, BuyerStatus, City, PropertyType, Purpose, Source, Timeline
from leadbook.utils.time import utc_now

MAX_BUDGET = 1_000_000_000
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

CREATED_KEY = "created"
CREATED_DESCRIPTION = "Buyer created"

# Fields a patch may not set to null
REQUIRED_FIELDS = frozenset({
    "full_name",
    "phone",
    "city",
    "property_type",
    "purpose",
    "timeline",
    "source",
    "status",
    "tags",
})


def normalize_tags(value: Any) -> list[str]:
    """Accept a list or a comma separated string; strip, drop empties and repeats."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    tags: list[str] = []
    for raw in value:
        tag = str(raw).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def constraint_violation(values: dict[str, Any]) -> tuple[str, str] | None:
    """Check the cross-field rules on a complete set of buyer values.

    Returns:
        (field, message) for the first broken rule, or None
    """
    budget_min = values.get("budget_min")
    budget_max = values.get("budget_max")
    if budget_min is not None and budget_max is not None and budget_max < budget_min:
        return (
            "budget_max",
            "budget_max must be greater than or equal to budget_min",
        )

    property_type = values.get("property_type")
    if property_type is not None and PropertyType(property_type).requires_bhk:
        if values.get("bhk") is None:
            return ("bhk", "bhk is required for Apartment and Villa property types")

    return None


def _constraint_error(field: str, message: str) -> PydanticCustomError:
    # ctx carries the field; model-level errors have no location of their own
    return PydanticCustomError("constraint_violation", message, {"field": field})


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_email(value: str | None) -> str | None:
    if value is not None and not EMAIL_PATTERN.match(value):
        raise ValueError("email must be a valid email address")
    return value


class BuyerFields(BaseModel):
    """Editable business fields of a buyer lead."""

    full_name: str = Field(..., min_length=2, max_length=100, description="Lead name")
    email: str | None = Field(default=None, max_length=255, description="Contact email")
    phone: str = Field(..., min_length=10, max_length=15, description="Contact phone")
    city: City = Field(..., description="City of interest")
    property_type: PropertyType = Field(..., description="Property kind")
    bhk: BHK | None = Field(default=None, description="Unit count, residential only")
    purpose: Purpose = Field(..., description="Buy or rent")
    budget_min: int | None = Field(default=None, ge=0, le=MAX_BUDGET)
    budget_max: int | None = Field(default=None, ge=0, le=MAX_BUDGET)
    timeline: Timeline = Field(..., description="Intended closing horizon")
    source: Source = Field(..., description="Lead origin")
    status: BuyerStatus = Field(default=BuyerStatus.NEW, description="Pipeline stage")
    notes: str | None = Field(default=None, max_length=1000, description="Free text")
    tags: list[str] = Field(default_factory=list, description="Labels")

    @field_validator("email", "bhk", "notes", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return _check_email(v)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str]:
        return normalize_tags(v)


class BuyerCreate(BuyerFields):
    """Payload for creating a buyer lead."""

    @model_validator(mode="after")
    def check_constraints(self) -> "BuyerCreate":
        violation = constraint_violation(self.model_dump())
        if violation is not None:
            raise _constraint_error(*violation)
        return self


class Buyer(BuyerFields):
    """A buyer lead owned by the user who created it.

    `updated_at` doubles as the optimistic concurrency token: writers
    must present the value they read, and every successful write
    moves it forward.
    """

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    owner_id: UUID = Field(..., description="Creating user")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last write")

    @classmethod
    def create(cls, data: BuyerCreate, owner_id: UUID) -> "Buyer":
        """Build a new buyer from a validated create payload."""
        now = utc_now()
        return cls(
            **data.model_dump(),
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )


class BuyerPatch(BaseModel):
    """Partial update: only fields explicitly present are written.

    Omitted fields keep their stored value; explicit null clears an
    optional field.
    """

    model_config = ConfigDict(extra="ignore")

    full_name: str | None = Field(default=None, min_length=2, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, min_length=10, max_length=15)
    city: City | None = None
    property_type: PropertyType | None = None
    bhk: BHK | None = None
    purpose: Purpose | None = None
    budget_min: int | None = Field(default=None, ge=0, le=MAX_BUDGET)
    budget_max: int | None = Field(default=None, ge=0, le=MAX_BUDGET)
    timeline: Timeline | None = None
    source: Source | None = None
    status: BuyerStatus | None = None
    notes: str | None = Field(default=None, max_length=1000)
    tags: list[str] | None = None

    @field_validator("email", "bhk", "notes", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return _check_email(v)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str] | None:
        if v is None:
            return None
        return normalize_tags(v)

    @model_validator(mode="after")
    def check_required_not_cleared(self) -> "BuyerPatch":
        for name in sorted(REQUIRED_FIELDS & self.model_fields_set):
            if getattr(self, name) is None:
                raise _constraint_error(name, f"{name} cannot be null")
        if (
            self.budget_min is not None
            and self.budget_max is not None
            and self.budget_max < self.budget_min
        ):
            raise _constraint_error(
                "budget_max", "budget_max must be greater than or equal to budget_min"
            )
        return self

    def changes(self) -> dict[str, Any]:
        """Explicitly supplied fields and their values."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class FieldChange(BaseModel):
    """Old and new value of one field in a single write."""

    model_config = ConfigDict(frozen=True)

    old: Any = None
    new: Any = None


class HistoryEntry(BaseModel):
    """Immutable audit record of one buyer mutation."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    buyer_id: UUID = Field(..., description="Buyer the change belongs to")
    changed_by: UUID = Field(..., description="Acting user")
    changed_at: datetime = Field(default_factory=utc_now, description="Write time")
    diff: dict[str, FieldChange] = Field(..., description="Field name to old/new")

    @property
    def is_creation(self) -> bool:
        return set(self.diff) == {CREATED_KEY}


SortField = Literal["created_at", "updated_at", "full_name", "status"]
SortOrder = Literal["asc", "desc"]


class BuyerFilters(BaseModel):
    """Listing filters, sort and page selection."""

    search: str | None = Field(default=None, description="Name, email or phone substring")
    city: City | None = None
    property_type: PropertyType | None = None
    status: BuyerStatus | None = None
    timeline: Timeline | None = None
    sort_by: SortField = "created_at"
    sort_order: SortOrder = "desc"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
