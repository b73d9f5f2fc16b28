"""Buyer lead domain.

Contains the buyer models, the comparable field table, change history,
the conflict-checked updater and the storage interface.
"""

from leadbook.buyers.access import AccessPolicy, ForbiddenError
from leadbook.buyers.history import DiffRecorder, compute_diff
from leadbook.buyers.models import (
    Buyer,
    BuyerCreate,
    BuyerFilters,
    BuyerPatch,
    FieldChange,
    HistoryEntry,
)
from leadbook.buyers.store import BuyerStore
from leadbook.buyers.updater import BuyerUpdater

__all__ = [
    "AccessPolicy",
    "Buyer",
    "BuyerCreate",
    "BuyerFilters",
    "BuyerPatch",
    "BuyerStore",
    "BuyerUpdater",
    "DiffRecorder",
    "FieldChange",
    "ForbiddenError",
    "HistoryEntry",
    "compute_diff",
]
