"""Test factories for creating test data."""

from tests.factories.buyers import BuyerFactory
from tests.factories.users import CurrentUser

__all__ = [
    "BuyerFactory",
    "CurrentUser",
]
