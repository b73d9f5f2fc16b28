"""BuyerStore implementations."""

from leadbook.buyers.stores.inmemory import InMemoryBuyerStore

__all__ = ["InMemoryBuyerStore"]
