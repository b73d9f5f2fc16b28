"""UserDirectory implementations."""

from leadbook.users.stores.inmemory import InMemoryUserDirectory

__all__ = ["InMemoryUserDirectory"]
