"""User directory: role lookup used by buyer edit permissions."""

from leadbook.users.directory import UserDirectory
from leadbook.users.models import User, UserRole

__all__ = ["User", "UserDirectory", "UserRole"]
