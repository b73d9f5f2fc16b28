"""Observability for Leadbook: structured logging."""

from leadbook.observability.logging import PIIRedactor, get_logger, setup_logging

__all__ = ["PIIRedactor", "get_logger", "setup_logging"]
