"""Leadbook: buyer lead management with conflict-checked edits and change history."""

__version__ = "0.1.0"
