"""Error types raised by the signal engine."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised for malformed engine input (no partial result is produced)."""
