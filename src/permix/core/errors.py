"""Exception hierarchy for the permission container."""

from __future__ import annotations


class PermixError(Exception):
    """Base class for all permix errors."""


class ValidationError(PermixError):
    """Raised when rules, snapshots or definitions are structurally invalid."""

    def __init__(self, message: str, reasons: list[str] | None = None) -> None:
        super().__init__(message)
        self.reasons: list[str] = reasons or []


class InvalidInstanceError(PermixError):
    """Raised when a value is not a container produced by create_permix."""


class UninitializedError(PermixError):
    """Raised when rules are read before any were provided."""
