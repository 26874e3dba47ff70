"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``field`` names the offending input (e.g. ``items[0].quantity``) when
    the violation can be pinned to one.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class TransmissionError(DomainException):
    """A printer bridge could not hand the receipt over."""
