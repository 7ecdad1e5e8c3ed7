"""Custom exceptions for the Active Record layer."""

from __future__ import annotations


class ActiveRecordError(Exception):
    """Base exception for Active Record failures."""


class ArgumentCountError(ActiveRecordError, TypeError):
    """Raised when the number of primary key values does not match the key columns."""

    def __init__(self, message: str, expected: int, received: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received


class TooFewPrimaryKeyValuesError(ArgumentCountError):
    """Raised when fewer values than primary key columns are supplied."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__("Too few columns for the primary key", expected, received)


class TooManyPrimaryKeyValuesError(ArgumentCountError):
    """Raised when more values than primary key columns are supplied."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__("Too many columns for the primary key", expected, received)


class ConfigurationError(ActiveRecordError, ValueError):
    """Raised when a record cannot be wired to a statement builder or adapter."""


class CapabilityError(ActiveRecordError, TypeError):
    """Raised when a row prototype cannot be cleared and repopulated."""


__all__ = [
    "ActiveRecordError",
    "ArgumentCountError",
    "TooFewPrimaryKeyValuesError",
    "TooManyPrimaryKeyValuesError",
    "ConfigurationError",
    "CapabilityError",
]
