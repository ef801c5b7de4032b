"""ODM exceptions.

Every error is raised at the point of violation and surfaces straight to the
caller; nothing here is retried or logged.
"""


class AmberODMError(Exception):
    """Base exception for amber_odm errors."""


class MissingDatabaseSettings(AmberODMError):
    """Raised when no settings are registered for a database id."""


class ReservedField(AmberODMError):
    """Raised when a declared field collides with document metadata."""


class UnknownWriteFieldException(AmberODMError):
    """Raised when a write references fields the document does not declare."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])


class IllegalArgumentException(AmberODMError):
    """Raised for an empty query clause or an empty write field list."""

    def __init__(self, message: str = "query malformed, empty clause") -> None:
        super().__init__(message)


class ConfigurationError(AmberODMError):
    """Raised when client configuration is invalid."""
