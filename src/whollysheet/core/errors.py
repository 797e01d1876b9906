from __future__ import annotations


class WhollySheetError(Exception):
    """Base error for all user-facing whollysheet exceptions."""


class ConfigurationError(WhollySheetError):
    """Raised when configuration is invalid or incomplete."""


class ProjectNotInitializedError(WhollySheetError):
    """Raised when .wholly metadata is missing."""


class ValidationError(WhollySheetError):
    """Raised when model invariants fail."""


class SchemaMismatchError(WhollySheetError):
    """Raised when a tab header does not match the row type header."""


class MissingKeyError(WhollySheetError):
    """Raised when a row is written without a key value."""


class InvalidStateError(WhollySheetError):
    """Raised when a row position does not allow the requested operation."""


class PersistFailureError(WhollySheetError):
    """Raised when the backend answers a write with an unusable response."""


class TabNotFoundError(WhollySheetError):
    """Raised when a tab or tab row does not exist in the backend."""


class NotFoundError(WhollySheetError):
    """Raised by callers when a row lookup comes back empty."""


class ConflictError(WhollySheetError):
    """Raised when a row changed in the backend since it was last read."""

    def __init__(self, position: int, mismatches: list[str]) -> None:
        self.position = position
        self.mismatches = list(mismatches)
        super().__init__(f"Row {position} is outdated: {'; '.join(self.mismatches)}")


class DuplicateKeyError(InvalidStateError):
    """Raised when a created row reuses a key already present in the tab."""
