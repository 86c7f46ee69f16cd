from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a record is missing a required field."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class ImportFileError(DomainError):
    """Base for spreadsheet files that cannot be turned into drafts."""


class EmptyFileError(ImportFileError):
    """Raised when the sheet has no data rows below the header."""


class NoValidRowsError(ImportFileError):
    """Raised when every data row was empty."""


class UnsupportedFormatError(ImportFileError):
    """Raised for legacy binary .xls workbooks."""


class EmptyExportError(DomainError):
    """Raised when there is nothing to export."""


class SyncError(DomainError):
    """Base for failures talking to the records API."""


class TransportError(SyncError):
    """Network or connection failure (no usable response)."""


class PersistenceError(SyncError):
    """The API answered but the envelope was not ok."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
