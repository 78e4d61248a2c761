"""Library error types."""

from __future__ import annotations


class PassportCoverageError(RuntimeError):
    """Base library error."""


class DatasetUnavailableError(PassportCoverageError):
    """Certificate dataset could not be retrieved."""


class DatasetRequestError(DatasetUnavailableError):
    """Dataset host returned an HTTP error response."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body


class SchemaValidationError(PassportCoverageError):
    """Dataset or support table document has an unexpected shape."""


class UnknownTableVersionError(PassportCoverageError):
    """Requested support table version is not packaged."""
