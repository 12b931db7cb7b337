"""
Error taxonomy for the greeter service.

Every error carries the HTTP status and JSON body it should be answered with;
the router turns them into responses without further interpretation.
"""

from __future__ import annotations

from typing import Optional

from greeter.schemas import ErrorResponse, StatusErrorResponse


def status_error_payload(message: str) -> dict:
    return StatusErrorResponse(message=message).model_dump()


class GreeterError(Exception):
    """Base class for failures that terminate the current request."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload if payload is not None else self.default_payload()

    def default_payload(self) -> dict:
        return ErrorResponse(error=self.message).model_dump()


class StorageUnavailableError(GreeterError):
    """The database location could not be created or opened."""


class SchemaSetupError(GreeterError):
    """The settings table could not be created."""


class SeedDataError(GreeterError):
    """Checking for or inserting the default row failed."""


class StorageError(GreeterError):
    """A read or write against an initialized store failed."""


class InvalidInputError(GreeterError):
    status_code = 400

    def default_payload(self) -> dict:
        return status_error_payload(self.message)


class SettingNotFoundError(GreeterError):
    """
    An update matched no row, i.e. the seeded key has gone missing.

    Answered as a server error: the row is guaranteed by initialization, so
    its absence means the store is broken rather than the client being wrong.
    """

    def default_payload(self) -> dict:
        return status_error_payload(self.message)
