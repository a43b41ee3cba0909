"""Error taxonomy shared by the API and the client."""
from __future__ import annotations

from fastapi import status


class OvertimeError(Exception):
    """Base error carrying an HTTP status and a user-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(OvertimeError):
    """Malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(OvertimeError):
    """Wrong password, or a missing, unknown or expired token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(OvertimeError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(OvertimeError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(OvertimeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


_BY_STATUS: dict[int, type[OvertimeError]] = {
    cls.status_code: cls
    for cls in (ValidationError, AuthError, NotFoundError, ConflictError, InternalError)
}


def error_for_status(status_code: int, message: str) -> OvertimeError:
    """Rebuild a taxonomy error from an HTTP status code."""

    return _BY_STATUS.get(status_code, InternalError)(message)
