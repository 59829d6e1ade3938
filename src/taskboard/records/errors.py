# src/taskboard/records/errors.py

"""
Record API errors.

RecordApiError (base, a RuntimeError)
- RecordConfigError     missing base URL / API key
- RecordAuthError       401 / 403
- RecordNotFoundError   404, or a record id that does not exist
- RecordValidationError 400 / 422, or a `success: false` payload
- RecordNetworkError    connection failures, timeouts
"""

from __future__ import annotations

from typing import Any


class RecordApiError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_data: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code!r})"


class RecordConfigError(RecordApiError):
    pass


class RecordAuthError(RecordApiError):
    pass


class RecordNotFoundError(RecordApiError):
    pass


class RecordValidationError(RecordApiError):
    pass


class RecordNetworkError(RecordApiError):
    pass


def friendly_record_error_message(err: Exception) -> str:
    if isinstance(err, RecordAuthError):
        return "Record API authentication failed. Check TASKBOARD_API_KEY."
    if isinstance(err, RecordNetworkError):
        return "Record API network/timeout error. Try again later."
    if isinstance(err, RecordConfigError):
        return "Record API is not configured. Set TASKBOARD_API_BASE_URL and TASKBOARD_API_KEY in .env."
    msg = str(err).strip()
    return msg or "Record API error."
