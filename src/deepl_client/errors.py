# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Error taxonomy for the DeepL API client.

Every HTTP error returned by the service is mapped onto exactly one
subclass of :class:`DeepLError`. Local validation failures are raised as
``ValueError``/``TypeError`` before any request is sent, and cancellation
always surfaces as ``asyncio.CancelledError``, never as a DeepL error.
"""

from __future__ import annotations

import json
from typing import Any


class DeepLError(Exception):
    """Base exception for errors reported by, or while talking to, DeepL."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidParametersError(DeepLError):
    """Raised on HTTP 400."""


class AuthorizationError(DeepLError):
    """Raised on HTTP 403."""


class ResourceNotFoundError(DeepLError):
    """Raised on HTTP 404."""


class PayloadTooLargeError(DeepLError):
    """Raised on HTTP 413."""


class UrlTooLongError(DeepLError):
    """Raised on HTTP 414."""


class RateLimitError(DeepLError):
    """Raised on HTTP 429 and 529."""


class QuotaExceededError(DeepLError):
    """Raised on HTTP 456."""


class InternalServerError(DeepLError):
    """Raised on HTTP 500."""


class ServiceUnavailableError(DeepLError):
    """Raised on HTTP 503."""


class UnknownDeepLError(DeepLError):
    """Raised for any other unsuccessful status code."""


class DocumentTranslationError(DeepLError):
    """Raised when a document translation ends in the error state."""

    def __init__(self, message: str, document_id: str | None = None) -> None:
        super().__init__(message)
        self.document_id = document_id


class DeepLConnectionError(DeepLError):
    """Raised when the service cannot be reached."""


BAD_REQUEST_MESSAGE = "Bad request. Please check error message and your parameters."
UNKNOWN_DOCUMENT_ERROR_MESSAGE = "Unknown error during document translation."

# status code -> (error class, message)
STATUS_ERRORS: dict[int, tuple[type[DeepLError], str]] = {
    400: (InvalidParametersError, BAD_REQUEST_MESSAGE),
    403: (
        AuthorizationError,
        "Authorization failed. Please supply a valid authentication key.",
    ),
    404: (ResourceNotFoundError, "The requested resource could not be found."),
    413: (PayloadTooLargeError, "The request size exceeds the limit."),
    414: (
        UrlTooLongError,
        "The request URL is too long. Please send text in the request body instead.",
    ),
    429: (RateLimitError, "Too many requests. Please wait and resend your request."),
    456: (QuotaExceededError, "Quota exceeded. The character limit has been reached."),
    500: (InternalServerError, "An internal server error occurred."),
    503: (ServiceUnavailableError, "Resource currently unavailable. Try again later."),
    529: (RateLimitError, "Too many requests. Please wait and resend your request."),
}

UNKNOWN_ERROR = (UnknownDeepLError, "An unknown error occurred.")


def _extract_message(body: Any) -> str | None:
    """Pull the ``message`` field out of a JSON error body, if there is one."""
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        if not body.strip():
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def error_for_status(status: int, body: Any = None) -> DeepLError | None:
    """Map an HTTP status code onto a DeepL error.

    Args:
        status: HTTP status code of the response
        body: Response body (raw text, bytes or decoded JSON). Only inspected
            for 400 responses, where the server explains what was wrong.

    Returns:
        The matching error instance, or None for successful status codes

    Example:
        >>> type(error_for_status(456)).__name__
        'QuotaExceededError'
        >>> error_for_status(200) is None
        True
    """
    if 200 <= status < 300:
        return None

    error_class, message = STATUS_ERRORS.get(status, UNKNOWN_ERROR)
    if status == 400:
        detail = _extract_message(body)
        if detail:
            message = f"Bad request: {detail}"
    return error_class(message, status_code=status)


def raise_for_status(status: int, body: Any = None) -> None:
    """Raise the mapped DeepL error for unsuccessful status codes."""
    error = error_for_status(status, body)
    if error is not None:
        raise error


__all__ = [
    "AuthorizationError",
    "DeepLConnectionError",
    "DeepLError",
    "DocumentTranslationError",
    "InternalServerError",
    "InvalidParametersError",
    "PayloadTooLargeError",
    "QuotaExceededError",
    "RateLimitError",
    "ResourceNotFoundError",
    "ServiceUnavailableError",
    "UnknownDeepLError",
    "UrlTooLongError",
    "error_for_status",
    "raise_for_status",
]
