"""Exception taxonomy for the FeiShu client.

Every error raised by the client core derives from ``FeishuError`` so callers
(and the MCP tool layer) can catch the whole family with one clause while still
branching on the concrete type:

- ``TransportError``: network failure, timeout, or non-2xx HTTP status
- ``InvalidResponseFormatError``: response body is not a well-formed object
- ``ApiError``: non-zero ``code`` inside an otherwise successful response
- ``MissingFieldsError``: token response lacks required fields
- ``TokenFetchError``: a token could not be obtained at all
- ``AuthorizationCodeRequiredError``: user token flow needs an OAuth code
- ``RedirectUriRequiredError`` / ``EmptyValueError``: OAuth configuration errors
"""

from collections.abc import Iterable
from typing import Any


class FeishuError(Exception):
    """Base class for all FeiShu client errors."""


class TransportError(FeishuError):
    """An HTTP request failed before a usable response body was produced."""

    def __init__(  # noqa: PLR0913 (mirrors the normalized error shape)
        self,
        message: str,
        *,
        url: str | None = None,
        method: str | None = None,
        status: int | None = None,
        status_text: str | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.method = method
        self.status = status
        self.status_text = status_text
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """Return the normalized error shape used for structured logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "status": self.status,
            "status_text": self.status_text,
            "url": self.url,
            "method": self.method,
            "data": self.data,
        }


class InvalidResponseFormatError(FeishuError):
    """The response body could not be interpreted as a FeiShu envelope."""


class ApiError(FeishuError):
    """FeiShu reported an application-level failure (``code != 0``)."""

    def __init__(self, code: int, msg: str | None = None) -> None:
        self.code = code
        self.msg = msg or f"API Error: {code}"
        super().__init__(self.msg)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, msg={self.msg!r})"


class TokenApiError(ApiError):
    """A token endpoint answered with a non-zero ``code``."""


class MissingFieldsError(FeishuError):
    """A token response is well formed but lacks required fields."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(f"Token response is missing required fields: {', '.join(self.fields)}")


class TokenFetchError(FeishuError):
    """No valid access token could be obtained."""


class AuthorizationCodeRequiredError(FeishuError):
    """The user token flow was invoked without an authorization code."""

    def __init__(self, message: str, *, authorization_url: str | None = None) -> None:
        super().__init__(message)
        self.authorization_url = authorization_url


class RedirectUriRequiredError(FeishuError):
    """No OAuth redirect URI was given or configured."""


class EmptyValueError(FeishuError, ValueError):
    """An OAuth configuration setter received an empty value."""


__all__ = [
    "ApiError",
    "AuthorizationCodeRequiredError",
    "EmptyValueError",
    "FeishuError",
    "InvalidResponseFormatError",
    "MissingFieldsError",
    "RedirectUriRequiredError",
    "TokenApiError",
    "TokenFetchError",
    "TransportError",
]
