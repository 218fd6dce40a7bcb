"""Default interceptors for the FeiShu HTTP transport.

- request: inject ``User-Agent`` and trace-log the outgoing call
- response (1): decode the JSON body, or normalise ``httpx.HTTPError`` into
  ``TransportError`` and log it
- response (2): raise ``ApiError`` when the envelope carries a non-zero ``code``
"""

from collections.abc import Callable
from typing import Any

import httpx

from ..consts import USER_AGENT
from ..errors import ApiError, InvalidResponseFormatError, TransportError
from ..log import TRACE, Logger
from ..transport import HttpxTransport, RequestConfig


def create_request_interceptor(
    logger: Logger,
    user_agent: str = USER_AGENT,
) -> Callable[[RequestConfig], RequestConfig]:
    """Return a request interceptor that sets ``User-Agent`` unless already present."""

    def intercept(config: RequestConfig) -> RequestConfig:
        if not any(name.lower() == "user-agent" for name in config.headers):
            config.headers["User-Agent"] = user_agent
        suffix = ""
        if config.params:
            suffix += " with params"
        if config.json:
            suffix += " with data"
        logger.log(TRACE, "Sending %s request to %s%s", config.method.upper(), config.url, suffix)
        return config

    return intercept


def decode_response_body(response: httpx.Response) -> Any:
    """Decode a JSON response body."""
    try:
        return response.json()
    except ValueError as exc:
        msg = f"Invalid JSON response from {response.request.method} {response.request.url}"
        raise InvalidResponseFormatError(msg) from exc


def normalize_transport_error(error: Exception) -> Exception:
    """Convert ``httpx`` errors into ``TransportError``; return others unchanged."""
    if isinstance(error, TransportError) or not isinstance(error, httpx.HTTPError):
        return error

    url: str | None = None
    method: str | None = None
    try:
        request = error.request
    except RuntimeError:
        request = None
    if request is not None:
        url = str(request.url)
        method = request.method

    status: int | None = None
    status_text: str | None = None
    data: Any = None
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        status_text = error.response.reason_phrase
        try:
            data = error.response.json()
        except ValueError:
            data = error.response.text or None

    transport_error = TransportError(
        str(error) or type(error).__name__,
        url=url,
        method=method,
        status=status,
        status_text=status_text,
        data=data,
    )
    transport_error.__cause__ = error
    return transport_error


def create_response_error_interceptor(logger: Logger) -> Callable[[Exception], Any]:
    """Return an ``on_rejected`` handler that normalises and logs transport errors."""

    def intercept(error: Exception) -> Any:
        normalized = normalize_transport_error(error)
        if isinstance(normalized, TransportError):
            logger.error(
                "Request failed: %s %s - %s %s %s",
                normalized.method,
                normalized.url,
                normalized.status,
                normalized.status_text or "",
                normalized.data if normalized.data is not None else normalized.message,
            )
        else:
            logger.error("Request failed: %s", normalized)
        raise normalized

    return intercept


def check_envelope(body: Any) -> Any:
    """Raise ``ApiError`` for envelopes with a non-zero ``code``."""
    if isinstance(body, dict) and "code" in body and body["code"] != 0:
        code = body["code"]
        raise ApiError(code if isinstance(code, int) else -1, body.get("msg") or f"API Error: {code}")
    return body


def create_default_transport(
    *,
    base_url: str,
    logger: Logger,
    timeout: float | None = None,
    user_agent: str = USER_AGENT,
) -> HttpxTransport:
    """Build the ``HttpxTransport`` used when the caller supplies none."""
    transport = HttpxTransport(
        base_url=base_url,
        headers={"Content-Type": "application/json; charset=utf-8", "User-Agent": user_agent},
        timeout=timeout,
    )
    transport.interceptors.request.use(create_request_interceptor(logger, user_agent))
    transport.interceptors.response.use(decode_response_body, create_response_error_interceptor(logger))
    transport.interceptors.response.use(check_envelope)
    return transport


__all__ = [
    "check_envelope",
    "create_default_transport",
    "create_request_interceptor",
    "create_response_error_interceptor",
    "decode_response_body",
    "normalize_transport_error",
]
