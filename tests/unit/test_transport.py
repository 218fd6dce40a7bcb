"""Unit tests for the httpx transport, interceptor chains, and default interceptors."""

import json
import logging
from typing import Any

import httpx
import pytest

from feishu_mcp.client.interceptors import (
    check_envelope,
    create_default_transport,
    normalize_transport_error,
)
from feishu_mcp.consts import USER_AGENT
from feishu_mcp.errors import ApiError, InvalidResponseFormatError, TransportError
from feishu_mcp.transport import HttpxTransport, InterceptorManager, RequestConfig, serialize_params

_logger = logging.getLogger("feishu_mcp.test")


def _transport_with(handler: Any) -> HttpxTransport:
    """Return the default transport with its httpx client routed to ``handler``."""
    transport = create_default_transport(base_url="https://open.feishu.cn", logger=_logger)
    transport._client = httpx.AsyncClient(  # type: ignore[reportPrivateUsage]
        base_url="https://open.feishu.cn",
        transport=httpx.MockTransport(handler),
    )
    return transport


def test_serialize_params_repeats_keys() -> None:
    """Sequences become repeated keys; None is dropped; booleans are lower-cased."""
    pairs = serialize_params({"a": [1, 2], "b": None, "c": True, "d": "x", "e": (False, None)})
    assert pairs == [("a", "1"), ("a", "2"), ("c", "true"), ("d", "x"), ("e", "false")]
    assert serialize_params(None) == []


@pytest.mark.asyncio
async def test_interceptor_chain_runs_in_order() -> None:
    """Fulfilled handlers should run in registration order, sync or async."""
    manager: InterceptorManager[list[str]] = InterceptorManager()

    async def second(value: list[str]) -> list[str]:
        return [*value, "second"]

    manager.use(lambda value: [*value, "first"])
    manager.use(second)

    assert await manager.run([]) == ["first", "second"]


@pytest.mark.asyncio
async def test_interceptor_error_goes_to_next_rejected() -> None:
    """An exception from one pair should reach the next pair's on_rejected."""
    manager: InterceptorManager[int] = InterceptorManager()
    seen: list[Exception] = []

    def boom(_: int) -> int:
        msg = "boom"
        raise RuntimeError(msg)

    def recover(error: Exception) -> int:
        seen.append(error)
        return 7

    manager.use(boom)
    manager.use(None, recover)
    manager.use(lambda value: value * 2)

    assert await manager.run(1) == 14
    assert isinstance(seen[0], RuntimeError)


@pytest.mark.asyncio
async def test_interceptor_unhandled_error_is_raised() -> None:
    """An initial error with no rejected handler should propagate."""
    manager: InterceptorManager[int] = InterceptorManager()
    manager.use(lambda value: value)
    with pytest.raises(KeyError):
        await manager.run(None, KeyError("x"))


def test_interceptor_eject() -> None:
    """Ejected handlers are removed from the chain."""
    manager: InterceptorManager[int] = InterceptorManager()
    first = manager.use(lambda value: value)
    manager.use(lambda value: value)
    manager.eject(first)
    manager.eject(99)
    assert len(manager) == 1


@pytest.mark.asyncio
async def test_default_transport_decodes_body_and_sets_headers() -> None:
    """Requests carry the User-Agent and repeated params; responses decode to JSON."""
    captured: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json={"code": 0, "data": {"ok": True}})

    transport = _transport_with(handler)
    body = await transport.request(
        RequestConfig(
            method="POST",
            url="https://open.feishu.cn/open-apis/im/v1/messages",
            params={"ids": ["a", "b"]},
            json={"x": 1},
        ),
    )

    request: httpx.Request = captured["request"]
    assert body == {"code": 0, "data": {"ok": True}}
    assert request.headers["User-Agent"] == USER_AGENT
    assert request.url.query == b"ids=a&ids=b"
    assert json.loads(request.content) == {"x": 1}


@pytest.mark.asyncio
async def test_default_transport_raises_api_error_on_nonzero_code() -> None:
    """HTTP 200 with a non-zero envelope code should raise ApiError."""
    transport = _transport_with(lambda _: httpx.Response(200, json={"code": 99991663, "msg": "token invalid"}))
    with pytest.raises(ApiError) as excinfo:
        await transport.request(RequestConfig(method="GET", url="https://open.feishu.cn/x"))
    assert excinfo.value.code == 99991663
    assert excinfo.value.msg == "token invalid"


@pytest.mark.asyncio
async def test_default_transport_normalizes_http_errors() -> None:
    """Non-2xx responses should surface as TransportError with status and body."""
    transport = _transport_with(lambda _: httpx.Response(503, json={"error": "maintenance"}))
    with pytest.raises(TransportError) as excinfo:
        await transport.request(RequestConfig(method="GET", url="https://open.feishu.cn/open-apis/x"))
    error = excinfo.value
    assert error.status == 503
    assert error.status_text == "Service Unavailable"
    assert error.method == "GET"
    assert error.url == "https://open.feishu.cn/open-apis/x"
    assert error.data == {"error": "maintenance"}
    assert isinstance(error.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_default_transport_normalizes_network_errors() -> None:
    """Connection failures should surface as TransportError without a status."""

    def handler(request: httpx.Request) -> httpx.Response:
        msg = "connection refused"
        raise httpx.ConnectError(msg, request=request)

    transport = _transport_with(handler)
    with pytest.raises(TransportError) as excinfo:
        await transport.request(RequestConfig(method="GET", url="https://open.feishu.cn/x"))
    assert excinfo.value.status is None
    assert excinfo.value.message == "connection refused"


@pytest.mark.asyncio
async def test_default_transport_rejects_non_json() -> None:
    """A 2xx response that is not JSON should raise InvalidResponseFormatError."""
    transport = _transport_with(lambda _: httpx.Response(200, text="<html>"))
    with pytest.raises(InvalidResponseFormatError):
        await transport.request(RequestConfig(method="GET", url="https://open.feishu.cn/x"))


def test_normalize_transport_error_passthrough() -> None:
    """Non-httpx errors are returned unchanged."""
    error = ValueError("x")
    assert normalize_transport_error(error) is error


def test_check_envelope() -> None:
    """Zero codes and non-envelope bodies pass through."""
    assert check_envelope({"code": 0, "data": 1}) == {"code": 0, "data": 1}
    assert check_envelope(["not", "an", "envelope"]) == ["not", "an", "envelope"]
    with pytest.raises(ApiError, match="API Error: 5"):
        check_envelope({"code": 5})
