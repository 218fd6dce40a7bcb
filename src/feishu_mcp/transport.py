"""HTTP transport abstraction for the FeiShu client.

The client core only needs an object with ``async request(config)``. The
default implementation, ``HttpxTransport``, wraps ``httpx.AsyncClient`` and
runs request/response interceptor chains so that cross-cutting behaviour
(User-Agent injection, body decoding, envelope checks, error normalisation) can
be installed without touching business logic. Tests substitute a fake object
implementing the same ``request`` method.
"""

import inspect
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeAlias, TypeVar

import httpx

T = TypeVar("T")

OnFulfilled: TypeAlias = Callable[[T], T | Awaitable[T]]
OnRejected: TypeAlias = Callable[[Exception], Any]
QueryParams: TypeAlias = list[tuple[str, str]]


@dataclass(slots=True)
class RequestConfig:
    """A single outbound request."""

    method: str
    url: str
    params: Mapping[str, Any] | None = None
    json: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None


class HttpTransport(Protocol):
    """Minimal transport capability consumed by the client core."""

    async def request(self, config: RequestConfig) -> Any:
        """Send ``config`` and return the (possibly intercepted) response."""
        ...


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def serialize_params(params: Mapping[str, Any] | None) -> QueryParams:
    """Serialise query parameters with repeated keys for sequences.

    ``{"a": [1, 2]}`` becomes ``a=1&a=2``; ``None`` values are dropped and
    booleans are lower-cased.
    """
    pairs: QueryParams = []
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, list | tuple | set):
            pairs.extend((key, _stringify(item)) for item in value if item is not None)
        else:
            pairs.append((key, _stringify(value)))
    return pairs


async def _resolve(value: T | Awaitable[T]) -> T:
    if inspect.isawaitable(value):
        return await value
    return value


class InterceptorManager(Generic[T]):
    """Ordered list of ``(on_fulfilled, on_rejected)`` handler pairs."""

    def __init__(self) -> None:
        self._handlers: dict[int, tuple[OnFulfilled[T] | None, OnRejected | None]] = {}
        self._next_id = 0

    def use(self, on_fulfilled: OnFulfilled[T] | None = None, on_rejected: OnRejected | None = None) -> int:
        """Append a handler pair and return its id for ``eject``."""
        handler_id = self._next_id
        self._handlers[handler_id] = (on_fulfilled, on_rejected)
        self._next_id += 1
        return handler_id

    def eject(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    def __iter__(self) -> Iterator[tuple[OnFulfilled[T] | None, OnRejected | None]]:
        return iter(list(self._handlers.values()))

    def __len__(self) -> int:
        return len(self._handlers)

    async def run(self, value: Any, error: Exception | None = None) -> Any:
        """Run the chain.

        A handler pair sees either the current value (``on_fulfilled``) or the
        pending error (``on_rejected``). An exception raised by one pair is
        offered to the ``on_rejected`` of the next pair; an ``on_rejected`` that
        returns instead of raising recovers the chain with its return value.
        """
        for on_fulfilled, on_rejected in self:
            if error is None:
                if on_fulfilled is None:
                    continue
                try:
                    value = await _resolve(on_fulfilled(value))
                except Exception as exc:  # noqa: BLE001 (handed to the next on_rejected)
                    error = exc
            elif on_rejected is not None:
                try:
                    value = await _resolve(on_rejected(error))
                    error = None
                except Exception as exc:  # noqa: BLE001 (handed to the next on_rejected)
                    error = exc
        if error is not None:
            raise error
        return value


@dataclass(slots=True)
class Interceptors:
    """Request and response interceptor chains of a transport."""

    request: InterceptorManager[RequestConfig] = field(default_factory=InterceptorManager)
    response: InterceptorManager[Any] = field(default_factory=InterceptorManager)


class HttpxTransport:
    """``HttpTransport`` backed by ``httpx.AsyncClient``.

    Without interceptors ``request`` returns the ``httpx.Response``. Non-2xx
    responses raise ``httpx.HTTPStatusError`` into the response chain.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.interceptors = Interceptors()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers=dict(headers or {}),
            timeout=httpx.Timeout(timeout) if timeout is not None else httpx.Timeout(10.0),
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def request(self, config: RequestConfig) -> Any:
        config = await self.interceptors.request.run(config)

        kwargs: dict[str, Any] = {
            "params": serialize_params(config.params),
            "headers": config.headers,
        }
        if config.json is not None:
            kwargs["json"] = config.json
        if config.timeout is not None:
            kwargs["timeout"] = config.timeout

        try:
            response = await self._client.request(config.method, config.url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            return await self.interceptors.response.run(None, exc)
        return await self.interceptors.response.run(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = [
    "HttpTransport",
    "HttpxTransport",
    "InterceptorManager",
    "Interceptors",
    "RequestConfig",
    "serialize_params",
]
