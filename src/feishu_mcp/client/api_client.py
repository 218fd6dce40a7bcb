"""Authenticated request core for the FeiShu open platform.

``ApiClient`` resolves a bearer token through ``TokenManager``, merges the
per-call payload over caller defaults, sends the request through an
``HttpTransport`` and unwraps the ``{code, msg, data}`` envelope. A response is
only successful when its envelope ``code`` is 0, whatever the HTTP status was.
No retries are attempted; every failure is logged once and re-raised.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self
from urllib.parse import quote

from pydantic import ValidationError

from ..cache import Cache, DefaultCache
from ..consts import API_ENDPOINT, USER_AGENT
from ..errors import ApiError, FeishuError, InvalidResponseFormatError, TransportError
from ..log import TRACE, Logger
from ..models import ApiResponse, PaginationOptions, Payload, RequestOptions, TokenType
from ..transport import HttpTransport, HttpxTransport, RequestConfig
from ..utils import format_error
from .interceptors import create_default_transport
from .token_manager import TokenManager

if TYPE_CHECKING:
    from ..config import FeishuConfig

_default_logger = logging.getLogger("feishu_mcp.client")


def format_payload(
    payload: Payload | None = None,
    options: RequestOptions | None = None,
    token: str | None = None,
    *,
    user_agent: str = USER_AGENT,
) -> Payload:
    """Merge per-call request parts over caller-supplied defaults.

    Explicit ``payload`` values win over ``options`` key by key (shallow merge).
    ``User-Agent`` is set unless either side overrides it, and the
    ``Authorization`` header for ``token`` is applied last so it can never be
    overridden by caller headers.

    Args:
        payload: Values given for this call.
        options: Defaults supplied by the caller.
        token: Bearer token to authorize with, if any.
        user_agent: Default ``User-Agent`` header.

    Returns:
        A new ``Payload``; neither input is modified.

    """
    payload = payload or Payload()
    options = options or RequestOptions()

    if isinstance(payload.data, Mapping) or payload.data is None:
        data: Any = {**options.data, **(payload.data or {})} or None
    else:
        data = payload.data

    headers = {**options.headers, **payload.headers}
    headers = {name: value for name, value in headers.items() if name.lower() != "authorization"}
    if not any(name.lower() == "user-agent" for name in headers):
        headers = {"User-Agent": user_agent, **headers}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    return Payload(
        params={**options.params, **payload.params},
        data=data,
        headers=headers,
        path={**options.path, **payload.path},
    )


def resolve_path(path: str, path_params: Mapping[str, str]) -> str:
    """Substitute ``{name}`` placeholders with URL-quoted values."""
    if not path_params:
        return path
    return path.format_map({name: quote(str(value), safe="") for name, value in path_params.items()})


def parse_envelope(body: Any) -> ApiResponse:
    """Validate ``body`` as a FeiShu envelope.

    Raises:
        InvalidResponseFormatError: If the body is not an envelope object.
        ApiError: If the envelope carries a non-zero ``code``.

    """
    if not isinstance(body, Mapping):
        msg = f"Expected a JSON object response, got {type(body).__name__}"
        raise InvalidResponseFormatError(msg)
    try:
        envelope = ApiResponse.model_validate(body)
    except ValidationError as exc:
        msg = f"Malformed API response envelope: {exc.errors()[0]['msg']}"
        raise InvalidResponseFormatError(msg) from exc
    if not envelope.ok:
        raise ApiError(envelope.code, envelope.msg)
    return envelope


class ApiClient:
    """Authenticated FeiShu API client shared by all resource operations."""

    def __init__(  # noqa: PLR0913 (mirrors the client configuration surface)
        self,
        *,
        app_id: str,
        app_secret: str,
        logger: Logger | None = None,
        cache: Cache | None = None,
        endpoint: str = API_ENDPOINT,
        transport: HttpTransport | None = None,
        disable_token_cache: bool = False,
        authorization_code: str | None = None,
        redirect_uri: str | None = None,
        timeout_ms: int | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            app_id: FeiShu app id.
            app_secret: FeiShu app secret.
            logger: Logger for request diagnostics; defaults to ``feishu_mcp.client``.
            cache: Token cache; a private ``DefaultCache`` when omitted.
            endpoint: API origin, e.g. ``https://open.feishu.cn``.
            transport: Transport to send requests with; an httpx transport with
                the default interceptors when omitted.
            disable_token_cache: Fetch a token for every request.
            authorization_code: OAuth code for user-scoped requests.
            redirect_uri: OAuth redirect URI registered for the app.
            timeout_ms: Request timeout for the default transport.

        """
        self.endpoint = endpoint.rstrip("/")
        self.logger: Logger = logger or _default_logger
        self.cache: Cache = cache if cache is not None else DefaultCache()
        self.disable_token_cache = disable_token_cache
        self._owns_transport = transport is None
        self.transport: HttpTransport = transport or create_default_transport(
            base_url=self.endpoint,
            logger=self.logger,
            timeout=timeout_ms / 1000 if timeout_ms else None,
        )
        self.token_manager = TokenManager(
            app_id=app_id,
            app_secret=app_secret,
            transport=self.transport,
            cache=self.cache,
            logger=self.logger,
            endpoint=self.endpoint,
            authorization_code=authorization_code,
            redirect_uri=redirect_uri,
            disable_token_cache=disable_token_cache,
        )

    @classmethod
    def from_config(cls, config: FeishuConfig, *, logger: Logger | None = None, **kwargs: Any) -> Self:
        """Build a client from a resolved ``FeishuConfig``."""
        return cls(
            app_id=config.app_id,
            app_secret=config.app_secret,
            endpoint=config.endpoint,
            disable_token_cache=config.disable_token_cache,
            authorization_code=config.authorization_code,
            redirect_uri=config.redirect_uri,
            timeout_ms=config.timeout_ms,
            logger=logger,
            **kwargs,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Flush pending token cache writes and close an owned transport."""
        await self.token_manager.wait_for_pending_writes()
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.aclose()

    @staticmethod
    def convert_pagination_params(
        pagination: PaginationOptions | None,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return ``params`` extended with ``page_size``/``page_token``."""
        result = dict(params or {})
        if pagination is None:
            return result
        if pagination.page_size is not None:
            result["page_size"] = pagination.page_size
        if pagination.page_token:
            result["page_token"] = pagination.page_token
        return result

    async def _resolve_token(self, token_type: TokenType) -> str:
        if token_type is TokenType.USER:
            return await self.token_manager.get_user_access_token()
        return await self.token_manager.get_tenant_access_token()

    async def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
        *,
        data: Any = None,
    ) -> Any:
        """Send an authenticated request and return the envelope ``data``.

        Args:
            method: HTTP method.
            path: API path such as ``/open-apis/im/v1/chats/{chat_id}``; ``{name}``
                placeholders are filled from ``options.path``.
            params: Query parameters; sequences are sent as repeated keys.
            options: Defaults for params/data/headers/path and the token type.
            data: JSON body.

        Raises:
            TokenFetchError: If no token could be obtained.
            AuthorizationCodeRequiredError: If a user token is needed but no code exists.
            ApiError: If the envelope ``code`` is non-zero.
            TransportError: On network errors and non-2xx responses.
            InvalidResponseFormatError: If the body is not a FeiShu envelope.

        """
        options = options or RequestOptions()
        method = method.upper()
        token = await self._resolve_token(options.token_type)
        payload = format_payload(Payload(params=dict(params or {}), data=data), options, token)
        url = resolve_path(path, payload.path)
        if not url.startswith(("http://", "https://")):
            url = f"{self.endpoint}{url}"

        self.logger.log(TRACE, "Sending request [%s]: %s", method, url)
        config = RequestConfig(
            method=method,
            url=url,
            params=payload.params or None,
            json=payload.data,
            headers=payload.headers,
        )
        try:
            body = await self.transport.request(config)
            envelope = parse_envelope(body)
        except ApiError as exc:
            self.logger.error("API request failed: %s %s - code=%s msg=%s", method, url, exc.code, exc.msg)
            raise
        except TransportError as exc:
            self.logger.error("API request failed: %s %s %s", method, url, format_error(exc, structured=True))
            raise
        except FeishuError as exc:
            self.logger.error("API request failed: %s %s %s", method, url, format_error(exc))
            raise
        except Exception as exc:
            error = TransportError(str(exc) or type(exc).__name__, url=url, method=method)
            self.logger.error("API request failed: %s %s %s", method, url, format_error(error, structured=True))
            raise error from exc
        return envelope.data

    async def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        return await self.request("GET", path, params, options)

    async def get_list(
        self,
        path: str,
        pagination: PaginationOptions | None = None,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        """Send a paginated GET request."""
        return await self.request("GET", path, self.convert_pagination_params(pagination, params), options)

    async def post(
        self,
        path: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        return await self.request("POST", path, params, options, data=data)

    async def put(
        self,
        path: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        return await self.request("PUT", path, params, options, data=data)

    async def patch(
        self,
        path: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        return await self.request("PATCH", path, params, options, data=data)

    async def delete(
        self,
        path: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        return await self.request("DELETE", path, params, options, data=data)


__all__ = ["ApiClient", "format_payload", "parse_envelope", "resolve_path"]
