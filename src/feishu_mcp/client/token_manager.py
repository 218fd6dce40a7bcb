"""Token management for the FeiShu open platform.

Acquires tenant and user access tokens, caches them with a safety margin
before the reported expiry, and builds OAuth authorization URLs for the user
token flow. The cache is best effort: a failing cache degrades to fetching a
fresh token, never to serving one past its expiry.
"""

import asyncio
import logging
import time
from collections.abc import Mapping, Sequence
from types import TracebackType
from typing import Any, Self
from urllib.parse import quote, urlencode

from ..cache import Cache
from ..consts import (
    API_ENDPOINT,
    AUTHORIZE_PATH,
    REFRESH_TOKEN_TTL_SECONDS,
    TENANT_ACCESS_TOKEN_KEY,
    TENANT_TOKEN_PATH,
    TOKEN_EXPIRY_MARGIN_SECONDS,
    USER_ACCESS_TOKEN_KEY,
    USER_REFRESH_TOKEN_KEY,
    USER_TOKEN_PATH,
)
from ..errors import (
    AuthorizationCodeRequiredError,
    EmptyValueError,
    InvalidResponseFormatError,
    MissingFieldsError,
    RedirectUriRequiredError,
    TokenApiError,
    TokenFetchError,
    TransportError,
)
from ..log import Logger
from ..models import AccessToken, Credentials, TokenType
from ..transport import HttpTransport, RequestConfig

_default_logger = logging.getLogger("feishu_mcp.token_manager")


class TokenManager:
    """Produce currently valid bearer tokens for tenant- or user-level calls."""

    def __init__(  # noqa: PLR0913 (configuration surface of the token flow)
        self,
        *,
        app_id: str,
        app_secret: str,
        transport: HttpTransport,
        cache: Cache,
        logger: Logger | None = None,
        endpoint: str = API_ENDPOINT,
        authorization_code: str | None = None,
        redirect_uri: str | None = None,
        disable_token_cache: bool = False,
    ) -> None:
        """Initialize the token manager.

        Args:
            app_id: FeiShu app id; also the cache namespace for its tokens.
            app_secret: FeiShu app secret.
            transport: HTTP transport used to call the token endpoints.
            cache: Token cache.
            logger: Logger to report through; defaults to ``feishu_mcp.token_manager``.
            endpoint: API origin, e.g. ``https://open.feishu.cn``.
            authorization_code: OAuth code for the user token flow, if already known.
            redirect_uri: OAuth redirect URI registered for the app.
            disable_token_cache: Skip cache reads and writes entirely.

        """
        self._credentials = Credentials(app_id=app_id, app_secret=app_secret)
        self._transport = transport
        self._cache = cache
        self._logger: Logger = logger or _default_logger
        self._endpoint = endpoint.rstrip("/")
        self._authorization_code = authorization_code
        self._redirect_uri = redirect_uri
        self._disable_token_cache = disable_token_cache
        self._pending_writes: set[asyncio.Task[None]] = set()
        self.cache_write_failures = 0
        self._logger.debug("token manager is ready for app %s", app_id)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.wait_for_pending_writes()

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def app_id(self) -> str:
        return self._credentials.app_id

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def _read_cached_token(self, key: str) -> str | None:
        """Return a cached non-empty token string, treating any failure as a miss."""
        if self._disable_token_cache:
            return None
        try:
            value = await self._cache.get(key, namespace=self.app_id)
        except Exception as exc:  # noqa: BLE001 (cache is best effort)
            self._logger.warning("Failed to read %s from cache; fetching a new one: %s", key, exc)
            return None
        if isinstance(value, str) and value:
            return value
        return None

    def _schedule_cache_write(self, key: str, value: str, expires_at: int) -> None:
        """Write to the cache without making the caller wait for it."""
        if self._disable_token_cache:
            return
        task = asyncio.get_running_loop().create_task(self._write_cache(key, value, expires_at))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write_cache(self, key: str, value: str, expires_at: int) -> None:
        try:
            await self._cache.set(key, value, expires_at, namespace=self.app_id)
        except Exception as exc:  # noqa: BLE001 (cache is best effort)
            self.cache_write_failures += 1
            self._logger.warning(
                "Failed to cache %s (%d failures so far): %s",
                key,
                self.cache_write_failures,
                exc,
            )

    async def wait_for_pending_writes(self) -> None:
        """Wait for in-flight cache writes to finish."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes)

    def _token_expiry(self, expire_seconds: int) -> int:
        return self._now_ms() + (expire_seconds - TOKEN_EXPIRY_MARGIN_SECONDS) * 1000

    async def _post_token_request(self, path: str, payload: Mapping[str, Any]) -> Any:
        return await self._transport.request(
            RequestConfig(method="POST", url=f"{self._endpoint}{path}", json=dict(payload)),
        )

    @staticmethod
    def _validate_token_response(body: Any, required: Sequence[str]) -> dict[str, Any]:
        """Check a token response and return the object carrying the token fields.

        Raises:
            InvalidResponseFormatError: If the body is not an object or has no integer ``code``.
            TokenApiError: If the body reports a non-zero ``code``.
            MissingFieldsError: If any of ``required`` is absent.

        """
        if not isinstance(body, dict):
            msg = f"Token response is not an object: {type(body).__name__}"
            raise InvalidResponseFormatError(msg)
        code = body.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            msg = f"Token response has no integer code: {code!r}"
            raise InvalidResponseFormatError(msg)
        if code != 0:
            raise TokenApiError(code, body.get("msg"))
        fields: dict[str, Any] = body
        nested = body.get("data")
        if isinstance(nested, dict) and not all(name in body for name in required):
            fields = nested
        missing = [name for name in required if fields.get(name) in (None, "")]
        if missing:
            raise MissingFieldsError(missing)
        return fields

    def _log_fetch_failure(self, kind: str, exc: Exception) -> None:
        cause = exc if isinstance(exc, TransportError) else exc.__cause__
        if isinstance(cause, TransportError):
            self._logger.error(
                "Failed to fetch %s: %s (status=%s, url=%s, body=%s)",
                kind,
                cause.message,
                cause.status,
                cause.url,
                cause.data,
            )
        else:
            self._logger.error("Failed to fetch %s: %r", kind, exc)

    async def get_tenant_access_token(self) -> str:
        """Return a valid tenant access token, from cache when possible.

        Raises:
            TokenFetchError: If no cached token exists and fetching one fails.

        """
        cached = await self._read_cached_token(TENANT_ACCESS_TOKEN_KEY)
        if cached is not None:
            self._logger.debug("using cached tenant access token")
            return cached

        self._logger.debug("requesting new tenant access token")
        try:
            body = await self._post_token_request(
                TENANT_TOKEN_PATH,
                {"app_id": self._credentials.app_id, "app_secret": self._credentials.app_secret},
            )
            fields = self._validate_token_response(body, ("tenant_access_token", "expire"))
            token = AccessToken(
                value=str(fields["tenant_access_token"]),
                kind=TokenType.TENANT,
                expires_at=self._token_expiry(int(fields["expire"])),
            )
        except Exception as exc:
            self._log_fetch_failure("tenant access token", exc)
            msg = "Failed to fetch tenant access token"
            raise TokenFetchError(msg) from exc

        self._schedule_cache_write(TENANT_ACCESS_TOKEN_KEY, token.value, token.expires_at)
        return token.value

    async def get_user_access_token(self, code: str | None = None, redirect_uri: str | None = None) -> str:
        """Return a valid user access token, exchanging an OAuth code when needed.

        An explicit ``code`` is always exchanged, replacing any cached token.
        Without one, a cached token is returned, or the stored code is exchanged
        on a miss. Codes are single use, so the stored code is cleared once it
        has been exchanged.

        Args:
            code: Authorization code to exchange now; falls back to the stored one.
            redirect_uri: Redirect URI used to build the authorization URL when no
                code is available.

        Raises:
            AuthorizationCodeRequiredError: If no cached token and no code exist.
            TokenFetchError: If exchanging the code fails.

        """
        if not code:
            cached = await self._read_cached_token(USER_ACCESS_TOKEN_KEY)
            if cached is not None:
                self._logger.debug("using cached user access token")
                return cached

        auth_code = code or self._authorization_code
        if not auth_code:
            raise self._authorization_code_required(redirect_uri)

        payload: dict[str, Any] = {
            "grant_type": "authorization_code",
            "code": auth_code,
            "app_id": self._credentials.app_id,
            "app_secret": self._credentials.app_secret,
        }
        if self._redirect_uri:
            payload["redirect_uri"] = self._redirect_uri

        self._logger.debug("requesting new user access token")
        try:
            body = await self._post_token_request(USER_TOKEN_PATH, payload)
            fields = self._validate_token_response(body, ("user_access_token", "expire"))
            expire = int(fields["expire"])
            token = AccessToken(
                value=str(fields["user_access_token"]),
                kind=TokenType.USER,
                expires_at=self._token_expiry(expire),
            )
        except Exception as exc:
            self._log_fetch_failure("user access token", exc)
            msg = "Failed to fetch user access token"
            raise TokenFetchError(msg) from exc

        if self._authorization_code == auth_code:
            self._authorization_code = None
        self._schedule_cache_write(USER_ACCESS_TOKEN_KEY, token.value, token.expires_at)
        refresh_token = fields.get("refresh_token")
        if refresh_token:
            self._schedule_cache_write(
                USER_REFRESH_TOKEN_KEY,
                str(refresh_token),
                self._now_ms() + (expire + REFRESH_TOKEN_TTL_SECONDS) * 1000,
            )
        return token.value

    def _authorization_code_required(self, redirect_uri: str | None) -> AuthorizationCodeRequiredError:
        base = "Authorization code is required to get user access token."
        try:
            url = self.generate_authorization_url(redirect_uri)
        except RedirectUriRequiredError:
            msg = f"{base} Configure a redirect URI to generate an authorization URL."
            return AuthorizationCodeRequiredError(msg)
        msg = f"{base} Please redirect the user to {url} to obtain a new code."
        return AuthorizationCodeRequiredError(msg, authorization_url=url)

    def generate_authorization_url(
        self,
        redirect_uri: str | None = None,
        scope: str | None = None,
        state: str | None = None,
    ) -> str:
        """Build the OAuth authorization URL a user must visit to obtain a code.

        Raises:
            RedirectUriRequiredError: If no redirect URI is given or configured.

        """
        uri = redirect_uri or self._redirect_uri
        if not uri:
            msg = "Redirect URI is required to generate an authorization URL."
            raise RedirectUriRequiredError(msg)
        params = {"app_id": self._credentials.app_id, "redirect_uri": uri}
        if scope:
            params["scope"] = scope
        if state:
            params["state"] = state
        return f"{self._endpoint}{AUTHORIZE_PATH}?{urlencode(params, quote_via=quote)}"

    def set_authorization_code(self, code: str) -> None:
        if not code:
            msg = "Authorization code cannot be empty"
            raise EmptyValueError(msg)
        self._authorization_code = code

    def set_redirect_uri(self, uri: str) -> None:
        if not uri:
            msg = "Redirect URI cannot be empty"
            raise EmptyValueError(msg)
        self._redirect_uri = uri


__all__ = ["TokenManager"]
