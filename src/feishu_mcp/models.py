"""Data types shared by the FeiShu client core."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .utils import mask_secret


@dataclass(frozen=True, slots=True)
class Credentials:
    """App identity used to obtain tenant and user tokens."""

    app_id: str
    app_secret: str = field(repr=False)

    @property
    def masked_secret(self) -> str:
        """Return the app secret with all but the last four characters hidden."""
        return mask_secret(self.app_secret)

    def __repr__(self) -> str:
        return f"Credentials(app_id={self.app_id!r}, app_secret={self.masked_secret!r})"


class TokenType(StrEnum):
    """Kind of bearer token a request is authorized with."""

    TENANT = "tenant_access_token"
    USER = "user_access_token"


@dataclass(frozen=True, slots=True)
class AccessToken:
    """A bearer token and the instant (epoch ms) after which it must not be used."""

    value: str
    kind: TokenType
    expires_at: int

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached value; ``expired_at`` of ``None`` means it never expires."""

    value: Any
    expired_at: int | None = None

    def is_expired(self, now_ms: int) -> bool:
        return self.expired_at is not None and self.expired_at <= now_ms


class ApiResponse(BaseModel):
    """The ``{code, msg, data}`` envelope returned by every FeiShu endpoint."""

    model_config = ConfigDict(extra="allow")

    code: int
    msg: str | None = None
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.code == 0


@dataclass(slots=True)
class PaginationOptions:
    """Page cursor for list endpoints."""

    page_size: int | None = None
    page_token: str | None = None


@dataclass(slots=True)
class Payload:
    """Per-call request parts merged by ``format_payload``."""

    params: dict[str, Any] = field(default_factory=dict)
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    path: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class RequestOptions:
    """Caller-supplied defaults for a request plus the token type to use."""

    params: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    path: dict[str, str] = field(default_factory=dict)
    token_type: TokenType = TokenType.TENANT


__all__ = [
    "AccessToken",
    "ApiResponse",
    "CacheEntry",
    "Credentials",
    "PaginationOptions",
    "Payload",
    "RequestOptions",
    "TokenType",
]
