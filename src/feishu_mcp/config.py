"""Configuration management for the FeiShu MCP server.

This module defines the ``FeishuConfig`` model and helpers to load configuration
from environment variables (a local ``.env`` file is honoured).
"""

from __future__ import annotations

import os
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .consts import API_ENDPOINT, LARK_API_ENDPOINT
from .log import LoggerLevel
from .utils import mask_secret

# Load variables from a local .env file for development convenience
load_dotenv()

DEFAULT_PORT = 3344

DOMAIN_ALIASES: dict[str, str] = {
    "feishu": API_ENDPOINT,
    "lark": LARK_API_ENDPOINT,
}


def _normalize_endpoint(value: str) -> str:
    """Resolve domain aliases and strip trailing slashes from the API origin."""
    candidate = value.strip()
    if not candidate:
        msg = "API endpoint is required"
        raise ValueError(msg)
    candidate = DOMAIN_ALIASES.get(candidate.lower(), candidate)
    if not candidate.startswith(("http://", "https://")):
        msg = f"Invalid API endpoint '{value}'. Use http(s)://host or one of: {', '.join(DOMAIN_ALIASES)}."
        raise ValueError(msg)
    return candidate.rstrip("/")


class FeishuConfig(BaseModel):
    """Configuration values required to interact with the FeiShu open platform."""

    app_id: str = Field(min_length=1)
    app_secret: str = Field(min_length=1, repr=False)
    endpoint: str = API_ENDPOINT
    disable_token_cache: bool = False
    redirect_uri: str | None = None
    authorization_code: str | None = Field(default=None, repr=False)
    timeout_ms: int = Field(default=10000, ge=1000, le=600000)
    log_level: str = "INFO"
    transport: Literal["stdio", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        return _normalize_endpoint(value)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper() or "INFO"
        LoggerLevel.from_name(normalized)
        return normalized

    @property
    def masked_app_secret(self) -> str:
        """Return the app secret with all but the last four characters hidden."""
        return mask_secret(self.app_secret)

    def describe(self) -> dict[str, Any]:
        """Return a loggable view of the configuration with secrets masked."""
        return {
            "app_id": self.app_id,
            "app_secret": self.masked_app_secret,
            "endpoint": self.endpoint,
            "disable_token_cache": self.disable_token_cache,
            "redirect_uri": self.redirect_uri,
            "timeout_ms": self.timeout_ms,
            "transport": self.transport,
            "port": self.port,
        }

    @classmethod
    def from_env(cls, **overrides: Any) -> FeishuConfig:
        """Build a configuration object from environment variables.

        Args:
            overrides: Values that take precedence over the environment (e.g. from
                command-line flags).

        Raises:
            RuntimeError: If required values are missing or invalid.

        """
        raw_config: dict[str, Any] = {
            "app_id": os.getenv("FEISHU_APP_ID"),
            "app_secret": os.getenv("FEISHU_APP_SECRET"),
            "endpoint": os.getenv("FEISHU_API_ENDPOINT"),
            "disable_token_cache": os.getenv("FEISHU_DISABLE_TOKEN_CACHE"),
            "redirect_uri": os.getenv("FEISHU_REDIRECT_URI"),
            "authorization_code": os.getenv("FEISHU_AUTHORIZATION_CODE"),
            "timeout_ms": os.getenv("FEISHU_TIMEOUT_MS"),
            "log_level": os.getenv("LOG_LEVEL"),
            "transport": os.getenv("FEISHU_MCP_TRANSPORT"),
            "host": os.getenv("HOST"),
            "port": os.getenv("PORT"),
        }
        raw_config.update(overrides)
        if not raw_config["app_id"] or not raw_config["app_secret"]:
            msg = "FEISHU_APP_ID and FEISHU_APP_SECRET are required to reach the FeiShu API."
            raise RuntimeError(msg)
        try:
            return cls(**{key: value for key, value in raw_config.items() if value not in (None, "")})
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            msg = f"Invalid FeiShu configuration: {messages}"
            raise RuntimeError(msg) from exc


__all__ = ["DEFAULT_PORT", "DOMAIN_ALIASES", "FeishuConfig"]
