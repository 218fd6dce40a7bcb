"""Unit tests for FeishuConfig loading and validation."""

# pyright: reportPrivateUsage=false

import pytest
from pydantic import ValidationError

import feishu_mcp.config as config_module
from feishu_mcp.config import DEFAULT_PORT, FeishuConfig

_ENV_VARS = (
    "FEISHU_APP_ID",
    "FEISHU_APP_SECRET",
    "FEISHU_API_ENDPOINT",
    "FEISHU_DISABLE_TOKEN_CACHE",
    "FEISHU_REDIRECT_URI",
    "FEISHU_AUTHORIZATION_CODE",
    "FEISHU_TIMEOUT_MS",
    "LOG_LEVEL",
    "FEISHU_MCP_TRANSPORT",
    "HOST",
    "PORT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable read by FeishuConfig.from_env."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env_minimal(clean_env: pytest.MonkeyPatch) -> None:
    """Only the app credentials are required; everything else has defaults."""
    clean_env.setenv("FEISHU_APP_ID", "cli_a1")
    clean_env.setenv("FEISHU_APP_SECRET", "s3cr3t-value")

    config = FeishuConfig.from_env()

    assert config.app_id == "cli_a1"
    assert config.endpoint == "https://open.feishu.cn"
    assert config.disable_token_cache is False
    assert config.transport == "stdio"
    assert config.port == DEFAULT_PORT
    assert config.timeout_ms == 10000
    assert config.log_level == "INFO"


def test_from_env_full(clean_env: pytest.MonkeyPatch) -> None:
    """All supported variables should be parsed and coerced."""
    values = {
        "FEISHU_APP_ID": "cli_a1",
        "FEISHU_APP_SECRET": "secret",
        "FEISHU_API_ENDPOINT": "lark",
        "FEISHU_DISABLE_TOKEN_CACHE": "true",
        "FEISHU_REDIRECT_URI": "https://example.com/cb",
        "FEISHU_AUTHORIZATION_CODE": "code-1",
        "FEISHU_TIMEOUT_MS": "15000",
        "LOG_LEVEL": "debug",
        "FEISHU_MCP_TRANSPORT": "sse",
        "HOST": "0.0.0.0",
        "PORT": "8080",
    }
    for key, value in values.items():
        clean_env.setenv(key, value)

    config = FeishuConfig.from_env()

    assert config.endpoint == "https://open.larksuite.com"
    assert config.disable_token_cache is True
    assert config.redirect_uri == "https://example.com/cb"
    assert config.authorization_code == "code-1"
    assert config.timeout_ms == 15000
    assert config.log_level == "DEBUG"
    assert config.transport == "sse"
    assert config.host == "0.0.0.0"
    assert config.port == 8080


def test_from_env_missing_credentials(clean_env: pytest.MonkeyPatch) -> None:
    """Missing app id or secret should raise a RuntimeError naming both variables."""
    clean_env.setenv("FEISHU_APP_ID", "cli_a1")
    with pytest.raises(RuntimeError, match="FEISHU_APP_ID and FEISHU_APP_SECRET"):
        FeishuConfig.from_env()


def test_from_env_overrides_take_precedence(clean_env: pytest.MonkeyPatch) -> None:
    """Explicit overrides should win over the environment."""
    clean_env.setenv("FEISHU_APP_ID", "cli_a1")
    clean_env.setenv("FEISHU_APP_SECRET", "secret")
    clean_env.setenv("FEISHU_MCP_TRANSPORT", "sse")

    config = FeishuConfig.from_env(transport="stdio", port=9000)

    assert config.transport == "stdio"
    assert config.port == 9000


def test_from_env_invalid_values(clean_env: pytest.MonkeyPatch) -> None:
    """Validation errors should surface as RuntimeError."""
    clean_env.setenv("FEISHU_APP_ID", "cli_a1")
    clean_env.setenv("FEISHU_APP_SECRET", "secret")
    clean_env.setenv("PORT", "70000")
    with pytest.raises(RuntimeError, match="Invalid FeiShu configuration"):
        FeishuConfig.from_env()


def test_normalize_endpoint() -> None:
    """Aliases resolve and trailing slashes are stripped; bad values raise."""
    assert config_module._normalize_endpoint("FEISHU") == "https://open.feishu.cn"
    assert config_module._normalize_endpoint("https://open.example.com/") == "https://open.example.com"
    with pytest.raises(ValueError, match="API endpoint is required"):
        config_module._normalize_endpoint("  ")
    with pytest.raises(ValueError, match="Invalid API endpoint"):
        config_module._normalize_endpoint("open.feishu.cn")


def test_unknown_log_level_rejected() -> None:
    """Log levels outside the supported set should fail validation."""
    with pytest.raises(ValidationError):
        FeishuConfig(app_id="a", app_secret="b", log_level="chatty")


def test_describe_masks_secret() -> None:
    """The loggable view must not contain the raw secret or authorization code."""
    config = FeishuConfig(app_id="cli_a1", app_secret="abcdefgh1234", authorization_code="code-1")
    described = config.describe()
    assert described["app_secret"] == "****1234"
    assert "abcdefgh1234" not in repr(config)
    assert "code-1" not in str(described)
