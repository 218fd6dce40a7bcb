"""Constants shared by the FeiShu client and server modules."""

from . import __version__

API_ENDPOINT = "https://open.feishu.cn"
LARK_API_ENDPOINT = "https://open.larksuite.com"

USER_AGENT = f"feishu-mcp-server/{__version__}"

# Cache keys, namespaced per app id by the token manager.
TENANT_ACCESS_TOKEN_KEY = "tenant-access-token"
USER_ACCESS_TOKEN_KEY = "user-access-token"
USER_REFRESH_TOKEN_KEY = f"{USER_ACCESS_TOKEN_KEY}:refresh"

TENANT_TOKEN_PATH = "/open-apis/auth/v3/tenant_access_token/internal"
USER_TOKEN_PATH = "/open-apis/authen/v1/access_token"
AUTHORIZE_PATH = "/open-apis/authen/v1/index"

# Tokens are treated as expired this many seconds before the reported expiry.
TOKEN_EXPIRY_MARGIN_SECONDS = 180
REFRESH_TOKEN_TTL_SECONDS = 30 * 24 * 60 * 60

__all__ = [
    "API_ENDPOINT",
    "AUTHORIZE_PATH",
    "LARK_API_ENDPOINT",
    "REFRESH_TOKEN_TTL_SECONDS",
    "TENANT_ACCESS_TOKEN_KEY",
    "TENANT_TOKEN_PATH",
    "TOKEN_EXPIRY_MARGIN_SECONDS",
    "USER_ACCESS_TOKEN_KEY",
    "USER_AGENT",
    "USER_REFRESH_TOKEN_KEY",
    "USER_TOKEN_PATH",
]
