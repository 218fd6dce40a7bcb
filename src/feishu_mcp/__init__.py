"""FeiShu MCP Server package.

This package contains the FastMCP server, the token-managed FeiShu API client,
and the tools that expose FeiShu (Lark) operations to MCP clients.
"""

# Intentionally do not re-export symbols from submodules to avoid importing
# heavy dependencies and triggering environment validation at package import
# time. Individual modules (e.g., ``server``) should be imported directly by
# consumers as needed.

__version__ = "0.1.0"

__all__: list[str] = ["__version__"]
