"""Client package for the FeiShu MCP server.

Provides the authenticated HTTP core for the FeiShu open platform:
- ``api_client``: ``ApiClient`` request core and ``format_payload``
- ``token_manager``: tenant/user access token lifecycle with caching
- ``interceptors``: default transport interceptors
"""
