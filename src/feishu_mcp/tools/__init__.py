"""Tools package for MCP server.

Contains MCP tool registration modules, one per FeiShu resource family:
- ``messages``: Send and read IM messages as the bot
- ``chats``: Group chat search and management
- ``documents``: Docx document content and creation
- ``sheets``: Bitable tables and records
- ``calendars``: Calendars and events
- ``tasks``: Task listing and creation
- ``users``: Contact user lookup and search
- ``departments``: Contact department lookup
- ``auth``: OAuth authorization URL for user-token tools
- ``common``: Shared utilities for tool registration
"""
