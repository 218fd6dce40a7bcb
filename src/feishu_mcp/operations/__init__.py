"""Operational helpers for MCP tools.

Contains the per-resource logic that maps tool arguments onto FeiShu endpoints:
- ``common``: Shared utilities, type aliases, and pagination helpers
- ``messages``: Send, reply, edit, forward, and list IM messages
- ``chats``: Search, inspect, create, and update group chats
- ``documents``: Read and create docx documents
- ``sheets``: Bitable apps, tables, views, and records
- ``calendars``: Calendars and their events
- ``tasks``: List and create tasks
- ``users``: Contact users, including keyword search with a user token
- ``departments``: Contact departments
"""
