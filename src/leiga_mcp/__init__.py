"""Leiga MCP Server - Model Context Protocol integration.

This package exposes Leiga issue tracking to AI assistants.

Modules:
- server: stdio MCP server implementation
- tools: MCP tool definitions
- handlers: Tool implementation handlers
- formatters: Response formatting utilities
- client: Leiga OpenAPI client
- token_store: Access token cache
- field_catalog, dates, mutation: name-to-identifier resolution for updates
"""

__version__ = "1.0.0"

from . import formatters
from . import tools
from . import handlers

__all__ = ["formatters", "tools", "handlers", "__version__"]
