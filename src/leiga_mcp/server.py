"""Leiga MCP Server - Expose Leiga issue tracking to AI assistants."""
import sys
import asyncio
import logging
import traceback
from typing import Any, Optional

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    GetPromptResult,
    Prompt,
    Tool,
    TextContent,
)
from pydantic import ValidationError

from . import handlers
from . import prompts
from . import tools
from .client import LeigaAPIError, LeigaClient
from .config import Settings, get_settings
from .token_store import TokenManager


logger = logging.getLogger("leiga-mcp")

# MCP Server instance
app = Server("leiga-mcp")

# One client per process; it owns the HTTP connection pool and token cache
_client: Optional[LeigaClient] = None


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True
    )


def _format_validation_error(e: ValidationError) -> str:
    problems = []
    for err in e.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        problems.append(f"{location}: {err.get('msg')}")
    return "Invalid arguments - " + "; ".join(problems)


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available MCP tools for Leiga issue management."""
    return tools.get_tools()


@app.list_prompts()
async def list_prompts() -> list[Prompt]:
    return prompts.get_prompts()


@app.get_prompt()
async def get_prompt(name: str, arguments: Optional[dict[str, str]] = None) -> GetPromptResult:
    return prompts.get_prompt(name, arguments)


async def dispatch_tool(name: str, arguments: Any, client: LeigaClient) -> list[TextContent]:
    """Run a tool by name, turning every failure into an error text result."""
    handler = handlers.HANDLERS.get(name)
    if not handler:
        logger.warning(f"Unknown tool requested: {name}")
        return [TextContent(type="text", text=f"Unknown tool: {name}")]

    try:
        return await handler(dict(arguments or {}), client)

    except ValidationError as e:
        logger.warning(f"Invalid arguments for {name}: {e}")
        return [TextContent(type="text", text=f"Error: {_format_validation_error(e)}")]

    except LeigaAPIError as e:
        logger.error(f"Leiga API error during {name} call: {e}")
        return [TextContent(type="text", text=f"Error: {e}")]

    except httpx.HTTPStatusError as e:
        # Log detailed HTTP error information
        logger.error(f"HTTP error during {name} call:")
        logger.error(f"  Status: {e.response.status_code}")
        logger.error(f"  URL: {e.request.url}")
        response_text = e.response.text
        logger.error(f"  Response text: {response_text}")
        return [TextContent(type="text", text=f"Error: HTTP {e.response.status_code} - {response_text or e}")]

    except httpx.RequestError as e:
        # Network/connection errors
        logger.error(f"Request error during {name} call:")
        logger.error(f"  Error type: {type(e).__name__}")
        logger.error(f"  Error message: {str(e)}")
        return [TextContent(type="text", text=f"Error: Connection failed - {str(e)}")]

    except Exception as e:
        # Catch-all for unexpected errors
        logger.error(f"Unexpected error during {name} call:")
        logger.error(f"  Error type: {type(e).__name__}")
        logger.error(f"  Arguments: {arguments}")
        logger.error(f"  Traceback:\n{traceback.format_exc()}")
        return [TextContent(type="text", text=f"Error: {type(e).__name__}: {str(e)}")]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle MCP tool calls by delegating to handlers."""
    logger.info(f"Tool call: {name} with arguments: {arguments}")
    if _client is None:
        return [TextContent(type="text", text="Error: Leiga client is not initialized")]
    return await dispatch_tool(name, arguments, _client)


def build_client(settings: Settings) -> LeigaClient:
    return LeigaClient(settings, TokenManager(settings.token_path))


async def main(settings: Optional[Settings] = None):
    """Run the MCP server."""
    global _client

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if not settings.has_credentials():
        logger.error("LEIGA_CLIENT_ID and LEIGA_SECRET environment variables are required")
        sys.exit(1)

    logger.info(f"MCP Server starting with API base URL: {settings.api_base_url}")
    logger.info(f"Using token cache at {settings.token_path}")

    async with build_client(settings) as client:
        _client = client
        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info("Leiga MCP Server running on stdio")
                await app.run(read_stream, write_stream, app.create_initialization_options())
        finally:
            _client = None


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
