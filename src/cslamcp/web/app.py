"""FastAPI application exposing the MCP endpoint over HTTP."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cslamcp import __version__
from cslamcp.config import AppConfig
from cslamcp.library.search import ExampleLibrary
from cslamcp.mcp.protocol import PARSE_ERROR, PROTOCOL_VERSION, TOOLS, error_response
from cslamcp.mcp.server import SERVER_NAME, McpServer

LOGGER = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the web app serving the examples under ``config.examples_path``."""
    config = config or AppConfig()
    library = ExampleLibrary(config.resolve_examples_path(Path.cwd()))
    server = McpServer(library)

    app = FastAPI(title="CSLA MCP Server", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.library = library
    app.state.mcp_server = server

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        LOGGER.info("Serving code samples from %s", library.root)

    @app.post("/mcp")
    async def handle_mcp(request: Request) -> Response:
        body = await request.body()
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            LOGGER.error("Invalid JSON in MCP request: %s", exc)
            return JSONResponse(
                status_code=400,
                content=error_response(None, PARSE_ERROR, "Parse error", str(exc)),
            )

        LOGGER.debug("Received MCP request: %s", payload)
        response = await asyncio.to_thread(server.handle, payload)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(content=response)

    @app.get("/mcp/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "healthy",
            "service": SERVER_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
        }

    @app.get("/mcp/info")
    async def info() -> dict[str, Any]:
        return {
            "name": SERVER_NAME,
            "version": __version__,
            "description": "MCP server providing CSLA .NET code examples and patterns",
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": ["tools"],
            "tools": [
                {"name": tool["name"], "description": tool["description"]} for tool in TOOLS
            ],
            "endpoints": {"mcp": "/mcp", "health": "/mcp/health", "info": "/mcp/info"},
        }

    return app


app = create_app()
