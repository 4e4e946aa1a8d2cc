"""Dispatch of decoded MCP requests onto the example library."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from cslamcp import __version__
from cslamcp.library.errors import LibraryError
from cslamcp.library.search import ExampleLibrary
from cslamcp.mcp.protocol import (
    INTERNAL_ERROR,
    PROTOCOL_VERSION,
    TOOLS,
    FetchCall,
    InitializedNotification,
    InitializeRequest,
    PingRequest,
    ProtocolError,
    SearchCall,
    ToolsCallRequest,
    ToolsListRequest,
    error_response,
    parse_request,
    request_id,
    success_response,
)

LOGGER = logging.getLogger(__name__)

SERVER_NAME = "csla-mcp-server"


def _text_result(text: str, *, is_error: bool = False) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


class McpServer:
    """Stateless MCP front end exposing the ``search`` and ``fetch`` tools."""

    def __init__(self, library: ExampleLibrary) -> None:
        self.library = library

    def handle(self, payload: Any) -> Dict[str, Any] | None:
        """Serve one JSON-RPC message; notifications yield ``None``."""
        req_id = request_id(payload)
        try:
            request = parse_request(payload)
        except ProtocolError as exc:
            LOGGER.warning("Rejected MCP request: %s", exc.message)
            return error_response(req_id, exc.code, exc.message, exc.data)

        try:
            if isinstance(request, InitializedNotification):
                LOGGER.info("MCP session initialized")
                return None
            if isinstance(request, InitializeRequest):
                result = self._initialize(request)
            elif isinstance(request, PingRequest):
                result = {}
            elif isinstance(request, ToolsListRequest):
                result = {"tools": TOOLS}
            elif isinstance(request, ToolsCallRequest):
                result = self._call_tool(request)
            else:  # pragma: no cover - union is exhaustive
                raise ProtocolError(INTERNAL_ERROR, "Unhandled request type")
        except Exception as exc:
            LOGGER.exception("Unexpected error handling MCP request")
            return error_response(req_id, INTERNAL_ERROR, "Internal error", str(exc))

        return success_response(request.id, result)

    def _initialize(self, request: InitializeRequest) -> Dict[str, Any]:
        client_info = request.params.get("clientInfo") or {}
        LOGGER.info("Initializing MCP session with client: %s", client_info.get("name", "unknown"))
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    def _call_tool(self, request: ToolsCallRequest) -> Dict[str, Any]:
        call = request.params
        try:
            if isinstance(call, SearchCall):
                results = self.library.search(call.arguments.message)
                text = json.dumps([result.to_dict() for result in results], indent=2)
                return _text_result(text)
            if isinstance(call, FetchCall):
                return _text_result(self.library.fetch(call.arguments.file_name))
        except LibraryError as exc:
            LOGGER.error("Tool %s failed: %s", call.name, exc)
            return _text_result(json.dumps(exc.to_dict(), indent=2), is_error=True)
        raise ProtocolError(INTERNAL_ERROR, f"Unhandled tool: {call.name}")
