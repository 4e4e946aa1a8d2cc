"""Tests for MCP request dispatch."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from cslamcp.library.search import ExampleLibrary
from cslamcp.mcp.protocol import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, PROTOCOL_VERSION
from cslamcp.mcp.server import McpServer


@pytest.fixture
def server(tmp_path: Path) -> McpServer:
    (tmp_path / "a.cs").write_text("public class Customer { }", encoding="utf-8")
    (tmp_path / "b.md").write_text("# Customer Validation Rules", encoding="utf-8")
    return McpServer(ExampleLibrary(tmp_path))


def _call(name: str, arguments: dict[str, Any], req_id: int = 1) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": req_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


class TestLifecycle:
    """Test initialize, notifications and ping."""

    def test_initialize(self, server: McpServer) -> None:
        """Should advertise the protocol version and tools capability."""
        response = server.handle(
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {"clientInfo": {"name": "test"}}}
        )

        assert response is not None
        result = response["result"]
        assert result["protocolVersion"] == PROTOCOL_VERSION
        assert "tools" in result["capabilities"]
        assert result["serverInfo"]["name"] == "csla-mcp-server"

    def test_initialized_notification(self, server: McpServer) -> None:
        """Notifications produce no response."""
        assert server.handle({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None

    def test_ping(self, server: McpServer) -> None:
        """Ping answers with an empty result."""
        assert server.handle({"jsonrpc": "2.0", "id": 9, "method": "ping"}) == {
            "jsonrpc": "2.0",
            "id": 9,
            "result": {},
        }


class TestTools:
    """Test tools/list and tools/call."""

    def test_tools_list(self, server: McpServer) -> None:
        """Should list search and fetch."""
        response = server.handle({"jsonrpc": "2.0", "id": 2, "method": "tools/list"})

        names = [tool["name"] for tool in response["result"]["tools"]]
        assert names == ["search", "fetch"]

    def test_search(self, server: McpServer) -> None:
        """Search returns ranked results as JSON text."""
        response = server.handle(_call("search", {"message": "customer validation"}))

        result = response["result"]
        assert result["isError"] is False
        payload = json.loads(result["content"][0]["text"])
        assert payload == [
            {
                "Score": 2,
                "FileName": "b.md",
                "MatchingWords": [{"Word": "customer", "Count": 1}, {"Word": "validation", "Count": 1}],
            },
            {"Score": 1, "FileName": "a.cs", "MatchingWords": [{"Word": "customer", "Count": 1}]},
        ]

    def test_search_empty_query(self, server: McpServer) -> None:
        """Short words yield an empty array."""
        response = server.handle(_call("search", {"message": "the fox"}))

        assert json.loads(response["result"]["content"][0]["text"]) == []

    def test_search_missing_corpus(self, tmp_path: Path) -> None:
        """A missing corpus is reported as a tool error."""
        server = McpServer(ExampleLibrary(tmp_path / "missing"))

        response = server.handle(_call("search", {"message": "customer"}))

        result = response["result"]
        assert result["isError"] is True
        assert json.loads(result["content"][0]["text"])["Error"] == "PathNotFound"

    def test_fetch(self, server: McpServer) -> None:
        """Fetch returns the raw file content."""
        response = server.handle(_call("fetch", {"fileName": "a.cs"}))

        result = response["result"]
        assert result["isError"] is False
        assert result["content"][0]["text"] == "public class Customer { }"

    def test_fetch_not_found(self, server: McpServer) -> None:
        """Missing files are a distinguishable tool error."""
        response = server.handle(_call("fetch", {"fileName": "Missing.cs"}))

        result = response["result"]
        assert result["isError"] is True
        error = json.loads(result["content"][0]["text"])
        assert error["Error"] == "FileNotFound"
        assert "Missing.cs" in error["Message"]

    def test_fetch_traversal(self, server: McpServer) -> None:
        """Path traversal attempts are rejected."""
        response = server.handle(_call("fetch", {"fileName": "../etc/passwd"}))

        error = json.loads(response["result"]["content"][0]["text"])
        assert error["Error"] == "InvalidFileName"

    def test_fetch_non_utf8_file(self, server: McpServer) -> None:
        """Undecodable files are a tool error, not an internal error."""
        root = server.library.root
        (root / "Legacy.cs").write_bytes("// Caf\u00e9 rules".encode("cp1252"))

        response = server.handle(_call("fetch", {"fileName": "Legacy.cs"}))

        assert "error" not in response
        result = response["result"]
        assert result["isError"] is True
        assert json.loads(result["content"][0]["text"])["Error"] == "FetchFailed"


class TestErrors:
    """Test JSON-RPC error responses."""

    def test_unknown_method(self, server: McpServer) -> None:
        """Should return method not found with the request id."""
        response = server.handle({"jsonrpc": "2.0", "id": 5, "method": "prompts/list"})

        assert response["id"] == 5
        assert response["error"]["code"] == METHOD_NOT_FOUND

    def test_unknown_tool(self, server: McpServer) -> None:
        """Should return invalid params."""
        response = server.handle(_call("get_csla_example", {"concept": "BusinessBase"}))

        assert response["error"]["code"] == INVALID_PARAMS

    def test_unexpected_failure(self) -> None:
        """Unexpected exceptions become internal errors."""
        library = MagicMock()
        library.search.side_effect = RuntimeError("disk on fire")
        server = McpServer(library)

        response = server.handle(_call("search", {"message": "customer"}, req_id=11))

        assert response["id"] == 11
        assert response["error"]["code"] == INTERNAL_ERROR
        assert response["error"]["data"] == "disk on fire"
