"""JSON-RPC 2.0 envelope and typed MCP requests.

Incoming payloads are decoded into one request model per supported method, and
``tools/call`` parameters into one model per tool, so the server dispatches on
types instead of inspecting loose dictionaries.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = Union[int, str, None]


class ProtocolError(Exception):
    """A request that cannot be served, mapped to a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class SearchArguments(BaseModel):
    message: str


class FetchArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")


class SearchCall(BaseModel):
    name: Literal["search"]
    arguments: SearchArguments


class FetchCall(BaseModel):
    name: Literal["fetch"]
    arguments: FetchArguments


ToolCall = Annotated[Union[SearchCall, FetchCall], Field(discriminator="name")]


class _Request(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None


class InitializeRequest(_Request):
    method: Literal["initialize"]
    params: Dict[str, Any] = Field(default_factory=dict)


class InitializedNotification(_Request):
    method: Literal["notifications/initialized"]
    params: Dict[str, Any] = Field(default_factory=dict)


class PingRequest(_Request):
    method: Literal["ping"]
    params: Dict[str, Any] = Field(default_factory=dict)


class ToolsListRequest(_Request):
    method: Literal["tools/list"]
    params: Dict[str, Any] = Field(default_factory=dict)


class ToolsCallRequest(_Request):
    method: Literal["tools/call"]
    params: ToolCall


McpRequest = Annotated[
    Union[
        InitializeRequest,
        InitializedNotification,
        PingRequest,
        ToolsListRequest,
        ToolsCallRequest,
    ],
    Field(discriminator="method"),
]

_REQUEST_ADAPTER: TypeAdapter[McpRequest] = TypeAdapter(McpRequest)

METHODS = {
    "initialize",
    "notifications/initialized",
    "ping",
    "tools/list",
    "tools/call",
}

TOOLS: List[Dict[str, Any]] = [
    {
        "name": "search",
        "description": (
            "Searches the code samples and snippets for specific keywords. Returns a JSON "
            "array of search results with scores, file names, and matching words with "
            "their counts, ordered by score."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "message": {
                    "type": "string",
                    "description": "Free text containing the keywords to look for",
                }
            },
            "required": ["message"],
        },
    },
    {
        "name": "fetch",
        "description": (
            "Fetches a specific code sample or snippet by name. Returns the content of the file."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "fileName": {
                    "type": "string",
                    "description": "File name relative to the code samples directory",
                }
            },
            "required": ["fileName"],
        },
    },
]

TOOL_NAMES = {tool["name"] for tool in TOOLS}


def request_id(payload: Any) -> RequestId:
    """Best-effort id extraction so errors can still be correlated."""
    if isinstance(payload, dict):
        value = payload.get("id")
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return value
    return None


def parse_request(payload: Any) -> McpRequest:
    if not isinstance(payload, dict) or payload.get("jsonrpc") != "2.0":
        raise ProtocolError(INVALID_REQUEST, "Invalid Request")

    method = payload.get("method")
    if not isinstance(method, str):
        raise ProtocolError(INVALID_REQUEST, "Invalid Request: missing method")
    if method not in METHODS:
        raise ProtocolError(METHOD_NOT_FOUND, f"Method not found: {method}")

    if method == "tools/call":
        params = payload.get("params")
        name = params.get("name") if isinstance(params, dict) else None
        if name not in TOOL_NAMES:
            raise ProtocolError(INVALID_PARAMS, f"Unknown tool: {name}")

    try:
        return _REQUEST_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        details = [
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ProtocolError(INVALID_PARAMS, "Invalid params", data=details) from exc


def success_response(req_id: RequestId, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def error_response(
    req_id: RequestId, code: int, message: str, data: Any = None
) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": req_id, "error": error}
