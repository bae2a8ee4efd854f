# utils/rpc.py
import json
import logging
from dataclasses import dataclass
from typing import Callable

from schemas.scripture_schemas import (
    SearchRequest,
    ReferenceRequest,
    ListBooksRequest,
    ListCollectionsRequest,
    TermCountRequest,
)

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_INFO = {"name": "scriptures-mcp", "version": "1.0.0"}

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


@dataclass
class Tool:
    name: str
    description: str
    schema: type
    handler: Callable

    def describe(self):
        input_schema = self.schema.model_json_schema(by_alias=False)
        input_schema.pop('title', None)
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": input_schema,
        }


def _error(request_id, code, message, data=None):
    error = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def _result(request_id, result):
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


class RpcDispatcher:
    """JSON-RPC 2.0 front for the scripture tools."""

    def __init__(self):
        self.tools = {}

    def register_tool(self, name, description, schema, handler):
        self.tools[name] = Tool(name, description, schema, handler)

    def handle_line(self, line):
        """Handle one serialized message; returns the serialized response or None."""
        line = line.strip()
        if not line:
            return None
        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing request: {e}")
            return json.dumps(_error(None, PARSE_ERROR, "Parse error", str(e)))

        response = self.handle(message)
        return json.dumps(response) if response is not None else None

    def handle(self, message):
        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0" \
                or not isinstance(message.get("method"), str):
            request_id = message.get("id") if isinstance(message, dict) else None
            return _error(request_id, INVALID_REQUEST, "Invalid Request")

        # Notifications carry no id and get no response
        if "id" not in message:
            logger.info(f"Notification received: {message['method']}")
            return None

        request_id = message["id"]
        method = message["method"]
        params = message.get("params") or {}

        if method == "initialize":
            return _result(request_id, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": SERVER_INFO,
            })
        if method == "tools/list":
            return _result(request_id, {"tools": [tool.describe() for tool in self.tools.values()]})
        if method == "tools/call":
            return self.call_tool(request_id, params)

        return _error(request_id, METHOD_NOT_FOUND, "Method not found")

    def call_tool(self, request_id, params):
        if not isinstance(params, dict) or not isinstance(params.get("name"), str):
            return _error(request_id, INVALID_PARAMS, "Invalid params")

        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return _error(request_id, INVALID_PARAMS, "Invalid params")

        tool = self.tools.get(params["name"])
        if tool is None:
            return _error(request_id, METHOD_NOT_FOUND, "Tool not found")

        try:
            result = tool.handler(arguments)
        except Exception as e:
            logger.error(f"Tool {tool.name} failed: {str(e)}", exc_info=True)
            return _error(request_id, INTERNAL_ERROR, str(e))

        return _result(request_id, {
            "content": [{"type": "text", "text": result.text}],
            "isError": result.is_error,
        })


def build_dispatcher(service):
    """Register the scripture tools of a ScriptureService."""
    dispatcher = RpcDispatcher()
    dispatcher.register_tool(
        "search_scriptures", "Search for scriptures by keyword or phrase",
        SearchRequest, service.search)
    dispatcher.register_tool(
        "get_scripture", "Get a specific scripture reference",
        ReferenceRequest, service.get_verses)
    dispatcher.register_tool(
        "get_chapter", "Get a full chapter from scriptures",
        ReferenceRequest, service.get_chapter)
    dispatcher.register_tool(
        "list_books", "List available books, optionally within one collection",
        ListBooksRequest, service.list_books)
    dispatcher.register_tool(
        "list_collections", "List available scripture collections",
        ListCollectionsRequest, service.list_collections)
    dispatcher.register_tool(
        "get_term_counts", "Count occurrences of terms in a book, collection or chapter",
        TermCountRequest, service.count_terms)
    return dispatcher
