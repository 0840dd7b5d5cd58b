# docgate_server/http_app.py
from __future__ import annotations

from typing import Any, Dict
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from docgate.config import Settings
from docgate.di import Container, build_container
from docgate.errors import GatewayError
from docgate.logging import configure_logging

from docgate_server.registry import build_tool_registry, list_tools_payload, dispatch_tool_call


PROTOCOL_VERSION = "2025-03-26"  # aligns with current spec draft dates

# JSON-RPC error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
GATEWAY_ERROR = -32000


def _jsonrpc_error(id_: Any, code: int, message: str, data: Any | None = None) -> JSONResponse:
    body: Dict[str, Any] = {"jsonrpc": "2.0", "id": id_, "error": {"code": code, "message": message}}
    if data is not None:
        body["error"]["data"] = data
    return JSONResponse(body)

def _jsonrpc_result(id_: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": id_, "result": result})


def create_http_app(container: Container | None = None) -> FastAPI:
    container = container or build_container()
    settings: Settings = container.settings
    registry = build_tool_registry(container)

    app = FastAPI(title="DocGate MCP HTTP Server", version="0.1.0")

    # ---------- Security: Origin validation & Bearer token ----------

    def _origin_allowed(req: Request) -> bool:
        origin = req.headers.get("origin")
        if not origin:
            return settings.MCP_HTTP_ALLOW_NO_ORIGIN
        allowed = {o.strip().lower() for o in settings.MCP_HTTP_ALLOWED_ORIGINS.split(",") if o.strip()}
        return origin.lower() in allowed

    def _require_auth(req: Request):
        auth = req.headers.get("authorization", "")
        if not auth.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Missing Bearer token")
        token = auth.split(" ", 1)[1]
        if token != settings.MCP_HTTP_BEARER_TOKEN:
            raise HTTPException(status_code=401, detail="Invalid Bearer token")

    @app.middleware("http")
    async def origin_validation_mw(request: Request, call_next):
        # Origin validation prevents DNS rebinding from a browser page
        if not _origin_allowed(request):
            return JSONResponse({"error": {"code": 403, "message": "Forbidden origin"}}, status_code=403)
        return await call_next(request)

    # ---------- MCP JSON-RPC endpoint (Streamable HTTP) ----------

    @app.post(settings.MCP_HTTP_PATH)
    async def mcp_endpoint(request: Request):
        _require_auth(request)

        try:
            payload = await request.json()
        except ValueError:
            return _jsonrpc_error(None, PARSE_ERROR, "Parse error")

        id_ = payload.get("id")
        method = payload.get("method")
        params = payload.get("params", {})

        if method == "initialize":
            return _jsonrpc_result(id_, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": "docgate-http", "version": "0.1.0"},
            })

        if method == "tools/list":
            return _jsonrpc_result(id_, list_tools_payload(registry))

        if method == "tools/call":
            name = params.get("name")
            args = params.get("arguments", {})
            try:
                result = dispatch_tool_call(registry, name, args)
            except KeyError as ke:
                return _jsonrpc_error(id_, METHOD_NOT_FOUND, str(ke))
            except ValidationError as ve:
                return _jsonrpc_error(id_, INVALID_PARAMS, "Invalid params",
                                      ve.errors(include_url=False, include_context=False))
            except GatewayError as ge:
                return _jsonrpc_error(id_, GATEWAY_ERROR, ge.message, {"kind": ge.kind.value})

            content_block = (
                {"type": "json", "json": result}
                if isinstance(result, (dict, list, bool))
                else {"type": "text", "text": str(result)}
            )
            return _jsonrpc_result(id_, {"content": [content_block], "isError": False})

        return _jsonrpc_error(id_, METHOD_NOT_FOUND, f"Method not found: {method}")

    return app


if __name__ == "__main__":
    import uvicorn
    _settings = Settings()
    configure_logging(_settings.LOG_LEVEL)
    # factory mode: the container is built inside the server process
    uvicorn.run(
        "docgate_server.http_app:create_http_app",
        factory=True,
        host=_settings.MCP_HTTP_HOST,
        port=_settings.MCP_HTTP_PORT,
        reload=False,
    )
