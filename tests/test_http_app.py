# tests/test_http_app.py
import pytest
from fastapi.testclient import TestClient

from docgate.di import build_container
from docgate_server.http_app import GATEWAY_ERROR, INVALID_PARAMS, create_http_app

TOKEN = "test-token"


@pytest.fixture
def client(sandbox):
    settings = sandbox["settings"].model_copy(update={"MCP_HTTP_BEARER_TOKEN": TOKEN})
    return TestClient(create_http_app(build_container(settings)))


def _call(client, method, params=None, token=TOKEN, **headers):
    if token:
        headers["Authorization"] = f"Bearer {token}"
    body = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params or {}}
    return client.post("/mcp", json=body, headers=headers)


def test_requires_bearer_token(client):
    assert _call(client, "tools/list", token=None).status_code == 401
    assert _call(client, "tools/list", token="wrong").status_code == 401


def test_forbidden_origin(client):
    resp = _call(client, "tools/list", Origin="http://evil.example")
    assert resp.status_code == 403


def test_initialize_and_list(client):
    init = _call(client, "initialize").json()
    assert init["result"]["serverInfo"]["name"] == "docgate-http"
    tools = _call(client, "tools/list").json()["result"]["tools"]
    assert any(t["name"] == "list_directory" for t in tools)


def test_tool_call_returns_json_block(client, sandbox):
    (sandbox["home"] / "a.md").write_text("aaa")
    resp = _call(client, "tools/call", {
        "name": "search_in_project",
        "arguments": {"root_path": str(sandbox["home"]), "query": "aa", "extensions": ["md"]},
    }).json()
    block = resp["result"]["content"][0]
    assert block["type"] == "json"
    assert len(block["json"]) == 1
    assert block["json"][0]["column"] == 1


def test_gateway_error_carries_kind(client):
    resp = _call(client, "tools/call", {
        "name": "validate_path", "arguments": {"path": "~/a/../../etc/passwd"},
    }).json()
    assert resp["error"]["code"] == GATEWAY_ERROR
    assert resp["error"]["data"] == {"kind": "PathTraversal"}


def test_access_denied_kind(client):
    resp = _call(client, "tools/call", {
        "name": "read_file", "arguments": {"path": "/etc/passwd"},
    }).json()
    assert resp["error"]["data"]["kind"] == "AccessDenied"


def test_invalid_params(client):
    resp = _call(client, "tools/call", {"name": "read_file", "arguments": {}}).json()
    assert resp["error"]["code"] == INVALID_PARAMS


def test_unknown_method(client):
    resp = _call(client, "resources/list").json()
    assert resp["error"]["code"] == -32601
