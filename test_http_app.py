"""Tests for the FastAPI façade."""

import pytest
from fastapi.testclient import TestClient

from generic_mcp_server.http_app import build_http_app


@pytest.fixture
def client(tools, resources):
    return TestClient(build_http_app(tools, resources))


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_mcp_info_lists_catalogue(client):
    body = client.get("/mcp-info").json()

    assert body["name"] == "generic-mcp-server"
    assert "calculate-sum" in [t["name"] for t in body["tools"]]
    assert {r["uri"] for r in body["resources"]} == {"system://info", "config://app"}
    assert "properties" in body["tools"][0]["inputSchema"]


def test_tool_call_success(client):
    r = client.post("/tools/calculate-sum", json={"a": 40, "b": 2})

    assert r.status_code == 200
    body = r.json()
    assert body["isError"] is False
    assert body["result"] == 42
    assert body["content"][0]["text"] == "42"


def test_unknown_tool_is_404(client):
    r = client.post("/tools/nope", json={})

    assert r.status_code == 404
    assert r.json()["error"]["kind"] == "method_not_found"


def test_invalid_arguments_is_400(client, upstream):
    r = client.post("/tools/delete_resource", json={"resourceId": "r1", "confirm": False})

    assert r.status_code == 400
    assert r.json()["error"]["message"].startswith("Invalid arguments")
    assert upstream.requests == []


def test_malformed_json_is_400(client):
    r = client.post("/tools/calculate-sum", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400


def test_empty_body_means_no_arguments(client):
    r = client.post("/tools/get_resource")
    assert r.status_code == 400
    assert "resourceId" in r.json()["error"]["message"]


def test_upstream_failure_is_502(client, upstream):
    upstream.route("GET", "/resources/r1", status=503, text="down")

    r = client.post("/tools/get_resource", json={"resourceId": "r1"})

    assert r.status_code == 502
    assert r.json()["error"]["kind"] == "execution_error"


def test_read_resource_by_name(client):
    r = client.get("/resources/app-config")

    assert r.status_code == 200
    [content] = r.json()["contents"]
    assert content["uri"] == "config://app"
    assert '"env": "test"' in content["text"]
    assert "secret" not in content["text"]


def test_unknown_resource_is_404(client):
    assert client.get("/resources/nope").status_code == 404
