"""Tests for the GraphBuilder HTTP API."""

import ast

import pytest
from fastapi.testclient import TestClient

from server.app import app


@pytest.fixture
def client():
    return TestClient(app)


def _branching_payload() -> dict:
    """Router fans out to two nodes; derived fields are left for the server."""
    return {
        "name": "API Flow",
        "nodes": [
            {"id": "r", "label": "Router", "description": "routes based on context"},
            {"id": "a", "label": "Answer"},
            {"id": "h", "label": "Handoff"},
        ],
        "edges": [
            {"id": "e1", "source": "r", "target": "a"},
            {"id": "e2", "source": "r", "target": "h"},
        ],
    }


class TestHealth:
    """Test the root endpoint."""

    def test_root(self, client):
        """GET / should report status ok."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestCatalogRoutes:
    """Test tool and template endpoints."""

    def test_list_tools(self, client):
        """GET /api/tools should return the tool library."""
        response = client.get("/api/tools")
        assert response.status_code == 200
        assert "web-search" in [tool["id"] for tool in response.json()]

    def test_list_templates(self, client):
        """GET /api/templates should return every template."""
        response = client.get("/api/templates")
        assert response.status_code == 200
        assert {t["id"] for t in response.json()} == {"research-sprint", "support-copilot", "prd-builder"}

    def test_instantiate_template(self, client):
        """GET /api/templates/{id} should return a canonical graph."""
        response = client.get("/api/templates/prd-builder")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Product Requirements"
        assert len(body["nodes"]) == 2
        assert body["edges"][0]["kind"] == "normal"

    def test_unknown_template(self, client):
        """Unknown template ids should return 404."""
        response = client.get("/api/templates/nope")
        assert response.status_code == 404


class TestGraphRoutes:
    """Test normalization, validation and generation endpoints."""

    def test_normalize(self, client):
        """normalize should fill in edge kinds, route keys and roles."""
        response = client.post("/api/graphs/normalize", json=_branching_payload())
        assert response.status_code == 200
        body = response.json()
        assert [edge["route_key"] for edge in body["edges"]] == ["answer", "handoff"]
        assert all(edge["kind"] == "conditional" for edge in body["edges"])
        router = next(node for node in body["nodes"] if node["id"] == "r")
        assert router["roles"] == ["agent", "router", "memory"]

    def test_validate_ready(self, client):
        """A well-formed graph should be export ready."""
        response = client.post("/api/graphs/validate", json=_branching_payload())
        assert response.status_code == 200
        assert response.json() == {"export_ready": True, "issues": []}

    def test_validate_reports_dangling_edge(self, client):
        """Dangling edges are reported as issues, not errors."""
        payload = _branching_payload()
        payload["edges"].append({"id": "e3", "source": "a", "target": "ghost"})
        response = client.post("/api/graphs/validate", json=payload)
        assert response.status_code == 200
        body = response.json()
        assert body["export_ready"] is False
        assert "dangling_target" in [issue["code"] for issue in body["issues"]]

    def test_validate_with_entry(self, client):
        """entry_id should be honored."""
        response = client.post("/api/graphs/validate", params={"entry_id": "a"}, json=_branching_payload())
        codes = [issue["code"] for issue in response.json()["issues"]]
        assert "unreachable_node" in codes

    def test_generate_python(self, client):
        """generate should return parseable Python by default."""
        response = client.post("/api/graphs/generate", json=_branching_payload())
        assert response.status_code == 200
        body = response.json()
        assert body["target"] == "python"
        ast.parse(body["code"])
        assert body["code"].startswith('"""API Flow: LangGraph skeleton')

    def test_generate_typescript_alias(self, client):
        """Target aliases should resolve to the canonical target."""
        response = client.post("/api/graphs/generate", params={"target": "js"}, json=_branching_payload())
        assert response.status_code == 200
        assert response.json()["target"] == "typescript"
        assert "@langchain/langgraph" in response.json()["code"]

    def test_generate_unknown_target(self, client):
        """Unknown targets should return 400."""
        response = client.post("/api/graphs/generate", params={"target": "cobol"}, json=_branching_payload())
        assert response.status_code == 400

    def test_generate_rejects_dangling_edge(self, client):
        """Structurally corrupt graphs cannot be generated."""
        payload = _branching_payload()
        payload["edges"].append({"id": "e3", "source": "a", "target": "ghost"})
        response = client.post("/api/graphs/generate", json=payload)
        assert response.status_code == 422

    def test_invalid_payload(self, client):
        """Malformed graphs should fail request validation."""
        response = client.post("/api/graphs/normalize", json={"nodes": [{"label": "no id"}]})
        assert response.status_code == 422
