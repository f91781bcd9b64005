"""Tests for the HTTP builder API."""

import json
import threading

import httpx
import pytest

from form_builder.notifications import MemoryClipboard
from form_builder.preferences import MemoryPreferenceStore
from form_builder.session import FormBuilderSession, resolve_library
from form_builder.web_server import create_server


@pytest.fixture
def server():
    session = FormBuilderSession(preferences=MemoryPreferenceStore(), clipboard=MemoryClipboard())
    httpd = create_server(session, host="127.0.0.1", port=0)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()
    thread.join(timeout=5)


@pytest.fixture
def client(server):
    host, port = server.server_address[:2]
    with httpx.Client(base_url=f"http://{host}:{port}", timeout=10.0) as client:
        yield client


class TestServerEndpoints:
    """Tests for the builder API endpoints."""

    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "form-builder"

    def test_field_types(self, client):
        """Test the palette listing."""
        data = client.get("/api/field-types").json()
        variants = [t["variant"] for t in data["field_types"]]
        assert "Input" in variants
        assert [lib["id"] for lib in data["libraries"]] == ["react-hook-form", "tanstack-form", "bring-your-own"]

    def test_add_edit_remove(self, client, server):
        """Test a field's lifecycle over HTTP."""
        response = client.post("/api/fields", json={"variant": "Input"})
        assert response.status_code == 201
        name = response.json()["field"]["name"]

        response = client.patch(f"/api/fields/{name}", json={"label": "Login"})
        assert response.status_code == 200
        assert response.json()["field"]["label"] == "Login"
        assert server.session.fields[0].label == "Login"

        response = client.delete(f"/api/fields/{name}")
        assert response.status_code == 200
        assert response.json()["fields"] == []

    def test_add_requires_variant(self, client):
        """Test adding without a variant."""
        assert client.post("/api/fields", json={}).status_code == 400

    def test_edit_errors(self, client):
        """Test editing missing or invalid fields."""
        assert client.patch("/api/fields/missing", json={"label": "x"}).status_code == 404
        name = client.post("/api/fields", json={"variant": "Input"}).json()["field"]["name"]
        assert client.patch(f"/api/fields/{name}", json={"disabled": "yes"}).status_code == 400

    def test_remove_missing(self, client):
        """Test removing an unknown field."""
        assert client.delete("/api/fields/missing").status_code == 404

    def test_invalid_body(self, client):
        """Test a body that is not a JSON object."""
        response = client.post("/api/fields", content=b"[1, 2]", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        response = client.post("/api/fields", content=b"{oops", headers={"Content-Type": "application/json"})
        assert response.status_code == 400

    def test_preview(self, client):
        """Test the preview artifacts."""
        client.post("/api/fields", json={"variant": "Phone"})
        data = client.get("/api/preview").json()
        assert data["library"] == resolve_library(None)
        assert "const formSchema = z.object({" in data["code"]
        assert data["special_components"] == [{"variant": "Phone", "component": "PhoneInput"}]

        data = client.get("/api/preview", params={"library": "bring-your-own"}).json()
        assert data["library"] == "bring-your-own"
        assert client.get("/api/preview", params={"library": "vue"}).status_code == 400

    def test_select_library(self, client, server):
        """Test switching the target library."""
        response = client.put("/api/library", json={"library": "tanstack-form"})
        assert response.status_code == 200
        assert server.session.library == "tanstack-form"
        assert client.put("/api/library", json={"library": "vue"}).status_code == 400

    def test_import(self, client, server):
        """Test importing form JSON."""
        form = [{"variant": "Input", "name": "a"}, [{"variant": "Switch", "name": "b"}]]
        response = client.post("/api/import", json={"json": json.dumps(form)})
        assert response.status_code == 200
        assert [f.name for f in server.session.fields[1]] == ["b"]

        response = client.post("/api/import", json={"json": '[{"variant":"Input"}]'})
        assert response.status_code == 400
        assert response.json()["path"] == [0, "name"]
        assert server.session.fields[0].name == "a"

    def test_reset(self, client, server):
        """Test clearing the form."""
        client.post("/api/fields", json={"variant": "Input"})
        assert client.post("/api/reset").json()["fields"] == []
        assert server.session.fields == []

    def test_review(self, client, server):
        """Test reviewing JSON does not touch the session."""
        form = json.dumps([{"variant": "Input", "name": "name_1", "required": True}])
        response = client.post("/api/review", json={"json": form, "library": "tanstack-form"})
        assert response.status_code == 200
        data = response.json()
        assert data["library"] == "tanstack-form"
        assert data["defaults"] == {"name_1": ""}
        assert server.session.fields == []

        response = client.post("/api/review", json={"json": "{not valid"})
        assert response.status_code == 400
        assert response.json()["kind"] == "parse"

    def test_page(self, client):
        """Test the HTML preview page."""
        client.post("/api/fields", json={"variant": "Input"})
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'class="form-preview"' in response.text

    def test_not_found(self, client):
        """Test unknown routes."""
        assert client.get("/nope").status_code == 404
        assert client.post("/nope").status_code == 404

    def test_review_large_rating(self, client):
        """Test a rating with a huge maximum keeps the response small."""
        form = '[{"variant":"Rating","name":"r","label":"R","max":2000000}]'
        response = client.post("/api/review", json={"json": form})
        assert response.status_code == 200
        assert len(response.content) < 50_000
