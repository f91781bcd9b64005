"""
HTTP JSON API for the form builder.

One ``FormBuilderSession`` lives on the server; handlers translate
requests into session operations and return JSON.

Endpoints:
    GET    /health                 service status
    GET    /api/field-types        palette and supported libraries
    GET    /api/preview            artifacts (``?library=`` overrides the selection)
    POST   /api/fields             add a field ``{"variant", "insertion_index"?}``
    PATCH  /api/fields/<name>      edit a field with partial attributes
    DELETE /api/fields/<name>      remove a field
    POST   /api/reset              clear the field list
    POST   /api/import             replace the field list from ``{"json"}``
    PUT    /api/library            select the target library ``{"library"}``
    POST   /api/review             preview ``{"json", "library"?}`` without editing
    GET    /                       rendered HTML preview
"""

import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, unquote, urlparse

from form_builder.config import get_config
from form_builder.constants import (
    DEFAULT_FIELD_CONFIG,
    FIELD_TYPES,
    FORM_LIBRARIES,
    FORM_LIBRARY_LABELS,
    SPECIAL_COMPONENTS,
)
from form_builder.errors import FieldNotFoundError, InvalidFieldError, UnknownLibraryError
from form_builder.codec import to_json_data
from form_builder.review import review_form_json
from form_builder.session import FormBuilderSession, build_artifacts

logger = logging.getLogger(__name__)

FIELDS_PREFIX = "/api/fields/"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Form preview</title>
</head>
<body>
{body}
</body>
</html>
"""


class InvalidRequestError(ValueError):
    """Raised for a request body that is not a JSON object."""


def field_types() -> list[dict[str, Any]]:
    """The palette with each variant's defaults."""
    return [
        {
            "variant": variant,
            "label": DEFAULT_FIELD_CONFIG.get(variant, {}).get("label", ""),
            "description": DEFAULT_FIELD_CONFIG.get(variant, {}).get("description", ""),
            "special_component": SPECIAL_COMPONENTS.get(variant),
        }
        for variant in FIELD_TYPES
    ]


def libraries() -> list[dict[str, str]]:
    return [{"id": library, "label": FORM_LIBRARY_LABELS[library]} for library in FORM_LIBRARIES]


class FormBuilderHTTPServer(HTTPServer):
    """HTTPServer carrying the builder session its handlers operate on."""

    def __init__(self, server_address, session: FormBuilderSession):
        super().__init__(server_address, FormBuilderHandler)
        self.session = session


class FormBuilderHandler(BaseHTTPRequestHandler):
    """HTTP handler for the builder API."""

    server: FormBuilderHTTPServer

    @property
    def session(self) -> FormBuilderSession:
        return self.server.session

    def do_GET(self):
        """Handle GET requests."""
        parsed_path = urlparse(self.path)
        path = parsed_path.path

        if path == "/health":
            self.handle_health_check()
        elif path == "/api/field-types":
            self.send_json_response({"field_types": field_types(), "libraries": libraries()})
        elif path == "/api/preview":
            self.handle_preview(parsed_path)
        elif path == "/" or path == "/index.html":
            self.handle_page()
        else:
            self.send_json_response({"error": "Not Found"}, 404)

    def do_POST(self):
        """Handle POST requests."""
        path = urlparse(self.path).path

        if path == "/api/fields":
            self.with_body(self.handle_add_field)
        elif path == "/api/reset":
            self.session.reset()
            self.send_json_response({"success": True, "fields": []})
        elif path == "/api/import":
            self.with_body(self.handle_import)
        elif path == "/api/review":
            self.with_body(self.handle_review)
        else:
            self.send_json_response({"error": "Not Found"}, 404)

    def do_PATCH(self):
        """Handle PATCH requests."""
        path = urlparse(self.path).path
        if path.startswith(FIELDS_PREFIX):
            name = unquote(path[len(FIELDS_PREFIX):])
            self.with_body(lambda data: self.handle_edit_field(name, data))
        else:
            self.send_json_response({"error": "Not Found"}, 404)

    def do_DELETE(self):
        """Handle DELETE requests."""
        path = urlparse(self.path).path
        if path.startswith(FIELDS_PREFIX):
            self.handle_remove_field(unquote(path[len(FIELDS_PREFIX):]))
        else:
            self.send_json_response({"error": "Not Found"}, 404)

    def do_PUT(self):
        """Handle PUT requests."""
        path = urlparse(self.path).path
        if path == "/api/library":
            self.with_body(self.handle_select_library)
        else:
            self.send_json_response({"error": "Not Found"}, 404)

    def read_json_body(self) -> dict[str, Any]:
        content_length = int(self.headers.get("Content-Length", 0))
        raw = self.rfile.read(content_length) if content_length else b"{}"
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidRequestError(f"Request body is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidRequestError("Request body must be a JSON object")
        return data

    def with_body(self, handler):
        try:
            data = self.read_json_body()
        except InvalidRequestError as e:
            self.send_json_response({"error": str(e)}, 400)
            return
        handler(data)

    def handle_health_check(self):
        """Health check endpoint."""
        config = get_config()
        self.send_json_response({
            "status": "healthy",
            "service": "form-builder",
            "port": config.server_port,
            "library": self.session.library,
        })

    def handle_preview(self, parsed_path):
        query_params = parse_qs(parsed_path.query)
        library = query_params.get("library", [None])[0]
        if library and library != self.session.library:
            try:
                artifacts = build_artifacts(self.session.fields, library, self.session.registry)
            except UnknownLibraryError as e:
                self.send_json_response({"error": str(e)}, 400)
                return
        else:
            artifacts = self.session.artifacts()
        self.send_json_response(artifacts.to_dict())

    def handle_page(self):
        content = PAGE_TEMPLATE.format(body=self.session.artifacts().rendered.to_html()).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(content)))
        self.end_headers()
        self.wfile.write(content)

    def handle_add_field(self, data: dict[str, Any]):
        variant = data.get("variant")
        if not isinstance(variant, str) or not variant:
            self.send_json_response({"error": "variant is required"}, 400)
            return
        insertion_index = data.get("insertion_index")
        if insertion_index is not None and (isinstance(insertion_index, bool) or not isinstance(insertion_index, int)):
            self.send_json_response({"error": "insertion_index must be an integer"}, 400)
            return
        new_field = self.session.add_field(variant, insertion_index)
        self.send_json_response({"success": True, "field": new_field.to_json_dict()}, 201)

    def handle_edit_field(self, name: str, data: dict[str, Any]):
        try:
            updated = self.session.edit_field(name, data)
        except FieldNotFoundError as e:
            self.send_json_response({"error": str(e)}, 404)
            return
        except InvalidFieldError as e:
            self.send_json_response({"error": str(e)}, 400)
            return
        self.send_json_response({"success": True, "field": updated.to_json_dict()})

    def handle_remove_field(self, name: str):
        try:
            self.session.remove_field(name)
        except FieldNotFoundError as e:
            self.send_json_response({"error": str(e)}, 404)
            return
        self.send_json_response({"success": True, "fields": to_json_data(self.session.fields)})

    def handle_import(self, data: dict[str, Any]):
        text = data.get("json")
        if not isinstance(text, str):
            self.send_json_response({"error": "json must be a string"}, 400)
            return
        result = self.session.import_json(text)
        if not result.ok:
            self.send_json_response(_hydration_error_body(result.error), 400)
            return
        self.send_json_response({"success": True, "fields": to_json_data(self.session.fields)})

    def handle_select_library(self, data: dict[str, Any]):
        library = data.get("library")
        try:
            self.session.select_library(library)
        except UnknownLibraryError as e:
            self.send_json_response({"error": str(e)}, 400)
            return
        self.send_json_response({"success": True, "library": self.session.library})

    def handle_review(self, data: dict[str, Any]):
        text = data.get("json")
        if text is not None and not isinstance(text, str):
            self.send_json_response({"error": "json must be a string"}, 400)
            return
        result = review_form_json(text or "", data.get("library"), self.session.registry)
        if not result.ok:
            body = {"success": False, "error": result.error}
            if result.hydration_error is not None:
                body.update(_hydration_error_body(result.hydration_error))
            self.send_json_response(body, 400)
            return
        self.send_json_response({
            "success": True,
            "fields": to_json_data(result.fields),
            **result.artifacts.to_dict(),
        })

    def send_json_response(self, data, status=200):
        """Send JSON response."""
        json_data = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")

        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(json_data)))
        self.send_header("Access-Control-Allow-Origin", "*")
        self.end_headers()
        self.wfile.write(json_data)

    def log_message(self, format, *args):
        logger.debug(format % args)


def _hydration_error_body(error) -> dict[str, Any]:
    return {
        "success": False,
        "error": error.message,
        "kind": error.kind,
        "path": error.path,
        "expected": error.expected,
    }


def create_server(
    session: FormBuilderSession | None = None,
    host: str = "",
    port: int | None = None,
) -> FormBuilderHTTPServer:
    """Build (but do not start) the HTTP server; ``port=0`` picks a free port."""
    if port is None:
        port = get_config().server_port
    return FormBuilderHTTPServer((host, port), session or FormBuilderSession())


def main():
    """Start the HTTP server."""
    config = get_config()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
    httpd = create_server(port=config.server_port)

    logger.info(f"Form builder API running on http://localhost:{config.server_port}")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server stopped")
    finally:
        httpd.server_close()


if __name__ == "__main__":
    main()
