"""
MCP tool definitions for the form builder.

Each tool takes exported form JSON and returns a JSON-compatible dict.
Invalid input is reported in the result, not raised.
"""

from typing import Any

from form_builder.codec import hydrate
from form_builder.codegen import generate_code
from form_builder.constants import FIELD_TYPES, FORM_LIBRARIES, FORM_LIBRARY_LABELS, SPECIAL_COMPONENTS
from form_builder.errors import UnknownLibraryError
from form_builder.review import review_form_json
from form_builder.schema import derive_defaults, derive_validation
from form_builder.session import resolve_library, special_components
from form_builder.variants import default_config


def error_response(message: str, **extra: Any) -> dict[str, Any]:
    """The error shape every tool result uses: ``{"error": True, "message": ...}``."""
    return {"error": True, "message": message, **extra}


def _hydration_failure(error) -> dict[str, Any]:
    return error_response(error.message, kind=error.kind, path=error.path, expected=error.expected)


def mcp_generate_form_code(form_json: str, library: str | None = None) -> dict[str, Any]:
    """
    Generate React form source from exported form JSON.

    Args:
        form_json: Field list as exported by the builder's JSON view.
        library: One of react-hook-form, tanstack-form, bring-your-own.
            Defaults to the configured library.

    Returns:
        {"library", "code", "special_components"} or an error dict.
    """
    result = hydrate(form_json)
    if not result.ok:
        return _hydration_failure(result.error)
    target = library or resolve_library(None)
    try:
        code = generate_code(result.fields, target)
    except UnknownLibraryError as e:
        return error_response(str(e))
    return {
        "library": target,
        "code": code,
        "special_components": special_components(result.fields),
    }


def mcp_derive_form_schema(form_json: str) -> dict[str, Any]:
    """
    Derive the validation schema and default values of exported form JSON.

    Returns:
        {"schema": <JSON Schema>, "defaults": {...}} or an error dict.
    """
    result = hydrate(form_json)
    if not result.ok:
        return _hydration_failure(result.error)
    return {
        "schema": derive_validation(result.fields).to_json_schema(),
        "defaults": derive_defaults(result.fields),
    }


def mcp_review_form_json(form_json: str, library: str | None = None) -> dict[str, Any]:
    """Produce every preview artifact (JSON, schema, code, layout) for exported form JSON."""
    result = review_form_json(form_json, library)
    if not result.ok:
        if result.hydration_error is not None:
            return _hydration_failure(result.hydration_error)
        return error_response(result.error)
    artifacts = result.artifacts.to_dict()
    artifacts["html"] = result.artifacts.rendered.to_html()
    return artifacts


def mcp_list_field_types() -> dict[str, Any]:
    """The field palette and the supported libraries."""
    return {
        "field_types": [
            {**default_config(variant), "variant": variant, "special_component": SPECIAL_COMPONENTS.get(variant)}
            for variant in FIELD_TYPES
        ],
        "libraries": [{"id": library, "label": FORM_LIBRARY_LABELS[library]} for library in FORM_LIBRARIES],
    }


_FORM_JSON_PROPERTY = {
    "type": "string",
    "description": (
        "Form JSON: an array whose items are field objects "
        '({"variant": "Input", "name": "name_1", "label": "Username", ...}) '
        "or arrays of field objects rendered as one row"
    ),
}

_LIBRARY_PROPERTY = {
    "type": "string",
    "enum": list(FORM_LIBRARIES),
    "description": "Target form library for the generated code",
}


def get_mcp_tools() -> list[dict]:
    """
    Get MCP tool definitions for registration with MCP server.

    Returns list of tool schemas compatible with MCP protocol.
    """
    return [
        {
            "name": "generate_form_code",
            "description": """
Generate the source of a React form component from form JSON.

The JSON is the builder's export format. Supported libraries are
react-hook-form (zod resolver), tanstack-form and bring-your-own
(plain React state). Unknown field variants become a marked placeholder
comment; the rest of the form is generated normally.
""".strip(),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "form_json": _FORM_JSON_PROPERTY,
                    "library": _LIBRARY_PROPERTY,
                },
                "required": ["form_json"],
            },
        },
        {
            "name": "derive_form_schema",
            "description": "Derive the JSON Schema validation rules and default values for form JSON.",
            "inputSchema": {
                "type": "object",
                "properties": {"form_json": _FORM_JSON_PROPERTY},
                "required": ["form_json"],
            },
        },
        {
            "name": "review_form_json",
            "description": """
Validate form JSON and return every preview artifact: normalized JSON,
JSON Schema, defaults, generated code, row layout and an HTML preview.
Invalid input returns the offending path and the expected shape.
""".strip(),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "form_json": _FORM_JSON_PROPERTY,
                    "library": _LIBRARY_PROPERTY,
                },
                "required": ["form_json"],
            },
        },
        {
            "name": "list_field_types",
            "description": "List the field variants that can be added to a form and the supported form libraries.",
            "inputSchema": {"type": "object", "properties": {}},
        },
    ]
