"""
JSON codec for field lists.

``serialize`` writes the persisted attributes of every field, keeping
order and row groups. ``hydrate`` parses untrusted JSON text, checks its
shape item by item and stops at the first violation, reporting where it
happened and what was expected. Failures are returned, not raised.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import ValidationError

from form_builder.config import get_config
from form_builder.models.field_definitions import FieldDescriptor, FieldList

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "Invalid JSON: could not parse."

_EXPECTED_SHAPES = {
    "variant": "a non-empty string",
    "name": "a string identifier",
    "label": "a string",
    "type": "a string",
    "description": "a string",
    "placeholder": "a string",
    "value": "a string, boolean, number or array of strings",
    "checked": "a boolean",
    "disabled": "a boolean",
    "required": "a boolean",
    "min": "a number",
    "max": "a number",
    "step": "a number",
    "locale": "a string",
    "hour12": "a boolean",
    "className": "a string",
    "rowIndex": "an integer",
}

ErrorKind = Literal["parse", "shape", "duplicate"]
PathItem = int | str


@dataclass
class HydrationError:
    """Why a JSON document could not be turned into a field list."""

    kind: ErrorKind
    message: str
    path: list[PathItem] = field(default_factory=list)
    expected: str | None = None

    @property
    def location(self) -> str:
        return ".".join(str(p) for p in self.path)

    def __str__(self) -> str:
        return self.message


@dataclass
class HydrationResult:
    """Outcome of ``hydrate``: either ``fields`` or ``error`` is set."""

    fields: FieldList | None = None
    error: HydrationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def to_json_data(fields: FieldList) -> list[Any]:
    """Plain JSON-compatible data for a field list."""
    data: list[Any] = []
    for item in fields:
        if isinstance(item, list):
            data.append([f.to_json_dict() for f in item])
        else:
            data.append(item.to_json_dict())
    return data


def serialize(fields: FieldList, indent: int | None = None) -> str:
    """Serialize a field list to JSON text."""
    if indent is None:
        indent = get_config().indent_json_output
    return json.dumps(to_json_data(fields), indent=indent, ensure_ascii=False, allow_nan=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON number")


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"{text} is out of range")
    return value


def _shape_error(path: list[PathItem], problem: str, expected: str | None = None) -> HydrationError:
    location = ".".join(str(p) for p in path)
    where = f" at {location}" if location else ""
    return HydrationError(
        kind="shape",
        message=f"Invalid form JSON{where}: {problem}",
        path=path,
        expected=expected,
    )


def _hydrate_field(raw: Any, path: list[PathItem]) -> tuple[FieldDescriptor | None, HydrationError | None]:
    if not isinstance(raw, dict):
        return None, _shape_error(
            path,
            "expected a field object with at least 'variant' and 'name'",
            "field object",
        )
    try:
        # Freshly validated descriptors carry no-op bindings
        return FieldDescriptor.from_json_dict(raw), None
    except ValidationError as e:
        first = e.errors()[0]
        key = first["loc"][0] if first["loc"] else None
        error_path = [*path, key] if key is not None else path
        expected = _EXPECTED_SHAPES.get(str(key)) if key is not None else None
        if first["type"] == "missing":
            problem = f"'{key}' is required"
        elif expected:
            problem = f"'{key}' must be {expected} ({first['msg']})"
        else:
            problem = first["msg"]
        return None, _shape_error(error_path, problem, expected)


def hydrate_data(data: Any) -> HydrationResult:
    """Validate already-parsed JSON data and build a field list."""
    if not isinstance(data, list):
        return HydrationResult(error=_shape_error(
            [],
            "expected an array of fields and field groups",
            "array",
        ))

    fields: FieldList = []
    seen: dict[str, list[PathItem]] = {}

    def register(f: FieldDescriptor, path: list[PathItem]) -> HydrationError | None:
        if f.name in seen:
            first = ".".join(str(p) for p in seen[f.name])
            return HydrationError(
                kind="duplicate",
                message=(
                    f"Invalid form JSON at {'.'.join(str(p) for p in path)}: "
                    f"duplicate field name '{f.name}' (first used at {first})"
                ),
                path=[*path, "name"],
                expected="a name not used by any other field",
            )
        seen[f.name] = path
        return None

    for index, item in enumerate(data):
        if isinstance(item, list):
            group = []
            for member_index, member in enumerate(item):
                path: list[PathItem] = [index, member_index]
                f, error = _hydrate_field(member, path)
                error = error or register(f, path)
                if error:
                    return HydrationResult(error=error)
                group.append(f)
            fields.append(group)
        elif isinstance(item, dict):
            f, error = _hydrate_field(item, [index])
            error = error or register(f, [index])
            if error:
                return HydrationResult(error=error)
            fields.append(f)
        else:
            return HydrationResult(error=_shape_error(
                [index],
                "expected a field object or an array of field objects",
                "field object or array of field objects",
            ))

    return HydrationResult(fields=fields)


def hydrate(json_text: str) -> HydrationResult:
    """
    Parse and validate exported form JSON.

    Args:
        json_text: Text produced by ``serialize`` or pasted by a user.

    Returns:
        HydrationResult with the field list, or an error whose ``kind``
        tells "not valid JSON" (``parse``) apart from "valid JSON of the
        wrong shape" (``shape`` / ``duplicate``).
    """
    try:
        data = json.loads(json_text, parse_constant=_reject_constant, parse_float=_finite_float)
    except (ValueError, TypeError) as e:
        logger.warning(f"Could not parse form JSON: {e}")
        return HydrationResult(error=HydrationError(kind="parse", message=PARSE_ERROR_MESSAGE))

    result = hydrate_data(data)
    if not result.ok:
        logger.warning(result.error.message)
    return result
