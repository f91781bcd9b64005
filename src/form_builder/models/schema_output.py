"""
Validation schema models derived from a field list.

A ``SchemaSpec`` is the ordered set of per-field ``FieldRule`` objects.
Each rule exports one JSON Schema property; the live preview validates
submitted values against that exported schema with ``jsonschema``, and
the zod declaration emitted by the code generators carries the same
constraints and messages.
"""

from typing import Any, Iterable, Literal

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaError
from pydantic import BaseModel, Field

from form_builder.models.validation_result import (
    FieldValidationError,
    ValidationResult,
)

RuleKind = Literal["string", "date", "number", "boolean", "array", "any"]

# A required answer needs one non-whitespace character
NON_BLANK_PATTERN = r"\S"
# ISO 8601 calendar date, optionally followed by a time of day
ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:\d{2})?)?$"

_MISSING = object()

_KIND_NOUNS = {
    "string": "text",
    "date": "a date",
    "number": "a number",
    "boolean": "true or false",
    "array": "a list of strings",
}

# jsonschema keyword -> error type
_KEYWORD_ERRORS = {
    "type": "type",
    "minLength": "min_length",
    "maxLength": "max_length",
    "minimum": "minimum",
    "maximum": "maximum",
    "multipleOf": "step",
    "const": "must_be_true",
    "minItems": "min_items",
    "maxItems": "max_items",
    "not": "required",
}


class FieldRule(BaseModel):
    """Validation rule for a single field."""

    name: str = Field(..., description="Field name/key")
    variant: str = Field(..., description="Variant the rule was derived from")
    label: str = Field(default="", description="Label used in messages")
    kind: RuleKind = Field(..., description="Value shape")

    required: bool = Field(default=False)
    must_be_true: bool = Field(default=False, description="Agreement checkbox semantics")
    minimum: float | None = Field(default=None)
    maximum: float | None = Field(default=None)
    step: float | None = Field(default=None)
    min_length: int | None = Field(default=None)
    max_length: int | None = Field(default=None)
    min_items: int | None = Field(default=None)
    max_items: int | None = Field(default=None)
    pattern: str | None = Field(default=None)

    @property
    def display_name(self) -> str:
        return self.label or self.name

    @property
    def has_shape_constraints(self) -> bool:
        return any(
            v is not None
            for v in (self.min_length, self.max_length, self.pattern)
        ) or self.kind == "date"

    def message(self, error_type: str) -> str:
        """User-facing message for a failed constraint, shared with generated schemas."""
        name = self.display_name
        if error_type == "required":
            return f"{name} is required"
        if error_type == "type":
            return f"{name} must be {_KIND_NOUNS.get(self.kind, 'a value')}"
        if error_type == "min_length":
            return f"{name} must be at least {self.min_length} characters"
        if error_type == "max_length":
            return f"{name} must be at most {self.max_length} characters"
        if error_type == "pattern":
            return f"{name} has an invalid format"
        if error_type == "format":
            return "Invalid date"
        if error_type == "minimum":
            return f"{name} must be at least {self.minimum:g}"
        if error_type == "maximum":
            return f"{name} must be at most {self.maximum:g}"
        if error_type == "step":
            return f"{name} must be a multiple of {self.step:g}"
        if error_type == "must_be_true":
            return f"{name} must be accepted"
        if error_type == "min_items":
            return f"{name} needs at least {self.min_items} items"
        if error_type == "max_items":
            return f"{name} allows at most {self.max_items} items"
        return f"{name} is invalid"

    def check(self, value: Any = _MISSING) -> list[FieldValidationError]:
        """Return the errors for one value; an empty list means valid."""
        data = {} if value is _MISSING else {self.name: value}
        return SchemaSpec(rules=[self]).validate_data(data).errors

    def _string_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "string"}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        patterns = [NON_BLANK_PATTERN] if self.required else []
        if self.pattern:
            patterns.append(self.pattern)
        if self.kind == "date":
            patterns.append(ISO_DATE_PATTERN)
        if len(patterns) == 1:
            schema["pattern"] = patterns[0]
        elif patterns:
            schema["allOf"] = [{"pattern": p} for p in patterns]
        if not self.required and self.has_shape_constraints:
            # An empty answer skips the shape checks of an optional field
            return {"anyOf": [{"const": ""}, schema]}
        return schema

    def _number_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "number"}
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        if self.step:
            schema["multipleOf"] = self.step
        return schema

    def _array_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "array", "items": {"type": "string"}}
        min_items = self.min_items
        if self.required:
            min_items = max(min_items or 0, 1)
        if min_items is not None:
            schema["minItems"] = min_items
        if self.max_items is not None:
            schema["maxItems"] = self.max_items
        return schema

    def to_json_schema(self) -> dict[str, Any]:
        """Export this rule as a JSON Schema property."""
        if self.kind in ("string", "date"):
            schema = self._string_schema()
        elif self.kind == "number":
            schema = self._number_schema()
        elif self.kind == "boolean":
            schema = {"type": "boolean"}
            if self.must_be_true:
                schema["const"] = True
        elif self.kind == "array":
            schema = self._array_schema()
        elif self.required:
            schema = {"not": {"enum": [None, "", []]}}
        else:
            schema = {}
        return {"title": self.display_name, **schema}

    def error_type_for(self, error: SchemaError) -> str:
        """Map a jsonschema error raised by this rule's property to an error type."""
        if error.validator == "pattern":
            if error.validator_value == NON_BLANK_PATTERN:
                return "required"
            if error.validator_value == ISO_DATE_PATTERN:
                return "format"
            return "pattern"
        if error.validator == "type" and error.instance is None and self.required:
            return "required"
        if error.validator == "minItems" and error.instance == [] and self.required:
            return "required"
        return _KEYWORD_ERRORS.get(error.validator, "type")


def _leaf_errors(error: SchemaError) -> Iterable[SchemaError]:
    """Errors of the constrained branch of an ``anyOf``, else the error itself."""
    if error.validator != "anyOf":
        yield error
        return
    for sub in error.context or []:
        if sub.relative_schema_path and sub.relative_schema_path[0] == 1:
            yield from _leaf_errors(sub)


class SchemaSpec(BaseModel):
    """Validation schema for a whole form, one rule per flattened field."""

    rules: list[FieldRule] = Field(default_factory=list)

    @property
    def field_names(self) -> list[str]:
        return [rule.name for rule in self.rules]

    def get_rule(self, name: str) -> FieldRule | None:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def _field_errors(self, error: SchemaError, data: dict[str, Any]) -> list[FieldValidationError]:
        if error.validator == "required":
            return [
                FieldValidationError(
                    field_name=name,
                    error_type="required",
                    message=self.get_rule(name).message("required"),
                )
                for name in error.validator_value
                if name not in data and self.get_rule(name) is not None
            ]
        if not error.path:
            return []
        rule = self.get_rule(error.path[0])
        if rule is None:
            return []
        errors = []
        for leaf in _leaf_errors(error):
            error_type = rule.error_type_for(leaf)
            expected = None if error_type == "required" else leaf.validator_value
            errors.append(FieldValidationError(
                field_name=rule.name,
                error_type=error_type,
                message=rule.message(error_type),
                expected=expected,
                received=data.get(rule.name),
            ))
        return errors

    def validate_data(self, data: dict[str, Any]) -> ValidationResult:
        """Validate submitted form values against the exported JSON Schema."""
        validator = Draft202012Validator(self.to_json_schema())
        by_field: dict[str, list[FieldValidationError]] = {}
        seen: set[tuple[str, str]] = set()
        for error in validator.iter_errors(data):
            for field_error in self._field_errors(error, data):
                key = (field_error.field_name, field_error.error_type)
                if key in seen:
                    continue
                seen.add(key)
                by_field.setdefault(field_error.field_name, []).append(field_error)

        errors: list[FieldValidationError] = []
        for name in self.field_names:
            field_errors = by_field.get(name, [])
            # An unanswered field only reports that it is required
            required = [e for e in field_errors if e.error_type == "required"]
            errors.extend(required or field_errors)
        return ValidationResult.from_errors(errors, data)

    def to_json_schema(self, title: str = "Form") -> dict[str, Any]:
        """Export as JSON Schema dict."""
        return {
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "type": "object",
            "title": title,
            "properties": {rule.name: rule.to_json_schema() for rule in self.rules},
            "required": [rule.name for rule in self.rules if rule.required],
        }
