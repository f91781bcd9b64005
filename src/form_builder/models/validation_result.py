"""
Validation result models for form input validation.

These models represent the outcome of checking a set of form values
against a derived ``SchemaSpec``.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

ErrorType = Literal[
    "required",
    "type",
    "min_length",
    "max_length",
    "pattern",
    "minimum",
    "maximum",
    "step",
    "min_items",
    "max_items",
    "format",
    "must_be_true",
]


class FieldValidationError(BaseModel):
    """Validation error for a specific field."""

    field_name: str = Field(..., description="Name of the field with error")
    error_type: ErrorType = Field(..., description="Rule that rejected the value")
    message: str = Field(..., description="Human-readable error message")
    expected: Any | None = Field(default=None, description="Expected value/format")
    received: Any | None = Field(default=None, description="Received value")


class ValidationResult(BaseModel):
    """Result of form validation."""

    is_valid: bool = Field(..., description="Whether the form data is valid")
    errors: list[FieldValidationError] = Field(
        default_factory=list, description="List of validation errors"
    )
    validated_data: dict[str, Any] | None = Field(
        default=None, description="Values keyed by field name if valid"
    )

    @classmethod
    def from_errors(
        cls,
        errors: list[FieldValidationError],
        data: dict[str, Any],
    ) -> "ValidationResult":
        if errors:
            return cls(is_valid=False, errors=errors)
        return cls(is_valid=True, validated_data=dict(data))

    @property
    def error_count(self) -> int:
        """Get the number of validation errors."""
        return len(self.errors)

    def get_field_errors(self, field_name: str) -> list[FieldValidationError]:
        """Get all errors for a specific field."""
        return [e for e in self.errors if e.field_name == field_name]

    def to_error_dict(self) -> dict[str, list[str]]:
        """Convert errors to a dict mapping field names to error messages."""
        result: dict[str, list[str]] = {}
        for error in self.errors:
            result.setdefault(error.field_name, []).append(error.message)
        return result
