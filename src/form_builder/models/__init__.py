"""
Data models for the form builder.

This module contains Pydantic models for:
- Field descriptors and the grouped field list
- Derived validation schema (per-field rules)
- Validation results
"""

from form_builder.models.field_definitions import (
    FieldBindings,
    FieldDescriptor,
    FieldList,
    FieldOrGroup,
    FieldValue,
    column_span,
    field_names,
    iter_fields,
)
from form_builder.models.schema_output import (
    FieldRule,
    SchemaSpec,
)
from form_builder.models.validation_result import (
    FieldValidationError,
    ValidationResult,
)

__all__ = [
    # Field model
    "FieldBindings",
    "FieldDescriptor",
    "FieldList",
    "FieldOrGroup",
    "FieldValue",
    "column_span",
    "field_names",
    "iter_fields",
    # Schema output
    "FieldRule",
    "SchemaSpec",
    # Validation
    "FieldValidationError",
    "ValidationResult",
]
