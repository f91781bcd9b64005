"""
Schema derivation.

Turns a field list into the validation schema and the default-value map
consumed by the form-state layer. Both walk the flattened list, so row
group members are covered like top-level fields.
"""

from typing import Any

from form_builder.models.field_definitions import FieldDescriptor, FieldList, iter_fields
from form_builder.models.schema_output import FieldRule, SchemaSpec
from form_builder.variants import get_handler


def rule_for(f: FieldDescriptor) -> FieldRule:
    """
    Validation rule for one field.

    Unknown variants get a passthrough rule that only checks presence.
    """
    handler = get_handler(f.variant)
    if handler is None:
        return FieldRule(
            name=f.name,
            variant=f.variant,
            label=f.label,
            kind="any",
            required=f.is_required,
        )
    return handler.validation_rule(f)


def default_for(f: FieldDescriptor) -> Any:
    """The field's value when it fits the variant, else the variant's empty value."""
    handler = get_handler(f.variant)
    if handler is None:
        return f.value if f.value is not None else ""
    return handler.default_value(f)


def derive_validation(fields: FieldList) -> SchemaSpec:
    """Build the validation schema for a field list, one rule per field."""
    return SchemaSpec(rules=[rule_for(f) for f in iter_fields(fields)])


def derive_defaults(fields: FieldList) -> dict[str, Any]:
    """Map every field name (group members included) to its initial value."""
    return {f.name: default_for(f) for f in iter_fields(fields)}
