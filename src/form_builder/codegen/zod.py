"""
zod declarations for generated forms.

Each expression is written from the same ``FieldRule`` the preview
validates with, and carries the same messages, so generated forms reject
exactly what the preview rejects.
"""

from form_builder.jsx import js_number, js_string
from form_builder.models.schema_output import ISO_DATE_PATTERN, FieldRule, SchemaSpec

_PRESENT = (
    '(value) => value !== undefined && value !== null && value !== ""'
    " && !(Array.isArray(value) && value.length === 0)"
)


def _message(rule: FieldRule, error_type: str) -> str:
    return f"{{ message: {js_string(rule.message(error_type))} }}"


def _string_expression(rule: FieldRule) -> str:
    parts = ["z.string()"]
    if rule.required:
        parts.append(f".regex(/\\S/, {_message(rule, 'required')})")
    if rule.min_length is not None:
        parts.append(f".min({rule.min_length}, {_message(rule, 'min_length')})")
    if rule.max_length is not None:
        parts.append(f".max({rule.max_length}, {_message(rule, 'max_length')})")
    if rule.pattern is not None:
        parts.append(f".regex(new RegExp({js_string(rule.pattern)}), {_message(rule, 'pattern')})")
    if rule.kind == "date":
        parts.append(f".regex(new RegExp({js_string(ISO_DATE_PATTERN)}), {_message(rule, 'format')})")
    if not rule.required:
        # An empty answer skips the shape checks of an optional field
        if rule.has_shape_constraints:
            parts.append('.or(z.literal(""))')
        parts.append(".optional()")
    return "".join(parts)


def _number_expression(rule: FieldRule) -> str:
    parts = ["z.number()"]
    if rule.minimum is not None:
        parts.append(f".min({js_number(rule.minimum)}, {_message(rule, 'minimum')})")
    if rule.maximum is not None:
        parts.append(f".max({js_number(rule.maximum)}, {_message(rule, 'maximum')})")
    if rule.step:
        parts.append(f".multipleOf({js_number(rule.step)}, {_message(rule, 'step')})")
    if not rule.required:
        parts.append(".optional()")
    return "".join(parts)


def _boolean_expression(rule: FieldRule) -> str:
    parts = ["z.boolean()"]
    if rule.must_be_true:
        parts.append(f".refine((value) => value === true, {_message(rule, 'must_be_true')})")
    if not rule.required:
        parts.append(".optional()")
    return "".join(parts)


def _array_expression(rule: FieldRule) -> str:
    parts = ["z.array(z.string())"]
    if rule.required:
        parts.append(f".min(1, {_message(rule, 'required')})")
    if rule.min_items is not None:
        parts.append(f".min({rule.min_items}, {_message(rule, 'min_items')})")
    if rule.max_items is not None:
        parts.append(f".max({rule.max_items}, {_message(rule, 'max_items')})")
    if not rule.required:
        parts.append(".optional()")
    return "".join(parts)


def zod_expression(rule: FieldRule) -> str:
    """The zod schema expression for one rule."""
    if rule.kind in ("string", "date"):
        return _string_expression(rule)
    if rule.kind == "number":
        return _number_expression(rule)
    if rule.kind == "boolean":
        return _boolean_expression(rule)
    if rule.kind == "array":
        return _array_expression(rule)
    if rule.required:
        return f"z.any().refine({_PRESENT}, {_message(rule, 'required')})"
    return "z.any()"


def schema_declaration(spec: SchemaSpec, const_name: str = "formSchema") -> list[str]:
    """Lines declaring ``const formSchema = z.object({...})``."""
    if not spec.rules:
        return [f"const {const_name} = z.object({{}});"]
    lines = [f"const {const_name} = z.object({{"]
    for rule in spec.rules:
        lines.append(f"  {rule.name}: {zod_expression(rule)},")
    lines.append("});")
    return lines
