"""Tests for React form code generation."""

import json

import pytest

from form_builder import widgets
from form_builder.codegen import format_source, generate_code, get_target, zod_expression
from form_builder.constants import FORM_LIBRARIES
from form_builder.errors import UnknownLibraryError
from form_builder.models.field_definitions import FieldDescriptor
from form_builder.models.schema_output import ISO_DATE_PATTERN, FieldRule
from form_builder.schema import rule_for
from form_builder.variants import VARIANTS, VariantHandler
from conftest import make_field


class ExplodingHandler(VariantHandler):
    def generate_snippet(self, f, binding):
        raise RuntimeError("template error")


@pytest.fixture
def sample_fields():
    return [
        make_field("name_1", label="Username", required=True, placeholder="shadcn"),
        [
            make_field("first_name", label="First name"),
            make_field("last_name", label="Last name"),
        ],
        make_field("terms", "Checkbox", label="Accept terms", required=True),
        make_field("email", "Select", label="Email"),
    ]


class TestGenerateCode:
    """Tests for generate_code across libraries."""

    @pytest.mark.parametrize("library", FORM_LIBRARIES)
    def test_deterministic(self, sample_fields, library):
        """Test the same input gives byte-identical output."""
        assert generate_code(sample_fields, library) == generate_code(sample_fields, library)

    @pytest.mark.parametrize("library", FORM_LIBRARIES)
    def test_output_is_formatted(self, sample_fields, library):
        """Test formatting the output again changes nothing."""
        code = generate_code(sample_fields, library)
        assert format_source(code) == code
        assert code.startswith('"use client";\n')
        assert code.endswith("\n") and not code.endswith("\n\n")

    @pytest.mark.parametrize("library", FORM_LIBRARIES)
    def test_schema_declaration(self, sample_fields, library):
        """Test every library embeds the same zod schema."""
        code = generate_code(sample_fields, library)
        assert "const formSchema = z.object({" in code
        assert '  name_1: z.string().regex(/\\S/, { message: "Username is required" }),' in code
        assert 'import { z } from "zod";' in code
        assert "export default function MyForm() {" in code

    @pytest.mark.parametrize("library", FORM_LIBRARIES)
    def test_row_group_columns(self, sample_fields, library):
        """Test a two-member group is laid out on a 12-column grid."""
        code = generate_code(sample_fields, library)
        assert '<div className="grid grid-cols-12 gap-4">' in code
        assert code.count('<div className="col-span-6">') == 2

    def test_three_member_group(self):
        """Test three members take four columns each."""
        fields = [[make_field("a"), make_field("b"), make_field("c")]]
        code = generate_code(fields, "react-hook-form")
        assert code.count('<div className="col-span-4">') == 3

    @pytest.mark.parametrize("library", FORM_LIBRARIES)
    def test_unknown_variant_placeholder(self, library):
        """Test an unknown variant degrades to a comment without failing."""
        fields = [make_field("m1", "Mystery"), make_field("name_1", label="Username")]
        code = generate_code(fields, library)
        assert '{/* Unsupported field type: "Mystery" (m1) */}' in code
        assert "Username" in code

    def test_failing_template_placeholder(self, monkeypatch):
        """Test a template that raises degrades to a placeholder."""
        monkeypatch.setitem(VARIANTS, "Exploding", ExplodingHandler("Exploding", widgets.textarea_widget))
        code = generate_code([make_field("boom", "Exploding")], "react-hook-form")
        assert '{/* Unsupported field type: "Exploding" (boom) */}' in code

    def test_unknown_library(self, sample_fields):
        """Test an unsupported library identifier."""
        with pytest.raises(UnknownLibraryError):
            generate_code(sample_fields, "vue-form")
        with pytest.raises(UnknownLibraryError):
            get_target("")

    def test_imports_are_merged(self):
        """Test two Input fields import Input once."""
        code = generate_code([make_field("a"), make_field("b")], "react-hook-form")
        assert code.count('import { Input } from "@/components/ui/input";') == 1

    def test_empty_form(self):
        """Test an empty field list still yields a component."""
        code = generate_code([], "react-hook-form")
        assert "const formSchema = z.object({});" in code
        assert "defaultValues: {}," in code
        assert '<Button type="submit">Submit</Button>' in code


class TestLibraryTargets:
    """Tests for library-specific wiring."""

    def test_react_hook_form(self, sample_fields):
        """Test react-hook-form wiring."""
        code = generate_code(sample_fields, "react-hook-form")
        assert 'import { useForm } from "react-hook-form";' in code
        assert 'import { zodResolver } from "@hookform/resolvers/zod";' in code
        assert "resolver: zodResolver(formSchema)," in code
        assert 'name="name_1"' in code
        assert "<FormField" in code
        assert "onChange={(e) => field.onChange(e.target.value)}" in code
        assert "terms: false," in code

    def test_tanstack_form(self, sample_fields):
        """Test @tanstack/react-form wiring."""
        code = generate_code(sample_fields, "tanstack-form")
        assert 'import { useForm } from "@tanstack/react-form";' in code
        assert "<form.Field" in code
        assert "onChange: formSchema," in code
        assert "field.handleChange(e.target.value)" in code
        assert "FormField" not in code

    def test_bring_your_own(self, sample_fields):
        """Test plain React state wiring."""
        code = generate_code(sample_fields, "bring-your-own")
        assert 'import { useState } from "react";' in code
        assert "formSchema.safeParse(values)" in code
        assert 'setFieldValue("name_1", e.target.value)' in code
        assert "{errors.name_1 && (" in code
        assert "react-hook-form" not in code

    def test_options_are_emitted(self):
        """Test choice options come from the options extension key."""
        field = FieldDescriptor.model_validate({
            "variant": "Select",
            "name": "email",
            "options": ["a@example.com", "b@example.com"],
        })
        code = generate_code([field], "react-hook-form")
        assert 'const emailOptions = ["a@example.com", "b@example.com"];' in code

    def test_signature_input_ref(self):
        """Test Signature Input declares its canvas ref."""
        code = generate_code([make_field("sig", "Signature Input")], "react-hook-form")
        assert 'import { useRef } from "react";' in code
        assert "const sigCanvasRef = useRef<HTMLCanvasElement>(null);" in code

    def test_every_variant_generates(self):
        """Test each registered variant produces a control, not a placeholder."""
        fields = [make_field(f"f{i}", variant) for i, variant in enumerate(VARIANTS)]
        for library in FORM_LIBRARIES:
            code = generate_code(fields, library)
            assert "Unsupported field type" not in code


class TestZodExpression:
    """Tests for zod_expression."""

    def test_number(self):
        """Test numeric bounds and step."""
        rule = FieldRule(name="s", variant="Slider", kind="number", minimum=0, maximum=10, step=1, required=True)
        assert zod_expression(rule) == (
            'z.number().min(0, { message: "s must be at least 0" })'
            '.max(10, { message: "s must be at most 10" })'
            '.multipleOf(1, { message: "s must be a multiple of 1" })'
        )

    def test_optional_pattern_accepts_empty(self):
        """Test an optional patterned field allows an empty string."""
        expression = zod_expression(rule_for(make_field("phone", "Phone")))
        assert expression.startswith("z.string().regex(new RegExp(")
        assert expression.endswith('.or(z.literal("")).optional()')

    def test_agreement(self):
        """Test must-be-true booleans."""
        rule = rule_for(make_field("terms", "Checkbox", label="Terms", required=True))
        assert zod_expression(rule) == (
            'z.boolean().refine((value) => value === true, { message: "Terms must be accepted" })'
        )

    def test_array(self):
        """Test required arrays."""
        rule = rule_for(make_field("tags", "Tags Input", label="Tags", required=True))
        assert zod_expression(rule) == 'z.array(z.string()).min(1, { message: "Tags is required" })'

    def test_passthrough(self):
        """Test unknown variants."""
        assert zod_expression(rule_for(make_field("m", "Mystery"))) == "z.any()"
        assert zod_expression(rule_for(make_field("m", "Mystery", required=True))).startswith("z.any().refine(")

    def test_date_uses_iso_pattern(self):
        """Test dates are checked with the same ISO pattern as the JSON Schema export."""
        rule = rule_for(make_field("d", "Date Picker", label="Day", required=True))
        expression = zod_expression(rule)
        assert f".regex(new RegExp({json.dumps(ISO_DATE_PATTERN)}), " in expression
        assert "Date.parse" not in expression
        assert rule.to_json_schema()["allOf"][1] == {"pattern": ISO_DATE_PATTERN}


class TestFormatSource:
    """Tests for format_source."""

    def test_normalizes_whitespace(self):
        """Test tabs, trailing spaces and blank runs."""
        assert format_source("\n\na\t\n\n\n b  \n\n") == "a\n\n b\n"

    def test_idempotent(self):
        """Test formatting twice equals formatting once."""
        once = format_source("x\r\n\ty\n\n\n\nz")
        assert format_source(once) == once

    def test_empty(self):
        """Test empty input."""
        assert format_source("") == ""
        assert format_source("\n \n") == ""
