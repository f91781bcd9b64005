"""Tests for schema and default-value derivation."""

import pytest
from jsonschema import Draft202012Validator

from form_builder.codec import hydrate
from form_builder.constants import FIELD_TYPES
from form_builder.models.schema_output import ISO_DATE_PATTERN, NON_BLANK_PATTERN
from form_builder.schema import default_for, derive_defaults, derive_validation, rule_for
from form_builder.variants import VARIANTS
from conftest import make_field


class TestDeriveValidation:
    """Tests for derive_validation."""

    def test_required_text_field(self):
        """Test a required Input rejects an empty value and accepts text."""
        fields = hydrate('[{"variant":"Input","name":"name_1","label":"Username","required":true}]').fields
        schema = derive_validation(fields)
        defaults = derive_defaults(fields)

        assert defaults == {"name_1": ""}
        result = schema.validate_data(defaults)
        assert not result.is_valid
        assert result.get_field_errors("name_1")[0].message == "Username is required"
        assert schema.validate_data({"name_1": "alice"}).is_valid

    def test_optional_text_field(self):
        """Test an optional Input accepts empty or absent values."""
        schema = derive_validation([make_field("a")])
        assert schema.validate_data({"a": ""}).is_valid
        assert schema.validate_data({}).is_valid

    def test_covers_group_members(self, grouped_fields):
        """Test one rule per flattened field."""
        schema = derive_validation(grouped_fields)
        assert schema.field_names == ["username", "first_name", "last_name"]

    @pytest.mark.parametrize("variant", FIELD_TYPES)
    def test_every_palette_variant_has_a_handler(self, variant):
        """Test each palette entry is registered."""
        assert variant in VARIANTS
        assert rule_for(make_field("f", variant)).kind != "any"

    def test_agreement_checkbox(self):
        """Test a required Checkbox must be ticked."""
        schema = derive_validation([make_field("terms", "Checkbox", required=True)])
        result = schema.validate_data({"terms": False})
        assert result.errors[0].error_type == "must_be_true"
        assert schema.validate_data({"terms": True}).is_valid

    def test_switch_only_needs_a_value(self):
        """Test a required Switch accepts false."""
        schema = derive_validation([make_field("news", "Switch", required=True)])
        assert schema.validate_data({"news": False}).is_valid

    def test_slider_bounds(self):
        """Test Slider rules take the field's min/max/step."""
        field = make_field("price", "Slider", min=0, max=10, step=2)
        rule = rule_for(field)
        assert (rule.minimum, rule.maximum, rule.step) == (0, 10, 2)

        schema = derive_validation([field])
        assert schema.validate_data({"price": 4}).is_valid
        assert schema.validate_data({"price": 3}).errors[0].error_type == "step"
        assert schema.validate_data({"price": 12}).errors[0].error_type == "maximum"

    def test_otp(self):
        """Test the one-time code must be six digits."""
        schema = derive_validation([make_field("otp", "Input OTP", required=True)])
        types = {e.error_type for e in schema.validate_data({"otp": "12345"}).errors}
        assert types == {"min_length", "pattern"}
        assert schema.validate_data({"otp": "123456"}).is_valid

    def test_phone(self):
        """Test phone numbers must match the pattern."""
        schema = derive_validation([make_field("phone", "Phone", required=True)])
        assert schema.validate_data({"phone": "+14155550123"}).is_valid
        assert schema.validate_data({"phone": "call me"}).errors[0].error_type == "pattern"

    def test_optional_phone_may_be_empty(self):
        """Test shape constraints do not apply to an empty optional value."""
        schema = derive_validation([make_field("phone", "Phone")])
        assert schema.validate_data({"phone": ""}).is_valid

    def test_multi_select(self):
        """Test a required Multi Select needs one item."""
        schema = derive_validation([make_field("fw", "Multi Select", required=True)])
        assert schema.validate_data({"fw": []}).errors[0].error_type == "required"
        assert schema.validate_data({"fw": ["React"]}).is_valid

    def test_location_pair(self):
        """Test Location Input holds at most country and state."""
        schema = derive_validation([make_field("loc", "Location Input")])
        assert schema.validate_data({"loc": ["France", "Paris"]}).is_valid
        assert schema.validate_data({"loc": ["a", "b", "c"]}).errors[0].error_type == "max_items"

    def test_dates(self):
        """Test date variants parse their values."""
        schema = derive_validation([make_field("d", "Date Picker", required=True)])
        assert schema.validate_data({"d": "2024-01-01"}).is_valid
        assert schema.validate_data({"d": "2024-01-01T10:00:00.000Z"}).is_valid
        assert schema.validate_data({"d": "someday"}).errors[0].error_type == "format"
        assert schema.validate_data({"d": "May 1, 2024"}).errors[0].error_type == "format"
        assert schema.to_json_schema()["properties"]["d"]["allOf"][1] == {"pattern": ISO_DATE_PATTERN}

    def test_locale_does_not_change_rule(self):
        """Test locale and hour12 are display-only."""
        plain = rule_for(make_field("when", "Smart Datetime Input"))
        localized = rule_for(make_field("when", "Smart Datetime Input", locale="fr", hour12=True))
        assert plain == localized

    def test_unknown_variant_is_passthrough(self):
        """Test unknown variants only check presence."""
        rule = rule_for(make_field("m", "Mystery", required=True))
        assert rule.kind == "any"
        schema = derive_validation([make_field("m", "Mystery", required=True)])
        assert not schema.validate_data({"m": ""}).is_valid
        assert schema.validate_data({"m": {"anything": 1}}).is_valid

    def test_json_schema_export(self):
        """Test the JSON Schema view of a derived schema."""
        schema = derive_validation([
            make_field("name_1", label="Username", required=True),
            make_field("terms", "Checkbox", required=True),
        ])
        exported = schema.to_json_schema()
        assert exported["required"] == ["name_1", "terms"]
        assert exported["properties"]["name_1"]["pattern"] == NON_BLANK_PATTERN
        assert exported["properties"]["terms"]["const"] is True

    @pytest.mark.parametrize("data", [
        {"u": "   ", "p": "+14155550123"},
        {"u": "", "p": ""},
        {"u": "alice", "p": ""},
        {"u": "alice", "p": "call me"},
        {"u": "alice", "p": "+14155550123"},
        {"u": "alice"},
        {"p": ""},
        {"u": None},
        {"u": 5},
        {"u": "alice", "d": "2024-01-01"},
        {"u": "alice", "d": "01/02/2024"},
        {"u": "alice", "d": ""},
        {"u": "alice", "otp": "12345"},
        {"u": "alice", "otp": " 123456"},
        {"u": "alice", "tags": []},
        {"u": "alice", "tags": [1]},
    ])
    def test_validation_agrees_with_json_schema_export(self, data):
        """Test live validation accepts exactly what the exported JSON Schema accepts."""
        schema = derive_validation([
            make_field("u", label="User", required=True),
            make_field("p", "Phone"),
            make_field("d", "Date Picker"),
            make_field("otp", "Input OTP"),
            make_field("tags", "Tags Input"),
        ])
        exported_valid = Draft202012Validator(schema.to_json_schema()).is_valid(data)
        assert schema.validate_data(data).is_valid == exported_valid

    def test_blank_required_text(self):
        """Test whitespace does not satisfy a required field in either view."""
        schema = derive_validation([make_field("u", label="User", required=True)])
        exported = Draft202012Validator(schema.to_json_schema())
        assert not exported.is_valid({"u": "   "})
        result = schema.validate_data({"u": "   "})
        assert [e.message for e in result.errors] == ["User is required"]

    def test_optional_empty_pattern_field(self):
        """Test an empty optional phone passes both views while a bad one fails both."""
        schema = derive_validation([make_field("p", "Phone")])
        exported = Draft202012Validator(schema.to_json_schema())
        assert exported.is_valid({"p": ""})
        assert schema.validate_data({"p": ""}).is_valid
        assert not exported.is_valid({"p": "call me"})
        assert schema.validate_data({"p": "call me"}).errors[0].error_type == "pattern"


class TestDeriveDefaults:
    """Tests for derive_defaults."""

    def test_empty_values_by_kind(self):
        """Test each value kind has its own empty default."""
        defaults = derive_defaults([
            make_field("text", value=""),
            make_field("flag", "Switch", value=""),
            make_field("price", "Slider", value=""),
            make_field("tags", "Tags Input", value=""),
            make_field("when", "Date Picker"),
        ])
        assert defaults == {"text": "", "flag": False, "price": 0, "tags": [], "when": ""}

    def test_keeps_fitting_values(self):
        """Test values that fit the variant are used."""
        defaults = derive_defaults([
            make_field("text", value="hello"),
            make_field("flag", "Switch", value=True),
            make_field("price", "Slider", value=40),
            make_field("tags", "Tags Input", value=["a"]),
        ])
        assert defaults == {"text": "hello", "flag": True, "price": 40, "tags": ["a"]}

    def test_numeric_default_uses_min(self):
        """Test a numeric field without a value starts at its minimum."""
        assert default_for(make_field("price", "Slider", min=5, max=10)) == 5

    def test_unknown_variant(self):
        """Test unknown variants keep their value or start empty."""
        assert default_for(make_field("m", "Mystery")) == ""
        assert default_for(make_field("m", "Mystery", value=["x"])) == ["x"]

    def test_group_members_included(self, grouped_fields):
        """Test defaults cover row group members."""
        assert set(derive_defaults(grouped_fields)) == {"username", "first_name", "last_name"}

    def test_tags_default_is_a_copy(self):
        """Test list defaults do not alias the field's value."""
        field = make_field("tags", "Tags Input", value=["a"])
        default_for(field).append("b")
        assert field.value == ["a"]
