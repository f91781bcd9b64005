"""Tests for field list operations."""

import re

import pytest

from form_builder import builder
from form_builder.builder import (
    add_field,
    create_field,
    find_path,
    generate_field_name,
    get_field,
    remove_field,
    reset_all,
    update_field,
)
from form_builder.codec import hydrate
from form_builder.errors import FieldNotFoundError, InvalidFieldError
from form_builder.models.field_definitions import FieldBindings, field_names
from conftest import make_field


class TestFieldNames:
    """Tests for generated field names."""

    def test_name_format(self):
        """Test generated names use the name_ prefix and ten digits."""
        assert re.fullmatch(r"name_\d{10}", generate_field_name())

    def test_avoids_existing_names(self, monkeypatch):
        """Test a colliding candidate is drawn again."""
        digits = iter("0" * 10 + "1" * 10)
        monkeypatch.setattr(builder.secrets, "choice", lambda seq: next(digits))

        assert generate_field_name(["name_0000000000"]) == "name_1111111111"


class TestCreateField:
    """Tests for new field defaults."""

    def test_known_variant_defaults(self):
        """Test palette defaults are applied."""
        field = create_field("Input", insertion_index=3)
        assert field.variant == "Input"
        assert field.label == "Username"
        assert field.placeholder == "shadcn"
        assert field.description == "This is your public display name."
        assert field.required is True
        assert field.checked is True
        assert field.disabled is False
        assert field.value == ""
        assert field.row_index == 3

    def test_unknown_variant_defaults(self):
        """Test an unknown variant falls back to the name and a generic placeholder."""
        field = create_field("Mystery")
        assert field.label == field.name
        assert field.description == ""
        assert field.placeholder == "Placeholder"


class TestAddField:
    """Tests for add_field."""

    def test_appends_without_mutating(self):
        """Test the new field is appended to a new list."""
        original = [make_field("a")]
        updated, field = add_field(original, "Switch", 1)

        assert len(original) == 1
        assert updated[0] is original[0]
        assert updated[-1] is field
        assert field.variant == "Switch"
        assert field.row_index == 1

    def test_names_stay_unique(self):
        """Test repeated adds produce distinct names."""
        fields = []
        for _ in range(20):
            fields, _field = add_field(fields, "Input")
        assert len(set(field_names(fields))) == 20


class TestFindPath:
    """Tests for find_path and get_field."""

    def test_top_level_and_group_paths(self, grouped_fields):
        """Test paths address top-level fields and group members."""
        assert find_path(grouped_fields, "username") == [0]
        assert find_path(grouped_fields, "last_name") == [1, 1]
        assert find_path(grouped_fields, "missing") is None

    def test_get_field(self, grouped_fields):
        """Test get_field resolves a path."""
        assert get_field(grouped_fields, [1, 0]).name == "first_name"
        with pytest.raises(FieldNotFoundError):
            get_field(grouped_fields, [1])
        with pytest.raises(FieldNotFoundError):
            get_field(grouped_fields, [5])


class TestUpdateField:
    """Tests for update_field."""

    def test_updates_group_member(self, grouped_fields):
        """Test only the edited path is copied."""
        updated = update_field(grouped_fields, [1, 1], {"label": "Surname"})

        assert updated[1][1].label == "Surname"
        assert grouped_fields[1][1].label == "Last name"
        assert updated[0] is grouped_fields[0]
        assert updated[1][0] is grouped_fields[1][0]
        assert updated[1] is not grouped_fields[1]

    def test_accepts_json_names(self, grouped_fields):
        """Test updates may use className/rowIndex."""
        updated = update_field(grouped_fields, [0], {"className": "w-1/2", "rowIndex": 4})
        assert updated[0].class_name == "w-1/2"
        assert updated[0].row_index == 4

    def test_keeps_extension_spelled_like_attribute(self):
        """Test an imported class_name key stays an extension through an edit."""
        fields = hydrate('[{"variant":"Input","name":"a","class_name":"c"}]').fields
        updated = update_field(fields, [0], {"label": "B"})
        assert updated[0].label == "B"
        assert updated[0].class_name is None
        assert updated[0].extensions == {"class_name": "c"}

    def test_binding_keys_in_updates_are_ignored(self, grouped_fields):
        """Test callbacks in an update payload never become attributes."""
        updated = update_field(grouped_fields, [0], {"label": "B", "onChange": "x", "setValue": "y"})
        assert updated[0].extensions == {}

    def test_keeps_bindings(self):
        """Test call-time bindings survive an edit."""
        calls = []
        field = make_field("a").with_bindings(FieldBindings(set_value=calls.append))
        updated = update_field([field], [0], {"label": "A", "setValue": None})

        updated[0].bindings.set_value("x")
        assert calls == ["x"]

    def test_rejects_invalid_update(self, grouped_fields):
        """Test a wrongly typed update is rejected."""
        with pytest.raises(InvalidFieldError):
            update_field(grouped_fields, [0], {"disabled": "yes"})

    def test_rejects_rename_collision(self, grouped_fields):
        """Test renaming onto a taken name is rejected."""
        with pytest.raises(InvalidFieldError):
            update_field(grouped_fields, [0], {"name": "first_name"})

    def test_allows_rename(self, grouped_fields):
        """Test renaming to a free name."""
        updated = update_field(grouped_fields, [0], {"name": "login"})
        assert field_names(updated) == ["login", "first_name", "last_name"]

    def test_bad_path(self, grouped_fields):
        """Test paths that do not address a field."""
        with pytest.raises(FieldNotFoundError):
            update_field(grouped_fields, [], {"label": "x"})
        with pytest.raises(FieldNotFoundError):
            update_field(grouped_fields, [9], {"label": "x"})


class TestRemoveField:
    """Tests for remove_field and reset_all."""

    def test_remove_top_level(self, grouped_fields):
        """Test removing a standalone field."""
        updated = remove_field(grouped_fields, "username")
        assert field_names(updated) == ["first_name", "last_name"]
        assert field_names(grouped_fields) == ["username", "first_name", "last_name"]

    def test_empty_group_is_dropped(self, grouped_fields):
        """Test a group losing its last member disappears."""
        updated = remove_field(grouped_fields, "first_name")
        assert len(updated[1]) == 1
        updated = remove_field(updated, "last_name")
        assert len(updated) == 1
        assert updated[0].name == "username"

    def test_remove_missing(self, grouped_fields):
        """Test removing an unknown name."""
        with pytest.raises(FieldNotFoundError):
            remove_field(grouped_fields, "missing")

    def test_reset_all(self):
        """Test reset produces an empty list."""
        assert reset_all() == []
