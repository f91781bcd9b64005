"""Tests for the builder session, preferences and notifications."""

import json

import pytest

from form_builder.constants import LIBRARY_PREFERENCE_KEY
from form_builder.errors import (
    FieldNotFoundError,
    InvalidFieldError,
    PreferenceStoreError,
    UnknownLibraryError,
)
from form_builder.notifications import MemoryClipboard, Notifier, UnavailableClipboard
from form_builder.preferences import JsonFilePreferenceStore, MemoryPreferenceStore, PreferenceStore
from form_builder.session import FormBuilderSession, resolve_library, special_components
from conftest import make_field


class BrokenPreferenceStore(PreferenceStore):
    def get(self, key):
        raise PreferenceStoreError("storage disabled")

    def set(self, key, value):
        raise PreferenceStoreError("storage disabled")


class TestLibrarySelection:
    """Tests for the selected library and its preference."""

    def test_loads_stored_library(self):
        """Test the stored preference is used on start."""
        session = FormBuilderSession(preferences=MemoryPreferenceStore({LIBRARY_PREFERENCE_KEY: "tanstack-form"}))
        assert session.library == "tanstack-form"

    def test_unknown_stored_library_falls_back(self):
        """Test an unknown stored value is ignored."""
        session = FormBuilderSession(preferences=MemoryPreferenceStore({LIBRARY_PREFERENCE_KEY: "vue"}))
        assert session.library == resolve_library(None)

    def test_select_persists(self, session, preferences):
        """Test selecting a library writes the preference."""
        session.select_library("bring-your-own")
        assert session.library == "bring-your-own"
        assert preferences.get(LIBRARY_PREFERENCE_KEY) == "bring-your-own"

    def test_select_unknown(self, session):
        """Test unknown identifiers are rejected."""
        with pytest.raises(UnknownLibraryError):
            session.select_library("angular-forms")

    def test_storage_failure_is_reported(self):
        """Test preference errors become error toasts."""
        notifier = Notifier()
        session = FormBuilderSession(preferences=BrokenPreferenceStore(), notifier=notifier)
        assert session.library == resolve_library(None)
        assert notifier.last.kind == "error"

        session.select_library("tanstack-form")
        assert session.library == "tanstack-form"
        assert notifier.last.message.startswith("Could not save form library preference")


class TestFieldEditing:
    """Tests for session field operations."""

    def test_add_edit_remove(self, session):
        """Test a full editing round."""
        field = session.add_field("Input")
        assert field.row_index == 0
        second = session.add_field("Switch")
        assert second.row_index == 1

        updated = session.edit_field(field.name, {"label": "Login"})
        assert updated.label == "Login"
        assert session.fields[0].label == "Login"

        session.remove_field(second.name)
        assert [f.name for f in session.fields] == [field.name]

        session.reset()
        assert session.fields == []

    def test_snapshots_are_not_mutated(self, session):
        """Test an earlier snapshot is unchanged by later edits."""
        field = session.add_field("Input")
        snapshot = session.fields
        session.edit_field(field.name, {"label": "Changed"})
        session.add_field("Switch")
        assert len(snapshot) == 1
        assert snapshot[0].label == "Username"

    def test_edit_errors(self, session):
        """Test edits of missing or invalid fields."""
        field = session.add_field("Input")
        with pytest.raises(FieldNotFoundError):
            session.edit_field("missing", {"label": "x"})
        with pytest.raises(InvalidFieldError):
            session.edit_field(field.name, {"required": "yes"})
        assert session.fields[0].required is True

    def test_import_and_export(self, session):
        """Test importing JSON replaces the list and exports it back."""
        text = json.dumps([{"variant": "Input", "name": "a", "label": "A"}])
        result = session.import_json(text)
        assert result.ok
        assert json.loads(session.export_json()) == [
            {"variant": "Input", "name": "a", "label": "A", "type": "", "checked": True, "disabled": False}
        ]

    def test_failed_import_keeps_fields(self, session):
        """Test a bad import leaves the current list in place."""
        session.add_field("Input")
        before = session.fields
        result = session.import_json("{not valid")
        assert not result.ok
        assert session.fields is before


class TestArtifacts:
    """Tests for preview artifacts."""

    def test_memoized(self, session):
        """Test unchanged input reuses the cached artifacts."""
        session.add_field("Input")
        first = session.artifacts()
        assert session.artifacts() is first

    def test_recomputed_on_change(self, session):
        """Test edits and library changes invalidate the cache."""
        field = session.add_field("Input")
        first = session.artifacts()

        session.edit_field(field.name, {"label": "Login"})
        second = session.artifacts()
        assert second is not first
        assert "Login" in second.code

        session.select_library("tanstack-form")
        third = session.artifacts()
        assert third.library == "tanstack-form"
        assert "<form.Field" in third.code

    def test_to_dict(self, session):
        """Test the serializable view of the artifacts."""
        session.add_field("Phone")
        data = session.artifacts().to_dict()
        assert set(data) == {
            "library",
            "fingerprint",
            "json",
            "schema",
            "defaults",
            "code",
            "layout",
            "unsupported",
            "special_components",
        }
        assert data["special_components"] == [{"variant": "Phone", "component": "PhoneInput"}]

    def test_special_components(self):
        """Test only variants needing extra components are listed, once each."""
        fields = [make_field("a"), [make_field("b", "Phone"), make_field("c", "Phone")], make_field("d", "Combobox")]
        assert special_components(fields) == [
            {"variant": "Combobox", "component": "Command + Popover"},
            {"variant": "Phone", "component": "PhoneInput"},
        ]


class TestClipboard:
    """Tests for copying artifacts."""

    def test_copy_code(self, session):
        """Test a successful copy."""
        session.add_field("Input")
        assert session.copy_artifact("code") is True
        assert session.clipboard.text == session.artifacts().code
        assert session.notifier.last.kind == "success"
        assert session.notifier.last.message == "Code copied to clipboard"

    def test_copy_json_and_schema(self, session):
        """Test the JSON and schema views can be copied."""
        session.add_field("Input")
        session.copy_artifact("json")
        assert session.clipboard.text == session.export_json()
        session.copy_artifact("schema")
        assert json.loads(session.clipboard.text)["type"] == "object"
        assert session.notifier.last.message == "Schema copied to clipboard"

    def test_copy_failure(self):
        """Test a failing clipboard reports an error and changes nothing."""
        notifier = Notifier()
        session = FormBuilderSession(
            preferences=MemoryPreferenceStore(),
            notifier=notifier,
            clipboard=UnavailableClipboard(),
        )
        session.add_field("Input")
        before = session.fields
        assert session.copy_artifact("code") is False
        assert notifier.last.kind == "error"
        assert notifier.last.message == "Failed to copy"
        assert session.fields is before


class TestPreferenceStores:
    """Tests for preference stores."""

    def test_json_file_store(self, tmp_path):
        """Test values persist across store instances."""
        path = tmp_path / "prefs" / "preferences.json"
        JsonFilePreferenceStore(path).set(LIBRARY_PREFERENCE_KEY, "tanstack-form")
        assert JsonFilePreferenceStore(path).get(LIBRARY_PREFERENCE_KEY) == "tanstack-form"
        assert JsonFilePreferenceStore(path).get("other") is None

    def test_missing_file(self, tmp_path):
        """Test a missing file reads as empty."""
        assert JsonFilePreferenceStore(tmp_path / "none.json").get(LIBRARY_PREFERENCE_KEY) is None

    def test_corrupt_file(self, tmp_path):
        """Test an unreadable file raises and is overwritten on set."""
        path = tmp_path / "preferences.json"
        path.write_text("{broken", encoding="utf-8")
        store = JsonFilePreferenceStore(path)
        with pytest.raises(PreferenceStoreError):
            store.get(LIBRARY_PREFERENCE_KEY)

        store.set(LIBRARY_PREFERENCE_KEY, "bring-your-own")
        assert store.get(LIBRARY_PREFERENCE_KEY) == "bring-your-own"

    def test_session_with_file_store(self, tmp_path):
        """Test a new session picks up the previous session's choice."""
        path = tmp_path / "preferences.json"
        FormBuilderSession(preferences=JsonFilePreferenceStore(path)).select_library("tanstack-form")
        assert FormBuilderSession(preferences=JsonFilePreferenceStore(path)).library == "tanstack-form"


class TestNotifier:
    """Tests for the notifier."""

    def test_records_in_order(self):
        """Test toasts are kept in order."""
        notifier = Notifier()
        notifier.info("one")
        notifier.success("two")
        assert [t.message for t in notifier.toasts] == ["one", "two"]
        notifier.clear()
        assert notifier.last is None

    def test_memory_clipboard(self):
        """Test the memory clipboard keeps the last text."""
        clipboard = MemoryClipboard()
        clipboard.write("a")
        clipboard.write("b")
        assert clipboard.text == "b"
