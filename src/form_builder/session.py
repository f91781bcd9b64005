"""
Builder session.

``FormBuilderSession`` is the only writer of a field list. Each user
action replaces the list with a new snapshot; the preview artifacts
(JSON text, schema, defaults, code and rendered form) are pure
projections of the current snapshot and the selected library, cached
under a content fingerprint so repeated reads do not regenerate them.
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from form_builder.builder import (
    add_field,
    find_path,
    get_field,
    remove_field,
    reset_all,
    update_field,
)
from form_builder.codec import HydrationResult, hydrate, serialize
from form_builder.codegen import generate_code
from form_builder.config import get_config
from form_builder.constants import (
    FORM_LIBRARIES,
    FORM_LIBRARY_LABELS,
    LIBRARY_PREFERENCE_KEY,
    REACT_HOOK_FORM,
    SPECIAL_COMPONENTS,
)
from form_builder.errors import (
    ClipboardError,
    FieldNotFoundError,
    PreferenceStoreError,
    UnknownLibraryError,
)
from form_builder.models.field_definitions import FieldDescriptor, FieldList, iter_fields
from form_builder.models.schema_output import SchemaSpec
from form_builder.notifications import Clipboard, MemoryClipboard, Notifier
from form_builder.preferences import JsonFilePreferenceStore, PreferenceStore
from form_builder.render import RenderedForm, WidgetRegistry, render_form
from form_builder.schema import derive_defaults, derive_validation

logger = logging.getLogger(__name__)

ArtifactKind = Literal["json", "code", "schema"]

_ARTIFACT_LABELS = {"json": "JSON", "code": "Code", "schema": "Schema"}


def special_components(fields: FieldList) -> list[dict[str, str]]:
    """Components the consumer must add to their project to use the generated code."""
    used = {f.variant for f in iter_fields(fields)}
    return [
        {"variant": variant, "component": component}
        for variant, component in SPECIAL_COMPONENTS.items()
        if variant in used
    ]


def fingerprint(fields: FieldList, library: str) -> str:
    """Content hash of a field list and library."""
    payload = f"{library}\n{serialize(fields, indent=None)}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@dataclass
class PreviewArtifacts:
    """Everything the preview pane shows for one snapshot."""

    library: str
    fingerprint: str
    json_text: str
    schema: SchemaSpec
    defaults: dict[str, Any]
    code: str
    rendered: RenderedForm
    special_components: list[dict[str, str]] = field(default_factory=list)

    def text_for(self, kind: ArtifactKind) -> str:
        if kind == "json":
            return self.json_text
        if kind == "code":
            return self.code
        if kind == "schema":
            return json.dumps(self.schema.to_json_schema(), indent=get_config().indent_json_output)
        raise ValueError(f"Unknown artifact kind: {kind}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "library": self.library,
            "fingerprint": self.fingerprint,
            "json": self.json_text,
            "schema": self.schema.to_json_schema(),
            "defaults": self.defaults,
            "code": self.code,
            "layout": self.rendered.layout(),
            "unsupported": self.rendered.unsupported,
            "special_components": self.special_components,
        }


def build_artifacts(
    fields: FieldList,
    library: str,
    registry: WidgetRegistry | None = None,
) -> PreviewArtifacts:
    """
    Compute every preview artifact for ``fields``.

    Raises:
        UnknownLibraryError: If ``library`` is not supported.
    """
    schema = derive_validation(fields)
    defaults = derive_defaults(fields)
    return PreviewArtifacts(
        library=library,
        fingerprint=fingerprint(fields, library),
        json_text=serialize(fields),
        schema=schema,
        defaults=defaults,
        code=generate_code(fields, library),
        rendered=render_form(fields, registry=registry),
        special_components=special_components(fields),
    )


def resolve_library(library: str | None) -> str:
    """``library`` if supported, else the configured default."""
    if library in FORM_LIBRARIES:
        return library
    default = get_config().default_library
    return default if default in FORM_LIBRARIES else REACT_HOOK_FORM


class FormBuilderSession:
    """
    Owns the field list and the selected target library.

    The library preference is read from ``preferences`` when the session
    starts and written back by ``select_library``. Storage and clipboard
    failures are reported through ``notifier`` and never change the
    field list.
    """

    def __init__(
        self,
        fields: FieldList | None = None,
        preferences: PreferenceStore | None = None,
        notifier: Notifier | None = None,
        clipboard: Clipboard | None = None,
        registry: WidgetRegistry | None = None,
    ):
        self._fields: FieldList = list(fields or [])
        self.preferences = preferences if preferences is not None else JsonFilePreferenceStore()
        self.notifier = notifier if notifier is not None else Notifier()
        self.clipboard = clipboard if clipboard is not None else MemoryClipboard()
        self.registry = registry
        self._artifacts: PreviewArtifacts | None = None
        self.library = self._load_library()

    @property
    def fields(self) -> FieldList:
        """The current snapshot; never mutated after it is handed out."""
        return self._fields

    def _load_library(self) -> str:
        try:
            stored = self.preferences.get(LIBRARY_PREFERENCE_KEY)
        except PreferenceStoreError as e:
            self.notifier.error(f"Could not load saved form library: {e}")
            stored = None
        if stored is not None and stored not in FORM_LIBRARIES:
            logger.warning(f"Ignoring unknown stored form library '{stored}'")
        return resolve_library(stored)

    def select_library(self, library: str) -> str:
        """
        Switch the target library and persist the choice.

        Raises:
            UnknownLibraryError: If ``library`` is not supported.
        """
        if library not in FORM_LIBRARIES:
            raise UnknownLibraryError(
                f"Unknown form library '{library}'. Expected one of: {', '.join(FORM_LIBRARIES)}"
            )
        self.library = library
        logger.info(f"Selected form library {FORM_LIBRARY_LABELS[library]}")
        try:
            self.preferences.set(LIBRARY_PREFERENCE_KEY, library)
        except PreferenceStoreError as e:
            self.notifier.error(f"Could not save form library preference: {e}")
        return library

    def add_field(self, variant: str, insertion_index: int | None = None) -> FieldDescriptor:
        index = len(self._fields) if insertion_index is None else insertion_index
        self._fields, new_field = add_field(self._fields, variant, index)
        return new_field

    def edit_field(self, name: str, updates: Mapping[str, Any] | FieldDescriptor) -> FieldDescriptor:
        """
        Merge ``updates`` into the field called ``name``.

        Raises:
            FieldNotFoundError: If no field has that name.
            InvalidFieldError: If the result is not a valid field.
        """
        path = find_path(self._fields, name)
        if path is None:
            raise FieldNotFoundError(f"No field named '{name}'")
        self._fields = update_field(self._fields, path, updates)
        updated = get_field(self._fields, path)
        logger.info(f"Edited field {name}")
        return updated

    def remove_field(self, name: str) -> None:
        self._fields = remove_field(self._fields, name)

    def reset(self) -> None:
        logger.info("Reset form")
        self._fields = reset_all()

    def import_json(self, json_text: str) -> HydrationResult:
        """Replace the field list with imported JSON; on failure the current list is kept."""
        result = hydrate(json_text)
        if result.ok:
            self._fields = result.fields
            logger.info(f"Imported {len(list(iter_fields(result.fields)))} fields")
        return result

    def export_json(self) -> str:
        return serialize(self._fields)

    def artifacts(self) -> PreviewArtifacts:
        """Preview artifacts for the current snapshot and library."""
        key = fingerprint(self._fields, self.library)
        if self._artifacts is None or self._artifacts.fingerprint != key:
            self._artifacts = build_artifacts(self._fields, self.library, self.registry)
        return self._artifacts

    def copy_artifact(self, kind: ArtifactKind) -> bool:
        """Copy one artifact to the clipboard; returns whether it worked."""
        text = self.artifacts().text_for(kind)
        try:
            self.clipboard.write(text)
        except ClipboardError as e:
            logger.warning(f"Clipboard write failed: {e}")
            self.notifier.error("Failed to copy")
            return False
        self.notifier.success(f"{_ARTIFACT_LABELS[kind]} copied to clipboard")
        return True
