"""
Render dispatcher for the live preview.

Controls are looked up by variant in a widget registry and bound to the
callbacks of a ``FormState``, never to the field's static attributes.
Variants without a widget come back as an ``UnsupportedControl`` so the
rest of the preview still renders.
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from html import escape
from typing import Any, Mapping, Union

from form_builder.constants import GRID_COLUMNS
from form_builder.models.field_definitions import (
    FieldDescriptor,
    FieldList,
    column_span,
)
from form_builder.models.schema_output import SchemaSpec
from form_builder.models.validation_result import ValidationResult
from form_builder.schema import derive_defaults, derive_validation
from form_builder.variants import VARIANTS
from form_builder.widgets import (
    LiveBinding,
    RenderedControl,
    UnsupportedControl,
    WidgetRenderer,
)

logger = logging.getLogger(__name__)

Control = Union[RenderedControl, UnsupportedControl]


class WidgetRegistry:
    """Variant to widget renderer mapping."""

    def __init__(self, renderers: Mapping[str, WidgetRenderer] | None = None):
        self._renderers: dict[str, WidgetRenderer] = dict(renderers or {})

    def register(self, variant: str, renderer: WidgetRenderer) -> None:
        self._renderers[variant] = renderer

    def unregister(self, variant: str) -> None:
        self._renderers.pop(variant, None)

    def get(self, variant: str) -> WidgetRenderer | None:
        return self._renderers.get(variant)

    def __contains__(self, variant: object) -> bool:
        return variant in self._renderers

    @property
    def variants(self) -> list[str]:
        return list(self._renderers)

    def copy(self) -> "WidgetRegistry":
        return WidgetRegistry(self._renderers)


def default_registry() -> WidgetRegistry:
    """A registry holding the widget of every registered variant."""
    return WidgetRegistry({variant: handler.widget for variant, handler in VARIANTS.items()})


def render_control(
    f: FieldDescriptor,
    binding: LiveBinding,
    registry: WidgetRegistry | None = None,
    col_span: int = GRID_COLUMNS,
) -> Control:
    """
    Render one field bound to ``binding``.

    Returns:
        A ``RenderedControl``, or an ``UnsupportedControl`` when the variant
        has no widget or its widget fails.
    """
    registry = registry if registry is not None else default_registry()
    renderer = registry.get(f.variant)
    if renderer is None:
        logger.warning(f"No widget registered for variant '{f.variant}' (field {f.name})")
        return UnsupportedControl(field=f, col_span=col_span)

    bound = f.with_bindings(binding.as_field_bindings())
    try:
        control = renderer(bound, binding)
    except Exception as e:
        logger.warning(f"Widget for {f.variant} failed on field {f.name}: {e}")
        return UnsupportedControl(field=f, col_span=col_span, message=f"Could not render this field: {e}")
    control.col_span = col_span
    return control


class FormState:
    """
    Live values of a previewed form.

    Values start from the derived defaults; every binding handed to a
    control writes back into ``values``.
    """

    def __init__(self, fields: FieldList, schema: SchemaSpec | None = None, defaults: dict[str, Any] | None = None):
        self.schema = schema if schema is not None else derive_validation(fields)
        self.values: dict[str, Any] = dict(defaults if defaults is not None else derive_defaults(fields))
        self.touched: set[str] = set()

    def set_value(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.touched.add(name)

    def binding_for(self, f: FieldDescriptor) -> LiveBinding:
        setter = partial(self.set_value, f.name)
        return LiveBinding(
            value=self.values.get(f.name),
            on_change=setter,
            on_select=setter,
            set_value=setter,
        )

    def validate(self) -> ValidationResult:
        return self.schema.validate_data(self.values)

    def field_errors(self, name: str) -> list[str]:
        return [e.message for e in self.validate().get_field_errors(name)]


@dataclass
class RenderedRow:
    """One grid row: a standalone field or the members of a row group."""

    controls: list[Control]
    grouped: bool = False

    @property
    def spans(self) -> list[int]:
        return [c.col_span for c in self.controls]

    def to_html(self) -> str:
        cells = "".join(
            f'<div class="col-span-{c.col_span}">{c.html}</div>'
            for c in self.controls
        )
        return f'<div class="grid grid-cols-{GRID_COLUMNS} gap-4">{cells}</div>'


@dataclass
class RenderedForm:
    """The rendered preview of a whole field list."""

    rows: list[RenderedRow] = field(default_factory=list)

    @property
    def controls(self) -> list[Control]:
        return [c for row in self.rows for c in row.controls]

    @property
    def unsupported(self) -> list[str]:
        return [c.name for c in self.controls if not c.supported]

    def get(self, name: str) -> Control | None:
        for control in self.controls:
            if control.name == name:
                return control
        return None

    def layout(self) -> list[list[tuple[str, int]]]:
        """``(name, column span)`` pairs per row."""
        return [[(c.name, c.col_span) for c in row.controls] for row in self.rows]

    def to_html(self, title: str = "Form preview") -> str:
        rows = "\n".join(row.to_html() for row in self.rows)
        return (
            f'<form class="form-preview" aria-label="{escape(title)}">\n'
            f"{rows}\n"
            '<button type="submit">Submit</button>\n'
            "</form>"
        )


def render_form(
    fields: FieldList,
    state: FormState | None = None,
    registry: WidgetRegistry | None = None,
) -> RenderedForm:
    """Render every field of ``fields`` in order, laying row groups out in columns."""
    state = state if state is not None else FormState(fields)
    registry = registry if registry is not None else default_registry()

    rows = []
    for item in fields:
        if isinstance(item, list):
            span = column_span(len(item))
            controls = [render_control(f, state.binding_for(f), registry, span) for f in item]
            rows.append(RenderedRow(controls=controls, grouped=True))
        else:
            rows.append(RenderedRow(controls=[render_control(item, state.binding_for(item), registry)]))
    return RenderedForm(rows=rows)
