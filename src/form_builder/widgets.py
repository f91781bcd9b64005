"""
Preview widgets.

Each widget kind turns a field plus its live binding into a
``RenderedControl``: the control's properties, the callbacks it is wired
to and an HTML fragment for the preview pane.
"""

import json
from dataclasses import dataclass, field
from html import escape
from typing import Any, Callable

from form_builder.constants import GRID_COLUMNS, MAX_RATING_STARS, OTP_LENGTH, UNSUPPORTED_MESSAGE
from form_builder.models.field_definitions import FieldBindings, FieldDescriptor


def _noop(*args: Any) -> None:
    return None


@dataclass
class LiveBinding:
    """Callbacks and current value supplied by the form-state layer."""

    value: Any = None
    on_change: Callable[[Any], None] = _noop
    on_select: Callable[[Any], None] = _noop
    set_value: Callable[[Any], None] = _noop

    def as_field_bindings(self) -> FieldBindings:
        return FieldBindings(
            set_value=self.set_value,
            on_change=self.on_change,
            on_select=self.on_select,
        )


@dataclass
class RenderedControl:
    """A control ready to be placed in the preview."""

    field: FieldDescriptor
    widget: str
    binding: LiveBinding
    props: dict[str, Any] = field(default_factory=dict)
    html: str = ""
    col_span: int = GRID_COLUMNS

    supported = True

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def variant(self) -> str:
        return self.field.variant


@dataclass
class UnsupportedControl:
    """Marker returned for a variant with no registered widget."""

    field: FieldDescriptor
    col_span: int = GRID_COLUMNS
    message: str = UNSUPPORTED_MESSAGE

    supported = False

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def variant(self) -> str:
        return self.field.variant

    @property
    def html(self) -> str:
        label = escape(self.field.label or self.field.name)
        return (
            f'<div class="form-item unsupported" data-name="{escape(self.name)}">'
            f"<label>{label}</label>"
            f'<div class="unsupported-control">Unsupported field type: &quot;{escape(self.variant)}&quot;</div>'
            f'<p class="error">{escape(self.message)}</p>'
            "</div>"
        )


WidgetRenderer = Callable[[FieldDescriptor, LiveBinding], RenderedControl]


def _attrs(props: dict[str, Any]) -> str:
    parts = []
    for key, value in props.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(key)
        else:
            parts.append(f'{key}="{escape(str(value))}"')
    return (" " + " ".join(parts)) if parts else ""


def _wrap(f: FieldDescriptor, control_html: str, inline_label: bool = False) -> str:
    label = escape(f.label or f.name)
    required = ' <span class="required">*</span>' if f.required else ""
    description = f'<p class="description">{escape(f.description)}</p>' if f.description else ""
    if inline_label:
        body = f'<label class="inline">{control_html} {label}{required}</label>'
    else:
        body = f'<label for="{escape(f.name)}">{label}{required}</label>{control_html}'
    return f'<div class="form-item" data-name="{escape(f.name)}">{body}{description}</div>'


def _text_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def field_options(f: FieldDescriptor, fallback: list[str]) -> list[str]:
    """Choices from the ``options`` extension key, else ``fallback``."""
    options = f.extensions.get("options")
    if isinstance(options, list) and all(isinstance(o, str) for o in options):
        return options
    return fallback


def input_widget(input_type: str, **extra: Any) -> WidgetRenderer:
    """Single ``<input>`` widget of the given HTML type."""

    def render(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
        props = {
            "id": f.name,
            "name": f.name,
            "type": input_type,
            "placeholder": f.placeholder,
            "value": _text_value(binding.value),
            "disabled": f.disabled,
            "required": bool(f.required),
            "class": f.class_name,
            **extra,
        }
        return RenderedControl(
            field=f,
            widget=f"input:{input_type}",
            binding=binding,
            props=props,
            html=_wrap(f, f"<input{_attrs(props)}>"),
        )

    return render


def textarea_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    props = {
        "id": f.name,
        "name": f.name,
        "placeholder": f.placeholder,
        "disabled": f.disabled,
        "class": f.class_name,
    }
    control = f"<textarea{_attrs(props)}>{escape(_text_value(binding.value))}</textarea>"
    return RenderedControl(field=f, widget="textarea", binding=binding, props=props, html=_wrap(f, control))


def toggle_widget(role: str) -> WidgetRenderer:
    """Checkbox or switch."""

    def render(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
        props = {
            "id": f.name,
            "name": f.name,
            "type": "checkbox",
            "role": "switch" if role == "switch" else None,
            "checked": binding.value is True,
            "disabled": f.disabled,
            "class": f.class_name,
        }
        return RenderedControl(
            field=f,
            widget=role,
            binding=binding,
            props=props,
            html=_wrap(f, f"<input{_attrs(props)}>", inline_label=True),
        )

    return render


def slider_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    props = {
        "id": f.name,
        "name": f.name,
        "type": "range",
        "min": f.min if f.min is not None else 0,
        "max": f.max if f.max is not None else 100,
        "step": f.step if f.step is not None else 1,
        "value": _text_value(binding.value),
        "disabled": f.disabled,
        "class": f.class_name,
    }
    return RenderedControl(field=f, widget="slider", binding=binding, props=props, html=_wrap(f, f"<input{_attrs(props)}>"))


def rating_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    top = int(f.max) if f.max is not None else 5
    current = binding.value if isinstance(binding.value, (int, float)) else 0
    if not 1 <= top <= MAX_RATING_STARS:
        props = {
            "id": f.name,
            "name": f.name,
            "type": "number",
            "min": 0,
            "max": top,
            "step": 1,
            "value": _text_value(binding.value),
            "disabled": f.disabled,
            "class": f.class_name,
        }
        return RenderedControl(field=f, widget="rating", binding=binding, props=props, html=_wrap(f, f"<input{_attrs(props)}>"))
    stars = "".join(
        f'<button type="button" class="star{" filled" if i <= current else ""}" data-value="{i}">&#9733;</button>'
        for i in range(1, top + 1)
    )
    props = {"id": f.name, "name": f.name, "max": top, "value": current}
    return RenderedControl(
        field=f,
        widget="rating",
        binding=binding,
        props=props,
        html=_wrap(f, f'<div class="rating" id="{escape(f.name)}">{stars}</div>'),
    )


def select_widget(fallback_options: list[str], multiple: bool = False) -> WidgetRenderer:
    def render(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
        options = field_options(f, fallback_options)
        selected = binding.value if isinstance(binding.value, list) else [binding.value]
        items = []
        if not multiple and f.placeholder:
            items.append(f'<option value="" disabled>{escape(f.placeholder)}</option>')
        for option in options:
            mark = " selected" if option in selected else ""
            items.append(f'<option value="{escape(option)}"{mark}>{escape(option)}</option>')
        props = {
            "id": f.name,
            "name": f.name,
            "multiple": multiple,
            "disabled": f.disabled,
            "class": f.class_name,
        }
        control = f"<select{_attrs(props)}>{''.join(items)}</select>"
        return RenderedControl(
            field=f,
            widget="multi_select" if multiple else "select",
            binding=binding,
            props={**props, "options": options},
            html=_wrap(f, control),
        )

    return render


def radio_widget(fallback_options: list[str]) -> WidgetRenderer:
    def render(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
        options = field_options(f, fallback_options)
        items = []
        for option in options:
            item_id = f"{f.name}-{option}"
            props = {
                "type": "radio",
                "id": item_id,
                "name": f.name,
                "value": option,
                "checked": binding.value == option,
                "disabled": f.disabled,
            }
            items.append(f'<label for="{escape(item_id)}"><input{_attrs(props)}> {escape(option)}</label>')
        control = f'<div class="radio-group" role="radiogroup">{"".join(items)}</div>'
        return RenderedControl(
            field=f,
            widget="radio",
            binding=binding,
            props={"name": f.name, "options": options},
            html=_wrap(f, control),
        )

    return render


def tags_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    tags = binding.value if isinstance(binding.value, list) else []
    chips = "".join(f'<span class="tag">{escape(t)}</span>' for t in tags)
    props = {
        "id": f.name,
        "name": f.name,
        "type": "text",
        "placeholder": f.placeholder or "Enter your tags",
        "disabled": f.disabled,
    }
    control = f'<div class="tags-input">{chips}<input{_attrs(props)}></div>'
    return RenderedControl(field=f, widget="tags", binding=binding, props={**props, "tags": tags}, html=_wrap(f, control))


def date_widget(with_time: bool) -> WidgetRenderer:
    def render(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
        props = {
            "id": f.name,
            "name": f.name,
            "type": "datetime-local" if with_time else "date",
            "value": _text_value(binding.value),
            "lang": f.locale,
            "data-hour12": None if f.hour12 is None else str(f.hour12).lower(),
            "disabled": f.disabled,
            "class": f.class_name,
        }
        return RenderedControl(
            field=f,
            widget="datetime" if with_time else "date",
            binding=binding,
            props=props,
            html=_wrap(f, f"<input{_attrs(props)}>"),
        )

    return render


def file_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    props = {"id": f.name, "name": f.name, "type": "file", "multiple": True, "disabled": f.disabled}
    return RenderedControl(field=f, widget="file", binding=binding, props=props, html=_wrap(f, f"<input{_attrs(props)}>"))


def otp_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    value = _text_value(binding.value)
    slots = "".join(
        f'<input class="otp-slot" maxlength="1" value="{escape(value[i] if i < len(value) else "")}">'
        for i in range(OTP_LENGTH)
    )
    props = {"id": f.name, "name": f.name, "maxLength": OTP_LENGTH, "value": value}
    return RenderedControl(
        field=f,
        widget="otp",
        binding=binding,
        props=props,
        html=_wrap(f, f'<div class="otp" id="{escape(f.name)}">{slots}</div>'),
    )


def location_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    value = binding.value if isinstance(binding.value, list) else []
    country = value[0] if value else ""
    state = value[1] if len(value) > 1 else ""
    control = (
        f'<div class="location" id="{escape(f.name)}">'
        f'<input name="{escape(f.name)}-country" placeholder="Country" value="{escape(country)}">'
        f'<input name="{escape(f.name)}-state" placeholder="State" value="{escape(state)}">'
        "</div>"
    )
    props = {"id": f.name, "name": f.name, "country": country, "state": state}
    return RenderedControl(field=f, widget="location", binding=binding, props=props, html=_wrap(f, control))


def signature_widget(f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
    props = {"id": f.name, "name": f.name, "width": 400, "height": 150}
    control = f'<canvas{_attrs(props)} data-signature="{escape(json.dumps(bool(binding.value)))}"></canvas>'
    return RenderedControl(field=f, widget="signature", binding=binding, props=props, html=_wrap(f, control))
