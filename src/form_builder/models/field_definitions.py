"""
Field descriptor models for the form builder.

A form is an ordered list whose items are either a single field or a
row group (a list of fields rendered as columns of one row). Only the
persisted attributes of a field live on the model; the behavioural
callbacks a renderer hands to a control are kept in a private
``FieldBindings`` slot that is never serialized.
"""

import copy
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from form_builder.constants import GRID_COLUMNS, VALID_FIELD_NAME


def _noop(*args: Any) -> None:
    return None


@dataclass
class FieldBindings:
    """Call-time callbacks attached to a field by the rendering context."""

    set_value: Callable[..., None] = _noop
    on_change: Callable[..., None] = _noop
    on_select: Callable[..., None] = _noop


# Keys of call-time callbacks; they are never persisted
BINDING_KEYS = frozenset({"setValue", "onChange", "onSelect", "set_value", "on_change", "on_select"})

# Value carried by a field: text, flag, number or list of strings
FieldValue = Union[str, bool, int, float, list[str]]


class FieldDescriptor(BaseModel):
    """
    Persisted configuration of one form control.

    Unknown keys are kept in the extension bag (``model_extra``) so they
    survive an export/import round trip. Validation is strict: values of
    the wrong JSON type are rejected, never coerced.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        strict=True,
        allow_inf_nan=False,
    )

    variant: str = Field(..., min_length=1, description="Control type tag")
    name: str = Field(..., description="Unique identifier within the form")
    label: str = Field(default="", description="Human-readable label")
    type: str = Field(default="", description="Legacy input type hint")
    description: str | None = Field(default=None, description="Help text")
    placeholder: str | None = Field(default=None, description="Placeholder text")
    value: FieldValue | None = Field(default=None, description="Current/default value")
    checked: bool = Field(default=True, description="Checked state for boolean-like variants")
    disabled: bool = Field(default=False)
    required: bool | None = Field(default=None)
    min: int | float | None = Field(default=None)
    max: int | float | None = Field(default=None)
    step: int | float | None = Field(default=None)
    locale: str | None = Field(default=None)
    hour12: bool | None = Field(default=None)
    class_name: str | None = Field(default=None, alias="className")
    row_index: int | None = Field(default=None, alias="rowIndex")

    _bindings: FieldBindings = PrivateAttr(default_factory=FieldBindings)

    @model_validator(mode="before")
    @classmethod
    def _drop_bindings(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.keys() & BINDING_KEYS:
            return {k: v for k, v in data.items() if k not in BINDING_KEYS}
        return data

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not VALID_FIELD_NAME.match(value):
            raise ValueError(
                "name must be a valid identifier "
                "(letters, digits and underscores, not starting with a digit)"
            )
        return value

    @classmethod
    def from_json_dict(cls, data: Any) -> "FieldDescriptor":
        """
        Validate a field object keyed by its JSON names.

        Python attribute names such as ``class_name`` are not accepted as
        aliases here; such keys stay in the extension bag unchanged.
        """
        return cls.model_validate(data, by_name=False)

    @property
    def bindings(self) -> FieldBindings:
        return self._bindings

    @property
    def extensions(self) -> dict[str, Any]:
        """Unknown keys carried through from imported JSON."""
        return dict(self.model_extra or {})

    @property
    def is_required(self) -> bool:
        return bool(self.required)

    def with_bindings(self, bindings: FieldBindings) -> "FieldDescriptor":
        """Return a copy of this field bound to the given callbacks."""
        clone = self.model_copy()
        clone._bindings = bindings
        return clone

    def to_json_dict(self) -> dict[str, Any]:
        """Persisted attributes only, keyed by their JSON names; absent optionals are omitted."""
        data: dict[str, Any] = {}
        for field_name, info in type(self).model_fields.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            data[info.alias or field_name] = list(value) if isinstance(value, list) else value
        for key, value in (self.model_extra or {}).items():
            data[key] = copy.deepcopy(value)
        return data


FieldOrGroup = Union[FieldDescriptor, list[FieldDescriptor]]
FieldList = list[FieldOrGroup]


def iter_fields(fields: FieldList) -> Iterator[FieldDescriptor]:
    """Yield every field in order with row groups expanded."""
    for item in fields:
        if isinstance(item, list):
            yield from item
        else:
            yield item


def field_names(fields: FieldList) -> list[str]:
    return [f.name for f in iter_fields(fields)]


def column_span(group_size: int) -> int:
    """Grid columns taken by each member of a row group of the given size."""
    if group_size == 2:
        return GRID_COLUMNS // 2
    if group_size == 3:
        return GRID_COLUMNS // 3
    return GRID_COLUMNS
