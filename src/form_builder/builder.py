"""
Field list operations.

Every operation takes the current field list and returns a new one.
Lists along the edited path are copied and every other item is shared,
so a snapshot handed to a reader earlier is never modified afterwards.
"""

import logging
import secrets
import string
from typing import Any, Callable, Iterable, Mapping, Sequence

from pydantic import ValidationError

from form_builder.constants import FIELD_NAME_DIGITS, FIELD_NAME_PREFIX
from form_builder.errors import FieldNotFoundError, InvalidFieldError
from form_builder.models.field_definitions import (
    BINDING_KEYS,
    FieldDescriptor,
    FieldList,
    field_names,
)
from form_builder.variants import default_config

logger = logging.getLogger(__name__)

_ALIASES = {
    field_name: info.alias
    for field_name, info in FieldDescriptor.model_fields.items()
    if info.alias
}


def generate_field_name(existing: Iterable[str] = ()) -> str:
    """Generate a fresh ``name_XXXXXXXXXX`` identifier not present in ``existing``."""
    taken = set(existing)
    while True:
        digits = "".join(secrets.choice(string.digits) for _ in range(FIELD_NAME_DIGITS))
        name = f"{FIELD_NAME_PREFIX}{digits}"
        if name not in taken:
            return name


def create_field(
    variant: str,
    insertion_index: int = 0,
    existing_names: Iterable[str] = (),
) -> FieldDescriptor:
    """Build a new field for ``variant`` with defaults from the variant table."""
    name = generate_field_name(existing_names)
    defaults = default_config(variant)
    return FieldDescriptor(
        variant=variant,
        name=name,
        label=defaults.get("label") or name,
        description=defaults.get("description", ""),
        placeholder=defaults.get("placeholder") or "Placeholder",
        checked=True,
        disabled=False,
        required=True,
        value="",
        row_index=insertion_index,
    )


def add_field(
    fields: FieldList,
    variant: str,
    insertion_index: int = 0,
) -> tuple[FieldList, FieldDescriptor]:
    """Append a new field of ``variant``; returns the new list and the field."""
    field = create_field(variant, insertion_index, field_names(fields))
    logger.info(f"Added {variant} field {field.name}")
    return [*fields, field], field


def find_path(fields: Sequence[Any], name: str) -> list[int] | None:
    """
    Depth-first search for the field called ``name``.

    Returns:
        The index path addressing the field (``[i]`` for a top-level
        field, ``[i, j]`` for a member of a row group), or None.
    """

    def search(items: Sequence[Any], current: list[int]) -> list[int] | None:
        for index, item in enumerate(items):
            if isinstance(item, list):
                found = search(item, [*current, index])
                if found is not None:
                    return found
            elif item.name == name:
                return [*current, index]
        return None

    return search(fields, [])


def get_field(fields: FieldList, path: Sequence[int]) -> FieldDescriptor:
    """Return the field addressed by ``path``."""
    current: Any = fields
    for index in path:
        if not isinstance(current, list) or not 0 <= index < len(current):
            raise FieldNotFoundError(f"No field at path {list(path)}")
        current = current[index]
    if not isinstance(current, FieldDescriptor):
        raise FieldNotFoundError(f"Path {list(path)} addresses a group, not a field")
    return current


def _normalize_updates(updates: Mapping[str, Any] | FieldDescriptor) -> dict[str, Any]:
    if isinstance(updates, FieldDescriptor):
        return updates.to_json_dict()
    return {
        _ALIASES.get(key, key): value
        for key, value in updates.items()
        if key not in BINDING_KEYS
    }


def merge_field(field: FieldDescriptor, updates: Mapping[str, Any] | FieldDescriptor) -> FieldDescriptor:
    """Shallow-merge ``updates`` over ``field``; call-time bindings are kept."""
    merged = {**field.to_json_dict(), **_normalize_updates(updates)}
    try:
        updated = FieldDescriptor.from_json_dict(merged)
    except ValidationError as e:
        raise InvalidFieldError(f"Invalid update for field '{field.name}': {e}") from e
    return updated.with_bindings(field.bindings)


def _replace_at(
    items: list[Any],
    path: Sequence[int],
    replace: Callable[[FieldDescriptor], FieldDescriptor],
) -> list[Any]:
    index, rest = path[0], path[1:]
    if not 0 <= index < len(items):
        raise FieldNotFoundError(f"Index {index} out of range")
    target = items[index]
    updated = list(items)
    if rest:
        if not isinstance(target, list):
            raise FieldNotFoundError(f"Index {index} is a field, not a group")
        updated[index] = _replace_at(target, rest, replace)
    else:
        if isinstance(target, list):
            raise FieldNotFoundError(f"Index {index} is a group, not a field")
        updated[index] = replace(target)
    return updated


def update_field(
    fields: FieldList,
    path: Sequence[int],
    updates: Mapping[str, Any] | FieldDescriptor,
) -> FieldList:
    """
    Replace the field at ``path`` with a shallow merge of its attributes and ``updates``.

    Raises:
        FieldNotFoundError: If ``path`` does not address a field.
        InvalidFieldError: If the merged field is invalid or takes a name already in use.
    """
    if not path:
        raise FieldNotFoundError("Empty path")
    current = get_field(fields, path)
    updated_field = merge_field(current, updates)

    if updated_field.name != current.name and updated_field.name in field_names(fields):
        raise InvalidFieldError(f"Field name '{updated_field.name}' is already in use")

    return _replace_at(fields, path, lambda _: updated_field)


def remove_field(fields: FieldList, name: str) -> FieldList:
    """Remove the field called ``name``; a group left empty is dropped."""
    path = find_path(fields, name)
    if path is None:
        raise FieldNotFoundError(f"No field named '{name}'")

    def drop(items: list[Any], path: Sequence[int]) -> list[Any]:
        index, rest = path[0], path[1:]
        updated = list(items)
        if not rest:
            del updated[index]
            return updated
        child = drop(items[index], rest)
        if child:
            updated[index] = child
        else:
            del updated[index]
        return updated

    logger.info(f"Removed field {name}")
    return drop(fields, path)


def reset_all() -> FieldList:
    """An empty field list."""
    return []
