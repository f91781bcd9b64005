"""
Code generation.

``generate_code`` turns a field list into the formatted source of a
React form component for one of the supported form libraries.
"""

from form_builder.codegen.formatter import format_source
from form_builder.codegen.targets import (
    TARGETS,
    BringYourOwnTarget,
    CodeTarget,
    ReactHookFormTarget,
    TanStackFormTarget,
)
from form_builder.codegen.zod import schema_declaration, zod_expression
from form_builder.errors import UnknownLibraryError
from form_builder.models.field_definitions import FieldList


def get_target(library: str) -> CodeTarget:
    """
    Look up the generator for a library identifier.

    Raises:
        UnknownLibraryError: If ``library`` is not a supported identifier.
    """
    target = TARGETS.get(library)
    if target is None:
        raise UnknownLibraryError(
            f"Unknown form library '{library}'. Expected one of: {', '.join(TARGETS)}"
        )
    return target


def generate_code(fields: FieldList, library: str) -> str:
    """Generate form component source for ``fields`` targeting ``library``."""
    return get_target(library).generate(fields)


__all__ = [
    "TARGETS",
    "CodeTarget",
    "ReactHookFormTarget",
    "TanStackFormTarget",
    "BringYourOwnTarget",
    "format_source",
    "generate_code",
    "get_target",
    "schema_declaration",
    "zod_expression",
]
