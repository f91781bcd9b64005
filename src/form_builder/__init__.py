"""
Form Builder: compose form fields and generate matching artifacts.

A field list (fields and row groups) is turned into a JSON export, a
validation schema with default values, a rendered preview and the source
of a React form component for one of several form libraries.

Simple Usage:
    from form_builder import FormBuilderSession

    session = FormBuilderSession()
    session.add_field("Input")
    session.add_field("Date Picker")

    artifacts = session.artifacts()
    print(artifacts.json_text)
    print(artifacts.code)

Review Usage:
    from form_builder import review_form_json

    result = review_form_json(pasted_json, "tanstack-form")
    if result.ok:
        print(result.artifacts.code)
    else:
        print(result.error)

Lower Level:
    from form_builder import hydrate, derive_validation, generate_code

    fields = hydrate(json_text).fields
    spec = derive_validation(fields)
    spec.validate_data({"name_1": "alice"})
    code = generate_code(fields, "react-hook-form")
"""

from form_builder.builder import (
    add_field,
    create_field,
    find_path,
    get_field,
    remove_field,
    reset_all,
    update_field,
)
from form_builder.codec import (
    HydrationError,
    HydrationResult,
    hydrate,
    serialize,
)
from form_builder.codegen import generate_code
from form_builder.errors import (
    ClipboardError,
    FieldNotFoundError,
    FormBuilderError,
    InvalidFieldError,
    PreferenceStoreError,
    UnknownLibraryError,
)
from form_builder.models import (
    FieldDescriptor,
    FieldList,
    FieldRule,
    FieldValidationError,
    SchemaSpec,
    ValidationResult,
)
from form_builder.render import (
    FormState,
    RenderedForm,
    WidgetRegistry,
    render_control,
    render_form,
)
from form_builder.review import ReviewResult, review_form_json
from form_builder.schema import derive_defaults, derive_validation
from form_builder.session import (
    FormBuilderSession,
    PreviewArtifacts,
    special_components,
)
from form_builder.variants import VariantHandler, register_variant

__all__ = [
    # Session
    "FormBuilderSession",
    "PreviewArtifacts",
    "special_components",
    # Field model
    "FieldDescriptor",
    "FieldList",
    "add_field",
    "create_field",
    "find_path",
    "get_field",
    "update_field",
    "remove_field",
    "reset_all",
    # JSON codec
    "serialize",
    "hydrate",
    "HydrationResult",
    "HydrationError",
    # Schema
    "FieldRule",
    "SchemaSpec",
    "derive_validation",
    "derive_defaults",
    "ValidationResult",
    "FieldValidationError",
    # Code generation
    "generate_code",
    # Rendering
    "FormState",
    "RenderedForm",
    "WidgetRegistry",
    "render_control",
    "render_form",
    # Review
    "ReviewResult",
    "review_form_json",
    # Variants
    "VariantHandler",
    "register_variant",
    # Errors
    "FormBuilderError",
    "FieldNotFoundError",
    "InvalidFieldError",
    "UnknownLibraryError",
    "PreferenceStoreError",
    "ClipboardError",
]

__version__ = "0.1.0"
