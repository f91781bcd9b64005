"""Exception definitions for the form builder."""


class FormBuilderError(Exception):
    """Base exception for all form builder errors.

    Parse and shape problems in imported JSON are not raised; they are
    returned as ``HydrationResult`` values. These exceptions cover misuse
    of the model API itself.
    """


class FieldNotFoundError(FormBuilderError, LookupError):
    """Raised when a field name or index path does not address a field."""


class InvalidFieldError(FormBuilderError, ValueError):
    """Raised when a field update would produce an invalid descriptor.

    Use this exception when:
    - An update payload fails descriptor validation
    - An update renames a field onto a name that is already taken
    """


class UnknownLibraryError(FormBuilderError, ValueError):
    """Raised when a target library identifier is not one of the supported ones."""


class PreferenceStoreError(FormBuilderError):
    """Raised by a preference store that cannot read or write its backing storage."""


class ClipboardError(FormBuilderError):
    """Raised by a clipboard port when a copy fails."""
