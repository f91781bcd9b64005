"""Shared fixtures for form builder tests."""

import pytest

from form_builder.models.field_definitions import FieldDescriptor
from form_builder.notifications import MemoryClipboard, Notifier
from form_builder.preferences import MemoryPreferenceStore
from form_builder.session import FormBuilderSession


def make_field(name: str, variant: str = "Input", **attrs) -> FieldDescriptor:
    return FieldDescriptor(variant=variant, name=name, **attrs)


@pytest.fixture
def grouped_fields():
    """A standalone field followed by a two-member row group."""
    return [
        make_field("username", label="Username", required=True),
        [
            make_field("first_name", label="First name"),
            make_field("last_name", label="Last name"),
        ],
    ]


@pytest.fixture
def preferences():
    return MemoryPreferenceStore()


@pytest.fixture
def session(preferences):
    return FormBuilderSession(
        preferences=preferences,
        notifier=Notifier(),
        clipboard=MemoryClipboard(),
    )
