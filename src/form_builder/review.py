"""
Review pathway.

Rebuilds the preview artifacts from pasted form JSON without an editing
session. Problems with the input come back on the result, never raised.
"""

import logging
from dataclasses import dataclass

from form_builder.codec import HydrationError, hydrate
from form_builder.models.field_definitions import FieldList
from form_builder.render import WidgetRegistry
from form_builder.session import PreviewArtifacts, build_artifacts, resolve_library

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please paste form JSON."


@dataclass
class ReviewResult:
    """Outcome of ``review_form_json``."""

    fields: FieldList | None = None
    artifacts: PreviewArtifacts | None = None
    error: str | None = None
    hydration_error: HydrationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def review_form_json(
    json_text: str,
    library: str | None = None,
    registry: WidgetRegistry | None = None,
) -> ReviewResult:
    """
    Preview exported form JSON.

    Args:
        json_text: JSON text as exported from the builder's JSON view.
        library: Target library for the generated code; an unknown or
            missing identifier falls back to the configured default.

    Returns:
        ReviewResult carrying the artifacts, or the error message to show.
    """
    trimmed = (json_text or "").strip()
    if not trimmed:
        return ReviewResult(error=EMPTY_INPUT_MESSAGE)

    result = hydrate(trimmed)
    if not result.ok:
        return ReviewResult(error=result.error.message, hydration_error=result.error)

    artifacts = build_artifacts(result.fields, resolve_library(library), registry)
    logger.info(f"Reviewed form with {len(artifacts.defaults)} fields")
    return ReviewResult(fields=result.fields, artifacts=artifacts)
