"""
Durable preference storage.

The builder keeps a single preference, the selected target library,
under ``LIBRARY_PREFERENCE_KEY``. Stores raise ``PreferenceStoreError``
on I/O problems; callers decide how to report them.
"""

import json
import logging
from pathlib import Path

from form_builder.config import get_config
from form_builder.errors import PreferenceStoreError

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Key/value store interface for string preferences."""

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryPreferenceStore(PreferenceStore):
    """Process-local store, used by tests and one-shot tools."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFilePreferenceStore(PreferenceStore):
    """
    Preferences kept in a small JSON object on disk.

    Last write wins; the whole file is rewritten on every ``set``.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or get_config().preferences_path).expanduser()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PreferenceStoreError(f"Could not read preferences from {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PreferenceStoreError(f"Preferences file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._load()
        except PreferenceStoreError:
            logger.warning(f"Overwriting unreadable preferences file {self.path}")
            data = {}
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise PreferenceStoreError(f"Could not write preferences to {self.path}: {e}") from e
