"""
Toast and clipboard ports.

A ``Notifier`` collects the transient messages a UI would show as
toasts and logs them. A ``Clipboard`` receives copied artifact text.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

from form_builder.errors import ClipboardError

logger = logging.getLogger(__name__)

ToastKind = Literal["success", "error", "info"]


@dataclass
class Toast:
    kind: ToastKind
    message: str


@dataclass
class Notifier:
    """Records toasts in order of arrival."""

    toasts: list[Toast] = field(default_factory=list)

    def notify(self, kind: ToastKind, message: str) -> Toast:
        toast = Toast(kind=kind, message=message)
        self.toasts.append(toast)
        if kind == "error":
            logger.warning(message)
        else:
            logger.info(message)
        return toast

    def success(self, message: str) -> Toast:
        return self.notify("success", message)

    def error(self, message: str) -> Toast:
        return self.notify("error", message)

    def info(self, message: str) -> Toast:
        return self.notify("info", message)

    @property
    def last(self) -> Toast | None:
        return self.toasts[-1] if self.toasts else None

    def clear(self) -> None:
        self.toasts.clear()


class Clipboard:
    """Clipboard interface; ``write`` raises ``ClipboardError`` on failure."""

    def write(self, text: str) -> None:
        raise NotImplementedError


class MemoryClipboard(Clipboard):
    """Keeps the last copied text."""

    def __init__(self) -> None:
        self.text: str | None = None

    def write(self, text: str) -> None:
        self.text = text


class UnavailableClipboard(Clipboard):
    """Clipboard for headless hosts: every copy fails."""

    def write(self, text: str) -> None:
        raise ClipboardError("Clipboard is not available")
