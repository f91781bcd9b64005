"""Indentation-aware line buffer used by the code generators."""

from contextlib import contextmanager
from typing import Iterable, Iterator

INDENT = "  "


class CodeWriter:
    """Collects source lines at the current indentation level."""

    def __init__(self, indent: str = INDENT):
        self._indent = indent
        self._level = 0
        self._lines: list[str] = []

    def line(self, text: str = "") -> None:
        self._lines.append(f"{self._indent * self._level}{text}" if text else "")

    def lines(self, texts: Iterable[str]) -> None:
        for text in texts:
            self.line(text)

    def blank(self) -> None:
        if self._lines and self._lines[-1] != "":
            self._lines.append("")

    @contextmanager
    def indented(self) -> Iterator["CodeWriter"]:
        self._level += 1
        try:
            yield self
        finally:
            self._level -= 1

    @contextmanager
    def block(self, opener: str, closer: str) -> Iterator["CodeWriter"]:
        """Write ``opener``, indent the body, then write ``closer``."""
        self.line(opener)
        with self.indented():
            yield self
        self.line(closer)

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n"
