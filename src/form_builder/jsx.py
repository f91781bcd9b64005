"""Helpers for writing JSX/TypeScript source text."""

import json
from dataclasses import dataclass
from typing import Any

# Attribute lists longer than this are written one attribute per line
MAX_INLINE_ATTRIBUTES = 3
MAX_INLINE_WIDTH = 80


def js_string(text: str) -> str:
    """A double-quoted JavaScript string literal."""
    return json.dumps(text, ensure_ascii=False)


def js_literal(value: Any) -> str:
    """A JavaScript literal for a JSON-compatible Python value."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value, ensure_ascii=False)


def js_number(value: int | float) -> str:
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def jsx_text(text: str) -> str:
    """Text placed between JSX tags; wrapped in an expression when it holds JSX syntax."""
    if any(ch in text for ch in "{}<>&") or text != text.strip():
        return "{" + js_string(text) + "}"
    return text


def jsx_attr(name: str, value: Any) -> str:
    """
    A JSX attribute.

    Strings become ``name="..."`` (or ``name={"..."}`` when they hold a
    quote or backslash), ``True`` becomes a bare flag, anything else is
    written as an expression.
    """
    if value is True:
        return name
    if isinstance(value, str):
        if '"' in value or "\\" in value or "\n" in value:
            return f"{name}={{{js_string(value)}}}"
        return f'{name}="{value}"'
    return f"{name}={{{js_literal(value)}}}"


def jsx_expr_attr(name: str, expression: str) -> str:
    """A JSX attribute whose value is a raw JavaScript expression."""
    return f"{name}={{{expression}}}"


def jsx_comment(text: str) -> str:
    safe = text.replace("*/", "* /")
    return "{/* " + safe + " */}"


def element(tag: str, attrs: list[str], children: list[str] | None = None) -> list[str]:
    """
    Lines for a JSX element.

    ``children`` are lines with their own relative indentation; they are
    nested one level under the opening tag.
    """
    inline = f"<{tag}" + "".join(f" {a}" for a in attrs)
    multiline = len(attrs) > MAX_INLINE_ATTRIBUTES or len(inline) > MAX_INLINE_WIDTH

    if multiline:
        lines = [f"<{tag}"] + [f"  {a}" for a in attrs]
        if children is None:
            return lines + ["/>"]
        return lines + [">"] + [f"  {c}" if c else "" for c in children] + [f"</{tag}>"]

    if children is None:
        return [f"{inline} />"]
    return [f"{inline}>"] + [f"  {c}" if c else "" for c in children] + [f"</{tag}>"]


@dataclass(frozen=True)
class ControlBinding:
    """
    How a generated control reads and writes its form value.

    ``callback`` is an expression usable directly as a change handler;
    ``call_format`` turns an argument expression into a change call.
    """

    value: str
    callback: str
    call_format: str
    blur: str | None = None
    element_id: str | None = None

    def call(self, argument: str) -> str:
        return self.call_format.format(arg=argument)
