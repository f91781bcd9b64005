"""
Deterministic whitespace formatter for generated source.

Only whitespace is touched, so the formatter never changes what the
source means, and formatting its own output returns it unchanged.
"""

TAB_WIDTH = 2


def format_source(source: str) -> str:
    """
    Normalize generated source text.

    Tabs are expanded, trailing whitespace is dropped, runs of blank lines
    collapse to one, leading/trailing blank lines are removed and the text
    ends with exactly one newline.
    """
    lines = [line.expandtabs(TAB_WIDTH).rstrip(" \t\r") for line in source.split("\n")]

    formatted: list[str] = []
    for line in lines:
        if not line and (not formatted or not formatted[-1]):
            continue
        formatted.append(line)
    while formatted and not formatted[-1]:
        formatted.pop()

    return "\n".join(formatted) + "\n" if formatted else ""
