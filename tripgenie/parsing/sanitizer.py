"""
Syntactic cleanup of model replies.

Each step is a pure, idempotent `str -> str` transform. `sanitize` runs them
in order and only ever raises NoJsonFound.

Control characters are handled with a small JSON string scanner rather than
a blanket strip: inside string literals they are re-encoded as escapes, so a
multi-line description keeps its line breaks; outside strings the
non-whitespace ones are dropped.
"""

import re
from typing import Iterator, Tuple

from tripgenie.shared.errors import NoJsonFound


BOM = "\ufeff"

# ```json, ```JSON, ```js, bare ``` ...
CODE_FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\r?\n?", re.IGNORECASE)

_SHORT_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t", "\b": "\\b", "\f": "\\f"}
_JSON_WHITESPACE = ("\n", "\r", "\t")


def is_control_character(ch: str) -> bool:
    code = ord(ch)
    return code < 0x20 or code == 0x7F


def iter_string_flags(text: str) -> Iterator[Tuple[str, bool]]:
    """
    Yield each character with a flag telling whether it sits inside a JSON
    string literal. Opening and closing quotes count as inside.
    """
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            yield ch, True
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        else:
            if ch == '"':
                in_string = True
            yield ch, in_string


def strip_bom(text: str) -> str:
    """Remove a leading byte-order mark and surrounding whitespace."""
    cleaned = text.strip()
    while cleaned.startswith(BOM):
        cleaned = cleaned[len(BOM):].strip()
    return cleaned


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers, tagged or bare."""
    return CODE_FENCE_PATTERN.sub("", text).strip()


def slice_object_span(text: str) -> str:
    """
    Cut the text down to the span between the first '{' and the last '}'.

    Raises:
        NoJsonFound: If there is no such span
    """
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        raise NoJsonFound(
            "No valid JSON object found in response",
            details={"raw_length": len(text)},
        )
    return text[first:last + 1]


def remove_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing '}' or ']' (string literals untouched)."""
    chars = list(iter_string_flags(text))
    out = []
    for i, (ch, in_string) in enumerate(chars):
        if ch == "," and not in_string:
            j = i + 1
            while j < len(chars) and chars[j][0].isspace():
                j += 1
            if j < len(chars) and chars[j][0] in "}]":
                continue
        out.append(ch)
    return "".join(out)


def repair_control_characters(text: str) -> str:
    """
    Make control characters JSON-safe.

    Inside string literals they become escape sequences; outside, newline,
    carriage return and tab are kept as whitespace and the rest are dropped.
    """
    out = []
    for ch, in_string in iter_string_flags(text):
        if not is_control_character(ch):
            out.append(ch)
        elif in_string:
            out.append(_SHORT_ESCAPES.get(ch, f"\\u{ord(ch):04x}"))
        elif ch in _JSON_WHITESPACE:
            out.append(ch)
    return "".join(out)


def sanitize(text: str) -> str:
    """
    Run every cleanup step on a raw model reply.

    Args:
        text: Raw model reply

    Returns:
        Text that is as close to valid JSON as syntactic cleanup allows

    Raises:
        NoJsonFound: If no '{...}' span exists
    """
    cleaned = strip_bom(text)
    cleaned = strip_code_fences(cleaned)
    cleaned = slice_object_span(cleaned)
    cleaned = remove_trailing_commas(cleaned)
    cleaned = repair_control_characters(cleaned)
    return cleaned
