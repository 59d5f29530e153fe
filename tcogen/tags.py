"""Parser for `key:"value"` field tag strings."""

from __future__ import annotations

import ast
from collections.abc import Mapping
from typing import Dict, Iterator, Optional, Tuple


class FieldTag(Mapping):
    """Immutable key/value view over a parsed field tag.

    Keys keep their order of appearance; when a key repeats, the first value
    is the one returned by lookups.
    """

    def __init__(self, pairs: Tuple[Tuple[str, str], ...] = ()) -> None:
        self._pairs = pairs
        values: Dict[str, str] = {}
        for key, value in pairs:
            values.setdefault(key, value)
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FieldTag({dict(self._values)!r})"


def parse_tag(text: str) -> FieldTag:
    """Parse a tag such as ``default:"true" json:"happy"``.

    Parsing stops at the first malformed pair; pairs read before it are kept.
    """
    pairs = []
    rest = text
    while rest:
        rest = rest.lstrip(" ")
        if not rest:
            break

        index = 0
        while index < len(rest) and _is_key_char(rest[index]):
            index += 1
        if index == 0 or index + 1 >= len(rest) or rest[index] != ":" or rest[index + 1] != '"':
            break
        key = rest[:index]
        rest = rest[index + 1 :]

        # scan to the closing quote, honouring backslash escapes
        index = 1
        while index < len(rest) and rest[index] != '"':
            if rest[index] == "\\":
                index += 1
            index += 1
        if index >= len(rest):
            break
        quoted = rest[: index + 1]
        rest = rest[index + 1 :]

        value = _unquote(quoted)
        if value is None:
            break
        pairs.append((key, value))
    return FieldTag(tuple(pairs))


def _is_key_char(char: str) -> bool:
    return char > " " and char not in {":", '"', "\x7f"}


def _unquote(quoted: str) -> Optional[str]:
    try:
        value = ast.literal_eval(quoted)
    except (SyntaxError, ValueError):
        return None
    return value if isinstance(value, str) else None


__all__ = ["FieldTag", "parse_tag"]
