"""Java-style .properties file backing store.

Implements the line-oriented ``key=value`` format: ``#``/``!`` comments,
``=``/``:``/whitespace key separators, backslash line continuation, and
the standard escapes (``\\t``, ``\\n``, ``\\r``, ``\\f``, ``\\uXXXX``).
Files are read and written as UTF-8.

The document is flat: dotted keys such as ``example.text`` are stored
verbatim and never turned into sections.

Python 3.13+.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from translationkit.constants import FILE_ENCODING, PATH_SEPARATOR
from translationkit.errors import PropertiesSyntaxError
from translationkit.storage.base import MappedConfig

__all__ = ["PropertiesFileConfig", "dumps_properties", "loads_properties"]

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_KEY_TERMINATORS = "=:"
_COMMENT_MARKERS = "#!"

_UNESCAPES: dict[str, str] = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPES: dict[str, str] = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}


def _has_continuation(line: str) -> bool:
    """True if the line ends with an odd number of backslashes."""
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterable[tuple[int, str]]:
    """Yield (first line number, logical line) pairs, skipping comments and blanks."""
    natural = _LINE_BREAK.split(text)
    index = 0
    while index < len(natural):
        line_number = index + 1
        line = natural[index].lstrip(_WHITESPACE)
        index += 1
        if not line or line[0] in _COMMENT_MARKERS:
            continue
        while _has_continuation(line):
            line = line[:-1]
            if index >= len(natural):
                break
            line += natural[index].lstrip(_WHITESPACE)
            index += 1
        yield line_number, line


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into raw (still escaped) key and value."""
    escaped = False
    for position, char in enumerate(line):
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char in _KEY_TERMINATORS:
            return line[:position], line[position + 1 :].lstrip(_WHITESPACE)
        if char in _WHITESPACE:
            rest = line[position:].lstrip(_WHITESPACE)
            if rest and rest[0] in _KEY_TERMINATORS:
                rest = rest[1:].lstrip(_WHITESPACE)
            return line[:position], rest
    return line, ""


def _unescape(raw: str, line_number: int) -> str:
    out: list[str] = []
    position = 0
    while position < len(raw):
        char = raw[position]
        position += 1
        if char != "\\":
            out.append(char)
            continue
        if position >= len(raw):
            break
        code = raw[position]
        position += 1
        if code == "u":
            digits = raw[position : position + 4]
            if len(digits) != 4 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                msg = f"malformed \\uXXXX escape: \\u{digits}"
                raise PropertiesSyntaxError(msg, line=line_number)
            out.append(chr(int(digits, 16)))
            position += 4
        else:
            out.append(_UNESCAPES.get(code, code))
    return "".join(out)


def _escape(text: str, *, is_key: bool) -> str:
    out: list[str] = []
    for position, char in enumerate(text):
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif char == " " and (is_key or position == 0):
            out.append("\\ ")
        elif is_key and char in "=:#!":
            out.append("\\" + char)
        elif ord(char) < 0x20:
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
    return "".join(out)


def loads_properties(text: str) -> dict[str, str]:
    """Parse .properties text into a flat dict.

    Later duplicates of a key replace earlier ones.

    Raises:
        PropertiesSyntaxError: If a \\u escape is malformed
    """
    entries: dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_entry(line)
        entries[_unescape(raw_key, line_number)] = _unescape(raw_value, line_number)
    return entries


def dumps_properties(entries: Mapping[str, Any]) -> str:
    """Serialize a flat mapping as .properties text, one entry per line.

    Values are converted with ``str()``. The output round-trips through
    loads_properties().
    """
    lines = [
        f"{_escape(str(key), is_key=True)}={_escape(str(value), is_key=False)}"
        for key, value in entries.items()
    ]
    return "".join(f"{line}\n" for line in lines)


class PropertiesFileConfig(MappedConfig):
    """Flat .properties document stored in one file.

    Keys are never split into sections: ``get_section()`` always returns
    None and ``set_path()`` joins its keys with the separator. Flattening a
    properties document is therefore the identity.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str], *, separator: str = PATH_SEPARATOR) -> None:
        super().__init__(separator=separator)
        self._path = Path(path)

    def __repr__(self) -> str:
        return f"PropertiesFileConfig({str(self._path)!r})"

    @property
    def path(self) -> Path:
        return self._path

    def get_section(self, key: str) -> None:  # noqa: ARG002
        return None

    def set(self, path: str, value: Any) -> None:
        self.to_dict()[path] = value

    def set_path(self, keys: Sequence[str], value: Any) -> None:
        self.to_dict()[self.separator.join(keys)] = value

    def load(self) -> None:
        """Read and parse the file, replacing in-memory content.

        Raises:
            OSError: If the file cannot be read
            PropertiesSyntaxError: If the content is malformed
        """
        with self._path.open(encoding=FILE_ENCODING) as stream:
            text = stream.read()
        self.replace(loads_properties(text))

    def save(self) -> None:
        """Serialize in-memory content to the file.

        Raises:
            OSError: If the file cannot be written
        """
        text = dumps_properties(self.to_dict())
        with self._path.open("w", encoding=FILE_ENCODING, newline="\n") as stream:
            stream.write(text)
