"""Backing store protocols and the in-memory mapping store.

A bundle never parses files itself. It walks a ConfigSection (a view of
one level of a nested key-value document). When persisting, it clears
the store and writes every entry back by key path through ``set_path()``.
File-backed stores additionally implement FileConfig, adding load() and
save().

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from translationkit.constants import PATH_SEPARATOR

__all__ = ["ConfigSection", "FileConfig", "MappedConfig"]


@runtime_checkable
class ConfigSection(Protocol):
    """One level of a nested key-value document.

    This is a Protocol (structural typing) so that any store exposing these
    methods can back a bundle.
    """

    def keys(self) -> list[str]:
        """Return the keys directly at this level, in document order."""

    def get(self, key: str) -> Any:
        """Return the raw value stored directly under ``key``, or None."""

    def get_section(self, key: str) -> ConfigSection | None:
        """Return the nested section under ``key``, or None if it is a leaf."""

    def set(self, path: str, value: Any) -> None:
        """Store ``value`` under ``path``.

        Nested stores split ``path`` on the path separator and create
        intermediate sections. Flat stores use ``path`` verbatim.
        """

    def set_path(self, keys: Sequence[str], value: Any) -> None:
        """Store ``value`` under the key sequence ``keys``.

        Nested stores create one section per leading key, so a key that
        contains the path separator stays a single literal key. Flat stores
        join ``keys`` with the separator.
        """

    def clear(self) -> None:
        """Remove every key at this level."""


@runtime_checkable
class FileConfig(ConfigSection, Protocol):
    """A ConfigSection persisted in a single file."""

    @property
    def path(self) -> Path:
        """File holding this document."""

    def load(self) -> None:
        """Replace in-memory content with the file's content.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file content cannot be parsed
        """

    def save(self) -> None:
        """Write in-memory content to the file.

        Raises:
            OSError: If the file cannot be written
        """


class MappedConfig:
    """ConfigSection over a nested dict.

    Sections returned by get_section() are live views sharing the same
    underlying dict, so writes through either are visible to both.

    Example:
        >>> config = MappedConfig()
        >>> config.set("example.text", "abc")
        >>> config.to_dict()
        {'example': {'text': 'abc'}}
    """

    __slots__ = ("_data", "_separator")

    def __init__(
        self,
        data: MutableMapping[str, Any] | None = None,
        *,
        separator: str = PATH_SEPARATOR,
    ) -> None:
        if len(separator) != 1:
            msg = f"separator must be a single character, got {separator!r}"
            raise ValueError(msg)
        self._data: MutableMapping[str, Any] = {} if data is None else data
        self._separator = separator

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    @property
    def separator(self) -> str:
        return self._separator

    def keys(self) -> list[str]:
        return list(self._data)

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def get_section(self, key: str) -> MappedConfig | None:
        value = self._data.get(key)
        if isinstance(value, MutableMapping):
            return MappedConfig(value, separator=self._separator)
        return None

    def set(self, path: str, value: Any) -> None:
        self.set_path(path.split(self._separator), value)

    def set_path(self, keys: Sequence[str], value: Any) -> None:
        *parents, leaf = keys
        node = self._data
        for name in parents:
            child = node.get(name)
            if not isinstance(child, MutableMapping):
                # A scalar in the way is replaced by a section
                child = {}
                node[name] = child
            node = child
        node[leaf] = value

    def clear(self) -> None:
        self._data.clear()

    def replace(self, data: Mapping[str, Any]) -> None:
        """Replace the whole document with a copy of ``data``."""
        self._data.clear()
        self._data.update(data)

    def to_dict(self) -> MutableMapping[str, Any]:
        """Return the underlying nested dict (not a copy)."""
        return self._data
