"""Flattened per-locale message bundle.

TranslationBundle holds one locale's messages as a flat key -> text map,
together with the version stamp stored in the backing document and a
modified flag that decides whether save() writes anything.

Flattening rules (applied by import_from):
    - A nested section contributes the prefix ``parent + separator``
    - A sequence is joined into one string with a literal backslash-n
    - Any other value is stringified (booleans as ``true``/``false``)
    - ``None`` values are skipped
    - The reserved top-level version key is never imported as a message
    - Keys are stringified like values (YAML ``yes:`` becomes ``true``)

Merging is strictly additive: keys present locally always win, and only
keys absent locally are copied from the other bundle.

Every entry remembers the key path it was read from. save() rebuilds the
backing document from those paths, so a literal ``"a.b"`` key stays one
key and never collides with a sibling leaf ``a``.

Subclasses bind a bundle to a store by overriding ``_read_source`` and
``_write_source`` (see translationkit.loader).

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeAlias

from translationkit.constants import (
    LIST_SEPARATOR,
    MAX_SECTION_DEPTH,
    PATH_SEPARATOR,
    VERSION_KEY,
)
from translationkit.errors import BundleStateError
from translationkit.locale_utils import LocaleTag

if TYPE_CHECKING:
    from translationkit.registry import TranslationRegistry
    from translationkit.storage.base import ConfigSection

__all__ = ["KeyPath", "TranslationBundle"]

logger = logging.getLogger(__name__)

KeyPath: TypeAlias = tuple[str, ...]
"""Keys leading from the document root to one leaf."""


def _stringify(value: Any) -> str:
    """Render a leaf value the way it reads in the source document."""
    match value:
        case str():
            return value
        case bool():
            return "true" if value else "false"
        case None:
            return ""
        case _:
            return str(value)


class TranslationBundle:
    """One locale's flattened messages plus version and dirty state.

    Lifecycle:
        created empty -> load() -> (merge()/set_version()) -> save()

    ``is_loaded`` is False until load() completes; a failed load leaves it
    False with no entries. ``is_modified`` becomes True as soon as merge()
    adds a key or set_version() changes the version, and returns to False
    after a successful save().

    Not thread-safe. Callers serialize access to a bundle.

    Attributes:
        locale: Locale of the messages (immutable)
    """

    __slots__ = (
        "_entries",
        "_loaded",
        "_locale",
        "_modified",
        "_paths",
        "_separator",
        "_version",
    )

    def __init__(self, locale: LocaleTag, *, separator: str = PATH_SEPARATOR) -> None:
        """Initialize an empty, unloaded bundle.

        Args:
            locale: Locale of the messages
            separator: Character joining section names to child keys

        Raises:
            TypeError: If locale is not a LocaleTag
            ValueError: If separator is not a single character
        """
        if not isinstance(locale, LocaleTag):
            msg = f"locale must be a LocaleTag, got {type(locale).__name__}"
            raise TypeError(msg)
        if len(separator) != 1:
            msg = f"separator must be a single character, got {separator!r}"
            raise ValueError(msg)

        self._locale = locale
        self._separator = separator
        self._entries: dict[str, str] = {}
        self._paths: dict[str, KeyPath] = {}
        self._version = ""
        self._loaded = False
        self._modified = False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(locale={str(self._locale)!r}, "
            f"entries={len(self._entries)}, version={self._version!r}, "
            f"loaded={self._loaded}, modified={self._modified})"
        )

    @property
    def locale(self) -> LocaleTag:
        return self._locale

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def entries(self) -> Mapping[str, str]:
        """Snapshot of the flat key -> text map.

        The snapshot is read-only and does not change when the bundle is
        later merged or reloaded.
        """
        return MappingProxyType(dict(self._entries))

    @property
    def version(self) -> str:
        """Version stamp of the content; "" when none is recorded."""
        return self._version

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_modified(self) -> bool:
        return self._modified

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> str | None:
        """Return the text for a flat key, or None."""
        return self._entries.get(key)

    # ------------------------------------------------------------------
    # Store hooks
    # ------------------------------------------------------------------

    def _read_source(self) -> ConfigSection:
        """Produce the nested document to import from.

        Raises:
            BundleIOError: If the store cannot be read or parsed
        """
        raise NotImplementedError

    def _write_source(self, document: Mapping[KeyPath, str], version: str) -> None:
        """Replace the store's content with ``document`` plus the version key.

        ``document`` maps key paths to leaf texts, as built by save().

        Raises:
            BundleIOError: If the store cannot be written
        """
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> None:
        """(Re)load messages from the backing store.

        Clears current entries, imports the flattened document, reads the
        version key, and marks the bundle loaded. On failure the bundle is
        left unloaded and empty.

        Raises:
            BundleIOError: If the backing store cannot be read or parsed
        """
        self._loaded = False
        self._modified = False
        self._entries.clear()
        self._paths.clear()
        self._version = ""

        try:
            source = self._read_source()
            self.import_from(source)
        except Exception:
            self._entries.clear()
            self._paths.clear()
            raise

        version = source.get(VERSION_KEY)
        self._version = "" if version is None else _stringify(version)
        self._loaded = True
        logger.debug(
            "Loaded %d messages for %s (version %r)",
            len(self._entries),
            self._locale,
            self._version,
        )

    def import_from(self, source: ConfigSection, key_prefix: str = "") -> None:
        """Flatten a nested document into this bundle's entries.

        Existing entries with the same flat key are overwritten.

        Args:
            source: Section to walk
            key_prefix: Prefix prepended to every key at this level

        Raises:
            ValueError: If sections nest deeper than MAX_SECTION_DEPTH
                (for example a section that contains itself)
        """
        self._import_section(source, key_prefix, ())

    def _import_section(self, source: ConfigSection, key_prefix: str, parents: KeyPath) -> None:
        if len(parents) > MAX_SECTION_DEPTH:
            msg = f"Sections nested deeper than {MAX_SECTION_DEPTH} levels under {parents[0]!r}"
            raise ValueError(msg)

        for key in source.keys():
            name = _stringify(key)
            if not parents:
                if not key_prefix and name == VERSION_KEY:
                    continue
                name = key_prefix + name
            path = (*parents, name)

            section = source.get_section(key)
            if section is not None:
                self._import_section(section, key_prefix, path)
                continue

            value = source.get(key)
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                text = LIST_SEPARATOR.join(_stringify(element) for element in value)
            else:
                text = _stringify(value)
            flat_key = self._separator.join(path)
            self._entries[flat_key] = text
            self._paths[flat_key] = path

    def missing_keys(self, other: TranslationBundle) -> frozenset[str]:
        """Keys present in ``other`` but absent from this bundle."""
        return frozenset(other._entries.keys() - self._entries.keys())

    def merge(self, other: TranslationBundle) -> int:
        """Copy keys that are absent here from another loaded bundle.

        Keys already present are never overwritten, whatever their text in
        ``other``. ``other`` is not modified.

        Args:
            other: Loaded bundle to pull missing keys from

        Returns:
            Number of keys added

        Raises:
            BundleStateError: If ``other`` has not been loaded
        """
        if not other.is_loaded:
            msg = f"Cannot merge from bundle for {other.locale}: it is not loaded"
            raise BundleStateError(msg)

        added = 0
        for key, text in list(other._entries.items()):
            if key not in self._entries:
                self._entries[key] = text
                if other._separator == self._separator:
                    self._paths[key] = other._paths.get(key, (key,))
                else:
                    self._paths[key] = (key,)
                added += 1

        if added:
            self._modified = True
            logger.debug("Merged %d missing messages into %s", added, self._locale)
        return added

    def set_version(self, version: str) -> None:
        """Replace the version stamp, marking the bundle modified on change.

        Raises:
            TypeError: If version is None or not a str
        """
        if not isinstance(version, str):
            msg = f"version must be a str, got {type(version).__name__}"
            raise TypeError(msg)
        if version == self._version:
            return
        self._version = version
        self._modified = True

    def save(self) -> bool:
        """Persist entries and version if the bundle was modified.

        The backing document is rebuilt from the entries, so keys whose value
        was null and sections left empty are not written back.

        On failure ``is_modified`` stays True so the caller can retry.

        Returns:
            True if a write happened, False if there was nothing to write

        Raises:
            BundleIOError: If the backing store cannot be written
        """
        if not self._modified:
            return False
        self._write_source(self._storage_paths(), self._version)
        self._modified = False
        return True

    def _storage_paths(self) -> Mapping[KeyPath, str]:
        """Key path for every entry, ready to be written as a nested document.

        A leaf such as ``a`` cannot also be the section holding ``a.b``.
        When both exist the deeper entry is written under the literal
        dotted key ``"a.b"``, which flattens back to the same flat key.
        """
        paths = {key: self._paths.get(key, (key,)) for key in self._entries}
        collapsed = True
        while collapsed:
            collapsed = False
            leaves = set(paths.values())
            for key, path in paths.items():
                for depth in range(1, len(path)):
                    if path[:depth] in leaves:
                        paths[key] = (*path[: depth - 1], self._separator.join(path[depth - 1 :]))
                        collapsed = True
                        break
        return MappingProxyType({paths[key]: text for key, text in self._entries.items()})

    def register(self, registry: TranslationRegistry) -> bool:
        """Publish the flattened messages to a registry.

        Returns:
            False without registering if the bundle is not loaded
        """
        if not self._loaded:
            return False
        registry.register_all(self._locale, self.entries)
        return True
