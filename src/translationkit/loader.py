"""Bundles bound to concrete backing stores.

Components:
    ConfigBundle - Bundle over an in-memory ConfigSection (references, tests)
    FileBundle - Bundle over a YAML or .properties file
    create_file_bundle - Pick locale and store for a file by its name

File handles are scoped to a single load() or save() call; nothing stays
open between calls, whether the call succeeds or fails.

Python 3.13+.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from translationkit.bundle import TranslationBundle
from translationkit.constants import PATH_SEPARATOR, VERSION_KEY
from translationkit.errors import BundleIOError
from translationkit.locale_utils import LocaleTag, locale_from_file_name
from translationkit.storage import open_config

if TYPE_CHECKING:
    from collections.abc import Mapping

    from translationkit.bundle import KeyPath
    from translationkit.storage.base import ConfigSection, FileConfig

__all__ = ["ConfigBundle", "FileBundle", "create_file_bundle"]


class ConfigBundle(TranslationBundle):
    """Bundle whose backing store is a ConfigSection held in memory.

    load() flattens the section as it currently is. save() clears the same
    section and rebuilds it from the entries, writing the version key first.

    Example:
        >>> from translationkit.storage import MappedConfig
        >>> source = MappedConfig({"v": "2.0", "menu": {"open": "Open"}})
        >>> bundle = ConfigBundle(LocaleTag("en"), source)
        >>> bundle.load()
        >>> dict(bundle.entries), bundle.version
        ({'menu.open': 'Open'}, '2.0')
    """

    __slots__ = ("_source",)

    def __init__(
        self,
        locale: LocaleTag,
        source: ConfigSection,
        *,
        separator: str = PATH_SEPARATOR,
    ) -> None:
        super().__init__(locale, separator=separator)
        if source is None:
            msg = "source must not be None"
            raise TypeError(msg)
        self._source = source

    @property
    def source(self) -> ConfigSection:
        return self._source

    def _read_source(self) -> ConfigSection:
        return self._source

    def _write_source(self, document: Mapping[KeyPath, str], version: str) -> None:
        self._source.clear()
        self._source.set_path((VERSION_KEY,), version)
        for path, text in document.items():
            self._source.set_path(path, text)


class FileBundle(ConfigBundle):
    """Bundle whose backing store is a YAML or .properties file.

    Read, parse, and write failures are raised as BundleIOError carrying
    the file path and locale, with the original exception chained.
    """

    __slots__ = ()

    def __init__(
        self,
        locale: LocaleTag,
        config: FileConfig,
        *,
        separator: str = PATH_SEPARATOR,
    ) -> None:
        super().__init__(locale, config, separator=separator)

    def __repr__(self) -> str:
        return f"FileBundle(locale={str(self.locale)!r}, path={str(self.path)!r})"

    @property
    def config(self) -> FileConfig:
        return self._source  # type: ignore[return-value]

    @property
    def path(self) -> Path:
        return self.config.path

    def load(self) -> None:
        """(Re)load messages from the file.

        Raises:
            BundleIOError: If the file cannot be read, cannot be parsed, or
                nests sections too deeply
        """
        config = self.config
        try:
            super().load()
        except (OSError, ValueError, yaml.YAMLError) as e:
            msg = f"Could not load translations for {self.locale} from {config.path}: {e}"
            raise BundleIOError(msg, path=config.path, locale=self.locale) from e

    def _read_source(self) -> ConfigSection:
        self.config.load()
        return self.config

    def _write_source(self, document: Mapping[KeyPath, str], version: str) -> None:
        config = self.config
        super()._write_source(document, version)
        try:
            config.save()
        except OSError as e:
            msg = f"Could not save translations for {self.locale} to {config.path}: {e}"
            raise BundleIOError(msg, path=config.path, locale=self.locale) from e


def create_file_bundle(
    path: str | os.PathLike[str],
    locale: LocaleTag | None = None,
    *,
    separator: str = PATH_SEPARATOR,
) -> FileBundle | None:
    """Create an unloaded FileBundle for a translation file.

    Args:
        path: Translation file (``en.yml``, ``ja_JP.properties``, ...)
        locale: Locale of the file; derived from the filename when omitted
        separator: Character joining section names to child keys

    Returns:
        FileBundle, or None when the locale cannot be derived from the
        filename or the extension is not recognized
    """
    if locale is None:
        locale = locale_from_file_name(path)
        if locale is None:
            return None

    config = open_config(path, separator=separator)
    if config is None:
        return None
    return FileBundle(locale, config, separator=separator)
