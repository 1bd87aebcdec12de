"""Ready-made collaborators for TranslationDirectory.

Components:
    DirectoryReferenceCreator - Reference bundles read from a defaults directory
    MappingReferenceCreator - Reference bundles built from nested dicts
    copy_defaults - on_created callback that seeds a new directory with files

Python 3.13+.
"""

from __future__ import annotations

import copy
import logging
import os
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from translationkit.constants import PATH_SEPARATOR, VERSION_KEY
from translationkit.directory import DirectoryCreatedCallback
from translationkit.loader import ConfigBundle, FileBundle, create_file_bundle
from translationkit.locale_utils import LocaleTag
from translationkit.storage.base import MappedConfig

__all__ = ["DirectoryReferenceCreator", "MappingReferenceCreator", "copy_defaults"]

logger = logging.getLogger(__name__)

_REFERENCE_EXTENSIONS: tuple[str, ...] = ("yml", "yaml", "properties")


class DirectoryReferenceCreator:
    """Load reference bundles from ``<root>/<locale>.<ext>``.

    Extensions are tried in the order yml, yaml, properties; the first
    existing file wins.

    Example:
        >>> creator = DirectoryReferenceCreator("defaults")
        >>> bundle = creator(LocaleTag("en"))  # loads defaults/en.yml
    """

    __slots__ = ("_root", "_separator")

    def __init__(self, root: str | os.PathLike[str], *, separator: str = PATH_SEPARATOR) -> None:
        self._root = Path(root)
        self._separator = separator

    def __repr__(self) -> str:
        return f"DirectoryReferenceCreator({str(self._root)!r})"

    @property
    def root(self) -> Path:
        return self._root

    def find(self, locale: LocaleTag) -> Path | None:
        """Path of the reference file for ``locale``, or None."""
        for extension in _REFERENCE_EXTENSIONS:
            candidate = self._root / f"{locale}.{extension}"
            if candidate.is_file():
                return candidate
        return None

    def __call__(self, locale: LocaleTag) -> FileBundle | None:
        """Return the loaded reference bundle for ``locale``.

        Raises:
            BundleIOError: If the reference file exists but cannot be loaded
        """
        path = self.find(locale)
        if path is None:
            return None
        bundle = create_file_bundle(path, locale, separator=self._separator)
        if bundle is None:
            return None
        bundle.load()
        return bundle


class MappingReferenceCreator:
    """Build reference bundles from nested dicts keyed by locale string.

    The documents are deep-copied for every call, so bundles handed out
    never share state with each other or with the caller's dicts.

    Attributes:
        version: When set, stored as the version of every bundle, replacing
            any version key inside the documents
    """

    __slots__ = ("_documents", "_separator", "_version")

    def __init__(
        self,
        documents: Mapping[str, Mapping[str, Any]],
        *,
        version: str | None = None,
        separator: str = PATH_SEPARATOR,
    ) -> None:
        self._documents = dict(documents)
        self._version = version
        self._separator = separator

    @property
    def version(self) -> str | None:
        return self._version

    def __call__(self, locale: LocaleTag) -> ConfigBundle | None:
        document = self._documents.get(str(locale))
        if document is None:
            return None

        data = copy.deepcopy(dict(document))
        if self._version is not None:
            data[VERSION_KEY] = self._version
        source = MappedConfig(data, separator=self._separator)
        bundle = ConfigBundle(locale, source, separator=self._separator)
        bundle.load()
        return bundle


def copy_defaults(source: str | os.PathLike[str]) -> DirectoryCreatedCallback:
    """Create an on_created callback that copies every file of ``source``.

    Only regular files directly inside ``source`` are copied; existing
    files in the target are overwritten.
    """
    source_dir = Path(source)

    def _copy(target: Path) -> None:
        for path in sorted(source_dir.iterdir()):
            if path.is_file():
                shutil.copy2(path, target / path.name)
                logger.debug("Seeded %s from %s", target / path.name, path)

    return _copy
