"""Filename extension classification.

Maps a translation file to the backing store that can read it. Files with
unknown extensions are reported as None so that directory scans can skip
them silently.

Python 3.13+.
"""

from __future__ import annotations

import os
from pathlib import PurePath

from translationkit.constants import PROPERTIES_EXTENSIONS, YAML_EXTENSIONS
from translationkit.enums import FileFormat

__all__ = ["classify", "extension_of"]


def extension_of(path: str | os.PathLike[str] | None) -> str:
    """Return the text after the last dot of a filename.

    The input is reduced to its final path component first, so dots in
    directory names are never mistaken for an extension.

    Args:
        path: Filename string or path

    Returns:
        Extension without the dot, or "" when there is no dot or no input.

    Example:
        >>> extension_of("en.legacy.yml")
        'yml'
        >>> extension_of("README")
        ''
    """
    if path is None:
        return ""

    file_name = PurePath(path).name
    if not file_name:
        return ""

    _, dot, extension = file_name.rpartition(".")
    return extension if dot else ""


def classify(path: str | os.PathLike[str] | None) -> FileFormat | None:
    """Pick the backing store format for a file by its extension.

    Matching is exact and case-sensitive: ``en.YML`` is not recognized.

    Returns:
        FileFormat for recognized extensions, None otherwise
    """
    extension = extension_of(path)
    if extension in YAML_EXTENSIONS:
        return FileFormat.YAML
    if extension in PROPERTIES_EXTENSIONS:
        return FileFormat.PROPERTIES
    return None
