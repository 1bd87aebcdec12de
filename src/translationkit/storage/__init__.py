"""Backing stores for translation bundles.

Submodules:
    base       - ConfigSection / FileConfig protocols, MappedConfig (in-memory)
    yaml_file  - YamlFileConfig (PyYAML safe load/dump)
    properties - PropertiesFileConfig and the .properties codec

Python 3.13+.
"""

from __future__ import annotations

import os

from translationkit.constants import PATH_SEPARATOR
from translationkit.enums import FileFormat
from translationkit.file_types import classify
from translationkit.storage.base import ConfigSection, FileConfig, MappedConfig
from translationkit.storage.properties import (
    PropertiesFileConfig,
    dumps_properties,
    loads_properties,
)
from translationkit.storage.yaml_file import YamlFileConfig

__all__ = [
    "ConfigSection",
    "FileConfig",
    "MappedConfig",
    "PropertiesFileConfig",
    "YamlFileConfig",
    "dumps_properties",
    "loads_properties",
    "open_config",
]


def open_config(
    path: str | os.PathLike[str],
    *,
    separator: str = PATH_SEPARATOR,
) -> FileConfig | None:
    """Create the backing store matching a file's extension.

    The file is not read; call ``load()`` on the result. Nested stores use
    ``separator`` to turn dotted keys back into sections when writing.

    Returns:
        YamlFileConfig or PropertiesFileConfig, or None for unrecognized
        extensions
    """
    match classify(path):
        case FileFormat.YAML:
            return YamlFileConfig(path, separator=separator)
        case FileFormat.PROPERTIES:
            return PropertiesFileConfig(path, separator=separator)
        case _:
            return None
