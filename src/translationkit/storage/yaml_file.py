"""YAML file backing store.

Parsing and emitting are delegated to PyYAML's safe loader and dumper.
The file handle is held only for the duration of load() or save().

Python 3.13+.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any

import yaml

from translationkit.constants import FILE_ENCODING, PATH_SEPARATOR
from translationkit.storage.base import MappedConfig

__all__ = ["YamlFileConfig"]


def _reject_recursive_aliases(node: Any, ancestors: frozenset[int] = frozenset()) -> None:
    """Raise ValueError if an alias makes a node contain itself.

    PyYAML builds ``a: &x {b: *x}`` as a dict that is its own grandchild.
    Shared aliases that do not loop are allowed.
    """
    match node:
        case Mapping():
            children = list(node.values())
        case list():
            children = node
        case _:
            return

    if id(node) in ancestors:
        msg = "recursive alias: a node contains itself"
        raise ValueError(msg)
    inner = ancestors | {id(node)}
    for child in children:
        _reject_recursive_aliases(child, inner)


class YamlFileConfig(MappedConfig):
    """Nested YAML document stored in one file.

    An empty file loads as an empty document. A document whose top level
    is not a mapping (a bare list or scalar), or that contains itself
    through a recursive alias, is rejected with ValueError.

    Example:
        >>> config = YamlFileConfig("translations/en.yml")
        >>> config.load()
        >>> config.get("v")
        '1.0.0'
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str], *, separator: str = PATH_SEPARATOR) -> None:
        super().__init__(separator=separator)
        self._path = Path(path)

    def __repr__(self) -> str:
        return f"YamlFileConfig({str(self._path)!r})"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Read and parse the file, replacing in-memory content.

        Raises:
            OSError: If the file cannot be read
            yaml.YAMLError: If the file is not valid YAML
            ValueError: If the top level is not a mapping or an alias is
                recursive
        """
        with self._path.open(encoding=FILE_ENCODING) as stream:
            document = yaml.safe_load(stream)

        if document is None:
            document = {}
        if not isinstance(document, MutableMapping):
            msg = (
                f"Top level of {self._path} must be a mapping, "
                f"got {type(document).__name__}"
            )
            raise ValueError(msg)

        _reject_recursive_aliases(document)
        self.replace(document)

    def save(self) -> None:
        """Serialize in-memory content to the file.

        Raises:
            OSError: If the file cannot be written
        """
        with self._path.open("w", encoding=FILE_ENCODING) as stream:
            yaml.safe_dump(
                dict(self.to_dict()),
                stream,
                allow_unicode=True,
                default_flow_style=False,
                sort_keys=False,
            )
