"""Enumerations for translationkit type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class FileFormat(StrEnum):
    """Backing store format of a translation file.

    StrEnum provides automatic string conversion: str(FileFormat.YAML) == "yaml"
    """

    YAML = "yaml"
    """Nested YAML document: files ending in .yml or .yaml"""

    PROPERTIES = "properties"
    """Flat key=value lines: files ending in .properties"""


__all__ = [
    "FileFormat",
]
