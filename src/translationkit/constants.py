"""Shared constants for translationkit.

This module provides the fixed keys and separators used across the
bundle, storage, and directory layers. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Storage keys: Reserved keys written into backing files
- Flattening: Separators used when collapsing nested sections
- Locale tags: Segment rules for filename-derived locales
- Versioning: Pre-release marker for always-stale reference versions

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Storage keys
    "VERSION_KEY",
    # Flattening
    "PATH_SEPARATOR",
    "LIST_SEPARATOR",
    "MAX_SECTION_DEPTH",
    # Locale tags
    "LOCALE_SEGMENT_SEPARATOR",
    "MAX_LOCALE_SEGMENTS",
    # File types
    "YAML_EXTENSIONS",
    "PROPERTIES_EXTENSIONS",
    # Versioning
    "PRERELEASE_SUFFIX",
    # Encoding
    "FILE_ENCODING",
]

# ============================================================================
# STORAGE KEYS
# ============================================================================

# Top-level key holding the bundle's version stamp. Never part of the
# flattened message map: filtered on import, re-inserted on save.
VERSION_KEY: str = "v"

# ============================================================================
# FLATTENING
# ============================================================================

# Joins a section name to its child keys: {"a": {"b": "x"}} -> "a.b".
PATH_SEPARATOR: str = "."

# Literal backslash-n (two characters, NOT a newline). Sequence values are
# joined with it so that every message stays on one line in flat formats.
LIST_SEPARATOR: str = "\\n"

# Sections nested deeper than this are rejected while flattening. Guards
# against runaway recursion on self-referencing documents.
MAX_SECTION_DEPTH: int = 100

# ============================================================================
# LOCALE TAGS
# ============================================================================

LOCALE_SEGMENT_SEPARATOR: str = "_"

# language, region, variant. More segments than this yield no tag at all.
MAX_LOCALE_SEGMENTS: int = 3

# ============================================================================
# FILE TYPES
# ============================================================================

# Matched case-sensitively against the text after the last dot.
YAML_EXTENSIONS: frozenset[str] = frozenset({"yml", "yaml"})
PROPERTIES_EXTENSIONS: frozenset[str] = frozenset({"properties"})

# ============================================================================
# VERSIONING
# ============================================================================

# An expected version ending with this suffix is always considered newer
# than any bundle on disk, so reconciliation runs on every pass.
PRERELEASE_SUFFIX: str = "-SNAPSHOT"

FILE_ENCODING: str = "utf-8"
