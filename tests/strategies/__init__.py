"""Hypothesis strategies for translationkit property-based testing.

Usage:
    from tests.strategies import locale_strings, nested_documents
"""

from .localization import (
    flatten_reference,
    locale_segments,
    locale_strings,
    message_keys,
    message_texts,
    nested_documents,
)

__all__ = [
    "flatten_reference",
    "locale_segments",
    "locale_strings",
    "message_keys",
    "message_texts",
    "nested_documents",
]
