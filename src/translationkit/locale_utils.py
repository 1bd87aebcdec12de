"""Locale tag parsing for translation filenames.

Translation files are named after the locale they hold: ``en.yml``,
``ja_JP.properties``, ``de_DE_formal.yaml``. This module turns such names
(or raw ``language_REGION_variant`` strings) into structured LocaleTag
values.

Parsing is deliberately soft: malformed input yields None instead of
raising, so that one oddly named file never aborts a directory scan.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from translationkit.constants import LOCALE_SEGMENT_SEPARATOR, MAX_LOCALE_SEGMENTS
from translationkit.core.babel_compat import get_locale_class

if TYPE_CHECKING:
    from collections.abc import Iterator

    from babel import Locale

__all__ = [
    "LocaleTag",
    "get_babel_locale",
    "locale_from_file_name",
    "parse_locale",
]


@dataclass(frozen=True, slots=True)
class LocaleTag:
    """Structured locale identifier: language, optional region and variant.

    The language is stored lowercase and the region uppercase, so ``EN.yml``
    and ``en.yml`` name the same locale. The variant is kept as given.
    Equality and hashing are structural across all three segments.

    Attributes:
        language: Language segment (e.g. "en")
        region: Region segment (e.g. "US"), empty when absent
        variant: Variant segment (e.g. "POSIX"), empty when absent

    Example:
        >>> tag = LocaleTag("ja", "JP")
        >>> str(tag)
        'ja_JP'
        >>> [str(t) for t in LocaleTag("de", "DE", "formal").parents()]
        ['de_DE_formal', 'de_DE', 'de']
    """

    language: str
    region: str = ""
    variant: str = ""

    def __post_init__(self) -> None:
        """Reject non-string segments and normalize language/region case.

        Raises:
            TypeError: If any segment is not a str
        """
        for name in ("language", "region", "variant"):
            value = getattr(self, name)
            if not isinstance(value, str):
                msg = f"LocaleTag.{name} must be str, got {type(value).__name__}"
                raise TypeError(msg)

        object.__setattr__(self, "language", self.language.lower())
        object.__setattr__(self, "region", self.region.upper())

    def __str__(self) -> str:
        if self.variant:
            return LOCALE_SEGMENT_SEPARATOR.join((self.language, self.region, self.variant))
        if self.region:
            return LOCALE_SEGMENT_SEPARATOR.join((self.language, self.region))
        return self.language

    @property
    def segments(self) -> tuple[str, ...]:
        """Non-empty leading segments, in positional order."""
        match (self.region, self.variant):
            case ("", ""):
                return (self.language,)
            case (_, ""):
                return (self.language, self.region)
            case _:
                return (self.language, self.region, self.variant)

    def parents(self) -> Iterator[LocaleTag]:
        """Yield this tag followed by progressively less specific tags.

        ``de_DE_formal`` yields ``de_DE_formal``, ``de_DE``, ``de``. Used as
        the lookup chain when a message is missing from the exact locale.
        """
        yield self
        if self.variant:
            yield LocaleTag(self.language, self.region)
        if self.region:
            yield LocaleTag(self.language)

    def to_babel(self) -> Locale:
        """Convert to a babel.Locale (requires the ``babel`` extra)."""
        return get_babel_locale(self)


def parse_locale(raw: str | None) -> LocaleTag | None:
    """Parse ``language[_REGION[_variant]]`` into a LocaleTag.

    Args:
        raw: Locale string with segments separated by underscores

    Returns:
        LocaleTag whose segments match the input positionally, or None when
        the input is empty/None or has more than three segments.

    Example:
        >>> parse_locale("en_US")
        LocaleTag(language='en', region='US', variant='')
        >>> parse_locale("a_b_c_d") is None
        True
    """
    if not raw:
        return None

    segments = raw.split(LOCALE_SEGMENT_SEPARATOR)
    if len(segments) > MAX_LOCALE_SEGMENTS:
        return None
    return LocaleTag(*segments)


def locale_from_file_name(path: str | os.PathLike[str] | None) -> LocaleTag | None:
    """Derive a LocaleTag from the filename component of a path.

    The filename is truncated at its FIRST dot, so ``en.legacy.yml`` and
    ``en.yml`` both resolve to ``en``.

    Args:
        path: File path (only the final component is inspected)

    Returns:
        Parsed LocaleTag, or None if the path has no filename component or
        the name does not parse as a locale.
    """
    if path is None:
        return None

    file_name = Path(path).name
    if not file_name:
        return None

    stem, _, _ = file_name.partition(".")
    return parse_locale(stem)


@functools.lru_cache(maxsize=128)
def get_babel_locale(tag: LocaleTag) -> Locale:
    """Get a Babel Locale object for a tag, with caching.

    Args:
        tag: Locale tag to convert

    Returns:
        Babel Locale object

    Raises:
        BabelImportError: If Babel is not installed
        babel.core.UnknownLocaleError: If Babel has no data for the locale
    """
    locale_class = get_locale_class()
    return locale_class(
        tag.language,
        territory=tag.region or None,
        variant=tag.variant or None,
    )
