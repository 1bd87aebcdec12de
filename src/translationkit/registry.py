"""In-memory translation registries and the translator sink.

A TranslationDirectory publishes its bundles into a TranslationRegistry
and then hands that registry to a sink (anything implementing
MessageSink). Translator is the sink shipped with the library: it holds
any number of registries and looks messages up through all of them with
locale fallback.

There is no process-wide translator. Create one and pass it to every
directory that should publish into it.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

from translationkit.locale_utils import LocaleTag

__all__ = ["MessageSink", "TranslationRegistry", "Translator"]

logger = logging.getLogger(__name__)


class TranslationRegistry:
    """Flat messages for several locales under one name.

    Lookup falls back from the requested locale through its parents
    (``de_DE_formal`` -> ``de_DE`` -> ``de``) and finally to
    ``default_locale`` when one is set.

    Example:
        >>> registry = TranslationRegistry("myapp")
        >>> registry.register_all(LocaleTag("en"), {"greeting": "Hello"})
        >>> registry.translate("greeting", LocaleTag("en", "GB"))
        'Hello'
    """

    __slots__ = ("_default_locale", "_messages", "_name")

    def __init__(self, name: str = "translations", *, default_locale: LocaleTag | None = None) -> None:
        self._name = name
        self._default_locale = default_locale
        self._messages: dict[LocaleTag, dict[str, str]] = {}

    def __repr__(self) -> str:
        return f"TranslationRegistry(name={self._name!r}, locales={len(self._messages)})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def default_locale(self) -> LocaleTag | None:
        return self._default_locale

    @property
    def locales(self) -> frozenset[LocaleTag]:
        return frozenset(self._messages)

    def register(self, locale: LocaleTag, key: str, text: str) -> None:
        self._messages.setdefault(locale, {})[key] = text

    def register_all(self, locale: LocaleTag, messages: Mapping[str, str]) -> None:
        """Register every message of ``messages`` for ``locale``.

        Messages already registered under the same key are replaced.
        """
        self._messages.setdefault(locale, {}).update(messages)

    def unregister_all(self, locale: LocaleTag) -> bool:
        """Drop every message of a locale. Returns False if none were registered."""
        return self._messages.pop(locale, None) is not None

    def messages(self, locale: LocaleTag) -> Mapping[str, str]:
        """Snapshot of the messages registered for exactly ``locale``."""
        return MappingProxyType(dict(self._messages.get(locale, {})))

    def _candidates(self, locale: LocaleTag) -> list[LocaleTag]:
        chain = list(locale.parents())
        if self._default_locale is not None and self._default_locale not in chain:
            chain.append(self._default_locale)
        return chain

    def translate(self, key: str, locale: LocaleTag) -> str | None:
        """Find the text for ``key``, walking the locale fallback chain."""
        for candidate in self._candidates(locale):
            text = self._messages.get(candidate, {}).get(key)
            if text is not None:
                return text
        return None

    def contains(self, key: str, locale: LocaleTag | None = None) -> bool:
        """True if ``key`` resolves for ``locale`` (or for any locale when None)."""
        if locale is None:
            return any(key in messages for messages in self._messages.values())
        return self.translate(key, locale) is not None


class MessageSink(Protocol):
    """Destination a directory publishes its registry into."""

    def add_source(self, registry: TranslationRegistry) -> bool:
        """Make a registry's messages live. Returns False if already present."""

    def remove_source(self, registry: TranslationRegistry) -> bool:
        """Withdraw a registry. Returns False if it was not present."""


class Translator:
    """MessageSink that resolves keys across all registered sources.

    Sources are consulted in the order they were added; the first one that
    resolves a key (with locale fallback) wins.
    """

    __slots__ = ("_sources",)

    def __init__(self) -> None:
        self._sources: list[TranslationRegistry] = []

    def __repr__(self) -> str:
        names = [source.name for source in self._sources]
        return f"Translator(sources={names!r})"

    @property
    def sources(self) -> tuple[TranslationRegistry, ...]:
        return tuple(self._sources)

    def has_source(self, registry: TranslationRegistry) -> bool:
        return any(source is registry for source in self._sources)

    def add_source(self, registry: TranslationRegistry) -> bool:
        if self.has_source(registry):
            return False
        self._sources.append(registry)
        logger.debug("Added translation source %r", registry.name)
        return True

    def remove_source(self, registry: TranslationRegistry) -> bool:
        for index, source in enumerate(self._sources):
            if source is registry:
                del self._sources[index]
                logger.debug("Removed translation source %r", registry.name)
                return True
        return False

    def translate(self, key: str, locale: LocaleTag) -> str | None:
        for source in self._sources:
            text = source.translate(key, locale)
            if text is not None:
                return text
        return None
