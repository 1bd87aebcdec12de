"""translationkit exception hierarchy.

Every error raised by the library derives from TranslationError. Error
kinds that correspond to a builtin category also inherit that builtin, so
callers may catch either ``OSError`` or ``BundleIOError`` for I/O failures.

Hierarchy:
    TranslationError (base)
    ├─ BundleIOError (also OSError: unreadable/unwritable/unparsable store)
    ├─ BundleStateError (also RuntimeError: merge from an unloaded bundle)
    ├─ DirectoryLoadError (fatal failure of one directory pass)
    ├─ DirectoryStateError (also RuntimeError: registry used before load)
    └─ PropertiesSyntaxError (also ValueError: malformed .properties line)

Python 3.13+.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from translationkit.locale_utils import LocaleTag

__all__ = [
    "BundleIOError",
    "BundleStateError",
    "DirectoryLoadError",
    "DirectoryStateError",
    "PropertiesSyntaxError",
    "TranslationError",
]


class TranslationError(Exception):
    """Base exception for all translationkit errors."""


class BundleIOError(TranslationError, OSError):
    """Backing store of a bundle could not be read, parsed, or written.

    The underlying exception (OSError, yaml.YAMLError, PropertiesSyntaxError)
    is always chained as ``__cause__``.

    Attributes:
        path: File behind the bundle, or None for in-memory stores
        locale: Locale of the bundle, if known
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        locale: LocaleTag | None = None,
    ) -> None:
        """Initialize BundleIOError.

        Args:
            message: Human-readable error description
            path: File behind the bundle
            locale: Locale of the bundle
        """
        super().__init__(message)
        self.path = path
        self.locale = locale


class BundleStateError(TranslationError, RuntimeError):
    """Bundle operation attempted in the wrong lifecycle state.

    Raised when merging from a bundle that never completed load(). This
    signals a programming error and is never recovered automatically.
    """


class DirectoryLoadError(TranslationError):
    """A directory pass was aborted.

    Raised when a recognized file fails to load, when a reference creator
    fails, or when persisting a reconciled bundle fails. No registry is
    published for a failed pass.

    Attributes:
        locale: Locale whose processing failed, if known
        path: File being processed, if known
    """

    def __init__(
        self,
        message: str,
        *,
        locale: LocaleTag | None = None,
        path: Path | None = None,
    ) -> None:
        """Initialize DirectoryLoadError.

        Args:
            message: Human-readable error description
            locale: Locale whose processing failed
            path: File being processed
        """
        super().__init__(message)
        self.locale = locale
        self.path = path


class DirectoryStateError(TranslationError, RuntimeError):
    """Directory accessed in a state that does not support the operation."""


class PropertiesSyntaxError(TranslationError, ValueError):
    """Malformed content in a .properties file.

    Attributes:
        line: 1-based line number where the problem was found
    """

    def __init__(self, message: str, *, line: int) -> None:
        """Initialize PropertiesSyntaxError.

        Args:
            message: Human-readable error description
            line: 1-based line number of the offending line
        """
        super().__init__(f"line {line}: {message}")
        self.line = line
