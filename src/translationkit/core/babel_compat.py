"""Babel compatibility layer for optional dependency handling.

Provides centralized, lazy import infrastructure for Babel so that the
loading and reconciliation stack never imports it.

Design Rationale:
    translationkit supports two installation modes:
    - Core: `pip install translationkit` (YAML and properties loading)
    - Babel: `pip install translationkit[babel]` (LocaleTag -> babel.Locale)

    This module ensures that:
    1. Core installations never trigger Babel imports
    2. Babel-dependent helpers get a consistent, helpful error message
    3. Babel types are available for TYPE_CHECKING without runtime import

Usage Pattern:
    from translationkit.core.babel_compat import get_locale_class

    def to_babel(tag: LocaleTag) -> Locale:
        locale_class = get_locale_class()  # Raises BabelImportError if missing
        return locale_class(tag.language, territory=tag.region or None)

Python 3.13+.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "BabelImportError",
    "get_locale_class",
    "is_babel_available",
    "require_babel",
]


@lru_cache(maxsize=1)
def _check_babel_available() -> bool:
    """Check if Babel is installed (computed once, cached via lru_cache)."""
    try:
        import babel  # noqa: F401, PLC0415  # pylint: disable=unused-import

        return True
    except ImportError:
        return False


class BabelImportError(ImportError):
    """Raised when Babel is required but not installed.

    Provides a consistent, helpful error message directing users to install
    the Babel extra.
    """

    def __init__(self, feature: str) -> None:
        """Create error with feature-specific message.

        Args:
            feature: Name of the feature/function requiring Babel
        """
        message = (
            f"{feature} requires Babel for CLDR locale data. "
            "Install with: pip install translationkit[babel]"
        )
        super().__init__(message)
        self.feature = feature


def is_babel_available() -> bool:
    """Check if Babel is installed.

    Returns:
        True if Babel is installed and importable, False otherwise.
    """
    return _check_babel_available()


def require_babel(feature: str) -> None:
    """Assert that Babel is available, raising BabelImportError if not.

    Args:
        feature: Name of the feature requiring Babel (for error message)

    Raises:
        BabelImportError: If Babel is not installed
    """
    if not _check_babel_available():
        raise BabelImportError(feature)


def get_locale_class() -> type[Locale]:
    """Get the Babel Locale class.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_locale_class")
    from babel import Locale  # noqa: PLC0415

    return Locale

