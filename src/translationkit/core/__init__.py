"""Core utilities shared across the locale, bundle, and directory layers.

Exports:
    BabelImportError: Raised when a Babel-backed helper is used without Babel
    is_babel_available: Check whether the optional Babel extra is installed

Python 3.13+.
"""

from .babel_compat import BabelImportError, is_babel_available

__all__ = ["BabelImportError", "is_babel_available"]
