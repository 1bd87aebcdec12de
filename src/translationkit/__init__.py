"""translationkit - Per-locale translation files with version reconciliation.

Loads ``<locale>.yml`` / ``<locale>.properties`` files from a directory,
flattens their nested keys into flat message maps, tops up stale files
with the keys they lack from a reference source, and publishes the
result to a translator.

Public API:
    TranslationDirectory - Load, reconcile, and publish a whole directory
    DirectoryConfig - Immutable configuration for TranslationDirectory
    TranslationBundle - One locale's flattened messages with version state
    FileBundle - Bundle backed by a YAML or .properties file
    ConfigBundle - Bundle backed by an in-memory document
    Translator - Sink resolving messages across published registries
    TranslationRegistry - Messages for several locales under one name
    LocaleTag - language / region / variant identifier
    parse_locale - Parse ``language_REGION_variant`` strings
    locale_from_file_name - Derive a LocaleTag from a file name

Exceptions:
    TranslationError - Base exception class
    BundleIOError - Backing store unreadable, unparsable, or unwritable
    BundleStateError - Merge from a bundle that was never loaded
    DirectoryLoadError - A directory pass was aborted

Submodules:
    translationkit.storage - Backing stores (YAML, .properties, in-memory)
    translationkit.reference - Reference creators and on_created helpers
    translationkit.file_types - Extension classification
"""

from .bundle import TranslationBundle
from .directory import DirectoryConfig, DirectoryLoadSummary, TranslationDirectory
from .errors import (
    BundleIOError,
    BundleStateError,
    DirectoryLoadError,
    DirectoryStateError,
    TranslationError,
)
from .loader import ConfigBundle, FileBundle, create_file_bundle
from .locale_utils import LocaleTag, locale_from_file_name, parse_locale
from .reference import DirectoryReferenceCreator, MappingReferenceCreator, copy_defaults
from .registry import TranslationRegistry, Translator

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("translationkit")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "BundleIOError",
    "BundleStateError",
    "ConfigBundle",
    "DirectoryConfig",
    "DirectoryLoadError",
    "DirectoryLoadSummary",
    "DirectoryReferenceCreator",
    "DirectoryStateError",
    "FileBundle",
    "LocaleTag",
    "MappingReferenceCreator",
    "TranslationBundle",
    "TranslationDirectory",
    "TranslationError",
    "TranslationRegistry",
    "Translator",
    "__version__",
    "copy_defaults",
    "create_file_bundle",
    "locale_from_file_name",
    "parse_locale",
]
