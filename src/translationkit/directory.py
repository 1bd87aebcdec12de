"""Directory-wide loading and version reconciliation.

TranslationDirectory turns a directory of per-locale translation files
into a live TranslationRegistry:

1. Reset: a previously loaded registry is withdrawn from the sink.
2. Ensure directory: a missing directory is created and the on_created
   callback runs (typically to seed default files).
3. Enumerate: every regular file directly in the directory whose name
   parses as a locale and whose extension is recognized is loaded. Other
   files are skipped. A file that fails to load aborts the whole pass.
4. Reconcile: a bundle whose version differs from the expected version
   (or when the expected version is a pre-release) receives the keys it
   lacks from a reference bundle, takes the reference's version, and is
   written back to disk.
5. Publish: all bundles are registered in a fresh registry, which is then
   handed to the sink.

Key architectural decisions:
- Immutable DirectoryConfig validated once at construction
- The sink is passed in explicitly; there is no global translator
- Strict failure policy: a pass either publishes everything or nothing
- Not thread-safe: callers serialize load()/unload() on one instance

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from translationkit.constants import PATH_SEPARATOR, PRERELEASE_SUFFIX
from translationkit.errors import BundleIOError, DirectoryLoadError, DirectoryStateError
from translationkit.loader import FileBundle
from translationkit.locale_utils import LocaleTag, locale_from_file_name
from translationkit.registry import MessageSink, TranslationRegistry
from translationkit.storage import open_config

if TYPE_CHECKING:
    from collections.abc import Iterator

    from translationkit.bundle import TranslationBundle

__all__ = [
    "DirectoryConfig",
    "DirectoryCreatedCallback",
    "DirectoryLoadSummary",
    "ReferenceCreator",
    "TranslationDirectory",
]

logger = logging.getLogger(__name__)

DirectoryCreatedCallback: TypeAlias = Callable[[Path], None]
"""Called with the directory right after this library created it."""

ReferenceCreator: TypeAlias = Callable[[LocaleTag], "TranslationBundle | None"]
"""Returns a loaded reference bundle for a locale, or None if there is none.

May raise OSError; a failure aborts the directory pass.
"""


@dataclass(frozen=True, slots=True)
class DirectoryConfig:
    """Immutable configuration for a TranslationDirectory.

    Reconciliation is enabled only when both ``reference_creator`` and a
    non-empty ``expected_version`` are configured.

    Attributes:
        directory: Directory holding ``<locale>.<ext>`` files
        translator: Sink the loaded registry is published to
        registry_factory: Creates the registry for each pass; defaults to a
            TranslationRegistry named after the directory
        on_created: Callback run when the directory had to be created
        expected_version: Version every bundle should carry
        reference_creator: Supplies reference bundles for stale locales
        prerelease_suffix: Expected versions ending with this suffix always
            trigger reconciliation; None disables the rule
        separator: Character joining section names to child keys

    Example:
        >>> config = DirectoryConfig(
        ...     "translations",
        ...     translator=Translator(),
        ...     expected_version="2.1.0",
        ...     reference_creator=DirectoryReferenceCreator("defaults"),
        ... )
        >>> config.reconciliation_enabled
        True
    """

    directory: Path
    translator: MessageSink
    registry_factory: Callable[[], TranslationRegistry] | None = None
    on_created: DirectoryCreatedCallback | None = None
    expected_version: str | None = None
    reference_creator: ReferenceCreator | None = None
    prerelease_suffix: str | None = PRERELEASE_SUFFIX
    separator: str = PATH_SEPARATOR

    def __post_init__(self) -> None:
        """Normalize the directory path and validate collaborators.

        Raises:
            TypeError: If directory or translator is None, or a callback is
                not callable, or expected_version is not a str
            ValueError: If separator is not a single character
        """
        if self.directory is None:
            msg = "directory is required"
            raise TypeError(msg)
        object.__setattr__(self, "directory", Path(self.directory))

        if self.translator is None:
            msg = "translator is required"
            raise TypeError(msg)

        for name in ("registry_factory", "on_created", "reference_creator"):
            value = getattr(self, name)
            if value is not None and not callable(value):
                msg = f"{name} must be callable, got {type(value).__name__}"
                raise TypeError(msg)

        if self.expected_version is not None and not isinstance(self.expected_version, str):
            msg = f"expected_version must be a str, got {type(self.expected_version).__name__}"
            raise TypeError(msg)

        if len(self.separator) != 1:
            msg = f"separator must be a single character, got {self.separator!r}"
            raise ValueError(msg)

    @property
    def reconciliation_enabled(self) -> bool:
        match (self.reference_creator, self.expected_version):
            case (None, _) | (_, None | ""):
                return False
            case _:
                return True

    @property
    def is_prerelease(self) -> bool:
        """True if the expected version carries the pre-release suffix."""
        return bool(
            self.expected_version
            and self.prerelease_suffix
            and self.expected_version.endswith(self.prerelease_suffix)
        )

    def create_registry(self) -> TranslationRegistry:
        if self.registry_factory is not None:
            return self.registry_factory()
        return TranslationRegistry(self.directory.name)


@dataclass(frozen=True, slots=True)
class DirectoryLoadSummary:
    """Outcome of one successful TranslationDirectory.load() pass.

    Attributes:
        loaded: Locales published by the pass
        reconciled: Locales that were merged against a reference bundle
        written: Locales whose files were rewritten by reconciliation
        skipped: Names of files ignored during the scan
        created: True if the directory did not exist and was created
    """

    loaded: frozenset[LocaleTag]
    reconciled: frozenset[LocaleTag] = frozenset()
    written: frozenset[LocaleTag] = frozenset()
    skipped: tuple[str, ...] = ()
    created: bool = False

    def __repr__(self) -> str:
        return (
            f"DirectoryLoadSummary(loaded={len(self.loaded)}, "
            f"reconciled={len(self.reconciled)}, "
            f"written={len(self.written)}, "
            f"skipped={len(self.skipped)}, "
            f"created={self.created})"
        )


@dataclass(slots=True)
class _PassState:
    """Mutable bookkeeping for a single load() pass."""

    reconciled: set[LocaleTag] = field(default_factory=set)
    written: set[LocaleTag] = field(default_factory=set)
    skipped: list[str] = field(default_factory=list)


class TranslationDirectory:
    """Loads, reconciles, and publishes every translation file in a directory.

    Example:
        >>> translator = Translator()
        >>> directory = TranslationDirectory(DirectoryConfig("translations", translator))
        >>> summary = directory.load()
        >>> translator.translate("greeting", LocaleTag("en"))
        'Hello'
        >>> directory.unload()
    """

    __slots__ = ("_config", "_loaded_locales", "_registry")

    def __init__(self, config: DirectoryConfig) -> None:
        if not isinstance(config, DirectoryConfig):
            msg = f"config must be a DirectoryConfig, got {type(config).__name__}"
            raise TypeError(msg)
        self._config = config
        self._registry: TranslationRegistry | None = None
        self._loaded_locales: frozenset[LocaleTag] = frozenset()

    def __repr__(self) -> str:
        return (
            f"TranslationDirectory(directory={str(self._config.directory)!r}, "
            f"loaded={self.is_loaded})"
        )

    @property
    def config(self) -> DirectoryConfig:
        return self._config

    @property
    def directory(self) -> Path:
        return self._config.directory

    @property
    def is_loaded(self) -> bool:
        return self._registry is not None

    @property
    def registry(self) -> TranslationRegistry:
        """Registry published by the last successful load().

        Raises:
            DirectoryStateError: If the directory is not loaded
        """
        if self._registry is None:
            msg = f"{self._config.directory} is not loaded; call load() first"
            raise DirectoryStateError(msg)
        return self._registry

    @property
    def loaded_locales(self) -> frozenset[LocaleTag]:
        return self._loaded_locales

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self) -> DirectoryLoadSummary:
        """Run one full pass and publish the result to the translator.

        Returns:
            Summary of what the pass loaded, reconciled, and skipped

        Raises:
            DirectoryLoadError: If the directory cannot be created or listed,
                the on_created callback fails, a recognized file cannot be
                loaded, a reference bundle cannot be created, or a
                reconciled bundle cannot be saved. Nothing is published.
        """
        if self._registry is not None:
            self.unload()

        created = self._ensure_directory()
        state = _PassState()

        bundles = [bundle for bundle in self._load_bundles(state) if bundle.is_loaded]
        for bundle in bundles:
            self._reconcile(bundle, state)

        registry = self._config.create_registry()
        for bundle in bundles:
            bundle.register(registry)
        loaded = frozenset(bundle.locale for bundle in bundles)

        self._registry = registry
        self._loaded_locales = loaded
        self._config.translator.add_source(registry)

        logger.info(
            "Loaded %d locale(s) from %s (%d reconciled, %d skipped)",
            len(loaded),
            self._config.directory,
            len(state.reconciled),
            len(state.skipped),
        )
        return DirectoryLoadSummary(
            loaded=loaded,
            reconciled=frozenset(state.reconciled),
            written=frozenset(state.written),
            skipped=tuple(state.skipped),
            created=created,
        )

    def unload(self) -> None:
        """Withdraw the registry from the translator and forget loaded locales.

        Touches no files. Calling unload() on an unloaded directory is a no-op.
        """
        if self._registry is not None:
            self._config.translator.remove_source(self._registry)
        self._loaded_locales = frozenset()
        self._registry = None

    def needs_reconcile(self, bundle: TranslationBundle) -> bool:
        """Decide whether a bundle must be reconciled against a reference.

        True only when reconciliation is enabled and either the bundle's
        version differs from the expected version or the expected version
        is a pre-release.
        """
        config = self._config
        if not config.reconciliation_enabled:
            return False
        return bundle.version != config.expected_version or config.is_prerelease

    # ------------------------------------------------------------------
    # Pass steps
    # ------------------------------------------------------------------

    def _ensure_directory(self) -> bool:
        directory = self._config.directory
        if directory.is_dir():
            return False

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Could not create translation directory {directory}: {e}"
            raise DirectoryLoadError(msg, path=directory) from e
        logger.info("Created translation directory %s", directory)

        on_created = self._config.on_created
        if on_created is not None:
            try:
                on_created(directory)
            except OSError as e:
                msg = f"Could not prepare new translation directory {directory}: {e}"
                raise DirectoryLoadError(msg, path=directory) from e
        return True

    def _list_files(self) -> list[Path]:
        directory = self._config.directory
        try:
            return sorted(path for path in directory.iterdir() if path.is_file())
        except OSError as e:
            msg = f"Could not list translation directory {directory}: {e}"
            raise DirectoryLoadError(msg, path=directory) from e

    def _load_bundles(self, state: _PassState) -> Iterator[FileBundle]:
        for path in self._list_files():
            locale = locale_from_file_name(path)
            if locale is None:
                logger.debug("Skipping %s: file name is not a locale", path.name)
                state.skipped.append(path.name)
                continue
            config = open_config(path, separator=self._config.separator)
            if config is None:
                logger.debug("Skipping %s: unsupported file type", path.name)
                state.skipped.append(path.name)
                continue

            bundle = FileBundle(locale, config, separator=self._config.separator)
            try:
                bundle.load()
            except BundleIOError as e:
                msg = f"Could not load translation file {path.name} ({locale}): {e}"
                raise DirectoryLoadError(msg, locale=locale, path=path) from e
            yield bundle

    def _reconcile(self, bundle: FileBundle, state: _PassState) -> None:
        if not self.needs_reconcile(bundle):
            return

        creator = self._config.reference_creator
        assert creator is not None  # guaranteed by reconciliation_enabled
        locale = bundle.locale

        try:
            reference = creator(locale)
        except OSError as e:
            msg = f"Could not create reference bundle for {locale}: {e}"
            raise DirectoryLoadError(msg, locale=locale, path=bundle.path) from e

        if reference is None:
            logger.debug("No reference bundle for %s; leaving it as is", locale)
            return
        if not reference.is_loaded:
            logger.warning("Reference bundle for %s is not loaded; skipping", locale)
            return

        added = bundle.merge(reference)
        bundle.set_version(reference.version)
        state.reconciled.add(locale)

        try:
            written = bundle.save()
        except BundleIOError as e:
            msg = f"Could not save reconciled translations for {locale}: {e}"
            raise DirectoryLoadError(msg, locale=locale, path=bundle.path) from e

        if written:
            state.written.add(locale)
            logger.info(
                "Updated %s to version %r (%d message(s) added)",
                bundle.path.name,
                bundle.version,
                added,
            )
