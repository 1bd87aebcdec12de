"""Tests for directory.py: DirectoryConfig and TranslationDirectory passes.

Covers directory creation, file enumeration and skipping, the strict
failure policy, version reconciliation triggers, publishing to the
translator, and unload/reload.

Python 3.13+.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from translationkit.bundle import TranslationBundle
from translationkit.directory import (
    DirectoryConfig,
    DirectoryLoadSummary,
    TranslationDirectory,
)
from translationkit.errors import BundleIOError, DirectoryLoadError, DirectoryStateError
from translationkit.loader import ConfigBundle
from translationkit.locale_utils import LocaleTag
from translationkit.reference import MappingReferenceCreator
from translationkit.registry import TranslationRegistry, Translator
from translationkit.storage import MappedConfig

EN = LocaleTag("en")
JA = LocaleTag("ja")

EN_YAML = "v: 1.0.0\ngreeting: Hello\nmenu:\n  open: Open\n"
JA_PROPERTIES = "v=1.0.0\ngreeting=\\u3053\\u3093\\u306b\\u3061\\u306f\n"

REFERENCE_DOCUMENTS = {
    "en": {"v": "1.1.0", "greeting": "Hi", "menu": {"open": "Open", "close": "Close"}},
    "ja": {"v": "1.1.0", "farewell": "sayonara"},
}


class RecordingCreator:
    """Reference creator that records every locale it is asked for."""

    def __init__(self, inner: MappingReferenceCreator | None = None) -> None:
        self.inner = inner or MappingReferenceCreator(REFERENCE_DOCUMENTS)
        self.calls: list[LocaleTag] = []

    def __call__(self, locale: LocaleTag) -> TranslationBundle | None:
        self.calls.append(locale)
        return self.inner(locale)


@pytest.fixture
def translations(tmp_path: Path) -> Path:
    """Directory with en.yml, ja.properties, and an unrelated notes.txt."""
    directory = tmp_path / "translations"
    directory.mkdir()
    (directory / "en.yml").write_text(EN_YAML, encoding="utf-8")
    (directory / "ja.properties").write_text(JA_PROPERTIES, encoding="utf-8")
    (directory / "notes.txt").write_text("not a translation\n", encoding="utf-8")
    return directory


def _directory(path: Path, translator: Translator | None = None, **options: object) -> TranslationDirectory:
    config = DirectoryConfig(path, translator or Translator(), **options)  # type: ignore[arg-type]
    return TranslationDirectory(config)


class TestDirectoryConfig:
    """Test configuration validation and derived flags."""

    def test_directory_coerced_to_path(self, tmp_path: Path) -> None:
        config = DirectoryConfig(str(tmp_path), Translator())
        assert config.directory == tmp_path
        assert isinstance(config.directory, Path)

    def test_directory_required(self) -> None:
        with pytest.raises(TypeError, match="directory"):
            DirectoryConfig(None, Translator())  # type: ignore[arg-type]

    def test_translator_required(self, tmp_path: Path) -> None:
        with pytest.raises(TypeError, match="translator"):
            DirectoryConfig(tmp_path, None)  # type: ignore[arg-type]

    def test_callbacks_must_be_callable(self, tmp_path: Path) -> None:
        with pytest.raises(TypeError, match="on_created"):
            DirectoryConfig(tmp_path, Translator(), on_created="seed")  # type: ignore[arg-type]

    def test_expected_version_must_be_str(self, tmp_path: Path) -> None:
        with pytest.raises(TypeError, match="expected_version"):
            DirectoryConfig(tmp_path, Translator(), expected_version=1)  # type: ignore[arg-type]

    def test_separator_validated(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="separator"):
            DirectoryConfig(tmp_path, Translator(), separator="")

    def test_immutable(self, tmp_path: Path) -> None:
        config = DirectoryConfig(tmp_path, Translator())
        with pytest.raises(AttributeError):
            config.expected_version = "2"  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("with_creator", "expected_version", "enabled"),
        [
            (True, "1.0.0", True),
            (True, "", False),
            (True, None, False),
            (False, "1.0.0", False),
        ],
    )
    def test_reconciliation_enabled(
        self, tmp_path: Path, with_creator: bool, expected_version: str | None, enabled: bool
    ) -> None:
        """Both a creator and a non-empty expected version are required."""
        config = DirectoryConfig(
            tmp_path,
            Translator(),
            expected_version=expected_version,
            reference_creator=RecordingCreator() if with_creator else None,
        )
        assert config.reconciliation_enabled is enabled

    def test_prerelease_detection(self, tmp_path: Path) -> None:
        assert DirectoryConfig(tmp_path, Translator(), expected_version="2.0-SNAPSHOT").is_prerelease
        assert not DirectoryConfig(tmp_path, Translator(), expected_version="2.0").is_prerelease
        assert not DirectoryConfig(
            tmp_path, Translator(), expected_version="2.0-SNAPSHOT", prerelease_suffix=None
        ).is_prerelease

    def test_default_registry_named_after_directory(self, tmp_path: Path) -> None:
        registry = DirectoryConfig(tmp_path / "messages", Translator()).create_registry()
        assert registry.name == "messages"

    def test_registry_factory_used(self, tmp_path: Path) -> None:
        config = DirectoryConfig(
            tmp_path, Translator(), registry_factory=lambda: TranslationRegistry("custom")
        )
        assert config.create_registry().name == "custom"


class TestLoad:
    """Test enumeration and publishing."""

    def test_loads_recognized_files_only(self, translations: Path) -> None:
        """en.yml and ja.properties load; notes.txt is skipped without error."""
        translator = Translator()
        directory = _directory(translations, translator)

        summary = directory.load()

        assert directory.loaded_locales == frozenset({EN, JA})
        assert summary.loaded == frozenset({EN, JA})
        assert summary.skipped == ("notes.txt",)
        assert not summary.created
        assert directory.is_loaded
        assert translator.translate("greeting", EN) == "Hello"
        assert translator.translate("menu.open", EN) == "Open"
        assert translator.translate("greeting", JA) == "こんにちは"

    def test_registry_published_to_translator(self, translations: Path) -> None:
        translator = Translator()
        directory = _directory(translations, translator)
        directory.load()
        assert translator.sources == (directory.registry,)
        assert directory.registry.locales == frozenset({EN, JA})

    def test_unparsable_file_names_skipped(self, translations: Path) -> None:
        """Files whose names are not locales are skipped, not errors."""
        (translations / "a_b_c_d.yml").write_text("k: v\n", encoding="utf-8")
        (translations / ".yml").write_text("k: v\n", encoding="utf-8")
        summary = _directory(translations).load()
        assert summary.loaded == frozenset({EN, JA})
        assert set(summary.skipped) == {"notes.txt", "a_b_c_d.yml", ".yml"}

    def test_subdirectories_ignored(self, translations: Path) -> None:
        """Only regular files directly inside the directory are considered."""
        nested = translations / "fr.yml"
        nested.mkdir()
        (nested / "de.yml").write_text("k: v\n", encoding="utf-8")
        summary = _directory(translations).load()
        assert summary.loaded == frozenset({EN, JA})

    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory publishes an empty registry."""
        translator = Translator()
        directory = _directory(tmp_path, translator)
        summary = directory.load()
        assert summary.loaded == frozenset()
        assert directory.registry.locales == frozenset()
        assert translator.sources == (directory.registry,)

    def test_registry_before_load(self, tmp_path: Path) -> None:
        directory = _directory(tmp_path)
        assert not directory.is_loaded
        with pytest.raises(DirectoryStateError):
            _ = directory.registry

    def test_summary_repr(self, translations: Path) -> None:
        summary = _directory(translations).load()
        assert isinstance(summary, DirectoryLoadSummary)
        assert "loaded=2" in repr(summary)


class TestEnsureDirectory:
    """Test directory creation and the on_created callback."""

    def test_missing_directory_created(self, tmp_path: Path) -> None:
        target = tmp_path / "new" / "translations"
        created: list[Path] = []
        summary = _directory(target, on_created=created.append).load()

        assert target.is_dir()
        assert created == [target]
        assert summary.created
        assert summary.loaded == frozenset()

    def test_callback_not_called_for_existing_directory(self, translations: Path) -> None:
        created: list[Path] = []
        summary = _directory(translations, on_created=created.append).load()
        assert created == []
        assert not summary.created

    def test_seeded_files_are_loaded(self, tmp_path: Path) -> None:
        """Files written by on_created are picked up in the same pass."""
        target = tmp_path / "translations"

        def seed(path: Path) -> None:
            (path / "en.yml").write_text(EN_YAML, encoding="utf-8")

        translator = Translator()
        _directory(target, translator, on_created=seed).load()
        assert translator.translate("greeting", EN) == "Hello"

    def test_callback_failure_aborts(self, tmp_path: Path) -> None:
        target = tmp_path / "translations"
        translator = Translator()

        def fail(path: Path) -> None:
            raise PermissionError(f"cannot seed {path}")

        directory = _directory(target, translator, on_created=fail)
        with pytest.raises(DirectoryLoadError) as exc_info:
            directory.load()
        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert exc_info.value.path == target
        assert translator.sources == ()
        assert not directory.is_loaded

    def test_creation_failure_aborts(self, tmp_path: Path) -> None:
        """A file in the way of the directory makes creation fail."""
        blocker = tmp_path / "translations"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(DirectoryLoadError):
            _directory(blocker).load()


class TestStrictFailure:
    """Test that a bad file aborts the whole pass."""

    def test_corrupt_file_aborts_pass(self, translations: Path) -> None:
        (translations / "fr.yml").write_text("key: [unclosed\n", encoding="utf-8")
        translator = Translator()
        directory = _directory(translations, translator)

        with pytest.raises(DirectoryLoadError) as exc_info:
            directory.load()

        error = exc_info.value
        assert error.locale == LocaleTag("fr")
        assert error.path == translations / "fr.yml"
        assert isinstance(error.__cause__, BundleIOError)
        assert translator.sources == ()
        assert not directory.is_loaded
        assert directory.loaded_locales == frozenset()

    def test_recursive_alias_aborts_pass(self, translations: Path) -> None:
        """A self-referencing YAML alias is a load failure like any other."""
        (translations / "en.yml").write_text("a: &x\n  b: *x\n", encoding="utf-8")
        translator = Translator()
        directory = _directory(translations, translator)

        with pytest.raises(DirectoryLoadError) as exc_info:
            directory.load()

        error = exc_info.value
        assert error.locale == EN
        assert isinstance(error.__cause__, BundleIOError)
        assert isinstance(error.__cause__.__cause__, ValueError)
        assert translator.sources == ()
        assert not directory.is_loaded

    def test_failed_reload_withdraws_previous_registry(self, translations: Path) -> None:
        """A reload resets first, so a failing pass leaves nothing published."""
        translator = Translator()
        directory = _directory(translations, translator)
        directory.load()

        (translations / "fr.yml").write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(DirectoryLoadError):
            directory.load()
        assert translator.sources == ()
        assert not directory.is_loaded


class TestReconciliation:
    """Test version-driven reconciliation against reference bundles."""

    def test_stale_bundles_topped_up_and_written(self, translations: Path) -> None:
        creator = RecordingCreator()
        translator = Translator()
        directory = _directory(
            translations, translator, expected_version="1.1.0", reference_creator=creator
        )

        summary = directory.load()

        assert set(creator.calls) == {EN, JA}
        assert summary.reconciled == frozenset({EN, JA})
        assert summary.written == frozenset({EN, JA})

        # Local text wins over the reference; missing keys are added.
        assert translator.translate("greeting", EN) == "Hello"
        assert translator.translate("menu.close", EN) == "Close"
        assert translator.translate("farewell", JA) == "sayonara"

        document = yaml.safe_load((translations / "en.yml").read_text(encoding="utf-8"))
        assert document["v"] == "1.1.0"
        assert document["menu"] == {"open": "Open", "close": "Close"}
        assert "v=1.1.0" in (translations / "ja.properties").read_text(encoding="utf-8")

    def test_reference_section_under_local_leaf(self, translations: Path) -> None:
        """Reference keys nested under a local leaf survive the rewrite and reload."""
        (translations / "en.yml").write_text("v: 1.0.0\nmenu: Menu\n", encoding="utf-8")
        translator = Translator()
        directory = _directory(
            translations,
            translator,
            expected_version="1.1.0",
            reference_creator=RecordingCreator(),
        )
        directory.load()

        document = yaml.safe_load((translations / "en.yml").read_text(encoding="utf-8"))
        assert document["menu"] == "Menu"
        assert document["menu.open"] == "Open"
        assert document["menu.close"] == "Close"

        directory.load()
        assert translator.translate("menu", EN) == "Menu"
        assert translator.translate("menu.close", EN) == "Close"

    def test_second_pass_is_quiet(self, translations: Path) -> None:
        """Once files carry the expected version, the creator is not consulted."""
        creator = RecordingCreator()
        directory = _directory(translations, expected_version="1.1.0", reference_creator=creator)
        directory.load()
        creator.calls.clear()

        summary = directory.load()

        assert creator.calls == []
        assert summary.reconciled == frozenset()

    @pytest.mark.parametrize("expected_version", [None, "", "1.0.0"])
    def test_creator_not_called(self, translations: Path, expected_version: str | None) -> None:
        """Unset, empty, or matching expected versions skip reconciliation."""
        creator = RecordingCreator()
        original = (translations / "en.yml").read_text(encoding="utf-8")

        summary = _directory(
            translations, expected_version=expected_version, reference_creator=creator
        ).load()

        assert creator.calls == []
        assert summary.reconciled == frozenset()
        assert (translations / "en.yml").read_text(encoding="utf-8") == original

    def test_prerelease_always_reconciles(self, translations: Path) -> None:
        """A pre-release expected version forces reconciliation even when equal."""
        (translations / "en.yml").write_text("v: 2.0-SNAPSHOT\ngreeting: Hello\n", encoding="utf-8")
        (translations / "ja.properties").unlink()
        creator = RecordingCreator(
            MappingReferenceCreator({"en": {"extra": "new key"}}, version="2.0-SNAPSHOT")
        )
        translator = Translator()

        summary = _directory(
            translations, translator, expected_version="2.0-SNAPSHOT", reference_creator=creator
        ).load()

        assert creator.calls == [EN]
        assert summary.reconciled == frozenset({EN})
        assert summary.written == frozenset({EN})
        assert translator.translate("extra", EN) == "new key"

    def test_prerelease_rule_can_be_disabled(self, translations: Path) -> None:
        (translations / "en.yml").write_text("v: 2.0-SNAPSHOT\ngreeting: Hello\n", encoding="utf-8")
        (translations / "ja.properties").unlink()
        creator = RecordingCreator()

        _directory(
            translations,
            expected_version="2.0-SNAPSHOT",
            reference_creator=creator,
            prerelease_suffix=None,
        ).load()

        assert creator.calls == []

    def test_no_reference_for_locale(self, translations: Path) -> None:
        """A None reference leaves the bundle as it is."""
        creator = RecordingCreator(MappingReferenceCreator({}))
        original = (translations / "en.yml").read_text(encoding="utf-8")

        summary = _directory(translations, expected_version="9", reference_creator=creator).load()

        assert set(creator.calls) == {EN, JA}
        assert summary.reconciled == frozenset()
        assert summary.loaded == frozenset({EN, JA})
        assert (translations / "en.yml").read_text(encoding="utf-8") == original

    def test_unloaded_reference_skipped_with_warning(
        self, translations: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A reference that was never loaded is logged and ignored."""

        def unloaded(locale: LocaleTag) -> TranslationBundle:
            return ConfigBundle(locale, MappedConfig({"k": "v"}))

        with caplog.at_level(logging.WARNING, logger="translationkit.directory"):
            summary = _directory(
                translations, expected_version="9", reference_creator=unloaded
            ).load()

        assert summary.reconciled == frozenset()
        assert summary.loaded == frozenset({EN, JA})
        assert "not loaded" in caplog.text

    def test_reference_with_same_keys_updates_version_only(self, translations: Path) -> None:
        """A version change alone is still written back."""
        (translations / "ja.properties").unlink()
        creator = RecordingCreator(
            MappingReferenceCreator({"en": {"greeting": "Hi"}}, version="1.2.0")
        )

        summary = _directory(translations, expected_version="1.2.0", reference_creator=creator).load()

        assert summary.written == frozenset({EN})
        document = yaml.safe_load((translations / "en.yml").read_text(encoding="utf-8"))
        assert document["v"] == "1.2.0"
        assert document["greeting"] == "Hello"

    def test_creator_failure_aborts(self, translations: Path) -> None:
        translator = Translator()

        def broken(locale: LocaleTag) -> TranslationBundle | None:
            raise FileNotFoundError(f"no defaults for {locale}")

        directory = _directory(
            translations, translator, expected_version="9", reference_creator=broken
        )
        with pytest.raises(DirectoryLoadError) as exc_info:
            directory.load()
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert translator.sources == ()

    def test_needs_reconcile(self, tmp_path: Path) -> None:
        directory = _directory(
            tmp_path, expected_version="1.1.0", reference_creator=RecordingCreator()
        )
        stale = ConfigBundle(EN, MappedConfig({"v": "1.0.0"}))
        stale.load()
        current = ConfigBundle(EN, MappedConfig({"v": "1.1.0"}))
        current.load()
        assert directory.needs_reconcile(stale)
        assert not directory.needs_reconcile(current)


class TestUnload:
    """Test unload() and reload."""

    def test_unload_withdraws_registry(self, translations: Path) -> None:
        translator = Translator()
        directory = _directory(translations, translator)
        directory.load()

        directory.unload()

        assert translator.sources == ()
        assert directory.loaded_locales == frozenset()
        assert not directory.is_loaded
        assert translator.translate("greeting", EN) is None

    def test_unload_touches_no_files(self, translations: Path) -> None:
        directory = _directory(translations)
        directory.load()
        before = sorted(path.name for path in translations.iterdir())
        directory.unload()
        assert sorted(path.name for path in translations.iterdir()) == before

    def test_unload_when_not_loaded_is_noop(self, tmp_path: Path) -> None:
        _directory(tmp_path).unload()

    def test_reload_replaces_registry(self, translations: Path) -> None:
        """A second load() swaps the published registry for a fresh one."""
        translator = Translator()
        directory = _directory(translations, translator)
        directory.load()
        first = directory.registry

        (translations / "ja.properties").unlink()
        directory.load()

        assert directory.registry is not first
        assert translator.sources == (directory.registry,)
        assert directory.loaded_locales == frozenset({EN})
        assert translator.translate("greeting", JA) is None

    def test_independent_directories_share_translator(self, tmp_path: Path) -> None:
        """Several directories can publish into one translator."""
        first_dir = tmp_path / "core"
        second_dir = tmp_path / "plugin"
        first_dir.mkdir()
        second_dir.mkdir()
        (first_dir / "en.yml").write_text("greeting: Hello\n", encoding="utf-8")
        (second_dir / "en.yml").write_text("plugin:\n  name: Plugin\n", encoding="utf-8")

        translator = Translator()
        first = _directory(first_dir, translator)
        second = _directory(second_dir, translator)
        first.load()
        second.load()

        assert translator.translate("greeting", EN) == "Hello"
        assert translator.translate("plugin.name", EN) == "Plugin"

        first.unload()
        assert translator.translate("greeting", EN) is None
        assert translator.translate("plugin.name", EN) == "Plugin"
