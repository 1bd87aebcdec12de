"""TranslationDirectory Example - Loading and Reconciling a Translation Directory.

Demonstrates loading per-locale translation files, keeping them in step
with a set of shipped defaults, and resolving messages with locale
fallback.

Scenarios covered:
1. Flattening a single YAML bundle
2. Loading a whole directory into a translator
3. Seeding a new directory and reconciling stale files
4. Pre-release versions that always reconcile

Python 3.13+.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from translationkit import (
    DirectoryConfig,
    DirectoryReferenceCreator,
    LocaleTag,
    MappingReferenceCreator,
    TranslationDirectory,
    Translator,
    copy_defaults,
    create_file_bundle,
)

EN = LocaleTag("en")
EN_GB = LocaleTag("en", "GB")
JA = LocaleTag("ja")


def example_1_single_bundle(tmp_path: Path) -> None:
    """Example 1: Flatten one YAML file."""
    print("=" * 60)
    print("Example 1: Single Bundle")
    print("=" * 60)

    path = tmp_path / "en.yml"
    path.write_text(
        """\
v: 1.0.0
sample-key: "1"
example:
  text: abc
  integer: 100
  bool: true
  lines:
    - first
    - second
""",
        encoding="utf-8",
    )

    bundle = create_file_bundle(path)
    assert bundle is not None
    bundle.load()

    print(f"\nLocale: {bundle.locale}  version: {bundle.version}")
    for key, text in bundle.entries.items():
        print(f"  {key} = {text}")


def example_2_directory(tmp_path: Path) -> None:
    """Example 2: Load every file of a directory into a translator."""
    print("\n" + "=" * 60)
    print("Example 2: Directory Loading")
    print("=" * 60)

    directory = tmp_path / "translations"
    directory.mkdir()
    (directory / "en.yml").write_text("greeting: Hello\nmenu:\n  open: Open\n", encoding="utf-8")
    (directory / "ja.properties").write_text("greeting=\\u3053\\u3093\\u306b\\u3061\\u306f\n", encoding="utf-8")
    (directory / "README.txt").write_text("Not a translation file\n", encoding="utf-8")

    translator = Translator()
    translations = TranslationDirectory(DirectoryConfig(directory, translator))
    summary = translations.load()

    print(f"\n{summary}")
    print(f"Skipped: {', '.join(summary.skipped)}")
    print(f"  greeting (en):    {translator.translate('greeting', EN)}")
    print(f"  greeting (ja):    {translator.translate('greeting', JA)}")
    # en_GB has no file of its own and falls back to en
    print(f"  menu.open (en_GB): {translator.translate('menu.open', EN_GB)}")

    translations.unload()
    print(f"\nAfter unload: {translator.translate('greeting', EN)}")


def example_3_seed_and_reconcile(tmp_path: Path) -> None:
    """Example 3: Seed a new directory, then top up a stale file."""
    print("\n" + "=" * 60)
    print("Example 3: Seeding and Reconciliation")
    print("=" * 60)

    defaults = tmp_path / "defaults"
    defaults.mkdir()
    (defaults / "en.yml").write_text(
        "v: 1.0.0\ngreeting: Hello\nmenu:\n  open: Open\n",
        encoding="utf-8",
    )

    target = tmp_path / "user-translations"
    translator = Translator()
    config = DirectoryConfig(
        target,
        translator,
        on_created=copy_defaults(defaults),
        expected_version="1.0.0",
        reference_creator=DirectoryReferenceCreator(defaults),
    )
    translations = TranslationDirectory(config)
    print(f"\nFirst run:  {translations.load()}")

    # The user customizes a message; later the defaults gain a new key.
    (target / "en.yml").write_text(
        "v: 1.0.0\ngreeting: Howdy\nmenu:\n  open: Open\n",
        encoding="utf-8",
    )
    (defaults / "en.yml").write_text(
        "v: 1.1.0\ngreeting: Hello\nmenu:\n  open: Open\n  close: Close\n",
        encoding="utf-8",
    )

    upgraded = TranslationDirectory(
        DirectoryConfig(
            target,
            translator,
            expected_version="1.1.0",
            reference_creator=DirectoryReferenceCreator(defaults),
        )
    )
    translations.unload()
    print(f"Upgrade:    {upgraded.load()}")
    print(f"  greeting:   {translator.translate('greeting', EN)}  (user text kept)")
    print(f"  menu.close: {translator.translate('menu.close', EN)}  (added from defaults)")
    print("\nRewritten file:")
    print((target / "en.yml").read_text(encoding="utf-8"))


def example_4_prerelease(tmp_path: Path) -> None:
    """Example 4: Pre-release versions reconcile on every load."""
    print("=" * 60)
    print("Example 4: Pre-release Versions")
    print("=" * 60)

    directory = tmp_path / "snapshot"
    directory.mkdir()
    (directory / "en.yml").write_text("v: 2.0.0-SNAPSHOT\ngreeting: Hello\n", encoding="utf-8")

    creator = MappingReferenceCreator(
        {"en": {"greeting": "Hello", "beta": {"banner": "Beta build"}}},
        version="2.0.0-SNAPSHOT",
    )
    translations = TranslationDirectory(
        DirectoryConfig(
            directory,
            Translator(),
            expected_version="2.0.0-SNAPSHOT",
            reference_creator=creator,
        )
    )
    summary = translations.load()
    print(f"\nSame version, still reconciled: {sorted(map(str, summary.reconciled))}")
    print(f"  beta.banner: {translations.registry.translate('beta.banner', EN)}")


# Main execution
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    with tempfile.TemporaryDirectory() as tmp_dir_main:
        tmp_root = Path(tmp_dir_main)
        example_1_single_bundle(tmp_root)
        example_2_directory(tmp_root)
        example_3_seed_and_reconcile(tmp_root)
        example_4_prerelease(tmp_root)

    print("\n" + "=" * 60)
    print("[SUCCESS] All examples complete!")
    print("=" * 60)
