"""Unit tests for loading ``blueprints.yaml``."""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest

from playground_blueprints.config import (
    ExtractorConfig,
    ExtractorConfigError,
    load_extractor_config,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture
def write_config(tmp_path: Path) -> cabc.Callable[[str], Path]:
    """Return a helper that writes YAML text to a config file."""

    def _write(text: str) -> Path:
        path = tmp_path / "blueprints.yaml"
        path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
        return path

    return _write


def test_full_config_is_parsed(write_config: cabc.Callable[[str], Path]) -> None:
    """Every section maps onto an ExtractorConfig field."""
    path = write_config(
        """
        site:
          snapshot: snapshots/site.yaml
        storage:
          selection_file: state/selection.json
          cache_file: state/cache.json
        wporg:
          api_base: https://mirror.example/api
          timeout: 3
        export:
          include_self: false
          ignore: [hello-dolly, akismet, hello-dolly]
          ignore_all_plugins: false
          ignore_theme: true
        """
    )

    assert load_extractor_config(path) == ExtractorConfig(
        snapshot=Path("snapshots/site.yaml"),
        selection_file=Path("state/selection.json"),
        cache_file=Path("state/cache.json"),
        api_base="https://mirror.example/api",
        timeout=3.0,
        include_self=False,
        ignore=["hello-dolly", "akismet"],
        ignore_all_plugins=False,
        ignore_theme=True,
    )


def test_defaults_apply_to_omitted_sections(
    write_config: cabc.Callable[[str], Path],
) -> None:
    """Only the snapshot is required."""
    config = load_extractor_config(write_config("site: {snapshot: site.yaml}"))

    assert config.selection_file == Path(".blueprints/selection.json")
    assert config.cache_file is None
    assert config.api_base == "https://api.wordpress.org"
    assert config.timeout == 10.0
    assert config.include_self is True
    assert config.ignore == []


def test_comma_separated_ignore_list(write_config: cabc.Callable[[str], Path]) -> None:
    """An ignore string is split on commas."""
    config = load_extractor_config(
        write_config(
            """
            site: {snapshot: site.yaml}
            export: {ignore: "a, b ,"}
            """
        )
    )
    assert config.ignore == ["a", "b"]


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ("storage: {}", "snapshot"),
        ("site: [a]", "must be a mapping"),
        ("site: {snapshot: s.yaml}\nwporg: {timeout: 0}", "positive"),
        ("site: {snapshot: s.yaml}\nwporg: {timeout: soon}", "number of seconds"),
        ("site: {snapshot: s.yaml}\nexport: {ignore_theme: 'yes'}", "true or false"),
        ("site: {snapshot: s.yaml}\nexport: {ignore: 3}", "list of slugs"),
    ],
)
def test_invalid_values_are_rejected(
    write_config: cabc.Callable[[str], Path], text: str, match: str
) -> None:
    """Malformed settings raise ExtractorConfigError."""
    with pytest.raises(ExtractorConfigError, match=match):
        load_extractor_config(write_config(text))


def test_missing_and_non_mapping_files(
    tmp_path: Path, write_config: cabc.Callable[[str], Path]
) -> None:
    """Missing files and list documents are reported like other loaders."""
    with pytest.raises(FileNotFoundError):
        load_extractor_config(tmp_path / "absent.yaml")
    with pytest.raises(TypeError, match="mapping"):
        load_extractor_config(write_config("- a\n- b"))


def test_sample_config_ships_with_the_repository() -> None:
    """The checked-in sample config is valid."""
    root = Path(__file__).resolve().parents[1]
    config = load_extractor_config(root / "config" / "blueprints.yaml")

    assert config.snapshot == Path("config/site.yaml")
    assert config.ignore == ["hello-dolly"]
