"""Tests for the ``blueprints`` CLI commands.

The commands are called as plain functions with a stub WordPress.org client
patched into the extractor, so no network access is needed.
"""

from __future__ import annotations

import base64
import json
import typing as typ
from textwrap import dedent
from urllib.parse import unquote

import pytest
from ruamel.yaml import YAML

from playground_blueprints import cli
from playground_blueprints import extractor as extractor_module
from playground_blueprints._constants import PLAYGROUND_URL, SELF_PLUGIN_URL
from playground_blueprints.selection import SelectionStore

if typ.TYPE_CHECKING:
    from pathlib import Path

    from conftest import StubWordPressOrg

LINK_PREFIX = f"{PLAYGROUND_URL}?blueprint-url=data:application/json;base64,"


def _decode_link(link: str) -> dict[str, typ.Any]:
    return json.loads(base64.b64decode(unquote(link.removeprefix(LINK_PREFIX))))


@pytest.fixture
def config_path(
    tmp_path: Path,
    site_data: dict[str, typ.Any],
    wporg: StubWordPressOrg,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Write a snapshot and config into ``tmp_path`` and stub the API client."""
    (tmp_path / "wordpress").mkdir()
    (tmp_path / "wordpress" / "wp-config.php").write_text(
        "<?php\ndefine( 'DB_NAME', 'wp' );\ndefine( 'FEATURE', 'on' );\n",
        encoding="utf-8",
    )
    site_data["wp_root"] = "wordpress"
    snapshot = tmp_path / "site.yaml"
    yaml = YAML(typ="safe")
    with snapshot.open("w", encoding="utf-8") as handle:
        yaml.dump(site_data, handle)

    path = tmp_path / "blueprints.yaml"
    path.write_text(
        dedent(
            f"""
            site:
              snapshot: {snapshot}
            storage:
              selection_file: {tmp_path / "selection.json"}
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(
        extractor_module, "WordPressOrgClient", lambda **_kwargs: wporg
    )
    return path


def test_generate_prints_exported_blueprint(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``generate`` prints the merged blueprint as JSON."""
    cli.generate(config=config_path)
    document = json.loads(capsys.readouterr().out)

    assert [step["step"] for step in document["steps"]] == [
        "installPlugin",
        "installPlugin",
        "installTheme",
        "setSiteOptions",
        "runPHP",
    ]
    assert "info" not in document["steps"][0], "expected editor fields stripped"


def test_generate_raw_writes_file(
    config_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``--raw --output`` keeps notes and writes the blueprint to disk."""
    output = tmp_path / "out" / "blueprint.json"
    cli.generate(config=config_path, output=output, raw=True)

    assert capsys.readouterr().out.startswith("wrote ")
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["steps"][0]["info"] == "(prioritized because of Plugin B)"


def test_select_then_generate_merges_selection(
    config_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Choices saved by ``select`` shape later blueprints until ``reset``."""
    cli.select(
        config=config_path,
        ignore_plugin=["a"],
        page=[2],
        user=["ana:s3cret"],
        constant=["FEATURE=on"],
        landing_page="/about",
    )
    store = SelectionStore(tmp_path / "selection.json")
    saved = store.load()
    assert saved is not None
    assert saved.users == {"ana": "s3cret"}
    assert saved.include_self is True

    capsys.readouterr()
    cli.generate(config=config_path)
    document = json.loads(capsys.readouterr().out)
    kinds = [step["step"] for step in document["steps"]]

    assert document["landingPage"] == "/about"
    assert kinds.count("installPlugin") == 1, "expected plugin a to be excluded"
    assert {"step": "defineWpConfigConsts", "consts": {"FEATURE": "on"}} in document[
        "steps"
    ]
    assert kinds[-3:] == ["runPHP", "defineWpConfigConsts", "runPHP"]

    cli.reset(config=config_path)
    assert store.load() is None
    assert capsys.readouterr().out.strip().startswith("removed")


def test_select_rejects_malformed_assignments(config_path: Path) -> None:
    """Constants must be given as NAME=VALUE."""
    with pytest.raises(ValueError, match="NAME=VALUE"):
        cli.select(config=config_path, constant=["FEATURE"])


def test_constants_lists_wp_config_values(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``constants`` prints literal constants without database settings."""
    cli.constants(config=config_path)
    assert capsys.readouterr().out.splitlines() == ["FEATURE=on"]


def test_options_without_plugin_sources(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``options`` reports when no plugin reads an option with a value."""
    cli.options(config=config_path)
    assert capsys.readouterr().out.strip() == "no plugin options found"


def test_link_prints_playground_url(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``link`` prints a deep link into Playground."""
    cli.link(config=config_path)
    assert capsys.readouterr().out.startswith(
        "https://playground.wordpress.net/?blueprint-url=data:application/json;base64,"
    )


def test_only_the_link_installs_the_extractor(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The deep link adds the self-install steps; ``generate`` never does."""
    cli.generate(config=config_path)
    exported = json.loads(capsys.readouterr().out)
    cli.link(config=config_path)
    linked = _decode_link(capsys.readouterr().out.strip())

    assert SELF_PLUGIN_URL not in json.dumps(exported), (
        "expected the exported blueprint to leave the extractor out"
    )
    assert linked["steps"][:-2] == exported["steps"]
    install, seed = linked["steps"][-2:]
    assert install["pluginData"] == {"resource": "url", "url": SELF_PLUGIN_URL}
    assert seed["options"]["blueprint_extractor_default_checked"] is True


def test_reset_without_selection(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Resetting twice is harmless."""
    cli.reset(config=config_path)
    assert capsys.readouterr().out.strip() == "no stored selection"
