"""Load extractor configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from ..wporg import DEFAULT_API_BASE, DEFAULT_TIMEOUT
from .helpers import (
    _as_bool,
    _as_timeout,
    _normalize_slugs,
    _optional_path,
    _section,
)
from .models import ExtractorConfig, ExtractorConfigError


def load_extractor_config(path: Path) -> ExtractorConfig:
    """Load the YAML configuration shared by the ``blueprints`` commands.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/blueprints.yaml``).

    Returns
    -------
    ExtractorConfig
        Parsed configuration with defaults applied for omitted fields.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ExtractorConfigError
        If a section or field holds a value of the wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from playground_blueprints.config import load_extractor_config
    >>> config = load_extractor_config(Path("config/blueprints.yaml"))  # doctest: +SKIP
    >>> config.snapshot  # doctest: +SKIP
    PosixPath('site.yaml')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    site = _section(raw, "site")
    storage = _section(raw, "storage")
    wporg = _section(raw, "wporg")
    export = _section(raw, "export")

    snapshot = _optional_path(site.get("snapshot"))
    if snapshot is None:
        msg = "site.snapshot must name the snapshot file to extract from."
        raise ExtractorConfigError(msg)

    defaults = ExtractorConfig()
    return ExtractorConfig(
        snapshot=snapshot,
        selection_file=(
            _optional_path(storage.get("selection_file")) or defaults.selection_file
        ),
        cache_file=_optional_path(storage.get("cache_file")),
        api_base=str(wporg.get("api_base") or DEFAULT_API_BASE),
        timeout=_as_timeout(wporg.get("timeout", DEFAULT_TIMEOUT)),
        include_self=_as_bool(
            export.get("include_self", True), field="export.include_self"
        ),
        ignore=_normalize_slugs(export.get("ignore")),
        ignore_all_plugins=_as_bool(
            export.get("ignore_all_plugins", False), field="export.ignore_all_plugins"
        ),
        ignore_theme=_as_bool(
            export.get("ignore_theme", False), field="export.ignore_theme"
        ),
    )


__all__ = ["load_extractor_config"]
