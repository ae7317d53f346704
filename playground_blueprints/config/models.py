"""Typed dataclasses describing extractor configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from ..wporg import DEFAULT_API_BASE, DEFAULT_TIMEOUT


class ExtractorConfigError(ValueError):
    """Raised when the extractor configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ExtractorConfig:
    """Settings shared by every ``blueprints`` command.

    Attributes
    ----------
    snapshot : Path
        YAML snapshot of the site to extract from.
    selection_file : Path
        Where the operator's selection is persisted between sessions.
    cache_file : Path | None
        Optional JSON file backing the resolver cache; ``None`` keeps the
        cache in memory for a single run.
    api_base : str
        Base URL of the WordPress.org API.
    timeout : float
        Request timeout, in seconds, for API lookups.
    include_self : bool
        Add this extractor's own install steps to new selections.
    ignore : list[str]
        Plugin or theme slugs never exported.
    ignore_all_plugins : bool
        Skip every plugin.
    ignore_theme : bool
        Skip the active theme.
    """

    snapshot: Path = Path("site.yaml")
    selection_file: Path = Path(".blueprints/selection.json")
    cache_file: Path | None = None
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    include_self: bool = True
    ignore: list[str] = dc.field(default_factory=list)
    ignore_all_plugins: bool = False
    ignore_theme: bool = False


__all__ = ["ExtractorConfig", "ExtractorConfigError"]
