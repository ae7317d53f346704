"""Wire the extraction stages together for one site.

:class:`BlueprintExtractor` owns the collaborators a generation run needs
(site snapshot, resolver cache, WordPress.org client, selection store) and
exposes the steps the CLI commands share: assemble the base blueprint,
collect the selectable inventory, load or seed the selection, and merge.

Example
-------
>>> from pathlib import Path
>>> from playground_blueprints.config import load_extractor_config
>>> config = load_extractor_config(Path("config/blueprints.yaml"))  # doctest: +SKIP
>>> extractor = BlueprintExtractor.from_config(config)  # doctest: +SKIP
>>> blueprint = extractor.generate()  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from .assembler import AssemblyOptions, AssemblyResult, BlueprintAssembler
from .cache import TransientStore
from .inventory import SiteInventory, collect_inventory
from .merge import merge_selection, with_self_install
from .resolver import ResourceResolver
from .selection import SelectionState, SelectionStore, initial_selection
from .site import SnapshotSite
from .wporg import WordPressOrgClient

if typ.TYPE_CHECKING:
    from .config import ExtractorConfig
    from .models import Blueprint
    from .site import SiteSource

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BlueprintExtractor:
    """Generate blueprints for ``site`` with a persisted selection."""

    site: SiteSource
    resolver: ResourceResolver
    store: SelectionStore
    options: AssemblyOptions = dc.field(default_factory=AssemblyOptions)
    include_self: bool = True
    _assembly: AssemblyResult | None = dc.field(default=None, repr=False)
    _inventory: SiteInventory | None = dc.field(default=None, repr=False)

    @classmethod
    def from_config(cls, config: ExtractorConfig) -> BlueprintExtractor:
        """Build an extractor from the settings in ``config``."""
        client = WordPressOrgClient(api_base=config.api_base, timeout=config.timeout)
        return cls(
            site=SnapshotSite.load(config.snapshot),
            resolver=ResourceResolver(client, TransientStore(path=config.cache_file)),
            store=SelectionStore(config.selection_file),
            options=AssemblyOptions(
                ignore=tuple(config.ignore),
                ignore_all_plugins=config.ignore_all_plugins,
                ignore_theme=config.ignore_theme,
            ),
            include_self=config.include_self,
        )

    def assemble(self) -> AssemblyResult:
        """Return the base blueprint, assembling it on first use."""
        if self._assembly is None:
            self._assembly = BlueprintAssembler(self.site, self.resolver).assemble(
                self.options
            )
            logger.debug("Skipped plugins and themes: %s", self._assembly.ignored)
        return self._assembly

    def inventory(self) -> SiteInventory:
        """Return the selectable items, skipping options of skipped plugins."""
        if self._inventory is None:
            self._inventory = collect_inventory(self.site, self.assemble().ignored)
        return self._inventory

    def selection(self) -> SelectionState:
        """Return the persisted selection, or one seeded from the site."""
        stored = self.store.load()
        if stored is not None:
            return stored
        return initial_selection(
            self.site, self.inventory(), include_self=self.include_self
        )

    def generate(self, selection: SelectionState | None = None) -> Blueprint:
        """Return the final blueprint with ``selection`` merged in."""
        chosen = selection if selection is not None else self.selection()
        return merge_selection(self.assemble().blueprint, self.inventory(), chosen)

    def playground(self, selection: SelectionState | None = None) -> Blueprint:
        """Return the blueprint behind the Playground deep link.

        This is :meth:`generate` plus, unless the selection opts out, the
        steps that install this extractor in the provisioned site.
        """
        chosen = selection if selection is not None else self.selection()
        return with_self_install(self.generate(chosen), chosen)


__all__ = ["BlueprintExtractor"]
