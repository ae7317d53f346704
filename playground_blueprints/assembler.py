"""Assemble the base blueprint for an installation.

:class:`BlueprintAssembler` walks the site in a fixed order and emits the
steps every exported blueprint starts from:

1. ``installPlugin`` for each active, resolvable plugin, required plugins
   first (see :mod:`playground_blueprints.dependencies`);
2. ``installTheme`` for the active theme when the theme directory knows it;
3. ``setSiteOptions`` with the site name, tagline and permalink structure;
4. a ``runPHP`` purge so content created later starts from a clean slate.

Content, users and constants are added later by the merge engine from the
operator's selection. A plugin or theme that cannot be resolved only drops its
own step; assembly itself never fails.

Example
-------
>>> from playground_blueprints.assembler import AssemblyOptions, BlueprintAssembler
>>> assembler = BlueprintAssembler(site, resolver)  # doctest: +SKIP
>>> result = assembler.assemble(AssemblyOptions(ignore_theme=True))  # doctest: +SKIP
>>> result.blueprint.steps[-1]  # doctest: +SKIP
RunCodeStep(intent=PurgeContent(post_types=('post', 'page', ...)))
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ._constants import (
    OPTION_LANDING_PAGE,
    PHP_EXTENSION_BUNDLES,
    SELF_IGNORED_SLUGS,
    SITE_OPTION_NAMES,
    THEME_REGISTRY,
)
from .dependencies import parse_requires, prioritize_dependencies
from .intents import PurgeContent
from .models import (
    Blueprint,
    ExtensionDescriptor,
    InstallThemeStep,
    RegistryReference,
    RunCodeStep,
    SetSiteOptionsStep,
    Step,
)

if typ.TYPE_CHECKING:
    from .resolver import ResourceResolver
    from .site import SiteSource

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class AssemblyOptions:
    """Operator switches that shape the base blueprint."""

    ignore: tuple[str, ...] = ()
    ignore_all_plugins: bool = False
    ignore_theme: bool = False


@dc.dataclass(slots=True)
class AssemblyResult:
    """The assembled blueprint and the slugs left out of it."""

    blueprint: Blueprint
    ignored: list[str] = dc.field(default_factory=list)


def plugin_slug(plugin_file: str) -> str:
    """Return the directory slug of a ``dir/main-file.php`` plugin path."""
    return plugin_file.split("/", 1)[0]


def php_minor_version(version: str) -> str:
    """Return ``major.minor`` from a full PHP version string.

    Examples
    --------
    >>> php_minor_version("8.2.12")
    '8.2'
    """
    return ".".join(version.split(".")[:2])


class BlueprintAssembler:
    """Produce the base :class:`~playground_blueprints.models.Blueprint`."""

    def __init__(self, site: SiteSource, resolver: ResourceResolver) -> None:
        self.site = site
        self.resolver = resolver

    def assemble(self, options: AssemblyOptions | None = None) -> AssemblyResult:
        """Run every stage and return the blueprint with the ignored slugs.

        Parameters
        ----------
        options : AssemblyOptions, optional
            Ignore list and suppression flags. Defaults to exporting every
            plugin and the theme.

        Returns
        -------
        AssemblyResult
            The blueprint plus the plugins and theme that were skipped or
            could not be resolved; the option scan uses that list to avoid
            suggesting options of plugins that are not exported.
        """
        options = options or AssemblyOptions()
        ignore = (*options.ignore, *SELF_IGNORED_SLUGS)
        ignored: list[str] = []

        steps: list[Step] = []
        steps.extend(self._plugin_steps(options, ignore, ignored))
        theme_step = self._theme_step(options, ignore, ignored)
        if theme_step is not None:
            steps.append(theme_step)
        steps.append(self._site_options_step())
        steps.append(RunCodeStep(intent=PurgeContent()))

        blueprint = Blueprint(
            landing_page=str(self.site.get_option(OPTION_LANDING_PAGE, "/") or "/"),
            preferred_versions={
                "php": php_minor_version(self.site.php_version),
                "wp": self.site.wp_version,
            },
            php_extension_bundles=PHP_EXTENSION_BUNDLES,
            features={"networking": True},
            login=True,
            steps=tuple(steps),
        )
        return AssemblyResult(blueprint=blueprint, ignored=ignored)

    def _plugin_steps(
        self,
        options: AssemblyOptions,
        ignore: tuple[str, ...],
        ignored: list[str],
    ) -> list[Step]:
        if options.ignore_all_plugins:
            return []
        extensions: list[ExtensionDescriptor] = []
        for plugin_file in self.site.active_plugins():
            slug = plugin_slug(plugin_file)
            if slug in ignore:
                continue
            locator = self.resolver.resolve(slug)
            if locator is None:
                logger.debug("Plugin %s is not installable on Playground", slug)
                ignored.append(slug)
                continue
            header = self.site.plugin_header(plugin_file)
            extensions.append(
                ExtensionDescriptor(
                    slug=slug,
                    name=header.name,
                    requires=parse_requires(header.requires_plugins),
                    locator=locator,
                )
            )
        return list(prioritize_dependencies(extensions))

    def _theme_step(
        self,
        options: AssemblyOptions,
        ignore: tuple[str, ...],
        ignored: list[str],
    ) -> InstallThemeStep | None:
        text_domain = self.site.theme().text_domain
        if (
            options.ignore_theme
            or text_domain in ignore
            or not self.resolver.theme_exists(text_domain)
        ):
            ignored.append(text_domain)
            return None
        return InstallThemeStep(
            theme_zip_file=RegistryReference(registry=THEME_REGISTRY, slug=text_domain)
        )

    def _site_options_step(self) -> SetSiteOptionsStep:
        return SetSiteOptionsStep(
            options={
                name: self.site.get_option(name, "") for name in SITE_OPTION_NAMES
            }
        )


__all__ = [
    "AssemblyOptions",
    "AssemblyResult",
    "BlueprintAssembler",
    "php_minor_version",
    "plugin_slug",
]
