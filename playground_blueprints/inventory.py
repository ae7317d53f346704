"""Collect the items an operator can add to a blueprint.

The base blueprint only installs code and resets content. Pages, templates,
template parts, global styles, users, constants and plugin options are offered
for selection instead; :func:`collect_inventory` gathers them once per
generation so the merge engine can work from plain data.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .rewriter import rewrite_template_part
from .scanner import scan_config_constants, scan_plugin_options

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import ContentItem, RewrittenTemplatePart, UserRecord
    from .site import SiteSource

EXCLUDED_USER_LOGINS = frozenset({"admin"})


@dc.dataclass(frozen=True, slots=True)
class SiteInventory:
    """Everything selectable on the source site.

    Attributes
    ----------
    home_url : str
        Home URL of the source site; content payloads rebase links from it.
    site_name : str
        The ``blogname`` option, used to suggest a blueprint name.
    pages : tuple[ContentItem, ...]
        Pages in datastore order.
    templates : tuple[ContentItem, ...]
        Block templates belonging to the active theme.
    template_parts : tuple[RewrittenTemplatePart, ...]
        Template parts of the active theme with references tokenized.
    global_styles : ContentItem | None
        The active theme's global styles entity, if one exists.
    users : tuple[UserRecord, ...]
        Users that can be recreated (the ``admin`` login is never offered).
    constants : dict[str, str]
        Literal constants found in ``wp-config.php``.
    plugin_options : dict[str, dict[str, Any]]
        Options referenced by exported plugins, keyed by plugin slug.
    """

    home_url: str
    site_name: str
    pages: tuple[ContentItem, ...] = ()
    templates: tuple[ContentItem, ...] = ()
    template_parts: tuple[RewrittenTemplatePart, ...] = ()
    global_styles: ContentItem | None = None
    users: tuple[UserRecord, ...] = ()
    constants: dict[str, str] = dc.field(default_factory=dict)
    plugin_options: dict[str, dict[str, typ.Any]] = dc.field(default_factory=dict)

    def suggested_options(self) -> dict[str, typ.Any]:
        """Flatten plugin options into one ``name -> value`` mapping."""
        flattened: dict[str, typ.Any] = {}
        for options in self.plugin_options.values():
            flattened.update(options)
        return flattened


def collect_inventory(
    site: SiteSource, ignored: cabc.Collection[str] = ()
) -> SiteInventory:
    """Query ``site`` for every selectable item.

    Parameters
    ----------
    site : SiteSource
        Installation to inspect.
    ignored : Collection[str], optional
        Plugin slugs left out of the blueprint; their options are not offered.
    """
    stylesheet = site.theme().stylesheet
    theme_filter = stylesheet or None
    global_styles = site.posts("wp_global_styles", theme=theme_filter)
    return SiteInventory(
        home_url=site.home_url,
        site_name=str(site.get_option("blogname", "") or ""),
        pages=tuple(site.posts("page")),
        templates=tuple(site.posts("wp_template", theme=theme_filter)),
        template_parts=tuple(
            rewrite_template_part(item, site.get_post)
            for item in site.posts("wp_template_part", theme=theme_filter)
        ),
        global_styles=global_styles[0] if global_styles else None,
        users=tuple(
            user for user in site.users() if user.login not in EXCLUDED_USER_LOGINS
        ),
        constants=scan_config_constants(site.read_config_source()),
        plugin_options=scan_plugin_options(site, ignored),
    )


__all__ = ["EXCLUDED_USER_LOGINS", "SiteInventory", "collect_inventory"]
