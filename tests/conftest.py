"""Shared fixtures for the playground_blueprints test suite.

The suite never talks to WordPress.org: :class:`StubWordPressOrg` answers
plugin and theme lookups from dictionaries and counts how often it was asked,
and :func:`site_data` describes a small site that :class:`SnapshotSite` reads
the same way it reads a real snapshot.
"""

from __future__ import annotations

import typing as typ

import pytest

from playground_blueprints.cache import TransientStore
from playground_blueprints.resolver import ResourceResolver
from playground_blueprints.site import SnapshotSite
from playground_blueprints.wporg import WordPressOrgClient

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def registry_link(slug: str) -> dict[str, str]:
    """Return a plugin information payload pointing at the plugin registry."""
    return {
        "slug": slug,
        "download_link": f"https://downloads.wordpress.org/plugin/{slug}.zip",
    }


class StubWordPressOrg(WordPressOrgClient):
    """Answer lookups from canned payloads and record every call."""

    def __init__(
        self,
        plugins: cabc.Mapping[str, dict[str, typ.Any]] | None = None,
        themes: cabc.Collection[str] = (),
    ) -> None:
        super().__init__()
        self.plugins = dict(plugins or {})
        self.themes = set(themes)
        self.plugin_calls: list[str] = []
        self.theme_calls: list[str] = []

    def plugin_information(self, slug: str) -> dict[str, typ.Any] | None:
        self.plugin_calls.append(slug)
        return self.plugins.get(slug)

    def theme_information(self, slug: str) -> dict[str, typ.Any] | None:
        self.theme_calls.append(slug)
        return {"slug": slug} if slug in self.themes else None


@pytest.fixture
def site_data() -> dict[str, typ.Any]:
    """Return a snapshot with two dependent plugins, content and users."""
    return {
        "home_url": "https://source.example",
        "versions": {"php": "8.2.12", "wp": "6.6.1"},
        "options": {
            "blogname": "Source Site",
            "blogdescription": "Tagline",
            "permalink_structure": "/%postname%/",
            "active_plugins": ["a/a.php", "b/b.php"],
        },
        "plugins": {
            "a/a.php": {"name": "Plugin A"},
            "b/b.php": {"name": "Plugin B", "requires_plugins": "a"},
        },
        "theme": {"text_domain": "twentytwentyfour", "stylesheet": "twentytwentyfour"},
        "posts": [
            {
                "id": 2,
                "post_type": "page",
                "post_title": "About",
                "post_name": "about",
                "post_content": '<a href="https://source.example/team">Team</a>',
            },
            {
                "id": 7,
                "post_type": "page",
                "post_title": "Contact",
                "post_name": "contact",
                "post_content": "Write to us.",
            },
            {
                "id": 10,
                "post_type": "wp_template_part",
                "theme": "twentytwentyfour",
                "post_title": "Header",
                "post_name": "header",
                "post_content": '<!-- wp:navigation {"ref":42} /-->',
            },
            {
                "id": 42,
                "post_type": "wp_navigation",
                "post_title": "Primary",
                "post_name": "primary",
                "post_content": '<!-- wp:navigation-link {"label":"Contact","id":7} /-->',
            },
            {
                "id": 15,
                "post_type": "wp_template",
                "theme": "twentytwentyfour",
                "post_title": "Home",
                "post_name": "home",
                "post_content": "<!-- wp:template-part {\"slug\":\"header\"} /-->",
            },
            {
                "id": 16,
                "post_type": "wp_template",
                "theme": "othertheme",
                "post_title": "Other",
                "post_name": "other",
                "post_content": "",
            },
            {
                "id": 20,
                "post_type": "wp_global_styles",
                "theme": "twentytwentyfour",
                "post_title": "Custom Styles",
                "post_name": "wp-global-styles-twentytwentyfour",
                "post_content": '{"version": 3, "isGlobalStylesUserThemeJSON": true}',
            },
        ],
        "users": [
            {"login": "admin", "display_name": "Admin", "role": "administrator"},
            {"login": "ana", "display_name": "Ana", "role": "editor"},
        ],
    }


@pytest.fixture
def site(site_data: dict[str, typ.Any]) -> SnapshotSite:
    """Return the default site without an installation root."""
    return SnapshotSite(site_data)


@pytest.fixture
def wporg() -> StubWordPressOrg:
    """Return a client that knows plugins ``a`` and ``b`` and the active theme."""
    return StubWordPressOrg(
        plugins={"a": registry_link("a"), "b": registry_link("b")},
        themes={"twentytwentyfour"},
    )


@pytest.fixture
def resolver(wporg: StubWordPressOrg) -> ResourceResolver:
    """Return a resolver backed by the stub client and an in-memory store."""
    return ResourceResolver(wporg, TransientStore())
