"""Decide how a plugin or theme can be fetched by Playground.

:class:`ResourceResolver` maps a plugin slug to a :data:`ResourceLocator` by
classifying the download link WordPress.org reports for it, and answers
whether a theme is published on the theme directory. Both answers, negative
ones included, are cached in a :class:`~playground_blueprints.cache.TransientStore`
so repeated calls within a day never reach the API again.

Example
-------
>>> from playground_blueprints.cache import TransientStore
>>> from playground_blueprints.wporg import WordPressOrgClient
>>> resolver = ResourceResolver(WordPressOrgClient(), TransientStore())
>>> resolver.resolve("akismet")  # doctest: +SKIP
RegistryReference(registry='wordpress.org/plugins', slug='akismet')
"""

from __future__ import annotations

import logging
import re
import typing as typ

from ._constants import (
    GITHUB_PROXY_TEMPLATE,
    PLUGIN_CACHE_KEY,
    PLUGIN_REGISTRY,
    REGISTRY_DOWNLOAD_PREFIX,
    SELF_SLUG,
    THEME_CACHE_KEY,
)
from .models import (
    DirectUrl,
    RegistryReference,
    ResourceLocator,
    locator_from_dict,
    locator_to_dict,
)
from .wporg import WordPressOrgError

if typ.TYPE_CHECKING:
    from .cache import TransientStore
    from .wporg import WordPressOrgClient

logger = logging.getLogger(__name__)

GITHUB_ARCHIVE_PATTERN = re.compile(
    r"https://github\.com/([^/]+/[^/]+)/archive/refs/(heads|tags)/([^/]+)\.zip"
)


def normalize_slug(slug: str) -> str:
    """Collapse versioned copies of this tool's own plugin to one slug."""
    if slug.startswith(SELF_SLUG):
        return SELF_SLUG
    return slug


def classify_download_link(slug: str, download_link: str) -> ResourceLocator | None:
    """Return the locator implied by ``download_link`` or ``None``.

    Examples
    --------
    >>> classify_download_link("x", "https://downloads.wordpress.org/plugin/x.zip")
    RegistryReference(registry='wordpress.org/plugins', slug='x')
    >>> classify_download_link(
    ...     "x", "https://github.com/o/r/archive/refs/tags/v1.zip"
    ... )
    DirectUrl(url='https://github-proxy.com/proxy/?repo=o/r&release=v1')
    """
    if download_link.startswith(REGISTRY_DOWNLOAD_PREFIX):
        return RegistryReference(registry=PLUGIN_REGISTRY, slug=slug)
    match = GITHUB_ARCHIVE_PATTERN.search(download_link)
    if match:
        repo, _kind, ref = match.groups()
        return DirectUrl(url=GITHUB_PROXY_TEMPLATE.format(repo=repo, ref=ref))
    return None


class ResourceResolver:
    """Resolve plugin and theme slugs against WordPress.org with caching."""

    def __init__(self, client: WordPressOrgClient, store: TransientStore) -> None:
        self.client = client
        self.store = store

    def resolve(self, slug: str) -> ResourceLocator | None:
        """Return how to fetch plugin ``slug``, or ``None`` when unresolvable.

        Parameters
        ----------
        slug : str
            Plugin directory name as installed on the site.

        Returns
        -------
        ResourceLocator | None
            A registry reference, a proxied GitHub archive URL, or ``None``
            when the plugin is unpublished, hosted elsewhere, or the lookup
            failed, and for a blank slug. Failures are cached like any other
            answer.
        """
        slug = slug.strip()
        if not slug:
            logger.debug("Skipping plugin with a blank slug")
            return None
        slug = normalize_slug(slug)
        cache = dict(self.store.get(PLUGIN_CACHE_KEY) or {})
        if slug not in cache:
            locator = self._lookup_plugin(slug)
            cache[slug] = locator_to_dict(locator) if locator else False
            self.store.set(PLUGIN_CACHE_KEY, cache)
        cached = cache[slug]
        if not cached:
            return None
        return locator_from_dict(cached)

    def theme_exists(self, slug: str) -> bool:
        """Return whether ``slug`` is published on the theme directory."""
        slug = slug.strip()
        if not slug:
            return False
        cache = dict(self.store.get(THEME_CACHE_KEY) or {})
        if slug not in cache:
            try:
                cache[slug] = self.client.theme_information(slug) is not None
            except WordPressOrgError as exc:
                logger.debug("Theme lookup for %s failed: %s", slug, exc)
                cache[slug] = False
            self.store.set(THEME_CACHE_KEY, cache)
        return bool(cache[slug])

    def _lookup_plugin(self, slug: str) -> ResourceLocator | None:
        try:
            payload = self.client.plugin_information(slug)
        except WordPressOrgError as exc:
            logger.debug("Plugin lookup for %s failed: %s", slug, exc)
            return None
        if payload is None:
            logger.debug("Plugin %s is not published on WordPress.org", slug)
            return None
        download_link = payload.get("download_link")
        if not isinstance(download_link, str):
            return None
        locator = classify_download_link(slug, download_link)
        if locator is None:
            logger.debug("Unsupported download link for %s: %s", slug, download_link)
        return locator


__all__ = [
    "GITHUB_ARCHIVE_PATTERN",
    "ResourceResolver",
    "classify_download_link",
    "normalize_slug",
]
