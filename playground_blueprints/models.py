"""Typed records describing blueprint steps, locators, and site content.

Every record here is a frozen, slotted dataclass so an assembled
:class:`Blueprint` cannot be mutated once emitted; the merge engine derives new
instances with :func:`dataclasses.replace` instead.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import PLUGIN_REGISTRY, THEME_REGISTRY

if typ.TYPE_CHECKING:
    from .intents import ContentIntent


@dc.dataclass(frozen=True, slots=True)
class RegistryReference:
    """An artifact published on a first-party registry.

    Attributes
    ----------
    registry : str
        Registry identifier, ``"wordpress.org/plugins"`` or
        ``"wordpress.org/themes"``.
    slug : str
        Registry slug of the artifact.
    """

    registry: str
    slug: str


@dc.dataclass(frozen=True, slots=True)
class DirectUrl:
    """An artifact fetched from an arbitrary URL (for example a GitHub proxy)."""

    url: str


ResourceLocator = RegistryReference | DirectUrl


def locator_to_dict(locator: ResourceLocator) -> dict[str, str]:
    """Return the wire representation of ``locator``."""
    match locator:
        case RegistryReference(registry=registry, slug=slug):
            return {"resource": registry, "slug": slug}
        case DirectUrl(url=url):
            return {"resource": "url", "url": url}
    msg = f"Unsupported resource locator: {locator!r}"
    raise TypeError(msg)


def locator_from_dict(payload: typ.Mapping[str, typ.Any]) -> ResourceLocator | None:
    """Parse a wire locator, returning ``None`` for unknown shapes."""
    resource = payload.get("resource")
    if resource in (PLUGIN_REGISTRY, THEME_REGISTRY) and payload.get("slug"):
        return RegistryReference(registry=str(resource), slug=str(payload["slug"]))
    if resource == "url" and payload.get("url"):
        return DirectUrl(url=str(payload["url"]))
    return None


@dc.dataclass(frozen=True, slots=True)
class ExtensionDescriptor:
    """An active plugin that resolved to an installable locator."""

    slug: str
    name: str
    requires: tuple[str, ...]
    locator: ResourceLocator


@dc.dataclass(frozen=True, slots=True)
class InstallPluginStep:
    """``installPlugin`` step; ``name``, ``slug`` and ``info`` are editor-only."""

    plugin_data: ResourceLocator
    name: str
    slug: str
    info: str = ""


@dc.dataclass(frozen=True, slots=True)
class InstallThemeStep:
    """``installTheme`` step."""

    theme_zip_file: ResourceLocator


@dc.dataclass(frozen=True, slots=True)
class SetSiteOptionsStep:
    """``setSiteOptions`` step."""

    options: dict[str, typ.Any]


@dc.dataclass(frozen=True, slots=True)
class DefineConstantsStep:
    """``defineWpConfigConsts`` step."""

    consts: dict[str, typ.Any]


@dc.dataclass(frozen=True, slots=True)
class UnzipStep:
    """``unzip`` step extracting an archive into the target filesystem."""

    zip_file: ResourceLocator
    extract_to_path: str


@dc.dataclass(frozen=True, slots=True)
class RunCodeStep:
    """``runPHP`` step carrying a structured content-creation intent.

    The intent is rendered into the target-side script only when the
    blueprint is serialized (see :mod:`playground_blueprints.payloads`).
    """

    intent: ContentIntent


Step = (
    InstallPluginStep
    | InstallThemeStep
    | SetSiteOptionsStep
    | DefineConstantsStep
    | UnzipStep
    | RunCodeStep
)


@dc.dataclass(frozen=True, slots=True)
class Blueprint:
    """A Playground blueprint: top-level metadata plus ordered steps.

    Attributes
    ----------
    landing_page : str
        Path the Playground opens after provisioning.
    preferred_versions : dict[str, str]
        Runtime version pins, keyed by platform (``php``, ``wp``).
    php_extension_bundles : tuple[str, ...]
        Extension bundles requested from the runtime.
    features : dict[str, bool]
        Feature flags, currently only ``networking``.
    login : bool
        Whether the Playground logs the visitor in.
    steps : tuple[Step, ...]
        Ordered provisioning steps.
    """

    landing_page: str
    preferred_versions: dict[str, str]
    php_extension_bundles: tuple[str, ...]
    features: dict[str, bool]
    login: bool
    steps: tuple[Step, ...]


@dc.dataclass(frozen=True, slots=True)
class ContentItem:
    """A post-like entity read from the site (page, template, part, styles)."""

    id: int
    post_type: str
    title: str
    name: str
    content: str


@dc.dataclass(frozen=True, slots=True)
class Reference:
    """A navigation entity embedded in a template part, keyed by local index."""

    index: int
    source_id: int
    post_type: str
    title: str
    name: str
    content: str


@dc.dataclass(frozen=True, slots=True)
class NavItem:
    """A page linked from a navigation entity, re-resolved by path on replay."""

    id: int
    name: str
    post_type: str


@dc.dataclass(frozen=True, slots=True)
class RewrittenTemplatePart:
    """A template part whose numeric references were replaced by tokens."""

    item: ContentItem
    references: tuple[Reference, ...]
    nav_items: tuple[NavItem, ...]


@dc.dataclass(frozen=True, slots=True)
class UserRecord:
    """A site user that may be recreated on the target."""

    login: str
    display_name: str
    role: str


__all__ = [
    "Blueprint",
    "ContentItem",
    "DefineConstantsStep",
    "DirectUrl",
    "ExtensionDescriptor",
    "InstallPluginStep",
    "InstallThemeStep",
    "NavItem",
    "Reference",
    "RegistryReference",
    "ResourceLocator",
    "RewrittenTemplatePart",
    "RunCodeStep",
    "SetSiteOptionsStep",
    "Step",
    "UnzipStep",
    "UserRecord",
    "locator_from_dict",
    "locator_to_dict",
]
