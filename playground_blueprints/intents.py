"""Content-creation intents carried by ``runPHP`` steps.

Each intent records *what* the target site should do with plain structured
fields. Turning an intent into the PHP snippet Playground executes happens in
:mod:`playground_blueprints.payloads`, so the assembler and merge engine never
deal with string escaping and tests can compare intents by equality.
"""

from __future__ import annotations

import dataclasses as dc

from ._constants import PURGED_POST_TYPES
from .models import NavItem, Reference


@dc.dataclass(frozen=True, slots=True)
class PurgeContent:
    """Delete every existing entity of the listed post types."""

    post_types: tuple[str, ...] = PURGED_POST_TYPES


@dc.dataclass(frozen=True, slots=True)
class CreatePage:
    """Insert a published page, rebasing links from ``source_home_url``."""

    post_type: str
    title: str
    name: str
    content: str
    source_home_url: str


@dc.dataclass(frozen=True, slots=True)
class CreateTemplate:
    """Insert a block template and tie it to the active theme's term."""

    title: str
    name: str
    content: str


@dc.dataclass(frozen=True, slots=True)
class CreateTemplatePart:
    """Insert a template part together with the entities it references.

    Nav items are looked up by path first, then each reference is inserted
    with its ``NAV_ITEM_*`` tokens substituted, and finally the template part
    is inserted with its ``REFERENCE_*`` tokens replaced by the new ids.
    """

    title: str
    name: str
    content: str
    references: tuple[Reference, ...]
    nav_items: tuple[NavItem, ...]
    source_home_url: str


@dc.dataclass(frozen=True, slots=True)
class CreateUser:
    """Create a user with a known password."""

    login: str
    display_name: str
    role: str
    password: str


@dc.dataclass(frozen=True, slots=True)
class CreateGlobalStyles:
    """Insert the theme's global styles entity and tie it to the theme term."""

    title: str
    name: str
    content: str


ContentIntent = (
    PurgeContent
    | CreatePage
    | CreateTemplate
    | CreateTemplatePart
    | CreateUser
    | CreateGlobalStyles
)

__all__ = [
    "ContentIntent",
    "CreateGlobalStyles",
    "CreatePage",
    "CreateTemplate",
    "CreateTemplatePart",
    "CreateUser",
    "PurgeContent",
]
