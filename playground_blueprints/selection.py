"""Operator selections that survive between editing sessions.

A :class:`SelectionState` records which plugins to drop, which content and
users to recreate, and which constants and options to add. It is persisted as
a small versioned JSON document keyed by
``blueprint_extractor_<category>`` names, the same names the WordPress plugin
uses for its stored choices. The merge engine receives it as a plain
parameter rather than reading ambient state.

Example
-------
>>> from pathlib import Path
>>> store = SelectionStore(Path(".blueprints/selection.json"))  # doctest: +SKIP
>>> state = store.load() or SelectionState()  # doctest: +SKIP
>>> store.save(dc.replace(state, ignore_theme=True))  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import re
import typing as typ

from ._constants import (
    OPTION_DEFAULT_CHECKED,
    OPTION_INITIAL_CONSTANTS,
    OPTION_INITIAL_OPTIONS,
    OPTION_LANDING_PAGE,
    OPTION_NAME,
    SELECTION_KEY_TEMPLATE,
    SELECTION_SCHEMA_VERSION,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .inventory import SiteInventory
    from .site import SiteSource

logger = logging.getLogger(__name__)

VERSION_KEY = "version"
_TRAILING_NUMBER = re.compile(r"\d+$")


class SelectionStateError(ValueError):
    """Raised when a persisted selection document cannot be understood."""


def _key(category: str) -> str:
    return SELECTION_KEY_TEMPLATE.format(key=category)


@dc.dataclass(frozen=True, slots=True)
class SelectionState:
    """What the operator chose to include in or drop from the blueprint.

    Attributes
    ----------
    ignore_plugins : tuple[str, ...]
        Plugin slugs whose install steps are dropped.
    ignore_theme : bool
        Use Playground's default theme instead of installing the active one.
    include_global_styles : bool
        Recreate the active theme's global styles.
    additional_options : dict[str, Any]
        Options merged into the ``setSiteOptions`` step.
    constants : dict[str, Any]
        Constants emitted in a ``defineWpConfigConsts`` step.
    pages, templates, template_parts : tuple[int, ...]
        Ids of the content items to recreate.
    users : dict[str, str]
        Logins to recreate, mapped to the password to give them.
    zip_url : str
        Public URL of an uploaded media archive to unzip into uploads.
    landing_page : str | None
        Landing page override; ``None`` keeps the assembled one.
    name : str
        Blueprint name recorded when the tool installs itself.
    include_self : bool
        Also install this extractor in the provisioned site.
    """

    ignore_plugins: tuple[str, ...] = ()
    ignore_theme: bool = False
    include_global_styles: bool = False
    additional_options: dict[str, typ.Any] = dc.field(default_factory=dict)
    constants: dict[str, typ.Any] = dc.field(default_factory=dict)
    pages: tuple[int, ...] = ()
    templates: tuple[int, ...] = ()
    template_parts: tuple[int, ...] = ()
    users: dict[str, str] = dc.field(default_factory=dict)
    zip_url: str = ""
    landing_page: str | None = None
    name: str = ""
    include_self: bool = True
    version: int = SELECTION_SCHEMA_VERSION

    def to_document(self) -> dict[str, typ.Any]:
        """Return the persisted form; empty categories are omitted."""
        document: dict[str, typ.Any] = {VERSION_KEY: self.version}
        values: dict[str, typ.Any] = {
            "ignore_plugins": list(self.ignore_plugins),
            "ignore_theme": self.ignore_theme,
            "global_styles": self.include_global_styles,
            "additional_options": dict(self.additional_options),
            "constants": dict(self.constants),
            "pages": [str(post_id) for post_id in self.pages],
            "templates": [str(post_id) for post_id in self.templates],
            "template_parts": [str(post_id) for post_id in self.template_parts],
            "users": list(self.users),
            "passwords": list(self.users.values()),
            "zip_url": self.zip_url,
            "landing_page": self.landing_page,
            "name": self.name,
        }
        for category, value in values.items():
            if value:
                document[_key(category)] = value
        # persisted only when switched off, since on is the default
        if not self.include_self:
            document[_key("include_self")] = False
        return document

    @classmethod
    def from_document(cls, document: typ.Any) -> SelectionState:
        """Parse a persisted document.

        Raises
        ------
        SelectionStateError
            If ``document`` is not a mapping, was written by a newer schema,
            or holds a value of the wrong shape.
        """
        if not isinstance(document, dict):
            msg = "Selection document must be a JSON object."
            raise SelectionStateError(msg)
        version = document.get(VERSION_KEY, SELECTION_SCHEMA_VERSION)
        if not isinstance(version, int) or version > SELECTION_SCHEMA_VERSION:
            msg = f"Unsupported selection document version: {version!r}"
            raise SelectionStateError(msg)

        def _get(category: str, expected: type, default: typ.Any) -> typ.Any:
            value = document.get(_key(category), default)
            if not isinstance(value, expected):
                msg = f"Selection entry '{_key(category)}' must be {expected.__name__}"
                raise SelectionStateError(msg)
            return value

        logins = _get("users", list, [])
        passwords = _get("passwords", list, [])
        users = {
            str(login): str(passwords[index] or "") if index < len(passwords) else ""
            for index, login in enumerate(logins)
        }
        landing_page = document.get(_key("landing_page"))
        return cls(
            ignore_plugins=tuple(str(slug) for slug in _get("ignore_plugins", list, [])),
            ignore_theme=bool(document.get(_key("ignore_theme"), False)),
            include_global_styles=bool(document.get(_key("global_styles"), False)),
            additional_options=dict(_get("additional_options", dict, {})),
            constants=dict(_get("constants", dict, {})),
            pages=_ids(_get("pages", list, [])),
            templates=_ids(_get("templates", list, [])),
            template_parts=_ids(_get("template_parts", list, [])),
            users=users,
            zip_url=str(document.get(_key("zip_url")) or ""),
            landing_page=str(landing_page) if landing_page else None,
            name=str(document.get(_key("name")) or ""),
            include_self=bool(document.get(_key("include_self"), True)),
            version=SELECTION_SCHEMA_VERSION,
        )


def _ids(values: list[typ.Any]) -> tuple[int, ...]:
    ids: list[int] = []
    for value in values:
        try:
            ids.append(int(value))
        except (TypeError, ValueError) as exc:
            msg = f"Content ids must be numeric, got {value!r}"
            raise SelectionStateError(msg) from exc
    return tuple(ids)


class SelectionStore:
    """Persist a :class:`SelectionState` as JSON on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> SelectionState | None:
        """Return the stored selection, or ``None`` when nothing was saved."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Selection file '{self.path}' is not valid JSON"
            raise SelectionStateError(msg) from exc
        return SelectionState.from_document(document)

    def save(self, state: SelectionState) -> None:
        """Write ``state``, replacing whatever was stored before."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(state.to_document(), indent=2) + "\n", encoding="utf-8"
        )
        logger.info("Saved selection to %s", self.path)

    def clear(self) -> None:
        """Forget every previous selection."""
        self.path.unlink(missing_ok=True)
        logger.info("Cleared selection at %s", self.path)


def suggest_blueprint_name(name: str) -> str:
    """Return the next name in a ``Site``, ``Site V2``, ``Site V3`` series.

    Examples
    --------
    >>> suggest_blueprint_name("My Site")
    'My Site V2'
    >>> suggest_blueprint_name("My Site V9")
    'My Site V10'
    """
    match = _TRAILING_NUMBER.search(name)
    if match:
        return f"{name[: match.start()]}{int(match.group()) + 1}"
    return f"{name} V2"


def _mapping_option(site: SiteSource, name: str) -> dict[str, typ.Any]:
    value = site.get_option(name)
    return dict(value) if isinstance(value, dict) else {}


def initial_selection(
    site: SiteSource, inventory: SiteInventory, *, include_self: bool = True
) -> SelectionState:
    """Seed a selection from options left by a previous blueprint run.

    A site provisioned from a blueprint that included this tool carries the
    constants, options, landing page and name chosen last time. When it also
    sets the default-checked flag every page, template, template part, user
    and the global styles start out selected.
    """
    default_checked = bool(site.get_option(OPTION_DEFAULT_CHECKED))
    base_name = str(site.get_option(OPTION_NAME) or inventory.site_name)
    landing_page = site.get_option(OPTION_LANDING_PAGE)
    selection = SelectionState(
        additional_options=_mapping_option(site, OPTION_INITIAL_OPTIONS),
        constants=_mapping_option(site, OPTION_INITIAL_CONSTANTS),
        landing_page=str(landing_page) if landing_page else None,
        name=suggest_blueprint_name(base_name),
        include_self=include_self,
    )
    if not default_checked:
        return selection
    return dc.replace(
        selection,
        include_global_styles=inventory.global_styles is not None,
        pages=tuple(item.id for item in inventory.pages),
        templates=tuple(item.id for item in inventory.templates),
        template_parts=tuple(part.item.id for part in inventory.template_parts),
        users={user.login: "" for user in inventory.users},
    )


__all__ = [
    "SelectionState",
    "SelectionStateError",
    "SelectionStore",
    "initial_selection",
    "suggest_blueprint_name",
]
