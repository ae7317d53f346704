"""Read-only view of the installation a blueprint is extracted from.

The extraction engine never talks to a database directly; it asks a
:class:`SiteSource` for active plugins, options, posts, users and plugin
sources. :class:`SnapshotSite` implements that interface from a YAML snapshot
of the site's datastore plus the installation's files on disk::

    home_url: https://example.com
    versions: {php: "8.2.12", wp: "6.6.1"}
    wp_root: ./wordpress
    options:
      blogname: Example
      active_plugins: [akismet/akismet.php]
    plugins:
      akismet/akismet.php: {name: Akismet, requires_plugins: ""}
    theme: {text_domain: twentytwentyfour, stylesheet: twentytwentyfour}
    posts:
      - {id: 2, post_type: page, post_title: About, post_name: about, post_content: ""}
    users:
      - {login: ana, display_name: Ana, role: editor}

Plugin sources are read from ``<wp_root>/wp-content/plugins`` and constants
from ``<wp_root>/wp-config.php``. Headers missing from ``plugins`` are parsed
from the main plugin file the same way WordPress reads them.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import ContentItem, UserRecord

logger = logging.getLogger(__name__)

_HEADER_PATTERN = r"^[ \t/*#@]*{field}:(.*)$"


class SnapshotError(ValueError):
    """Raised when a site snapshot is missing or malformed."""


@dc.dataclass(frozen=True, slots=True)
class PluginHeader:
    """The subset of a plugin's file header the extractor needs."""

    name: str
    requires_plugins: str = ""


@dc.dataclass(frozen=True, slots=True)
class ThemeInfo:
    """Identifiers of the active theme."""

    text_domain: str
    stylesheet: str


class SiteSource(typ.Protocol):
    """Queries the extraction engine runs against a live installation."""

    home_url: str
    php_version: str
    wp_version: str

    def get_option(self, name: str, default: typ.Any = None) -> typ.Any: ...

    def active_plugins(self) -> list[str]: ...

    def plugin_header(self, plugin_file: str) -> PluginHeader: ...

    def plugin_files(self, plugin_file: str) -> list[str]: ...

    def read_plugin_file(self, relative_path: str) -> str: ...

    def read_config_source(self) -> str | None: ...

    def theme(self) -> ThemeInfo: ...

    def posts(self, post_type: str, *, theme: str | None = None) -> list[ContentItem]: ...

    def get_post(self, post_id: int) -> ContentItem | None: ...

    def users(self) -> list[UserRecord]: ...


def parse_plugin_header(source: str, fallback_name: str) -> PluginHeader:
    """Extract ``Plugin Name`` and ``Requires Plugins`` from a file header."""
    head = source[:8192]

    def _field(field: str) -> str:
        pattern = re.compile(_HEADER_PATTERN.format(field=field), re.MULTILINE | re.I)
        match = pattern.search(head)
        if not match:
            return ""
        return re.sub(r"\s*(?:\*/|\?>).*", "", match.group(1)).strip()

    return PluginHeader(
        name=_field("Plugin Name") or fallback_name,
        requires_plugins=_field("Requires Plugins"),
    )


class SnapshotSite:
    """A :class:`SiteSource` backed by a YAML snapshot and an install root."""

    def __init__(
        self,
        data: typ.Mapping[str, typ.Any],
        *,
        wp_root: Path | None = None,
    ) -> None:
        self._data = data
        self.wp_root = wp_root
        self.home_url = str(data.get("home_url") or "")
        versions = data.get("versions") or {}
        self.php_version = str(versions.get("php") or "")
        self.wp_version = str(versions.get("wp") or "")
        self._options: dict[str, typ.Any] = dict(data.get("options") or {})
        self._plugins: dict[str, typ.Any] = dict(data.get("plugins") or {})
        self._posts: list[tuple[ContentItem, str | None]] = [
            _build_post(payload) for payload in data.get("posts") or []
        ]
        self._users = [_build_user(payload) for payload in data.get("users") or []]

    @classmethod
    def load(cls, path: Path) -> SnapshotSite:
        """Load a snapshot file, resolving ``wp_root`` relative to it.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist.
        SnapshotError
            If the document is not a mapping or an entry is malformed.
        """
        if not path.exists():
            msg = f"Snapshot file '{path}' not found."
            raise FileNotFoundError(msg)
        loader = YAML(typ="safe")
        loader.version = (1, 2)
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
        if not isinstance(loaded, dict):
            msg = "Top-level snapshot structure must be a mapping."
            raise SnapshotError(msg)
        root_value = loaded.get("wp_root")
        wp_root = (path.parent / str(root_value)).resolve() if root_value else None
        return cls(loaded, wp_root=wp_root)

    @property
    def plugins_dir(self) -> Path | None:
        if self.wp_root is None:
            return None
        return self.wp_root / "wp-content" / "plugins"

    def get_option(self, name: str, default: typ.Any = None) -> typ.Any:
        return self._options.get(name, default)

    def active_plugins(self) -> list[str]:
        active = self._options.get("active_plugins") or []
        return [str(plugin) for plugin in active]

    def plugin_header(self, plugin_file: str) -> PluginHeader:
        fallback = plugin_file.split("/", 1)[0]
        payload = self._plugins.get(plugin_file)
        if isinstance(payload, dict):
            return PluginHeader(
                name=str(payload.get("name") or fallback),
                requires_plugins=str(payload.get("requires_plugins") or ""),
            )
        try:
            source = self.read_plugin_file(plugin_file)
        except OSError:
            return PluginHeader(name=fallback)
        return parse_plugin_header(source, fallback)

    def plugin_files(self, plugin_file: str) -> list[str]:
        plugins_dir = self.plugins_dir
        if plugins_dir is None:
            return []
        if "/" not in plugin_file:
            return [plugin_file] if (plugins_dir / plugin_file).is_file() else []
        plugin_dir = plugins_dir / plugin_file.split("/", 1)[0]
        if not plugin_dir.is_dir():
            return []
        return sorted(
            path.relative_to(plugins_dir).as_posix()
            for path in plugin_dir.rglob("*")
            if path.is_file()
        )

    def read_plugin_file(self, relative_path: str) -> str:
        plugins_dir = self.plugins_dir
        if plugins_dir is None:
            msg = f"No installation root to read '{relative_path}' from"
            raise FileNotFoundError(msg)
        return (plugins_dir / relative_path).read_text(
            encoding="utf-8", errors="replace"
        )

    def read_config_source(self) -> str | None:
        if self.wp_root is None:
            return None
        try:
            return (self.wp_root / "wp-config.php").read_text(
                encoding="utf-8", errors="replace"
            )
        except OSError as exc:
            logger.debug("Unable to read wp-config.php: %s", exc)
            return None

    def theme(self) -> ThemeInfo:
        payload = self._data.get("theme") or {}
        stylesheet = str(payload.get("stylesheet") or "")
        text_domain = str(payload.get("text_domain") or stylesheet)
        return ThemeInfo(text_domain=text_domain, stylesheet=stylesheet)

    def posts(self, post_type: str, *, theme: str | None = None) -> list[ContentItem]:
        return [
            item
            for item, item_theme in self._posts
            if item.post_type == post_type and (theme is None or item_theme == theme)
        ]

    def get_post(self, post_id: int) -> ContentItem | None:
        for item, _theme in self._posts:
            if item.id == post_id:
                return item
        return None

    def users(self) -> list[UserRecord]:
        return list(self._users)


def _build_post(payload: typ.Any) -> tuple[ContentItem, str | None]:
    if not isinstance(payload, dict):
        msg = f"Post entries must be mappings, got {payload!r}"
        raise SnapshotError(msg)
    try:
        post_id = int(payload["id"])
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Post entry is missing a numeric 'id': {payload!r}"
        raise SnapshotError(msg) from exc
    item = ContentItem(
        id=post_id,
        post_type=str(payload.get("post_type") or "post"),
        title=str(payload.get("post_title") or ""),
        name=str(payload.get("post_name") or ""),
        content=str(payload.get("post_content") or ""),
    )
    theme = payload.get("theme")
    return item, str(theme) if theme else None


def _build_user(payload: typ.Any) -> UserRecord:
    if not isinstance(payload, dict) or not payload.get("login"):
        msg = f"User entries need a 'login', got {payload!r}"
        raise SnapshotError(msg)
    roles = payload.get("roles")
    role = payload.get("role") or (roles[0] if roles else "subscriber")
    return UserRecord(
        login=str(payload["login"]),
        display_name=str(payload.get("display_name") or payload["login"]),
        role=str(role),
    )


__all__ = [
    "PluginHeader",
    "SiteSource",
    "SnapshotError",
    "SnapshotSite",
    "ThemeInfo",
    "parse_plugin_header",
]
