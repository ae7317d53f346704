"""Discover configuration constants and plugin-owned options.

Two independent scans feed the suggestion lists offered alongside a
blueprint:

* :func:`scan_config_constants` tokenizes ``wp-config.php`` and collects every
  ``define( 'NAME', 'value' )`` whose name and value are string literals,
  leaving out the database connection settings.
* :func:`scan_plugin_options` greps each active plugin's PHP sources for
  ``get_option( 'name' )`` calls and reports the options that currently hold
  a value.

Neither scan raises for unreadable input; the offending file is skipped.
"""

from __future__ import annotations

import json
import logging
import re
import typing as typ

from ._constants import (
    CORE_OPTIONS,
    RESERVED_OPTION_PREFIXES,
    SENSITIVE_CONSTANTS,
    VENDORED_DIRECTORIES,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .site import SiteSource

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<comment>//[^\n]*|\#[^\n]*|/\*.*?\*/)
    |(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<name>[A-Za-z_\\][A-Za-z0-9_\\]*)
    |(?P<space>\s+)
    |(?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)
_OPTION_CALL_PATTERN = re.compile(r"""get_option\(\s*['"]([^'"]+)['"]\s*\)""")
_DOUBLE_QUOTE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "$": "$", '"': '"', "\\": "\\"}


def tokenize_php(source: str) -> list[tuple[str, str]]:
    """Split PHP source into ``(kind, text)`` tokens, dropping whitespace/comments.

    Kinds are ``"string"``, ``"name"`` and ``"other"`` (single punctuation
    characters). The tokenizer is only precise enough to find ``define``
    call sites; it does not understand heredocs or interpolation.
    """
    tokens: list[tuple[str, str]] = []
    for match in _TOKEN_PATTERN.finditer(source):
        kind = match.lastgroup
        if kind in ("comment", "space") or kind is None:
            continue
        tokens.append((kind, match.group()))
    return tokens


def _unquote(literal: str) -> str:
    quote, body = literal[0], literal[1:-1]
    if quote == "'":
        return body.replace("\\'", "'").replace("\\\\", "\\")
    return re.sub(
        r"\\(.)",
        lambda m: _DOUBLE_QUOTE_ESCAPES.get(m.group(1), m.group()),
        body,
    )


def scan_config_constants(source: str | None) -> dict[str, str]:
    """Return ``NAME -> value`` for literal string constants in ``source``.

    Examples
    --------
    >>> scan_config_constants('define("DB_NAME","x"); define("MY_FEATURE","1");')
    {'MY_FEATURE': '1'}
    """
    if not source:
        return {}
    tokens = tokenize_php(source)
    constants: dict[str, str] = {}
    for index, (kind, text) in enumerate(tokens):
        if kind != "name" or text.lower() != "define":
            continue
        window = tokens[index + 1 : index + 6]
        shape = [
            value if token_kind == "other" else token_kind
            for token_kind, value in window
        ]
        if shape != ["(", "string", ",", "string", ")"]:
            continue
        name = _unquote(window[1][1])
        constants[name] = _unquote(window[3][1])

    for name in SENSITIVE_CONSTANTS:
        constants.pop(name, None)
    return constants


def _is_reserved_option(name: str) -> bool:
    return name in CORE_OPTIONS or name.startswith(RESERVED_OPTION_PREFIXES)


def _is_empty_value(value: typ.Any) -> bool:
    return not value or value == "0"


def _serialize_option(value: typ.Any) -> typ.Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    return json.dumps(value, sort_keys=True)


def _source_files(site: SiteSource, plugin_file: str) -> cabc.Iterator[str]:
    for relative in site.plugin_files(plugin_file):
        if not relative.endswith(".php"):
            continue
        parts = relative.split("/")
        # plugin files are listed relative to the plugins directory
        inner = parts[1:] if len(parts) > 1 else parts
        if inner and inner[0] in VENDORED_DIRECTORIES:
            continue
        yield relative


def scan_plugin_options(
    site: SiteSource, ignored: cabc.Collection[str] = ()
) -> dict[str, dict[str, typ.Any]]:
    """Return ``plugin slug -> {option name: value}`` for active plugins.

    Parameters
    ----------
    site : SiteSource
        Installation to scan.
    ignored : Collection[str], optional
        Plugin slugs to skip, typically the plugins that were ignored or could
        not be resolved while assembling the blueprint.

    Returns
    -------
    dict[str, dict[str, Any]]
        Options referenced by each plugin's own sources (vendored
        dependencies excluded) that are neither core nor reserved and hold a
        non-empty value. Plugins without such options are omitted.
    """
    plugin_options: dict[str, dict[str, typ.Any]] = {}
    for plugin_file in site.active_plugins():
        slug = plugin_file.split("/", 1)[0]
        if slug in ignored:
            continue
        for relative in _source_files(site, plugin_file):
            try:
                source = site.read_plugin_file(relative)
            except OSError as exc:
                logger.debug("Skipping unreadable plugin file %s: %s", relative, exc)
                continue
            for option_name in dict.fromkeys(_OPTION_CALL_PATTERN.findall(source)):
                if _is_reserved_option(option_name):
                    continue
                value = site.get_option(option_name)
                if _is_empty_value(value):
                    continue
                plugin_options.setdefault(slug, {})[option_name] = _serialize_option(
                    value
                )
    return plugin_options


__all__ = ["scan_config_constants", "scan_plugin_options", "tokenize_php"]
