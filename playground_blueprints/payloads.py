"""Render content-creation intents into Playground ``runPHP`` snippets.

The snippets are Jinja templates living in ``playground_blueprints/templates``.
Every value interpolated into a snippet goes through the ``php`` filter, which
emits a PHP literal, so the templates themselves never concatenate raw text.

Example
-------
>>> from playground_blueprints.intents import CreateUser
>>> renderer = PayloadRenderer()
>>> code = renderer.render(CreateUser("ana", "Ana", "editor", "s3cret"))
>>> "'user_login' => 'ana'" in code
True
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .intents import (
    CreateGlobalStyles,
    CreatePage,
    CreateTemplate,
    CreateTemplatePart,
    CreateUser,
    PurgeContent,
)

if typ.TYPE_CHECKING:
    from .intents import ContentIntent

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def php_literal(value: object) -> str:
    """Return ``value`` as a PHP literal suitable for embedding in a snippet."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return repr(value)
        case _:
            text = str(value).replace("\\", "\\\\").replace("'", "\\'")
            return f"'{text}'"


class PayloadRenderer:
    """Render :mod:`~playground_blueprints.intents` records as PHP code."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,  # noqa: S701 - output is PHP, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["php"] = php_literal

    def render(self, intent: ContentIntent) -> str:
        """Return the PHP snippet that carries out ``intent`` on the target."""
        template = self.env.get_template(_template_name(intent))
        return template.render(intent=intent)


def _template_name(intent: ContentIntent) -> str:
    match intent:
        case PurgeContent():
            return "purge_content.php.jinja"
        case CreatePage():
            return "create_page.php.jinja"
        case CreateTemplate():
            return "create_template.php.jinja"
        case CreateTemplatePart():
            return "create_template_part.php.jinja"
        case CreateUser():
            return "create_user.php.jinja"
        case CreateGlobalStyles():
            return "create_global_styles.php.jinja"
    msg = f"No payload template for intent {type(intent).__name__}"
    raise TypeError(msg)


__all__ = ["DEFAULT_TEMPLATES_DIR", "PayloadRenderer", "php_literal"]
