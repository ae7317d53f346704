"""Cyclopts CLI entrypoint for extracting WordPress Playground blueprints.

The ``blueprints`` console script reads a site snapshot, resolves its plugins
and theme against WordPress.org, and prints the blueprint that recreates the
site in Playground. Operator choices (pages to copy, users to recreate,
constants and options to add) are stored with ``blueprints select`` and merged
into every later ``blueprints generate`` run until ``blueprints reset``.

Examples
--------
Print the blueprint for the configured site:

>>> from playground_blueprints.cli import main
>>> main()  # doctest: +SKIP

Select two pages and write the result to a file:

>>> from playground_blueprints.cli import app
>>> app(["select", "--page", "2", "--page", "7"])  # doctest: +SKIP
>>> app(["generate", "--output", "blueprint.json"])  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_extractor_config
from .export import deep_link, dumps
from .extractor import BlueprintExtractor
from .payloads import PayloadRenderer
from .selection import SelectionStore

if typ.TYPE_CHECKING:
    from .selection import SelectionState

DEFAULT_CONFIG = Path("config/blueprints.yaml")

app = App(name="blueprints", config=cyclopts.config.Env("BLUEPRINTS_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to extractor config", env_var="BLUEPRINTS_CONFIG")
]
SnapshotOption = typ.Annotated[
    Path | None,
    Parameter(help="Override the site snapshot", env_var="BLUEPRINTS_SNAPSHOT"),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _extractor(config: Path, snapshot: Path | None) -> BlueprintExtractor:
    extractor_config = load_extractor_config(config)
    if snapshot is not None:
        extractor_config.snapshot = snapshot
    return BlueprintExtractor.from_config(extractor_config)


def _parse_assignment(value: str) -> tuple[str, str]:
    """Split ``NAME=VALUE``; a missing ``=`` is a usage error."""
    name, separator, assigned = value.partition("=")
    if not separator or not name.strip():
        msg = f"Expected NAME=VALUE, got '{value}'"
        raise ValueError(msg)
    return name.strip(), assigned


def _parse_user(value: str) -> tuple[str, str]:
    """Split ``LOGIN[:PASSWORD]``."""
    login, _separator, password = value.partition(":")
    if not login.strip():
        msg = f"Expected LOGIN or LOGIN:PASSWORD, got '{value}'"
        raise ValueError(msg)
    return login.strip(), password


@app.command(help="Print the blueprint for the configured site.")
def generate(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    snapshot: SnapshotOption = None,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Write the blueprint to a file instead of stdout"),
    ] = None,
    raw: typ.Annotated[
        bool,
        Parameter(help="Keep plugin names and prioritization notes in the output"),
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log skipped items")] = False,
) -> None:
    """Generate the blueprint with the stored selection merged in.

    Parameters
    ----------
    config : Path, optional
        Path to the ``blueprints.yaml`` configuration file (overridable via
        ``BLUEPRINTS_CONFIG``).
    snapshot : Path or None, optional
        Site snapshot to read instead of the configured one.
    output : Path or None, optional
        Destination file; the blueprint is printed when omitted.
    raw : bool, optional
        Keep the editor-only ``name``, ``slug`` and ``info`` fields of
        ``installPlugin`` steps.
    verbose : bool, optional
        Log plugins, references and files that were skipped.
    """
    _configure_logging(verbose=verbose)
    extractor = _extractor(config, snapshot)
    text = dumps(extractor.generate(), PayloadRenderer(), export=not raw)
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    print(f"wrote {_format_path(output)}")


@app.command(help="Print a Playground URL that boots the blueprint.")
def link(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    snapshot: SnapshotOption = None,
) -> None:
    """Print a ``playground.wordpress.net`` deep link for the blueprint.

    Unlike ``generate``, the linked blueprint also installs this extractor
    in the Playground unless the selection opts out with
    ``--no-include-self``.
    """
    extractor = _extractor(config, snapshot)
    print(deep_link(extractor.playground(), PayloadRenderer()))


@app.command(help="List constants defined in wp-config.php.")
def constants(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    snapshot: SnapshotOption = None,
) -> None:
    """Print the literal constants that can be added to the blueprint."""
    inventory = _extractor(config, snapshot).inventory()
    if not inventory.constants:
        print("no constants found")
        return
    for name, value in inventory.constants.items():
        print(f"{name}={value}")


@app.command(help="List options read by the exported plugins.")
def options(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    snapshot: SnapshotOption = None,
) -> None:
    """Print plugin options with a value on the site, grouped by plugin."""
    inventory = _extractor(config, snapshot).inventory()
    if not inventory.plugin_options:
        print("no plugin options found")
        return
    for slug, found in sorted(inventory.plugin_options.items()):
        print(f"{slug}:")
        for name, value in found.items():
            print(f"  {name}={value}")


@app.command(help="Update the stored selection merged into every blueprint.")
def select(  # noqa: PLR0913 - one flag per selection category
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    snapshot: SnapshotOption = None,
    ignore_plugin: typ.Annotated[
        list[str] | None, Parameter(help="Plugin slug to leave out")
    ] = None,
    ignore_theme: typ.Annotated[
        bool | None, Parameter(help="Use Playground's default theme")
    ] = None,
    global_styles: typ.Annotated[
        bool | None, Parameter(help="Recreate the theme's global styles")
    ] = None,
    page: typ.Annotated[list[int] | None, Parameter(help="Page id to copy")] = None,
    template: typ.Annotated[
        list[int] | None, Parameter(help="Template id to copy")
    ] = None,
    template_part: typ.Annotated[
        list[int] | None, Parameter(help="Template part id to copy")
    ] = None,
    user: typ.Annotated[
        list[str] | None, Parameter(help="User to recreate, as LOGIN[:PASSWORD]")
    ] = None,
    constant: typ.Annotated[
        list[str] | None, Parameter(help="Constant to define, as NAME=VALUE")
    ] = None,
    option: typ.Annotated[
        list[str] | None, Parameter(help="Site option to set, as NAME=VALUE")
    ] = None,
    zip_url: typ.Annotated[
        str | None, Parameter(help="Public URL of a media archive to unzip")
    ] = None,
    landing_page: typ.Annotated[
        str | None, Parameter(help="Path Playground opens first")
    ] = None,
    name: typ.Annotated[str | None, Parameter(help="Blueprint name")] = None,
    include_self: typ.Annotated[
        bool | None, Parameter(help="Install this extractor in the Playground")
    ] = None,
) -> None:
    """Replace each category given on the command line; keep the others.

    The first call starts from the selection suggested by the site itself, so
    a site provisioned from an earlier blueprint picks up where it left off.

    Raises
    ------
    ValueError
        If a ``--constant``, ``--option`` or ``--user`` value is malformed.
    """
    extractor = _extractor(config, snapshot)
    current = extractor.selection()
    changes: dict[str, typ.Any] = {}
    if ignore_plugin is not None:
        changes["ignore_plugins"] = tuple(ignore_plugin)
    if ignore_theme is not None:
        changes["ignore_theme"] = ignore_theme
    if global_styles is not None:
        changes["include_global_styles"] = global_styles
    if page is not None:
        changes["pages"] = tuple(page)
    if template is not None:
        changes["templates"] = tuple(template)
    if template_part is not None:
        changes["template_parts"] = tuple(template_part)
    if user is not None:
        changes["users"] = dict(_parse_user(value) for value in user)
    if constant is not None:
        changes["constants"] = dict(_parse_assignment(value) for value in constant)
    if option is not None:
        changes["additional_options"] = dict(
            _parse_assignment(value) for value in option
        )
    if zip_url is not None:
        changes["zip_url"] = zip_url
    if landing_page is not None:
        changes["landing_page"] = landing_page or None
    if name is not None:
        changes["name"] = name
    if include_self is not None:
        changes["include_self"] = include_self

    updated: SelectionState = dc.replace(current, **changes)
    extractor.store.save(updated)
    print(f"wrote {_format_path(extractor.store.path)}")


@app.command(help="Forget the stored selection.")
def reset(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
) -> None:
    """Remove the persisted selection so the next run starts afresh."""
    store = SelectionStore(load_extractor_config(config).selection_file)
    existed = store.path.exists()
    store.clear()
    print(f"removed {_format_path(store.path)}" if existed else "no stored selection")


def main() -> None:
    """Invoke the Cyclopts application that powers the `blueprints` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
