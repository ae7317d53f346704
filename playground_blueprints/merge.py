"""Merge an operator's selection into an assembled blueprint.

:func:`merge_selection` is a pure function of the assembled blueprint, the
site inventory and a :class:`~playground_blueprints.selection.SelectionState`.
It derives a new :class:`~playground_blueprints.models.Blueprint`; the input is
never modified, so merging the same selection twice yields equal results.
:func:`with_self_install` adds the steps that install this extractor, for
the Playground deep link only.

Example
-------
>>> merged = merge_selection(result.blueprint, inventory, selection)  # doctest: +SKIP
>>> [type(step).__name__ for step in merged.steps]  # doctest: +SKIP
['InstallPluginStep', 'InstallThemeStep', 'RunCodeStep', 'SetSiteOptionsStep', ...]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ._constants import (
    CORS_PROXY_URL,
    OPTION_DEFAULT_CHECKED,
    OPTION_INITIAL_CONSTANTS,
    OPTION_INITIAL_OPTIONS,
    OPTION_LANDING_PAGE,
    OPTION_NAME,
    SELF_PLUGIN_URL,
    SELF_SLUG,
    UPLOADS_PATH,
)
from .intents import (
    CreateGlobalStyles,
    CreatePage,
    CreateTemplate,
    CreateTemplatePart,
    CreateUser,
)
from .models import (
    DefineConstantsStep,
    DirectUrl,
    InstallPluginStep,
    InstallThemeStep,
    RunCodeStep,
    SetSiteOptionsStep,
    Step,
    UnzipStep,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .inventory import SiteInventory
    from .models import Blueprint
    from .selection import SelectionState

logger = logging.getLogger(__name__)


def unzip_step(zip_url: str) -> UnzipStep:
    """Return the step that extracts an uploaded media archive.

    The archive is fetched through Playground's CORS proxy since it usually
    lives on the source site.
    """
    return UnzipStep(
        zip_file=DirectUrl(url=f"{CORS_PROXY_URL}{zip_url}"),
        extract_to_path=UPLOADS_PATH,
    )


def _filter_steps(
    steps: cabc.Iterable[Step], inventory: SiteInventory, selection: SelectionState
) -> list[Step]:
    excluded = set(selection.ignore_plugins)
    merged: list[Step] = []
    for step in steps:
        match step:
            case InstallPluginStep(slug=slug) if slug in excluded:
                continue
            case SetSiteOptionsStep(options=options):
                combined = {**options, **selection.additional_options}
                if combined:
                    merged.append(SetSiteOptionsStep(options=combined))
            case InstallThemeStep():
                if selection.ignore_theme:
                    continue
                merged.append(step)
                styles = inventory.global_styles
                if selection.include_global_styles and styles is not None:
                    merged.append(
                        RunCodeStep(
                            intent=CreateGlobalStyles(
                                title=styles.title,
                                name=styles.name,
                                content=styles.content,
                            )
                        )
                    )
            case _:
                merged.append(step)
    return merged


def _user_steps(
    inventory: SiteInventory, selection: SelectionState
) -> list[RunCodeStep]:
    records = {user.login: user for user in inventory.users}
    steps: list[RunCodeStep] = []
    for login, password in selection.users.items():
        record = records.get(login)
        if record is None:
            logger.debug("Selected user %s is not offered by the site", login)
            continue
        steps.append(
            RunCodeStep(
                intent=CreateUser(
                    login=record.login,
                    display_name=record.display_name,
                    role=record.role,
                    password=password,
                )
            )
        )
    return steps


def _content_steps(
    inventory: SiteInventory, selection: SelectionState
) -> list[RunCodeStep]:
    pages = {item.id: item for item in inventory.pages}
    parts = {part.item.id: part for part in inventory.template_parts}
    templates = {item.id: item for item in inventory.templates}
    steps: list[RunCodeStep] = []

    for post_id in selection.pages:
        page = pages.get(post_id)
        if page is None:
            logger.debug("Selected page %s no longer exists", post_id)
            continue
        steps.append(
            RunCodeStep(
                intent=CreatePage(
                    post_type=page.post_type,
                    title=page.title,
                    name=page.name,
                    content=page.content,
                    source_home_url=inventory.home_url,
                )
            )
        )

    for post_id in selection.template_parts:
        part = parts.get(post_id)
        if part is None:
            logger.debug("Selected template part %s no longer exists", post_id)
            continue
        steps.append(
            RunCodeStep(
                intent=CreateTemplatePart(
                    title=part.item.title,
                    name=part.item.name,
                    content=part.item.content,
                    references=part.references,
                    nav_items=part.nav_items,
                    source_home_url=inventory.home_url,
                )
            )
        )

    for post_id in selection.templates:
        template = templates.get(post_id)
        if template is None:
            logger.debug("Selected template %s no longer exists", post_id)
            continue
        steps.append(
            RunCodeStep(
                intent=CreateTemplate(
                    title=template.title,
                    name=template.name,
                    content=template.content,
                )
            )
        )
    return steps


def _self_steps(blueprint: Blueprint, selection: SelectionState) -> list[Step]:
    return [
        InstallPluginStep(
            plugin_data=DirectUrl(url=SELF_PLUGIN_URL),
            name="Blueprint Extractor",
            slug=SELF_SLUG,
        ),
        SetSiteOptionsStep(
            options={
                OPTION_INITIAL_CONSTANTS: dict(selection.constants),
                OPTION_INITIAL_OPTIONS: dict(selection.additional_options),
                OPTION_LANDING_PAGE: selection.landing_page or blueprint.landing_page,
                OPTION_DEFAULT_CHECKED: True,
                OPTION_NAME: selection.name,
            }
        ),
    ]


def merge_selection(
    blueprint: Blueprint, inventory: SiteInventory, selection: SelectionState
) -> Blueprint:
    """Return ``blueprint`` with ``selection`` applied.

    Parameters
    ----------
    blueprint : Blueprint
        Output of :class:`~playground_blueprints.assembler.BlueprintAssembler`.
    inventory : SiteInventory
        Selectable items read from the same site.
    selection : SelectionState
        The operator's choices. Ids and logins that no longer exist on the
        site are skipped.

    Returns
    -------
    Blueprint
        A new blueprint. Step order is: filtered base steps (with the unzip
        step and global styles slotted in), users, constants, pages,
        template parts, templates. The extractor never installs itself
        here; see :func:`with_self_install`.
    """
    base_steps: list[Step] = list(blueprint.steps)
    if selection.zip_url:
        base_steps.append(unzip_step(selection.zip_url))

    steps = _filter_steps(base_steps, inventory, selection)
    steps.extend(_user_steps(inventory, selection))
    if selection.constants:
        steps.append(DefineConstantsStep(consts=dict(selection.constants)))
    steps.extend(_content_steps(inventory, selection))

    return dc.replace(
        blueprint,
        landing_page=selection.landing_page or blueprint.landing_page,
        steps=tuple(steps),
    )


def with_self_install(blueprint: Blueprint, selection: SelectionState) -> Blueprint:
    """Return ``blueprint`` extended to install this extractor in Playground.

    Only the Playground deep link carries these steps; the exported document
    stays free of them. The seeded options let the provisioned site offer
    the same choices again. ``blueprint`` is returned unchanged when
    ``selection.include_self`` is off.
    """
    if not selection.include_self:
        return blueprint
    return dc.replace(
        blueprint, steps=(*blueprint.steps, *_self_steps(blueprint, selection))
    )


__all__ = ["merge_selection", "unzip_step", "with_self_install"]
