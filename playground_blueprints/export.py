"""Serialize blueprints into Playground's JSON wire format.

Intents carried by ``runPHP`` steps are rendered into PHP only here, so every
earlier stage can compare steps by equality.

Example
-------
>>> text = dumps(blueprint, PayloadRenderer())  # doctest: +SKIP
>>> deep_link(blueprint, PayloadRenderer())  # doctest: +SKIP
'https://playground.wordpress.net/?blueprint-url=data:application/json;base64,...'
"""

from __future__ import annotations

import base64
import json
import typing as typ
from urllib.parse import quote

from ._constants import PLAYGROUND_URL
from .models import (
    DefineConstantsStep,
    InstallPluginStep,
    InstallThemeStep,
    RunCodeStep,
    SetSiteOptionsStep,
    UnzipStep,
    locator_to_dict,
)

if typ.TYPE_CHECKING:
    from .models import Blueprint, Step
    from .payloads import PayloadRenderer


def step_to_dict(
    step: Step, renderer: PayloadRenderer, *, export: bool = True
) -> dict[str, typ.Any]:
    """Return the wire form of ``step``.

    Parameters
    ----------
    step : Step
        The step to serialize.
    renderer : PayloadRenderer
        Renders ``runPHP`` intents into code.
    export : bool, default True
        Strip the editor-only ``name``, ``slug`` and ``info`` fields from
        ``installPlugin`` steps.
    """
    match step:
        case InstallPluginStep():
            payload: dict[str, typ.Any] = {
                "step": "installPlugin",
                "pluginData": locator_to_dict(step.plugin_data),
            }
            if not export:
                payload |= {"name": step.name, "slug": step.slug}
                if step.info:
                    payload["info"] = step.info
            return payload
        case InstallThemeStep(theme_zip_file=locator):
            return {"step": "installTheme", "themeZipFile": locator_to_dict(locator)}
        case SetSiteOptionsStep(options=options):
            return {"step": "setSiteOptions", "options": dict(options)}
        case DefineConstantsStep(consts=consts):
            return {"step": "defineWpConfigConsts", "consts": dict(consts)}
        case UnzipStep(zip_file=locator, extract_to_path=path):
            return {
                "step": "unzip",
                "zipFile": locator_to_dict(locator),
                "extractToPath": path,
            }
        case RunCodeStep(intent=intent):
            return {"step": "runPHP", "code": renderer.render(intent)}
    msg = f"Unsupported step: {step!r}"
    raise TypeError(msg)


def blueprint_to_dict(
    blueprint: Blueprint, renderer: PayloadRenderer, *, export: bool = True
) -> dict[str, typ.Any]:
    """Return the wire form of ``blueprint`` with keys in Playground's order."""
    return {
        "landingPage": blueprint.landing_page,
        "preferredVersions": dict(blueprint.preferred_versions),
        "phpExtensionBundles": list(blueprint.php_extension_bundles),
        "features": dict(blueprint.features),
        "login": blueprint.login,
        "steps": [
            step_to_dict(step, renderer, export=export) for step in blueprint.steps
        ],
    }


def dumps(
    blueprint: Blueprint, renderer: PayloadRenderer, *, export: bool = True
) -> str:
    """Return pretty-printed JSON with four-space indentation.

    Non-ASCII text is written as-is rather than as ``\\uXXXX`` escapes.
    """
    return json.dumps(
        blueprint_to_dict(blueprint, renderer, export=export),
        indent=4,
        ensure_ascii=False,
    )


def deep_link(blueprint: Blueprint, renderer: PayloadRenderer) -> str:
    """Return a Playground URL that boots straight into ``blueprint``."""
    document = json.dumps(blueprint_to_dict(blueprint, renderer), ensure_ascii=False)
    encoded = base64.b64encode(document.encode("utf-8")).decode("ascii")
    return f"{PLAYGROUND_URL}?blueprint-url=data:application/json;base64,{quote(encoded, safe='')}"


__all__ = ["blueprint_to_dict", "deep_link", "dumps", "step_to_dict"]
