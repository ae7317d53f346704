"""Unit tests for assembling the base blueprint from a site."""

from __future__ import annotations

import typing as typ

from playground_blueprints.assembler import (
    AssemblyOptions,
    BlueprintAssembler,
    php_minor_version,
    plugin_slug,
)
from playground_blueprints.intents import PurgeContent
from playground_blueprints.models import (
    InstallPluginStep,
    InstallThemeStep,
    RegistryReference,
    RunCodeStep,
    SetSiteOptionsStep,
)
from playground_blueprints.site import SnapshotSite

if typ.TYPE_CHECKING:
    from playground_blueprints.resolver import ResourceResolver

    from conftest import StubWordPressOrg


def test_plugin_helpers() -> None:
    """Slugs come from the plugin directory and PHP pins drop the patch level."""
    assert plugin_slug("akismet/akismet.php") == "akismet"
    assert plugin_slug("hello.php") == "hello.php"
    assert php_minor_version("8.2.12") == "8.2"


def test_assembles_steps_in_fixed_order(
    site: SnapshotSite, resolver: ResourceResolver
) -> None:
    """Plugins, theme, options and the purge step are emitted in order."""
    result = BlueprintAssembler(site, resolver).assemble()
    steps = result.blueprint.steps

    assert [type(step).__name__ for step in steps] == [
        "InstallPluginStep",
        "InstallPluginStep",
        "InstallThemeStep",
        "SetSiteOptionsStep",
        "RunCodeStep",
    ], f"unexpected step order: {steps!r}"
    assert steps[2] == InstallThemeStep(
        RegistryReference("wordpress.org/themes", "twentytwentyfour")
    )
    assert steps[3] == SetSiteOptionsStep(
        {
            "blogname": "Source Site",
            "blogdescription": "Tagline",
            "permalink_structure": "/%postname%/",
        }
    )
    assert steps[4] == RunCodeStep(PurgeContent())
    assert result.ignored == [], "expected nothing to be skipped"


def test_dependency_is_installed_first_and_annotated(
    site: SnapshotSite, resolver: ResourceResolver
) -> None:
    """Plugin a precedes b and names b as the reason."""
    steps = BlueprintAssembler(site, resolver).assemble().blueprint.steps
    plugins = [step for step in steps if isinstance(step, InstallPluginStep)]

    assert [step.slug for step in plugins] == ["a", "b"]
    assert plugins[0].info == "(prioritized because of Plugin B)"
    assert plugins[0].name == "Plugin A"


def test_metadata_comes_from_the_site(
    site: SnapshotSite, resolver: ResourceResolver
) -> None:
    """Version pins, landing page and flags are filled in."""
    blueprint = BlueprintAssembler(site, resolver).assemble().blueprint

    assert blueprint.landing_page == "/"
    assert blueprint.preferred_versions == {"php": "8.2", "wp": "6.6.1"}
    assert blueprint.php_extension_bundles == ("kitchen-sink",)
    assert blueprint.features == {"networking": True}
    assert blueprint.login is True


def test_unresolvable_and_ignored_plugins_are_skipped(
    site_data: dict[str, typ.Any], resolver: ResourceResolver, wporg: StubWordPressOrg
) -> None:
    """Skipped plugins are reported and the extractor itself is never looked up."""
    site_data["options"]["active_plugins"] = [
        "a/a.php",
        "private/private.php",
        "blueprint-extractor/blueprint-extractor.php",
        "b/b.php",
    ]
    site = SnapshotSite(site_data)

    options = AssemblyOptions(ignore=("b",))
    result = BlueprintAssembler(site, resolver).assemble(options)
    slugs = [
        step.slug
        for step in result.blueprint.steps
        if isinstance(step, InstallPluginStep)
    ]

    assert slugs == ["a"], f"expected only plugin a, got {slugs!r}"
    assert result.ignored == ["private"], "expected unresolvable plugin to be reported"
    assert "blueprint-extractor" not in wporg.plugin_calls


def test_theme_and_plugins_can_be_suppressed(
    site: SnapshotSite, resolver: ResourceResolver
) -> None:
    """Suppression flags drop every plugin step and the theme step."""
    result = BlueprintAssembler(site, resolver).assemble(
        AssemblyOptions(ignore_all_plugins=True, ignore_theme=True)
    )
    kinds = [type(step).__name__ for step in result.blueprint.steps]

    assert kinds == ["SetSiteOptionsStep", "RunCodeStep"]
    assert result.ignored == ["twentytwentyfour"]


def test_unpublished_theme_is_skipped(
    site_data: dict[str, typ.Any], resolver: ResourceResolver
) -> None:
    """Custom themes not on the theme directory produce no install step."""
    site_data["theme"] = {"text_domain": "custom", "stylesheet": "custom"}
    result = BlueprintAssembler(SnapshotSite(site_data), resolver).assemble()

    assert not any(isinstance(step, InstallThemeStep) for step in result.blueprint.steps)
    assert result.ignored == ["custom"]


def test_site_options_step_keeps_empty_core_fields(
    resolver: ResourceResolver,
) -> None:
    """The options step always carries the three core fields."""
    site = SnapshotSite({"versions": {"php": "8.1.0", "wp": "6.5"}})
    steps = BlueprintAssembler(site, resolver).assemble().blueprint.steps
    [options_step] = [step for step in steps if isinstance(step, SetSiteOptionsStep)]

    assert options_step.options == {
        "blogname": "",
        "blogdescription": "",
        "permalink_structure": "",
    }
