"""Order plugin install steps so declared prerequisites come first.

WordPress plugins declare prerequisites in their ``Requires Plugins`` header.
:func:`prioritize_dependencies` performs a single level of prioritization:
every plugin some other plugin requires is moved to the front, in the order
the requirement was first seen, and annotated with the names of the plugins
that required it. Everything else keeps its discovery order. It is not a
topological sort; chains and cycles are left as they fall.
"""

from __future__ import annotations

import typing as typ

from .models import ExtensionDescriptor, InstallPluginStep

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def parse_requires(header: str) -> tuple[str, ...]:
    """Split a ``Requires Plugins`` header into slugs.

    Examples
    --------
    >>> parse_requires("woocommerce, jetpack,")
    ('woocommerce', 'jetpack')
    """
    return tuple(part.strip() for part in header.split(",") if part.strip())


def prioritization_note(dependent_names: cabc.Sequence[str]) -> str:
    """Return the informational note attached to a prioritized plugin."""
    return f"(prioritized because of {', '.join(dependent_names)})"


def prioritize_dependencies(
    extensions: cabc.Sequence[ExtensionDescriptor],
) -> list[InstallPluginStep]:
    """Return install steps with required plugins emitted before the rest.

    Parameters
    ----------
    extensions : Sequence[ExtensionDescriptor]
        Resolvable plugins in discovery order.

    Returns
    -------
    list[InstallPluginStep]
        One step per extension. Plugins that appear as a dependency target
        come first, carrying an ``info`` note naming their dependents; the
        remaining plugins follow in their original order. Dependency slugs
        that match no discovered plugin are ignored.
    """
    by_slug = {extension.slug: extension for extension in extensions}
    dependents_of: dict[str, list[str]] = {}
    for extension in extensions:
        for required in extension.requires:
            dependents = dependents_of.setdefault(required, [])
            if extension.slug not in dependents:
                dependents.append(extension.slug)

    steps: list[InstallPluginStep] = []
    prioritized: set[str] = set()
    for required, dependents in dependents_of.items():
        target = by_slug.get(required)
        if target is None:
            continue
        names = [by_slug[dependent].name for dependent in dependents]
        steps.append(_install_step(target, info=prioritization_note(names)))
        prioritized.add(required)

    steps.extend(
        _install_step(extension)
        for extension in extensions
        if extension.slug not in prioritized
    )
    return steps


def _install_step(extension: ExtensionDescriptor, *, info: str = "") -> InstallPluginStep:
    return InstallPluginStep(
        plugin_data=extension.locator,
        name=extension.name,
        slug=extension.slug,
        info=info,
    )


__all__ = ["parse_requires", "prioritization_note", "prioritize_dependencies"]
