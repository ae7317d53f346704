"""Extract WordPress Playground blueprints from an existing site.

This package exposes the CLI entry points used by ``blueprints`` to assemble a
blueprint from a site snapshot, merge the operator's stored selection into it,
and export it as JSON or a Playground deep link.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from playground_blueprints import app
>>> app.name
('blueprints',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
