"""Load and validate the ``blueprints`` configuration YAML.

This subpackage parses ``config/blueprints.yaml``: which site snapshot to read,
where selections and the resolver cache are persisted, how to reach the
WordPress.org API, and which plugins or theme to leave out. The entry point is
:func:`load_extractor_config`, which applies defaults and returns an
:class:`ExtractorConfig`.

Examples
--------
>>> from pathlib import Path
>>> from playground_blueprints.config import load_extractor_config
>>> config = load_extractor_config(Path("config/blueprints.yaml"))  # doctest: +SKIP
>>> config.ignore  # doctest: +SKIP
['hello-dolly']
"""

from .loader import load_extractor_config
from .models import ExtractorConfig, ExtractorConfigError

__all__ = ["ExtractorConfig", "ExtractorConfigError", "load_extractor_config"]
