"""Feature modules: script loading, bundling, responses and templates."""

from . import bundles, responses, scripts, templates

__all__ = [
    "bundles",
    "responses",
    "scripts",
    "templates",
]
