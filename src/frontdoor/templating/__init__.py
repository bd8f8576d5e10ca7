"""Templating — kida environment for the index document."""

from frontdoor.templating.integration import create_environment, render_template

__all__ = ["create_environment", "render_template"]
