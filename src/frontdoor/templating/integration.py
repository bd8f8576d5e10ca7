"""Kida environment setup for the served root directory.

The index document is a text template owned by the front end, so it is
rendered without autoescaping and re-read from disk when it changes.
"""

from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader


def create_environment(root_path: str | Path) -> Environment:
    """Create a kida Environment that loads templates from *root_path*."""
    return Environment(
        loader=FileSystemLoader(str(root_path)),
        autoescape=False,
        auto_reload=True,
    )


def render_template(env: Environment, name: str, context: dict[str, Any]) -> str:
    """Render template *name* with exactly *context*."""
    template = env.get_template(name)
    return template.render(context)
