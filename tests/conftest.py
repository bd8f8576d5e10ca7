"""Shared fixtures: a served root directory and a free TCP port."""

import socket
from pathlib import Path

import pytest

INDEX_TEMPLATE = """<!doctype html>
<html>
<head><base href="{{ base_url }}/"></head>
<body data-base-url="{{ base_url }}">index</body>
</html>
"""


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A root directory with index.html and a few static assets."""
    root = tmp_path / "web"
    root.mkdir()
    (root / "index.html").write_text(INDEX_TEMPLATE)

    static = root / "static"
    static.mkdir()
    (static / "app.js").write_text("console.log('hello');")
    (static / "style.css").write_text("body { color: red; }")
    (static / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (static / "blob").write_bytes(b"\x00\x01\x02")

    css = static / "css"
    css.mkdir()
    (css / "main.css").write_text("h1 { font-size: 2em; }")

    docs = static / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Docs</h1>")

    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def free_port() -> int:
    """A loopback port nothing is listening on right now."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
