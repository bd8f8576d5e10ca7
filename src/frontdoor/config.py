"""Server configuration.

ServerConfig is a frozen dataclass — immutable after creation, built by
the hosting process and handed to ``Server``.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    Only ``root_path`` and ``server_root`` usually need setting::

        config = ServerConfig(
            root_path="./web",
            server_root="https://example.com/app",
            port=8080,
            ssl=True,
        )

    The index template receives the base URL as ``{{ base_url }}``.
    Pages written for a ``BaseURL`` variable keep working with
    ``base_url_variable="BaseURL"`` once ``{{ .BaseURL }}`` is changed
    to ``{{ BaseURL }}``.
    """

    # Filesystem root holding index.html and the static/ directory
    root_path: str | Path = "."

    # Public-facing root URL; its path becomes the base URL prefix
    server_root: str = ""

    # Listener
    port: int = 8080
    local_only: bool = False

    # TLS — used only when enabled and both files exist at start-up
    ssl: bool = False
    cert_file: str | Path = "./cert/cert.pem"
    key_file: str | Path = "./cert/key.pem"
    verify_tls: bool = False  # Also require the pair to load before choosing TLS

    # Fallback routes
    index_template: str = "index.html"
    static_dir: str = "static"
    static_url: str = "/static"
    base_url_variable: str = "base_url"
