"""Transport selection — TLS or plain HTTP, decided once at start-up."""

import logging
import ssl
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("frontdoor.server")


@dataclass(frozen=True, slots=True)
class TLSFiles:
    """Certificate and private key handed to the listener."""

    certfile: str
    keyfile: str


def select_tls(
    enabled: bool,
    certfile: str | Path,
    keyfile: str | Path,
    *,
    verify: bool = False,
) -> TLSFiles | None:
    """Return the TLS pair to serve with, or None for plain HTTP.

    TLS is chosen iff it is enabled and both files exist. Relative paths
    are taken from the process working directory. With *verify* set the
    pair must also load into an ``SSLContext``; a pair that does not load
    falls back to plain HTTP with a warning.
    """
    if not enabled:
        return None

    cert, key = Path(certfile), Path(keyfile)
    if not (cert.is_file() and key.is_file()):
        logger.debug("TLS enabled but %s or %s is missing; serving plain HTTP", cert, key)
        return None

    if verify and not _loadable(cert, key):
        return None

    return TLSFiles(certfile=str(cert), keyfile=str(key))


def _loadable(cert: Path, key: Path) -> bool:
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    try:
        context.load_cert_chain(certfile=str(cert), keyfile=str(key))
    except (OSError, ssl.SSLError) as exc:
        logger.warning("Unable to load TLS certificate %s / key %s: %s; serving plain HTTP", cert, key, exc)
        return False
    return True
