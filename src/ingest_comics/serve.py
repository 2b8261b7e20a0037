"""Viewing the rendered page: default browser or a local file server."""

import functools
import logging
import webbrowser
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

logger = logging.getLogger(__name__)


def open_in_browser(path: Path) -> bool:
    """Open a local file in the default browser. Returns False if none is available."""
    url = Path(path).resolve().as_uri()
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning("Could not open browser for %s: %s", url, e)
        return False
    if not opened:
        logger.warning("No browser available to open %s", url)
    return opened


def make_server(directory: Path, port: int, host: str = "") -> ThreadingHTTPServer:
    handler = functools.partial(SimpleHTTPRequestHandler, directory=str(directory))
    return ThreadingHTTPServer((host, port), handler)


def serve_directory(directory: Path, port: int) -> None:
    """Serve the output directory until interrupted."""
    server = make_server(directory, port)
    logger.info("Open a web browser and navigate to http://localhost:%d", port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server stopped")
    finally:
        server.server_close()
