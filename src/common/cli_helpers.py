"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging


def setup_logging(verbose: bool = False) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_port(value: str) -> int:
    """Parse a TCP port for argparse arguments.

    Accepts the ``":8080"`` form as well as a bare number.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid port.
    """
    try:
        port = int(value.lstrip(":"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError("port must be a number") from exc
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError("port must be between 1 and 65535")
    return port
