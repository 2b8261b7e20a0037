"""CLI for building the comics page."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from common.cli_helpers import parse_port, setup_logging
from ingest_comics.config import load_config
from ingest_comics.errors import ConfigError, OutputError
from ingest_comics.ingest_comics import ingest_comics
from ingest_comics.output import load_template, write_outputs
from ingest_comics.serve import open_in_browser, serve_directory

load_dotenv()

logger = logging.getLogger(__name__)


def parse_ingest_comics_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for ingest_comics.'''

    parser = argparse.ArgumentParser(
        description="Fetch webcomic RSS feeds and build a page of the latest comics"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name (test/prod) or path to a YAML/JSON file. Defaults to $COMICS_CONFIG or 'prod'",
    )
    parser.add_argument("--port", type=parse_port, default=None, help="The port to serve the page on.")
    parser.add_argument("--no-open", action="store_true", help="Do not open the page in a browser.")
    parser.add_argument("--serve", action="store_true", help="Serve the output directory over HTTP.")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_ingest_comics_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(args.config)
        if args.port is not None:
            config.port = args.port

        # Fail on a bad template before any feed is fetched
        load_template(config.template_path)

        series = ingest_comics(config)
        html_path, _ = write_outputs(series, config)
    except (ConfigError, OutputError) as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.serve:
        serve_directory(Path(config.output_dir), config.port)
        return

    if args.no_open or not config.open_browser:
        logger.info("Wrote %s", html_path)
        return

    if not open_in_browser(html_path):
        serve_directory(Path(config.output_dir), config.port)


if __name__ == "__main__":
    main()
