"""Fetch, extract and rank comics from configured RSS feeds."""

import logging
from typing import Optional

from ingest_comics.assemble import assemble_all
from ingest_comics.config import RunConfig
from ingest_comics.fetch_feeds.fetch_feeds import fetch_feeds
from ingest_comics.models import ComicSeries
from ingest_comics.rank import rank_series

logger = logging.getLogger(__name__)


def ingest_comics(config: RunConfig, now: Optional[int] = None) -> list[ComicSeries]:
    """Run the pipeline and return series ordered most recent first."""
    logger.info("Ingesting comics from %d feeds", len(config.feeds))

    # All fetches finish before any parsing starts
    results = fetch_feeds(config.feeds, config.timeout_seconds, config.max_workers)

    series = assemble_all(results, now)
    if not series:
        logger.warning("0 series assembled")
        return []

    ranked = rank_series(series, legacy_tie_order=config.legacy_tie_order)
    logger.info("%d series ingested and ranked", len(ranked))
    return ranked
