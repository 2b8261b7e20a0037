"""Assembly of extracted comics into one series per feed."""

import logging
from typing import Optional

from ingest_comics.errors import ItemExtractionError
from ingest_comics.extract_comics.extract import extract_comic, parse_date_data
from ingest_comics.extract_comics.sanitize import sanitize_series
from ingest_comics.models import ComicSeries, FetchResult

logger = logging.getLogger(__name__)


def assemble_series(result: FetchResult, now: Optional[int] = None) -> Optional[ComicSeries]:
    """Build the ComicSeries for one fetched feed.

    Returns None when the feed is absent or yields no comics.
    """
    source, feed = result.source, result.feed
    if feed is None:
        logger.warning("Skipping %s, no feed data: %s", source.label, result.error)
        return None

    series = ComicSeries(
        series_title=feed.title,
        site_url=feed.link,
        description=feed.description,
        index=0,
    )

    fallback = None
    for item in feed.items:
        try:
            comic = extract_comic(item, source.img_comment, now)
        except ItemExtractionError as e:
            logger.warning("Skipping item %s in %s: %s", item.link or item.guid, source.url, e)
            continue

        # Some feeds only date the channel, not the items.
        if comic.unix_date is None:
            if fallback is None:
                fallback = parse_date_data(feed.last_build_date, now)
            comic.set_date(fallback)
        series.comics.append(comic)

    if source.name:
        series.series_title = source.name
    sanitize_series(series)

    if not series.comics:
        logger.warning("Dropping %s (%s), no comics in feed", source.label, source.url)
        return None
    return series


def assemble_all(results: list[FetchResult], now: Optional[int] = None) -> list[ComicSeries]:
    """Assemble every fetched feed, keeping configuration order."""
    assembled = []
    for result in results:
        series = assemble_series(result, now)
        if series is not None:
            assembled.append(series)
    logger.info("Assembled %d series from %d feeds", len(assembled), len(results))
    return assembled
