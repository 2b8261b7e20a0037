"""Parallel RSS feed fetching."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests

from ingest_comics.errors import (
    EmptyFeedBodyError,
    FeedError,
    FeedHTTPError,
    FeedTimeoutError,
    FeedTransportError,
)
from ingest_comics.fetch_feeds.decode_feed import decode_feed
from ingest_comics.models import FeedSource, FetchResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_WORKERS = 8
USER_AGENT = "ingest-comics/1.0 (RSS reader)"


def fetch_feed_bytes(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """GET a feed document and return its body.

    ``timeout`` bounds the connect and each socket read, not the whole
    download, so a server that keeps trickling bytes can run past it.

    Raises:
        FeedFetchError: On timeout, non-2xx status, transport failure or an
            empty body.
    """
    try:
        response = requests.get(
            url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
    except requests.Timeout as e:
        raise FeedTimeoutError(f"{url} did not download after {timeout}s") from e
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise FeedHTTPError(f"bad HTTP response {status} for {url}", status_code=status) from e
    except requests.RequestException as e:
        raise FeedTransportError(f"no HTTP response from {url}: {e}") from e

    if not response.content:
        raise EmptyFeedBodyError(f"empty response body from {url}")
    return response.content


def fetch_feed(source: FeedSource, timeout: float = DEFAULT_TIMEOUT) -> FetchResult:
    """Fetch and decode one feed. Failures are logged and recorded, never raised."""
    try:
        feed = decode_feed(fetch_feed_bytes(source.url, timeout))
    except FeedError as e:
        logger.warning("Failed to fetch feed %s: %s", source.url, e)
        return FetchResult(source=source, error=str(e))

    logger.info("Fetched %d items from %s", len(feed.items), source.url)
    return FetchResult(source=source, feed=feed)


def fetch_feeds(
    sources: list[FeedSource],
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[FetchResult]:
    """Fetch all feeds in parallel and return one result per source, in order.

    Returns only after every fetch has finished. ``max_workers <= 0`` starts
    one worker per source.
    """
    if not sources:
        return []

    workers = len(sources) if max_workers <= 0 else min(max_workers, len(sources))
    logger.info("Fetching %d feeds with %d workers", len(sources), workers)

    results: list[FetchResult | None] = [None] * len(sources)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(fetch_feed, source, timeout): position
            for position, source in enumerate(sources)
        }
        for future in as_completed(futures):
            position = futures[future]
            try:
                results[position] = future.result()
            except Exception as e:
                source = sources[position]
                logger.error("Fetch task for %s failed: %s", source.url, e)
                results[position] = FetchResult(source=source, error=str(e))

    failed = sum(1 for result in results if result.feed is None)
    logger.info("Fetched %d of %d feeds", len(sources) - failed, len(sources))
    return results
