"""Chronological ranking of comic series."""

import logging

from ingest_comics.errors import EmptySeriesError
from ingest_comics.models import ComicSeries

logger = logging.getLogger(__name__)

# Rank unresolved dates below every real timestamp
UNRESOLVED_DATE = float("-inf")


def first_comic_date(series: ComicSeries) -> float:
    """Ordering key: the Unix time of the series' first comic."""
    if not series.comics:
        raise EmptySeriesError(f"series {series.series_title!r} has no comics")
    unix_date = series.comics[0].unix_date
    return UNRESOLVED_DATE if unix_date is None else unix_date


def quick_sort(series: list[ComicSeries]) -> list[ComicSeries]:
    """Sort series oldest-first with the legacy pivot partition.

    Equal keys go to the lesser side of the pivot, which fixes the tie order
    of pages built before ranking became stable.
    """
    if len(series) < 2:
        return list(series)

    pivot = len(series) // 2 - 1
    pivot_date = first_comic_date(series[pivot])
    lesser, greater = [], []
    for index, entry in enumerate(series):
        if index == pivot:
            continue
        if first_comic_date(entry) <= pivot_date:
            lesser.append(entry)
        else:
            greater.append(entry)
    return quick_sort(lesser) + [series[pivot]] + quick_sort(greater)


def reverse(series: list[ComicSeries]) -> list[ComicSeries]:
    """Return the series in reverse order."""
    return series[::-1]


def rank_series(series: list[ComicSeries], legacy_tie_order: bool = False) -> list[ComicSeries]:
    """Order series most recent first.

    Series with equal keys keep their input order unless ``legacy_tie_order``
    asks for the partition sort. A failure while sorting is logged and the
    input order is returned.
    """
    try:
        if legacy_tie_order:
            return reverse(quick_sort(series))
        return sorted(series, key=first_comic_date, reverse=True)
    except Exception as e:
        logger.error("Sorting %d series failed, keeping feed order: %s", len(series), e)
        return list(series)
