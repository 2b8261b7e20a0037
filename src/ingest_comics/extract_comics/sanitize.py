"""Normalization of placeholder values left by upstream feed proxies."""

from ingest_comics.models import Comic, ComicSeries

PLACEHOLDER_TITLE = "."
PLACEHOLDER_DESCRIPTIONS = (".", "Pipes Output")
BLANK_DESCRIPTION = " "


def sanitize_comic(comic: Comic) -> Comic:
    """Clear placeholder titles and captions that repeat the title."""
    if comic.title == PLACEHOLDER_TITLE:
        comic.title = ""
    if comic.image_comment == comic.title:
        comic.image_comment = ""
    return comic


def sanitize_series(series: ComicSeries) -> ComicSeries:
    """Blank placeholder descriptions and comic titles that repeat the series title."""
    if series.description in PLACEHOLDER_DESCRIPTIONS:
        series.description = BLANK_DESCRIPTION
    for comic in series.comics:
        if comic.title == series.series_title:
            comic.title = ""
    return series
