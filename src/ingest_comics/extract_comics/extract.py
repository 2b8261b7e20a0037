"""Comic extraction from RSS items."""

import logging
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import parse as parse_date
from lxml import etree
from lxml import html as lxml_html

from ingest_comics.errors import ItemExtractionError
from ingest_comics.extract_comics.sanitize import sanitize_comic
from ingest_comics.models import DEFAULT_IMG_COMMENT, Comic, DateData, RawItem

logger = logging.getLogger(__name__)

HOUR_SECONDS = 60 * 60
DAY_SECONDS = HOUR_SECONDS * 24

RFC1123Z = "%a, %d %b %Y %H:%M:%S %z"
RFC1123 = "%a, %d %b %Y %H:%M:%S %Z"

# RFC-1123 with a zone name instead of a numeric offset
_RFC1123_NAMED_RE = re.compile(
    r"^[A-Za-z]{3}, \d{1,2} [A-Za-z]{3} \d{4} \d{2}:\d{2}:\d{2} [A-Za-z]+$"
)

# Timezone abbreviations for date parsing; unknown names are read as UTC
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "UT": timezone.utc,
    "Z": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}


def _parse_rfc1123(value: str) -> Optional[datetime]:
    """Parse an RFC-1123 date, numeric zone first, then zone name."""
    value = value.strip()
    try:
        return datetime.strptime(value, RFC1123Z)
    except ValueError:
        pass

    if not _RFC1123_NAMED_RE.match(value):
        return None
    try:
        dt = parse_date(value, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def last_update(then: int, now: int) -> str:
    """Create an English phrase stating how long ago ``then`` was."""
    elapsed = now - then
    if elapsed > DAY_SECONDS:
        days = elapsed // DAY_SECONDS
        unit = "days" if days > 1 else "day"
        return f"Published {days} {unit} ago on"
    if elapsed > HOUR_SECONDS:
        return f"Published {elapsed // HOUR_SECONDS} hours ago on"
    return "Published less than 1 hour ago on"


def parse_date_data(value: str, now: Optional[int] = None) -> Optional[DateData]:
    """Calculate display date, Unix time and recency message for a feed date.

    Returns None when the value is missing or not an RFC-1123 date.
    """
    if not value:
        return None
    dt = _parse_rfc1123(value)
    if dt is None:
        return None

    local = dt.astimezone()
    unix_date = int(local.timestamp())
    if now is None:
        now = int(time.time())
    return DateData(
        date=local.strftime(RFC1123),
        unix_date=unix_date,
        pub_msg=last_update(unix_date, now),
    )


def extract_image(description: str, attr: str = DEFAULT_IMG_COMMENT) -> tuple[str, str]:
    """Return (src, caption) of the first <img> in an HTML fragment.

    Raises:
        ItemExtractionError: If the fragment cannot be parsed.
    """
    if not description or not description.strip():
        return "", ""

    try:
        root = lxml_html.fragment_fromstring(description, create_parent="div")
    except (etree.LxmlError, ValueError) as e:
        raise ItemExtractionError(f"could not parse description: {e}") from e

    for img in root.iter("img"):
        return img.get("src", ""), img.get(attr, "")
    return "", ""


def extract_comic(
    item: RawItem,
    img_comment: str = DEFAULT_IMG_COMMENT,
    now: Optional[int] = None,
) -> Comic:
    """Build a Comic from a single RSS item.

    A missing or unparseable pubDate leaves ``unix_date`` as None.
    """
    comic = Comic(title=item.title, link=item.link)
    comic.set_date(parse_date_data(item.pub_date, now))
    if comic.unix_date is None:
        logger.debug("No usable pubDate on %s: %r", item.link or item.guid, item.pub_date)

    comic.image_url, comic.image_comment = extract_image(
        item.description, img_comment or DEFAULT_IMG_COMMENT
    )
    return sanitize_comic(comic)
