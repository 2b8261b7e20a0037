"""RSS document decoding."""

import codecs
import logging
import re

import feedparser

from ingest_comics.errors import FeedDecodeError
from ingest_comics.models import RawFeed, RawItem

logger = logging.getLogger(__name__)

_XML_DECL_RE = re.compile(rb"^\s*<\?xml[^>]*?\?>", re.I)
_ENCODING_RE = re.compile(rb"""encoding\s*=\s*["']([A-Za-z0-9._:-]+)["']""", re.I)
_UTF8_DECL = b'<?xml version="1.0" encoding="utf-8"?>'

# Labels browsers read as windows-1252
WINDOWS_1252_LABELS = frozenset({
    "windows-1252", "cp1252", "x-cp1252",
    "iso-8859-1", "iso8859-1", "iso_8859-1", "latin1", "latin-1", "l1",
    "us-ascii", "ascii",
})
_C1_CONTROLS = "comics-c1-controls"


def _decode_c1_controls(error):
    """Map the five bytes windows-1252 leaves undefined to U+0081..U+009D."""
    if not isinstance(error, UnicodeDecodeError):
        raise error
    return error.object[error.start:error.end].decode("latin-1"), error.end


codecs.register_error(_C1_CONTROLS, _decode_c1_controls)

# Notices feedparser raises for documents that still parsed completely.
_BENIGN_BOZO = (
    feedparser.CharacterEncodingOverride,
    feedparser.NonXMLContentType,
    feedparser.UndeclaredNamespace,
)


def declared_encoding(data: bytes) -> str:
    """Return the charset a document declares for itself (UTF-8 if none)."""
    if data.startswith(codecs.BOM_UTF8):
        return "utf-8"
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return "utf-16"
    declaration = _XML_DECL_RE.match(data)
    if declaration:
        match = _ENCODING_RE.search(declaration.group(0))
        if match:
            return match.group(1).decode("ascii").lower()
    return "utf-8"


def transcode_to_utf8(data: bytes) -> bytes:
    """Re-encode a document as UTF-8 and rewrite its XML declaration to match."""
    encoding = declared_encoding(data)
    codec, errors = encoding, "strict"
    if encoding in WINDOWS_1252_LABELS:
        codec, errors = "cp1252", _C1_CONTROLS
    try:
        text = data.decode(codec, errors)
    except LookupError as e:
        raise FeedDecodeError(f"unknown charset {encoding!r}") from e
    except UnicodeDecodeError as e:
        raise FeedDecodeError(f"content is not valid {encoding}: {e}") from e

    body = text.lstrip("\ufeff").encode("utf-8")
    if _XML_DECL_RE.match(body):
        body = _XML_DECL_RE.sub(_UTF8_DECL, body, count=1)
    return body


def decode_feed(data: bytes) -> RawFeed:
    """Parse fetched bytes into a RawFeed.

    Raises:
        FeedDecodeError: If the charset is unusable or the document is not
            well-formed RSS.
    """
    parsed = feedparser.parse(
        transcode_to_utf8(data),
        sanitize_html=False,
        resolve_relative_uris=False,
    )

    error = parsed.get("bozo_exception")
    if parsed.get("bozo") and not isinstance(error, _BENIGN_BOZO):
        raise FeedDecodeError(f"malformed XML: {error}")
    if not parsed.get("version"):
        raise FeedDecodeError("document is not an RSS feed")

    channel = parsed.feed
    feed = RawFeed(
        title=channel.get("title") or "",
        link=channel.get("link") or "",
        description=channel.get("subtitle") or "",
        # Plain dict lookup: FeedParserDict.get("updated") falls back to <pubDate>
        last_build_date=dict.get(channel, "updated") or "",
        items=[_to_raw_item(entry) for entry in parsed.entries],
    )
    logger.debug("Decoded feed %r with %d items", feed.title, len(feed.items))
    return feed


def _to_raw_item(entry) -> RawItem:
    return RawItem(
        title=entry.get("title") or "",
        link=entry.get("link") or "",
        description=entry.get("summary") or "",
        guid=entry.get("id") or "",
        pub_date=entry.get("published") or "",
    )
