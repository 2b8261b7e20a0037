"""Data models for the ingest_comics pipeline."""

from dataclasses import dataclass, field
from typing import Optional


DEFAULT_IMG_COMMENT = "alt"


@dataclass(frozen=True)
class FeedSource:
    """One configured feed and how to read its entries."""
    url: str
    img_comment: str = DEFAULT_IMG_COMMENT
    name: str = ""
    category: str = ""

    @property
    def label(self) -> str:
        return self.name or self.url


@dataclass
class RawItem:
    """One <item> of an RSS channel, as decoded."""
    title: str = ""
    link: str = ""
    description: str = ""
    guid: str = ""
    pub_date: str = ""


@dataclass
class RawFeed:
    """A decoded RSS channel."""
    title: str = ""
    link: str = ""
    description: str = ""
    last_build_date: str = ""
    items: list[RawItem] = field(default_factory=list)


@dataclass
class FetchResult:
    """Outcome of fetching and decoding one FeedSource."""
    source: FeedSource
    feed: Optional[RawFeed] = None
    error: Optional[str] = None


@dataclass
class DateData:
    """Publication date fields derived from a feed timestamp."""
    date: str
    unix_date: int
    pub_msg: str


@dataclass
class Comic:
    """A single webcomic image and related metadata."""
    title: str = ""
    link: str = ""
    image_url: str = ""
    image_comment: str = ""
    date: str = ""
    unix_date: Optional[int] = None  # None until a timestamp resolves
    pub_msg: str = ""

    def set_date(self, date_data: Optional[DateData]) -> None:
        if date_data is None:
            return
        self.date = date_data.date
        self.unix_date = date_data.unix_date
        self.pub_msg = date_data.pub_msg


@dataclass
class ComicSeries:
    """Comics published by a single site or author."""
    series_title: str = ""
    site_url: str = ""
    description: str = ""
    index: int = 0  # For the front-end to keep track of the Comic to display.
    comics: list[Comic] = field(default_factory=list)
