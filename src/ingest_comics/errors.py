"""Custom exceptions for ingest_comics."""


class ComicsError(Exception):
    """Base exception for all ingest_comics errors."""

    pass


class ConfigError(ComicsError):
    """Configuration or template errors. Fatal for a run."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class FeedError(ComicsError):
    """A single feed could not be turned into a RawFeed."""

    pass


class FeedFetchError(FeedError):
    """Network retrieval of a feed failed."""

    pass


class FeedTimeoutError(FeedFetchError):
    """Feed request did not complete within the timeout."""

    pass


class FeedHTTPError(FeedFetchError):
    """Feed server answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FeedTransportError(FeedFetchError):
    """Connection, DNS, TLS or other transport failures."""

    pass


class EmptyFeedBodyError(FeedFetchError):
    """Feed response had no body."""

    pass


class FeedDecodeError(FeedError):
    """Feed bytes could not be decoded or parsed as RSS."""

    pass


class ItemExtractionError(ComicsError):
    """A feed item's description could not be parsed."""

    pass


class EmptySeriesError(ComicsError):
    """A series without comics reached the ranker."""

    pass


class OutputError(ComicsError):
    """Rendered output could not be written. Fatal for a run."""

    pass
