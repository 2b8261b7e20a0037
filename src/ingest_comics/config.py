"""Configuration loader for ingest_comics."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from common.config import find_config_path, load_yaml
from common.utils import get_first
from ingest_comics.errors import ConfigError, InvalidConfigError
from ingest_comics.models import DEFAULT_IMG_COMMENT, FeedSource

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent / "configs"
CONFIG_ENV_VAR = "COMICS_CONFIG"


@dataclass
class RunConfig:
    timeout_seconds: float = 5.0
    max_workers: int = 8  # <= 0 means one worker per feed
    legacy_tie_order: bool = False
    output_dir: str = "."
    html_filename: str = "index.html"
    json_filename: str = "comics.json"
    template_path: str | None = None  # None uses the packaged template
    port: int = 8080
    open_browser: bool = True
    feeds: list[FeedSource] = field(default_factory=list)

    @property
    def html_path(self) -> Path:
        return Path(self.output_dir) / self.html_filename

    @property
    def json_path(self) -> Path:
        return Path(self.output_dir) / self.json_filename


def load_config(config_name: str | None = None) -> RunConfig:
    """Load configuration from a YAML (or JSON) file.

    Args:
        config_name: Name of a packaged config (without .yaml extension) or a
                    path to a config file. If None, uses the COMICS_CONFIG env
                    var or "prod".

    Returns:
        Loaded RunConfig object

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    try:
        config_path = find_config_path(config_name, CONFIG_DIR, env_var=CONFIG_ENV_VAR)
        data = load_yaml(config_path)
    except FileNotFoundError as e:
        raise ConfigError(str(e)) from e
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config: {e}") from e

    config = parse_config(data)
    logger.info("Loaded %d feeds from %s", len(config.feeds), config_path)
    return config


def parse_config(data: Any) -> RunConfig:
    """Parse a config document into a RunConfig.

    A bare list is read as the feed list with default run settings.
    """
    if isinstance(data, list):
        data = {"feeds": data}
    if not isinstance(data, dict):
        raise InvalidConfigError("Config must be a mapping or a list of feeds")

    feeds = data.get("feeds")
    if not isinstance(feeds, list):
        raise InvalidConfigError("Config must contain a 'feeds' list")

    defaults = RunConfig()
    try:
        return RunConfig(
            timeout_seconds=float(data.get("timeout_seconds", defaults.timeout_seconds)),
            max_workers=int(data.get("max_workers", defaults.max_workers)),
            legacy_tie_order=_get_bool(data, "legacy_tie_order", defaults.legacy_tie_order),
            output_dir=str(data.get("output_dir", defaults.output_dir)),
            html_filename=str(data.get("html_filename", defaults.html_filename)),
            json_filename=str(data.get("json_filename", defaults.json_filename)),
            template_path=_get_optional_str(data, "template_path"),
            port=int(data.get("port", defaults.port)),
            open_browser=_get_bool(data, "open_browser", defaults.open_browser),
            feeds=[_parse_feed(i, feed) for i, feed in enumerate(feeds)],
        )
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(f"Invalid config value: {e}") from e


def _get_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise InvalidConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def _get_optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidConfigError(f"'{key}' must be a string, got {value!r}")
    return value


def _parse_feed(position: int, data: Any) -> FeedSource:
    """Parse one feed entry, accepting the legacy capitalised keys."""
    if not isinstance(data, dict):
        raise InvalidConfigError(f"Feed #{position} must be a mapping")

    url = get_first(data, "url", "URL")
    if not url or not isinstance(url, str):
        raise InvalidConfigError(f"Feed #{position} has no url")

    return FeedSource(
        url=url,
        img_comment=get_first(data, "img_comment", "ImgComment") or DEFAULT_IMG_COMMENT,
        name=get_first(data, "name", "Name") or "",
        category=get_first(data, "category", "Category") or "",
    )
