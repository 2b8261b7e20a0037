"""JSON and HTML output for ranked comic series."""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

from common.serialization import serialize_dataclass
from ingest_comics.config import RunConfig
from ingest_comics.errors import ConfigError, OutputError
from ingest_comics.models import Comic, ComicSeries

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = Path(__file__).parent / "templates" / "comics.html"
STATIC_DIR = Path(__file__).parent / "static"
SCRIPT_FILENAME = "scripts.js"

# Attribute names as the front-end reads them from comics.json
JSON_KEYS = {
    "series_title": "SeriesTitle",
    "site_url": "SiteURL",
    "description": "Description",
    "index": "Index",
    "comics": "Comics",
    "title": "Title",
    "link": "Link",
    "image_url": "ImageURL",
    "image_comment": "ImageComment",
    "date": "Date",
    "unix_date": "UnixDate",
    "pub_msg": "PubMsg",
}
_ATTRIBUTES = {key: attr for attr, key in JSON_KEYS.items()}


def incr(n: int) -> str:
    """Template helper for the next series anchor."""
    return str(n + 1)


def decr(n: int) -> str:
    """Template helper for the previous series anchor."""
    return str(n - 1)


def series_to_json(series: list[ComicSeries]) -> str:
    records = [serialize_dataclass(s, rename=JSON_KEYS) for s in series]
    return json.dumps(records, ensure_ascii=False, separators=(",", ":"))


def series_from_json(text: str) -> list[ComicSeries]:
    records = json.loads(text)
    return [_series_from_record(record) for record in records]


def _from_record(record: dict[str, Any]) -> dict[str, Any]:
    return {_ATTRIBUTES[key]: value for key, value in record.items() if key in _ATTRIBUTES}


def _series_from_record(record: dict[str, Any]) -> ComicSeries:
    fields = _from_record(record)
    fields["comics"] = [Comic(**_from_record(c)) for c in fields.get("comics") or []]
    return ComicSeries(**fields)


def write_series_json(series: list[ComicSeries], path: Path) -> Path:
    """Write the ranked series as a JSON array for the front-end."""
    try:
        path.write_text(series_to_json(series), encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Could not write {path}: {e}") from e
    logger.info("Saved %d series to %s", len(series), path)
    return path


def load_series_json(path: Path) -> list[ComicSeries]:
    """Read series back from a file written by write_series_json."""
    return series_from_json(Path(path).read_text(encoding="utf-8"))


def load_template(template_path: Optional[str] = None) -> Template:
    """Load and compile the page template.

    Raises:
        ConfigError: If the template is missing or invalid.
    """
    template_file = Path(template_path) if template_path else DEFAULT_TEMPLATE
    if not template_file.is_file():
        raise ConfigError(f"Template not found: {template_file}")

    env = Environment(
        loader=FileSystemLoader(str(template_file.parent)),
        autoescape=select_autoescape(["html", "htm"]),
    )
    env.filters["incr"] = incr
    env.filters["decr"] = decr
    try:
        return env.get_template(template_file.name)
    except TemplateError as e:
        raise ConfigError(f"Could not load {template_file}: {e}") from e


def render_html(series: list[ComicSeries], template_path: Optional[str] = None) -> str:
    """Render the series page.

    Raises:
        ConfigError: If the template is missing or invalid.
    """
    template = load_template(template_path)
    try:
        return template.render(series=series, script_name=SCRIPT_FILENAME)
    except TemplateError as e:
        raise ConfigError(f"Could not render {template.filename}: {e}") from e


def write_outputs(series: list[ComicSeries], config: RunConfig) -> tuple[Path, Path]:
    """Render the HTML page, copy its script and write the JSON side channel.

    Returns:
        Paths of the HTML and JSON files.
    """
    html = render_html(series, config.template_path)

    output_dir = Path(config.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        config.html_path.write_text(html, encoding="utf-8")
        shutil.copyfile(STATIC_DIR / SCRIPT_FILENAME, output_dir / SCRIPT_FILENAME)
    except OSError as e:
        raise OutputError(f"Could not write page to {output_dir}: {e}") from e
    logger.info("Rendered %d series to %s", len(series), config.html_path)

    write_series_json(series, config.json_path)
    return config.html_path, config.json_path
