"""Tests for ingest_comics.output module."""

import json
from pathlib import Path

import pytest

from ingest_comics.config import RunConfig
from ingest_comics.errors import ConfigError, OutputError
from ingest_comics.models import Comic, ComicSeries
from ingest_comics.output import (
    decr,
    incr,
    load_series_json,
    load_template,
    render_html,
    series_from_json,
    series_to_json,
    write_outputs,
    write_series_json,
)


def _ranked() -> list[ComicSeries]:
    return [
        ComicSeries(
            series_title="Newest <Comic>",
            site_url="https://new.example.com/",
            description=" ",
            comics=[
                Comic(
                    title="Strip 2",
                    link="https://new.example.com/2",
                    image_url="https://new.example.com/2.png",
                    image_comment="caf\xe9 joke",
                    date="Tue, 02 Jan 2024 08:00:00 UTC",
                    unix_date=1704182400,
                    pub_msg="Published 2 days ago on",
                ),
                Comic(title="Strip 1", link="https://new.example.com/1", unix_date=1704096000),
            ],
        ),
        ComicSeries(
            series_title="Undated",
            site_url="https://old.example.com/",
            description="Old strips",
            comics=[Comic(title="Mystery", link="https://old.example.com/m")],
        ),
    ]


class TestSeriesJson:
    def test_field_names(self) -> None:
        records = json.loads(series_to_json(_ranked()))
        assert list(records[0]) == ["SeriesTitle", "SiteURL", "Description", "Index", "Comics"]
        assert list(records[0]["Comics"][0]) == [
            "Title", "Link", "ImageURL", "ImageComment", "Date", "UnixDate", "PubMsg",
        ]

    def test_compact_array(self) -> None:
        text = series_to_json(_ranked())
        assert text.startswith('[{"SeriesTitle":"Newest <Comic>","SiteURL":')
        assert '": ' not in text

    def test_unresolved_date_is_null(self) -> None:
        records = json.loads(series_to_json(_ranked()))
        assert records[1]["Comics"][0]["UnixDate"] is None

    def test_round_trip_preserves_values_and_order(self) -> None:
        ranked = _ranked()
        assert series_from_json(series_to_json(ranked)) == ranked

    def test_file_round_trip(self, tmp_path: Path) -> None:
        ranked = _ranked()
        path = write_series_json(ranked, tmp_path / "comics.json")
        assert load_series_json(path) == ranked

    def test_unwritable_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OutputError):
            write_series_json(_ranked(), tmp_path / "missing-dir" / "comics.json")


class TestRenderHtml:
    def test_renders_series_and_first_comic(self) -> None:
        html = render_html(_ranked())
        assert 'id="series_0"' in html
        assert 'id="series_1"' in html
        assert "https://new.example.com/2.png" in html
        assert "Published 2 days ago on Tue, 02 Jan 2024 08:00:00 UTC" in html

    def test_escapes_text(self) -> None:
        html = render_html(_ranked())
        assert "Newest &lt;Comic&gt;" in html

    def test_series_navigation_links(self) -> None:
        html = render_html(_ranked())
        assert 'href="#series_1"' in html
        assert 'href="#series_0"' in html

    def test_empty_page(self) -> None:
        assert "No comics could be fetched." in render_html([])

    def test_custom_template(self, tmp_path: Path) -> None:
        template = tmp_path / "page.html"
        template.write_text("{% for s in series %}{{ s.series_title }}|{% endfor %}")
        assert render_html(_ranked(), str(template)) == "Newest &lt;Comic&gt;|Undated|"

    def test_missing_template_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            render_html(_ranked(), str(tmp_path / "nope.html"))

    def test_broken_template_raises(self, tmp_path: Path) -> None:
        template = tmp_path / "broken.html"
        template.write_text("{% for s in series %}")
        with pytest.raises(ConfigError):
            render_html(_ranked(), str(template))


class TestTemplateHelpers:
    def test_incr_decr(self) -> None:
        assert incr(0) == "1"
        assert decr(3) == "2"


class TestWriteOutputs:
    def test_writes_html_and_json(self, tmp_path: Path) -> None:
        config = RunConfig(output_dir=str(tmp_path / "site"))
        html_path, json_path = write_outputs(_ranked(), config)
        assert html_path == tmp_path / "site" / "index.html"
        assert json_path == tmp_path / "site" / "comics.json"
        assert "Undated" in html_path.read_text(encoding="utf-8")
        assert load_series_json(json_path) == _ranked()

    def test_unwritable_output_dir_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(OutputError):
            write_outputs(_ranked(), RunConfig(output_dir=str(blocker)))


class TestFrontEndScript:
    def test_page_has_stepping_controls(self) -> None:
        html = render_html(_ranked())
        assert '<script src="scripts.js"></script>' in html
        assert 'class="prev" data-series="0"' in html
        assert 'class="next" data-series="1"' in html

    def test_script_written_next_to_page(self, tmp_path: Path) -> None:
        write_outputs(_ranked(), RunConfig(output_dir=str(tmp_path)))
        script = (tmp_path / "scripts.js").read_text(encoding="utf-8")
        assert "comics.json" in script
        assert "series.Index" in script


class TestLoadTemplate:
    def test_default_template_compiles(self) -> None:
        assert load_template().render(series=[], script_name="scripts.js")

    def test_missing_template_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_template(str(tmp_path / "nope.html"))
