"""Tests for ingest_comics.fetch_feeds.decode_feed module."""

import pytest

from ingest_comics.errors import FeedDecodeError
from ingest_comics.fetch_feeds.decode_feed import (
    decode_feed,
    declared_encoding,
    transcode_to_utf8,
)

SAMPLE_RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example Comic</title>
    <link>https://comic.example.com/</link>
    <description>A comic about examples</description>
    <lastBuildDate>Tue, 02 Jan 2024 09:00:00 +0000</lastBuildDate>
    <item>
      <title>Strip 2</title>
      <link>https://comic.example.com/2</link>
      <description>&lt;p&gt;&lt;img src="https://comic.example.com/2.png" alt="second"/&gt;&lt;/p&gt;</description>
      <guid>strip-2</guid>
      <pubDate>Tue, 02 Jan 2024 08:00:00 +0000</pubDate>
    </item>
    <item>
      <title>Strip 1</title>
      <link>https://comic.example.com/1</link>
      <description><![CDATA[<img src="https://comic.example.com/1.png" alt="first"/>]]></description>
      <guid>strip-1</guid>
    </item>
  </channel>
</rss>
"""

LATIN1_RSS = (
    '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
    '<rss version="2.0"><channel><title>Caf\xe9 Comics</title>'
    "<link>https://cafe.example.com/</link><description>D\xe9j\xe0 vu</description>"
    "<item><title>No\xebl</title><link>https://cafe.example.com/1</link></item>"
    "</channel></rss>"
).encode("latin-1")


class TestDeclaredEncoding:
    def test_reads_xml_declaration(self) -> None:
        assert declared_encoding(LATIN1_RSS) == "iso-8859-1"

    def test_single_quoted_declaration(self) -> None:
        assert declared_encoding(b"<?xml version='1.0' encoding='windows-1252'?><rss/>") == "windows-1252"

    def test_defaults_to_utf8_without_declaration(self) -> None:
        assert declared_encoding(b"<rss version=\"2.0\"></rss>") == "utf-8"

    def test_declaration_without_encoding(self) -> None:
        assert declared_encoding(b'<?xml version="1.0"?><rss/>') == "utf-8"

    def test_utf8_bom(self) -> None:
        assert declared_encoding(b"\xef\xbb\xbf<rss/>") == "utf-8"


class TestTranscodeToUtf8:
    def test_rewrites_declaration_and_text(self) -> None:
        result = transcode_to_utf8(LATIN1_RSS)
        assert result.startswith(b'<?xml version="1.0" encoding="utf-8"?>')
        assert "Caf\xe9 Comics".encode("utf-8") in result

    def test_unknown_charset_raises(self) -> None:
        with pytest.raises(FeedDecodeError, match="unknown charset"):
            transcode_to_utf8(b'<?xml version="1.0" encoding="x-no-such-charset"?><rss/>')

    def test_invalid_bytes_raise(self) -> None:
        with pytest.raises(FeedDecodeError):
            transcode_to_utf8(b'<?xml version="1.0" encoding="utf-8"?><rss>\xff\xfe</rss>')

    def test_windows_1252_undefined_bytes_become_c1_controls(self) -> None:
        data = b'<?xml version="1.0" encoding="windows-1252"?><rss><title>A\x81B\x9dC</title></rss>'
        assert "A\x81B\x9dC".encode("utf-8") in transcode_to_utf8(data)

    def test_latin1_label_reads_windows_1252(self) -> None:
        data = b'<?xml version="1.0" encoding="ISO-8859-1"?><rss><title>\x93Hi\x94</title></rss>'
        assert "“Hi”".encode("utf-8") in transcode_to_utf8(data)


class TestDecodeFeed:
    def test_channel_fields(self) -> None:
        feed = decode_feed(SAMPLE_RSS)
        assert feed.title == "Example Comic"
        assert feed.link == "https://comic.example.com/"
        assert feed.description == "A comic about examples"
        assert feed.last_build_date == "Tue, 02 Jan 2024 09:00:00 +0000"

    def test_items_in_document_order(self) -> None:
        feed = decode_feed(SAMPLE_RSS)
        assert [item.title for item in feed.items] == ["Strip 2", "Strip 1"]
        assert [item.guid for item in feed.items] == ["strip-2", "strip-1"]

    def test_item_keeps_raw_pub_date(self) -> None:
        feed = decode_feed(SAMPLE_RSS)
        assert feed.items[0].pub_date == "Tue, 02 Jan 2024 08:00:00 +0000"
        assert feed.items[1].pub_date == ""

    def test_item_description_html_is_preserved(self) -> None:
        feed = decode_feed(SAMPLE_RSS)
        assert 'src="https://comic.example.com/2.png"' in feed.items[0].description
        assert 'alt="first"' in feed.items[1].description

    def test_latin1_feed(self) -> None:
        feed = decode_feed(LATIN1_RSS)
        assert feed.title == "Caf\xe9 Comics"
        assert feed.description == "D\xe9j\xe0 vu"
        assert feed.items[0].title == "No\xebl"

    def test_malformed_xml_raises(self) -> None:
        broken = b'<?xml version="1.0"?><rss version="2.0"><channel><title>Broken</title><item></channel></rss>'
        with pytest.raises(FeedDecodeError):
            decode_feed(broken)

    def test_non_feed_document_raises(self) -> None:
        with pytest.raises(FeedDecodeError):
            decode_feed(b"<html><body><p>Not a feed</p></body></html>")

    def test_channel_pub_date_is_not_last_build_date(self, recwarn) -> None:
        feed = decode_feed(
            b'<rss version="2.0"><channel><title>Dated</title>'
            b"<pubDate>Mon, 01 Jan 2024 12:00:00 +0000</pubDate>"
            b"<item><title>Strip</title></item></channel></rss>"
        )
        assert feed.last_build_date == ""
        assert not [w for w in recwarn if "temporary mapping" in str(w.message)]

    def test_channel_without_items(self) -> None:
        feed = decode_feed(b'<rss version="2.0"><channel><title>Empty</title></channel></rss>')
        assert feed.title == "Empty"
        assert feed.items == []
