"""Tests for URL extraction."""

from tggrab.capture.urls import extract_urls


class TestExtractUrls:
    """Tests for extract_urls()."""

    def test_trailing_period_stripped(self):
        """A sentence-ending period is not part of the URL."""
        assert extract_urls("see https://example.com/path?q=1.") == ["https://example.com/path?q=1"]

    def test_parenthesized_with_comma(self):
        """Closing bracket and comma are stripped."""
        assert extract_urls("(https://a.b/x),") == ["https://a.b/x"]

    def test_no_links(self):
        """Plain text yields nothing."""
        assert extract_urls("no links here") == []

    def test_empty_string(self):
        """Empty text yields nothing."""
        assert extract_urls("") == []

    def test_order_of_appearance(self):
        """URLs are returned in the order they appear."""
        text = "first http://one.example then https://two.example/page, done"
        assert extract_urls(text) == ["http://one.example", "https://two.example/page"]

    def test_repeated_trailing_punctuation(self):
        """Runs of trailing punctuation are all removed."""
        assert extract_urls("link: https://x.y/z)).,") == ["https://x.y/z"]

    def test_stops_at_whitespace(self):
        """A URL ends at the next whitespace, including newlines."""
        assert extract_urls("https://a.example/1\nhttps://b.example/2") == [
            "https://a.example/1",
            "https://b.example/2",
        ]

    def test_malformed_scheme_ignored(self):
        """Near-miss prefixes do not match."""
        assert extract_urls("htp://bad.example http:/also.bad ftp://nope.example") == []

    def test_case_insensitive_scheme(self):
        """Upper-case schemes are recognised."""
        assert extract_urls("HTTPS://EXAMPLE.COM") == ["HTTPS://EXAMPLE.COM"]

    def test_duplicates_kept(self):
        """The same URL twice appears twice."""
        assert extract_urls("https://a.b https://a.b") == ["https://a.b", "https://a.b"]
