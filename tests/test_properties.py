"""Tests for properties file parsing and fetching."""

import httpx
import pytest

from sonarorchestrator.config import load_properties, parse_properties
from sonarorchestrator.config.properties import fetch_text


class TestParseProperties:
    """Tests for parse_properties()."""

    def test_key_value_separators(self):
        """'=', ':' and whitespace all separate keys from values."""
        props = parse_properties(
            "a=1\n"
            "b:2\n"
            "c 3\n"
            "d = 4\n"
            "e  :  5\n"
        )

        assert props == {"a": "1", "b": "2", "c": "3", "d": "4", "e": "5"}

    def test_comments_and_blank_lines_ignored(self):
        """Lines starting with '#' or '!' are comments."""
        props = parse_properties(
            "# comment\n"
            "\n"
            "   ! another comment\n"
            "key=value # not a comment\n"
        )

        assert props == {"key": "value # not a comment"}

    def test_empty_value(self):
        """A key without value maps to an empty string."""
        assert parse_properties("empty=\nalone\n") == {"empty": "", "alone": ""}

    def test_line_continuation(self):
        """A trailing backslash joins the next line without its indentation."""
        props = parse_properties("long.value = first \\\n             second\n")

        assert props == {"long.value": "first second"}

    def test_escaped_trailing_backslash_does_not_continue(self):
        """An even number of trailing backslashes is a literal backslash."""
        props = parse_properties("path=C:\\\\\nnext=1\n")

        assert props == {"path": "C:\\", "next": "1"}

    def test_escapes(self):
        """Escape sequences in keys and values are decoded."""
        props = parse_properties("a\\=b=c\\td\ngreeting=caf\\u00e9\n")

        assert props == {"a=b": "c\td", "greeting": "café"}

    def test_malformed_unicode_escape_raises(self):
        """A broken \\u escape is a parse error."""
        with pytest.raises(ValueError):
            parse_properties("bad=\\uZZZZ\n")

    def test_last_duplicate_wins(self):
        """Later definitions of a key override earlier ones."""
        assert parse_properties("a=1\na=2\n") == {"a": "2"}

    def test_placeholders_are_kept(self):
        """Parsing does not interpolate."""
        assert parse_properties("home=${user.home}/x\n") == {"home": "${user.home}/x"}


class TestFetch:
    """Tests for fetch_text() and load_properties()."""

    def test_local_path(self, properties_file):
        """Plain filesystem paths are read from disk."""
        path = properties_file("sonar.runtimeVersion=7.9\n")

        assert load_properties(str(path)) == {"sonar.runtimeVersion": "7.9"}

    def test_file_url(self, properties_file):
        """file: URLs are read from disk."""
        path = properties_file("a=1\n")

        assert load_properties(path.as_uri()) == {"a": "1"}

    def test_local_file_is_utf8(self, properties_file):
        """Local files are decoded as UTF-8."""
        path = properties_file("name=Zoë\n")

        assert load_properties(str(path)) == {"name": "Zoë"}

    def test_missing_local_file_raises(self, tmp_path):
        """Missing files raise OSError."""
        with pytest.raises(OSError):
            fetch_text(str(tmp_path / "nope.properties"))

    def test_http_url(self):
        """http(s) URLs are fetched with the given client."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content="a=1\nb=2\n".encode("utf-8"))

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            props = load_properties("https://config.example.com/orch.properties", client=client)

        assert props == {"a": "1", "b": "2"}
        assert seen == ["https://config.example.com/orch.properties"]

    def test_http_error_status_raises(self):
        """Error statuses raise httpx.HTTPStatusError."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="not found")

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(httpx.HTTPStatusError):
                fetch_text("http://config.example.com/missing.properties", client=client)
