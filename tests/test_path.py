"""Tests for urikit/path.py - segment model, dot segments and path edits."""

from __future__ import annotations

import sys
from pathlib import Path as FsPath

import pytest

# The package lives under ./app; add it to sys.path for tests.
REPO_ROOT = FsPath(__file__).resolve().parents[1]
APP_ROOT = REPO_ROOT / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from urikit.errors import OffsetOutOfBounds, UriSyntaxError  # noqa: E402
from urikit.path import Path, remove_dot_segments  # noqa: E402
from urikit.uri import Uri  # noqa: E402


class TestEncoding:
    @pytest.mark.parametrize(
        "raw,decoded,encoded",
        [
            ("toto", "toto", "toto"),
            ("bar---", "bar---", "bar---"),
            ("", "", ""),
            ('"bad"', '"bad"', "%22bad%22"),
            ("<not good>", "<not good>", "%3Cnot%20good%3E"),
            ("{broken}", "{broken}", "%7Bbroken%7D"),
            ("`oops`", "`oops`", "%60oops%60"),
            ("\\slashy", "\\slashy", "%5Cslashy"),
            ("foo^bar/baz", "foo^bar/baz", "foo%5Ebar/baz"),
            ("foo%2Fbar", "foo%2Fbar", "foo%2Fbar"),
            ("foo%2520bar", "foo%2520bar", "foo%2520bar"),
            ("/v1/people/%7E:(first-name)", "/v1/people/~:(first-name)", "/v1/people/~:(first-name)"),
            ("100%", "100%25", "100%25"),
        ],
    )
    def test_decoded_and_encoded_forms(self, raw, decoded, encoded):
        path = Path(raw)
        assert path.decoded() == decoded
        assert path.value == encoded

    def test_control_characters_are_rejected(self):
        with pytest.raises(UriSyntaxError) as excinfo:
            Path("\0")
        assert excinfo.value.code == "invalid_path"

    def test_decoded_segments_survive_re_encoding(self):
        path = Path("/a%2Fb/c%20d/é")
        assert path.segments == ("a%2Fb", "c d", "é")
        assert Path.from_segments(path.segments, absolute=True).segments == path.segments


class TestSegments:
    @pytest.mark.parametrize(
        "value,segments,absolute,trailing",
        [
            ("", (), False, False),
            ("/", (), True, True),
            ("a/b", ("a", "b"), False, False),
            ("/a//b/", ("a", "", "b"), True, True),
            ("//", ("",), True, True),
        ],
    )
    def test_split(self, value, segments, absolute, trailing):
        path = Path(value)
        assert path.segments == segments
        assert path.is_absolute is absolute
        assert path.has_trailing_slash is trailing

    def test_get_segment(self):
        path = Path("/path/to/the/sky.php")
        assert path.get_segment(0) == "path"
        assert path.get_segment(-1) == "sky.php"
        assert path.get_segment(9) is None
        assert len(path) == 4

    def test_from_segments(self):
        assert Path.from_segments(["a", "b/c"], absolute=True).value == "/a/b%2Fc"
        assert Path.from_segments(["a"], trailing_slash=True).value == "a/"
        assert Path.from_segments([], absolute=True).value == "/"

    def test_from_uri(self):
        assert Path.from_uri(Uri("http://example.com/a/b?q")).value == "/a/b"


class TestDotSegments:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("/a/b/c/./../../g", "/a/g"),
            ("mid/content=5/../6", "mid/6"),
            ("a/b/c", "a/b/c"),
            ("a/b/c/.", "a/b/c/"),
            ("/a/b/c", "/a/b/c"),
            ("../../g", "g"),
            ("/..", "/"),
            (".", ""),
            ("/a/%2E%2E/b", "/b"),
        ],
    )
    def test_without_dot_segments(self, value, expected):
        assert Path(value).without_dot_segments().value == expected

    def test_idempotent(self):
        once = Path("/a/b/../c/./d/../../e").without_dot_segments()
        assert once.without_dot_segments() is once

    def test_remove_dot_segments_function(self):
        assert remove_dot_segments("/b/c/../../../g") == "/g"

    def test_without_empty_segments(self):
        path = Path("/path///to/the//sky.php")
        assert path.without_empty_segments().value == "/path/to/the/sky.php"


class TestSlashes:
    @pytest.mark.parametrize(
        "value,expected",
        [("toto", "toto/"), ("/toto", "/toto/"), ("/", "/"), ("", "/"), ("toto/", "toto/")],
    )
    def test_with_trailing_slash(self, value, expected):
        assert Path(value).with_trailing_slash().value == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("toto", "toto"), ("/toto", "/toto"), ("/", ""), ("", ""), ("/toto/", "/toto")],
    )
    def test_without_trailing_slash(self, value, expected):
        assert Path(value).without_trailing_slash().value == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("toto", "/toto"), ("/toto", "/toto"), ("/", "/"), ("", "/"), ("toto/", "/toto/")],
    )
    def test_with_leading_slash(self, value, expected):
        assert Path(value).with_leading_slash().value == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("toto", "toto"), ("/toto", "toto"), ("/", ""), ("", ""), ("/toto/", "toto/")],
    )
    def test_without_leading_slash(self, value, expected):
        assert Path(value).without_leading_slash().value == expected


class TestSegmentEdits:
    @pytest.mark.parametrize(
        "value,segment,expected",
        [
            ("/path/to/the/sky.php", "toto", "/path/to/the/sky.php/toto"),
            ("/path/to/the/sky.php", "le blanc", "/path/to/the/sky.php/le%20blanc"),
            ("/report/", "new-segment", "/report/new-segment"),
            ("/", "new-segment", "/new-segment"),
            ("", "new-segment", "new-segment"),
            ("/a", "/b/", "/a/b/"),
            ("/a", "b/c", "/a/b%2Fc"),
        ],
    )
    def test_append(self, value, segment, expected):
        assert Path(value).append(segment).value == expected

    @pytest.mark.parametrize(
        "value,segment,expected",
        [
            ("/path/to/the/sky.php", "toto", "toto/path/to/the/sky.php"),
            ("/", "toto", "toto/"),
            ("", "/toto", "/toto/"),
            ("/a", "/b", "/b/a"),
        ],
    )
    def test_prepend(self, value, segment, expected):
        assert Path(value).prepend(segment).value == expected

    def test_replace_segment(self):
        path = Path("/path/to/the/sky.php")
        assert path.replace_segment(2, "toto").value == "/path/to/toto/sky.php"
        assert path.replace_segment(-1, "le blanc").value == "/path/to/the/le%20blanc"
        assert path.replace_segment(4, "end").value == "/path/to/the/sky.php/end"

    def test_replace_segment_rejects_control_characters(self):
        with pytest.raises(UriSyntaxError):
            Path("/path/to/the/sky.php").replace_segment(2, "whyno\0t")

    def test_replace_segment_out_of_range(self):
        with pytest.raises(OffsetOutOfBounds):
            Path("/a/b").replace_segment(3, "x")

    def test_without_segments(self):
        path = Path("/path/to/the/sky.php")
        assert path.without_segments(1).value == "/path/the/sky.php"
        assert path.without_segments(0, -1).value == "/to/the"
        assert path.without_segments() is path
        with pytest.raises(OffsetOutOfBounds) as excinfo:
            path.without_segments(4)
        assert excinfo.value.code == "segment_offset_out_of_bounds"


class TestBasename:
    def test_accessors(self):
        path = Path("/path/to/the/sky.php")
        assert path.basename() == "sky.php"
        assert path.dirname() == "/path/to/the"
        assert path.extension() == "php"
        assert Path("/sky").dirname() == "/"
        assert Path("sky.tar.gz;v=1").extension() == "gz"
        assert Path("/.htaccess").extension() == ""

    @pytest.mark.parametrize(
        "value,expected",
        [("", "baz"), ("/foo/bar", "/foo/baz"), ("/foo/", "/foo/baz"), ("/foo", "/baz")],
    )
    def test_replace_basename(self, value, expected):
        assert Path(value).replace_basename("baz").value == expected

    def test_replace_basename_rejects_slash(self):
        with pytest.raises(UriSyntaxError) as excinfo:
            Path("/foo").replace_basename("foo/baz")
        assert excinfo.value.code == "invalid_basename"

    @pytest.mark.parametrize(
        "value,dirname,expected",
        [
            ("", "baz", "baz/"),
            ("", "baz/", "baz/"),
            ("/foo", "baz", "baz/foo"),
            ("/foo/yes", "/baz", "/baz/yes"),
        ],
    )
    def test_replace_dirname(self, value, dirname, expected):
        assert Path(value).replace_dirname(dirname).value == expected

    @pytest.mark.parametrize(
        "value,extension,expected",
        [
            ("/path/to/the/sky.php", "csv", "/path/to/the/sky.csv"),
            ("/path/to/the/sky.php", "", "/path/to/the/sky"),
            ("/path/sky", "txt", "/path/sky.txt"),
            ("/path/sky.php;v=1", "csv", "/path/sky.csv;v=1"),
        ],
    )
    def test_replace_extension(self, value, extension, expected):
        assert Path(value).replace_extension(extension).value == expected

    def test_replace_extension_rejects_slash(self):
        with pytest.raises(UriSyntaxError):
            Path("/sky.php").replace_extension("to/to")


class TestBasePath:
    @pytest.mark.parametrize(
        "base,expected",
        [
            ("/", "/path/to/the/sky.php"),
            ("", "/path/to/the/sky.php"),
            ("/path/to", "/path/to/the/sky.php"),
            ("/route/to", "/route/to/path/to/the/sky.php"),
        ],
    )
    def test_with_base_path(self, base, expected):
        assert Path("/path/to/the/sky.php").with_base_path(base).value == expected

    def test_with_base_path_on_relative_path(self):
        assert Path("base/path").with_base_path("/base/path").value == "/base/path"

    @pytest.mark.parametrize(
        "base,expected",
        [
            ("/", "/path/to/the/sky.php"),
            ("", "/path/to/the/sky.php"),
            ("/path/to", "/the/sky.php"),
            ("/route/to", "/path/to/the/sky.php"),
            ("/path/to/the/sky.php", "/"),
        ],
    )
    def test_without_base_path(self, base, expected):
        assert Path("/path/to/the/sky.php").without_base_path(base).value == expected

    def test_without_base_path_on_relative_path(self):
        path = Path("base/path")
        assert path.without_base_path("/base/path") is path
