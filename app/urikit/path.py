"""
Path component value object.

The path is kept in its decoded form with ``%25`` and ``%2F`` left encoded,
so splitting on ``/`` always yields the real segments. The leading and
trailing empty pieces of the split are exposed as the ``is_absolute`` and
``has_trailing_slash`` flags; internal empty pieces (``a//b``) are segments.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from urikit.encoding import PATH_SAFE, encode, has_control_chars, normalize_decoded
from urikit.errors import OffsetOutOfBounds, UriSyntaxError

if TYPE_CHECKING:
    from urikit.uri import Uri

_SAFE = PATH_SAFE + "/"
_EMPTY_SEGMENTS_RE = re.compile(r"/{2,}")


def remove_dot_segments(path: str) -> str:
    """RFC 3986 section 5.2.4, input buffer to output buffer."""
    buffer = path
    output: list[str] = []
    while buffer:
        if buffer.startswith("../"):
            buffer = buffer[3:]
        elif buffer.startswith("./"):
            buffer = buffer[2:]
        elif buffer.startswith("/./"):
            buffer = buffer[2:]
        elif buffer == "/.":
            buffer = "/"
        elif buffer.startswith("/../"):
            buffer = buffer[3:]
            if output:
                output.pop()
        elif buffer == "/..":
            buffer = "/"
            if output:
                output.pop()
        elif buffer in (".", ".."):
            buffer = ""
        else:
            end = buffer.find("/", 1 if buffer.startswith("/") else 0)
            if end == -1:
                end = len(buffer)
            output.append(buffer[:end])
            buffer = buffer[end:]
    return "".join(output)


def _split(value: str) -> list[str]:
    if value == "":
        return []
    pieces = value.split("/")
    if value.startswith("/"):
        pieces = pieces[1:]
    if value.endswith("/") and pieces:
        pieces = pieces[:-1]
    return pieces


def _encode_segment(segment: str) -> str:
    if has_control_chars(segment):
        raise UriSyntaxError(
            code="invalid_path", message=f"the segment `{segment!r}` contains control characters"
        )
    return segment.replace("/", "%2F")


def _join(segments: Iterable[str], absolute: bool, trailing_slash: bool) -> str:
    segments = list(segments)
    value = "/".join(segments)
    if absolute:
        value = "/" + value
    if trailing_slash and (segments or not absolute):
        value += "/"
    return value


class Path:
    def __init__(self, value: Optional[str] = "") -> None:
        value = "" if value is None else str(value)
        if has_control_chars(value):
            raise UriSyntaxError(
                code="invalid_path", message=f"the path `{value!r}` contains control characters"
            )
        self._decoded = normalize_decoded(value, _SAFE, preserve="%/")
        self._value = encode(self._decoded, _SAFE)

    @classmethod
    def from_segments(
        cls,
        segments: Iterable[str],
        absolute: bool = False,
        trailing_slash: bool = False,
    ) -> Path:
        encoded = [_encode_segment(str(segment)) for segment in segments]
        return cls(_join(encoded, absolute, trailing_slash))

    @classmethod
    def from_uri(cls, uri: Uri) -> Path:
        return uri.path

    @property
    def value(self) -> str:
        return self._value

    def decoded(self) -> str:
        return self._decoded

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(_split(self._decoded))

    @property
    def is_absolute(self) -> bool:
        return self._value.startswith("/")

    @property
    def has_trailing_slash(self) -> bool:
        return self._value.endswith("/")

    @property
    def is_empty(self) -> bool:
        return self._value == ""

    def get_segment(self, offset: int, default: Optional[str] = None) -> Optional[str]:
        segments = self.segments
        if offset < 0:
            offset += len(segments)
        if 0 <= offset < len(segments):
            return segments[offset]
        return default

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self.segments)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Path):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Path({self._value!r})"

    def _new(self, value: str) -> Path:
        if value == self._value:
            return self
        return Path(value)

    # --------------------------------------------------------- normalization

    def without_dot_segments(self) -> Path:
        return self._new(remove_dot_segments(self._value))

    def without_empty_segments(self) -> Path:
        return self._new(_EMPTY_SEGMENTS_RE.sub("/", self._value))

    def with_leading_slash(self) -> Path:
        if self.is_absolute:
            return self
        return Path("/" + self._value)

    def without_leading_slash(self) -> Path:
        if not self.is_absolute:
            return self
        return Path(self._value[1:])

    def with_trailing_slash(self) -> Path:
        if self.has_trailing_slash:
            return self
        return Path(self._value + "/")

    def without_trailing_slash(self) -> Path:
        if not self.has_trailing_slash:
            return self
        return Path(self._value[:-1])

    # ------------------------------------------------------------ segments

    def append(self, segment: Optional[str]) -> Path:
        """Add ``segment`` after the last segment.

        A leading ``/`` in ``segment`` is dropped and a trailing one leaves the
        new path with a trailing slash; any other ``/`` is encoded.
        """
        if segment is None or segment == "":
            return self
        trailing = segment.endswith("/") and segment != "/"
        inner = segment[1:] if segment.startswith("/") else segment
        if trailing:
            inner = inner[:-1]
        encoded = _encode_segment(inner) + ("/" if trailing else "")
        if self._value == "" or self.has_trailing_slash:
            return Path(self._value + encoded)
        return Path(self._value + "/" + encoded)

    def prepend(self, segment: Optional[str]) -> Path:
        """Add ``segment`` before the first segment.

        A leading ``/`` in ``segment`` makes the new path absolute.
        """
        if segment is None or segment == "":
            return self
        leading = segment.startswith("/")
        inner = segment[1:] if leading else segment
        if inner.endswith("/"):
            inner = inner[:-1]
        rest = self._value[1:] if self.is_absolute else self._value
        return Path(("/" if leading else "") + _encode_segment(inner) + "/" + rest)

    def replace_segment(self, offset: int, segment: str) -> Path:
        segments = _split(self._value)
        count = len(segments)
        if offset < -count - 1 or offset > count:
            raise OffsetOutOfBounds(
                code="segment_offset_out_of_bounds",
                message=f"no segment can be replaced at offset `{offset}`",
            )
        if offset < 0:
            offset += count
        if offset == count:
            return self.append(segment)
        if offset == -1:
            return self.prepend(segment)
        segments[offset] = _encode_segment(segment)
        return self._new(_join(segments, self.is_absolute, self.has_trailing_slash))

    def without_segments(self, *offsets: int) -> Path:
        if not offsets:
            return self
        segments = _split(self._value)
        count = len(segments)
        removed = set()
        for offset in offsets:
            if offset < -count or offset > count - 1:
                raise OffsetOutOfBounds(
                    code="segment_offset_out_of_bounds",
                    message=f"no segment can be removed at offset `{offset}`",
                )
            removed.add(offset + count if offset < 0 else offset)
        kept = [segment for index, segment in enumerate(segments) if index not in removed]
        return self._new(_join(kept, self.is_absolute, self.has_trailing_slash))

    # ---------------------------------------------------- basename & friends

    def basename(self) -> str:
        return self._decoded[self._decoded.rfind("/") + 1 :]

    def dirname(self) -> str:
        index = self._decoded.rfind("/")
        if index == -1:
            return ""
        if index == 0:
            return "/"
        return self._decoded[:index]

    def extension(self) -> str:
        name = self.basename().split(";", 1)[0]
        if "." not in name.lstrip("."):
            return ""
        return name.rsplit(".", 1)[1]

    def replace_basename(self, name: str) -> Path:
        if "/" in name:
            raise UriSyntaxError(
                code="invalid_basename", message=f"the basename `{name}` can not contain a `/`"
            )
        index = self._value.rfind("/")
        return self._new(self._value[: index + 1] + _encode_segment(name))

    def replace_dirname(self, dirname: str) -> Path:
        basename = self._value[self._value.rfind("/") + 1 :]
        if dirname == "":
            return self._new(basename)
        return self._new(dirname.rstrip("/") + "/" + basename)

    def replace_extension(self, extension: str) -> Path:
        if "/" in extension:
            raise UriSyntaxError(
                code="invalid_extension",
                message=f"the extension `{extension}` can not contain a `/`",
            )
        basename = self._value[self._value.rfind("/") + 1 :]
        if basename == "":
            return self
        name, sep, params = basename.partition(";")
        if "." in name.lstrip("."):
            name = name.rsplit(".", 1)[0]
        if extension:
            name = f"{name}.{_encode_segment(extension)}"
        return self.replace_basename(name + sep + params)

    # ----------------------------------------------------------- base paths

    @staticmethod
    def _base_value(base: str) -> str:
        value = Path(base).value
        if value in ("", "/"):
            return ""
        if not value.startswith("/"):
            value = "/" + value
        return value.rstrip("/")

    def with_base_path(self, base: str) -> Path:
        base_value = self._base_value(base)
        if not base_value:
            return self
        current = self._value if self.is_absolute else "/" + self._value
        if current == base_value or current.startswith(base_value + "/"):
            return self._new(current)
        return Path(base_value + current)

    def without_base_path(self, base: str) -> Path:
        base_value = self._base_value(base)
        if not base_value or not self.is_absolute:
            return self
        if self._value == base_value:
            return Path("/")
        if self._value.startswith(base_value + "/"):
            return Path(self._value[len(base_value) :])
        return self
