"""
Query component value object.

A query is an ordered list of ``(key, value)`` pairs; duplicate keys are
allowed and a ``None`` value means the pair had no ``=``. Keys and values are
kept decoded and re-encoded on output.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional, Union

from urikit.encoding import QUERY_SAFE, decode, encode, has_control_chars
from urikit.errors import UriSyntaxError

if TYPE_CHECKING:
    from urikit.uri import Uri

Pair = tuple[str, Optional[str]]

DEFAULT_SEPARATOR = "&"
_NUMERIC_INDEX_RE = re.compile(r"\[\d+\]")


def _validate_separator(separator: str) -> str:
    if not isinstance(separator, str) or len(separator) != 1 or separator == "=":
        raise UriSyntaxError(
            code="invalid_query_separator",
            message=f"the query separator `{separator}` is invalid",
        )
    return separator


def _decode(value: str) -> str:
    return decode(value, errors="surrogateescape")


def _encode(value: str, safe: str, separator: str) -> str:
    escaped = "".join(f"%{b:02X}" for b in separator.encode("utf-8"))
    return escaped.join(encode(part, safe, keep_encoded=False) for part in value.split(separator))


def _parse(value: Optional[str], separator: str) -> tuple[Pair, ...]:
    if value is None:
        return ()
    if has_control_chars(value):
        raise UriSyntaxError(
            code="invalid_query", message=f"the query `{value!r}` contains control characters"
        )
    pairs: list[Pair] = []
    for piece in value.split(separator):
        key, sep, val = piece.partition("=")
        pairs.append((_decode(key), _decode(val) if sep else None))
    return tuple(pairs)


def _build(pairs: Iterable[Pair], separator: str) -> Optional[str]:
    pairs = list(pairs)
    if not pairs:
        return None
    value_safe = QUERY_SAFE.replace(separator, "")
    key_safe = value_safe.replace("=", "")
    parts = []
    for key, value in pairs:
        encoded_key = _encode(key, key_safe, separator)
        if value is None:
            parts.append(encoded_key)
        else:
            parts.append(f"{encoded_key}={_encode(value, value_safe, separator)}")
    return separator.join(parts)


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _flatten(prefix: str, value: Any, pairs: list[Pair]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]", item, pairs)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, pairs)
        return
    pairs.append((prefix, _stringify(value)))


class Query:
    def __init__(self, value: Optional[str] = None, separator: str = DEFAULT_SEPARATOR) -> None:
        self._separator = _validate_separator(separator)
        self._pairs = _parse(None if value is None else str(value), separator)

    @classmethod
    def from_string(cls, value: Optional[str], separator: str = DEFAULT_SEPARATOR) -> Query:
        return cls(value, separator)

    @classmethod
    def from_pairs(cls, pairs: Iterable, separator: str = DEFAULT_SEPARATOR) -> Query:
        query = cls(None, separator)
        query._pairs = tuple((str(key), _stringify(value)) for key, value in pairs)
        return query

    @classmethod
    def from_params(cls, params: Mapping, separator: str = DEFAULT_SEPARATOR) -> Query:
        """Flatten nested mappings and sequences into ``key[sub]=value`` pairs."""
        pairs: list[Pair] = []
        for key, value in params.items():
            _flatten(str(key), value, pairs)
        return cls.from_pairs(pairs, separator)

    @classmethod
    def from_uri(cls, uri: Uri) -> Query:
        return uri.query

    def _coerce(self, other: Union[Query, str, None]) -> tuple[Pair, ...]:
        if isinstance(other, Query):
            return other.pairs
        return _parse(other, self._separator)

    def _new(self, pairs: Iterable[Pair]) -> Query:
        pairs = tuple(pairs)
        if pairs == self._pairs:
            return self
        return Query.from_pairs(pairs, self._separator)

    # ------------------------------------------------------------------ state

    @property
    def value(self) -> Optional[str]:
        return _build(self._pairs, self._separator)

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def pairs(self) -> tuple[Pair, ...]:
        return self._pairs

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for name, value in self._pairs:
            if name == key:
                return value
        return default

    def get_all(self, key: str) -> list[Optional[str]]:
        return [value for name, value in self._pairs if name == key]

    def has(self, key: str) -> bool:
        return any(name == key for name, _ in self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self._pairs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Query):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value or ""

    def __repr__(self) -> str:
        return f"Query({self.value!r})"

    # ----------------------------------------------------------------- edits

    def with_separator(self, separator: str) -> Query:
        if separator == self._separator:
            return self
        return Query.from_pairs(self._pairs, _validate_separator(separator))

    def with_pair(self, key: str, value: Any) -> Query:
        pairs = [pair for pair in self._pairs if pair[0] != key]
        pairs.append((key, _stringify(value)))
        return self._new(pairs)

    def append(self, key: str, value: Any) -> Query:
        return self._new(self._pairs + ((key, _stringify(value)),))

    def append_query(self, query: Union[Query, str, None]) -> Query:
        pairs = self._pairs + self._coerce(query)
        return self._new(pair for pair in pairs if pair != ("", None))

    def merge(self, query: Union[Query, str, None]) -> Query:
        """Let the pairs of ``query`` replace every same-key pair of this query.

        The replacing pairs take the position of the first replaced pair, keys
        unknown to this query go at the end.
        """
        incoming: dict[str, list[Pair]] = {}
        for pair in self._coerce(query):
            incoming.setdefault(pair[0], []).append(pair)

        merged: list[Pair] = []
        placed = set()
        for pair in self._pairs:
            key = pair[0]
            if key not in incoming:
                merged.append(pair)
            elif key not in placed:
                merged.extend(incoming[key])
                placed.add(key)
        for key, group in incoming.items():
            if key not in placed:
                merged.extend(group)
        return self._new(pair for pair in merged if pair != ("", None))

    def without_pairs(self, *keys: str) -> Query:
        return self._new(pair for pair in self._pairs if pair[0] not in keys)

    def without_params(self, *names: str) -> Query:
        """Remove the pairs named ``names``, including ``name[...]`` variants."""
        if not names:
            return self
        alternatives = "|".join(re.escape(name) for name in names)
        regex = re.compile(rf"^(?:{alternatives})(?:\[.*\].*)?$")
        return self._new(pair for pair in self._pairs if not regex.match(pair[0]))

    def sort(self) -> Query:
        grouped: dict[str, list[Pair]] = {}
        for pair in self._pairs:
            grouped.setdefault(pair[0], []).append(pair)
        return self._new(pair for group in grouped.values() for pair in group)

    def without_duplicates(self) -> Query:
        seen = set()
        pairs = []
        for pair in self._pairs:
            if pair not in seen:
                seen.add(pair)
                pairs.append(pair)
        return self._new(pairs)

    def without_empty_pairs(self) -> Query:
        return self._new(
            (key, value) for key, value in self._pairs if key != "" and value not in (None, "")
        )

    def without_numeric_indices(self) -> Query:
        return self._new((_NUMERIC_INDEX_RE.sub("[]", key), value) for key, value in self._pairs)
