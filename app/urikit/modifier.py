"""
Fluent, immutable editing of a URI.

Each method hands the edit to the component value object it concerns, puts
the result back into the URI (which re-validates it) and returns a new
Modifier. Path edits performed under an authority keep the path absolute.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from urikit.errors import StructuralViolation
from urikit.host import Host
from urikit.ipv4 import IPv4Calculator
from urikit.logging_config import get_logger, log_with_context
from urikit.path import Path
from urikit.query import Query
from urikit.resolution import relativize, resolve
from urikit.uri import Uri

logger = get_logger(__name__)


class Modifier:
    def __init__(self, uri: Any) -> None:
        self._uri = uri if isinstance(uri, Uri) else Uri.from_foreign(uri)

    @classmethod
    def from_uri(cls, uri: Any) -> Modifier:
        return cls(uri)

    @property
    def uri(self) -> Uri:
        return self._uri

    def get_uri(self) -> Uri:
        return self._uri

    def get_uri_string(self) -> str:
        return self._uri.to_string()

    def __str__(self) -> str:
        return self._uri.to_string()

    def __repr__(self) -> str:
        return f"Modifier({self._uri.to_string()!r})"

    def _next(self, uri: Uri, operation: str) -> Modifier:
        if uri is self._uri:
            return self
        log_with_context(
            logger,
            logging.DEBUG,
            "uri modified",
            uri=uri.to_string(),
            operation=operation,
        )
        return Modifier(uri)

    def _edit_query(self, operation: str, edit: Callable[[Query], Query]) -> Modifier:
        return self._next(self._uri.with_query(edit(self._uri.query)), operation)

    def _edit_host(self, operation: str, edit: Callable[[Host], Host]) -> Modifier:
        return self._next(self._uri.with_host(edit(self._uri.host)), operation)

    def _edit_path(self, operation: str, edit: Callable[[Path], Path]) -> Modifier:
        path = edit(self._uri.path)
        if self._uri.authority is not None and not path.is_empty and not path.is_absolute:
            path = path.with_leading_slash()
        return self._next(self._uri.with_path(path), operation)

    # ---------------------------------------------------------------- query

    def merge_query(self, query: Any) -> Modifier:
        return self._edit_query("merge_query", lambda q: q.merge(query))

    def append_query(self, query: Any) -> Modifier:
        return self._edit_query("append_query", lambda q: q.append_query(query))

    def append_query_pair(self, key: str, value: Any) -> Modifier:
        return self._edit_query("append_query_pair", lambda q: q.append(key, value))

    def with_query_pair(self, key: str, value: Any) -> Modifier:
        return self._edit_query("with_query_pair", lambda q: q.with_pair(key, value))

    def sort_query(self) -> Modifier:
        return self._edit_query("sort_query", lambda q: q.sort())

    def remove_pairs(self, *keys: str) -> Modifier:
        return self._edit_query("remove_pairs", lambda q: q.without_pairs(*keys))

    def remove_params(self, *names: str) -> Modifier:
        return self._edit_query("remove_params", lambda q: q.without_params(*names))

    def remove_empty_pairs(self) -> Modifier:
        return self._edit_query("remove_empty_pairs", lambda q: q.without_empty_pairs())

    def remove_duplicate_pairs(self) -> Modifier:
        return self._edit_query("remove_duplicate_pairs", lambda q: q.without_duplicates())

    def remove_query_numeric_indices(self) -> Modifier:
        return self._edit_query(
            "remove_query_numeric_indices", lambda q: q.without_numeric_indices()
        )

    # ----------------------------------------------------------------- host

    def prepend_label(self, label: Optional[str]) -> Modifier:
        return self._edit_host("prepend_label", lambda h: h.prepend(label))

    def append_label(self, label: Optional[str]) -> Modifier:
        return self._edit_host("append_label", lambda h: h.append(label))

    def replace_label(self, offset: int, label: Optional[str]) -> Modifier:
        return self._edit_host("replace_label", lambda h: h.replace_label(offset, label))

    def remove_labels(self, *offsets: int) -> Modifier:
        return self._edit_host("remove_labels", lambda h: h.without_labels(*offsets))

    def normalize_ipv4(self, calculator: Optional[IPv4Calculator] = None) -> Modifier:
        return self._edit_host("normalize_ipv4", lambda h: h.normalize_ipv4(calculator))

    def host_to_ascii(self) -> Modifier:
        host = self._uri.host
        if not host.is_domain:
            return self
        return self._next(self._uri.with_host(host.to_ascii()), "host_to_ascii")

    def host_to_unicode(self) -> Modifier:
        host = self._uri.host
        if not host.is_domain:
            return self
        return self._next(self._uri.with_host(host.to_unicode()), "host_to_unicode")

    def add_root_label(self) -> Modifier:
        return self._edit_host("add_root_label", lambda h: h.with_root_label())

    def remove_root_label(self) -> Modifier:
        return self._edit_host("remove_root_label", lambda h: h.without_root_label())

    def remove_zone_id(self) -> Modifier:
        return self._edit_host("remove_zone_id", lambda h: h.without_zone_identifier())

    # ----------------------------------------------------------------- path

    def append_segment(self, segment: str) -> Modifier:
        return self._edit_path("append_segment", lambda p: p.append(segment))

    def prepend_segment(self, segment: str) -> Modifier:
        return self._edit_path("prepend_segment", lambda p: p.prepend(segment))

    def replace_segment(self, offset: int, segment: str) -> Modifier:
        return self._edit_path("replace_segment", lambda p: p.replace_segment(offset, segment))

    def remove_segments(self, *offsets: int) -> Modifier:
        return self._edit_path("remove_segments", lambda p: p.without_segments(*offsets))

    def replace_basename(self, name: str) -> Modifier:
        return self._edit_path("replace_basename", lambda p: p.replace_basename(name))

    def replace_dirname(self, dirname: str) -> Modifier:
        return self._edit_path("replace_dirname", lambda p: p.replace_dirname(dirname))

    def replace_extension(self, extension: str) -> Modifier:
        return self._edit_path("replace_extension", lambda p: p.replace_extension(extension))

    def add_base_path(self, base: str) -> Modifier:
        return self._edit_path("add_base_path", lambda p: p.with_base_path(base))

    def remove_base_path(self, base: str) -> Modifier:
        return self._edit_path("remove_base_path", lambda p: p.without_base_path(base))

    def remove_dot_segments(self) -> Modifier:
        return self._edit_path("remove_dot_segments", lambda p: p.without_dot_segments())

    def remove_empty_segments(self) -> Modifier:
        return self._edit_path("remove_empty_segments", lambda p: p.without_empty_segments())

    def add_trailing_slash(self) -> Modifier:
        return self._edit_path("add_trailing_slash", lambda p: p.with_trailing_slash())

    def remove_trailing_slash(self) -> Modifier:
        return self._edit_path("remove_trailing_slash", lambda p: p.without_trailing_slash())

    def add_leading_slash(self) -> Modifier:
        return self._edit_path("add_leading_slash", lambda p: p.with_leading_slash())

    def remove_leading_slash(self) -> Modifier:
        path = self._uri.path.without_leading_slash()
        if self._uri.authority is not None and not path.is_empty:
            raise StructuralViolation(
                code="invalid_uri_structure",
                message="the leading slash can not be removed while an authority is present",
            )
        return self._next(self._uri.with_path(path), "remove_leading_slash")

    # ----------------------------------------------------------- resolution

    def resolve(self, reference: Any) -> Modifier:
        return self._next(resolve(self._uri, reference), "resolve")

    def relativize(self, target: Any) -> Modifier:
        return self._next(relativize(self._uri, target), "relativize")
