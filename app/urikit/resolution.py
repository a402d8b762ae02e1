"""
Reference resolution (RFC 3986 section 5.2) and its inverse.

``resolve(base, relativize(base, target))`` gives back ``target`` whenever
``target`` shares the scheme and authority of ``base``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from urikit.authority import Authority
from urikit.logging_config import get_logger, log_with_context
from urikit.path import Path
from urikit.query import Query
from urikit.uri import Uri

logger = get_logger(__name__)


def _coerce(value: Any) -> Uri:
    if isinstance(value, Uri):
        return value
    return Uri.from_foreign(value)


def _build(
    scheme: Optional[str],
    authority: Optional[Authority],
    path: Path,
    query: Query,
    fragment: Optional[str],
) -> Uri:
    if authority is None:
        return Uri.from_components(scheme=scheme, path=path, query=query, fragment=fragment)
    return Uri.from_components(
        scheme=scheme,
        userinfo=authority.userinfo,
        host=authority.host,
        port=authority.port,
        path=path,
        query=query,
        fragment=fragment,
    )


def _merge_paths(base: Uri, reference_path: str) -> str:
    base_path = base.path.value
    if base.authority is not None and base_path == "":
        return "/" + reference_path
    return base_path[: base_path.rfind("/") + 1] + reference_path


def resolve(base: Any, reference: Any) -> Uri:
    """Resolve ``reference`` against ``base``."""
    base = _coerce(base)
    reference = _coerce(reference)
    log_with_context(
        logger,
        logging.DEBUG,
        "resolving reference",
        uri=reference.to_string(),
        component="resolution",
        operation="resolve",
    )

    if reference.scheme is not None:
        return _build(
            reference.scheme,
            reference.authority,
            reference.path.without_dot_segments(),
            reference.query,
            reference.fragment,
        )

    if reference.authority is not None:
        return _build(
            base.scheme,
            reference.authority,
            reference.path.without_dot_segments(),
            reference.query,
            reference.fragment,
        )

    reference_path = reference.path.value
    if reference_path == "":
        query = reference.query if reference.query.value is not None else base.query
        return _build(base.scheme, base.authority, base.path, query, reference.fragment)

    if reference_path.startswith("/"):
        path = reference.path.without_dot_segments()
    else:
        path = Path(_merge_paths(base, reference_path)).without_dot_segments()
    return _build(base.scheme, base.authority, path, reference.query, reference.fragment)


def _segments(path: str) -> list[str]:
    if path.startswith("/"):
        path = path[1:]
    return path.split("/")


def _format_path(path: str, base_path: str) -> str:
    if path == "":
        return base_path if base_path in ("", "/") else "./"
    colon = path.find(":")
    if colon == -1:
        return path
    slash = path.find("/")
    if slash == -1 or colon < slash:
        return "./" + path
    return path


def _relativize_path(path: str, base_path: str) -> str:
    base_segments = _segments(base_path)[:-1]
    target_segments = _segments(path)
    basename = target_segments.pop()

    common = 0
    for base_segment, target_segment in zip(base_segments, target_segments):
        if base_segment != target_segment:
            break
        common += 1

    remaining = target_segments[common:] + [basename]
    climbs = "../" * (len(base_segments) - common)
    return _format_path(climbs + "/".join(remaining), base_path)


def _basename_or_current(path: str, base_path: str) -> str:
    return _format_path(_segments(path)[-1], base_path)


def _needs_network_path(target: Uri, base: Uri) -> bool:
    # an empty path can only be restored through the authority
    if target.path.value != "":
        return False
    if base.path.value != "":
        return True
    return target.query.value is None and base.query.value is not None


def relativize(base: Any, target: Any) -> Uri:
    """Express ``target`` relative to ``base`` when both share scheme and authority."""
    base = _coerce(base)
    target = _coerce(target)

    if target.scheme is None and target.authority is None:
        return target
    if target.scheme != base.scheme or target.authority != base.authority:
        return target

    log_with_context(
        logger,
        logging.DEBUG,
        "relativizing uri",
        uri=target.to_string(),
        component="resolution",
        operation="relativize",
    )

    if _needs_network_path(target, base):
        return _build(None, target.authority, target.path, target.query, target.fragment)

    target_path = target.path.value
    base_path = base.path.value
    query = target.query
    if target_path != base_path:
        path = _relativize_path(target_path, base_path)
    elif target.query.value == base.query.value:
        path = ""
        query = Query(None)
    elif target.query.value is None:
        path = _basename_or_current(target_path, base_path)
    else:
        path = ""

    return Uri.from_components(path=path, query=query, fragment=target.fragment)
