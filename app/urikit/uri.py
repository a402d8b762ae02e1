"""
URI value object (RFC 3986 / RFC 3987).

Parsing uses the regular expression of RFC 3986 appendix B; every component
is then validated by its own value object and the assembled URI is checked
against the section 3 invariants. Withers return a new, re-validated Uri.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Union

from urikit.authority import Authority
from urikit.encoding import FRAGMENT_SAFE, has_control_chars, normalize_encoded
from urikit.errors import StructuralViolation, UriSyntaxError
from urikit.host import Host
from urikit.path import Path
from urikit.public_suffix import PublicSuffixResolver
from urikit.query import Query

_URI_RE = re.compile(
    r"^(?:(?P<scheme>[^:/?#]+):)?"
    r"(?://(?P<authority>[^/?#]*))?"
    r"(?P<path>[^?#]*)"
    r"(?:\?(?P<query>[^#]*))?"
    r"(?:#(?P<fragment>.*))?$",
    re.DOTALL,
)
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$", re.IGNORECASE)

SCHEMES_WITHOUT_AUTHORITY = frozenset({"data", "mailto", "news", "tel", "urn"})
SCHEMES_REQUIRING_HOST = frozenset({"http", "https", "ws", "wss", "ftp"})

_UNSET: Any = object()


def _filter_scheme(scheme: Optional[str]) -> Optional[str]:
    if scheme is None:
        return None
    if not _SCHEME_RE.match(scheme):
        raise UriSyntaxError(code="invalid_scheme", message=f"the scheme `{scheme}` is invalid")
    return scheme.lower()


def _filter_fragment(fragment: Optional[str]) -> Optional[str]:
    if fragment is None:
        return None
    if has_control_chars(fragment):
        raise UriSyntaxError(
            code="invalid_fragment", message=f"the fragment `{fragment!r}` contains control characters"
        )
    return normalize_encoded(fragment, FRAGMENT_SAFE)


def _structural(message: str) -> StructuralViolation:
    return StructuralViolation(code="invalid_uri_structure", message=message)


class Uri:
    def __init__(self, value: str = "", resolver: Optional[PublicSuffixResolver] = None) -> None:
        value = str(value)
        match = _URI_RE.match(value)
        if match is None:
            raise UriSyntaxError(code="invalid_uri", message=f"the uri `{value}` is invalid")

        authority = match.group("authority")
        self._scheme = _filter_scheme(match.group("scheme"))
        self._authority = None if authority is None else Authority(authority, resolver)
        self._path = Path(match.group("path"))
        self._query = Query(match.group("query"))
        self._fragment = _filter_fragment(match.group("fragment"))
        self._validate()

    @classmethod
    def _assemble(
        cls,
        scheme: Optional[str],
        authority: Optional[Authority],
        path: Path,
        query: Query,
        fragment: Optional[str],
    ) -> Uri:
        uri = cls.__new__(cls)
        uri._scheme = scheme
        uri._authority = authority
        uri._path = path
        uri._query = query
        uri._fragment = fragment
        uri._validate()
        return uri

    @classmethod
    def from_components(
        cls,
        scheme: Optional[str] = None,
        userinfo: Optional[str] = None,
        host: Union[Host, str, None] = None,
        port: Union[int, str, None] = None,
        path: Union[Path, str] = "",
        query: Union[Query, str, None] = None,
        fragment: Optional[str] = None,
    ) -> Uri:
        if host is None or (isinstance(host, Host) and host.is_null):
            if userinfo is not None or port is not None:
                raise _structural("user info and port require a host")
            authority = None
        else:
            authority = Authority.from_components(host, userinfo, port)

        return cls._assemble(
            _filter_scheme(scheme),
            authority,
            path if isinstance(path, Path) else Path(path),
            query if isinstance(query, Query) else Query(query),
            _filter_fragment(fragment),
        )

    @classmethod
    def from_foreign(cls, obj: Any) -> Uri:
        """Build a Uri from any object exposing URI components.

        Components are read from attributes or zero-argument getters
        (``host``, ``get_host()``, ``getHost()``); ``urllib.parse.SplitResult``
        style ``hostname`` / ``username`` / ``password`` are understood too.
        Empty strings count as absent.
        """
        if isinstance(obj, Uri):
            return obj
        if isinstance(obj, str):
            return cls(obj)

        userinfo = _read(obj, "userinfo", "user_info")
        if userinfo is None:
            user = _read(obj, "username", "user")
            password = _read(obj, "password")
            if user is not None:
                userinfo = user if password is None else f"{user}:{password}"

        host = _read(obj, "host", "hostname")
        if isinstance(host, str) and ":" in host and not host.startswith("["):
            host = f"[{host}]"

        return cls.from_components(
            scheme=_read(obj, "scheme"),
            userinfo=userinfo,
            host=host,
            port=_read(obj, "explicit_port", "port"),
            path=_read(obj, "path") or "",
            query=_read(obj, "query", "query_string"),
            fragment=_read(obj, "fragment"),
        )

    def to_components(self) -> dict:
        return {
            "scheme": self._scheme,
            "userinfo": self.userinfo,
            "host": self.host.value,
            "port": self.port,
            "path": self._path.value,
            "query": self._query.value,
            "fragment": self._fragment,
        }

    # --------------------------------------------------------- validation

    def _validate(self) -> None:
        path = self._path.value
        if self._authority is not None:
            if path and not path.startswith("/"):
                raise _structural("a uri with an authority needs an empty or absolute path")
        elif path.startswith("//"):
            raise _structural("a uri without an authority can not have a path starting with `//`")

        if self._scheme is None and self._authority is None:
            first_segment = path.split("/", 1)[0]
            if ":" in first_segment:
                raise _structural("the first segment of a relative path can not contain `:`")

        if self._scheme in SCHEMES_WITHOUT_AUTHORITY and self._authority is not None:
            raise _structural(f"the `{self._scheme}` scheme can not have an authority")
        if (
            self._scheme in SCHEMES_REQUIRING_HOST
            and self._authority is not None
            and self._authority.host.is_empty
        ):
            raise _structural(f"the `{self._scheme}` scheme requires a non empty host")

    # ----------------------------------------------------------- accessors

    @property
    def scheme(self) -> Optional[str]:
        return self._scheme

    @property
    def authority(self) -> Optional[Authority]:
        return self._authority

    @property
    def userinfo(self) -> Optional[str]:
        return None if self._authority is None else self._authority.userinfo

    @property
    def user(self) -> Optional[str]:
        return None if self._authority is None else self._authority.user

    @property
    def password(self) -> Optional[str]:
        return None if self._authority is None else self._authority.password

    @property
    def host(self) -> Host:
        if self._authority is None:
            return Host(None)
        return self._authority.host

    @property
    def port(self) -> Optional[int]:
        return None if self._authority is None else self._authority.port

    @property
    def path(self) -> Path:
        return self._path

    @property
    def query(self) -> Query:
        return self._query

    @property
    def fragment(self) -> Optional[str]:
        return self._fragment

    def to_string(self) -> str:
        parts = []
        if self._scheme is not None:
            parts.append(self._scheme + ":")
        if self._authority is not None:
            parts.append("//" + self._authority.value)
        parts.append(self._path.value)
        if self._query.value is not None:
            parts.append("?" + self._query.value)
        if self._fragment is not None:
            parts.append("#" + self._fragment)
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Uri({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Uri):
            return self.to_string() == other.to_string()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_string())

    # -------------------------------------------------------------- withers

    def _with(
        self,
        scheme: Any = _UNSET,
        authority: Any = _UNSET,
        path: Any = _UNSET,
        query: Any = _UNSET,
        fragment: Any = _UNSET,
    ) -> Uri:
        return Uri._assemble(
            self._scheme if scheme is _UNSET else scheme,
            self._authority if authority is _UNSET else authority,
            self._path if path is _UNSET else path,
            self._query if query is _UNSET else query,
            self._fragment if fragment is _UNSET else fragment,
        )

    def with_scheme(self, scheme: Optional[str]) -> Uri:
        scheme = _filter_scheme(scheme)
        if scheme == self._scheme:
            return self
        return self._with(scheme=scheme)

    def with_authority(self, authority: Union[Authority, str, None]) -> Uri:
        if isinstance(authority, str):
            authority = Authority(authority, self.host.resolver)
        if authority == self._authority:
            return self
        return self._with(authority=authority)

    def with_userinfo(self, user: Optional[str], password: Optional[str] = None) -> Uri:
        if self._authority is None:
            if user is None:
                return self
            raise _structural("user info requires a host")
        authority = self._authority.with_userinfo(user, password)
        if authority is self._authority:
            return self
        return self._with(authority=authority)

    def with_host(self, host: Union[Host, str, None]) -> Uri:
        if host is None or (isinstance(host, Host) and host.is_null):
            if self._authority is None:
                return self
            if self._authority.userinfo is not None or self._authority.port is not None:
                raise _structural("user info and port require a host")
            return self._with(authority=None)
        if self._authority is None:
            return self._with(authority=Authority.from_components(host))
        authority = self._authority.with_host(host)
        if authority == self._authority:
            return self
        return self._with(authority=authority)

    def with_port(self, port: Union[int, str, None]) -> Uri:
        if self._authority is None:
            if port is None:
                return self
            raise _structural("a port requires a host")
        authority = self._authority.with_port(port)
        if authority is self._authority:
            return self
        return self._with(authority=authority)

    def with_path(self, path: Union[Path, str]) -> Uri:
        path = path if isinstance(path, Path) else Path(path)
        if path == self._path:
            return self
        return self._with(path=path)

    def with_query(self, query: Union[Query, str, None]) -> Uri:
        query = query if isinstance(query, Query) else Query(query)
        if query.value == self._query.value:
            return self
        return self._with(query=query)

    def with_fragment(self, fragment: Optional[str]) -> Uri:
        fragment = _filter_fragment(fragment)
        if fragment == self._fragment:
            return self
        return self._with(fragment=fragment)


def _read(obj: Any, *names: str) -> Any:
    for name in names:
        camel = "get" + name.title().replace("_", "")
        for attribute in (name, f"get_{name}", camel):
            member = getattr(obj, attribute, None)
            if member is None:
                continue
            value = member() if callable(member) else member
            if value is None or value == "":
                break
            if isinstance(value, (str, int)):
                return value
    return None
