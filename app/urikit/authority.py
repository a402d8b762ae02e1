from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from urikit.encoding import (
    SUB_DELIMS,
    USERINFO_SAFE,
    encode,
    has_control_chars,
    normalize_encoded,
)
from urikit.errors import UriSyntaxError
from urikit.host import Host
from urikit.public_suffix import PublicSuffixResolver

if TYPE_CHECKING:
    from urikit.uri import Uri

MAX_PORT = 65535


def _filter_port(port: Union[int, str, None]) -> Optional[int]:
    if port is None or port == "":
        return None
    if isinstance(port, bool):
        raise UriSyntaxError(code="invalid_port", message=f"the port `{port}` is invalid")
    if isinstance(port, str):
        if not port.isascii() or not port.isdigit():
            raise UriSyntaxError(code="invalid_port", message=f"the port `{port}` is invalid")
        port = int(port)
    if not 0 <= int(port) <= MAX_PORT:
        raise UriSyntaxError(code="invalid_port", message=f"the port `{port}` is out of range")
    return int(port)


def _filter_userinfo(userinfo: Optional[str]) -> Optional[str]:
    if userinfo is None:
        return None
    if has_control_chars(userinfo):
        raise UriSyntaxError(
            code="invalid_userinfo", message="the user info contains control characters"
        )
    return normalize_encoded(userinfo, USERINFO_SAFE)


def split_authority(value: str) -> tuple[Optional[str], str, Optional[str]]:
    """Split ``[userinfo@]host[:port]`` without interpreting the parts."""
    userinfo: Optional[str] = None
    if "@" in value:
        userinfo, _, value = value.rpartition("@")

    if value.startswith("["):
        end = value.find("]")
        if end == -1:
            raise UriSyntaxError(code="invalid_host", message=f"the host `{value}` is invalid")
        host, rest = value[: end + 1], value[end + 1 :]
        if rest and not rest.startswith(":"):
            raise UriSyntaxError(code="invalid_host", message=f"the host `{value}` is invalid")
        return userinfo, host, rest[1:] if rest else None

    host, sep, port = value.partition(":")
    return userinfo, host, port if sep else None


class Authority:
    def __init__(
        self,
        value: str = "",
        resolver: Optional[PublicSuffixResolver] = None,
    ) -> None:
        userinfo, host, port = split_authority(str(value))
        self._userinfo = _filter_userinfo(userinfo)
        self._host = Host(host, resolver)
        self._port = _filter_port(port)

    @classmethod
    def from_components(
        cls,
        host: Union[Host, str, None],
        userinfo: Optional[str] = None,
        port: Union[int, str, None] = None,
    ) -> Authority:
        authority = cls("")
        if isinstance(host, Host):
            authority._host = Host("") if host.is_null else host
        else:
            authority._host = Host(host or "")
        authority._userinfo = _filter_userinfo(userinfo)
        authority._port = _filter_port(port)
        return authority

    @classmethod
    def from_uri(cls, uri: Uri) -> Optional[Authority]:
        return uri.authority

    @property
    def host(self) -> Host:
        return self._host

    @property
    def userinfo(self) -> Optional[str]:
        return self._userinfo

    @property
    def user(self) -> Optional[str]:
        if self._userinfo is None:
            return None
        return self._userinfo.partition(":")[0]

    @property
    def password(self) -> Optional[str]:
        if self._userinfo is None or ":" not in self._userinfo:
            return None
        return self._userinfo.partition(":")[2]

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def value(self) -> str:
        out = self._host.value or ""
        if self._userinfo is not None:
            out = f"{self._userinfo}@{out}"
        if self._port is not None:
            out = f"{out}:{self._port}"
        return out

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Authority):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Authority({self.value!r})"

    def with_host(self, host: Union[Host, str, None]) -> Authority:
        if isinstance(host, Host) and host is self._host:
            return self
        if not isinstance(host, Host):
            host = Host(host or "", self._host.resolver)
        return Authority.from_components(host, self._userinfo, self._port)

    def with_userinfo(self, user: Optional[str], password: Optional[str] = None) -> Authority:
        userinfo = user
        if user is not None and password is not None:
            userinfo = f"{encode(user, SUB_DELIMS)}:{password}"
        if _filter_userinfo(userinfo) == self._userinfo:
            return self
        return Authority.from_components(self._host, userinfo, self._port)

    def with_port(self, port: Union[int, str, None]) -> Authority:
        if _filter_port(port) == self._port:
            return self
        return Authority.from_components(self._host, self._userinfo, port)
