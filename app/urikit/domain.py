from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional, Union

from urikit.errors import UriSyntaxError
from urikit.host import Host
from urikit.public_suffix import PublicSuffixResolver

if TYPE_CHECKING:
    from urikit.uri import Uri


class Domain:
    """A Host restricted to the domain-name form.

    Labels use the same root-first indexing as Host; every edit returns a
    Domain again or raises when the result is no longer a domain name.
    """

    def __init__(
        self,
        value: Union[Host, str],
        resolver: Optional[PublicSuffixResolver] = None,
    ) -> None:
        host = value if isinstance(value, Host) else Host(value, resolver)
        if not host.is_domain:
            raise UriSyntaxError(
                code="invalid_domain",
                message=f"the host `{host.value}` is not a domain name",
            )
        self._host = host

    @classmethod
    def from_labels(cls, labels, absolute: bool = False) -> Domain:
        return cls(Host.from_labels(labels, absolute))

    @classmethod
    def from_host(cls, host: Host) -> Domain:
        return cls(host)

    @classmethod
    def from_uri(cls, uri: Uri) -> Domain:
        return cls(uri.host)

    def _wrap(self, host: Host) -> Domain:
        if host is self._host:
            return self
        return Domain(host)

    @property
    def host(self) -> Host:
        return self._host

    @property
    def value(self) -> str:
        return self._host.value

    @property
    def labels(self) -> tuple[str, ...]:
        return self._host.labels

    @property
    def is_absolute(self) -> bool:
        return self._host.is_absolute

    def get(self, offset: int, default: Optional[str] = None) -> Optional[str]:
        return self._host.get_label(offset, default)

    def keys(self, label: Optional[str] = None) -> list[int]:
        return self._host.keys(label)

    def to_ascii(self) -> str:
        return self._host.to_ascii()

    def to_unicode(self) -> str:
        return self._host.to_unicode()

    def __len__(self) -> int:
        return len(self._host)

    def __iter__(self) -> Iterator[str]:
        return iter(self._host)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Domain):
            return self._host == other._host
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._host)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Domain({self.value!r})"

    def prepend(self, label: Optional[str]) -> Domain:
        return self._wrap(self._host.prepend(label))

    def append(self, label: Optional[str]) -> Domain:
        return self._wrap(self._host.append(label))

    def with_label(self, offset: int, label: Optional[str]) -> Domain:
        return self._wrap(self._host.replace_label(offset, label))

    def without_label(self, *offsets: int) -> Domain:
        return self._wrap(self._host.without_labels(*offsets))

    def with_root_label(self) -> Domain:
        return self._wrap(self._host.with_root_label())

    def without_root_label(self) -> Domain:
        return self._wrap(self._host.without_root_label())

    def slice(self, offset: int, length: Optional[int] = None) -> Domain:
        """Keep ``length`` labels starting at root-first ``offset``."""
        labels = self._host.labels
        if offset < 0:
            offset = max(0, offset + len(labels))
        end = len(labels) if length is None else offset + length
        kept = labels[offset:end]
        if kept == labels:
            return self
        return Domain(Host.from_labels(kept, self.is_absolute, self._host.resolver))
