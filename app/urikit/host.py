"""
Host component value object.

A raw host is classified once, at construction, into one of the host forms
below. Domain labels are kept root-first: index 0 is the top-level label and
negative offsets count from the leftmost label, so ``www.example.com`` has
labels ``("com", "example", "www")``.

Public suffix information is looked up lazily through the injected resolver
and memoized on the instance that performed the lookup.
"""

from __future__ import annotations

import ipaddress
import logging
import re
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional

import idna

from urikit.encoding import decode, encode
from urikit.errors import OffsetOutOfBounds, UnsupportedOperation, UriSyntaxError
from urikit.ipv4 import IPv4Calculator, IPv4Normalizer
from urikit.logging_config import get_logger, log_with_context
from urikit.public_suffix import PublicSuffixResolver, ResolvedDomain

if TYPE_CHECKING:
    from urikit.authority import Authority
    from urikit.uri import Uri

logger = get_logger(__name__)

DOMAIN = "domain"
IPV4 = "ipv4"
IPV6 = "ipv6"
IPVFUTURE = "ipvfuture"
REGISTERED_NAME = "registered_name"
HOST_FORMS = frozenset({DOMAIN, IPV4, IPV6, IPVFUTURE, REGISTERED_NAME})

MAX_LABELS = 127
MAX_LABEL_LENGTH = 63

_DEC_OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])"
_IPV4_RE = re.compile(rf"^{_DEC_OCTET}(?:\.{_DEC_OCTET}){{3}}$")

# "." is left out of the label characters: it separates labels.
_LABEL = rf"(?:[a-z0-9_~\-!$&'()*+,;=]|%[0-9a-f]{{2}}){{1,{MAX_LABEL_LENGTH}}}"
_DOMAIN_RE = re.compile(rf"^(?:{_LABEL}\.){{0,{MAX_LABELS - 1}}}{_LABEL}\.?$")
_REG_NAME_RE = re.compile(r"^(?:[a-z0-9_~\-.!$&'()*+,;=]|%[0-9a-f]{2})+$")
_GEN_DELIMS_RE = re.compile(r"[:/?#\[\]@ ]")
_IPVFUTURE_RE = re.compile(
    r"^v(?P<version>[0-9a-f]+)\.[a-z0-9\-._~!$&'()*+,;=:]+$", re.IGNORECASE
)
_IPVFUTURE_PREFIX_RE = re.compile(r"^v[0-9a-f]+\.", re.IGNORECASE)
_INVALID_ZONE_CHARS_RE = re.compile(r"[?#@\[\]\x00-\x1f\x7f]")


@dataclass(frozen=True)
class _ParsedHost:
    form: Optional[str]
    labels: tuple[str, ...]
    is_absolute: bool = False
    ip_version: Optional[str] = None
    has_zone_identifier: bool = False


def _invalid_host(value: str) -> UriSyntaxError:
    return UriSyntaxError(code="invalid_host", message=f"the host `{value}` is invalid")


def _is_domain(decoded: str) -> bool:
    if _DOMAIN_RE.match(decoded):
        return True
    if _GEN_DELIMS_RE.search(decoded):
        return False
    name = decoded[:-1] if decoded.endswith(".") else decoded
    try:
        idna.encode(name, uts46=True, transitional=False)
    except (idna.IDNAError, UnicodeError):
        return False
    return True


def _parse_ip_literal(value: str) -> _ParsedHost:
    inner = value[1:-1]
    if "%" in inner:
        address, _, zone = inner.partition("%")
        if not zone.isascii():
            raise _invalid_host(value)
        # "%25eth0" is the RFC 6874 form, a bare "%eth0" is tolerated
        zone_id = decode("%" + zone)
        zone_id = zone_id[1:] if zone_id.startswith("%") else zone
        if not zone_id or not zone_id.isascii() or _INVALID_ZONE_CHARS_RE.search(zone_id):
            raise _invalid_host(value)
        try:
            ip = ipaddress.IPv6Address(address)
        except ValueError as exc:
            raise _invalid_host(value) from exc
        if not ip.is_link_local:
            raise _invalid_host(value)
        return _ParsedHost(
            form=IPV6,
            labels=(f"[{address.lower()}%25{encode(zone_id)}]",),
            ip_version="6",
            has_zone_identifier=True,
        )

    try:
        ipaddress.IPv6Address(inner)
    except ValueError:
        pass
    else:
        return _ParsedHost(form=IPV6, labels=(f"[{inner.lower()}]",), ip_version="6")

    match = _IPVFUTURE_RE.match(inner)
    if match and match.group("version") not in ("4", "6"):
        return _ParsedHost(form=IPVFUTURE, labels=(value,), ip_version=match.group("version"))

    raise _invalid_host(value)


def _parse(value: Optional[str]) -> _ParsedHost:
    if value is None:
        return _ParsedHost(form=None, labels=())
    if value == "":
        return _ParsedHost(form=REGISTERED_NAME, labels=("",))
    if _IPV4_RE.match(value):
        return _ParsedHost(form=IPV4, labels=(value,), ip_version="4")
    if value.startswith("[") and value.endswith("]"):
        return _parse_ip_literal(value)

    decoded = decode(value).lower()
    if _is_domain(decoded):
        is_absolute = decoded.endswith(".")
        name = decoded[:-1] if is_absolute else decoded
        return _ParsedHost(
            form=DOMAIN,
            labels=tuple(reversed(name.split("."))),
            is_absolute=is_absolute,
        )
    if _REG_NAME_RE.match(decoded):
        return _ParsedHost(form=REGISTERED_NAME, labels=(decoded,))

    raise _invalid_host(value)


def _to_ascii_label(label: str) -> str:
    if label.isascii():
        return label
    try:
        return idna.encode(label, uts46=True, transitional=False).decode("ascii")
    except (idna.IDNAError, UnicodeError) as exc:
        raise UriSyntaxError(
            code="invalid_idna", message=f"the label `{label}` can not be converted to ascii"
        ) from exc


def _to_unicode_label(label: str) -> str:
    if not label.startswith("xn--"):
        return label
    try:
        return idna.decode(label)
    except (idna.IDNAError, UnicodeError):
        return label


class Host:
    def __init__(
        self,
        value: Optional[str] = None,
        resolver: Optional[PublicSuffixResolver] = None,
    ) -> None:
        parsed = _parse(value)
        self._form = parsed.form
        self._labels = parsed.labels
        self._is_absolute = parsed.is_absolute
        self._ip_version = parsed.ip_version
        self._has_zone_identifier = parsed.has_zone_identifier
        self._resolver = resolver
        self._suffix_lock = threading.Lock()
        self._suffix_info: Optional[ResolvedDomain] = None

    @classmethod
    def from_labels(
        cls,
        labels,
        absolute: bool = False,
        resolver: Optional[PublicSuffixResolver] = None,
    ) -> Host:
        labels = [str(label) for label in labels]
        if not labels:
            return cls(None, resolver)
        if labels == [""]:
            return cls("", resolver)
        name = ".".join(reversed(labels))
        return cls(name + "." if absolute else name, resolver)

    @classmethod
    def from_ip(cls, ip: str, resolver: Optional[PublicSuffixResolver] = None) -> Host:
        try:
            ipaddress.IPv4Address(ip)
        except ValueError:
            pass
        else:
            return cls(ip, resolver)

        if "%" in ip:
            address, _, zone = ip.partition("%")
            ip = f"{address}%25{encode(decode(zone))}"
        return cls(f"[{ip}]", resolver)

    @classmethod
    def from_authority(cls, authority: Authority) -> Host:
        return authority.host

    @classmethod
    def from_uri(cls, uri: Uri) -> Host:
        return uri.host

    # ------------------------------------------------------------------ state

    @property
    def value(self) -> Optional[str]:
        if self._form is None:
            return None
        if self._form != DOMAIN:
            return self._labels[0]
        name = ".".join(reversed(self._labels))
        return name + "." if self._is_absolute else name

    @property
    def form(self) -> Optional[str]:
        return self._form

    @property
    def resolver(self) -> Optional[PublicSuffixResolver]:
        return self._resolver

    @property
    def is_null(self) -> bool:
        return self._form is None

    @property
    def is_empty(self) -> bool:
        return self._labels == ("",)

    @property
    def is_ip(self) -> bool:
        return self._ip_version is not None

    @property
    def is_ipv4(self) -> bool:
        return self._form == IPV4

    @property
    def is_ipv6(self) -> bool:
        return self._form == IPV6

    @property
    def is_ip_future(self) -> bool:
        return self._form == IPVFUTURE

    @property
    def is_domain(self) -> bool:
        return self._form == DOMAIN

    @property
    def is_registered_name(self) -> bool:
        return self._form == REGISTERED_NAME

    @property
    def is_absolute(self) -> bool:
        return self._is_absolute

    @property
    def ip_version(self) -> Optional[str]:
        return self._ip_version

    @property
    def has_zone_identifier(self) -> bool:
        return self._has_zone_identifier

    @property
    def ip(self) -> Optional[str]:
        if self._ip_version is None:
            return None
        value = self._labels[0]
        if self._form == IPV4:
            return value
        inner = value[1:-1]
        if self._form == IPVFUTURE:
            return _IPVFUTURE_PREFIX_RE.sub("", inner)
        if not self._has_zone_identifier:
            return inner
        address, _, zone = inner.partition("%25")
        return f"{address}%{decode(zone)}"

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def get_label(self, offset: int, default: Optional[str] = None) -> Optional[str]:
        if offset < 0:
            offset += len(self._labels)
        if 0 <= offset < len(self._labels):
            return self._labels[offset]
        return default

    def keys(self, label: Optional[str] = None) -> list[int]:
        if label is None:
            return list(range(len(self._labels)))
        needle = _to_unicode_label(decode(label).lower())
        return [
            index
            for index, current in enumerate(self._labels)
            if _to_unicode_label(current) == needle
        ]

    def to_ascii(self) -> Optional[str]:
        if self._form != DOMAIN:
            return self.value
        name = ".".join(_to_ascii_label(label) for label in reversed(self._labels))
        return name + "." if self._is_absolute else name

    def to_unicode(self) -> Optional[str]:
        if self._form != DOMAIN:
            return self.value
        name = ".".join(_to_unicode_label(label) for label in reversed(self._labels))
        return name + "." if self._is_absolute else name

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def _comparison_key(self) -> Optional[str]:
        # both IDNA forms of a domain compare equal
        if self._form != DOMAIN:
            return self.value
        try:
            return self.to_ascii()
        except UriSyntaxError:
            return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Host):
            return self._comparison_key() == other._comparison_key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._comparison_key())

    def __str__(self) -> str:
        return self.value or ""

    def __repr__(self) -> str:
        return f"Host({self.value!r})"

    # ---------------------------------------------------------- public suffix

    def _resolved(self) -> ResolvedDomain:
        info = self._suffix_info
        if info is not None:
            return info
        with self._suffix_lock:
            if self._suffix_info is None:
                self._suffix_info = self._resolve_suffix()
            return self._suffix_info

    def _resolve_suffix(self) -> ResolvedDomain:
        if self._form != DOMAIN or self._resolver is None:
            return ResolvedDomain.unresolved()
        domain = ".".join(_to_ascii_label(label) for label in reversed(self._labels))
        log_with_context(
            logger,
            logging.DEBUG,
            "resolving public suffix",
            host=domain,
            operation="public_suffix",
        )
        return self._resolver.resolve(domain)

    @property
    def public_suffix(self) -> str:
        return self._resolved().public_suffix

    @property
    def registrable_domain(self) -> str:
        return self._resolved().registrable_domain

    @property
    def sub_domain(self) -> str:
        return self._resolved().sub_domain

    @property
    def is_public_suffix_valid(self) -> bool:
        return self._resolved().is_valid

    def with_domain_resolver(self, resolver: Optional[PublicSuffixResolver]) -> Host:
        if resolver is self._resolver:
            return self
        return Host(self.value, resolver)

    def _domain_labels(self, value: Optional[str]) -> list[str]:
        if value is None or value == "":
            return []
        if value.startswith(".") or value.endswith("."):
            raise _invalid_host(value)
        host = Host(value)
        if not host.is_domain:
            raise _invalid_host(value)
        return list(host.labels)

    def _require_domain(self, operation: str) -> None:
        if self._form == DOMAIN:
            return
        raise UnsupportedOperation(
            code="unsupported_host_edit",
            message=f"`{operation}` is not supported by the host `{self.value}`",
        )

    def _rebuild(self, labels: list[str]) -> Host:
        new = Host.from_labels(labels, self._is_absolute, self._resolver)
        if new.value == self.value:
            return self
        return new

    def with_public_suffix(self, value: Optional[str]) -> Host:
        if self._form is None or self.is_empty:
            return Host(value or None, self._resolver)
        self._require_domain("with_public_suffix")
        suffix = self.public_suffix
        new_labels = self._domain_labels(value)
        if ".".join(reversed(new_labels)) == suffix:
            return self
        offset = len(suffix.split(".")) if suffix else 0
        return self._rebuild(new_labels + list(self._labels[offset:]))

    def with_registrable_domain(self, value: Optional[str]) -> Host:
        if self._form is None or self.is_empty:
            return Host(value or None, self._resolver)
        self._require_domain("with_registrable_domain")
        registrable_domain = self.registrable_domain
        new_labels = self._domain_labels(value)
        if ".".join(reversed(new_labels)) == registrable_domain:
            return self
        offset = len(registrable_domain.split(".")) if registrable_domain else 0
        return self._rebuild(new_labels + list(self._labels[offset:]))

    def with_sub_domain(self, value: Optional[str]) -> Host:
        if self._form is None or self.is_empty:
            return Host(value or None, self._resolver)
        self._require_domain("with_sub_domain")
        sub_domain = self.sub_domain
        new_labels = self._domain_labels(value)
        if ".".join(reversed(new_labels)) == sub_domain:
            return self
        offset = len(self._labels)
        if sub_domain:
            offset -= len(sub_domain.split("."))
        return self._rebuild(list(self._labels[:offset]) + new_labels)

    # -------------------------------------------------------- structural edits

    def _recompose_ipv4(self, value: str) -> Host:
        new = Host(value, self._resolver)
        if not new.is_domain:
            raise UnsupportedOperation(
                code="unsupported_host_edit",
                message=f"the host `{value}` is not a domain name",
            )
        return new

    def prepend(self, label: Optional[str]) -> Host:
        if label is None or label == "":
            return self
        if self._form is None or self.is_empty:
            return Host(label, self._resolver)
        if self._form == IPV4:
            return self._recompose_ipv4(f"{label.rstrip('.')}.{self.value}")
        self._require_domain("prepend")
        return self._rebuild(list(self._labels) + self._domain_labels(label.rstrip(".")))

    def append(self, label: Optional[str]) -> Host:
        if label is None or label == "":
            return self
        if self._form is None or self.is_empty:
            return Host(label, self._resolver)
        if self._form == IPV4:
            return self._recompose_ipv4(f"{self.value}.{label.lstrip('.')}")
        self._require_domain("append")
        return self._rebuild(self._domain_labels(label.lstrip(".")) + list(self._labels))

    def replace_label(self, offset: int, label: Optional[str]) -> Host:
        if label is None:
            return self
        self._require_domain("replace_label")
        count = len(self._labels)
        if offset < -count - 1 or offset > count:
            raise OffsetOutOfBounds(
                code="label_offset_out_of_bounds",
                message=f"no label can be replaced at offset `{offset}`",
            )
        if offset < 0:
            offset += count
        if offset == count:
            return self.append(label)
        if offset == -1:
            return self.prepend(label)

        labels = list(self._labels)
        replacement = self._domain_labels(label)
        labels[offset : offset + 1] = replacement
        return self._rebuild(labels)

    def without_labels(self, *offsets: int) -> Host:
        if not offsets:
            return self
        self._require_domain("without_labels")
        count = len(self._labels)
        removed = set()
        for offset in offsets:
            if offset < -count or offset > count - 1:
                raise OffsetOutOfBounds(
                    code="label_offset_out_of_bounds",
                    message=f"no label can be removed at offset `{offset}`",
                )
            removed.add(offset + count if offset < 0 else offset)
        labels = [label for index, label in enumerate(self._labels) if index not in removed]
        if not labels:
            return Host("", self._resolver)
        return self._rebuild(labels)

    def with_root_label(self) -> Host:
        if self._form != DOMAIN or self._is_absolute:
            return self
        return Host(self.value + ".", self._resolver)

    def without_root_label(self) -> Host:
        if self._form != DOMAIN or not self._is_absolute:
            return self
        return Host(self.value[:-1], self._resolver)

    def without_zone_identifier(self) -> Host:
        if not self._has_zone_identifier:
            return self
        value = self._labels[0]
        return Host(value[: value.index("%")] + "]", self._resolver)

    def normalize_ipv4(
        self,
        calculator: Optional[IPv4Calculator] = None,
        normalizer: Optional[IPv4Normalizer] = None,
    ) -> Host:
        if self._form not in (DOMAIN, REGISTERED_NAME):
            return self
        normalizer = normalizer or IPv4Normalizer(calculator)
        result = normalizer.normalize(self.value)
        if result is None:
            return self
        return Host(result, self._resolver)
