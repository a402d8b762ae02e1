from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ResolvedDomain:
    is_valid: bool
    public_suffix: str
    registrable_domain: str
    sub_domain: str

    @staticmethod
    def unresolved() -> ResolvedDomain:
        return ResolvedDomain(
            is_valid=False,
            public_suffix="",
            registrable_domain="",
            sub_domain="",
        )

    def as_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "public_suffix": self.public_suffix,
            "registrable_domain": self.registrable_domain,
            "sub_domain": self.sub_domain,
        }


class PublicSuffixResolver(Protocol):
    """Splits an ASCII, non-absolute domain name around its public suffix."""

    def resolve(self, domain: str) -> ResolvedDomain: ...
