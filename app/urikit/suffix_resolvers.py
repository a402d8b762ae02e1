"""
Public suffix resolver backed by tldextract.

By default the extractor runs offline from the suffix list snapshot bundled
with tldextract and keeps no disk cache. Setting URIKIT_PSL_FETCH (together
with URIKIT_PSL_CACHE_DIR) lets tldextract refresh the list itself; urikit
never downloads anything on its own.
"""

from __future__ import annotations

import logging
from typing import Optional

import tldextract

from urikit.config import PublicSuffixSettings, get_public_suffix_settings
from urikit.logging_config import get_logger, log_with_context
from urikit.public_suffix import ResolvedDomain

logger = get_logger(__name__)


def build_extractor(settings: PublicSuffixSettings) -> tldextract.TLDExtract:
    suffix_list_urls: tuple[str, ...] = ()
    if settings.fetch_latest:
        suffix_list_urls = tldextract.tldextract.PUBLIC_SUFFIX_LIST_URLS
    log_with_context(
        logger,
        logging.INFO,
        "public suffix extractor configured",
        component="public_suffix",
        fetch_latest=settings.fetch_latest,
        include_private_domains=settings.include_private_domains,
    )
    return tldextract.TLDExtract(
        cache_dir=settings.cache_dir,
        suffix_list_urls=suffix_list_urls,
        fallback_to_snapshot=True,
        include_psl_private_domains=settings.include_private_domains,
        cache_fetch_timeout=settings.fetch_timeout_seconds,
    )


class TldExtractResolver:
    def __init__(
        self,
        settings: Optional[PublicSuffixSettings] = None,
        extractor: Optional[tldextract.TLDExtract] = None,
    ) -> None:
        self._settings = settings or get_public_suffix_settings()
        self._extractor = extractor or build_extractor(self._settings)

    def resolve(self, domain: str) -> ResolvedDomain:
        if not domain:
            return ResolvedDomain.unresolved()

        result = self._extractor(domain)
        if not result.suffix:
            return ResolvedDomain.unresolved()

        registrable_domain = ""
        if result.domain:
            registrable_domain = f"{result.domain}.{result.suffix}"

        return ResolvedDomain(
            is_valid=True,
            public_suffix=result.suffix,
            registrable_domain=registrable_domain,
            sub_domain=result.subdomain if registrable_domain else "",
        )
