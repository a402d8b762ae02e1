from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in ("1", "true", "yes", "y", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    return float(str(raw).strip())


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return None
    return str(raw).strip()


def _require_range(
    name: str,
    value: float,
    *,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> None:
    if min_value is not None and value < min_value:
        raise RuntimeError(f"{name} must be >= {min_value}")
    if max_value is not None and value > max_value:
        raise RuntimeError(f"{name} must be <= {max_value}")


@dataclass(frozen=True)
class PublicSuffixSettings:
    cache_dir: Optional[str]
    fetch_latest: bool
    include_private_domains: bool
    fetch_timeout_seconds: float

    @staticmethod
    def from_env() -> PublicSuffixSettings:
        settings = PublicSuffixSettings(
            cache_dir=_env_str("URIKIT_PSL_CACHE_DIR"),
            fetch_latest=_env_bool("URIKIT_PSL_FETCH", False),
            include_private_domains=_env_bool("URIKIT_PSL_INCLUDE_PRIVATE", False),
            fetch_timeout_seconds=_env_float("URIKIT_PSL_FETCH_TIMEOUT", 5.0),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        _require_range(
            "URIKIT_PSL_FETCH_TIMEOUT", float(self.fetch_timeout_seconds), min_value=0.1
        )
        if self.fetch_latest and not self.cache_dir:
            raise RuntimeError(
                "URIKIT_PSL_CACHE_DIR is required when URIKIT_PSL_FETCH is enabled"
            )


@lru_cache(maxsize=1)
def get_public_suffix_settings() -> PublicSuffixSettings:
    return PublicSuffixSettings.from_env()
