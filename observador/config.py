"""Configuration utilities for the El Observador feed aggregator."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; ElObservador/1.0)"
DEFAULT_CACHE_TTL = 1800


def _to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration values for the aggregator service."""

    host: str = "0.0.0.0"
    port: int = 3000
    cache_ttl: int = DEFAULT_CACHE_TTL
    fetch_timeout: float = 10.0
    max_items_per_feed: int = 10
    user_agent: str = DEFAULT_USER_AGENT
    deterministic_ids: bool = False
    log_level: str = "INFO"

    @property
    def request_headers(self) -> dict:
        """Headers sent with every upstream feed request."""
        return {"User-Agent": self.user_agent}


def load_config() -> Config:
    """Load configuration from environment variables and defaults."""

    return Config(
        host=os.getenv("OBSERVADOR_HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        cache_ttl=int(os.getenv("OBSERVADOR_CACHE_TTL", str(DEFAULT_CACHE_TTL))),
        fetch_timeout=float(os.getenv("OBSERVADOR_FETCH_TIMEOUT", "10")),
        max_items_per_feed=int(os.getenv("OBSERVADOR_MAX_ITEMS_PER_FEED", "10")),
        user_agent=os.getenv("OBSERVADOR_USER_AGENT", DEFAULT_USER_AGENT),
        deterministic_ids=_to_bool(os.getenv("OBSERVADOR_STABLE_IDS"), False),
        log_level=os.getenv("OBSERVADOR_LOG_LEVEL", "INFO"),
    )
