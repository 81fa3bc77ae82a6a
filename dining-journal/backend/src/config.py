from __future__ import annotations

import hashlib
import os
from typing import Any, Optional

from pydantic import BaseModel, Field


class Configuration(BaseModel):
    # Period bucketing
    timezone: Optional[str] = Field(default=None)  # IANA name, None = process local

    # Ranking limits
    top_tags_limit: int = Field(default=3)
    country_limit: int = Field(default=10)
    profile_country_limit: int = Field(default=8)
    top_rated_limit: int = Field(default=3)

    # Badge rule table ("stats" or "community")
    badge_table: str = Field(default="stats")

    # Result cache (optional optimisation)
    cache_enabled: bool = Field(default=False)
    cache_max_entries: int = Field(default=64)
    cache_ttl_sec: int = Field(default=600)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "timezone": os.getenv("STATS_TIMEZONE"),
            "top_tags_limit": os.getenv("STATS_TOP_TAGS"),
            "country_limit": os.getenv("STATS_COUNTRY_LIMIT"),
            "profile_country_limit": os.getenv("STATS_PROFILE_COUNTRY_LIMIT"),
            "top_rated_limit": os.getenv("STATS_TOP_RATED"),
            "badge_table": os.getenv("STATS_BADGE_TABLE"),
            "cache_enabled": os.getenv("STATS_CACHE_ENABLED"),
            "cache_max_entries": os.getenv("STATS_CACHE_MAX"),
            "cache_ttl_sec": os.getenv("STATS_CACHE_TTL"),
        }

        bool_fields = {"cache_enabled"}

        for k, v in env_map.items():
            if v is None:
                continue
            if k in bool_fields:
                raw[k] = str(v).lower() in {"1", "true", "yes", "on"}
            else:
                raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def log_summary(self) -> str:
        return (
            "timezone=%s top_tags=%s countries=%s/%s top_rated=%s badge_table=%s cache=%s max=%s ttl=%s"
            % (
                self.timezone or "local",
                self.top_tags_limit,
                self.country_limit,
                self.profile_country_limit,
                self.top_rated_limit,
                self.badge_table,
                self.cache_enabled,
                self.cache_max_entries,
                self.cache_ttl_sec,
            )
        )

    def fingerprint(self) -> str:
        """Digest of the settings that change computed results (cache settings excluded)."""
        parts = [
            self.timezone or "",
            str(self.top_tags_limit),
            str(self.country_limit),
            str(self.profile_country_limit),
            str(self.top_rated_limit),
            self.badge_table,
        ]
        return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()[:16]
