"""Core configuration, built once at startup and handed to services."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Self

from exhibitions.domain.lifecycle import DEFAULT_MIN_REJECTION_REASON_LENGTH
from exhibitions.domain.scoring import DEFAULT_RANK_POINTS


@dataclass(frozen=True)
class CoreConfig:
    rank_points: Mapping[int, int] = field(default_factory=lambda: DEFAULT_RANK_POINTS)
    min_rejection_reason_length: int = DEFAULT_MIN_REJECTION_REASON_LENGTH
    top_stalls_limit: int = 10
    top_schools_limit: int = 10
    analytics_cache_ttl: int = 60

    def __post_init__(self) -> None:
        if self.min_rejection_reason_length < 1:
            raise ValueError("min_rejection_reason_length must be positive")
        if self.top_stalls_limit < 1 or self.top_schools_limit < 1:
            raise ValueError("Leaderboard limits must be positive")
        if self.analytics_cache_ttl < 0:
            raise ValueError("analytics_cache_ttl cannot be negative")

    @classmethod
    def from_settings(cls, values: Mapping[str, Any]) -> Self:
        """Build from the ``EXHIBITIONS`` settings dict; missing keys keep defaults."""
        overrides: dict[str, Any] = {}
        if "RANK_POINTS" in values:
            overrides["rank_points"] = MappingProxyType(
                {int(rank): int(points) for rank, points in values["RANK_POINTS"].items()}
            )
        for key, name in (
            ("MIN_REJECTION_REASON_LENGTH", "min_rejection_reason_length"),
            ("TOP_STALLS_LIMIT", "top_stalls_limit"),
            ("TOP_SCHOOLS_LIMIT", "top_schools_limit"),
            ("ANALYTICS_CACHE_TTL", "analytics_cache_ttl"),
        ):
            if key in values:
                overrides[name] = int(values[key])
        return cls(**overrides)
