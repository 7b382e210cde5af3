"""Cache statistics collection."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class CacheStatistics:
    """Counters for one Cache instance.

    Attributes:
        hits: ``cached`` calls answered from a valid stored item.
        misses: ``cached`` calls that found no valid item.
        computations: Memoized function calls that returned successfully.
        writes: Items written through to the storage tiers.
    """

    hits: int = 0
    misses: int = 0
    computations: int = 0
    writes: int = 0

    @property
    def hit_ratio(self) -> float:
        """Fraction of lookups that were hits, 0.0 before any lookup."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def reset(self) -> None:
        """Zero all counters."""
        self.hits = 0
        self.misses = 0
        self.computations = 0
        self.writes = 0

    def to_dict(self) -> dict[str, float]:
        data: dict[str, float] = dict(asdict(self))
        data["hit_ratio"] = self.hit_ratio
        return data
