"""Core cache components."""

from .cache import Cache, Computation
from .keys import canonical_arguments, make_cache_key
from .models import ComputationOutput, ComputationResult, Dependency, Item
from .statistics import CacheStatistics

__all__ = [
    "Cache",
    "CacheStatistics",
    "Computation",
    "ComputationOutput",
    "ComputationResult",
    "Dependency",
    "Item",
    "canonical_arguments",
    "make_cache_key",
]
