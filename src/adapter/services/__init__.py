from .cache import CacheStats, TTLCache

__all__ = [
    "CacheStats",
    "TTLCache",
]
