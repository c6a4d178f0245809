"""
Per-directory caches for rule sets and composed matchers
"""

from typing import Dict, Generic, Iterator, Optional, TypeVar

V = TypeVar('V')


class DirectoryCache(Generic[V]):
    """
    Key/value store keyed by normalized directory path.

    Entries are never evicted; clear() is the only invalidation. Concurrent
    coroutines may both miss and both put the same key, the last put wins.
    """

    def __init__(self, name: str):
        self.name = name
        self._cache: Dict[str, V] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[V]:
        """Get value from cache"""
        if key in self._cache:
            self._hits += 1
            return self._cache[key]
        self._misses += 1
        return None

    def put(self, key: str, value: V):
        """Put value in cache"""
        self._cache[key] = value

    def clear(self):
        """Clear entire cache"""
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __iter__(self) -> Iterator[str]:
        return iter(self._cache)

    def get_stats(self) -> Dict[str, float]:
        """Get cache statistics"""
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0
        return {
            'size': len(self._cache),
            'hits': self._hits,
            'misses': self._misses,
            'hit_rate': hit_rate
        }
