"""
Argument-keyed memoization for pure functions over the static dataset.

functools.lru_cache needs hashable arguments; these wrappers key on a
canonical JSON encoding instead, so option dataclasses, lists and dicts
can be passed as-is. The cache is unbounded and never invalidated: only
wrap functions whose result depends on nothing but their arguments.
"""
import dataclasses
import functools
import json
import threading
from typing import Any, Callable, Dict


def _to_jsonable(value: Any) -> Any:
    """json.dumps default= hook for the argument types used in this package."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {'__type__': type(value).__name__, **dataclasses.asdict(value)}
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    raise TypeError(f"Cannot build a memoization key from {type(value).__name__}")


def make_key(args: tuple, kwargs: Dict[str, Any]) -> str:
    """
    Canonical cache key: stable across dict ordering.

    Example:
        >>> make_key(('ha noi',), {'b': 1, 'a': 2})
        '[["ha noi"], {"a": 2, "b": 1}]'
    """
    return json.dumps([list(args), kwargs], sort_keys=True, default=_to_jsonable, ensure_ascii=False)


def memoize(fn: Callable) -> Callable:
    """
    Cache fn's results keyed by its serialized arguments.

    The wrapper exposes cache_info() and cache_clear() like lru_cache.
    Concurrent first calls with the same key may both compute; the result
    is identical so either write is kept.

    Example:
        >>> @memoize
        ... def words(name):
        ...     return tuple(name.split())
        >>> words("ha noi") is words("ha noi")
        True
    """
    cache: Dict[str, Any] = {}
    stats = {'hits': 0, 'misses': 0}
    stats_lock = threading.Lock()

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        key = make_key(args, kwargs)
        try:
            result = cache[key]
        except KeyError:
            pass
        else:
            with stats_lock:
                stats['hits'] += 1
            return result

        result = fn(*args, **kwargs)
        cache[key] = result
        with stats_lock:
            stats['misses'] += 1
        return result

    def cache_info() -> Dict[str, int]:
        return {'hits': stats['hits'], 'misses': stats['misses'], 'currsize': len(cache)}

    def cache_clear():
        cache.clear()
        with stats_lock:
            stats['hits'] = 0
            stats['misses'] = 0

    wrapper.cache_info = cache_info
    wrapper.cache_clear = cache_clear
    return wrapper
