"""
Registry: lazily loaded records and indexes for every level.

Each level moves UNLOADED → LOADING → LOADED on first access and stays
LOADED for the life of the registry. One lock per level makes the load
single-flight: concurrent first callers wait for the one build instead of
repeating it. The finished LevelIndex is published with a single
assignment, so readers see either nothing or a complete index.

After loading everything is read-only and needs no locking.

Example:
    >>> registry = Registry()
    >>> registry.get_by_id('province', '01').name
    'Thành phố Hà Nội'
    >>> [w.name for w in registry.get_children('province', '01')][:2]
    ['Phường Hoàn Kiếm', 'Phường Cửa Nam']
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .dataset import default_source, get_hierarchy, load_level
from .models import Hierarchy, LoadState, Region
from .utils.index_utils import (
    build_id_index,
    build_parent_index,
    build_search_index,
    find_duplicate_ids,
    get_index_stats,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelIndex:
    """Records of one level plus every index derived from them."""

    records: Tuple[Region, ...]
    by_id: Mapping[str, Region]
    by_parent: Mapping[str, Tuple[Region, ...]]
    search: Mapping[str, Tuple[Region, ...]]
    duplicate_ids: Tuple[str, ...] = ()


def build_level_index(records: List[Region]) -> LevelIndex:
    """Build all indexes for one level's records."""
    duplicates = find_duplicate_ids(records)
    return LevelIndex(
        records=tuple(records),
        by_id=build_id_index(records),
        by_parent=build_parent_index(records),
        search=build_search_index(records),
        duplicate_ids=tuple(duplicates),
    )


class Registry:
    """
    Owner of the dataset and its indexes.

    Args:
        hierarchy: Hierarchy definition (default: config.DEFAULT_HIERARCHY)
        source: Data source with load_rows(level) (default: bundled JSON seeds)
    """

    def __init__(self, hierarchy: Optional[Hierarchy] = None, source=None):
        self.hierarchy = hierarchy or get_hierarchy()
        self.source = source if source is not None else default_source(self.hierarchy)

        self._indexes: Dict[str, LevelIndex] = {}
        self._states: Dict[str, LoadState] = {name: LoadState.UNLOADED for name in self.hierarchy.names}
        self._locks: Dict[str, threading.Lock] = {name: threading.Lock() for name in self.hierarchy.names}

    # ---------- loading ----------

    def _ensure_loaded(self, level_name: str) -> LevelIndex:
        index = self._indexes.get(level_name)
        if index is not None:
            return index

        level = self.hierarchy.get_level(level_name)  # raises UnknownLevelError

        with self._locks[level_name]:
            index = self._indexes.get(level_name)
            if index is not None:
                return index

            self._states[level_name] = LoadState.LOADING
            try:
                index = self._build(level)
            except Exception:
                self._states[level_name] = LoadState.UNLOADED
                raise

            self._indexes[level_name] = index
            self._states[level_name] = LoadState.LOADED

        return index

    def _build(self, level) -> LevelIndex:
        from .config import DEBUG_INDEX

        logger.info(f"Building {level.name} index...")
        start_time = time.time()

        records = load_level(self.source, level)
        index = build_level_index(records)

        if index.duplicate_ids:
            logger.warning(f"{level.name}: {len(index.duplicate_ids)} duplicate IDs, last record wins: "
                           f"{', '.join(index.duplicate_ids[:10])}")

        elapsed = (time.time() - start_time) * 1000
        logger.info(f"{level.name} index built in {elapsed:.1f}ms ({len(records)} records)")
        if DEBUG_INDEX:
            stats = get_index_stats(index.records, index.by_id, index.by_parent, index.search)
            logger.debug(f"  {level.name} index stats: {stats}")

        return index

    def load_all(self) -> None:
        """Eagerly load every level."""
        for name in self.hierarchy.names:
            self._ensure_loaded(name)

    def get_state(self, level: str) -> LoadState:
        self.hierarchy.index_of(level)
        return self._states[level]

    def is_loaded(self, level: str) -> bool:
        return self.get_state(level) is LoadState.LOADED

    def get_level_index(self, level: str) -> LevelIndex:
        return self._ensure_loaded(level)

    # ---------- accessors ----------

    def get_records(self, level: str) -> List[Region]:
        """All records of a level in dataset order."""
        return list(self._ensure_loaded(level).records)

    def get_by_id(self, level: str, region_id: str) -> Optional[Region]:
        """O(1) lookup; None for unknown IDs."""
        return self._ensure_loaded(level).by_id.get(region_id)

    def is_valid_id(self, level: str, region_id: str) -> bool:
        return region_id in self._ensure_loaded(level).by_id

    def get_children(self, level: str, parent_id: str) -> List[Region]:
        """
        Direct children (next level down) of a region.

        Always a list: empty for unknown parents and for the leaf level.
        """
        child_level = self.hierarchy.child_of(level)
        if child_level is None:
            return []
        return list(self._ensure_loaded(child_level.name).by_parent.get(parent_id, ()))

    def get_parent(self, region: Region) -> Optional[Region]:
        """Parent record of a region, None at the root or for dangling references."""
        parent_level = self.hierarchy.parent_of(region.level)
        if parent_level is None or region.parent_id is None:
            return None
        return self.get_by_id(parent_level.name, region.parent_id)

    def iter_ancestors(self, region: Region) -> Iterator[Region]:
        """Parent, grandparent, ... up to the root (stops at a broken link)."""
        parent = self.get_parent(region)
        while parent is not None:
            yield parent
            parent = self.get_parent(parent)

    def get_search_index(self, level: str) -> Mapping[str, Tuple[Region, ...]]:
        return self._ensure_loaded(level).search

    def get_stats(self) -> Dict[str, Dict]:
        """Load state and index sizes per level (does not trigger loading)."""
        stats = {}
        for name in self.hierarchy.names:
            entry = {'state': self._states[name].value}
            index = self._indexes.get(name)
            if index is not None:
                entry.update(get_index_stats(index.records, index.by_id, index.by_parent, index.search))
                entry['duplicate_ids'] = len(index.duplicate_ids)
            stats[name] = entry
        return stats

    def __repr__(self) -> str:
        return f"Registry(hierarchy={self.hierarchy.name!r}, source={self.source!r})"


# Process-wide default instance (lazy initialization)
_DEFAULT_REGISTRY: Optional[Registry] = None
_DEFAULT_LOCK = threading.Lock()


def get_registry() -> Registry:
    """
    Get the process-wide registry, creating it on first call.

    Creating the registry is cheap; data loads lazily per level.
    """
    global _DEFAULT_REGISTRY

    registry = _DEFAULT_REGISTRY
    if registry is None:
        with _DEFAULT_LOCK:
            if _DEFAULT_REGISTRY is None:
                _DEFAULT_REGISTRY = Registry()
            registry = _DEFAULT_REGISTRY
    return registry


def reset_registry(registry: Optional[Registry] = None) -> None:
    """
    Replace the process-wide registry.

    With no argument the next get_registry() builds a fresh instance,
    which is how tests isolate themselves from earlier loads.
    """
    global _DEFAULT_REGISTRY

    with _DEFAULT_LOCK:
        _DEFAULT_REGISTRY = registry
