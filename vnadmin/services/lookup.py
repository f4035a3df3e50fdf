"""
ID and hierarchy lookups over the registry indexes.
"""
from typing import List, Optional, Tuple

from ..models import Region
from ..registry import Registry
from ..utils.memo_utils import memoize
from ..utils.text_utils import name_sort_key


class LookupService:
    """O(1) lookups once a level is loaded; the first call per level pays for the build."""

    def __init__(self, registry: Registry):
        self.registry = registry
        self._sorted_records = memoize(self._compute_sorted_records)

    def get_all(self, level: str) -> List[Region]:
        return self.registry.get_records(level)

    def get_all_sorted(self, level: str) -> List[Region]:
        """All records ordered by display name (natural, accent-insensitive)."""
        return list(self._sorted_records(level))

    def _compute_sorted_records(self, level: str) -> Tuple[Region, ...]:
        return tuple(sorted(self.registry.get_records(level), key=lambda r: name_sort_key(r.name)))

    def get_by_id(self, level: str, region_id: str) -> Optional[Region]:
        return self.registry.get_by_id(level, region_id)

    def get_children(self, level: str, parent_id: str) -> List[Region]:
        return self.registry.get_children(level, parent_id)

    def is_valid_id(self, level: str, region_id: str) -> bool:
        return self.registry.is_valid_id(level, region_id)

    def get_parent(self, level: str, region_id: str) -> Optional[Region]:
        region = self.registry.get_by_id(level, region_id)
        if region is None:
            return None
        return self.registry.get_parent(region)
