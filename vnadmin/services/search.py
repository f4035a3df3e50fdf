"""
Name search against the per-level search index.

A record matches when the normalized query is contained in one of its
index keys, or one of its keys is contained in the query. This is
deliberately permissive (short queries over-match); results come back
deduplicated but unranked, and callers sort them as they need.
"""
import logging
from typing import Dict, List, Tuple

from ..models import Region
from ..registry import Registry
from ..utils.memo_utils import memoize
from ..utils.text_utils import name_sort_key, normalize_text

logger = logging.getLogger(__name__)


class SearchService:

    def __init__(self, registry: Registry):
        self.registry = registry
        self._sorted_search = memoize(self._compute_sorted_search)

    def search_by_name(self, level: str, query: str) -> List[Region]:
        """
        Records whose index keys contain, or are contained in, the query.

        Args:
            level: Level name
            query: Free text (normalized here)

        Returns:
            Deduplicated records in index order; [] for blank queries

        Example:
            >>> service.search_by_name('province', 'Ha Noi')
            [Region(id='01', name='Thành phố Hà Nội', ...), ...]
        """
        search_index = self.registry.get_search_index(level)

        normalized_query = normalize_text(query)
        if not normalized_query:
            return []

        # Keyed by object identity: one entry per record
        results: Dict[int, Region] = {}
        for key, records in search_index.items():
            if normalized_query in key or key in normalized_query:
                for record in records:
                    results.setdefault(id(record), record)

        logger.debug(f"search_by_name({level!r}, {normalized_query!r}) → {len(results)} records")
        return list(results.values())

    def search_by_name_sorted(self, level: str, query: str) -> List[Region]:
        """search_by_name() ordered by display name; memoized per (level, query)."""
        return list(self._sorted_search(level, query))

    def _compute_sorted_search(self, level: str, query: str) -> Tuple[Region, ...]:
        results = self.search_by_name(level, query)
        return tuple(sorted(results, key=lambda r: name_sort_key(r.name)))
