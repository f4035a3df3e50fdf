"""
Fuzzy search over whole levels.

Every record of a level is scored with fuzzy_match(); no index
pre-filtering, since a full scan of a few thousand short names is fast
and the index would hide typo matches.

Example:
    >>> service = FuzzyService(registry)
    >>> [r.item.name for r in service.fuzzy_search('province', 'thanh pho ha')][:1]
    ['Thành phố Hà Nội']
"""
import logging
from typing import Dict, List, Optional

from ..config import (
    SIMILAR_NAME_THRESHOLD,
    SUGGESTION_MAX_RESULTS,
    SUGGESTION_THRESHOLD,
)
from ..models import (
    CorrectionSuggestion,
    FuzzyOptions,
    FuzzySearchResult,
    MatchDetail,
    SearchFilters,
    SearchOptions,
    SimilarName,
    UniversalSearchResult,
)
from ..registry import Registry
from ..utils.matching_utils import fuzzy_match, jaro_winkler_similarity
from ..utils.text_utils import name_sort_key, normalize_text

logger = logging.getLogger(__name__)

_DEFAULT_SEARCH_OPTIONS = SearchOptions()


class FuzzyService:

    def __init__(self, registry: Registry):
        self.registry = registry

    def fuzzy_search(
        self,
        level: str,
        query: str,
        options: Optional[FuzzyOptions] = None
    ) -> List[FuzzySearchResult]:
        """
        Score every record of a level against the query.

        Keeps results with score >= threshold, highest score first (ties keep
        dataset order), truncated to max_results.

        Args:
            level: Level name
            query: Free text
            options: Threshold, max_results, bonuses

        Returns:
            Ranked list of FuzzySearchResult; [] for blank queries
        """
        from ..config import DEBUG_FUZZY

        options = options or _DEFAULT_SEARCH_OPTIONS
        records = self.registry.get_records(level)

        if not normalize_text(query):
            return []

        threshold = options.effective_threshold()
        results = []
        for record in records:
            outcome = fuzzy_match(query, record.name, options)
            if outcome.score >= threshold:
                results.append(FuzzySearchResult(
                    item=record,
                    score=outcome.score,
                    matches=(MatchDetail(field='name', value=record.name, score=outcome.score, type=outcome.type),),
                    level=level,
                ))

        results.sort(key=lambda r: -r.score)
        results = results[:options.effective_max_results()]

        if DEBUG_FUZZY in ('WINNERS', 'FULL') and results:
            top = results[0]
            logger.debug(f"[FUZZY] {level} '{query}' → '{top.item.name}' "
                         f"({top.score:.3f}, {top.matches[0].type}) of {len(results)} results")

        return results

    def universal_fuzzy_search(self, query: str, options: Optional[SearchOptions] = None) -> UniversalSearchResult:
        """
        Fuzzy search every level, then filter and combine.

        Filters:
            level: only that level keeps results (unknown level → all empty)
            parent_id: non-root results must have this ID among their ancestors

        Combined sort (sort_by):
            score      highest score first
            name       display name, accent-insensitive
            relevance  highest score first, coarser level first on ties

        Args:
            query: Free text
            options: SearchOptions

        Returns:
            UniversalSearchResult(by_level, combined)

        Example:
            >>> result = service.universal_fuzzy_search('Ha', SearchOptions(filters=SearchFilters(level='province')))
            >>> result.by_level['ward']
            []
        """
        options = options or _DEFAULT_SEARCH_OPTIONS
        filters = options.filters or SearchFilters()
        hierarchy = self.registry.hierarchy

        by_level: Dict[str, List[FuzzySearchResult]] = {}
        for level in hierarchy.levels:
            if filters.level is not None and filters.level != level.name:
                by_level[level.name] = []
                continue

            results = self.fuzzy_search(level.name, query, options)
            if filters.parent_id is not None and not level.is_root:
                results = [r for r in results if self._has_ancestor(r.item, filters.parent_id)]
            by_level[level.name] = results

        combined = [result for results in by_level.values() for result in results]

        if options.sort_by == 'name':
            combined.sort(key=lambda r: name_sort_key(r.item.name))
        elif options.sort_by == 'relevance':
            combined.sort(key=lambda r: (-r.score, hierarchy.index_of(r.level)))
        else:
            combined.sort(key=lambda r: -r.score)

        return UniversalSearchResult(by_level=by_level, combined=combined[:options.effective_max_results()])

    def _has_ancestor(self, region, ancestor_id: str) -> bool:
        return any(ancestor.id == ancestor_id for ancestor in self.registry.iter_ancestors(region))

    def find_similar_names(
        self,
        name: str,
        level: str,
        threshold: float = SIMILAR_NAME_THRESHOLD
    ) -> List[SimilarName]:
        """
        Records with a Jaro-Winkler similar name (duplicates, spelling variants).

        Records whose normalized name equals the query's are excluded.
        """
        normalized_name = normalize_text(name)
        results = []

        for record in self.registry.get_records(level):
            normalized_record = normalize_text(record.name)
            if normalized_record == normalized_name:
                continue
            similarity = jaro_winkler_similarity(normalized_name, normalized_record)
            if similarity >= threshold:
                results.append(SimilarName(item=record, similarity=similarity))

        results.sort(key=lambda r: -r.similarity)
        return results

    def suggest_corrections(self, query: str, level: Optional[str] = None) -> List[CorrectionSuggestion]:
        """Likely intended names for a misspelled query, best first."""
        options = SearchOptions(
            threshold=SUGGESTION_THRESHOLD,
            max_results=SUGGESTION_MAX_RESULTS,
            filters=SearchFilters(level=level) if level else None,
        )
        results = self.universal_fuzzy_search(query, options)

        return [
            CorrectionSuggestion(
                suggestion=result.item.name,
                level=result.level,
                confidence=result.score,
                item=result.item,
            )
            for result in results.combined
        ]
