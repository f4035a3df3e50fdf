"""
Autocomplete suggestions for type-ahead inputs.

Scoring tiers (config.AUTOCOMPLETE_SCORES):
    exact        100
    prefix       90 - unmatched tail length
    contains     70 - 2 * match position
    word prefix  50 - unmatched word tail length
Non-positive scores are dropped.
"""
import math
from typing import List, Optional

from ..config import AUTOCOMPLETE_LIMIT, AUTOCOMPLETE_SCORES, UNIVERSAL_AUTOCOMPLETE_LIMIT
from ..models import AutocompleteResult
from ..registry import Registry
from ..utils.text_utils import normalize_text, split_words


def score_completion(normalized_query: str, normalized_name: str) -> int:
    """
    Autocomplete score of one name.

    Example:
        >>> score_completion('ha', 'ha giang')
        84
        >>> score_completion('noi', 'thanh pho ha noi')
        44
    """
    if normalized_name == normalized_query:
        return AUTOCOMPLETE_SCORES['exact']
    if normalized_name.startswith(normalized_query):
        return AUTOCOMPLETE_SCORES['prefix'] - (len(normalized_name) - len(normalized_query))

    position = normalized_name.find(normalized_query)
    if position >= 0:
        return AUTOCOMPLETE_SCORES['contains'] - position * 2

    for word in split_words(normalized_name):
        if word.startswith(normalized_query):
            return AUTOCOMPLETE_SCORES['word_prefix'] - (len(word) - len(normalized_query))
    return 0


class AutocompleteService:

    def __init__(self, registry: Registry):
        self.registry = registry

    def autocomplete(
        self,
        level: str,
        query: str,
        parent_id: Optional[str] = None,
        limit: int = AUTOCOMPLETE_LIMIT
    ) -> List[AutocompleteResult]:
        """
        Suggestions for one level, best first.

        Args:
            level: Level name
            query: Partial text typed so far
            parent_id: Restrict to children of this parent
            limit: Maximum suggestions
        """
        parent_level = self.registry.hierarchy.parent_of(level)
        if parent_id is not None and parent_level is not None:
            records = self.registry.get_children(parent_level.name, parent_id)
        else:
            records = self.registry.get_records(level)

        normalized_query = normalize_text(query)
        if not normalized_query:
            return []

        results = []
        for record in records:
            score = score_completion(normalized_query, normalize_text(record.name))
            if score <= 0:
                continue
            parent = self.registry.get_parent(record)
            results.append(AutocompleteResult(
                level=level,
                id=record.id,
                name=record.name,
                score=score,
                parent_name=parent.name if parent else None,
            ))

        results.sort(key=lambda r: -r.score)
        return results[:limit]

    def universal_autocomplete(self, query: str, limit: int = UNIVERSAL_AUTOCOMPLETE_LIMIT) -> List[AutocompleteResult]:
        """Suggestions across all levels; each level contributes at most limit / levels (rounded up)."""
        per_level = math.ceil(limit / len(self.registry.hierarchy.levels))

        results = []
        for level in self.registry.hierarchy.names:
            results.extend(self.autocomplete(level, query, limit=per_level))

        results.sort(key=lambda r: -r.score)
        return results[:limit]
