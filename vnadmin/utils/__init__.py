"""
Utility modules for administrative unit lookup.
"""
from .text_utils import (
    normalize_text,
    remove_vietnamese_accents,
    split_words,
    name_sort_key,
)

from .index_utils import (
    build_id_index,
    build_parent_index,
    build_search_index,
    find_duplicate_ids,
)

from .matching_utils import (
    MatchOutcome,
    fuzzy_match,
    levenshtein_distance,
    levenshtein_normalized,
    jaro_similarity,
    jaro_winkler_similarity,
)

from .memo_utils import memoize

__all__ = [
    # Text utilities
    'normalize_text',
    'remove_vietnamese_accents',
    'split_words',
    'name_sort_key',
    # Index construction
    'build_id_index',
    'build_parent_index',
    'build_search_index',
    'find_duplicate_ids',
    # Matching utilities
    'MatchOutcome',
    'fuzzy_match',
    'levenshtein_distance',
    'levenshtein_normalized',
    'jaro_similarity',
    'jaro_winkler_similarity',
    # Memoization
    'memoize',
]
