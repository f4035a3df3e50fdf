"""
Matching utilities for scoring a query against a region name.

Core functions:
- levenshtein_distance() & levenshtein_normalized()
- jaro_similarity() & jaro_winkler_similarity()
- fuzzy_match(): first-applicable rule wins
    1. exact   → 1.0 + exact bonus
    2. prefix  → 0.9 + prefix bonus
    3. word    → matched_words / max(words) * 0.8 + word bonus
    4. fuzzy   → 0.6 * levenshtein + 0.4 * jaro-winkler
"""
import logging
import re
from functools import lru_cache
from typing import NamedTuple, Optional

import Levenshtein

from ..config import (
    CACHE_MAX_SIZE,
    FUZZY_WEIGHTS,
    JARO_WINKLER_MAX_PREFIX,
    JARO_WINKLER_PREFIX_SCALE,
    MATCH_TYPE_SCORES,
)
from ..models import FuzzyOptions
from .text_utils import normalize_text

logger = logging.getLogger(__name__)

# Unlike str.split(), keeps the empty word of an empty string
WORD_SPLIT_PATTERN = re.compile(r'\s+')

_DEFAULT_OPTIONS = FuzzyOptions()


class MatchOutcome(NamedTuple):
    score: float
    type: str  # exact | prefix | word | fuzzy


# === Core String Similarity Algorithms ===

@lru_cache(maxsize=CACHE_MAX_SIZE)
def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Edit distance with unit cost for insert, delete and substitute.

    Example:
        >>> levenshtein_distance("ba dinh", "ba din")
        1
    """
    return Levenshtein.distance(s1 or '', s2 or '')


@lru_cache(maxsize=CACHE_MAX_SIZE)
def levenshtein_normalized(s1: str, s2: str) -> float:
    """
    Normalized Levenshtein similarity: 1 - distance / max_length.

    Two empty strings are identical (1.0).

    Example:
        >>> levenshtein_normalized("ba dinh", "ba din")
        0.857...  # 1 - 1/7
    """
    s1 = s1 or ''
    s2 = s2 or ''
    if s1 == s2:
        return 1.0

    max_len = max(len(s1), len(s2))
    return 1.0 - levenshtein_distance(s1, s2) / max_len


@lru_cache(maxsize=CACHE_MAX_SIZE)
def jaro_similarity(s1: str, s2: str) -> float:
    """
    Classic Jaro similarity.

    Match window is floor(max(len) / 2) - 1; transpositions are counted by
    walking matched characters of both strings in order. Empty input
    scores 0 unless both strings are empty.

    Example:
        >>> round(jaro_similarity("ho chi mihn", "thanh pho ha noi"), 4)
        0.5966
    """
    s1 = s1 or ''
    s2 = s2 or ''
    if s1 == s2:
        return 1.0

    len1, len2 = len(s1), len(s2)
    if len1 == 0 or len2 == 0:
        return 0.0

    match_window = max(len1, len2) // 2 - 1
    if match_window < 0:
        return 0.0

    s1_matches = [False] * len1
    s2_matches = [False] * len2

    # Each s1 char claims the first unclaimed equal s2 char inside the window
    matches = 0
    for i in range(len1):
        start = max(0, i - match_window)
        end = min(i + match_window + 1, len2)
        for j in range(start, end):
            if s2_matches[j] or s1[i] != s2[j]:
                continue
            s1_matches[i] = True
            s2_matches[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    # Matched chars of both strings, walked in order
    transpositions = 0
    k = 0
    for i in range(len1):
        if not s1_matches[i]:
            continue
        while not s2_matches[k]:
            k += 1
        if s1[i] != s2[k]:
            transpositions += 1
        k += 1

    return (matches / len1 + matches / len2 + (matches - transpositions / 2) / matches) / 3


def common_prefix_length(s1: str, s2: str, limit: int = JARO_WINKLER_MAX_PREFIX) -> int:
    """Length of the shared prefix, capped at limit."""
    length = 0
    for c1, c2 in zip(s1[:limit], s2[:limit]):
        if c1 != c2:
            break
        length += 1
    return length


@lru_cache(maxsize=CACHE_MAX_SIZE)
def jaro_winkler_similarity(s1: str, s2: str) -> float:
    """
    Jaro-Winkler similarity.

    jaro + 0.1 * prefix_len * (1 - jaro), prefix_len capped at 4.
    The prefix bonus applies at any Jaro score.

    Example:
        >>> round(jaro_winkler_similarity("martha", "marhta"), 4)
        0.9611
    """
    s1 = s1 or ''
    s2 = s2 or ''
    if s1 == s2:
        return 1.0

    jaro = jaro_similarity(s1, s2)
    if jaro == 0.0:
        return 0.0

    prefix = common_prefix_length(s1, s2)
    return jaro + JARO_WINKLER_PREFIX_SCALE * prefix * (1.0 - jaro)


def fuzzy_match(query: str, target: str, options: Optional[FuzzyOptions] = None) -> MatchOutcome:
    """
    Score query against target.

    Rules are tried in priority order and the first one that applies wins;
    scores are not cumulative.

    Args:
        query: Free-text query
        target: Candidate name
        options: Bonuses and case sensitivity (thresholds are ignored here)

    Returns:
        MatchOutcome(score, type)

    Example:
        >>> fuzzy_match("Ha Noi", "Thành phố Hà Nội")
        MatchOutcome(score=0.4, type='word')
        >>> fuzzy_match("thanh pho", "Thành phố Hà Nội")
        MatchOutcome(score=0.9, type='prefix')
    """
    from ..config import DEBUG_FUZZY

    options = options or _DEFAULT_OPTIONS

    if options.case_sensitive:
        q, t = query or '', target or ''
    else:
        q, t = normalize_text(query), normalize_text(target)

    # Exact match
    if q == t:
        return MatchOutcome(MATCH_TYPE_SCORES['exact'] + options.exact_match_bonus, 'exact')

    # Prefix match
    if t.startswith(q):
        return MatchOutcome(MATCH_TYPE_SCORES['prefix'] + options.prefix_match_bonus, 'prefix')

    # Word match: a query word is a prefix of a target word, or vice versa
    query_words = WORD_SPLIT_PATTERN.split(q)
    target_words = WORD_SPLIT_PATTERN.split(t)

    word_matches = 0
    for query_word in query_words:
        for target_word in target_words:
            if target_word.startswith(query_word) or query_word.startswith(target_word):
                word_matches += 1
                break

    if word_matches > 0:
        ratio = word_matches / max(len(query_words), len(target_words))
        score = ratio * MATCH_TYPE_SCORES['word'] + options.word_match_bonus
        return MatchOutcome(score, 'word')

    # Fuzzy fallback: weighted blend of both algorithms
    lev_score = levenshtein_normalized(q, t)
    jw_score = jaro_winkler_similarity(q, t)
    score = lev_score * FUZZY_WEIGHTS['levenshtein'] + jw_score * FUZZY_WEIGHTS['jaro_winkler']

    if DEBUG_FUZZY in ('FULL', True):
        logger.debug(f"[FUZZY] '{q}' vs '{t}': levenshtein={lev_score:.3f} "
                     f"jaro_winkler={jw_score:.3f} → {score:.3f}")

    return MatchOutcome(score, 'fuzzy')


def clear_cache():
    """Clear all LRU caches to free memory."""
    levenshtein_distance.cache_clear()
    levenshtein_normalized.cache_clear()
    jaro_similarity.cache_clear()
    jaro_winkler_similarity.cache_clear()


def get_cache_stats() -> dict:
    """
    Get statistics about cache usage.

    Returns:
        Dictionary with cache statistics
    """
    return {
        'levenshtein_distance': levenshtein_distance.cache_info()._asdict(),
        'levenshtein_normalized': levenshtein_normalized.cache_info()._asdict(),
        'jaro_similarity': jaro_similarity.cache_info()._asdict(),
        'jaro_winkler_similarity': jaro_winkler_similarity.cache_info()._asdict(),
    }
