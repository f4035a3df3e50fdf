"""
Module-level access to the process-wide directory.

These are the operations collaborators are meant to call:

    get_all(level)                          ordered list of Region
    get_by_id(level, id)                    Region or None
    get_children(level, parent_id)          list of Region ([] if none)
    is_valid_id(level, id)                  bool
    search_by_name(level, query)            unordered, deduplicated Regions
    fuzzy_search(level, query, options)     ranked FuzzySearchResults
    universal_fuzzy_search(query, options)  per-level + combined results
"""
from typing import List, Optional

from .directory import get_directory
from .models import FuzzyOptions, FuzzySearchResult, Region, SearchOptions, UniversalSearchResult


def get_all(level: str) -> List[Region]:
    return get_directory().lookup.get_all(level)


def get_by_id(level: str, region_id: str) -> Optional[Region]:
    return get_directory().lookup.get_by_id(level, region_id)


def get_children(level: str, parent_id: str) -> List[Region]:
    return get_directory().lookup.get_children(level, parent_id)


def is_valid_id(level: str, region_id: str) -> bool:
    return get_directory().lookup.is_valid_id(level, region_id)


def search_by_name(level: str, query: str) -> List[Region]:
    return get_directory().search.search_by_name(level, query)


def fuzzy_search(level: str, query: str, options: Optional[FuzzyOptions] = None) -> List[FuzzySearchResult]:
    return get_directory().fuzzy.fuzzy_search(level, query, options)


def universal_fuzzy_search(query: str, options: Optional[SearchOptions] = None) -> UniversalSearchResult:
    return get_directory().fuzzy.universal_fuzzy_search(query, options)
