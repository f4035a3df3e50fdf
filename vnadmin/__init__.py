"""
vnadmin: lookup, search and fuzzy matching over Vietnam's administrative units.

Quick start:
    >>> from vnadmin import get_by_id, get_children, fuzzy_search
    >>> get_by_id('province', '01').name
    'Thành phố Hà Nội'
    >>> fuzzy_search('province', 'thanh pho ho chi')[0].item.id
    '79'
"""
from .api import (
    fuzzy_search,
    get_all,
    get_by_id,
    get_children,
    is_valid_id,
    search_by_name,
    universal_fuzzy_search,
)
from .directory import AdminDirectory, get_directory
from .errors import DatasetError, UnknownLevelError, VnAdminError
from .models import (
    FuzzyOptions,
    FuzzySearchResult,
    Hierarchy,
    Level,
    Region,
    SearchFilters,
    SearchOptions,
    UniversalSearchResult,
)
from .registry import Registry, get_registry, reset_registry
from .utils.text_utils import normalize_text

__version__ = "0.1.0"

__all__ = [
    # Operations
    'get_all',
    'get_by_id',
    'get_children',
    'is_valid_id',
    'search_by_name',
    'fuzzy_search',
    'universal_fuzzy_search',
    'normalize_text',
    # Registry and services
    'AdminDirectory',
    'Registry',
    'get_directory',
    'get_registry',
    'reset_registry',
    # Types
    'FuzzyOptions',
    'FuzzySearchResult',
    'Hierarchy',
    'Level',
    'Region',
    'SearchFilters',
    'SearchOptions',
    'UniversalSearchResult',
    # Errors
    'DatasetError',
    'UnknownLevelError',
    'VnAdminError',
]
