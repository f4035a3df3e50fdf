"""
Services built on the registry indexes.
"""
from .autocomplete import AutocompleteService
from .batch import BatchService
from .fuzzy import FuzzyService
from .hierarchy import HierarchyService
from .lookup import LookupService
from .search import SearchService
from .validation import ValidationService

__all__ = [
    'AutocompleteService',
    'BatchService',
    'FuzzyService',
    'HierarchyService',
    'LookupService',
    'SearchService',
    'ValidationService',
]
