"""
AdminDirectory - one handle over every service for a registry.

Collaborators (export, analytics, validation, UI code) receive a
directory and only call its services; they never touch index internals.

Example:
    >>> directory = AdminDirectory()
    >>> directory.lookup.get_by_id('province', '79').name
    'Thành phố Hồ Chí Minh'
    >>> directory.hierarchy.get_formatted_address('ward', '26734')
    'Phường Tân Định, Thành phố Hồ Chí Minh'
"""
import threading
from typing import Optional

from .registry import Registry, get_registry
from .services import (
    AutocompleteService,
    BatchService,
    FuzzyService,
    HierarchyService,
    LookupService,
    SearchService,
    ValidationService,
)


class AdminDirectory:
    """
    Services bundled over one registry.

    Args:
        registry: Registry to use (default: a new one over the default hierarchy)
    """

    def __init__(self, registry: Optional[Registry] = None):
        self.registry = registry or Registry()
        self.lookup = LookupService(self.registry)
        self.search = SearchService(self.registry)
        self.fuzzy = FuzzyService(self.registry)
        self.hierarchy = HierarchyService(self.registry)
        self.autocomplete = AutocompleteService(self.registry)
        self.batch = BatchService(self.registry, self.hierarchy)
        self.validation = ValidationService(self.registry)

    def __repr__(self) -> str:
        return f"AdminDirectory({self.registry!r})"


_DEFAULT_DIRECTORY: Optional[AdminDirectory] = None
_DEFAULT_LOCK = threading.Lock()


def get_directory() -> AdminDirectory:
    """
    Directory bound to the process-wide registry.

    Rebuilt when reset_registry() has swapped the registry, so memoized
    results never outlive the data they were computed from.
    """
    global _DEFAULT_DIRECTORY

    registry = get_registry()
    with _DEFAULT_LOCK:
        if _DEFAULT_DIRECTORY is None or _DEFAULT_DIRECTORY.registry is not registry:
            _DEFAULT_DIRECTORY = AdminDirectory(registry)
        return _DEFAULT_DIRECTORY
