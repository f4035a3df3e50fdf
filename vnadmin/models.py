"""
Data structures for administrative units, hierarchies and search results.

All record types are frozen: the dataset is loaded once and shared
between every caller for the life of the process.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import UnknownLevelError


@dataclass(frozen=True)
class Level:
    """One tier of the administrative hierarchy (province, ward, ...)."""

    name: str
    id_field: str
    parent_field: Optional[str] = None
    id_pattern: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.parent_field is None

    def to_raw(self, region: 'Region') -> Dict[str, str]:
        """Render a region back into its raw seed-record shape."""
        raw = {self.id_field: region.id, 'name': region.name}
        if self.parent_field and region.parent_id is not None:
            raw[self.parent_field] = region.parent_id
        return raw


@dataclass(frozen=True)
class Hierarchy:
    """
    Ordered list of levels, coarsest first.

    Each level's records reference the previous level's records by ID.

    Example:
        >>> h = Hierarchy('vietnam', (Level('province', 'idProvince'),
        ...                           Level('ward', 'idWard', 'idProvince')))
        >>> h.child_of('province').name
        'ward'
    """

    name: str
    levels: Tuple[Level, ...]

    def __post_init__(self):
        if len(self.levels) < 2:
            raise ValueError(f"Hierarchy '{self.name}' needs at least 2 levels")
        if not self.levels[0].is_root:
            raise ValueError(f"Hierarchy '{self.name}': first level must not have a parent field")
        for level in self.levels[1:]:
            if level.is_root:
                raise ValueError(f"Hierarchy '{self.name}': level '{level.name}' needs a parent field")

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(level.name for level in self.levels)

    @property
    def root(self) -> Level:
        return self.levels[0]

    def has_level(self, name: str) -> bool:
        return name in self.names

    def index_of(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError:
            raise UnknownLevelError(name, self.names) from None

    def get_level(self, name: str) -> Level:
        return self.levels[self.index_of(name)]

    def parent_of(self, name: str) -> Optional[Level]:
        idx = self.index_of(name)
        return self.levels[idx - 1] if idx > 0 else None

    def child_of(self, name: str) -> Optional[Level]:
        idx = self.index_of(name)
        return self.levels[idx + 1] if idx + 1 < len(self.levels) else None


@dataclass(frozen=True)
class Region:
    """A single administrative unit at some level."""

    id: str
    name: str
    level: str
    parent_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'id': self.id,
            'name': self.name,
            'level': self.level,
            'parent_id': self.parent_id,
        }


class LoadState(Enum):
    UNLOADED = 'unloaded'
    LOADING = 'loading'
    LOADED = 'loaded'


# === Search options ===

@dataclass(frozen=True)
class FuzzyOptions:
    """
    Options for fuzzy matching and per-level fuzzy search.

    threshold / max_results left as None use config.FUZZY_DEFAULTS.
    """

    threshold: Optional[float] = None
    max_results: Optional[int] = None
    case_sensitive: bool = False
    exact_match_bonus: float = 0.0
    prefix_match_bonus: float = 0.0
    word_match_bonus: float = 0.0

    def __post_init__(self):
        if self.threshold is not None and self.threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {self.threshold}")
        if self.max_results is not None and self.max_results < 0:
            raise ValueError(f"max_results must be >= 0, got {self.max_results}")

    def effective_threshold(self) -> float:
        from .config import FUZZY_DEFAULTS
        return FUZZY_DEFAULTS['threshold'] if self.threshold is None else self.threshold

    def effective_max_results(self) -> int:
        from .config import FUZZY_DEFAULTS
        return FUZZY_DEFAULTS['max_results'] if self.max_results is None else self.max_results


@dataclass(frozen=True)
class SearchFilters:
    """Narrowing for universal search: a single level and/or an ancestor ID."""

    level: Optional[str] = None
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class SearchOptions(FuzzyOptions):
    """Fuzzy options plus filters and the combined-list sort policy."""

    filters: Optional[SearchFilters] = None
    sort_by: str = 'score'

    def __post_init__(self):
        super().__post_init__()
        from .config import SORT_POLICIES
        if self.sort_by not in SORT_POLICIES:
            raise ValueError(f"sort_by must be one of {SORT_POLICIES}, got '{self.sort_by}'")


# === Results ===

@dataclass(frozen=True)
class MatchDetail:
    field: str
    value: str
    score: float
    type: str  # exact | prefix | word | fuzzy


@dataclass(frozen=True)
class FuzzySearchResult:
    item: Region
    score: float
    matches: Tuple[MatchDetail, ...]
    level: str


@dataclass(frozen=True)
class UniversalSearchResult:
    by_level: Dict[str, List[FuzzySearchResult]]
    combined: List[FuzzySearchResult]


@dataclass(frozen=True)
class SimilarName:
    item: Region
    similarity: float


@dataclass(frozen=True)
class CorrectionSuggestion:
    suggestion: str
    level: str
    confidence: float
    item: Region


@dataclass(frozen=True)
class AutocompleteResult:
    level: str
    id: str
    name: str
    score: int
    parent_name: Optional[str] = None


@dataclass(frozen=True)
class AddressPath:
    """Chain of regions from the root level down to the requested region."""

    regions: Tuple[Region, ...]

    def get(self, level: str) -> Optional[Region]:
        for region in self.regions:
            if region.level == level:
                return region
        return None

    @property
    def leaf(self) -> Region:
        return self.regions[-1]


@dataclass(frozen=True)
class RegionNode:
    region: Region
    children: Tuple['RegionNode', ...] = ()


@dataclass
class BatchResult:
    success: List[Region] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


@dataclass
class IntegrityReport:
    orphans: Dict[str, List[Region]] = field(default_factory=dict)
    duplicates: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not any(self.orphans.values()) and not any(self.duplicates.values())
