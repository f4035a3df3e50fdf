"""
Configuration settings for administrative unit lookup and matching.
"""
from pathlib import Path

from .models import Hierarchy, Level


# Base paths
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / 'data'

# Hierarchy definitions
# Field names follow the raw seed records (idProvince, idWard, ...)
# ID patterns are advisory only; lookups never reject an ID by shape
HIERARCHIES = {
    'vietnam': Hierarchy(
        name='vietnam',
        levels=(
            Level('province', id_field='idProvince', id_pattern=r'^\d{2}$'),
            Level('ward', id_field='idWard', parent_field='idProvince', id_pattern=r'^\d{5}$'),
        ),
    ),
    'vietnam_legacy': Hierarchy(
        name='vietnam_legacy',
        levels=(
            Level('province', id_field='idProvince', id_pattern=r'^\d{2}$'),
            Level('district', id_field='idDistrict', parent_field='idProvince', id_pattern=r'^\d{3}$'),
            Level('commune', id_field='idCommune', parent_field='idDistrict', id_pattern=r'^\d{5}$'),
        ),
    ),
}
DEFAULT_HIERARCHY = 'vietnam'

# Fuzzy search defaults
# Note: None in FuzzyOptions falls back to these, so an explicit 0 is honoured
FUZZY_DEFAULTS = {
    'threshold': 0.3,
    'max_results': 50,
}

# Base scores per match type (bonuses from FuzzyOptions are added on top)
MATCH_TYPE_SCORES = {
    'exact': 1.0,
    'prefix': 0.9,
    'word': 0.8,   # multiplied by the matched word ratio
}

# Fuzzy fallback blend
FUZZY_WEIGHTS = {
    'levenshtein': 0.6,
    'jaro_winkler': 0.4,
}

# Jaro-Winkler prefix bonus: scale * prefix_len * (1 - jaro), prefix capped at 4
JARO_WINKLER_PREFIX_SCALE = 0.1
JARO_WINKLER_MAX_PREFIX = 4

# Correction suggestions and duplicate detection
SUGGESTION_THRESHOLD = 0.4
SUGGESTION_MAX_RESULTS = 10
SIMILAR_NAME_THRESHOLD = 0.8

# Universal search sort policies
SORT_POLICIES = ('score', 'name', 'relevance')

# Autocomplete scoring tiers (higher is better)
AUTOCOMPLETE_SCORES = {
    'exact': 100,
    'prefix': 90,      # minus the unmatched tail length
    'contains': 70,    # minus 2x the match position
    'word_prefix': 50  # minus the unmatched word tail length
}
AUTOCOMPLETE_LIMIT = 10
UNIVERSAL_AUTOCOMPLETE_LIMIT = 15

# Cache settings
CACHE_MAX_SIZE = 10000

# Debug logging flags
# DEBUG_FUZZY: OFF | WINNERS (log top result per search) | FULL (every comparison)
DEBUG_INDEX = False     # Log index sizes per level after a build
DEBUG_FUZZY = 'OFF'
