"""
Index construction for O(1) lookups over one level's records.

Three indexes per level:
1. id → record
2. parent id → ordered children
3. search token → records (full name, words, prefixes)

The search index trades memory for lookup speed: a name of length n
produces up to n-1 prefix keys. Fine for a few thousand short names.

Example:
    >>> ids = build_id_index(regions)
    >>> ids['01'].name
    'Thành phố Hà Nội'
    >>> build_search_index(regions)['thanh pho ha noi']
    (Region(id='01', name='Thành phố Hà Nội', ...),)
"""
from collections import Counter, defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence

from .text_utils import normalize_text, split_words


def build_id_index(records: Iterable, id_attr: str = 'id') -> Mapping:
    """
    Map each record's ID to the record.

    Duplicate IDs: last write wins (see find_duplicate_ids()).

    Args:
        records: Iterable of records
        id_attr: Attribute holding the ID

    Returns:
        Read-only mapping {id: record}
    """
    index = {}
    for record in records:
        index[getattr(record, id_attr)] = record
    return MappingProxyType(index)


def build_parent_index(records: Iterable, parent_attr: str = 'parent_id') -> Mapping:
    """
    Group records by parent ID, preserving input order in each bucket.

    Records without a parent reference are skipped.

    Args:
        records: Iterable of records
        parent_attr: Attribute holding the parent ID

    Returns:
        Read-only mapping {parent_id: tuple of records}
    """
    buckets: Dict[str, List] = defaultdict(list)
    for record in records:
        parent_id = getattr(record, parent_attr)
        if parent_id is None:
            continue
        buckets[parent_id].append(record)
    return MappingProxyType({key: tuple(items) for key, items in buckets.items()})


def iter_search_tokens(name: str) -> List[str]:
    """
    Index keys produced by one name, in insertion order.

    Example:
        >>> iter_search_tokens("Xã Mỹ An")
        ['xa my an', 'xa', 'my', 'an', 'xa', 'xa ', 'xa m', 'xa my', 'xa my ', 'xa my a', 'xa my an']
    """
    normalized = normalize_text(name)
    tokens = [normalized]

    # Individual words (skip single characters)
    tokens.extend(word for word in split_words(normalized) if len(word) > 1)

    # Prefixes of length >= 2 (for autocomplete-style lookups)
    tokens.extend(normalized[:i] for i in range(2, len(normalized) + 1))

    return tokens


def build_search_index(records: Iterable, name_attr: str = 'name') -> Mapping:
    """
    Build token → records index from record names.

    A record appears at most once per key, even when a key is produced
    twice by the same name (e.g. a one-word name is both word and prefix).

    Args:
        records: Iterable of records
        name_attr: Attribute holding the display name

    Returns:
        Read-only mapping {token: tuple of records}
    """
    index: Dict[str, List] = {}
    for record in records:
        seen = set()
        for token in iter_search_tokens(getattr(record, name_attr)):
            if token in seen:
                continue
            seen.add(token)
            index.setdefault(token, []).append(record)
    return MappingProxyType({key: tuple(items) for key, items in index.items()})


def find_duplicate_ids(records: Iterable, id_attr: str = 'id') -> List[str]:
    """Return IDs that occur more than once, in first-seen order."""
    counts = Counter(getattr(record, id_attr) for record in records)
    return [record_id for record_id, count in counts.items() if count > 1]


def get_index_stats(
    records: Sequence,
    id_index: Mapping,
    parent_index: Mapping,
    search_index: Mapping
) -> Dict[str, int]:
    """Sizes of one level's indexes."""
    return {
        'records': len(records),
        'ids': len(id_index),
        'parents': len(parent_index),
        'tokens': len(search_index),
        'token_entries': sum(len(items) for items in search_index.values()),
    }
