#!/usr/bin/env python3
"""
Test script for ID lookups and name search over the bundled data.
"""
import pytest

from vnadmin.errors import UnknownLevelError
from vnadmin.services import LookupService, SearchService
from vnadmin.utils.text_utils import name_sort_key


@pytest.fixture
def lookup(registry):
    return LookupService(registry)


@pytest.fixture
def search(registry):
    return SearchService(registry)


# ---------- lookup ----------

def test_get_by_id(lookup):
    province = lookup.get_by_id('province', '79')
    assert province.name == 'Thành phố Hồ Chí Minh'
    assert province.level == 'province'
    assert province.parent_id is None

    ward = lookup.get_by_id('ward', '26734')
    assert ward.name == 'Phường Tân Định'
    assert ward.parent_id == '79'


def test_get_by_id_unknown_is_none(lookup):
    assert lookup.get_by_id('province', '999') is None
    assert not lookup.is_valid_id('province', '999')
    assert lookup.is_valid_id('province', '01')


def test_get_all_keeps_dataset_order(lookup):
    provinces = lookup.get_all('province')
    assert len(provinces) == 34
    assert provinces[0].id == '01'
    assert provinces[-1].id == '96'


def test_get_children(lookup):
    names = [w.name for w in lookup.get_children('province', '22')]
    assert names == ['Phường Hạ Long', 'Phường Bãi Cháy', 'Phường Móng Cái 1',
                     'Phường Móng Cái 2', 'Phường Móng Cái 3']


def test_get_children_unknown_parent(lookup):
    assert lookup.get_children('province', '999') == []


def test_get_parent(lookup):
    assert lookup.get_parent('ward', '26734').id == '79'
    assert lookup.get_parent('province', '79') is None
    assert lookup.get_parent('ward', '99999') is None


def test_get_all_sorted(lookup):
    names = [w.name for w in lookup.get_all_sorted('ward')]
    assert names == sorted(names, key=name_sort_key)
    assert names.index('Phường An Xuyên') < names.index('Phường Ba Đình')
    assert names.index('Phường Móng Cái 2') < names.index('Phường Móng Cái 3')


def test_get_all_sorted_is_memoized(lookup):
    lookup.get_all_sorted('province')
    lookup.get_all_sorted('province')
    info = lookup._sorted_records.cache_info()
    assert info['misses'] == 1
    assert info['hits'] == 1


def test_get_all_sorted_returns_fresh_lists(lookup):
    first = lookup.get_all_sorted('province')
    first.clear()
    assert len(lookup.get_all_sorted('province')) == 34


def test_unknown_level(lookup):
    with pytest.raises(UnknownLevelError) as exc_info:
        lookup.get_all('district')
    assert exc_info.value.level == 'district'
    assert 'province' in str(exc_info.value)


# ---------- search ----------

def test_search_without_accents_finds_hanoi(search):
    print("=" * 60)
    print("TEST: 'Ha Noi' finds Thành phố Hà Nội")
    print("=" * 60)
    results = search.search_by_name('province', 'Ha Noi')
    ids = [r.id for r in results]
    print(f"  results: {[r.name for r in results]}")
    assert '01' in ids
    print("✅ PASSED")


def test_search_query_is_normalized(search):
    assert search.search_by_name('province', 'HÀ NỘI') == search.search_by_name('province', 'ha noi')


def test_search_full_name(search):
    results = search.search_by_name('ward', 'Phường Tân Định')
    assert '26734' in [r.id for r in results]


def test_search_recall_for_every_record(registry, search):
    """Searching any record's own name returns that record."""
    for level in registry.hierarchy.names:
        for record in registry.get_records(level):
            assert record in search.search_by_name(level, record.name)


def test_search_results_are_unique(search):
    results = search.search_by_name('ward', 'phuong mong cai')
    assert len(results) == len({id(r) for r in results})
    assert {'06832', '06835', '06838'} <= {r.id for r in results}


def test_search_blank_query(search):
    assert search.search_by_name('province', '') == []
    assert search.search_by_name('province', '   ') == []


def test_search_blank_query_still_validates_level(search):
    with pytest.raises(UnknownLevelError):
        search.search_by_name('county', '')


def test_search_no_match(search):
    assert search.search_by_name('province', 'zzqx') == []


def test_search_by_name_sorted(search):
    results = search.search_by_name_sorted('ward', 'mong cai')
    names = [r.name for r in results]
    assert names == sorted(names, key=name_sort_key)
    assert [n for n in names if 'Móng' in n] == ['Phường Móng Cái 1', 'Phường Móng Cái 2', 'Phường Móng Cái 3']

    search.search_by_name_sorted('ward', 'mong cai')
    assert search._sorted_search.cache_info()['hits'] == 1


# ---------- legacy three-level hierarchy ----------

def test_legacy_children_chain(legacy_registry):
    lookup = LookupService(legacy_registry)
    districts = lookup.get_children('province', '79')
    assert [d.name for d in districts] == ['Quận 1', 'Quận 3', 'Quận 10']

    communes = lookup.get_children('district', '771')
    assert [c.name for c in communes] == ['Phường 10', 'Phường 2', 'Phường 1']
    assert [c.name for c in lookup.get_all_sorted('commune') if c.parent_id == '771'] == \
        ['Phường 1', 'Phường 2', 'Phường 10']


def test_legacy_search_district(legacy_registry):
    search = SearchService(legacy_registry)
    assert '001' in [d.id for d in search.search_by_name('district', 'ba dinh')]
