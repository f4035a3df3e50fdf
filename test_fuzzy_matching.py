#!/usr/bin/env python3
"""
Test script for fuzzy matching: the scoring rules, per-level fuzzy
search, universal search with filters, similar names and corrections.
"""
import pytest

from vnadmin.errors import UnknownLevelError
from vnadmin.models import FuzzyOptions, SearchFilters, SearchOptions
from vnadmin.services import FuzzyService
from vnadmin.utils.matching_utils import (
    common_prefix_length,
    fuzzy_match,
    jaro_similarity,
    jaro_winkler_similarity,
    levenshtein_distance,
    levenshtein_normalized,
)
from vnadmin.utils.text_utils import name_sort_key


@pytest.fixture
def fuzzy(registry):
    return FuzzyService(registry)


# ---------- string similarity ----------

def test_levenshtein():
    assert levenshtein_distance("ba dinh", "ba din") == 1
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_normalized("ba dinh", "ba din") == pytest.approx(1 - 1 / 7)
    assert levenshtein_normalized("", "") == 1.0
    assert levenshtein_normalized("abc", "xyz") == 0.0


def test_jaro_winkler_reference_values():
    assert jaro_similarity("martha", "marhta") == pytest.approx(0.9444, abs=1e-4)
    assert jaro_winkler_similarity("martha", "marhta") == pytest.approx(0.9611, abs=1e-4)
    assert jaro_winkler_similarity("dwayne", "duane") == pytest.approx(0.84, abs=1e-2)


def test_jaro_on_multi_word_names():
    """Window is floor(max(len) / 2) - 1; every out-of-order matched pair counts."""
    assert jaro_similarity("ho chi mihn", "thanh pho ha noi") == pytest.approx(0.5966, abs=1e-4)
    assert jaro_winkler_similarity("ho chi mihn", "thanh pho ha noi") == pytest.approx(0.5966, abs=1e-4)
    assert jaro_similarity("ac ", "c aa  ") == pytest.approx(2 / 3)
    # 17 chars, last one differs; common prefix capped at 4
    assert jaro_similarity("phuong mong cai 1", "phuong mong cai 2") == pytest.approx((16 / 17 * 2 + 1) / 3)
    assert jaro_winkler_similarity("phuong mong cai 1", "phuong mong cai 2") == \
        pytest.approx((16 / 17 * 2 + 1) / 3 * 0.6 + 0.4)


def test_jaro_single_characters():
    # Window of -1: two different one-character strings share nothing
    assert jaro_similarity("a", "b") == 0.0
    assert jaro_winkler_similarity("a", "b") == 0.0


def test_jaro_empty_strings():
    assert jaro_similarity("", "") == 1.0
    assert jaro_similarity("", "abc") == 0.0
    assert jaro_winkler_similarity("abc", "") == 0.0


def test_common_prefix_capped_at_four():
    assert common_prefix_length("phuong a", "phuong b") == 4
    assert common_prefix_length("abc", "abd") == 2
    assert common_prefix_length("x", "y") == 0


# ---------- fuzzy_match rules ----------

def test_exact_match_ignores_accents_and_case():
    outcome = fuzzy_match("HÀ NỘI", "ha noi")
    assert outcome.type == 'exact'
    assert outcome.score == 1.0


def test_prefix_match():
    outcome = fuzzy_match("thanh pho", "Thành phố Hà Nội")
    assert outcome == (0.9, 'prefix')


def test_partial_name_is_word_match():
    print("=" * 60)
    print("TEST: 'Ha Noi' vs 'Thành phố Hà Nội'")
    print("=" * 60)
    outcome = fuzzy_match("Ha Noi", "Thành phố Hà Nội")
    print(f"  {outcome}")
    assert outcome.type in ('word', 'fuzzy')
    assert 0.3 <= outcome.score < 0.9
    # 2 of max(2, 4) words matched
    assert outcome.score == pytest.approx(0.4)
    print("✅ PASSED")


def test_word_prefixes_match_both_ways():
    # "ninhh" starts with the target word "ninh"
    outcome = fuzzy_match("tay ninhh", "Tỉnh Tây Ninh")
    assert outcome.type == 'word'
    assert outcome.score == pytest.approx(2 / 3 * 0.8)


def test_typo_falls_back_to_fuzzy():
    outcome = fuzzy_match("xaigon", "Sài Gòn")
    assert outcome.type == 'fuzzy'
    assert 0.5 < outcome.score < 1.0


def test_first_rule_wins():
    """An exact match is never also scored as prefix or word."""
    assert fuzzy_match("Huế", "Huế").type == 'exact'
    assert fuzzy_match("Móng Cái", "Móng Cái 1").type == 'prefix'


def test_match_bonuses():
    assert fuzzy_match("hue", "Huế", FuzzyOptions(exact_match_bonus=0.5)).score == pytest.approx(1.5)
    assert fuzzy_match("mong", "Móng Cái", FuzzyOptions(prefix_match_bonus=0.05)).score == pytest.approx(0.95)
    assert fuzzy_match("Ha Noi", "Thành phố Hà Nội", FuzzyOptions(word_match_bonus=0.1)).score == pytest.approx(0.5)
    # Bonuses only apply to their own rule
    assert fuzzy_match("hue", "Huế", FuzzyOptions(prefix_match_bonus=0.5)).score == 1.0


def test_case_sensitive_skips_normalization():
    assert fuzzy_match("ha noi", "Ha Noi").type == 'exact'
    outcome = fuzzy_match("ha noi", "Ha Noi", FuzzyOptions(case_sensitive=True))
    assert outcome.type == 'fuzzy'
    assert outcome.score < 1.0


# ---------- per-level fuzzy search ----------

def test_fuzzy_search_ranks_best_first(fuzzy):
    results = fuzzy.fuzzy_search('province', 'thanh pho ho chi')
    assert results[0].item.id == '79'
    assert results[0].level == 'province'
    assert results[0].matches[0].field == 'name'
    assert results[0].matches[0].type == 'prefix'

    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)



def test_partial_name_scores_by_word_ratio(fuzzy):
    """First rule wins: a word match is not rescored by the fuzzy blend."""
    results = fuzzy.fuzzy_search('province', 'ho chi minh')
    by_id = {r.item.id: r for r in results}
    assert by_id['79'].matches[0].type == 'word'
    # 3 of max(3, 5) words
    assert by_id['79'].score == pytest.approx(3 / 5 * 0.8)


def test_fuzzy_search_exact_name(fuzzy):
    results = fuzzy.fuzzy_search('ward', 'Phường Tân Định')
    assert results[0].item.id == '26734'
    assert results[0].score == 1.0


def test_fuzzy_search_respects_threshold(fuzzy):
    for threshold in (0.3, 0.5, 0.8):
        results = fuzzy.fuzzy_search('ward', 'phuong ba dinh', FuzzyOptions(threshold=threshold))
        assert all(r.score >= threshold for r in results)


def test_threshold_monotonicity(fuzzy):
    """Raising the threshold never adds results."""
    previous = None
    for threshold in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0):
        ids = {r.item.id for r in fuzzy.fuzzy_search('ward', 'tan dinh', FuzzyOptions(threshold=threshold, max_results=1000))}
        if previous is not None:
            assert ids <= previous
        previous = ids


def test_explicit_zero_threshold_keeps_everything(fuzzy):
    results = fuzzy.fuzzy_search('province', 'zz', FuzzyOptions(threshold=0, max_results=100))
    assert len(results) == 34


def test_max_results_bound(fuzzy):
    results = fuzzy.fuzzy_search('ward', 'phuong', FuzzyOptions(threshold=0, max_results=5))
    assert len(results) == 5
    assert fuzzy.fuzzy_search('ward', 'phuong', FuzzyOptions(max_results=0)) == []


def test_default_max_results(fuzzy):
    results = fuzzy.fuzzy_search('ward', 'phuong', FuzzyOptions(threshold=0))
    assert len(results) == 50


def test_ties_keep_dataset_order(fuzzy, registry):
    results = fuzzy.fuzzy_search('ward', 'phuong', FuzzyOptions(threshold=0.9, max_results=100))
    ward_order = [w.id for w in registry.get_records('ward')]
    ids = [r.item.id for r in results]
    assert ids == [i for i in ward_order if i in set(ids)]


def test_fuzzy_search_blank_query(fuzzy):
    assert fuzzy.fuzzy_search('province', '') == []
    assert fuzzy.fuzzy_search('province', '  ') == []
    # Only combining marks: nothing left after normalization
    assert fuzzy.fuzzy_search('province', '\u0301') == []
    assert fuzzy.universal_fuzzy_search('\u0301 \u0300').combined == []


def test_fuzzy_search_unknown_level(fuzzy):
    with pytest.raises(UnknownLevelError):
        fuzzy.fuzzy_search('district', 'ba dinh')


def test_invalid_options():
    with pytest.raises(ValueError):
        SearchOptions(sort_by='popularity')
    with pytest.raises(ValueError):
        FuzzyOptions(threshold=-0.1)
    with pytest.raises(ValueError):
        FuzzyOptions(max_results=-1)


# ---------- universal fuzzy search ----------

def test_universal_search_covers_all_levels(fuzzy):
    result = fuzzy.universal_fuzzy_search('Phường Tân Định')
    assert set(result.by_level) == {'province', 'ward'}
    assert result.combined[0].item.id == '26734'
    assert result.combined[0].level == 'ward'


def test_level_filter_empties_other_levels(fuzzy):
    print("=" * 60)
    print("TEST: level filter keeps only province results")
    print("=" * 60)
    result = fuzzy.universal_fuzzy_search('Ha', SearchOptions(threshold=0.1, filters=SearchFilters(level='province')))
    print(f"  province: {len(result.by_level['province'])}, ward: {len(result.by_level['ward'])}")
    assert result.by_level['ward'] == []
    assert result.by_level['province']
    assert all(r.level == 'province' for r in result.combined)
    print("✅ PASSED")


def test_unknown_level_filter_empties_everything(fuzzy):
    result = fuzzy.universal_fuzzy_search('phuong', SearchOptions(filters=SearchFilters(level='county')))
    assert all(results == [] for results in result.by_level.values())
    assert result.combined == []


def test_parent_filter(fuzzy):
    options = SearchOptions(threshold=0.5, max_results=100, filters=SearchFilters(parent_id='79'))
    result = fuzzy.universal_fuzzy_search('phuong', options)
    assert {r.item.id for r in result.by_level['ward']} == {
        '26740', '26734', '26743', '26758', '27154', '27139',
        '26800', '26929', '26890', '25747', '26506', '26560',
    }


def test_parent_filter_checks_grandparents(legacy_registry):
    fuzzy = FuzzyService(legacy_registry)
    options = SearchOptions(threshold=0.5, max_results=100, filters=SearchFilters(parent_id='79'))
    result = fuzzy.universal_fuzzy_search('phuong', options)
    assert {r.item.id for r in result.by_level['commune']} == {
        '26734', '26737', '26740', '26743', '27139', '27142', '27163', '27166', '27169',
    }


@pytest.mark.parametrize('sort_by', ['score', 'name', 'relevance'])
def test_combined_sort_policies(fuzzy, registry, sort_by):
    result = fuzzy.universal_fuzzy_search('thanh', SearchOptions(threshold=0.2, sort_by=sort_by))
    combined = result.combined
    assert combined

    if sort_by == 'score':
        keys = [-r.score for r in combined]
    elif sort_by == 'name':
        keys = [name_sort_key(r.item.name) for r in combined]
    else:
        keys = [(-r.score, registry.hierarchy.index_of(r.level)) for r in combined]
    assert keys == sorted(keys)


def test_combined_list_truncated(fuzzy):
    result = fuzzy.universal_fuzzy_search('phuong', SearchOptions(threshold=0, max_results=7))
    assert len(result.combined) == 7
    assert len(result.by_level['ward']) == 7


# ---------- similar names & corrections ----------

def test_find_similar_names_excludes_self(fuzzy):
    assert fuzzy.find_similar_names('Thành phố Hà Nội', 'province', 0.99) == []


def test_find_similar_names_numbered_wards(fuzzy):
    results = fuzzy.find_similar_names('Phường Móng Cái 1', 'ward', 0.9)
    ids = [r.item.id for r in results]
    assert '06835' in ids and '06838' in ids
    assert '06832' not in ids
    similarities = [r.similarity for r in results]
    assert similarities == sorted(similarities, reverse=True)


def test_suggest_corrections(fuzzy):
    suggestions = fuzzy.suggest_corrections('Tinh Tay Ninhh', level='province')
    assert suggestions[0].suggestion == 'Tỉnh Tây Ninh'
    assert suggestions[0].level == 'province'
    assert suggestions[0].item.id == '80'
    assert suggestions[0].confidence == pytest.approx(0.8)
    assert all(s.confidence >= 0.4 for s in suggestions)


def test_suggest_corrections_all_levels(fuzzy):
    suggestions = fuzzy.suggest_corrections('Phuong Ben Thanhh')
    assert suggestions[0].item.id == '26743'
    assert suggestions[0].level == 'ward'
    assert suggestions[0].confidence == pytest.approx(0.8)
    assert len(suggestions) <= 10


def test_similarity_caches_can_be_cleared():
    from vnadmin.utils import matching_utils

    matching_utils.clear_cache()
    jaro_winkler_similarity("tan dinh", "tan dinhh")
    jaro_winkler_similarity("tan dinh", "tan dinhh")
    stats = matching_utils.get_cache_stats()
    assert stats['jaro_winkler_similarity']['hits'] >= 1

    matching_utils.clear_cache()
    assert matching_utils.get_cache_stats()['jaro_winkler_similarity']['currsize'] == 0
