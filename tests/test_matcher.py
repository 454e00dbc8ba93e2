import pytest

from listingsearch.search.matcher import compute_relevance, match, query_tokens, token_strength


def test_blank_query_returns_input_unchanged(sample_listings):
    for q in ('', '   ', '\t'):
        out = match(sample_listings, q, 100)
        assert out == sample_listings
        assert [l.id for l in out] == [l.id for l in sample_listings]


@pytest.mark.parametrize('strictness', [0, 25, 50, 75, 100])
def test_exact_id_always_included_and_flagged(sample_listings, strictness):
    out = match(sample_listings, 'g00004', strictness)
    assert out[0].id == 'G00004'
    assert out[0].exact_id_match is True
    # the stored record is untouched
    assert sample_listings[3].exact_id_match is False


def test_ranking_most_relevant_first(sample_listings):
    out = match(sample_listings, 'condo Taguig', 0)
    assert out[0].id == 'G00002'


def test_strictness_narrows_results(sample_listings):
    loose = match(sample_listings, 'cavite warehouse', 0)
    strict = match(sample_listings, 'cavite warehouse', 90)
    assert {l.id for l in strict} <= {l.id for l in loose}
    assert [l.id for l in strict] == ['G00003']
    assert 'G00001' in {l.id for l in loose}


def test_fuzzy_match_only_at_low_strictness(sample_listings):
    # misspelt "warehouse"
    assert [l.id for l in match(sample_listings, 'warehose', 0)] == ['G00003']
    assert match(sample_listings, 'warehose', 90) == []


def test_ties_keep_input_order(listing_factory):
    listings = [listing_factory(f'X{i}', summary='house and lot') for i in range(5)]
    out = match(listings, 'house', 50)
    assert [l.id for l in out] == ['X0', 'X1', 'X2', 'X3', 'X4']


def test_no_match_is_empty(sample_listings):
    assert match(sample_listings, 'zzzzqqq', 0) == []


def test_match_does_not_mutate_input(sample_listings):
    before = list(sample_listings)
    match(sample_listings, 'condo', 0)
    assert sample_listings == before


def test_query_tokens_drop_stopwords():
    assert query_tokens('Lot in Cavite') == ['lot', 'cavite']
    assert query_tokens('in the') == ['in', 'the']


def test_token_strength_levels():
    assert token_strength('lot', ['lot']) == 1.0
    assert token_strength('cav', ['cavite']) == 0.85
    assert token_strength('ware', ['bigwarehouse']) == 0.7
    assert 0 < token_strength('warehose', ['warehouse']) <= 0.6
    assert token_strength('xyz', ['cavite']) == 0.0


def test_compute_relevance_half_match(listing_factory):
    l = listing_factory(summary='lot')
    assert compute_relevance(l, ['lot', 'zzzzzz']) == 50.0
    assert compute_relevance(l, []) == 0.0
