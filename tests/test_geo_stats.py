import pytest

from listingsearch.search.geo import haversine_km, has_location, nearby
from listingsearch.search.stats import basic, facet_domains, facet_values, summary_stats


def test_haversine_known_distance():
    # about 1.7 km along one parallel in Metro Manila
    d = haversine_km(14.5547, 121.0244, 14.5547, 121.0400)
    assert d == pytest.approx(1.68, abs=0.05)
    assert haversine_km(14.0, 121.0, 14.0, 121.0) == 0


def test_nearby_closest_first(sample_listings):
    center = sample_listings[1]  # BGC condo
    out = nearby(sample_listings, center, radius_km=2.0)
    assert [l.id for l, _ in out] == ['G00005']
    assert out[0][1] == pytest.approx(0.6, abs=0.05)
    wider = nearby(sample_listings, center, radius_km=100)
    ids = [l.id for l, _ in wider]
    assert ids[0] == 'G00005'
    assert 'G00003' not in ids  # no coordinates
    distances = [d for _, d in wider]
    assert distances == sorted(distances)


def test_center_without_location_has_no_neighbours(sample_listings):
    assert nearby(sample_listings, sample_listings[2], radius_km=500) == []
    assert not has_location(sample_listings[2])


def test_facet_values_follow_transaction(sample_listings):
    assert facet_values(sample_listings, 'price') == [4_200_000, 18_500_000, 9_800_000, 32_000_000]
    assert facet_values(sample_listings, 'price', 'Lease') == [90_000, 350_000, 180_000]


def test_facet_domains(sample_listings):
    domains = facet_domains(sample_listings)
    assert domains['price'].min == 4_000_000
    assert domains['price'].max == 32_000_000
    assert domains['price'].step == 1_000_000
    assert set(domains) == {'price', 'price_per_sqm', 'lot_area', 'floor_area'}
    assert facet_domains([]) == {}


def test_basic_stats():
    assert basic([]) == {'count': 0}
    s = basic([1, 2, 3, 10])
    assert s == {'count': 4, 'mean': 4.0, 'median': 2.5, 'min': 1, 'max': 10}


def test_summary_stats(sample_listings):
    s = summary_stats(sample_listings)
    assert s['price_stats']['count'] == 4
    assert s['with_location'] == 4
