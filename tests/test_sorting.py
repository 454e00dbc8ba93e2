from listingsearch.search.models import SortState
from listingsearch.search.sorting import is_available, sort_listings


def test_unsorted_puts_available_then_linked_first(listing_factory):
    listings = [
        listing_factory('S1', status='Sold', facebook_link='https://fb/1'),
        listing_factory('A1'),
        listing_factory('A2', facebook_link='https://fb/2'),
        listing_factory('R1', status='Reserved'),
        listing_factory('A3', facebook_link='https://fb/3'),
    ]
    out = sort_listings(listings, None)
    assert [l.id for l in out] == ['A2', 'A3', 'A1', 'S1', 'R1']


def test_available_first_holds_under_any_sort(sample_listings):
    for key in ('price', 'pricePerArea', 'lotArea', 'floorArea', 'bedrooms', 'parking'):
        for direction in ('asc', 'desc'):
            out = sort_listings(sample_listings, SortState(key=key, direction=direction))
            flags = [is_available(l) for l in out]
            assert flags == sorted(flags, reverse=True)


def test_price_sort_both_directions(listing_factory):
    listings = [listing_factory(f'P{p}', price=p) for p in (3, 1, 2)]
    desc = sort_listings(listings, SortState(key='price', direction='desc'))
    asc = sort_listings(listings, SortState(key='price', direction='asc'))
    assert [l.price for l in desc] == [3, 2, 1]
    assert [l.price for l in asc] == [1, 2, 3]


def test_price_sort_uses_lease_price_for_lease(listing_factory):
    listings = [
        listing_factory('X', price=10_000_000, lease_price=20_000),
        listing_factory('Y', price=5_000_000, lease_price=80_000),
    ]
    out = sort_listings(listings, SortState(key='price', direction='desc'), transaction='Lease')
    assert [l.id for l in out] == ['Y', 'X']
    out = sort_listings(listings, SortState(key='price', direction='desc'), transaction='Sale')
    assert [l.id for l in out] == ['X', 'Y']


def test_sort_does_not_mutate_input(listing_factory):
    listings = [listing_factory('B', price=1), listing_factory('A', price=2)]
    sort_listings(listings, SortState(key='price', direction='desc'))
    assert [l.id for l in listings] == ['B', 'A']


def test_is_available_trims_and_ignores_case(listing_factory):
    assert is_available(listing_factory(status='  AVAILABLE '))
    assert not is_available(listing_factory(status='Available soon'))
