import pytest

from listingsearch.search.pagination import clamp_page, page_range, paginate, total_pages


@pytest.mark.parametrize('count,size', [(0, 3), (1, 3), (7, 3), (9, 3), (12, 12), (13, 12)])
def test_pages_concatenate_to_full_result(listing_factory, count, size):
    items = [listing_factory(f'L{i}') for i in range(count)]
    first = paginate(items, 1, size)
    pages = [paginate(items, p, size) for p in range(1, max(first.total_pages, 1) + 1)]
    joined = [l for page in pages for l in page.items]
    assert joined == items
    assert all(len(p.items) <= size for p in pages)


def test_out_of_range_page_is_clamped(listing_factory):
    items = [listing_factory(f'L{i}') for i in range(5)]
    assert paginate(items, 99, 2).page == 3
    assert [l.id for l in paginate(items, 99, 2).items] == ['L4']
    assert paginate(items, 0, 2).page == 1
    assert paginate(items, -4, 2).page == 1


def test_empty_result_is_page_one_of_zero():
    p = paginate([], 3, 12)
    assert (p.page, p.total_pages, p.total, p.items) == (1, 0, 0, ())


def test_page_size_must_be_positive(listing_factory):
    with pytest.raises(ValueError):
        paginate([listing_factory()], 1, 0)


def test_helpers():
    assert total_pages(25, 12) == 3
    assert total_pages(0, 12) == 0
    assert clamp_page(5, 0) == 1
    assert list(page_range(10, 1)) == [1, 2, 3]
    assert list(page_range(10, 6)) == [4, 5, 6, 7, 8]
    assert list(page_range(0, 1)) == []
