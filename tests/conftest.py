import pytest
import sys
from pathlib import Path

# Ensure src/ on path for imports without an editable install
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / 'src'
for p in (SRC, ROOT):
    sp = str(p)
    if sp not in sys.path:
        sys.path.insert(0, sp)

from listingsearch.config.settings import reset_settings  # noqa: E402
from listingsearch.search.engine import clear_cache  # noqa: E402
from listingsearch.search.feed import ListingStore  # noqa: E402
from listingsearch.search.models import Listing  # noqa: E402


def make_listing(id='L1', **fields):
    """Synthetic available listing; override any field by keyword."""
    base = {'status': 'Available', 'price': 1_000_000}
    base.update(fields)
    return Listing(id=id, **base)


@pytest.fixture()
def listing_factory():
    return make_listing


@pytest.fixture(autouse=True)
def _fresh_cache_and_settings(monkeypatch):
    for var in ('LISTINGSEARCH_FEED_URL', 'LISTINGSEARCH_FEED_PATH'):
        monkeypatch.delenv(var, raising=False)
    clear_cache()
    reset_settings()
    yield
    clear_cache()
    reset_settings()


@pytest.fixture()
def sample_listings():
    """Small Metro Manila / Cavite catalogue used across engine and route tests."""
    return [
        make_listing('G00001', summary='Vacant lot in Cavite near Tagaytay', category='Residential',
                     type_description='VACANT LOT', price=4_200_000, price_per_sqm=14_000, lot_area=300,
                     region='Region IV-A', province='Cavite', city='Silang', barangay='Biga',
                     lat=14.22, lng=120.97, facebook_link='https://facebook.com/p/1'),
        make_listing('G00002', summary='BGC condo 2BR with parking', category='Residential',
                     type_description='CONDOMINIUM', price=18_500_000, lease_price=90_000,
                     price_per_sqm=250_000, lease_price_per_sqm=1_200, floor_area=74, bedrooms=2,
                     parking=1, region='NCR', province='Metro Manila', city='Taguig',
                     barangay='Fort Bonifacio', building='Uptown Parksuites', lat=14.5547, lng=121.0244),
        make_listing('G00003', summary='Warehouse along national highway', category='Industrial',
                     type_description='WAREHOUSE', price=0, lease_price=350_000, lease_price_per_sqm=350,
                     lot_area=2_000, floor_area=1_000, sale_type='Lease', region='Region IV-A',
                     province='Cavite', city='Dasmarinas', is_direct=True),
        make_listing('G00004', summary='Townhouse in Quezon City', category='Residential',
                     type_description='TOWN HOUSE', price=9_800_000, price_per_sqm=80_000, lot_area=80,
                     floor_area=120, bedrooms=3, parking=2, region='NCR', province='Metro Manila',
                     city='Quezon City', status='Sold', lat=14.6760, lng=121.0437),
        make_listing('G00005', summary='Office space Makati CBD', category='', category_fallback='Commercial',
                     type_description='OFFICE', price=32_000_000, lease_price=180_000, price_per_sqm=320_000,
                     floor_area=100, parking=5, region='NCR', province='Metro Manila', city='Makati',
                     status='Leased Out', lat=14.5547, lng=121.0300),
    ]


@pytest.fixture()
def store(sample_listings):
    return ListingStore(sample_listings)


@pytest.fixture()
def app(store, tmp_path, monkeypatch):
    monkeypatch.setenv('LISTINGSEARCH_EXPORT_DIR', str(tmp_path / 'exports'))
    monkeypatch.setenv('LISTINGSEARCH_PAGE_SIZE', '2')
    reset_settings()
    from listingsearch.app import create_app
    flask_app = create_app(store=store)
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture()
def client(app):
    return app.test_client()
