from __future__ import annotations

from flask import Flask

from listingsearch.config.settings import get_settings
from listingsearch.search.engine import set_cache_size
from listingsearch.search.feed import ListingStore
from .routes import bp as main_bp, STORE_EXTENSION
from listingsearch.logging_config import configure_logging, get_logger


def create_app(store: ListingStore | None = None) -> Flask:
    settings = get_settings()
    configure_logging()
    logger = get_logger(__name__)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.SECRET_KEY
    set_cache_size(settings.CACHE_MAX_ENTRIES)

    # Load the listing feed once per app; /api/reload swaps it wholesale later
    if store is None:
        store = ListingStore()
        if settings.FEED_PATH or settings.FEED_URL:
            store.reload(url=settings.FEED_URL, path=settings.FEED_PATH, timeout=settings.FEED_TIMEOUT)
        else:
            logger.warning("No listing feed configured; starting with an empty store")
    app.extensions[STORE_EXTENSION] = store

    app.register_blueprint(main_bp)
    return app
