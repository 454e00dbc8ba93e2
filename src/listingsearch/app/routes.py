from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request, send_file, url_for
from flask_wtf import FlaskForm
from wtforms import FloatField, SelectField, StringField
from wtforms.validators import DataRequired, NumberRange, Optional

from listingsearch.config.settings import get_settings
from listingsearch.search.engine import search
from listingsearch.search.export import export_shortlist
from listingsearch.search.feed import ListingStore
from listingsearch.search.geo import nearby
from listingsearch.search.matcher import relevance_scores
from listingsearch.search.models import Listing, SearchResult, SearchState
from listingsearch.search.pagination import page_range
from listingsearch.search.urlstate import decode_state, to_query_string

bp = Blueprint("main", __name__)
logger = logging.getLogger(__name__)

STORE_EXTENSION = "listingsearch.store"
EXPORT_FORMATS = ("csv", "xlsx")


class NearbyForm(FlaskForm):  # type: ignore[misc]
    class Meta:
        csrf = False

    radius = FloatField("Radius (km)", validators=[Optional(), NumberRange(min=0.1, max=50)])


class ExportForm(FlaskForm):  # type: ignore[misc]
    class Meta:
        csrf = False

    ids = StringField("Listing IDs", validators=[DataRequired()])
    fmt = SelectField("Format", choices=[("csv", "CSV"), ("xlsx", "Excel")], default="csv", validate_choice=False)


def get_store() -> ListingStore:
    return current_app.extensions[STORE_EXTENSION]


def _listing_json(listing: Listing) -> Dict[str, Any]:
    return listing.model_dump()


def _headline(state: SearchState, result: SearchResult) -> str:
    if result.total == 0:
        msg = f'No matches found for "{state.query}"' if state.query.strip() else "No matches found"
        if state.facets.transaction:
            msg += f' with type "{state.facets.transaction}"'
        if state.facets.category:
            msg += f' and category "{state.facets.category}"'
        return msg
    return f"Found {result.total} of {result.store_total} Available Listings"


def _delete_file_later(file_path: str, delay_seconds: int = 30) -> None:
    def delete_after_delay():  # pragma: no cover - side-effect timing
        time.sleep(delay_seconds)
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
        except OSError as e:
            logger.warning("Could not remove export %s: %s", file_path, e)

    threading.Thread(target=delete_after_delay, daemon=True).start()


@bp.route("/api/listings")
def listings():  # type: ignore[no-untyped-def]
    settings = get_settings()
    state = decode_state(request.args, default_relevance=settings.DEFAULT_RELEVANCE)
    result = search(get_store(), state, settings.PAGE_SIZE)
    page = result.page
    # echo the clamped page so the shared link reproduces this exact view
    shared_state = state.model_copy(update={"page": page.page})
    scores = relevance_scores(page.items, state.query) if state.query.strip() else {}
    return jsonify({
        "query": state.query,
        "relevance": state.relevance,
        "page": page.page,
        "page_size": page.page_size,
        "total_pages": page.total_pages,
        "pages": list(page_range(page.total_pages, page.page)),
        "total": result.total,
        "store_total": result.store_total,
        "headline": _headline(state, result),
        "results": [{**_listing_json(l), "score": scores.get(l.id)} for l in page.items],
        "domains": {k: d.model_dump() for k, d in result.domains.items()},
        "stats": result.stats,
        "share_url": url_for("main.listings") + "?" + to_query_string(shared_state),
    })


@bp.route("/api/listings/<listing_id>/nearby")
def listing_nearby(listing_id: str):  # type: ignore[no-untyped-def]
    settings = get_settings()
    store = get_store()
    center = store.get(listing_id)
    if center is None:
        return jsonify({"error": f"Listing {listing_id} not found"}), 404
    form = NearbyForm(formdata=request.args)
    radius = settings.NEARBY_RADIUS_KM
    if form.validate() and form.radius.data:
        radius = form.radius.data
    neighbours = nearby(store.listings, center, radius_km=radius)
    return jsonify({
        "center": _listing_json(center),
        "radius_km": radius,
        "neighbours": [{**_listing_json(l), "distance_km": d} for l, d in neighbours],
    })


@bp.route("/api/shortlist/export")
def export_shortlist_route():  # type: ignore[no-untyped-def]
    settings = get_settings()
    form = ExportForm(formdata=request.args)
    if not form.validate():
        return jsonify({"error": "ids is required"}), 400
    fmt = (form.fmt.data or "csv").lower()
    if fmt not in EXPORT_FORMATS:
        fmt = "csv"
    store = get_store()
    ids = [i.strip() for i in form.ids.data.split(",") if i.strip()][: settings.SHORTLIST_MAX]
    chosen = [l for l in (store.get(i) for i in ids) if l is not None]
    if not chosen:
        return jsonify({"error": "No shortlisted listings found"}), 404
    fpath = export_shortlist(chosen, out_dir=settings.EXPORT_DIR, fmt=fmt)
    _delete_file_later(fpath, delay_seconds=120)
    return send_file(os.path.abspath(fpath), as_attachment=True, download_name=os.path.basename(fpath))


@bp.route("/api/reload", methods=["POST"])
def reload_feed():  # type: ignore[no-untyped-def]
    settings = get_settings()
    store = get_store()
    ok = store.reload(url=settings.FEED_URL, path=settings.FEED_PATH, timeout=settings.FEED_TIMEOUT)
    if not ok:
        return jsonify({"status": "error", "listings": len(store)}), 503
    return jsonify({"status": "ok", "listings": len(store)})


# Simple health endpoint for container orchestrators (K8s, ECS, etc.)
@bp.route("/health")
def health():  # type: ignore[no-untyped-def]
    return {"status": "ok", "listings": len(get_store())}
