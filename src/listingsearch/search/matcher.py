from __future__ import annotations

import logging
import re
from difflib import SequenceMatcher
from typing import Dict, List, Sequence, Tuple

from .config import (
    EXACT_TOKEN,
    FUZZY_MIN_RATIO,
    FUZZY_TOKEN_CAP,
    MATCH_FIELD_WEIGHTS,
    PREFIX_TOKEN,
    STOPWORDS,
    SUBSTRING_TOKEN,
)
from .models import Listing

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9]+")


def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall((text or '').lower())


def query_tokens(query: str) -> List[str]:
    """Lowercased query tokens with stopwords dropped.

    A query made only of stopwords ("in the") keeps them so it still matches
    something literal.
    """
    tokens = tokenize(query)
    kept = [t for t in tokens if t not in STOPWORDS]
    return kept or tokens


def token_strength(token: str, field_tokens: Sequence[str]) -> float:
    """Best strength (0-1) of one query token against one field's tokens.

    exact > prefix > substring > fuzzy (edit ratio, capped below substring).
    """
    best = 0.0
    for ft in field_tokens:
        if ft == token:
            return EXACT_TOKEN
        if len(token) >= 2 and ft.startswith(token):
            best = max(best, PREFIX_TOKEN)
        elif len(token) >= 3 and token in ft:
            best = max(best, SUBSTRING_TOKEN)
        elif best < FUZZY_TOKEN_CAP and len(token) >= 4 and abs(len(ft) - len(token)) <= 3:
            sm = SequenceMatcher(None, token, ft)
            if sm.real_quick_ratio() >= FUZZY_MIN_RATIO and sm.quick_ratio() >= FUZZY_MIN_RATIO:
                ratio = sm.ratio()
                if ratio >= FUZZY_MIN_RATIO:
                    best = max(best, ratio * FUZZY_TOKEN_CAP)
    return best


def _field_tokens(listing: Listing) -> List[Tuple[float, List[str]]]:
    return [(weight, tokenize(getattr(listing, name))) for name, weight in MATCH_FIELD_WEIGHTS.items()]


def compute_relevance(listing: Listing, tokens: Sequence[str]) -> float:
    """Relevance score (0-100, higher is better) of a listing for query tokens.

    Each query token takes its best weighted strength over the searchable
    fields; the score is the mean over tokens. A listing matching every token
    exactly in a full-weight field scores 100, one matching half of a
    two-token query exactly scores 50.
    """
    if not tokens:
        return 0.0
    fields = _field_tokens(listing)
    total = 0.0
    for token in tokens:
        total += max((weight * token_strength(token, ftoks) for weight, ftoks in fields), default=0.0)
    return round(100 * total / len(tokens), 2)


def is_exact_id(listing: Listing, query: str) -> bool:
    q = query.strip().lower()
    return bool(q) and listing.id.strip().lower() == q


def match(listings: Sequence[Listing], query: str, strictness: float) -> List[Listing]:
    """Rank ``listings`` against a free-text ``query``.

    ``strictness`` (0-100) is the minimum relevance score a listing needs;
    any listing must score above zero. A blank query returns the input
    unchanged. A listing whose id equals the query (case-insensitive) is
    always returned first, as a copy flagged ``exact_id_match`` so the facet
    filters let it through. Ties keep input order.
    """
    if not query or not query.strip():
        return list(listings)
    strictness = min(100.0, max(0.0, float(strictness)))
    tokens = query_tokens(query)

    pinned: List[Listing] = []
    scored: List[Tuple[float, Listing]] = []
    for listing in listings:
        if is_exact_id(listing, query):
            pinned.append(listing.model_copy(update={'exact_id_match': True}))
            continue
        score = compute_relevance(listing, tokens)
        if score > 0 and score >= strictness:
            scored.append((score, listing))
    # sorted() is stable, so equal scores keep input order
    scored.sort(key=lambda pair: -pair[0])
    logger.debug("Query %r (strictness %s): %d pinned, %d ranked of %d",
                 query, strictness, len(pinned), len(scored), len(listings))
    return pinned + [listing for _, listing in scored]


def relevance_scores(listings: Sequence[Listing], query: str) -> Dict[str, float]:
    """Score table by listing id, for diagnostics and the JSON API."""
    tokens = query_tokens(query)
    return {l.id: compute_relevance(l, tokens) for l in listings}
