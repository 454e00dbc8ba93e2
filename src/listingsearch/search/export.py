from __future__ import annotations

from typing import List, Sequence
import csv, os, datetime, logging

import pandas as pd

from .models import Listing

DEFAULT_EXPORT_DIR = "Exports"
logger = logging.getLogger(__name__)

# key columns first, remaining listing fields after in declaration order
PREFERRED_COLUMNS: List[str] = [
    "id",
    "summary",
    "status",
    "sale_type",
    "price",
    "lease_price",
    "price_per_sqm",
    "lease_price_per_sqm",
    "lot_area",
    "floor_area",
    "bedrooms",
    "parking",
    "city",
    "province",
    "facebook_link",
]
SKIPPED_COLUMNS = {"exact_id_match"}


def export_columns() -> List[str]:
    rest = [c for c in Listing.model_fields if c not in PREFERRED_COLUMNS and c not in SKIPPED_COLUMNS]
    return PREFERRED_COLUMNS + rest


def export_shortlist(
    listings: Sequence[Listing],
    out_dir: str | os.PathLike | None = None,
    fmt: str = "csv",
) -> str:
    """Export shortlisted listings for the enquiry form.

    Args:
        listings: Listings to write, in display order.
        out_dir: Output directory (created if missing) default 'Exports'.
        fmt: 'csv' (default) or 'xlsx' (pandas + openpyxl).

    Returns:
        Path to generated export file.
    """
    if out_dir is None:
        out_dir = DEFAULT_EXPORT_DIR
    os.makedirs(out_dir, exist_ok=True)
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    base = f"shortlist_{'_'.join(l.id for l in listings[:3]) or 'empty'}_{timestamp}"
    columns = export_columns()
    rows = [l.model_dump(include=set(columns)) for l in listings]

    fmt = fmt.lower()
    if fmt == "xlsx":
        df = pd.DataFrame(rows, columns=columns)
        xlsx_path = os.path.join(out_dir, base + ".xlsx")
        try:
            df.to_excel(xlsx_path, index=False)
            return xlsx_path
        except Exception as e:  # pragma: no cover - fallback path
            logger.warning("XLSX export failed (%s); falling back to CSV", e)
        fmt = "csv"

    csv_path = os.path.join(out_dir, base + ".csv")
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return csv_path
