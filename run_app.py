#!/usr/bin/env python
"""Start the listing search API from a checkout without installing it."""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src'))

from listingsearch.app.__main__ import main  # noqa: E402

if __name__ == "__main__":
    if not (os.getenv("LISTINGSEARCH_FEED_URL") or os.getenv("LISTINGSEARCH_FEED_PATH")):
        print("[WARN] No listing feed configured. Set LISTINGSEARCH_FEED_URL or LISTINGSEARCH_FEED_PATH.")
    main()
