from __future__ import annotations

import os
from . import create_app


def main() -> None:  # pragma: no cover - manual entry
    app = create_app()
    host = os.getenv("LISTINGSEARCH_HOST", "127.0.0.1")
    port = int(os.getenv("LISTINGSEARCH_PORT", "5000"))
    debug = os.getenv("LISTINGSEARCH_DEBUG", "0").lower() in {"1", "true", "yes"}
    print(f"Starting listing search on http://{host}:{port} (debug={debug})")
    app.run(host=host, port=port, debug=debug, use_reloader=False)


if __name__ == "__main__":  # pragma: no cover
    main()
