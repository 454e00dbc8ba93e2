"""listingsearch package root.

Lazy export of :func:`create_app` so importing the search engine (for
example from tests or a notebook) does not pull in Flask and its route
modules.

Downstream code can still ``from listingsearch import create_app``; the Flask
application factory is imported only when first accessed.
"""

__all__ = ["create_app"]

def create_app(*args, **kwargs):  # type: ignore[no-untyped-def]
	# Local import keeps the core importable without the web stack
	from .app import create_app as _create_app  # noqa: WPS433
	return _create_app(*args, **kwargs)
