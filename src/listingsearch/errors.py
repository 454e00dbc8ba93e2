"""Error types raised by listingsearch."""


class ListingSearchError(Exception):
    """Base exception for listingsearch."""
    pass


class FeedError(ListingSearchError):
    """Listing feed could not be fetched or read."""
    pass


class InvalidFacetError(ListingSearchError):
    """Unknown facet, bucket or sort key handed to a state reducer."""
    pass
