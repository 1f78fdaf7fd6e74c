class SearchError(Exception):
    """Base class for errors surfaced by a search invocation."""


class InvalidArgument(SearchError, ValueError):
    """Required search input is missing, empty, or whitespace-only."""


class Canceled(SearchError):
    """Cancellation was requested while the search was running."""
