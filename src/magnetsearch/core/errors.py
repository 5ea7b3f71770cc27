"""Request-level errors raised by the search engine.

Only malformed requests are surfaced to the caller as failures. Transient
source problems are captured on the ``SearchOutcome`` instead.
"""


class SearchRequestError(Exception):
    """Base class for errors that reject the whole request."""

    code = "bad_request"


class EmptyQuery(SearchRequestError):
    """Raised when the query is empty after trimming."""

    code = "empty_query"

    def __init__(self, message: str = "Please provide a search keyword or a magnet link.") -> None:
        super().__init__(message)


class InvalidMagnetURI(SearchRequestError):
    """Raised when a magnet-prefixed query cannot be parsed as a magnet URI."""

    code = "invalid_magnet_uri"


class AllSourcesExhausted(Exception):
    """Primary and fallback paths both failed or came back empty.

    Never raised past the engine; its message is recorded on the outcome.
    """
