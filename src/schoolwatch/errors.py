"""Error hierarchy for school API fetches.

The hierarchy separates failures the timetable path recovers from by
substituting the cached snapshot (RecoverableFetchError) from failures that
are always surfaced to the caller.

Example usage:
    try:
        result = await source.fetch_timetable(grade, classno)
    except FetchError as e:
        show_error(str(e))  # rendered verbatim, with a manual retry
"""


class FetchError(Exception):
    """Base exception for all school API fetch errors.

    The string form is a human-readable cause suitable for display.
    """

    pass


class InvalidRequestParameters(FetchError):
    """The request URL could not be built from the caller-supplied values.

    Examples: a non-positive grade, a malformed date, an empty school name.
    """

    pass


class RecoverableFetchError(FetchError):
    """Failure the timetable fetch answers with its cached snapshot."""

    pass


class NetworkError(RecoverableFetchError):
    """Transport failure: connection error, timeout, or a non-2xx status."""

    pass


class EmptyBody(RecoverableFetchError):
    """The server answered without any data."""

    pass


class DecodeError(RecoverableFetchError):
    """The body is not valid JSON or does not match the expected schema."""

    pass


class NoCacheAvailable(FetchError):
    """Cache fallback was needed but the cache slot is empty."""

    pass
