"""Status classification for failed client calls.

Maps a failure to the HTTP status code the client reports:

| Failure point                              | Status            |
|--------------------------------------------|-------------------|
| Encoding/query/body-construction error     | 400               |
| Transport error with a response object     | response status   |
| Transport error without a response         | 502               |
| Decoding error                             | response status   |
"""

from __future__ import annotations

from http import HTTPStatus

from nap.errors.base import DecodingError, NapError, TransportError


def classify_failure(error: BaseException) -> int:
    """Return the status code to report for ``error``.

    Args:
        error: The failure raised while building, sending or decoding a request

    Returns:
        HTTP status code
    """
    if isinstance(error, TransportError):
        if error.response is not None:
            return error.response.status_code
        return HTTPStatus.BAD_GATEWAY
    if isinstance(error, DecodingError):
        return error.status_code
    if isinstance(error, NapError):
        return HTTPStatus.BAD_REQUEST
    # Anything unclassified never reached a server.
    return HTTPStatus.BAD_GATEWAY


def is_client_error(error: BaseException) -> bool:
    """Check whether the failure was detected before dispatch."""
    return isinstance(error, NapError) and not isinstance(
        error, (TransportError, DecodingError)
    )
