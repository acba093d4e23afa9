"""Project-native typed exceptions for per-request handling failures."""

from __future__ import annotations


class RequestHandlingError(Exception):
    """Base exception for recoverable failures while handling one request.

    Attributes:
        status_code: HTTP status the error boundary answers with.
        public_message: Message safe to show to clients in every mode.
    """

    status_code = 500
    public_message = "Internal server error"


class RequestBodyTooLargeError(RequestHandlingError):
    """JSON request body exceeded the configured byte ceiling."""

    status_code = 413
    public_message = "Request body too large"


class MalformedRequestBodyError(RequestHandlingError):
    """JSON request body could not be decoded."""

    status_code = 400
    public_message = "Malformed JSON request body"
