"""Error boundary wrapping the request pipeline.

This is the single recovery point for per-request failures. Exceptions raised
by inner stages are caught once, logged and turned into an Error Envelope.
Nothing raised while handling one request escapes to the server.
"""

from __future__ import annotations

import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tianguistore.api.errors import RequestHandlingError
from tianguistore.domain import ErrorEnvelope

logger = logging.getLogger(__name__)


def api_build_error_envelope(error: Exception, development_mode: bool) -> tuple[int, ErrorEnvelope]:
    """Map an exception to a response status and Error Envelope.

    Args:
        error: Exception raised by an inner pipeline stage.
        development_mode: Whether error details may be exposed.

    Returns:
        tuple[int, ErrorEnvelope]: HTTP status code and envelope.
    """

    if isinstance(error, RequestHandlingError):
        status_code = error.status_code
        message = error.public_message
    else:
        status_code = RequestHandlingError.status_code
        message = RequestHandlingError.public_message
    detail = str(error) if development_mode else None
    return status_code, ErrorEnvelope(message=message, detail=detail)


class ErrorBoundaryMiddleware:
    """Catch every exception from the wrapped application and answer with an envelope."""

    def __init__(self, app: ASGIApp, development_mode: bool):
        self.app = app
        self.development_mode = development_mode

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking_start(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking_start)
        except Exception as error:
            await self._handle_error(error, scope, receive, send, response_started)

    async def _handle_error(
        self,
        error: Exception,
        scope: Scope,
        receive: Receive,
        send: Send,
        response_started: bool,
    ) -> None:
        status_code, envelope = api_build_error_envelope(error, self.development_mode)
        log_extra = {"method": scope.get("method"), "path": scope.get("path"), "status_code": status_code}
        if status_code >= 500:
            logger.error("Unhandled error while handling request", exc_info=error, extra=log_extra)
        else:
            logger.warning("Rejected request: %s", error, extra=log_extra)

        if response_started:
            logger.error("Response already started; error envelope not sent", extra=log_extra)
            return

        response = JSONResponse(content=envelope.to_payload(), status_code=status_code)
        try:
            await response(scope, receive, send)
        except Exception:
            logger.exception("Failed to send error envelope", extra=log_extra)
