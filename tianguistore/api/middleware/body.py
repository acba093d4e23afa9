"""Bounded JSON request body decoding.

The body is read and decoded before any route handler runs. Decoded values are
exposed as `request.state.json_body` and the raw bytes are replayed to the
application so handlers can still read the body themselves.
"""

from __future__ import annotations

import json

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tianguistore.api.errors import MalformedRequestBodyError, RequestBodyTooLargeError

JSON_BODY_LIMIT_BYTES = 1024 * 1024
JSON_MEDIA_TYPE = "application/json"


class JsonBodyMiddleware:
    """Decode `application/json` request bodies up to a fixed byte ceiling."""

    def __init__(self, app: ASGIApp, limit_bytes: int = JSON_BODY_LIMIT_BYTES):
        if limit_bytes < 1:
            raise ValueError("limit_bytes must be positive")
        self.app = app
        self.limit_bytes = limit_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        media_type = headers.get("content-type", "").split(";", 1)[0].strip().lower()
        if media_type != JSON_MEDIA_TYPE:
            await self.app(scope, receive, send)
            return

        declared_length = headers.get("content-length")
        if declared_length is not None and declared_length.isdigit() and int(declared_length) > self.limit_bytes:
            raise RequestBodyTooLargeError(
                f"request body of {declared_length} bytes exceeds limit of {self.limit_bytes} bytes"
            )

        body = await self._read_body(receive)
        if body is None:
            return
        if body:
            scope.setdefault("state", {})["json_body"] = self._decode(body)

        body_replayed = False

        async def replay_receive() -> Message:
            nonlocal body_replayed
            if not body_replayed:
                body_replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay_receive, send)

    async def _read_body(self, receive: Receive) -> bytes | None:
        """Read the full request body, enforcing the byte ceiling while streaming.

        Args:
            receive: ASGI receive callable.

        Returns:
            bytes | None: Body bytes, or None when the client disconnected.

        Raises:
            RequestBodyTooLargeError: Raised as soon as the body exceeds the ceiling.
        """

        chunks = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return None
            chunks.extend(message.get("body", b""))
            if len(chunks) > self.limit_bytes:
                raise RequestBodyTooLargeError(f"request body exceeds limit of {self.limit_bytes} bytes")
            more_body = message.get("more_body", False)
        return bytes(chunks)

    @staticmethod
    def _decode(body: bytes) -> dict | list:
        """Decode a strict JSON body. Repeated object keys resolve to the last value.

        Args:
            body: Raw body bytes.

        Returns:
            dict | list: Decoded top-level object or array.

        Raises:
            MalformedRequestBodyError: Raised for invalid JSON or a non-container top-level value.
        """

        try:
            decoded = json.loads(body)
        except (ValueError, RecursionError) as error:
            raise MalformedRequestBodyError(f"invalid JSON body: {error}") from error
        if not isinstance(decoded, (dict, list)):
            raise MalformedRequestBodyError("JSON body must be an object or an array")
        return decoded
