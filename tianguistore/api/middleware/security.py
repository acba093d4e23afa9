"""Security interceptors: response hardening headers, parameter pollution and CORS options.

Every interceptor here only shapes headers or the request scope; none of them
produces a response of its own.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tianguistore.config import AppSettings

FINGERPRINT_HEADERS: tuple[str, ...] = ("server", "x-powered-by")

CONTENT_SECURITY_POLICY_DIRECTIVES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("default-src", ("'self'",)),
    ("script-src", ("'self'", "https://cdnjs.cloudflare.com")),
    (
        "style-src",
        ("'self'", "https://cdnjs.cloudflare.com", "https://fonts.googleapis.com", "'unsafe-inline'"),
    ),
    ("font-src", ("'self'", "https://fonts.gstatic.com", "https://cdnjs.cloudflare.com")),
    ("img-src", ("'self'", "data:")),
    ("base-uri", ("'self'",)),
    ("form-action", ("'self'",)),
    ("frame-ancestors", ("'self'",)),
    ("object-src", ("'none'",)),
    ("script-src-attr", ("'none'",)),
)

STRICT_TRANSPORT_SECURITY = "max-age=31536000; includeSubDomains; preload"

BASELINE_SECURITY_HEADERS: tuple[tuple[str, str], ...] = (
    ("Cross-Origin-Opener-Policy", "same-origin"),
    ("Cross-Origin-Resource-Policy", "same-origin"),
    ("Origin-Agent-Cluster", "?1"),
    ("Referrer-Policy", "no-referrer"),
    ("X-Content-Type-Options", "nosniff"),
    ("X-DNS-Prefetch-Control", "off"),
    ("X-Download-Options", "noopen"),
    ("X-Frame-Options", "SAMEORIGIN"),
    ("X-Permitted-Cross-Domain-Policies", "none"),
    ("X-XSS-Protection", "0"),
)

CORS_ALLOWED_METHODS: tuple[str, ...] = ("GET", "HEAD", "PUT", "PATCH", "POST", "DELETE")


def api_build_content_security_policy(development_mode: bool) -> str:
    """Render the Content-Security-Policy header value.

    Args:
        development_mode: Whether the runtime is in development mode.

    Returns:
        str: Header value. `upgrade-insecure-requests` is added outside development.
    """

    directives = [f"{name} {' '.join(sources)}" for name, sources in CONTENT_SECURITY_POLICY_DIRECTIVES]
    if not development_mode:
        directives.append("upgrade-insecure-requests")
    return "; ".join(directives)


def api_build_cors_options(settings: AppSettings) -> dict[str, Any]:
    """Build keyword options for Starlette `CORSMiddleware`.

    Args:
        settings: Validated runtime settings.

    Returns:
        dict[str, Any]: Any origin in development, only `cors_origin` otherwise.
    """

    if settings.is_development:
        allowed_origins = ["*"]
    elif settings.cors_origin is not None:
        allowed_origins = [settings.cors_origin]
    else:
        allowed_origins = []
    return {
        "allow_origins": allowed_origins,
        "allow_credentials": True,
        "allow_methods": list(CORS_ALLOWED_METHODS),
        "allow_headers": ["*"],
    }


class SecurityHeadersMiddleware:
    """Strip framework fingerprints and apply hardening headers to every HTTP response."""

    def __init__(self, app: ASGIApp, development_mode: bool):
        self.app = app
        self._headers: list[tuple[str, str]] = [
            ("Content-Security-Policy", api_build_content_security_policy(development_mode)),
            *BASELINE_SECURITY_HEADERS,
        ]
        if not development_mode:
            self._headers.append(("Strict-Transport-Security", STRICT_TRANSPORT_SECURITY))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_security_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for header_name in FINGERPRINT_HEADERS:
                    del headers[header_name]
                for header_name, header_value in self._headers:
                    headers[header_name] = header_value
            await send(message)

        await self.app(scope, receive, send_with_security_headers)


class ParameterPollutionMiddleware:
    """Collapse repeated query-string keys to their last value.

    Each key keeps the position of its first occurrence. The full value lists
    of collapsed keys are kept in `request.state.query_polluted`.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope.get("query_string"):
            await self.app(scope, receive, send)
            return

        pairs = parse_qsl(scope["query_string"].decode("latin-1"), keep_blank_values=True)
        grouped: dict[str, list[str]] = {}
        for key, value in pairs:
            grouped.setdefault(key, []).append(value)

        polluted = {key: values for key, values in grouped.items() if len(values) > 1}
        if polluted:
            scope = dict(scope)
            scope["query_string"] = urlencode([(key, values[-1]) for key, values in grouped.items()]).encode(
                "latin-1"
            )
            scope.setdefault("state", {})["query_polluted"] = polluted

        await self.app(scope, receive, send)
