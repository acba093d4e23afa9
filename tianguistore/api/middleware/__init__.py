"""ASGI middleware composing the request-processing pipeline."""

from .body import JSON_BODY_LIMIT_BYTES, JsonBodyMiddleware
from .error_boundary import ErrorBoundaryMiddleware, api_build_error_envelope
from .security import (
    ParameterPollutionMiddleware,
    SecurityHeadersMiddleware,
    api_build_content_security_policy,
    api_build_cors_options,
)
from .static import StaticAssetMiddleware

__all__ = [
    "JSON_BODY_LIMIT_BYTES",
    "ErrorBoundaryMiddleware",
    "JsonBodyMiddleware",
    "ParameterPollutionMiddleware",
    "SecurityHeadersMiddleware",
    "StaticAssetMiddleware",
    "api_build_content_security_policy",
    "api_build_cors_options",
    "api_build_error_envelope",
]
