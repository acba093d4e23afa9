"""Typed domain models shared across runtime layers.

This module provides simple data contracts for cross-layer communication
between startup sequencing, the database layer and the HTTP pipeline.
"""

from dataclasses import dataclass
from enum import Enum


class StartupPhase(str, Enum):
    """Process lifecycle phase. There is no degraded serving phase."""

    NOT_SERVING = "not_serving"
    SERVING = "serving"


@dataclass(frozen=True)
class HealthStatus:
    """Health result contract used by startup dependency checks.

    Attributes:
        status: Overall status text for the checked dependency.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


@dataclass(frozen=True)
class ErrorEnvelope:
    """Structured failure body returned by the error boundary.

    Attributes:
        message: Public, generic failure message.
        detail: Underlying error message, populated only in development mode.
    """

    message: str
    detail: str | None = None

    def to_payload(self) -> dict[str, str]:
        """Render the envelope as a JSON-ready mapping.

        Returns:
            dict[str, str]: Envelope payload, without `detail` when it is unset.
        """

        payload = {"message": self.message}
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload
