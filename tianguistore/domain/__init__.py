"""Domain models used across application layer boundaries."""

from .models import ErrorEnvelope, HealthStatus, StartupPhase

__all__ = ["ErrorEnvelope", "HealthStatus", "StartupPhase"]
