"""Request-level controls for the HTTP API."""

from qcbuddy.api.middleware.rate_limiter import CallBudget

__all__ = ["CallBudget"]
