"""
HTTP API configuration.
"""

from dataclasses import dataclass


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 3001
    max_ai_calls_per_min: int = 30  # Fixed window; 0 disables generation
