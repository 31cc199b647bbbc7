"""
Safe environment variable parsing with validation.

Provides type-safe functions for reading environment variables with
bounds checking and whitelist validation.

Usage Pattern
-------------
Instead of unsafe direct environment access:

    port = int(os.environ.get("PORT", "3001"))

Use safe getters:

    from qcbuddy.core.env import get_env_int
    port = get_env_int("PORT", default=3001, min_value=1, max_value=65535)
"""

from __future__ import annotations

import logging
import os
from typing import FrozenSet, Optional

logger = logging.getLogger(__name__)


GENERATION_MODES: FrozenSet[str] = frozenset(["flash", "pro", "off"])

INGEST_MODES: FrozenSet[str] = frozenset(["smart", "full"])


def get_env_int(
    name: str,
    default: Optional[int] = None,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> Optional[int]:
    """
    Get integer from environment variable with bounds validation.

    Args:
        name: Environment variable name.
        default: Default value if not set or invalid.
        min_value: Minimum allowed value (clamped if exceeded).
        max_value: Maximum allowed value (clamped if exceeded).

    Returns:
        Validated integer or default.
    """
    value = os.environ.get(name)
    if value is None:
        return default

    try:
        int_value = int(value)
    except ValueError:
        logger.warning(
            f"Invalid integer value for {name}={value}: Returning default {default}"
        )
        return default

    if min_value is not None and int_value < min_value:
        return min_value
    if max_value is not None and int_value > max_value:
        return max_value

    return int_value


def get_env_whitelist(
    name: str,
    allowed: FrozenSet[str],
    default: Optional[str] = None,
) -> Optional[str]:
    """
    Get string from environment variable with case-insensitive whitelist validation.

    Example:
        >>> # With GEMINI_MODE="FLASH"
        >>> get_env_whitelist("GEMINI_MODE", GENERATION_MODES)
        'flash'
    """
    value = os.environ.get(name)
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in allowed:
        return normalized

    logger.warning(f"Ignoring {name}={value}: expected one of {sorted(allowed)}")
    return default


def get_env_str(name: str, *alternatives: str) -> Optional[str]:
    """Return the first non-empty value among name and its alternatives."""
    for candidate in (name, *alternatives):
        value = os.environ.get(candidate)
        if value:
            return value.strip()
    return None
