"""
objects.py

Responsibility: mapping helpers used when shaping configuration records.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def compact(mapping: Mapping[str, Any]) -> dict[str, Any] | None:
    """
    Drop entries whose value is None.

    Returns None instead of an empty dict so that empty configuration never
    shows up at the parent level.
    """
    out = {k: v for k, v in mapping.items() if v is not None}
    return out or None
