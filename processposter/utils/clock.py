"""Centralised wall-clock helper: single source of truth for 'now'.

The Capture engine compares process access times against its own local
clock, so new processes are stamped with timezone-aware *local* time.
Tests inject a fixed clock instead of patching datetime.now().

Usage:
    from processposter.utils.clock import now_local
"""

from __future__ import annotations

from datetime import datetime


def now_local() -> datetime:
    """Return the current local datetime, carrying its UTC offset."""
    return datetime.now().astimezone()
