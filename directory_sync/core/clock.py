"""Wall-clock access in epoch milliseconds."""

from __future__ import annotations

import time

MILLIS_PER_MINUTE = 60 * 1000
MILLIS_PER_HOUR = 60 * MILLIS_PER_MINUTE


class SystemClock:
    """Reads the real wall clock. Swap for a manual clock in tests."""

    def now_millis(self) -> int:
        return time.time_ns() // 1_000_000


__all__ = ["SystemClock", "MILLIS_PER_MINUTE", "MILLIS_PER_HOUR"]
