"""Time sources.

Wall-clock timestamps are used for audit columns. Cache expiry uses a
monotonic clock that tests can replace with a controllable fake.
"""

import time
from datetime import datetime, timezone
from typing import Callable


Clock = Callable[[], float]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def monotonic_clock() -> float:
    return time.monotonic()
