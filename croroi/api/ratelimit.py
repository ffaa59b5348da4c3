from __future__ import annotations
from collections import deque
from typing import Dict, Optional
import threading
import time


class SlidingWindowLimiter:
    """Per-client request counter over a trailing time window.

    Clients with no hit inside the window are dropped, so the table only
    holds clients seen recently.
    """

    def __init__(self, max_hits_tracked: int = 100):
        self._hits: Dict[str, deque[float]] = {}
        self._maxlen = max_hits_tracked
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)

    def clear(self) -> None:
        with self._lock:
            self._hits.clear()

    def _prune(self, now: float, window: float) -> None:
        stale = [k for k, dq in self._hits.items() if not dq or now - dq[-1] > window]
        for k in stale:
            del self._hits[k]

    def hit(self, client: str, limit: int, window: float, now: Optional[float] = None) -> Optional[float]:
        """Record a request; return seconds to wait when over ``limit``, else None."""
        if limit <= 0:
            return None
        now = time.time() if now is None else now
        with self._lock:
            self._prune(now, window)
            dq = self._hits.setdefault(client, deque(maxlen=max(self._maxlen, limit)))
            while dq and now - dq[0] > window:
                dq.popleft()
            if len(dq) >= limit:
                return max(0.0, window - (now - dq[0]))
            dq.append(now)
            return None
