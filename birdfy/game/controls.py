# birdfy/game/controls.py
from __future__ import annotations
from dataclasses import dataclass
from .config import FLAP_COOLDOWN_MS, FLAP_BUFFER_MS


@dataclass
class FlapBuffer:
    """
    Turns bursty taps into at most one flap per cooldown window.

    request() remembers the latest tap; poll() is called once per tick and
    returns True when a remembered tap is still fresh and the cooldown has
    elapsed. Taps older than `buffer_ms` are dropped. Times are in ms.
    """
    cooldown_ms: float = FLAP_COOLDOWN_MS
    buffer_ms: float = FLAP_BUFFER_MS
    _pending_since: float | None = None
    _last_release: float | None = None

    def request(self, now_ms: float):
        self._pending_since = float(now_ms)

    def poll(self, now_ms: float) -> bool:
        if self._pending_since is None:
            return False
        if now_ms - self._pending_since > self.buffer_ms:
            self._pending_since = None
            return False
        if self._last_release is not None and now_ms - self._last_release <= self.cooldown_ms:
            return False
        self._pending_since = None
        self._last_release = float(now_ms)
        return True

    def clear(self):
        self._pending_since = None
        self._last_release = None
