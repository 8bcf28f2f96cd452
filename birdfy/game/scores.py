# birdfy/game/scores.py
from __future__ import annotations
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from .config import HISTORY_RECENT_CAP, HISTORY_TOP_CAP

logger = logging.getLogger(__name__)


class HistoryPolicy(Enum):
    """
    RECENT: newest run first, capped at HISTORY_RECENT_CAP
    TOP:    highest score first (ties: newest first), capped at HISTORY_TOP_CAP
    """
    RECENT = "recent"
    TOP = "top"

    @property
    def cap(self) -> int:
        return HISTORY_RECENT_CAP if self is HistoryPolicy.RECENT else HISTORY_TOP_CAP


@dataclass(frozen=True)
class ScoreEntry:
    score: int
    timestamp: str          # ISO-8601
    tag: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["ScoreEntry"]:
        """Lenient decode; anything unusable yields None."""
        if not isinstance(raw, dict):
            return None
        try:
            score = int(raw["score"])
        except (KeyError, TypeError, ValueError, OverflowError):
            return None
        if score < 0:
            return None
        timestamp = str(raw.get("timestamp") or raw.get("time") or "")
        tag = raw.get("tag")
        return cls(score=score, timestamp=timestamp, tag=None if tag is None else str(tag))


class ScoreBook:
    """Best score plus a bounded history of finished runs."""

    def __init__(self, policy: HistoryPolicy = HistoryPolicy.RECENT,
                 best: int = 0, history: Optional[List[ScoreEntry]] = None):
        self.policy = policy
        self.best = max(0, int(best))
        self.history: List[ScoreEntry] = []
        for entry in history or []:
            self._insert(entry, newest=False)
        # a stored history can hold a score the stored best missed
        self.best = max([self.best] + [e.score for e in self.history])

    def _insert(self, entry: ScoreEntry, newest: bool):
        if self.policy is HistoryPolicy.RECENT:
            if newest:
                self.history.insert(0, entry)
            else:
                self.history.append(entry)
        else:
            # a new entry goes in front of equal scores, a loaded one behind them
            idx = 0
            while idx < len(self.history) and (
                    self.history[idx].score > entry.score
                    or (not newest and self.history[idx].score == entry.score)):
                idx += 1
            self.history.insert(idx, entry)
        del self.history[self.policy.cap:]

    def record(self, score: int, tag: Optional[str] = None,
               when: Optional[datetime] = None) -> ScoreEntry:
        score = max(0, int(score))
        entry = ScoreEntry(score=score, timestamp=(when or datetime.now()).isoformat(timespec="seconds"), tag=tag)
        self._insert(entry, newest=True)
        if score > self.best:
            logger.info("new best score: %d (was %d)", score, self.best)
        self.best = max(self.best, score)
        return entry

    def clear(self):
        self.best = 0
        self.history = []
