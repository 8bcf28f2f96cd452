# birdfy/game/storage.py
"""
Key-value persistence for scores and settings.

Values are JSON-serializable. Every loader here is best-effort: a missing key
or a value of the wrong shape is logged and replaced by its default, never
raised to the caller.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from .config import (
    KEY_BEST, KEY_HISTORY, KEY_GRAVITY, KEY_CUSTOM_BG, KEY_DIFFICULTY, KEY_THEME
)
from .difficulty import Difficulty
from .gravity import DEFAULT_THEME_GRAVITY, Theme, clamp_multiplier
from .scores import HistoryPolicy, ScoreBook, ScoreEntry

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-process store; values are round-tripped through JSON like the file store."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {k: json.dumps(v) for k, v in (data or {}).items()}

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """All keys in one JSON document on disk. Unreadable files read as empty."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("ignoring store %s: top level is %s, not an object",
                           self.path, type(data).__name__)
            return {}
        return data

    def _write(self, data: Dict[str, Any]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


# -------------------- Typed loaders --------------------

def _safe_get(store: KeyValueStore, key: str) -> Any:
    try:
        return store.get(key)
    except (OSError, ValueError) as e:
        logger.warning("could not read %r: %s", key, e)
        return None


def load_best(store: KeyValueStore) -> int:
    raw = _safe_get(store, KEY_BEST)
    if raw is None:
        return 0
    try:
        best = int(raw)
    except (TypeError, ValueError, OverflowError):
        logger.warning("discarding corrupt best score %r", raw)
        return 0
    return max(0, best)


def load_history(store: KeyValueStore) -> List[ScoreEntry]:
    raw = _safe_get(store, KEY_HISTORY)
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("discarding corrupt score history %r", raw)
        return []
    entries = [ScoreEntry.from_dict(item) for item in raw]
    return [e for e in entries if e is not None]


def load_score_book(store: KeyValueStore, policy: HistoryPolicy = HistoryPolicy.RECENT) -> ScoreBook:
    return ScoreBook(policy=policy, best=load_best(store), history=load_history(store))


def load_gravity_table(store: KeyValueStore) -> Dict[Theme, float]:
    table = dict(DEFAULT_THEME_GRAVITY)
    raw = _safe_get(store, KEY_GRAVITY)
    if raw is None:
        return table
    if not isinstance(raw, dict):
        logger.warning("discarding corrupt gravity table %r", raw)
        return table
    for name, value in raw.items():
        try:
            theme = Theme(str(name))
            table[theme] = clamp_multiplier(float(value))
        except (TypeError, ValueError):
            logger.warning("skipping gravity entry %r=%r", name, value)
    return table


def load_difficulty(store: KeyValueStore) -> Difficulty:
    raw = _safe_get(store, KEY_DIFFICULTY)
    try:
        return Difficulty(raw) if raw is not None else Difficulty.MEDIUM
    except ValueError:
        logger.warning("unknown stored difficulty %r", raw)
        return Difficulty.MEDIUM


def load_theme(store: KeyValueStore) -> Theme:
    raw = _safe_get(store, KEY_THEME)
    try:
        return Theme(raw) if raw is not None else Theme.NIGHT
    except ValueError:
        logger.warning("unknown stored theme %r", raw)
        return Theme.NIGHT


def load_custom_background(store: KeyValueStore) -> Optional[str]:
    raw = _safe_get(store, KEY_CUSTOM_BG)
    return raw if isinstance(raw, str) and raw else None


# -------------------- Writers --------------------

def save_score_book(store: KeyValueStore, book: ScoreBook):
    store.set(KEY_BEST, book.best)
    store.set(KEY_HISTORY, [e.to_dict() for e in book.history])


def save_gravity_table(store: KeyValueStore, table: Dict[Theme, float]):
    store.set(KEY_GRAVITY, {theme.value: value for theme, value in table.items()})


def save_selection(store: KeyValueStore, difficulty: Difficulty, theme: Theme):
    store.set(KEY_DIFFICULTY, difficulty.value)
    store.set(KEY_THEME, theme.value)


def save_custom_background(store: KeyValueStore, uri: Optional[str]):
    if uri:
        store.set(KEY_CUSTOM_BG, uri)
    else:
        store.delete(KEY_CUSTOM_BG)
