"""Persistence adapters for the statistics record.

Both stores follow the same contract: ``load()`` returns a record or None
and never raises; ``save(record)`` returns whether the write stuck. A failed
save is logged and otherwise ignored, since game state never depends on it.

``record(summary, history_limit)`` folds one finished game into the stored
record as a single step under the store lock, so sessions sharing a store
cannot overwrite each other's results.
"""
import copy
import logging
import threading
from typing import Optional

from tilematch import db
from tilematch.models import CompletedSessionRow, DifficultyBest

from .stats import DEFAULT_HISTORY_LIMIT, CompletedSession, PersistedRecord, personal_best, record_completed_session

logger = logging.getLogger(__name__)


class MemoryStatsStore:
    def __init__(self, record: Optional[PersistedRecord] = None):
        self._record = record
        self._lock = threading.RLock()

    def load(self) -> Optional[PersistedRecord]:
        with self._lock:
            return copy.deepcopy(self._record)

    def save(self, record: PersistedRecord) -> bool:
        with self._lock:
            self._record = copy.deepcopy(record)
        return True

    def record(self, summary: CompletedSession, history_limit: int = DEFAULT_HISTORY_LIMIT):
        """Returns ``(personal_best_flags, saved)``."""
        with self._lock:
            current = self.load() or PersistedRecord()
            best = personal_best(current, summary.difficulty, summary.moves, summary.time_seconds)
            saved = self.save(record_completed_session(current, summary, history_limit))
            return best, saved

    def clear(self) -> None:
        with self._lock:
            self._record = None


class SqlStatsStore:
    """Stores the record in the ``difficulty_best`` and ``completed_session`` tables.

    Holds a reference to the Flask app so it can open an app context when
    called from a background task.
    """

    def __init__(self, app):
        self.app = app
        self._lock = threading.Lock()

    def _read(self) -> Optional[PersistedRecord]:
        bests = DifficultyBest.query.all()
        rows = CompletedSessionRow.query.order_by(CompletedSessionRow.score.desc()).all()
        if not bests and not rows:
            return None
        return PersistedRecord(
            best_time_by_difficulty={
                b.difficulty: int(b.best_time_seconds) for b in bests if b.best_time_seconds is not None
            },
            best_moves_by_difficulty={
                b.difficulty: int(b.best_moves) for b in bests if b.best_moves is not None
            },
            completed_sessions=[r.to_summary() for r in rows],
        )

    def _write(self, record: PersistedRecord) -> None:
        DifficultyBest.query.delete()
        CompletedSessionRow.query.delete()
        difficulties = set(record.best_time_by_difficulty) | set(record.best_moves_by_difficulty)
        for difficulty in sorted(difficulties):
            db.session.add(DifficultyBest(
                difficulty=difficulty,
                best_time_seconds=record.best_time_by_difficulty.get(difficulty),
                best_moves=record.best_moves_by_difficulty.get(difficulty),
            ))
        for summary in record.completed_sessions:
            db.session.add(CompletedSessionRow.from_summary(summary))

    def load(self) -> Optional[PersistedRecord]:
        with self.app.app_context():
            try:
                return self._read()
            except Exception as exc:
                db.session.rollback()
                logger.warning(f"[stats-load-failed] treating stored stats as empty: {exc}")
                return None

    def save(self, record: PersistedRecord) -> bool:
        with self._lock, self.app.app_context():
            try:
                self._write(record)
                db.session.commit()
                return True
            except Exception as exc:
                db.session.rollback()
                logger.warning(f"[stats-save-failed] {exc}")
                return False

    def record(self, summary: CompletedSession, history_limit: int = DEFAULT_HISTORY_LIMIT):
        """Read, fold in ``summary`` and write back in one transaction."""
        with self._lock, self.app.app_context():
            try:
                current = self._read() or PersistedRecord()
            except Exception as exc:
                db.session.rollback()
                logger.warning(f"[stats-load-failed] treating stored stats as empty: {exc}")
                current = PersistedRecord()
            best = personal_best(current, summary.difficulty, summary.moves, summary.time_seconds)
            try:
                self._write(record_completed_session(current, summary, history_limit))
                db.session.commit()
            except Exception as exc:
                db.session.rollback()
                logger.warning(f"[stats-save-failed] {exc}")
                return best, False
            return best, True

    def clear(self) -> None:
        self.save(PersistedRecord())


def make_stats_store(app):
    backend = (app.config.get('STATS_BACKEND') or 'sql').lower()
    if backend == 'memory':
        return MemoryStatsStore()
    return SqlStatsStore(app)
