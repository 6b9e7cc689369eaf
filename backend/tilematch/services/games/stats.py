"""Aggregate statistics over completed sessions.

The persisted record is plain data; every function here takes a record and
returns a value or a new record, leaving storage to the persistence adapters.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .presets import DIFFICULTIES

DEFAULT_HISTORY_LIMIT = 100


@dataclass(frozen=True)
class CompletedSession:
    difficulty: str
    category: str
    moves: int
    time_seconds: int
    score: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            'difficulty': self.difficulty,
            'category': self.category,
            'moves': self.moves,
            'time_seconds': self.time_seconds,
            'score': self.score,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class PersistedRecord:
    best_time_by_difficulty: Dict[str, int] = field(default_factory=dict)
    best_moves_by_difficulty: Dict[str, int] = field(default_factory=dict)
    completed_sessions: List[CompletedSession] = field(default_factory=list)

    def to_dict(self):
        return {
            'best_time_by_difficulty': dict(self.best_time_by_difficulty),
            'best_moves_by_difficulty': dict(self.best_moves_by_difficulty),
            'completed_sessions': [s.to_dict() for s in self.completed_sessions],
        }


def _lower(current: Optional[int], candidate: int) -> int:
    return candidate if current is None or candidate < current else current


def record_completed_session(record: PersistedRecord, summary: CompletedSession,
                             history_limit: int = DEFAULT_HISTORY_LIMIT) -> PersistedRecord:
    best_times = dict(record.best_time_by_difficulty)
    best_moves = dict(record.best_moves_by_difficulty)
    best_times[summary.difficulty] = _lower(best_times.get(summary.difficulty), summary.time_seconds)
    best_moves[summary.difficulty] = _lower(best_moves.get(summary.difficulty), summary.moves)

    sessions = sorted(
        list(record.completed_sessions) + [summary],
        key=lambda s: s.score,
        reverse=True,
    )
    if history_limit is not None and history_limit >= 0:
        sessions = sessions[:history_limit]
    return replace(
        record,
        best_time_by_difficulty=best_times,
        best_moves_by_difficulty=best_moves,
        completed_sessions=sessions,
    )


def personal_best(record: Optional[PersistedRecord], difficulty: str, moves: int, time_seconds: int):
    best_time = record.best_time_by_difficulty.get(difficulty) if record else None
    best_moves = record.best_moves_by_difficulty.get(difficulty) if record else None
    is_time = best_time is None or time_seconds < best_time
    is_moves = best_moves is None or moves < best_moves
    return {'time': is_time, 'moves': is_moves, 'either': is_time or is_moves}


def high_scores(record: PersistedRecord, difficulty: Optional[str] = None, limit: int = 10) -> List[CompletedSession]:
    sessions = record.completed_sessions
    if difficulty:
        sessions = [s for s in sessions if s.difficulty == difficulty]
    return sorted(sessions, key=lambda s: s.score, reverse=True)[:max(0, limit)]


def _average(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0


def difficulty_stats(record: PersistedRecord, difficulty: str):
    sessions = [s for s in record.completed_sessions if s.difficulty == difficulty]
    return {
        'difficulty': difficulty,
        'games_played': len(sessions),
        'best_time': record.best_time_by_difficulty.get(difficulty, 0),
        'best_moves': record.best_moves_by_difficulty.get(difficulty, 0),
        'average_time': _average(s.time_seconds for s in sessions),
        'average_moves': _average(s.moves for s in sessions),
        'highest_score': max((s.score for s in sessions), default=0),
    }


def summarize(record: Optional[PersistedRecord]):
    record = record or PersistedRecord()
    sessions = record.completed_sessions
    categories: Dict[str, int] = {}
    for s in sessions:
        categories[s.category] = categories.get(s.category, 0) + 1
    return {
        'total_games': len(sessions),
        'average_time': _average(s.time_seconds for s in sessions),
        'average_moves': _average(s.moves for s in sessions),
        'total_play_time': sum(s.time_seconds for s in sessions),
        'best_time_by_difficulty': dict(record.best_time_by_difficulty),
        'best_moves_by_difficulty': dict(record.best_moves_by_difficulty),
        'games_by_category': categories,
        'difficulties': {d: difficulty_stats(record, d) for d in DIFFICULTIES},
    }
