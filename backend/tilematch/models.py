from datetime import datetime, timezone

from tilematch import db
from tilematch.services.games.stats import CompletedSession


class DifficultyBest(db.Model):
    __tablename__ = 'difficulty_best'
    difficulty = db.Column(db.String(16), primary_key=True)
    best_time_seconds = db.Column(db.Integer, nullable=True)
    best_moves = db.Column(db.Integer, nullable=True)

    def to_dict(self):
        return {
            'difficulty': self.difficulty,
            'best_time_seconds': self.best_time_seconds,
            'best_moves': self.best_moves,
        }


class CompletedSessionRow(db.Model):
    __tablename__ = 'completed_session'
    id = db.Column(db.Integer, primary_key=True)
    difficulty = db.Column(db.String(16), nullable=False, index=True)
    category = db.Column(db.String(64), nullable=False)
    moves = db.Column(db.Integer, nullable=False)
    time_seconds = db.Column(db.Integer, nullable=False)
    score = db.Column(db.Integer, nullable=False, index=True)
    timestamp = db.Column(db.DateTime(timezone=True), nullable=False,
                          default=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_summary(cls, summary: CompletedSession):
        return cls(
            difficulty=summary.difficulty,
            category=summary.category,
            moves=summary.moves,
            time_seconds=summary.time_seconds,
            score=summary.score,
            timestamp=summary.timestamp,
        )

    def to_summary(self) -> CompletedSession:
        ts = self.timestamp
        # SQLite hands back naive datetimes
        if ts is not None and ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return CompletedSession(
            difficulty=self.difficulty,
            category=self.category,
            moves=int(self.moves),
            time_seconds=int(self.time_seconds),
            score=int(self.score),
            timestamp=ts or datetime.now(timezone.utc),
        )

    def to_dict(self):
        return self.to_summary().to_dict()
