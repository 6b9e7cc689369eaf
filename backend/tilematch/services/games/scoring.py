"""Score calculation.

Everything here is a pure function of its arguments. ``score`` returns the
full breakdown so the final number can be audited term by term.
"""
import math
from dataclasses import asdict, dataclass

from .presets import get_difficulty

BASE_MATCH_POINTS = 100
PERFECT_MATCH_BONUS = 500
TIME_BONUS_MAX = 1000
TIME_BONUS_THRESHOLD = 300  # seconds until the time bonus reaches 0
MOVE_PENALTY_MULTIPLIER = 10
COMPLETION_BONUS = 200
DIFFICULTY_MULTIPLIERS = {
    'easy': 1.0,
    'medium': 1.5,
    'hard': 2.0,
    'expert': 2.5,
}


@dataclass(frozen=True)
class ScoreBreakdown:
    base_score: int = 0
    difficulty_bonus: int = 0
    time_bonus: int = 0
    move_efficiency: int = 0
    completion_bonus: int = 0
    perfect_bonus: int = 0
    total_score: int = 0

    def to_dict(self):
        return asdict(self)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def optimal_moves(difficulty: str) -> int:
    """Fewest moves a game can take: one per pair, with perfect memory."""
    return get_difficulty(difficulty).pairs


def time_bonus(elapsed_seconds: float) -> int:
    if elapsed_seconds <= 0:
        return TIME_BONUS_MAX
    return max(0, round_half_up(TIME_BONUS_MAX * (1 - elapsed_seconds / TIME_BONUS_THRESHOLD)))


def move_efficiency(moves: int, difficulty: str) -> int:
    # unbounded either way; only the total is clamped
    return (optimal_moves(difficulty) - moves) * MOVE_PENALTY_MULTIPLIER


def difficulty_bonus(base_score: int, difficulty: str) -> int:
    get_difficulty(difficulty)
    return round_half_up(base_score * (DIFFICULTY_MULTIPLIERS[difficulty] - 1))


def score(difficulty: str, elapsed_seconds: float, moves: int, settled_pairs: int,
          completed: bool = False) -> ScoreBreakdown:
    base = settled_pairs * BASE_MATCH_POINTS
    diff_bonus = difficulty_bonus(base, difficulty)

    t_bonus = efficiency = completion = perfect = 0
    if completed:
        t_bonus = time_bonus(elapsed_seconds)
        efficiency = move_efficiency(moves, difficulty)
        completion = COMPLETION_BONUS
        if moves == optimal_moves(difficulty):
            perfect = PERFECT_MATCH_BONUS

    total = max(0, base + diff_bonus + t_bonus + efficiency + completion + perfect)
    return ScoreBreakdown(
        base_score=base,
        difficulty_bonus=diff_bonus,
        time_bonus=t_bonus,
        move_efficiency=efficiency,
        completion_bonus=completion,
        perfect_bonus=perfect,
        total_score=total,
    )


def efficiency_rating(difficulty: str, elapsed_seconds: float, moves: int) -> int:
    """0-100 rating: half for moves against optimal, half for time."""
    optimal = optimal_moves(difficulty)
    move_part = max(0.0, 50 - ((moves - optimal) / optimal) * 25)
    time_part = max(0.0, 50 - (elapsed_seconds / TIME_BONUS_THRESHOLD) * 25)
    return round_half_up(min(100.0, move_part + time_part))


def score_grade(rating: int) -> str:
    if rating >= 90:
        return 'S'
    if rating >= 80:
        return 'A'
    if rating >= 70:
        return 'B'
    if rating >= 60:
        return 'C'
    if rating >= 50:
        return 'D'
    return 'F'


def format_score(value: int) -> str:
    return f"{value:,}"
