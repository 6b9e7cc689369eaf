"""Session snapshot and the pure transition function over it.

``reduce(state, action)`` never mutates ``state``; it returns either a new
snapshot or the very same object when the action is rejected. Callers use
identity (``new is old``) to tell a no-op from a transition.
"""
from dataclasses import dataclass, replace
from typing import Hashable, Optional, Tuple

from .board import Board, Tile
from .presets import DEFAULT_CATEGORY
from .scoring import ScoreBreakdown, score

SETUP = 'setup'
PLAYING = 'playing'
PAUSED = 'paused'
COMPLETED = 'completed'

START_GAME = 'start_game'
FLIP_TILE = 'flip_tile'
RESOLVE_SELECTION = 'resolve_selection'
PAUSE_GAME = 'pause_game'
RESUME_GAME = 'resume_game'
UPDATE_TIME = 'update_time'
RESET_GAME = 'reset_game'

MAX_SELECTION = 2


@dataclass(frozen=True)
class Action:
    type: str
    tile_id: Optional[int] = None
    board: Optional[Board] = None
    difficulty: Optional[str] = None
    category: Optional[Hashable] = None
    elapsed_seconds: Optional[int] = None


@dataclass(frozen=True)
class SessionState:
    board: Board = ()
    selection: Tuple[int, ...] = ()
    move_count: int = 0
    settled_pair_count: int = 0
    status: str = SETUP
    elapsed_seconds: int = 0
    score: int = 0
    difficulty: str = 'easy'
    category: Hashable = DEFAULT_CATEGORY
    total_pairs: int = 0
    score_breakdown: Optional[ScoreBreakdown] = None

    def tile(self, tile_id) -> Optional[Tile]:
        if isinstance(tile_id, bool) or not isinstance(tile_id, int):
            return None
        if 0 <= tile_id < len(self.board):
            return self.board[tile_id]
        return None

    def can_flip(self, tile_id) -> bool:
        if self.status != PLAYING:
            return False
        if len(self.selection) >= MAX_SELECTION:
            return False
        tile = self.tile(tile_id)
        if tile is None:
            return False
        return not (tile.revealed or tile.settled)

    @property
    def evaluation_pending(self) -> bool:
        return len(self.selection) == MAX_SELECTION

    def selection_matches(self) -> bool:
        if not self.evaluation_pending:
            return False
        first, second = (self.board[i] for i in self.selection)
        return first.pair_key == second.pair_key and first.id != second.id

    def progress(self):
        total = self.total_pairs
        settled = self.settled_pair_count
        return {
            'settled_pairs': settled,
            'total_pairs': total,
            'percentage': round(settled / total * 100) if total else 0,
            'remaining_pairs': max(0, total - settled),
        }

    def to_dict(self, reveal_all: bool = False):
        return {
            'status': self.status,
            'difficulty': self.difficulty,
            'category': self.category,
            'board': [t.to_dict(reveal_all=reveal_all) for t in self.board],
            'selection': list(self.selection),
            'move_count': self.move_count,
            'settled_pair_count': self.settled_pair_count,
            'total_pairs': self.total_pairs,
            'elapsed_seconds': self.elapsed_seconds,
            'score': self.score,
            'score_breakdown': self.score_breakdown.to_dict() if self.score_breakdown else None,
            'progress': self.progress(),
        }


def _replace_tiles(board: Board, tile_ids, **changes) -> Board:
    targets = set(tile_ids)
    return tuple(replace(t, **changes) if t.id in targets else t for t in board)


def _start_game(state: SessionState, action: Action) -> SessionState:
    if action.board is None or action.difficulty is None:
        return state
    return SessionState(
        board=action.board,
        status=PLAYING,
        difficulty=action.difficulty,
        category=action.category if action.category is not None else state.category,
        total_pairs=len(action.board) // 2,
    )


def _flip_tile(state: SessionState, action: Action) -> SessionState:
    if not state.can_flip(action.tile_id):
        return state
    return replace(
        state,
        board=_replace_tiles(state.board, [action.tile_id], revealed=True),
        selection=state.selection + (action.tile_id,),
    )


def _resolve_selection(state: SessionState, action: Action) -> SessionState:
    if state.status != PLAYING or not state.evaluation_pending:
        return state

    moves = state.move_count + 1
    if not state.selection_matches():
        return replace(
            state,
            board=_replace_tiles(state.board, state.selection, revealed=False),
            selection=(),
            move_count=moves,
        )

    settled = state.settled_pair_count + 1
    completed = settled == state.total_pairs
    breakdown = score(state.difficulty, state.elapsed_seconds, moves, settled, completed)
    return replace(
        state,
        board=_replace_tiles(state.board, state.selection, revealed=True, settled=True),
        selection=(),
        move_count=moves,
        settled_pair_count=settled,
        status=COMPLETED if completed else PLAYING,
        score=breakdown.total_score,
        score_breakdown=breakdown,
    )


def _pause_game(state: SessionState, action: Action) -> SessionState:
    if state.status != PLAYING:
        return state
    return replace(state, status=PAUSED)


def _resume_game(state: SessionState, action: Action) -> SessionState:
    if state.status != PAUSED:
        return state
    return replace(state, status=PLAYING)


def _update_time(state: SessionState, action: Action) -> SessionState:
    if action.elapsed_seconds is None or action.elapsed_seconds == state.elapsed_seconds:
        return state
    if state.status not in (PLAYING, PAUSED):
        return state
    return replace(state, elapsed_seconds=int(action.elapsed_seconds))


def _reset_game(state: SessionState, action: Action) -> SessionState:
    return SessionState(difficulty=state.difficulty, category=state.category)


_HANDLERS = {
    START_GAME: _start_game,
    FLIP_TILE: _flip_tile,
    RESOLVE_SELECTION: _resolve_selection,
    PAUSE_GAME: _pause_game,
    RESUME_GAME: _resume_game,
    UPDATE_TIME: _update_time,
    RESET_GAME: _reset_game,
}


def reduce(state: SessionState, action: Action) -> SessionState:
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    return handler(state, action)
