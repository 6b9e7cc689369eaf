"""The game session engine.

A ``GameSession`` owns one immutable ``SessionState`` and replaces it through
``state.reduce``. Every public operation and every deferred callback runs
under the session lock, so transitions never interleave.

Turn flow: the second accepted flip fills the selection and schedules a
``resolve_selection`` after a settle delay, shorter for a match than for a
mismatch so the player gets longer to memorise a miss. The full selection
blocks further flips until then. Reset, new games and pauses cancel the
pending call; resume schedules it again.
"""
import logging
import random
import threading
from typing import Callable, List, Optional

from . import state as st
from .board import create_board
from .clock import Clock, ClockState, format_time
from .presets import get_category, get_difficulty
from .scoring import efficiency_rating, score_grade
from .stats import DEFAULT_HISTORY_LIMIT, CompletedSession, personal_best

logger = logging.getLogger(__name__)

MATCH_DELAY_SEC = 0.5
MISMATCH_DELAY_SEC = 1.5

Listener = Callable[[st.SessionState], None]


class GameSession:
    def __init__(self, scheduler, code: str = '', store=None, rng: Optional[random.Random] = None,
                 match_delay: float = MATCH_DELAY_SEC, mismatch_delay: float = MISMATCH_DELAY_SEC,
                 tick_interval: float = 1.0, sample_symbols: bool = True,
                 history_limit: int = DEFAULT_HISTORY_LIMIT):
        self.code = code
        self._scheduler = scheduler
        self._store = store
        self._rng = rng
        self._match_delay = match_delay
        self._mismatch_delay = mismatch_delay
        self._sample_symbols = sample_symbols
        self._history_limit = history_limit
        self._lock = threading.RLock()
        self._state = st.SessionState()
        self._clock = Clock(scheduler, tick_interval=tick_interval, on_tick=self._on_tick, lock=self._lock)
        self._pending = None
        self._generation = 0
        self._listeners: List[Listener] = []
        self._disposed = False
        self.result = None
        self.last_active = scheduler.now()

    # -- queries --

    def get_state(self) -> st.SessionState:
        return self._state

    def idle_for(self) -> float:
        """Seconds since the last player operation."""
        return self._scheduler.now() - self.last_active

    def can_flip(self, tile_id) -> bool:
        return self._state.can_flip(tile_id)

    def clock_state(self) -> ClockState:
        with self._lock:
            return self._clock.state

    @property
    def evaluation_scheduled(self) -> bool:
        return self._pending is not None and self._pending.pending

    def snapshot(self):
        with self._lock:
            payload = self._state.to_dict()
            payload['session_code'] = self.code
            payload['clock'] = self._clock.state.to_dict()
            payload['formatted_time'] = format_time(self._state.elapsed_seconds)
            payload['result'] = self.result
            return payload

    # -- observers --

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def _notify(self) -> None:
        snapshot = self._state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"[notify-failed] session={self.code} listener={listener!r}")

    def _dispatch(self, action: st.Action) -> bool:
        new_state = st.reduce(self._state, action)
        if new_state is self._state:
            return False
        self._state = new_state
        self._notify()
        return True

    # -- operations --

    def start_game(self, difficulty: str, category: str) -> st.SessionState:
        """Build a fresh board and start playing.

        Raises a ``GameConfigurationError`` subclass for an unknown difficulty
        or category, or when the category has too few symbols. In that case
        the current session is left as it was.
        """
        preset = get_difficulty(difficulty)
        symbols = get_category(category)
        board = create_board(preset.pairs, symbols.symbols, rng=self._rng,
                             sample=self._sample_symbols, pool_name=f"category '{symbols.name}'")
        with self._lock:
            self.last_active = self._scheduler.now()
            if self._disposed:
                return self._state
            self._cancel_pending()
            self._generation += 1
            self.result = None
            self._clock.reset()
            self._dispatch(st.Action(st.START_GAME, board=board, difficulty=difficulty, category=category))
            self._clock.start()
            logger.info(f"[start] session={self.code} difficulty={difficulty} category={category} tiles={len(board)}")
            return self._state

    def flip_tile(self, tile_id) -> bool:
        with self._lock:
            self.last_active = self._scheduler.now()
            if not self._dispatch(st.Action(st.FLIP_TILE, tile_id=tile_id)):
                logger.debug(f"[flip-rejected] session={self.code} tile={tile_id}")
                return False
            logger.debug(f"[flip] session={self.code} tile={tile_id} selection={list(self._state.selection)}")
            if self._state.evaluation_pending:
                self._schedule_evaluation()
            return True

    def pause_game(self) -> bool:
        with self._lock:
            self.last_active = self._scheduler.now()
            if self._state.status != st.PLAYING:
                return False
            self._cancel_pending()
            self._clock.pause()
            self._sync_time()
            self._dispatch(st.Action(st.PAUSE_GAME))
            logger.info(f"[pause] session={self.code} elapsed={self._state.elapsed_seconds}s")
            return True

    def resume_game(self) -> bool:
        with self._lock:
            self.last_active = self._scheduler.now()
            if self._state.status != st.PAUSED:
                return False
            self._dispatch(st.Action(st.RESUME_GAME))
            self._clock.resume()
            if self._state.evaluation_pending:
                self._schedule_evaluation()
            logger.info(f"[resume] session={self.code} elapsed={self._state.elapsed_seconds}s")
            return True

    def reset_game(self) -> st.SessionState:
        with self._lock:
            self.last_active = self._scheduler.now()
            self._cancel_pending()
            self._generation += 1
            self._clock.reset()
            self.result = None
            self._dispatch(st.Action(st.RESET_GAME))
            logger.info(f"[reset] session={self.code}")
            return self._state

    def dispose(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._clock.dispose()
            self._listeners.clear()
            self._disposed = True

    # -- deferred evaluation --

    def _schedule_evaluation(self) -> None:
        self._cancel_pending()
        current = self._state
        delay = self._match_delay if current.selection_matches() else self._mismatch_delay
        self._pending = self._scheduler.call_later(delay, self._evaluate, self._generation, current.selection)
        logger.debug(f"[evaluate-set] session={self.code} selection={list(current.selection)} delay={delay}s")

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _evaluate(self, generation: int, expected_selection) -> None:
        with self._lock:
            current = self._state
            if (self._disposed or generation != self._generation
                    or current.status != st.PLAYING
                    or current.selection != expected_selection):
                logger.info(f"[evaluate-skip] session={self.code} stale callback status={current.status}")
                return
            self._pending = None
            self._sync_time()
            matched = current.selection_matches()
            self._dispatch(st.Action(st.RESOLVE_SELECTION))
            logger.debug(
                f"[evaluate] session={self.code} match={matched} moves={self._state.move_count} "
                f"settled={self._state.settled_pair_count}/{self._state.total_pairs}"
            )
            if self._state.status == st.COMPLETED:
                self._complete()

    # -- clock --

    def _on_tick(self, elapsed_seconds: int) -> None:
        with self._lock:
            if self._disposed:
                return
            self._dispatch(st.Action(st.UPDATE_TIME, elapsed_seconds=elapsed_seconds))

    def _sync_time(self) -> None:
        self._dispatch(st.Action(st.UPDATE_TIME, elapsed_seconds=self._clock.elapsed_seconds))

    # -- completion --

    def _complete(self) -> None:
        self._clock.stop()
        final = self._state
        rating = efficiency_rating(final.difficulty, final.elapsed_seconds, final.move_count)
        summary = CompletedSession(
            difficulty=final.difficulty,
            category=str(final.category),
            moves=final.move_count,
            time_seconds=final.elapsed_seconds,
            score=final.score,
        )
        self.result = {
            'score_breakdown': final.score_breakdown.to_dict() if final.score_breakdown else None,
            'efficiency_rating': rating,
            'grade': score_grade(rating),
            'personal_best': self._record(summary),
        }
        logger.info(
            f"[complete] session={self.code} moves={final.move_count} time={final.elapsed_seconds}s "
            f"score={final.score}"
        )
        self._notify()

    def _record(self, summary: CompletedSession):
        if self._store is None:
            return personal_best(None, summary.difficulty, summary.moves, summary.time_seconds)
        try:
            best, saved = self._store.record(summary, self._history_limit)
        except Exception:
            logger.exception(f"[stats-save-failed] session={self.code} store raised")
            return personal_best(None, summary.difficulty, summary.moves, summary.time_seconds)
        if not saved:
            logger.warning(f"[stats-save-failed] session={self.code} result kept in memory only")
        return best
