"""In-memory registry of live game sessions, keyed by a short session code.

Sessions nobody has touched for ``idle_timeout`` seconds are swept out and
disposed, so abandoned games do not keep their clocks running forever.
"""
import logging
import random
import string
import threading
from typing import Callable, Dict, List, Optional

from .session import GameSession

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT_SEC = 1800
DEFAULT_SWEEP_INTERVAL_SEC = 60


def generate_session_code(taken, length: int = 4, rng: Optional[random.Random] = None) -> str:
    """Generate a short code not present in ``taken``."""
    source = rng if rng is not None else random
    while True:
        code = ''.join(source.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in taken:
            return code


class SessionRegistry:
    def __init__(self, scheduler, store=None, code_length: int = 4,
                 session_factory: Optional[Callable[..., GameSession]] = None,
                 idle_timeout: float = DEFAULT_IDLE_TIMEOUT_SEC,
                 sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SEC,
                 on_expire: Optional[Callable[[str], None]] = None, **session_options):
        self.scheduler = scheduler
        self.store = store
        self.idle_timeout = idle_timeout
        self.sweep_interval = sweep_interval
        # called with the code of each session the sweep removes
        self.on_expire = on_expire
        self._code_length = code_length
        self._factory = session_factory or GameSession
        self._options = session_options
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()
        self._sweep_handle = None

    def create(self) -> GameSession:
        with self._lock:
            code = generate_session_code(self._sessions, self._code_length)
            session = self._factory(self.scheduler, code=code, store=self.store, **self._options)
            self._sessions[code] = session
            self._ensure_sweep()
        logger.info(f"[session-create] session={code}")
        return session

    def get(self, code: str) -> Optional[GameSession]:
        if not code:
            return None
        return self._sessions.get(code.upper())

    def remove(self, code: str) -> bool:
        with self._lock:
            session = self._sessions.pop((code or '').upper(), None)
        if session is None:
            return False
        session.dispose()
        logger.info(f"[session-end] session={session.code}")
        return True

    def expire_idle(self) -> List[str]:
        """Remove every session idle for at least ``idle_timeout`` seconds."""
        if not self.idle_timeout or self.idle_timeout <= 0:
            return []
        with self._lock:
            stale = [code for code, s in self._sessions.items() if s.idle_for() >= self.idle_timeout]
        expired = []
        for code in stale:
            if self.remove(code):
                logger.info(f"[session-expire] session={code} idle>={self.idle_timeout}s")
                expired.append(code)
                if self.on_expire is not None:
                    try:
                        self.on_expire(code)
                    except Exception:
                        logger.exception(f"[session-expire] session={code} on_expire failed")
        return expired

    def _ensure_sweep(self) -> None:
        if not self.idle_timeout or self.idle_timeout <= 0:
            return
        if self._sweep_handle is not None and self._sweep_handle.pending:
            return
        self._sweep_handle = self.scheduler.call_later(self.sweep_interval, self._sweep)

    def _sweep(self) -> None:
        self.expire_idle()
        with self._lock:
            self._sweep_handle = None
            # stop sweeping once nothing is left to expire
            if self._sessions:
                self._ensure_sweep()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, code) -> bool:
        return isinstance(code, str) and code.upper() in self._sessions

    def close(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            if self._sweep_handle is not None:
                self._sweep_handle.cancel()
                self._sweep_handle = None
        for session in sessions:
            session.dispose()
