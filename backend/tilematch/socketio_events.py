from typing import Any, Dict

from flask import current_app, request
from flask_socketio import join_room, leave_room, emit
from tilematch import socketio, get_registry


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # If this socket owned a session and no other owner remains, end the
    # session after a grace period so a quick reconnect keeps it alive
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx or not ctx.get('is_session_owner'):
        return
    code = ctx['session_code']
    _owner_count[code] = max(0, _owner_count.get(code, 0) - 1)
    grace = float(current_app.config.get('OWNER_GRACE_SEC', 2))
    _schedule_end_if_no_owner(get_registry(), code, grace)


def handle_join_session(data):
    session_code = (data or {}).get('session_code')
    if not session_code:
        emit('error', {'message': 'session_code is required'})
        return
    code = session_code.upper()
    room = f"session:{code}"
    join_room(room)
    is_session_owner = bool((data or {}).get('is_session_owner'))
    _sid_to_ctx[_get_sid()] = {'session_code': code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[code] = _owner_count.get(code, 0) + 1
        _cancel_scheduled_end(code)
    session = get_registry().get(code)
    emit('joined', {'room': room, 'exists': session is not None})


def handle_leave_session(data):
    session_code = (data or {}).get('session_code')
    if not session_code:
        emit('error', {'message': 'session_code is required'})
        return
    code = session_code.upper()
    room = f"session:{code}"
    leave_room(room)
    emit('left', {'room': room})
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner') and ctx.get('session_code') == code:
        # Explicit quit by the owner: end immediately
        _sid_to_ctx.pop(_get_sid(), None)
        end_session(get_registry(), code)


def handle_ping(data):
    emit('pong', data or {})


# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_pending_end: Dict[str, Any] = {}


def _get_sid() -> str:
    return request.sid  # type: ignore


def notify_session_ended(code: str) -> None:
    # socketio.emit since this may run from a background task
    socketio.emit('session_ended', {'session_code': code}, to=f"session:{code}", namespace='/ws')


def end_session(registry, code: str) -> bool:
    """Dispose the session and tell its room. Returns False for unknown codes."""
    code = code.upper()
    _owner_count.pop(code, None)
    _cancel_scheduled_end(code)
    if not registry.remove(code):
        return False
    notify_session_ended(code)
    return True


def _schedule_end_if_no_owner(registry, code: str, delay_sec: float) -> None:
    if _owner_count.get(code, 0) > 0:
        return
    _cancel_scheduled_end(code)

    def _runner(session_code: str):
        _pending_end.pop(session_code, None)
        if _owner_count.get(session_code, 0) == 0:
            end_session(registry, session_code)

    _pending_end[code] = registry.scheduler.call_later(delay_sec, _runner, code)


def _cancel_scheduled_end(code: str) -> None:
    handle = _pending_end.pop(code, None)
    if handle is not None:
        handle.cancel()


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join_session', handle_join_session, namespace=namespace)
        socketio.on_event('leave_session', handle_leave_session, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
