from flask import Blueprint, current_app, jsonify, request

from tilematch import get_registry, socketio
from tilematch.services.games.errors import GameConfigurationError
from tilematch.socketio_events import end_session

sessions = Blueprint('sessions', __name__)


def _emit_state_update(code: str) -> None:
    socketio.emit('state_update', {'session_code': code}, to=f"session:{code}", namespace='/ws')


def _get_session_or_404(session_code):
    session = get_registry().get(session_code)
    if session is None:
        return None, (jsonify({'error': 'Session not found'}), 404)
    return session, None


def _state_response(session, accepted=None):
    payload = session.snapshot()
    if accepted is not None:
        payload['accepted'] = accepted
    return jsonify(payload)


@sessions.route('/create', methods=['POST'])
def create_session():
    session = get_registry().create()
    code = session.code
    session.subscribe(lambda _state: _emit_state_update(code))
    return jsonify({
        'message': 'New session created!',
        'session_code': code,
    }), 201


@sessions.route('/<string:session_code>/start', methods=['POST'])
def start_game(session_code):
    session, error = _get_session_or_404(session_code)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    difficulty = data.get('difficulty') or current_app.config.get('DEFAULT_DIFFICULTY', 'easy')
    category = data.get('category') or current_app.config.get('DEFAULT_CATEGORY', 'food')
    try:
        session.start_game(difficulty, category)
    except GameConfigurationError as exc:
        current_app.logger.warning(f"[start-rejected] session={session.code} {exc}")
        return jsonify({'error': str(exc)}), 400
    return _state_response(session)


@sessions.route('/<string:session_code>/flip', methods=['POST'])
def flip_tile(session_code):
    session, error = _get_session_or_404(session_code)
    if error:
        return error
    data = request.get_json(silent=True)
    tile_id = data.get('tile_id') if isinstance(data, dict) else None
    # JSON true/false arrive as bool, a subclass of int
    if isinstance(tile_id, bool) or not isinstance(tile_id, int):
        return jsonify({'error': 'An integer tile_id is required'}), 400
    accepted = session.flip_tile(tile_id)
    return _state_response(session, accepted)


@sessions.route('/<string:session_code>/pause', methods=['POST'])
def pause_game(session_code):
    session, error = _get_session_or_404(session_code)
    if error:
        return error
    return _state_response(session, session.pause_game())


@sessions.route('/<string:session_code>/resume', methods=['POST'])
def resume_game(session_code):
    session, error = _get_session_or_404(session_code)
    if error:
        return error
    return _state_response(session, session.resume_game())


@sessions.route('/<string:session_code>/reset', methods=['POST'])
def reset_game(session_code):
    session, error = _get_session_or_404(session_code)
    if error:
        return error
    session.reset_game()
    return _state_response(session, True)


@sessions.route('/<string:session_code>/state', methods=['GET'])
def get_state(session_code):
    session, error = _get_session_or_404(session_code)
    if error:
        return error
    return _state_response(session)


@sessions.route('/<string:session_code>/tiles/<int:tile_id>/can-flip', methods=['GET'])
def can_flip(session_code, tile_id):
    session, error = _get_session_or_404(session_code)
    if error:
        return error
    return jsonify({'tile_id': tile_id, 'can_flip': session.can_flip(tile_id)})


@sessions.route('/<string:session_code>', methods=['DELETE'])
def delete_session(session_code):
    if not end_session(get_registry(), session_code):
        return jsonify({'error': 'Session not found'}), 404
    return jsonify({'message': 'Session ended'})
