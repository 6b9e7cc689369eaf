from conftest import find_mismatch, find_pair
from tilematch import get_registry


def create_session(client):
    res = client.post('/api/sessions/create')
    assert res.status_code == 201
    return res.get_json()['session_code']


def start_session(client, code, **body):
    res = client.post(f'/api/sessions/{code}/start', json=body)
    assert res.status_code == 200
    return res.get_json()


def full_state(flask_app, code):
    # the server-side state, symbols included
    return get_registry(flask_app).get(code).get_state()


def test_index_and_presets(client):
    assert client.get('/').status_code == 200
    data = client.get('/api/presets').get_json()
    assert data['difficulties']['expert'] == {'rows': 6, 'cols': 8, 'pairs': 24}
    assert data['defaults'] == {'difficulty': 'easy', 'category': 'food'}
    food = next(c for c in data['categories'] if c['id'] == 'food')
    assert food['supports']['easy'] is True


def test_create_and_state(client):
    code = create_session(client)
    res = client.get(f'/api/sessions/{code}/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['session_code'] == code
    assert state['status'] == 'setup'
    assert state['board'] == []


def test_start_hides_face_down_symbols(client):
    code = create_session(client)
    state = start_session(client, code, difficulty='medium', category='animals')
    assert state['status'] == 'playing'
    assert len(state['board']) == 24
    assert state['total_pairs'] == 12
    assert all(t['symbol'] is None for t in state['board'])
    assert state['formatted_time'] == '00:00'


def test_start_uses_defaults(client):
    code = create_session(client)
    state = start_session(client, code)
    assert state['difficulty'] == 'easy'
    assert state['category'] == 'food'


def test_start_rejects_unknown_presets(client):
    code = create_session(client)
    res = client.post(f'/api/sessions/{code}/start', json={'difficulty': 'legendary'})
    assert res.status_code == 400
    assert 'legendary' in res.get_json()['error']
    res = client.post(f'/api/sessions/{code}/start', json={'category': 'planets'})
    assert res.status_code == 400
    assert client.get(f'/api/sessions/{code}/state').get_json()['status'] == 'setup'


def test_session_codes_are_case_insensitive(client):
    code = create_session(client)
    assert client.get(f'/api/sessions/{code.lower()}/state').status_code == 200


def test_unknown_session_404(client):
    for method, path in [
        ('get', '/api/sessions/ZZZZZ/state'),
        ('post', '/api/sessions/ZZZZZ/start'),
        ('post', '/api/sessions/ZZZZZ/flip'),
        ('post', '/api/sessions/ZZZZZ/pause'),
        ('delete', '/api/sessions/ZZZZZ'),
    ]:
        res = getattr(client, method)(path)
        assert res.status_code == 404
        assert res.get_json()['error'] == 'Session not found'


def test_flip_requires_tile_id(client):
    code = create_session(client)
    start_session(client, code)
    assert client.post(f'/api/sessions/{code}/flip', json={}).status_code == 400
    assert client.post(f'/api/sessions/{code}/flip', json={'tile_id': 'abc'}).status_code == 400
    for bad in (3.7, True, False, '3', None, [1]):
        res = client.post(f'/api/sessions/{code}/flip', json={'tile_id': bad})
        assert res.status_code == 400
    assert client.post(f'/api/sessions/{code}/flip', json=[0]).status_code == 400
    state = client.get(f'/api/sessions/{code}/state').get_json()
    assert state['selection'] == []


def test_flip_match_and_mismatch(flask_app, client, scheduler):
    code = create_session(client)
    start_session(client, code)
    first, second = find_pair(full_state(flask_app, code))

    res = client.post(f'/api/sessions/{code}/flip', json={'tile_id': first}).get_json()
    assert res['accepted'] is True
    assert res['board'][first]['symbol'] is not None
    client.post(f'/api/sessions/{code}/flip', json={'tile_id': second})

    blocked = client.get(f'/api/sessions/{code}/tiles/{(first + 1) % 16}/can-flip').get_json()
    assert blocked['can_flip'] is False

    scheduler.advance_ms(500)
    state = client.get(f'/api/sessions/{code}/state').get_json()
    assert state['board'][first]['settled'] is True
    assert state['move_count'] == 1
    assert state['settled_pair_count'] == 1
    assert state['score'] == 100

    a, b = find_mismatch(full_state(flask_app, code))
    client.post(f'/api/sessions/{code}/flip', json={'tile_id': a})
    client.post(f'/api/sessions/{code}/flip', json={'tile_id': b})
    scheduler.advance_ms(1500)
    state = client.get(f'/api/sessions/{code}/state').get_json()
    assert state['board'][a]['revealed'] is False
    assert state['board'][a]['symbol'] is None
    assert state['move_count'] == 2


def test_rejected_flip_reports_not_accepted(client):
    code = create_session(client)
    start_session(client, code)
    client.post(f'/api/sessions/{code}/flip', json={'tile_id': 0})
    res = client.post(f'/api/sessions/{code}/flip', json={'tile_id': 0}).get_json()
    assert res['accepted'] is False
    res = client.post(f'/api/sessions/{code}/flip', json={'tile_id': 400}).get_json()
    assert res['accepted'] is False


def test_pause_resume_reset(client, scheduler):
    code = create_session(client)
    start_session(client, code)
    scheduler.advance(2)
    paused = client.post(f'/api/sessions/{code}/pause').get_json()
    assert paused['accepted'] is True
    assert paused['status'] == 'paused'
    assert paused['clock']['paused'] is True
    assert client.post(f'/api/sessions/{code}/pause').get_json()['accepted'] is False
    assert client.post(f'/api/sessions/{code}/flip', json={'tile_id': 0}).get_json()['accepted'] is False

    scheduler.advance(10)
    resumed = client.post(f'/api/sessions/{code}/resume').get_json()
    assert resumed['status'] == 'playing'
    assert resumed['elapsed_seconds'] == 2

    reset = client.post(f'/api/sessions/{code}/reset').get_json()
    assert reset['status'] == 'setup'
    assert reset['elapsed_seconds'] == 0
    assert reset['board'] == []


def test_complete_game_records_stats(flask_app, client, scheduler):
    code = create_session(client)
    start_session(client, code)
    scheduler.advance(5)
    for _ in range(8):
        first, second = find_pair(full_state(flask_app, code))
        client.post(f'/api/sessions/{code}/flip', json={'tile_id': first})
        client.post(f'/api/sessions/{code}/flip', json={'tile_id': second})
        scheduler.advance_ms(500)

    state = client.get(f'/api/sessions/{code}/state').get_json()
    assert state['status'] == 'completed'
    assert state['progress']['percentage'] == 100
    assert state['result']['personal_best']['either'] is True
    assert state['score_breakdown']['perfect_bonus'] == 500

    summary = client.get('/api/stats').get_json()
    assert summary['total_games'] == 1
    assert summary['best_moves_by_difficulty'] == {'easy': 8}
    assert summary['best_time_by_difficulty'] == {'easy': 9}

    scores = client.get('/api/stats/high-scores?difficulty=easy').get_json()
    assert len(scores) == 1
    assert scores[0]['score'] == state['score']

    easy = client.get('/api/stats/easy').get_json()
    assert easy['games_played'] == 1
    assert easy['highest_score'] == state['score']

    assert client.delete('/api/stats').status_code == 200
    assert client.get('/api/stats').get_json()['total_games'] == 0


def test_stats_validation(client):
    assert client.get('/api/stats/impossible').status_code == 404
    assert client.get('/api/stats/high-scores?difficulty=impossible').status_code == 400
    assert client.get('/api/stats/high-scores?limit=lots').status_code == 400
    assert client.get('/api/stats/high-scores').get_json() == []


def test_delete_session(flask_app, client):
    code = create_session(client)
    start_session(client, code)
    res = client.delete(f'/api/sessions/{code}')
    assert res.status_code == 200
    assert code not in get_registry(flask_app)
    assert client.get(f'/api/sessions/{code}/state').status_code == 404


def test_abandoned_session_expires(flask_app, client, scheduler):
    code = create_session(client)
    start_session(client, code)
    registry = get_registry(flask_app)
    session = registry.get(code)

    scheduler.advance(24 * 3600)
    assert code not in registry
    assert len(registry) == 0
    assert not session.clock_state().running
    assert client.get(f'/api/sessions/{code}/state').status_code == 404
    # nothing left ticking once the registry is empty
    assert scheduler.pending() == 0


def test_active_session_is_not_expired(flask_app, client, scheduler):
    code = create_session(client)
    start_session(client, code)
    for _ in range(4):
        scheduler.advance(1500)
        client.post(f'/api/sessions/{code}/flip', json={'tile_id': 0})
        client.post(f'/api/sessions/{code}/reset')
        client.post(f'/api/sessions/{code}/start', json={})
    assert code in get_registry(flask_app)
