from flask import Blueprint, jsonify, request

from tilematch import get_registry
from tilematch.services.games.presets import DIFFICULTY_CONFIGS
from tilematch.services.games.stats import PersistedRecord, difficulty_stats, high_scores, summarize

stats = Blueprint('stats', __name__)


def _load_record() -> PersistedRecord:
    store = get_registry().store
    record = store.load() if store is not None else None
    return record or PersistedRecord()


@stats.route('', methods=['GET'])
def get_summary():
    return jsonify(summarize(_load_record()))


@stats.route('', methods=['DELETE'])
def clear_stats():
    store = get_registry().store
    if store is not None:
        store.clear()
    return jsonify({'message': 'Statistics cleared'})


@stats.route('/high-scores', methods=['GET'])
def get_high_scores():
    difficulty = request.args.get('difficulty') or None
    if difficulty is not None and difficulty not in DIFFICULTY_CONFIGS:
        return jsonify({'error': f"Unknown difficulty '{difficulty}'"}), 400
    try:
        limit = int(request.args.get('limit', 10))
    except ValueError:
        return jsonify({'error': 'limit must be an integer'}), 400
    scores = high_scores(_load_record(), difficulty=difficulty, limit=limit)
    return jsonify([s.to_dict() for s in scores])


@stats.route('/<string:difficulty>', methods=['GET'])
def get_difficulty_stats(difficulty):
    if difficulty not in DIFFICULTY_CONFIGS:
        return jsonify({'error': f"Unknown difficulty '{difficulty}'"}), 404
    return jsonify(difficulty_stats(_load_record(), difficulty))
