from flask import Blueprint, current_app, jsonify

from tilematch.services.games.presets import DIFFICULTY_CONFIGS, SYMBOL_CATEGORIES, category_supports

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Tile Match game server!'})


@main.route('/api/presets')
def presets():
    cfg = current_app.config
    return jsonify({
        'difficulties': {name: preset.to_dict() for name, preset in DIFFICULTY_CONFIGS.items()},
        'categories': [
            dict(c.to_dict(), supports={
                name: category_supports(c, preset.pairs) for name, preset in DIFFICULTY_CONFIGS.items()
            })
            for c in SYMBOL_CATEGORIES.values()
        ],
        'defaults': {
            'difficulty': cfg.get('DEFAULT_DIFFICULTY', 'easy'),
            'category': cfg.get('DEFAULT_CATEGORY', 'food'),
        },
    })
