"""Difficulty presets and the built-in symbol categories."""
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .errors import UnknownCategoryError, UnknownDifficultyError


@dataclass(frozen=True)
class DifficultyConfig:
    rows: int
    cols: int
    pairs: int

    def to_dict(self):
        return {'rows': self.rows, 'cols': self.cols, 'pairs': self.pairs}


DIFFICULTY_CONFIGS: Dict[str, DifficultyConfig] = {
    'easy': DifficultyConfig(rows=4, cols=4, pairs=8),
    'medium': DifficultyConfig(rows=4, cols=6, pairs=12),
    'hard': DifficultyConfig(rows=6, cols=6, pairs=18),
    'expert': DifficultyConfig(rows=6, cols=8, pairs=24),
}

DIFFICULTIES: List[str] = list(DIFFICULTY_CONFIGS)


def get_difficulty(difficulty: str) -> DifficultyConfig:
    try:
        return DIFFICULTY_CONFIGS[difficulty]
    except (KeyError, TypeError):
        raise UnknownDifficultyError(difficulty) from None


@dataclass(frozen=True)
class SymbolCategory:
    id: str
    name: str
    symbols: Tuple[str, ...]
    description: str = ''

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'symbol_count': len(set(self.symbols)),
        }


SYMBOL_CATEGORIES: Dict[str, SymbolCategory] = {
    c.id: c for c in (
        SymbolCategory(
            id='food',
            name='Food & Drink',
            symbols=(
                '🍎', '🍌', '🍇', '🍊', '🍋', '🍉', '🍓', '🥝',
                '🍒', '🥭', '🍑', '🍍', '🥥', '🥑', '🍅', '🥕',
                '🌽', '🥒', '🥬', '🥦', '🧄', '🧅', '🥔', '🍠',
                '🍞', '🥖', '🥨', '🧀', '🥚', '🍳', '🥓', '🍗',
            ),
            description='Delicious foods, fruits, vegetables, and beverages',
        ),
        SymbolCategory(
            id='animals',
            name='Animals',
            symbols=(
                '🐶', '🐱', '🐭', '🐹', '🐰', '🦊', '🐻', '🐼',
                '🐨', '🐯', '🦁', '🐮', '🐷', '🐸', '🐵', '🐔',
                '🐧', '🐦', '🐤', '🐣', '🐥', '🦆', '🦅', '🦉',
                '🦇', '🐺', '🐗', '🐴', '🦄', '🐝', '🐛', '🦋',
            ),
            description='Cute animals and creatures from around the world',
        ),
        SymbolCategory(
            id='objects',
            name='Objects & Tools',
            symbols=(
                '⚽', '🏀', '🏈', '⚾', '🎾', '🏐', '🏉', '🎱',
                '🏓', '🏸', '🥅', '🎯', '⛳', '🪁', '🏹', '🎣',
                '🤿', '🥊', '🛷', '⛷️', '🏂', '🏄', '🚣', '🏊',
                '⛹️', '🏋️', '🚴', '🤸', '🤽', '🤾', '🧗', '🤺',
            ),
            description='Sports equipment, tools, and everyday objects',
        ),
        SymbolCategory(
            id='nature',
            name='Nature & Weather',
            symbols=(
                '🌸', '🌺', '🌻', '🌷', '🌹', '🥀', '🌾', '🌿',
                '🍀', '🌱', '🌲', '🌳', '🌴', '🌵', '🌶️', '🍄',
                '☀️', '🌤️', '⛅', '🌦️', '🌧️', '⛈️', '🌩️', '🌨️',
                '❄️', '☃️', '⛄', '🌬️', '💨', '🌪️', '🌈', '⭐',
            ),
            description='Beautiful flowers, plants, weather, and natural phenomena',
        ),
        SymbolCategory(
            id='travel',
            name='Travel & Places',
            symbols=(
                '🚗', '🚕', '🚙', '🚐', '🏎️', '🚓', '🚑', '🚒',
                '🚚', '🚛', '🚜', '🏍️', '🛵', '🚲', '🛴', '🛹',
                '🚁', '✈️', '🛩️', '🚀', '🛸', '🚂', '🚃', '🚄',
                '🚅', '🚆', '🚇', '🚈', '🚉', '🚊', '🚝', '🚞',
            ),
            description='Vehicles, transportation, and travel destinations',
        ),
        SymbolCategory(
            id='activities',
            name='Activities & Hobbies',
            symbols=(
                '🎨', '🖌️', '🖍️', '📝', '✏️', '🖊️', '🖋️', '✒️',
                '📚', '📖', '📓', '📔', '📒', '📕', '📗', '📘',
                '🎵', '🎶', '🎼', '🎹', '🥁', '🎷', '🎺', '🎸',
                '🪕', '🎻', '🪈', '🎤', '🎧', '📻', '🎮', '🕹️',
            ),
            description='Creative activities, music, art, and entertainment',
        ),
    )
}

DEFAULT_CATEGORY = 'food'


def get_category(category_id: str) -> SymbolCategory:
    try:
        return SYMBOL_CATEGORIES[category_id]
    except (KeyError, TypeError):
        raise UnknownCategoryError(category_id) from None


def category_supports(category: SymbolCategory, pairs: int) -> bool:
    return len(set(category.symbols)) >= pairs
