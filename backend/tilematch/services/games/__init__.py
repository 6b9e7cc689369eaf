"""Game domain services: board generation, clock, scoring and the session engine.

This package contains the pure(ish) game logic that HTTP routes and socket
handlers import, keeping transport concerns separated from core game
mechanics. Only ``persistence`` touches the database.
"""
from .board import Board, Tile, create_board, validate_board
from .errors import (
    GameConfigurationError, InsufficientSymbolsError, UnknownCategoryError, UnknownDifficultyError,
)
from .presets import DIFFICULTY_CONFIGS, SYMBOL_CATEGORIES
from .scoring import ScoreBreakdown, score
from .session import GameSession
from .shuffler import shuffle
from .state import SessionState
