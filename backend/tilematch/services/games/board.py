"""Board generation and board-level checks.

A board is a tuple of :class:`Tile` values whose ids equal their positions.
Tiles are frozen; state changes go through :func:`dataclasses.replace` so a
board snapshot handed out to observers never changes underneath them.
"""
import random
from collections import Counter
from dataclasses import dataclass
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from .errors import InsufficientSymbolsError
from .shuffler import shuffle


@dataclass(frozen=True)
class Tile:
    id: int
    symbol: Hashable
    pair_key: int
    revealed: bool = False
    settled: bool = False

    def to_dict(self, reveal_all: bool = False):
        visible = reveal_all or self.revealed or self.settled
        return {
            'id': self.id,
            'symbol': self.symbol if visible else None,
            'pair_key': self.pair_key if visible else None,
            'revealed': self.revealed,
            'settled': self.settled,
        }


Board = Tuple[Tile, ...]


def distinct_symbols(symbol_pool: Iterable[Hashable]) -> List[Hashable]:
    seen = set()
    out = []
    for symbol in symbol_pool:
        if symbol not in seen:
            seen.add(symbol)
            out.append(symbol)
    return out


def select_symbols(
    symbol_pool: Sequence[Hashable],
    pair_count: int,
    rng: Optional[random.Random] = None,
    sample: bool = False,
    pool_name: str = 'symbol pool',
) -> List[Hashable]:
    """Pick ``pair_count`` distinct symbols.

    Truncates the de-duplicated pool unless ``sample`` is set, in which case
    the pool is shuffled first.
    """
    pool = distinct_symbols(symbol_pool)
    if pair_count < 0 or len(pool) < pair_count:
        raise InsufficientSymbolsError(pair_count, len(pool), pool_name)
    if sample:
        pool = shuffle(pool, rng)
    return pool[:pair_count]


def create_board(
    pair_count: int,
    symbol_pool: Sequence[Hashable],
    rng: Optional[random.Random] = None,
    sample: bool = False,
    pool_name: str = 'symbol pool',
) -> Board:
    symbols = select_symbols(symbol_pool, pair_count, rng=rng, sample=sample, pool_name=pool_name)

    tiles = []
    for pair_key, symbol in enumerate(symbols):
        tiles.append(Tile(id=pair_key * 2, symbol=symbol, pair_key=pair_key))
        tiles.append(Tile(id=pair_key * 2 + 1, symbol=symbol, pair_key=pair_key))

    # ids are positions after shuffling, not creation order
    return tuple(
        Tile(id=index, symbol=tile.symbol, pair_key=tile.pair_key)
        for index, tile in enumerate(shuffle(tiles, rng))
    )


def validate_board(board: Sequence[Tile], pair_count: int) -> bool:
    if len(board) != pair_count * 2:
        return False
    if any(tile.id != index for index, tile in enumerate(board)):
        return False

    pair_counts = Counter(tile.pair_key for tile in board)
    if len(pair_counts) != pair_count:
        return False
    if any(count != 2 for count in pair_counts.values()):
        return False

    # both halves of a pair must carry the same symbol
    symbols = {}
    for tile in board:
        if symbols.setdefault(tile.pair_key, tile.symbol) != tile.symbol:
            return False
    return True


def tiles_match(first: Tile, second: Tile) -> bool:
    return first.pair_key == second.pair_key and first.id != second.id


def flipped_tiles(board: Sequence[Tile]) -> List[Tile]:
    return [tile for tile in board if tile.revealed and not tile.settled]


def settled_tiles(board: Sequence[Tile]) -> List[Tile]:
    return [tile for tile in board if tile.settled]
