"""
zkship - Models Module

Board state and turn payloads exchanged with the proving service.
"""

import json
import random
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Literal, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .errors import InvalidBoardError

BOARD_SIZE = 10
SHIP_SPANS = (5, 4, 3, 3, 2)
NUM_SHIPS = len(SHIP_SPANS)
DEFAULT_SALT = 0xDEADBEEF

HitType = Union[Literal["Miss", "Hit"], Dict[str, int]]


class ShipDirection(str, Enum):
    VERTICAL = "Vertical"
    HORIZONTAL = "Horizontal"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Ship(BaseModel):
    pos: Position
    dir: ShipDirection
    hit_mask: int = 0

    @classmethod
    def at(cls, x: int, y: int, direction: ShipDirection) -> 'Ship':
        return cls(pos=Position(x=x, y=y), dir=direction)

    def cells(self, span: int) -> Iterator[Tuple[int, int]]:
        """Yield every (x, y) the ship covers."""
        for i in range(span):
            if self.dir == ShipDirection.VERTICAL:
                yield self.pos.x, self.pos.y + i
            else:
                yield self.pos.x + i, self.pos.y

    def fits(self, span: int) -> bool:
        if self.pos.x < 0 or self.pos.y < 0:
            return False
        if self.dir == ShipDirection.VERTICAL:
            return self.pos.x < BOARD_SIZE and self.pos.y + span <= BOARD_SIZE
        return self.pos.y < BOARD_SIZE and self.pos.x + span <= BOARD_SIZE


class GameState(BaseModel):
    ships: List[Ship]
    salt: int = DEFAULT_SALT

    def to_json(self) -> dict:
        return self.model_dump(mode='json')


class RoundParams(BaseModel):
    """Request body for ``/prove/turn``."""
    state: GameState
    shot: Position

    def to_json(self) -> dict:
        return self.model_dump(mode='json')


class RoundResult(BaseModel):
    """Updated board and hit verdict returned alongside a turn receipt."""
    state: GameState
    hit: HitType

    def describe_hit(self) -> str:
        if isinstance(self.hit, dict):
            kind, value = next(iter(self.hit.items()))
            return f"{kind} ({value})"
        return self.hit


def validate_state(state: GameState) -> GameState:
    """
    Check that the fleet is legal.

    Every ship must lie on the board and no two ships may share a cell.

    Raises:
        InvalidBoardError: If the fleet is not legal
    """
    if len(state.ships) != NUM_SHIPS:
        raise InvalidBoardError(
            f"board needs exactly {NUM_SHIPS} ships, got {len(state.ships)}"
        )
    if not 0 <= state.salt < 2 ** 32:
        raise InvalidBoardError(f"salt must fit in 32 bits, got {state.salt}")

    taken: Set[Tuple[int, int]] = set()
    for index, (ship, span) in enumerate(zip(state.ships, SHIP_SPANS)):
        if not ship.fits(span):
            raise InvalidBoardError(
                f"ship {index} at {ship.pos} ({ship.dir.value}) does not fit the board"
            )
        cells = set(ship.cells(span))
        if taken & cells:
            raise InvalidBoardError(f"ship {index} at {ship.pos} overlaps another ship")
        taken |= cells
    return state


def default_state(salt: int = DEFAULT_SALT) -> GameState:
    """Fixed five ship fleet."""
    return GameState(
        ships=[
            Ship.at(2, 3, ShipDirection.VERTICAL),
            Ship.at(3, 1, ShipDirection.HORIZONTAL),
            Ship.at(4, 7, ShipDirection.VERTICAL),
            Ship.at(7, 5, ShipDirection.HORIZONTAL),
            Ship.at(7, 7, ShipDirection.HORIZONTAL),
        ],
        salt=salt,
    )


def random_state(salt: int = DEFAULT_SALT, rng: Optional[random.Random] = None) -> GameState:
    """Place the five ships at random, non-overlapping positions."""
    rng = rng or random.Random()
    taken: Set[Tuple[int, int]] = set()
    ships = []
    for span in SHIP_SPANS:
        while True:
            direction = rng.choice([ShipDirection.HORIZONTAL, ShipDirection.VERTICAL])
            ship = Ship.at(
                rng.randrange(BOARD_SIZE - 1),
                rng.randrange(BOARD_SIZE - 1),
                direction,
            )
            if not ship.fits(span):
                continue
            cells = set(ship.cells(span))
            if taken & cells:
                continue
            taken |= cells
            ships.append(ship)
            break
    return GameState(ships=ships, salt=salt)


def load_state(path: Union[str, Path]) -> GameState:
    """
    Load a board from a JSON file.

    Args:
        path: File holding ``{"ships": [...], "salt": n}``

    Returns:
        Validated game state
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
        state = GameState.model_validate(raw)
    except (OSError, ValueError) as e:
        raise InvalidBoardError(f"cannot load board from {path}: {e}") from e
    return validate_state(state)
