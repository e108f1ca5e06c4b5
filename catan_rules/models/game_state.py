"""Catan game state model.

Captures the complete state of a game in progress, including the board, all
players, the structures they have built, the bank, the current turn, and
special award tracking.
"""

from __future__ import annotations

import enum

import pydantic

from .board import Board, EdgeCoord, StructureKind, VertexCoord
from .player import DevCardType, Player, Resources


class GamePhase(enum.StrEnum):
    """High-level phases of a Catan game."""

    # Initial placement: settlement/road pairs placed 1→N order.
    SETUP_FORWARD = 'setup_forward'
    # Initial placement: settlement/road pairs placed N→1 order.
    SETUP_BACKWARD = 'setup_backward'
    # Main game: dice rolls, building, trading.
    MAIN = 'main'
    # A player has reached the target VP and the game is over.
    ENDED = 'ended'


class PendingActionType(enum.StrEnum):
    """Specific sub-actions that must be resolved before play continues."""

    PLACE_SETTLEMENT = 'place_settlement'  # setup phase: place initial settlement
    PLACE_ROAD = 'place_road'  # setup phase: place the road after it
    ROLL_DICE = 'roll_dice'  # start of main turn
    MOVE_ROBBER = 'move_robber'  # after rolling 7 or playing Knight
    STEAL_RESOURCE = 'steal_resource'  # after placing robber on an occupied tile
    DISCARD_RESOURCES = 'discard_resources'  # players with >7 cards after a 7 roll
    BUILD_OR_TRADE = 'build_or_trade'  # build/trade actions after rolling


class Structure(pydantic.BaseModel):
    """A settlement, city or road on the board.

    Settlements and cities sit on a vertex, roads on an edge.  Upgrading a
    settlement keeps its ``structure_id`` and flips ``kind`` to CITY.
    """

    structure_id: str
    kind: StructureKind
    player_index: int
    vertex: VertexCoord | None = None
    edge: EdgeCoord | None = None

    @pydantic.model_validator(mode='after')
    def _check_location(self) -> Structure:
        if self.kind == StructureKind.ROAD:
            if self.edge is None or self.vertex is not None:
                raise ValueError('A road must be placed on an edge')
        elif self.vertex is None or self.edge is not None:
            raise ValueError(f'A {self.kind} must be placed on a vertex')
        return self


class TurnState(pydantic.BaseModel):
    """Transient state for the currently active turn."""

    player_index: int
    dice: tuple[int, int] | None = None  # None until dice are rolled
    pending_action: PendingActionType = PendingActionType.ROLL_DICE
    # Remaining free road placements from a Road Building card.
    free_roads_remaining: int = 0
    # At most one development card may be played per turn.
    dev_card_played: bool = False
    # Player indices who still need to discard after a 7 roll.
    discard_player_indices: list[int] = pydantic.Field(default_factory=list)
    # Pending action to resume once a Knight's robber move is resolved.
    robber_return_action: PendingActionType | None = None
    # Settlement placed this setup turn; the setup road must touch it.
    setup_vertex: VertexCoord | None = None
    # Production the bank could not pay on the last roll.
    bank_shortfall: Resources = pydantic.Field(default_factory=Resources)

    @property
    def has_rolled(self) -> bool:
        """True once the dice have been rolled this turn."""
        return self.dice is not None


class GameState(pydantic.BaseModel):
    """Complete snapshot of a Catan game at any point in time."""

    board: Board
    players: list[Player]
    structures: list[Structure] = pydantic.Field(default_factory=list)
    bank: Resources = pydantic.Field(default_factory=Resources.full_bank)
    phase: GamePhase = GamePhase.SETUP_FORWARD
    turn_state: TurnState
    # Remaining development cards in the draw pile.
    dev_card_deck: list[DevCardType] = pydantic.Field(default_factory=list)
    # player_index of the current Longest Road holder, or None.
    longest_road_owner: int | None = None
    # player_index of the current Largest Army holder, or None.
    largest_army_owner: int | None = None
    # Full history of dice roll totals for this game.
    dice_roll_history: list[int] = pydantic.Field(default_factory=list)
    # Number of complete rounds played.
    turn_number: int = 0
    # player_index of the winner once phase == ENDED, or None.
    winner_index: int | None = None
    victory_points_to_win: int = 10

    def structure_by_id(self, structure_id: str) -> Structure | None:
        """Return the structure with *structure_id*, or None."""
        return next(
            (s for s in self.structures if s.structure_id == structure_id), None
        )

    def structures_of(
        self, player_index: int, *kinds: StructureKind
    ) -> list[Structure]:
        """Return *player_index*'s structures, optionally limited to *kinds*."""
        return [
            s
            for s in self.structures
            if s.player_index == player_index and (not kinds or s.kind in kinds)
        ]
