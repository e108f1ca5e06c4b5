"""Pydantic action schemas for every legal Catan game action.

Each action subclass carries the data needed to apply that action to a
GameState.  The ActionResult carries the outcome back to the caller.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal

import pydantic

from .board import EdgeCoord, ResourceType, VertexCoord


class ActionType(enum.StrEnum):
    """Discriminator values for every legal action type."""

    ROLL_DICE = 'roll_dice'
    PLACE_SETTLEMENT = 'place_settlement'
    PLACE_ROAD = 'place_road'
    UPGRADE_TO_CITY = 'upgrade_to_city'
    BANK_TRADE = 'bank_trade'
    BUY_DEVELOPMENT_CARD = 'buy_development_card'
    PLAY_KNIGHT = 'play_knight'
    PLAY_ROAD_BUILDING = 'play_road_building'
    PLAY_YEAR_OF_PLENTY = 'play_year_of_plenty'
    PLAY_MONOPOLY = 'play_monopoly'
    END_TURN = 'end_turn'
    DISCARD_RESOURCES = 'discard_resources'
    MOVE_ROBBER = 'move_robber'
    STEAL_RESOURCE = 'steal_resource'


class ErrorKind(enum.StrEnum):
    """Why a move was rejected."""

    INSUFFICIENT_RESOURCES = 'insufficient_resources'
    PIECE_EXHAUSTED = 'piece_exhausted'
    TOO_CLOSE = 'too_close'
    DISCONNECTED = 'disconnected'
    NOT_FOUND = 'not_found'
    NOT_OWNER = 'not_owner'
    NOT_HELD = 'not_held'
    DECK_EMPTY = 'deck_empty'
    BANK_DEPLETED = 'bank_depleted'
    OUT_OF_TURN = 'out_of_turn'
    INVALID_PHASE = 'invalid_phase'
    OCCUPIED = 'occupied'
    INVALID_LOCATION = 'invalid_location'
    INVALID_ARGUMENT = 'invalid_argument'


class BaseAction(pydantic.BaseModel):
    """Base for all game actions. Every action identifies its type and acting player."""

    model_config = pydantic.ConfigDict(frozen=True)

    player_index: int


class RollDice(BaseAction):
    """Roll the two dice to start a main-phase turn."""

    action_type: Literal[ActionType.ROLL_DICE] = ActionType.ROLL_DICE


class PlaceSettlement(BaseAction):
    """Place a settlement on a vertex."""

    action_type: Literal[ActionType.PLACE_SETTLEMENT] = ActionType.PLACE_SETTLEMENT
    vertex: VertexCoord


class PlaceRoad(BaseAction):
    """Place a road on an edge."""

    action_type: Literal[ActionType.PLACE_ROAD] = ActionType.PLACE_ROAD
    edge: EdgeCoord


class UpgradeToCity(BaseAction):
    """Upgrade one of the player's settlements to a city."""

    action_type: Literal[ActionType.UPGRADE_TO_CITY] = ActionType.UPGRADE_TO_CITY
    structure_id: str


class BankTrade(BaseAction):
    """Trade with the bank at the player's best ratio for *giving*."""

    action_type: Literal[ActionType.BANK_TRADE] = ActionType.BANK_TRADE
    giving: ResourceType
    receiving: ResourceType


class BuyDevelopmentCard(BaseAction):
    """Purchase one development card from the deck."""

    action_type: Literal[ActionType.BUY_DEVELOPMENT_CARD] = (
        ActionType.BUY_DEVELOPMENT_CARD
    )


class PlayKnight(BaseAction):
    """Play a Knight card before or after rolling to move the robber."""

    action_type: Literal[ActionType.PLAY_KNIGHT] = ActionType.PLAY_KNIGHT


class PlayRoadBuilding(BaseAction):
    """Play a Road Building card to place up to two free roads."""

    action_type: Literal[ActionType.PLAY_ROAD_BUILDING] = ActionType.PLAY_ROAD_BUILDING


class PlayYearOfPlenty(BaseAction):
    """Play a Year of Plenty card to take any two resources from the bank."""

    action_type: Literal[ActionType.PLAY_YEAR_OF_PLENTY] = (
        ActionType.PLAY_YEAR_OF_PLENTY
    )
    resource1: ResourceType
    resource2: ResourceType


class PlayMonopoly(BaseAction):
    """Play a Monopoly card to take all of one resource type from every opponent."""

    action_type: Literal[ActionType.PLAY_MONOPOLY] = ActionType.PLAY_MONOPOLY
    resource: ResourceType


class EndTurn(BaseAction):
    """End the current player's turn and advance to the next player."""

    action_type: Literal[ActionType.END_TURN] = ActionType.END_TURN


class DiscardResources(BaseAction):
    """Discard half of hand when holding more than 7 cards after a 7 is rolled."""

    action_type: Literal[ActionType.DISCARD_RESOURCES] = ActionType.DISCARD_RESOURCES
    # Maps resource name → quantity to discard.
    resources: dict[str, int]


class MoveRobber(BaseAction):
    """Move the robber to a new tile (after rolling 7 or playing a Knight)."""

    action_type: Literal[ActionType.MOVE_ROBBER] = ActionType.MOVE_ROBBER
    tile_id: str


class StealResource(BaseAction):
    """Steal one random resource from a player adjacent to the newly placed robber."""

    action_type: Literal[ActionType.STEAL_RESOURCE] = ActionType.STEAL_RESOURCE
    target_player_index: int


# Development card plays, one action per card kind.
PlayDevelopmentCard = PlayKnight | PlayRoadBuilding | PlayYearOfPlenty | PlayMonopoly

# Discriminated union of all action types for deserialization.
Action = Annotated[
    RollDice
    | PlaceSettlement
    | PlaceRoad
    | UpgradeToCity
    | BankTrade
    | BuyDevelopmentCard
    | PlayKnight
    | PlayRoadBuilding
    | PlayYearOfPlenty
    | PlayMonopoly
    | EndTurn
    | DiscardResources
    | MoveRobber
    | StealResource,
    pydantic.Field(discriminator='action_type'),
]

ACTION_ADAPTER: pydantic.TypeAdapter[Action] = pydantic.TypeAdapter(Action)


class ActionResult(pydantic.BaseModel):
    """Result returned by the rules engine after attempting to apply an action.

    The updated GameState is carried as ``Any`` here to avoid a circular
    import with ``game_state.py``; callers in the engine layer cast it to
    ``GameState`` explicitly.
    """

    success: bool
    error: ErrorKind | None = None
    error_message: str | None = None
    # Updated game state after the action (None on failure).
    updated_state: Any | None = None
