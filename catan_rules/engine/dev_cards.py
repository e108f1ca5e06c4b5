"""Development card deck, purchases and card effects."""

from __future__ import annotations

import logging
import random

from ..models import actions, board, game_state, player
from ..models.actions import ErrorKind
from . import achievements, ledger
from .errors import RuleViolation

logger = logging.getLogger(__name__)

_ROAD_BUILDING_ROADS = 2


def build_deck(rng: random.Random) -> list[player.DevCardType]:
    """Return the full 25-card development deck, shuffled with *rng*."""
    deck: list[player.DevCardType] = []
    for card_type, count in player.DEV_CARD_COUNTS.items():
        deck.extend([card_type] * count)
    rng.shuffle(deck)
    return deck


def buy_card(state: game_state.GameState, player_index: int) -> player.DevCardType:
    """Pay for and draw the top card of the shuffled deck.

    The card lands in ``new_dev_cards`` and becomes playable next turn.  A
    victory-point card still counts towards the player's score right away.

    Raises:
        RuleViolation: INSUFFICIENT_RESOURCES or DECK_EMPTY.
    """
    p = state.players[player_index]
    if not ledger.can_afford(p.resources, player.DEV_CARD_COST):
        raise RuleViolation(
            ErrorKind.INSUFFICIENT_RESOURCES, 'Insufficient resources to buy a dev card.'
        )
    if not state.dev_card_deck:
        raise RuleViolation(
            ErrorKind.DECK_EMPTY, 'No development cards remaining in the deck.'
        )
    ledger.transfer_to_bank(state, player_index, player.DEV_CARD_COST)

    card_type = state.dev_card_deck.pop()
    p.new_dev_cards = p.new_dev_cards.add(card_type)
    return card_type


def play_card(
    state: game_state.GameState, action: actions.PlayDevelopmentCard
) -> None:
    """Play one development card from the acting player's hand.

    Raises:
        RuleViolation: INVALID_PHASE if a card was already played this turn,
            NOT_HELD without a playable copy, or the effect's own failure.
    """
    card_type = _CARD_FOR_ACTION[type(action)]
    if state.turn_state.dev_card_played:
        raise RuleViolation(
            ErrorKind.INVALID_PHASE, 'Only one development card may be played per turn.'
        )
    p = state.players[action.player_index]
    if p.dev_cards.get(card_type) < 1:
        # Cards bought this turn sit in new_dev_cards and do not count.
        raise RuleViolation(ErrorKind.NOT_HELD, f'No playable {card_type} card in hand.')

    # Effects validate before mutating, so the card is only spent on success.
    if isinstance(action, actions.PlayKnight):
        _play_knight(state, action)
    elif isinstance(action, actions.PlayRoadBuilding):
        _play_road_building(state, action)
    elif isinstance(action, actions.PlayYearOfPlenty):
        _play_year_of_plenty(state, action)
    elif isinstance(action, actions.PlayMonopoly):
        _play_monopoly(state, action)

    p.dev_cards = p.dev_cards.remove(card_type)
    state.turn_state.dev_card_played = True
    logger.debug('Player %d played %s', action.player_index, card_type)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

_CARD_FOR_ACTION: dict[type, player.DevCardType] = {
    actions.PlayKnight: player.DevCardType.KNIGHT,
    actions.PlayRoadBuilding: player.DevCardType.ROAD_BUILDING,
    actions.PlayYearOfPlenty: player.DevCardType.YEAR_OF_PLENTY,
    actions.PlayMonopoly: player.DevCardType.MONOPOLY,
}


def _play_knight(state: game_state.GameState, action: actions.PlayKnight) -> None:
    state.players[action.player_index].knights_played += 1
    achievements.update_largest_army(state)

    # Resume wherever the turn was (before or after rolling) once resolved.
    ts = state.turn_state
    ts.robber_return_action = ts.pending_action
    ts.pending_action = game_state.PendingActionType.MOVE_ROBBER


def _play_road_building(
    state: game_state.GameState, action: actions.PlayRoadBuilding
) -> None:
    p = state.players[action.player_index]
    if p.build_inventory.roads_remaining < 1:
        raise RuleViolation(ErrorKind.PIECE_EXHAUSTED, 'No roads remaining.')
    state.turn_state.free_roads_remaining = min(
        _ROAD_BUILDING_ROADS, p.build_inventory.roads_remaining
    )


def _play_year_of_plenty(
    state: game_state.GameState, action: actions.PlayYearOfPlenty
) -> None:
    wanted: dict[board.ResourceType, int] = {}
    for resource in (action.resource1, action.resource2):
        wanted[resource] = wanted.get(resource, 0) + 1
    # All-or-nothing: check the bank covers both cards before granting any.
    for resource, amount in wanted.items():
        if state.bank.get(resource) < amount:
            raise RuleViolation(
                ErrorKind.BANK_DEPLETED,
                f'The bank cannot supply {amount} {resource}.',
            )
    for resource, amount in wanted.items():
        ledger.transfer_from_bank(state, action.player_index, resource, amount)


def _play_monopoly(state: game_state.GameState, action: actions.PlayMonopoly) -> None:
    taken = 0
    for other in state.players:
        if other.player_index == action.player_index:
            continue
        amount = other.resources.get(action.resource)
        if amount > 0:
            ledger.transfer_between_players(
                state, other.player_index, action.player_index, action.resource, amount
            )
            taken += amount
    logger.debug(
        'Monopoly: player %d took %d %s', action.player_index, taken, action.resource
    )
