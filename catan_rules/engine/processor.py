"""Catan action processor.

Applies a single game action to a GameState and returns the result.
This is a pure function: the original state is never modified.
"""

from __future__ import annotations

import logging
import random

from ..models import actions, game_state
from ..models.actions import ActionType, ErrorKind
from ..models.game_state import GamePhase, PendingActionType
from . import achievements, buildings, dev_cards, rules, trade, turn_manager
from .errors import RuleViolation

logger = logging.getLogger(__name__)

_MAIN_TURN_ACTIONS = frozenset(
    {
        ActionType.PLACE_SETTLEMENT,
        ActionType.PLACE_ROAD,
        ActionType.UPGRADE_TO_CITY,
        ActionType.BANK_TRADE,
        ActionType.BUY_DEVELOPMENT_CARD,
        ActionType.PLAY_KNIGHT,
        ActionType.PLAY_ROAD_BUILDING,
        ActionType.PLAY_YEAR_OF_PLENTY,
        ActionType.PLAY_MONOPOLY,
        ActionType.END_TURN,
    }
)

# Which action types each pending action accepts.
_ALLOWED_ACTIONS: dict[PendingActionType, frozenset[ActionType]] = {
    PendingActionType.PLACE_SETTLEMENT: frozenset({ActionType.PLACE_SETTLEMENT}),
    PendingActionType.PLACE_ROAD: frozenset({ActionType.PLACE_ROAD}),
    # A Knight may be played before rolling.
    PendingActionType.ROLL_DICE: frozenset(
        {ActionType.ROLL_DICE, ActionType.PLAY_KNIGHT}
    ),
    PendingActionType.DISCARD_RESOURCES: frozenset({ActionType.DISCARD_RESOURCES}),
    PendingActionType.MOVE_ROBBER: frozenset({ActionType.MOVE_ROBBER}),
    PendingActionType.STEAL_RESOURCE: frozenset({ActionType.STEAL_RESOURCE}),
    PendingActionType.BUILD_OR_TRADE: _MAIN_TURN_ACTIONS,
}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_action(
    state: game_state.GameState,
    action: actions.Action,
    rng: random.Random | None = None,
) -> actions.ActionResult:
    """Apply *action* to *state* and return an :class:`ActionResult`.

    The original state is never modified; a deep copy is made first.  On
    failure an :class:`ActionResult` with ``success=False`` and the
    :class:`ErrorKind` of the broken rule is returned.

    Args:
        state: The snapshot to act on.
        action: Any member of :data:`actions.Action`.
        rng: Random source for dice and steals; defaults to a fresh
            ``random.Random()``.
    """
    if rng is None:
        rng = random.Random()
    state = state.model_copy(deep=True)

    try:
        _check_turn(state, action)
        _dispatch(state, action, rng)
    except RuleViolation as exc:
        logger.debug(
            'Rejected %s from player %d: %s (%s)',
            action.action_type,
            action.player_index,
            exc,
            exc.kind,
            extra={'rejected_move': True},
        )
        return actions.ActionResult(
            success=False, error=exc.kind, error_message=str(exc)
        )

    achievements.refresh_victory_points(state)

    # Check for a winner after every action.
    if state.phase != GamePhase.ENDED:
        winner = rules.check_victory_condition(state)
        if winner is not None:
            state.phase = GamePhase.ENDED
            state.winner_index = winner
            logger.info(
                'Player %d wins with %d points on turn %d',
                winner,
                state.players[winner].victory_points,
                state.turn_number,
            )

    return actions.ActionResult(success=True, updated_state=state)


# ---------------------------------------------------------------------------
# Internal dispatch
# ---------------------------------------------------------------------------


def _check_turn(state: game_state.GameState, action: actions.Action) -> None:
    """Reject moves out of turn or not allowed by the pending action."""
    if state.phase == GamePhase.ENDED:
        raise RuleViolation(ErrorKind.INVALID_PHASE, 'The game is over.')

    ts = state.turn_state
    discarding = ts.pending_action == PendingActionType.DISCARD_RESOURCES
    if discarding and action.action_type == ActionType.DISCARD_RESOURCES:
        # Discards belong to the listed players, whoever's turn it is.
        return
    if action.player_index != ts.player_index:
        raise RuleViolation(
            ErrorKind.OUT_OF_TURN, f"It is player {ts.player_index}'s turn."
        )
    if action.action_type not in _ALLOWED_ACTIONS[ts.pending_action]:
        raise RuleViolation(
            ErrorKind.INVALID_PHASE,
            f'Cannot {action.action_type} while waiting for {ts.pending_action}.',
        )


def _dispatch(
    state: game_state.GameState, action: actions.Action, rng: random.Random
) -> None:
    """Mutate *state* in place according to *action* type."""
    if isinstance(action, actions.PlaceSettlement):
        _apply_place_settlement(state, action)
    elif isinstance(action, actions.PlaceRoad):
        _apply_place_road(state, action)
    elif isinstance(action, actions.UpgradeToCity):
        buildings.upgrade_to_city(state, action.player_index, action.structure_id)
    elif isinstance(action, actions.RollDice):
        turn_manager.apply_roll(state, turn_manager.roll_dice(rng))
    elif isinstance(action, actions.BankTrade):
        trade.bank_trade(state, action.player_index, action.giving, action.receiving)
    elif isinstance(action, actions.BuyDevelopmentCard):
        dev_cards.buy_card(state, action.player_index)
    elif isinstance(action, actions.PlayDevelopmentCard):
        dev_cards.play_card(state, action)
    elif isinstance(action, actions.EndTurn):
        turn_manager.end_turn(state, action.player_index)
    elif isinstance(action, actions.DiscardResources):
        turn_manager.discard(state, action.player_index, action.resources)
    elif isinstance(action, actions.MoveRobber):
        turn_manager.move_robber(state, action.player_index, action.tile_id)
    elif isinstance(action, actions.StealResource):
        turn_manager.steal(state, action.player_index, action.target_player_index, rng)
    else:
        raise RuleViolation(
            ErrorKind.INVALID_ARGUMENT, f'Unknown action type: {type(action).__name__}'
        )


def _apply_place_settlement(
    state: game_state.GameState, action: actions.PlaceSettlement
) -> None:
    structure = buildings.place_settlement(state, action.player_index, action.vertex)
    if state.phase in buildings.SETUP_PHASES:
        if state.phase == GamePhase.SETUP_BACKWARD:
            turn_manager.grant_starting_resources(
                state, action.player_index, structure.vertex
            )
        state.turn_state.setup_vertex = structure.vertex
        state.turn_state.pending_action = PendingActionType.PLACE_ROAD
    # A new settlement can cut an opponent's road.
    achievements.update_longest_road(state)


def _apply_place_road(state: game_state.GameState, action: actions.PlaceRoad) -> None:
    buildings.place_road(state, action.player_index, action.edge)
    achievements.update_longest_road(state)
    if state.phase in buildings.SETUP_PHASES:
        turn_manager.advance_turn(state)
