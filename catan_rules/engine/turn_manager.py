"""Catan turn manager.

Handles game state initialization, turn-order advancement, dice and
production, and the robber sequence that follows a 7 (discard, move, steal).
"""

from __future__ import annotations

import logging
import random

from .. import board_generator, coords, settings
from ..models import board, player
from ..models.actions import ErrorKind
from ..models.game_state import GamePhase, GameState, PendingActionType, TurnState
from ..models.player import Player
from . import buildings, dev_cards, ledger
from .errors import RuleViolation

logger = logging.getLogger(__name__)

_ROBBER_ROLL = 7
_DISCARD_LIMIT = 7
_DIE_FACES = 6


def create_initial_game_state(
    player_names: list[str],
    colors: list[str],
    seed: int | None = None,
    rng: random.Random | None = None,
    victory_points_to_win: int | None = None,
    balanced: bool = False,
) -> GameState:
    """Create and return a fresh GameState ready for the setup phase.

    Args:
        player_names: Display names for each player (determines player count).
        colors: Colour strings for each player (same length as names).
        seed: Optional RNG seed for reproducible boards and deck order.
        rng: Random source to draw from; defaults to ``random.Random(seed)``.
        victory_points_to_win: Target score; defaults to
            :data:`catan_rules.settings.VICTORY_POINTS_TO_WIN`.
        balanced: Passed through to :func:`board_generator.generate_board`.

    Returns:
        A :class:`GameState` in SETUP_FORWARD phase, player 0 to place first.

    Raises:
        ValueError: Fewer than 2 or more than 4 players, or mismatched colours.
    """
    if rng is None:
        rng = random.Random(seed)
    if victory_points_to_win is None:
        victory_points_to_win = settings.VICTORY_POINTS_TO_WIN

    brd = board_generator.generate_board(
        num_players=len(player_names), balanced=balanced, rng=rng
    )
    players = [
        Player(player_index=i, name=name, color=color)
        for i, (name, color) in enumerate(zip(player_names, colors, strict=True))
    ]

    logger.info('New game for %d players', len(players))
    return GameState(
        board=brd,
        players=players,
        phase=GamePhase.SETUP_FORWARD,
        turn_state=TurnState(
            player_index=0,
            pending_action=PendingActionType.PLACE_SETTLEMENT,
        ),
        dev_card_deck=dev_cards.build_deck(rng),
        turn_number=0,
        victory_points_to_win=victory_points_to_win,
    )


# ---------------------------------------------------------------------------
# Turn order
# ---------------------------------------------------------------------------


def get_next_setup_player(
    current_index: int, num_players: int, phase: GamePhase
) -> tuple[int, GamePhase]:
    """Compute the next player index and phase during setup.

    Returns:
        A ``(next_player_index, next_phase)`` tuple.

    Raises:
        ValueError: If *phase* is not a setup phase.
    """
    if phase == GamePhase.SETUP_FORWARD:
        if current_index == num_players - 1:
            return current_index, GamePhase.SETUP_BACKWARD
        return current_index + 1, GamePhase.SETUP_FORWARD

    if phase == GamePhase.SETUP_BACKWARD:
        if current_index == 0:
            return 0, GamePhase.MAIN
        return current_index - 1, GamePhase.SETUP_BACKWARD

    raise ValueError(f'get_next_setup_player called with non-setup phase: {phase}')


def advance_turn(state: GameState) -> GameState:
    """Advance the game to the next turn segment and return the modified state.

    Called after a setup road is placed, or by :func:`end_turn` during the
    main game.  Modifies ``state`` in place and returns it.
    """
    num_players = len(state.players)
    current = state.turn_state.player_index

    if state.phase in buildings.SETUP_PHASES:
        next_player, next_phase = get_next_setup_player(
            current, num_players, state.phase
        )
        if next_phase != state.phase:
            logger.info('Phase %s -> %s', state.phase, next_phase)
        state.phase = next_phase
        if next_phase == GamePhase.MAIN:
            state.turn_number = 1
            pending = PendingActionType.ROLL_DICE
        else:
            pending = PendingActionType.PLACE_SETTLEMENT
        state.turn_state = TurnState(player_index=next_player, pending_action=pending)

    elif state.phase == GamePhase.MAIN:
        next_player = (current + 1) % num_players
        if next_player == 0:
            state.turn_number += 1
        state.turn_state = TurnState(
            player_index=next_player,
            pending_action=PendingActionType.ROLL_DICE,
        )

    return state


def end_turn(state: GameState, player_index: int) -> None:
    """Finish the active player's turn.

    Development cards bought this turn become playable, the dice are cleared
    with the rest of the turn state, and play passes to the next player.
    """
    p = state.players[player_index]
    for card_type in player.DevCardType:
        count = p.new_dev_cards.get(card_type)
        if count > 0:
            p.dev_cards = p.dev_cards.add(card_type, count)
    p.new_dev_cards = player.DevCardHand()

    advance_turn(state)


def grant_starting_resources(
    state: GameState, player_index: int, vertex: board.VertexCoord
) -> None:
    """Give one card per producing tile touching the second setup settlement."""
    key = coords.vertex_key_for(vertex)
    for tile in buildings.tiles_at_vertex(state, key):
        if tile.resource is not None:
            ledger.pay_out(state, tile.resource, {player_index: 1})


# ---------------------------------------------------------------------------
# Dice and production
# ---------------------------------------------------------------------------


def roll_dice(rng: random.Random) -> tuple[int, int]:
    """Roll two six-sided dice."""
    return rng.randint(1, _DIE_FACES), rng.randint(1, _DIE_FACES)


def apply_roll(state: GameState, dice: tuple[int, int]) -> None:
    """Record *dice* for the active player and resolve the result.

    Raises:
        RuleViolation: INVALID_PHASE if the dice were already rolled this turn.
    """
    ts = state.turn_state
    if ts.has_rolled:
        raise RuleViolation(ErrorKind.INVALID_PHASE, 'Dice already rolled this turn.')
    ts.dice = dice
    total = dice[0] + dice[1]
    state.dice_roll_history.append(total)

    if total == _ROBBER_ROLL:
        must_discard = [
            p.player_index
            for p in state.players
            if p.resources.total() > _DISCARD_LIMIT
        ]
        if must_discard:
            state.turn_state.discard_player_indices = must_discard
            state.turn_state.pending_action = PendingActionType.DISCARD_RESOURCES
        else:
            state.turn_state.pending_action = PendingActionType.MOVE_ROBBER
        return

    state.turn_state.bank_shortfall = resolve_production(state, total)
    state.turn_state.pending_action = PendingActionType.BUILD_OR_TRADE


def resolve_production(state: GameState, total: int) -> player.Resources:
    """Pay every building on tiles numbered *total*, drawing from the bank.

    Settlements earn one card, cities two.  The robber's tile and the desert
    produce nothing.  Each resource is paid out as one batch so that a short
    bank is handled fairly (see :func:`ledger.pay_out`).

    Returns:
        The cards owed but not paid, per resource.
    """
    demands: dict[board.ResourceType, dict[int, int]] = {}
    for tile in state.board.tiles:
        if tile.number_token != total or tile.has_robber:
            continue
        resource = tile.resource
        if resource is None:
            continue
        owed = demands.setdefault(resource, {})
        for structure in buildings.buildings_on_tile(state, tile):
            amount = 2 if structure.kind == board.StructureKind.CITY else 1
            owed[structure.player_index] = owed.get(structure.player_index, 0) + amount

    shortfall = player.Resources()
    for resource, owed in demands.items():
        unpaid = ledger.pay_out(state, resource, owed)
        if unpaid:
            shortfall = shortfall.with_resource(resource, unpaid)
    return shortfall


# ---------------------------------------------------------------------------
# Robber sequence
# ---------------------------------------------------------------------------


def discard(state: GameState, player_index: int, resources: dict[str, int]) -> None:
    """Discard exactly half (rounded down) of the player's hand to the bank.

    Raises:
        RuleViolation: OUT_OF_TURN if the player owes no discard,
            INVALID_ARGUMENT for unknown resources or the wrong count,
            INSUFFICIENT_RESOURCES if the cards are not held.
    """
    ts = state.turn_state
    if player_index not in ts.discard_player_indices:
        raise RuleViolation(ErrorKind.OUT_OF_TURN, 'This player does not need to discard.')

    names = {r.value for r in board.ResourceType}
    for name, amount in resources.items():
        if name not in names or amount < 0:
            raise RuleViolation(
                ErrorKind.INVALID_ARGUMENT, f'Cannot discard {amount} {name!r}.'
            )
    required = state.players[player_index].resources.total() // 2
    offered = sum(resources.values())
    if offered != required:
        raise RuleViolation(
            ErrorKind.INVALID_ARGUMENT,
            f'Must discard exactly {required} cards, got {offered}.',
        )
    ledger.transfer_to_bank(state, player_index, resources)

    ts.discard_player_indices.remove(player_index)
    if not ts.discard_player_indices:
        ts.pending_action = PendingActionType.MOVE_ROBBER


def steal_candidates(state: GameState, player_index: int, tile: board.Tile) -> list[int]:
    """Opponents with a building on *tile* who hold at least one card."""
    candidates = {
        s.player_index
        for s in buildings.buildings_on_tile(state, tile)
        if s.player_index != player_index
    }
    return sorted(
        idx for idx in candidates if state.players[idx].resources.total() > 0
    )


def move_robber(state: GameState, player_index: int, tile_id: str) -> None:
    """Move the robber, then either wait for a steal or resume the turn.

    Raises:
        RuleViolation: NOT_FOUND for an unknown tile, INVALID_LOCATION if the
            robber is already there.
    """
    tile = state.board.tile_by_id(tile_id)
    if tile is None:
        raise RuleViolation(ErrorKind.NOT_FOUND, f'No tile {tile_id!r}.')
    if tile_id == state.board.robber_tile_id:
        raise RuleViolation(
            ErrorKind.INVALID_LOCATION, 'Robber must move to a different tile.'
        )
    state.board.move_robber(tile_id)

    if steal_candidates(state, player_index, tile):
        state.turn_state.pending_action = PendingActionType.STEAL_RESOURCE
    else:
        _finish_robber(state)


def steal(
    state: GameState, player_index: int, target_index: int, rng: random.Random
) -> board.ResourceType:
    """Take one random card from *target_index* for the active player.

    Raises:
        RuleViolation: INVALID_ARGUMENT if the target is not an opponent with
            cards and a building on the robber's tile.
    """
    tile = state.board.tile_by_id(state.board.robber_tile_id)
    if tile is None or target_index not in steal_candidates(state, player_index, tile):
        raise RuleViolation(
            ErrorKind.INVALID_ARGUMENT,
            f'Player {target_index} cannot be robbed here.',
        )
    cards = state.players[target_index].resources.as_cards()
    chosen = rng.choice(cards)
    ledger.transfer_between_players(state, target_index, player_index, chosen, 1)
    _finish_robber(state)
    return chosen


def _finish_robber(state: GameState) -> None:
    ts = state.turn_state
    ts.pending_action = ts.robber_return_action or PendingActionType.BUILD_OR_TRADE
    ts.robber_return_action = None
