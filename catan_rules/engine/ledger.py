"""Resource ledger: moving cards between players and the bank.

Every resource movement in the engine goes through these helpers, so the
total number of cards (players plus bank) only changes when a rule says so.
Transfers are atomic: they validate first and mutate only on success.
"""

from __future__ import annotations

import logging

from ..models import board, game_state, player
from ..models.actions import ErrorKind
from .errors import RuleViolation

logger = logging.getLogger(__name__)


def can_afford(resources: player.Resources, cost: dict[str, int]) -> bool:
    """Return True if *resources* covers every entry of *cost*."""
    return resources.can_afford(cost)


def transfer_to_bank(
    state: game_state.GameState, player_index: int, cost: dict[str, int]
) -> None:
    """Move *cost* from the player's hand into the bank.

    Raises:
        RuleViolation: INSUFFICIENT_RESOURCES if the player cannot pay.
    """
    p = state.players[player_index]
    if not p.resources.can_afford(cost):
        raise RuleViolation(
            ErrorKind.INSUFFICIENT_RESOURCES,
            f'Player {player_index} cannot pay {_format(cost)}.',
        )
    p.resources = p.resources.subtract(cost)
    state.bank = state.bank.add(cost)


def transfer_from_bank(
    state: game_state.GameState,
    player_index: int,
    resource: board.ResourceType,
    amount: int,
) -> None:
    """Move *amount* cards of *resource* from the bank to the player.

    Raises:
        RuleViolation: BANK_DEPLETED if the bank holds fewer than *amount*.
    """
    if state.bank.get(resource) < amount:
        raise RuleViolation(
            ErrorKind.BANK_DEPLETED,
            f'The bank has only {state.bank.get(resource)} {resource}.',
        )
    grant = {resource.value: amount}
    state.bank = state.bank.subtract(grant)
    p = state.players[player_index]
    p.resources = p.resources.add(grant)


def transfer_between_players(
    state: game_state.GameState,
    from_index: int,
    to_index: int,
    resource: board.ResourceType,
    amount: int,
) -> None:
    """Move *amount* of *resource* from one player's hand to another's."""
    giver = state.players[from_index]
    if giver.resources.get(resource) < amount:
        raise RuleViolation(
            ErrorKind.INSUFFICIENT_RESOURCES,
            f'Player {from_index} does not hold {amount} {resource}.',
        )
    moved = {resource.value: amount}
    giver.resources = giver.resources.subtract(moved)
    taker = state.players[to_index]
    taker.resources = taker.resources.add(moved)


def pay_out(
    state: game_state.GameState,
    resource: board.ResourceType,
    demands: dict[int, int],
) -> int:
    """Pay production of *resource* to players, clamped at the bank's supply.

    *demands* maps player_index → cards owed.  When the bank is short,
    recipients are paid in turn order starting with the active player until
    the supply runs out.

    Returns:
        The number of cards owed but not paid (0 when the bank covered all).
    """
    available = state.bank.get(resource)
    owed = sum(demands.values())
    paid = 0
    num_players = len(state.players)
    start = state.turn_state.player_index
    order = [(start + offset) % num_players for offset in range(num_players)]

    for idx in order:
        amount = min(demands.get(idx, 0), available)
        if amount > 0:
            transfer_from_bank(state, idx, resource, amount)
            available -= amount
            paid += amount

    shortfall = owed - paid
    if shortfall:
        logger.warning(
            'Bank short of %s: %d owed, %d unpaid', resource, owed, shortfall
        )
    return shortfall


def _format(cost: dict[str, int]) -> str:
    return ', '.join(f'{amount} {name}' for name, amount in cost.items() if amount)
