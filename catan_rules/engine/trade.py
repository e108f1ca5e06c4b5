"""Catan bank trading.

Bank trades run at 4:1, 3:1 with a generic harbor, or 2:1 with the harbor
for the resource being given.  A player uses a harbor by owning a settlement
or city on either of its two vertices.
"""

from __future__ import annotations

from .. import coords
from ..models import board, game_state
from ..models.actions import ErrorKind
from . import buildings, ledger
from .errors import RuleViolation

_DEFAULT_RATIO = 4
_GENERIC_PORT_RATIO = 3
_SPECIFIC_PORT_RATIO = 2


def ports_owned(
    state: game_state.GameState, player_index: int
) -> set[board.PortType]:
    """Return the port kinds *player_index* can trade through."""
    occupied = buildings.buildings_by_vertex(state)
    owned: set[board.PortType] = set()
    for port in state.board.ports:
        for vertex in port.vertices:
            building = occupied.get(coords.vertex_key_for(vertex))
            if building is not None and building.player_index == player_index:
                owned.add(port.port_type)
                break
    return owned


def trading_ratio(
    state: game_state.GameState, player_index: int, resource: board.ResourceType
) -> int:
    """Return how many *resource* cards the player gives the bank for one card.

    Checks for a matching 2:1 specific-resource port first, then falls back to
    a 3:1 generic port, then the default 4:1 ratio.
    """
    owned = ports_owned(state, player_index)
    if board.PortType(resource.value) in owned:
        return _SPECIFIC_PORT_RATIO
    if board.PortType.GENERIC in owned:
        return _GENERIC_PORT_RATIO
    return _DEFAULT_RATIO


def bank_trade(
    state: game_state.GameState,
    player_index: int,
    giving: board.ResourceType,
    receiving: board.ResourceType,
) -> int:
    """Trade *ratio* cards of *giving* to the bank for one *receiving*.

    Returns:
        The ratio used.

    Raises:
        RuleViolation: INVALID_ARGUMENT, INSUFFICIENT_RESOURCES or
            BANK_DEPLETED.  Nothing changes on failure.
    """
    if giving == receiving:
        raise RuleViolation(
            ErrorKind.INVALID_ARGUMENT, 'Cannot trade a resource for itself.'
        )
    ratio = trading_ratio(state, player_index, giving)
    held = state.players[player_index].resources.get(giving)
    if held < ratio:
        raise RuleViolation(
            ErrorKind.INSUFFICIENT_RESOURCES,
            f'Need {ratio} {giving} to bank trade, have {held}.',
        )
    if state.bank.get(receiving) < 1:
        raise RuleViolation(ErrorKind.BANK_DEPLETED, f'The bank has no {receiving}.')

    ledger.transfer_to_bank(state, player_index, {giving.value: ratio})
    ledger.transfer_from_bank(state, player_index, receiving, 1)
    return ratio
