"""Catan rule queries.

Read-only questions about a GameState: which moves are legal, where a piece
could go, whether a player can afford and place a piece, and who has won.
Nothing here mutates the state passed in.
"""

from __future__ import annotations

import itertools

from ..models import actions, board, game_state, player
from ..models.game_state import GamePhase, PendingActionType
from . import achievements, buildings, trade, turn_manager
from .errors import RuleViolation

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_legal_actions(
    state: game_state.GameState, player_index: int
) -> list[actions.Action]:
    """Return every legal action for *player_index* in the current state.

    A pending discard is represented by a single action that takes cards
    from the player's largest piles; any other split of the same size is
    also accepted by the processor.
    """
    if state.phase == GamePhase.ENDED:
        return []
    ts = state.turn_state
    pending = ts.pending_action

    if pending == PendingActionType.DISCARD_RESOURCES:
        if player_index not in ts.discard_player_indices:
            return []
        return [
            actions.DiscardResources(
                player_index=player_index,
                resources=_default_discard(state.players[player_index].resources),
            )
        ]
    if player_index != ts.player_index:
        return []

    if pending == PendingActionType.PLACE_SETTLEMENT:
        return [
            actions.PlaceSettlement(player_index=player_index, vertex=v)
            for v in legal_build_locations(
                state, player_index, board.StructureKind.SETTLEMENT
            )
        ]
    if pending == PendingActionType.PLACE_ROAD:
        return [
            actions.PlaceRoad(player_index=player_index, edge=e)
            for e in legal_build_locations(state, player_index, board.StructureKind.ROAD)
        ]
    if pending == PendingActionType.ROLL_DICE:
        result: list[actions.Action] = [actions.RollDice(player_index=player_index)]
        if _can_play(state, player_index, player.DevCardType.KNIGHT):
            result.append(actions.PlayKnight(player_index=player_index))
        return result
    if pending == PendingActionType.MOVE_ROBBER:
        return [
            actions.MoveRobber(player_index=player_index, tile_id=t.tile_id)
            for t in state.board.tiles
            if t.tile_id != state.board.robber_tile_id
        ]
    if pending == PendingActionType.STEAL_RESOURCE:
        return _steal_actions(state, player_index)
    return _build_or_trade_actions(state, player_index)


def legal_build_locations(
    state: game_state.GameState, player_index: int, kind: board.StructureKind
) -> list[board.VertexCoord] | list[board.EdgeCoord]:
    """Return where *player_index* may place a piece of *kind*, ignoring cost.

    Settlements and roads follow the placement rules of the current phase
    (no road connection needed during setup; a setup road must touch the
    settlement just placed).  For cities this is the player's settlements.
    """
    topo = buildings.topology(state)
    in_setup = state.phase in buildings.SETUP_PHASES

    if kind == board.StructureKind.CITY:
        if state.players[player_index].build_inventory.cities_remaining < 1:
            return []
        return [
            s.vertex
            for s in state.structures_of(player_index, board.StructureKind.SETTLEMENT)
            if s.vertex is not None
        ]

    if kind == board.StructureKind.SETTLEMENT:
        vertices: list[board.VertexCoord] = []
        for vertex in topo.vertices.values():
            try:
                buildings.check_settlement_location(
                    state, player_index, vertex, require_road=not in_setup
                )
            except RuleViolation:
                continue
            vertices.append(vertex)
        return vertices

    anchor = state.turn_state.setup_vertex if in_setup else None
    edges: list[board.EdgeCoord] = []
    for edge in topo.edges.values():
        try:
            buildings.check_road_location(state, player_index, edge, anchor=anchor)
        except RuleViolation:
            continue
        edges.append(edge)
    return edges


def can_build(
    state: game_state.GameState, player_index: int, kind: board.StructureKind
) -> bool:
    """True if the player can pay for a piece of *kind* and place it somewhere.

    Needs a piece left in supply; free Road Building roads count as paid.
    """
    return bool(_buildable_locations(state, player_index, kind))


def check_victory_condition(state: game_state.GameState) -> int | None:
    """Return the winner's player_index, or None.

    A player wins on reaching ``state.victory_points_to_win``.  The active
    player is checked first since only their move can raise their score.
    """
    num_players = len(state.players)
    start = state.turn_state.player_index
    for offset in range(num_players):
        idx = (start + offset) % num_players
        if achievements.victory_points(state, idx) >= state.victory_points_to_win:
            return idx
    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _buildable_locations(
    state: game_state.GameState, player_index: int, kind: board.StructureKind
) -> list[board.VertexCoord] | list[board.EdgeCoord]:
    p = state.players[player_index]
    if p.build_inventory.remaining(kind) < 1:
        return []
    free_road = (
        kind == board.StructureKind.ROAD and state.turn_state.free_roads_remaining > 0
    )
    if not free_road and not p.resources.can_afford(player.BUILD_COSTS[kind]):
        return []
    return legal_build_locations(state, player_index, kind)


def _can_play(
    state: game_state.GameState, player_index: int, card_type: player.DevCardType
) -> bool:
    if state.turn_state.dev_card_played:
        return False
    return state.players[player_index].dev_cards.get(card_type) > 0


def _default_discard(resources: player.Resources) -> dict[str, int]:
    """Half the hand (rounded down), always taken from the largest pile."""
    remaining = {r.value: resources.get(r) for r in board.ResourceType}
    chosen = {name: 0 for name in remaining}
    for _ in range(resources.total() // 2):
        largest = max(remaining, key=lambda name: remaining[name])
        remaining[largest] -= 1
        chosen[largest] += 1
    return {name: count for name, count in chosen.items() if count}


def _steal_actions(
    state: game_state.GameState, player_index: int
) -> list[actions.Action]:
    tile = state.board.tile_by_id(state.board.robber_tile_id)
    if tile is None:
        return []
    return [
        actions.StealResource(player_index=player_index, target_player_index=idx)
        for idx in turn_manager.steal_candidates(state, player_index, tile)
    ]


def _build_or_trade_actions(
    state: game_state.GameState, player_index: int
) -> list[actions.Action]:
    result: list[actions.Action] = [actions.EndTurn(player_index=player_index)]
    p = state.players[player_index]

    result.extend(
        actions.PlaceRoad(player_index=player_index, edge=e)
        for e in _buildable_locations(state, player_index, board.StructureKind.ROAD)
    )
    result.extend(
        actions.PlaceSettlement(player_index=player_index, vertex=v)
        for v in _buildable_locations(
            state, player_index, board.StructureKind.SETTLEMENT
        )
    )
    if can_build(state, player_index, board.StructureKind.CITY):
        result.extend(
            actions.UpgradeToCity(player_index=player_index, structure_id=s.structure_id)
            for s in state.structures_of(player_index, board.StructureKind.SETTLEMENT)
        )

    if state.dev_card_deck and p.resources.can_afford(player.DEV_CARD_COST):
        result.append(actions.BuyDevelopmentCard(player_index=player_index))

    for giving in board.ResourceType:
        ratio = trade.trading_ratio(state, player_index, giving)
        if p.resources.get(giving) < ratio:
            continue
        for receiving in board.ResourceType:
            if receiving != giving and state.bank.get(receiving) > 0:
                result.append(
                    actions.BankTrade(
                        player_index=player_index, giving=giving, receiving=receiving
                    )
                )

    result.extend(_dev_card_actions(state, player_index))
    return result


def _dev_card_actions(
    state: game_state.GameState, player_index: int
) -> list[actions.Action]:
    result: list[actions.Action] = []
    if _can_play(state, player_index, player.DevCardType.KNIGHT):
        result.append(actions.PlayKnight(player_index=player_index))
    if (
        _can_play(state, player_index, player.DevCardType.ROAD_BUILDING)
        and state.players[player_index].build_inventory.roads_remaining > 0
    ):
        result.append(actions.PlayRoadBuilding(player_index=player_index))
    if _can_play(state, player_index, player.DevCardType.MONOPOLY):
        result.extend(
            actions.PlayMonopoly(player_index=player_index, resource=r)
            for r in board.ResourceType
        )
    if _can_play(state, player_index, player.DevCardType.YEAR_OF_PLENTY):
        for r1, r2 in itertools.combinations_with_replacement(board.ResourceType, 2):
            needed = 2 if r1 == r2 else 1
            if state.bank.get(r1) >= needed and state.bank.get(r2) >= needed:
                result.append(
                    actions.PlayYearOfPlenty(
                        player_index=player_index, resource1=r1, resource2=r2
                    )
                )
    return result
