"""Longest Road, Largest Army and victory-point bookkeeping."""

from __future__ import annotations

import logging

from .. import coords
from ..models import board, game_state
from . import buildings

logger = logging.getLogger(__name__)

_LONGEST_ROAD_MINIMUM = 5
_LARGEST_ARMY_MINIMUM = 3
_ACHIEVEMENT_POINTS = 2

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def calculate_longest_road(state: game_state.GameState, player_index: int) -> int:
    """Return the length of the longest continuous road for *player_index*.

    A trail never reuses a road and cannot pass *through* a vertex holding an
    opponent's settlement or city (it may still end there).  The search is
    exhaustive backtracking from both ends of every road; a player owns at
    most 15 roads so this stays small.
    """
    topo = buildings.topology(state)
    own_roads = {
        key
        for key, road in buildings.roads_by_edge(state).items()
        if road.player_index == player_index
    }
    if not own_roads:
        return 0

    blocked = {
        key
        for key, building in buildings.buildings_by_vertex(state).items()
        if building.player_index != player_index
    }

    best = 0
    for start in own_roads:
        for towards in topo.edge_vertices[start]:
            length = _dfs_trail(topo, own_roads, blocked, start, towards, set())
            best = max(best, length)
    return best


def update_longest_road(state: game_state.GameState) -> None:
    """Recompute every player's road length and reassign the award."""
    for p in state.players:
        p.longest_road_length = calculate_longest_road(state, p.player_index)
    lengths = {p.player_index: p.longest_road_length for p in state.players}
    previous = state.longest_road_owner
    state.longest_road_owner = _award_holder(lengths, previous, _LONGEST_ROAD_MINIMUM)
    if state.longest_road_owner != previous:
        logger.info(
            'Longest road moves from %s to %s', previous, state.longest_road_owner
        )


def update_largest_army(state: game_state.GameState) -> None:
    """Reassign Largest Army from every player's knight count."""
    knights = {p.player_index: p.knights_played for p in state.players}
    previous = state.largest_army_owner
    state.largest_army_owner = _award_holder(knights, previous, _LARGEST_ARMY_MINIMUM)
    if state.largest_army_owner != previous:
        logger.info(
            'Largest army moves from %s to %s', previous, state.largest_army_owner
        )


def victory_points(state: game_state.GameState, player_index: int) -> int:
    """Derive *player_index*'s victory points from the board and their hand."""
    points = 0
    for s in state.structures_of(player_index):
        if s.kind == board.StructureKind.SETTLEMENT:
            points += 1
        elif s.kind == board.StructureKind.CITY:
            points += 2
    if state.longest_road_owner == player_index:
        points += _ACHIEVEMENT_POINTS
    if state.largest_army_owner == player_index:
        points += _ACHIEVEMENT_POINTS
    points += state.players[player_index].victory_point_cards()
    return points


def refresh_victory_points(state: game_state.GameState) -> None:
    """Write the derived victory-point total onto every player."""
    for p in state.players:
        p.victory_points = victory_points(state, p.player_index)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _award_holder(
    counts: dict[int, int], current: int | None, minimum: int
) -> int | None:
    """Pick the holder of a most-of award.

    The current holder keeps it while still tied for the lead; otherwise a
    player needs at least *minimum* and strictly more than everyone else.
    """
    best = max(counts.values(), default=0)
    if best < minimum:
        return None
    if current is not None and counts.get(current) == best:
        return current
    leaders = [idx for idx, count in counts.items() if count == best]
    if len(leaders) == 1:
        return leaders[0]
    return None


def _dfs_trail(
    topo: coords.BoardTopology,
    own_roads: set[str],
    blocked: set[str],
    edge: str,
    towards: str,
    visited: set[str],
) -> int:
    """Longest trail starting with *edge* and leaving it through *towards*."""
    visited.add(edge)
    max_len = 1
    if towards not in blocked:
        for adj in topo.vertex_edges[towards]:
            if adj in visited or adj not in own_roads:
                continue
            a, b = topo.edge_vertices[adj]
            far = b if a == towards else a
            length = 1 + _dfs_trail(topo, own_roads, blocked, adj, far, visited)
            max_len = max(max_len, length)
    visited.remove(edge)
    return max_len
