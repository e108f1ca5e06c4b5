"""Building registry: settlement, city and road placement.

Validates placement legality (board bounds, occupancy, the distance rule,
network connectivity, piece supply, cost) against canonical vertex/edge keys
and records the resulting :class:`Structure`.  Callers own phase and turn
checks; these helpers only know whether the game is still in setup.
"""

from __future__ import annotations

from .. import coords
from ..models import board, game_state, player
from ..models.actions import ErrorKind
from . import ledger
from .errors import RuleViolation

SETUP_PHASES = (
    game_state.GamePhase.SETUP_FORWARD,
    game_state.GamePhase.SETUP_BACKWARD,
)

_BUILDING_KINDS = (board.StructureKind.SETTLEMENT, board.StructureKind.CITY)


# ---------------------------------------------------------------------------
# Board lookups
# ---------------------------------------------------------------------------


def topology(state: game_state.GameState) -> coords.BoardTopology:
    """Return the vertex/edge graph of the game's board."""
    return coords.topology_for_tiles(state.board.tiles)


def buildings_by_vertex(
    state: game_state.GameState,
) -> dict[str, game_state.Structure]:
    """Map canonical vertex key → the settlement or city on it."""
    return {
        coords.vertex_key_for(s.vertex): s
        for s in state.structures
        if s.kind in _BUILDING_KINDS and s.vertex is not None
    }


def roads_by_edge(state: game_state.GameState) -> dict[str, game_state.Structure]:
    """Map canonical edge key → the road on it."""
    return {
        coords.edge_key_for(s.edge): s
        for s in state.structures
        if s.kind == board.StructureKind.ROAD and s.edge is not None
    }


def tiles_at_vertex(state: game_state.GameState, key: str) -> list[board.Tile]:
    """Return the on-board tiles touching vertex *key*."""
    hexes = set(topology(state).hexes_at(key))
    return [t for t in state.board.tiles if t.coord.as_tuple() in hexes]


def buildings_on_tile(
    state: game_state.GameState, tile: board.Tile
) -> list[game_state.Structure]:
    """Return the settlements and cities on the corners of *tile*."""
    occupied = buildings_by_vertex(state)
    corners = topology(state).vertices_of_hex(tile.coord)
    return [occupied[k] for k in corners if k in occupied]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def check_settlement_location(
    state: game_state.GameState,
    player_index: int,
    vertex: board.VertexCoord,
    require_road: bool,
) -> str:
    """Validate a settlement location and return its canonical key.

    Raises:
        RuleViolation: INVALID_LOCATION, OCCUPIED, TOO_CLOSE, PIECE_EXHAUSTED
            or DISCONNECTED, in that order.
    """
    topo = topology(state)
    key = coords.vertex_key_for(vertex)
    if not topo.has_vertex(key):
        raise RuleViolation(ErrorKind.INVALID_LOCATION, 'Vertex is not on the board.')

    occupied = buildings_by_vertex(state)
    if key in occupied:
        raise RuleViolation(ErrorKind.OCCUPIED, 'Vertex is already occupied.')
    # Distance rule: no building on any vertex one edge away.
    if topo.vertex_neighbors[key] & occupied.keys():
        raise RuleViolation(
            ErrorKind.TOO_CLOSE, 'Settlement violates the distance rule.'
        )
    if state.players[player_index].build_inventory.settlements_remaining < 1:
        raise RuleViolation(ErrorKind.PIECE_EXHAUSTED, 'No settlements remaining.')

    if require_road:
        roads = roads_by_edge(state)
        if not any(
            ek in roads and roads[ek].player_index == player_index
            for ek in topo.vertex_edges[key]
        ):
            raise RuleViolation(
                ErrorKind.DISCONNECTED, 'Settlement must connect to one of your roads.'
            )
    return key


def check_road_location(
    state: game_state.GameState,
    player_index: int,
    edge: board.EdgeCoord,
    anchor: board.VertexCoord | None = None,
) -> str:
    """Validate a road location and return its canonical key.

    With *anchor* set (initial placement) the road must touch that vertex;
    otherwise it must touch one of the player's buildings, or extend one of
    their roads through a vertex not held by an opponent.

    Raises:
        RuleViolation: INVALID_LOCATION, OCCUPIED, PIECE_EXHAUSTED or
            DISCONNECTED, in that order.
    """
    topo = topology(state)
    key = coords.edge_key_for(edge)
    if not topo.has_edge(key):
        raise RuleViolation(ErrorKind.INVALID_LOCATION, 'Edge is not on the board.')
    roads = roads_by_edge(state)
    if key in roads:
        raise RuleViolation(ErrorKind.OCCUPIED, 'Edge already has a road.')
    if state.players[player_index].build_inventory.roads_remaining < 1:
        raise RuleViolation(ErrorKind.PIECE_EXHAUSTED, 'No roads remaining.')

    endpoints = topo.edge_vertices[key]
    if anchor is not None:
        if coords.vertex_key_for(anchor) not in endpoints:
            raise RuleViolation(
                ErrorKind.DISCONNECTED,
                'Setup road must touch the settlement just placed.',
            )
        return key

    if not _road_connects(state, player_index, key, endpoints, roads):
        raise RuleViolation(
            ErrorKind.DISCONNECTED, 'Road must connect to your road network.'
        )
    return key


def _road_connects(
    state: game_state.GameState,
    player_index: int,
    key: str,
    endpoints: tuple[str, str],
    roads: dict[str, game_state.Structure],
) -> bool:
    topo = topology(state)
    occupied = buildings_by_vertex(state)
    for vk in endpoints:
        building = occupied.get(vk)
        # Own building at this vertex → can always extend from it.
        if building is not None and building.player_index == player_index:
            return True
        # Opponent's building blocks this vertex as a connection point.
        if building is not None:
            continue
        for adj in topo.vertex_edges[vk]:
            if adj != key and adj in roads and roads[adj].player_index == player_index:
                return True
    return False


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


def place_settlement(
    state: game_state.GameState, player_index: int, vertex: board.VertexCoord
) -> game_state.Structure:
    """Build a settlement, paying for it outside of setup.

    Raises:
        RuleViolation: see :func:`check_settlement_location`, then
            INSUFFICIENT_RESOURCES.
    """
    in_setup = state.phase in SETUP_PHASES
    key = check_settlement_location(
        state, player_index, vertex, require_road=not in_setup
    )
    if not in_setup:
        ledger.transfer_to_bank(state, player_index, player.SETTLEMENT_COST)

    structure = _add_structure(
        state,
        board.StructureKind.SETTLEMENT,
        player_index,
        vertex=topology(state).vertices[key],
    )
    state.players[player_index].build_inventory.settlements_remaining -= 1
    return structure


def place_road(
    state: game_state.GameState, player_index: int, edge: board.EdgeCoord
) -> game_state.Structure:
    """Build a road: free in setup or with Road Building, paid otherwise.

    Raises:
        RuleViolation: see :func:`check_road_location`, then
            INSUFFICIENT_RESOURCES.
    """
    in_setup = state.phase in SETUP_PHASES
    anchor = state.turn_state.setup_vertex if in_setup else None
    key = check_road_location(state, player_index, edge, anchor=anchor)
    if not in_setup:
        # Free road from Road Building card takes priority over paying cost.
        if state.turn_state.free_roads_remaining > 0:
            state.turn_state.free_roads_remaining -= 1
        else:
            ledger.transfer_to_bank(state, player_index, player.ROAD_COST)

    structure = _add_structure(
        state,
        board.StructureKind.ROAD,
        player_index,
        edge=topology(state).edges[key],
    )
    state.players[player_index].build_inventory.roads_remaining -= 1
    return structure


def upgrade_to_city(
    state: game_state.GameState, player_index: int, structure_id: str
) -> game_state.Structure:
    """Upgrade the player's settlement *structure_id* to a city in place.

    Raises:
        RuleViolation: NOT_FOUND, NOT_OWNER, INVALID_ARGUMENT,
            PIECE_EXHAUSTED or INSUFFICIENT_RESOURCES.
    """
    structure = state.structure_by_id(structure_id)
    if structure is None:
        raise RuleViolation(ErrorKind.NOT_FOUND, f'No structure {structure_id!r}.')
    if structure.player_index != player_index:
        raise RuleViolation(
            ErrorKind.NOT_OWNER, f'Structure {structure_id!r} belongs to another player.'
        )
    if structure.kind != board.StructureKind.SETTLEMENT:
        raise RuleViolation(
            ErrorKind.INVALID_ARGUMENT, f'Structure {structure_id!r} is not a settlement.'
        )

    p = state.players[player_index]
    if p.build_inventory.cities_remaining < 1:
        raise RuleViolation(ErrorKind.PIECE_EXHAUSTED, 'No cities remaining.')
    ledger.transfer_to_bank(state, player_index, player.CITY_COST)

    structure.kind = board.StructureKind.CITY
    p.build_inventory.cities_remaining -= 1
    p.build_inventory.settlements_remaining += 1
    return structure


def _add_structure(
    state: game_state.GameState,
    kind: board.StructureKind,
    player_index: int,
    vertex: board.VertexCoord | None = None,
    edge: board.EdgeCoord | None = None,
) -> game_state.Structure:
    # Structures are never removed, so the list length is a unique suffix.
    structure = game_state.Structure(
        structure_id=f'{kind}-{len(state.structures)}',
        kind=kind,
        player_index=player_index,
        vertex=vertex,
        edge=edge,
    )
    state.structures.append(structure)
    return structure
