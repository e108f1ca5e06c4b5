"""Catan board generation algorithm.

Generates a standard 19-tile Catan board with randomised tile placement,
number-token assignment, and port kinds.  Port *locations* are fixed: nine
coastal edges spaced around the perimeter so that no two ports share or
neighbour a vertex.  All randomness comes from one ``random.Random`` so a
seed reproduces the board exactly.

Vertex/edge adjacency is not stored on the board; it is derived from the
tile coordinates by :func:`catan_rules.coords.topology_for_tiles`.
"""

from __future__ import annotations

import logging
import random

from . import coords
from .models.board import (
    Board,
    EdgeCoord,
    HexCoord,
    Port,
    PortType,
    Tile,
    TileType,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Board constants
# ---------------------------------------------------------------------------

# 19 hex positions in cube coordinates (centre + ring 1 + ring 2).
_BOARD_POSITIONS: list[tuple[int, int, int]] = [
    # Centre
    (0, 0, 0),
    # Ring 1 (6 tiles)
    (1, -1, 0),
    (1, 0, -1),
    (0, 1, -1),
    (-1, 1, 0),
    (-1, 0, 1),
    (0, -1, 1),
    # Ring 2 (12 tiles)
    (2, -2, 0),
    (2, -1, -1),
    (2, 0, -2),
    (1, 1, -2),
    (0, 2, -2),
    (-1, 2, -1),
    (-2, 2, 0),
    (-2, 1, 1),
    (-2, 0, 2),
    (-1, -1, 2),
    (0, -2, 2),
    (1, -2, 1),
]

# Standard tile-type distribution (must sum to 19).
_TILE_DISTRIBUTION: list[TileType] = (
    [TileType.FOREST] * 4
    + [TileType.PASTURE] * 4
    + [TileType.FIELDS] * 4
    + [TileType.HILLS] * 3
    + [TileType.MOUNTAINS] * 3
    + [TileType.DESERT] * 1
)

# Standard number-token distribution (18 tokens for 18 non-desert tiles).
_NUMBER_TOKENS: list[int] = [2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12]

_RED_NUMBERS = frozenset({6, 8})

# Standard port distribution (4 generic 3:1 + one 2:1 per resource = 9 total).
_PORT_DISTRIBUTION: list[PortType] = [
    PortType.GENERIC,
    PortType.GENERIC,
    PortType.GENERIC,
    PortType.GENERIC,
    PortType.WOOD,
    PortType.BRICK,
    PortType.WHEAT,
    PortType.SHEEP,
    PortType.ORE,
]

# Fixed coastal edges (hex, edge direction) for the nine ports.  Walking the
# 30 coastal edges in order, these sit at positions 1, 4, 8, 11, 14, 18, 21,
# 24 and 28, i.e. gaps of 3 or 4 edges between consecutive ports.
_PORT_LOCATIONS: list[tuple[tuple[int, int, int], int]] = [
    ((2, -2, 0), 0),
    ((2, -1, -1), 1),
    ((1, 1, -2), 1),
    ((0, 2, -2), 2),
    ((-1, 2, -1), 3),
    ((-2, 1, 1), 3),
    ((-2, 0, 2), 4),
    ((-1, -1, 2), 5),
    ((1, -2, 1), 5),
]

_MAX_BALANCE_ATTEMPTS = 200

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_board(
    num_players: int = 4,
    seed: int | None = None,
    balanced: bool = False,
    rng: random.Random | None = None,
) -> Board:
    """Generate and return a randomised standard Catan board.

    Args:
        num_players: Number of players (2–4).  Every supported count uses the
            same 19-tile board.
        seed: Optional integer seed for reproducible boards.  Ignored when
            *rng* is given.
        balanced: When True, re-deal number tokens until no two adjacent
            tiles both carry a red number (6 or 8).
        rng: Random source to draw from; defaults to ``random.Random(seed)``.

    Returns:
        A :class:`Board` with the robber on the desert.

    Raises:
        ValueError: If *num_players* is outside 2–4.
    """
    if not 2 <= num_players <= 4:
        raise ValueError(f'Number of players must be between 2 and 4, got {num_players}')
    if rng is None:
        rng = random.Random(seed)

    tiles = _create_tiles(rng, balanced)
    ports = _place_ports(rng)

    desert = next(t for t in tiles if t.tile_type == TileType.DESERT)
    desert.has_robber = True

    return Board(tiles=tiles, ports=ports, robber_tile_id=desert.tile_id)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _create_tiles(rng: random.Random, balanced: bool) -> list[Tile]:
    """Shuffle tile types and assign number tokens, returning 19 Tile objects."""
    tile_types = _TILE_DISTRIBUTION.copy()
    rng.shuffle(tile_types)

    number_tokens = _NUMBER_TOKENS.copy()
    rng.shuffle(number_tokens)

    if balanced:
        for attempt in range(_MAX_BALANCE_ATTEMPTS):
            if not _has_adjacent_red_numbers(tile_types, number_tokens):
                break
            rng.shuffle(number_tokens)
        else:
            logger.warning(
                'No balanced number layout found after %d attempts', attempt + 1
            )

    token_iter = iter(number_tokens)
    tiles: list[Tile] = []
    for index, ((q, r, s), tile_type) in enumerate(
        zip(_BOARD_POSITIONS, tile_types, strict=True)
    ):
        number_token = None if tile_type == TileType.DESERT else next(token_iter)
        tiles.append(
            Tile(
                tile_id=f'tile-{index}',
                coord=HexCoord(q=q, r=r, s=s),
                tile_type=tile_type,
                number_token=number_token,
            )
        )
    return tiles


def _assign_numbers(
    tile_types: list[TileType], number_tokens: list[int]
) -> dict[tuple[int, int, int], int]:
    """Map each non-desert position to its token, in shuffle order."""
    token_iter = iter(number_tokens)
    return {
        pos: next(token_iter)
        for pos, tile_type in zip(_BOARD_POSITIONS, tile_types, strict=True)
        if tile_type != TileType.DESERT
    }


def _has_adjacent_red_numbers(
    tile_types: list[TileType], number_tokens: list[int]
) -> bool:
    """Return True if any two neighbouring tiles both carry a 6 or 8."""
    numbers = _assign_numbers(tile_types, number_tokens)
    for (q, r, s), number in numbers.items():
        if number not in _RED_NUMBERS:
            continue
        for n in HexCoord(q=q, r=r, s=s).neighbors():
            if numbers.get(n.as_tuple()) in _RED_NUMBERS:
                return True
    return False


def _place_ports(rng: random.Random) -> list[Port]:
    """Put the nine shuffled port kinds on the fixed coastal edges."""
    port_types = _PORT_DISTRIBUTION.copy()
    rng.shuffle(port_types)

    ports: list[Port] = []
    for index, (((q, r, s), direction), port_type) in enumerate(
        zip(_PORT_LOCATIONS, port_types, strict=True)
    ):
        edge = EdgeCoord(q=q, r=r, s=s, direction=direction)
        ports.append(
            Port(
                port_id=f'port-{index}',
                port_type=port_type,
                coord=HexCoord(q=q, r=r, s=s),
                edge_direction=direction,
                vertices=coords.edge_endpoints(edge),
            )
        )
    return ports
