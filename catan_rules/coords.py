"""Hex-grid coordinate math.

Cube-coordinate geometry
------------------------
Each hex is identified by integer cube coordinates (q, r, s) with the
invariant q + r + s == 0.  See
https://www.redblobgames.com/grids/hexagons/#coordinates-cube for a full
explanation.  The six neighbour directions in order are::

    0: (+1, -1,  0)   east
    1: (+1,  0, -1)   north-east
    2: ( 0, +1, -1)   north-west
    3: (-1, +1,  0)   west
    4: (-1,  0, +1)   south-west
    5: ( 0, -1, +1)   south-east

Vertex identification
---------------------
A vertex is the point shared by (up to) three hexes.  For hex H with
neighbours N[i], vertex ``d`` is the corner shared by::

    { H, N[d], N[(d+1) % 6] }

The same corner can be named from any of those three hexes: ``(H, d)``,
``(N[d], d+2)`` and ``(N[d+1], d+4)`` (directions modulo 6).  The canonical
*vertex key* sorts the three hex triples and joins them, so all three
encodings compare equal.  Some hexes in the set may not exist on the board;
the key still uniquely locates the vertex.

Edge identification
-------------------
Edge ``d`` of H is the side shared with N[d], also nameable as
``(N[d], d+3)``.  It connects vertex ``(d-1) % 6`` to vertex ``d`` of H.
The canonical *edge key* is the sorted pair of its endpoint vertex keys.

A standard 19-hex board has **54 vertices** and **72 edges**.
"""

from __future__ import annotations

import collections
import dataclasses
import functools
from collections.abc import Iterable

from .models.board import HEX_DIRECTIONS, EdgeCoord, HexCoord, Tile, VertexCoord

HexTuple = tuple[int, int, int]

_KEY_SEPARATOR = '|'
_EDGE_SEPARATOR = '~'


def neighbors(coord: HexCoord) -> list[HexCoord]:
    """Return the six neighbours of *coord* in direction order."""
    return coord.neighbors()


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Return the number of hex steps between *a* and *b*."""
    return max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))


def _offset(h: HexTuple, direction: int) -> HexTuple:
    dq, dr, ds = HEX_DIRECTIONS[direction % 6]
    return (h[0] + dq, h[1] + dr, h[2] + ds)


def _corner_hexes(h: HexTuple, direction: int) -> list[HexTuple]:
    """Return the three hexes around corner *direction* of *h*, sorted."""
    return sorted([h, _offset(h, direction), _offset(h, direction + 1)])


def _format_hex(h: HexTuple) -> str:
    return f'{h[0]},{h[1]},{h[2]}'


def vertex_key(coord: HexCoord, direction: int) -> str:
    """Return the canonical key for corner *direction* of hex *coord*."""
    hexes = _corner_hexes(coord.as_tuple(), direction)
    return _KEY_SEPARATOR.join(_format_hex(h) for h in hexes)


def vertex_key_for(vertex: VertexCoord) -> str:
    """Return the canonical key for *vertex*."""
    return vertex_key(vertex.hex, vertex.direction)


def vertex_equivalents(vertex: VertexCoord) -> list[VertexCoord]:
    """Return the three ``(hex, direction)`` encodings of the same corner."""
    h = vertex.hex.as_tuple()
    d = vertex.direction
    encodings = [
        (h, d),
        (_offset(h, d), (d + 2) % 6),
        (_offset(h, d + 1), (d + 4) % 6),
    ]
    return [
        VertexCoord(q=q, r=r, s=s, direction=direction)
        for (q, r, s), direction in encodings
    ]


def edge_key(vertex_key_1: str, vertex_key_2: str) -> str:
    """Return the canonical key for the edge between two vertex keys."""
    first, second = sorted((vertex_key_1, vertex_key_2))
    return f'{first}{_EDGE_SEPARATOR}{second}'


def edge_endpoints(edge: EdgeCoord) -> tuple[VertexCoord, VertexCoord]:
    """Return the two vertices at the ends of *edge*."""
    d = edge.direction
    return (
        VertexCoord(q=edge.q, r=edge.r, s=edge.s, direction=(d - 1) % 6),
        VertexCoord(q=edge.q, r=edge.r, s=edge.s, direction=d),
    )


def edge_key_for(edge: EdgeCoord) -> str:
    """Return the canonical key for *edge*."""
    start, end = edge_endpoints(edge)
    return edge_key(vertex_key_for(start), vertex_key_for(end))


def edge_equivalents(edge: EdgeCoord) -> list[EdgeCoord]:
    """Return both ``(hex, direction)`` encodings of the same side."""
    q, r, s = _offset(edge.hex.as_tuple(), edge.direction)
    return [
        edge,
        EdgeCoord(q=q, r=r, s=s, direction=(edge.direction + 3) % 6),
    ]


# ---------------------------------------------------------------------------
# Board topology
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class BoardTopology:
    """Vertex/edge graph of a board, keyed by canonical vertex and edge keys."""

    # key → representative coordinate (anchored on an on-board hex)
    vertices: dict[str, VertexCoord]
    edges: dict[str, EdgeCoord]
    # edge key → its two vertex keys
    edge_vertices: dict[str, tuple[str, str]]
    # vertex key → vertex keys one edge away (distance rule)
    vertex_neighbors: dict[str, frozenset[str]]
    # vertex key → edge keys touching it
    vertex_edges: dict[str, frozenset[str]]
    # vertex key → on-board hexes touching it
    vertex_hexes: dict[str, tuple[HexTuple, ...]]

    def has_vertex(self, key: str) -> bool:
        """True if *key* names a vertex on this board."""
        return key in self.vertices

    def has_edge(self, key: str) -> bool:
        """True if *key* names an edge on this board."""
        return key in self.edges

    def hexes_at(self, key: str) -> tuple[HexTuple, ...]:
        """Return the on-board hexes touching vertex *key*."""
        return self.vertex_hexes.get(key, ())

    def vertices_of_hex(self, coord: HexCoord) -> list[str]:
        """Return the six vertex keys around *coord*."""
        return [vertex_key(coord, d) for d in range(6)]

    def vertex_distance(self, start: str, goal: str) -> int | None:
        """Return the number of edges on the shortest path between two vertices.

        Breadth-first search over the board's vertex graph.  Returns None if
        either key is off the board.
        """
        if start not in self.vertices or goal not in self.vertices:
            return None
        if start == goal:
            return 0
        seen = {start}
        frontier = collections.deque([(start, 0)])
        while frontier:
            current, dist = frontier.popleft()
            for nxt in self.vertex_neighbors[current]:
                if nxt == goal:
                    return dist + 1
                if nxt not in seen:
                    seen.add(nxt)
                    frontier.append((nxt, dist + 1))
        return None


def topology_for_tiles(tiles: Iterable[Tile]) -> BoardTopology:
    """Return the (cached) topology of the board made of *tiles*."""
    return _build_topology(frozenset(t.coord.as_tuple() for t in tiles))


@functools.lru_cache(maxsize=32)
def _build_topology(board_hexes: frozenset[HexTuple]) -> BoardTopology:
    vertex_coords: dict[str, VertexCoord] = {}
    edge_coords: dict[str, EdgeCoord] = {}
    edge_vertices: dict[str, tuple[str, str]] = {}
    neighbours: dict[str, set[str]] = collections.defaultdict(set)
    touching_edges: dict[str, set[str]] = collections.defaultdict(set)
    touching_hexes: dict[str, set[HexTuple]] = collections.defaultdict(set)

    # Sorted iteration keeps the representative coordinates deterministic:
    # each key is anchored on the lowest on-board hex that touches it.
    for q, r, s in sorted(board_hexes):
        coord = HexCoord(q=q, r=r, s=s)
        vkeys = [vertex_key(coord, d) for d in range(6)]
        for d, vk in enumerate(vkeys):
            vertex_coords.setdefault(vk, VertexCoord(q=q, r=r, s=s, direction=d))
            touching_hexes[vk].add((q, r, s))
        for d in range(6):
            # Edge d of H connects v[(d-1)%6] and v[d] of H.
            v0 = vkeys[(d - 1) % 6]
            v1 = vkeys[d]
            ek = edge_key(v0, v1)
            if ek not in edge_coords:
                edge_coords[ek] = EdgeCoord(q=q, r=r, s=s, direction=d)
                edge_vertices[ek] = (v0, v1)
            neighbours[v0].add(v1)
            neighbours[v1].add(v0)
            touching_edges[v0].add(ek)
            touching_edges[v1].add(ek)

    return BoardTopology(
        vertices=vertex_coords,
        edges=edge_coords,
        edge_vertices=edge_vertices,
        vertex_neighbors={k: frozenset(v) for k, v in neighbours.items()},
        vertex_edges={k: frozenset(v) for k, v in touching_edges.items()},
        vertex_hexes={k: tuple(sorted(v)) for k, v in touching_hexes.items()},
    )
