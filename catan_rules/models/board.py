"""Catan board data models.

Defines the hexagonal grid addressing (cube coordinates for tiles, plus
hex-and-direction encodings for vertices and edges), tile types, ports and
the Board that holds them.
"""

from __future__ import annotations

import enum

import pydantic


class TileType(enum.StrEnum):
    """Terrain tile types and the resource each produces."""

    FOREST = 'forest'  # produces wood
    PASTURE = 'pasture'  # produces sheep
    FIELDS = 'fields'  # produces wheat
    HILLS = 'hills'  # produces brick
    MOUNTAINS = 'mountains'  # produces ore
    DESERT = 'desert'  # produces nothing


class ResourceType(enum.StrEnum):
    """The five tradeable resource types."""

    WOOD = 'wood'
    BRICK = 'brick'
    WHEAT = 'wheat'
    SHEEP = 'sheep'
    ORE = 'ore'


# Map from tile type to the resource it produces (desert excluded).
TILE_RESOURCE: dict[TileType, ResourceType] = {
    TileType.FOREST: ResourceType.WOOD,
    TileType.PASTURE: ResourceType.SHEEP,
    TileType.FIELDS: ResourceType.WHEAT,
    TileType.HILLS: ResourceType.BRICK,
    TileType.MOUNTAINS: ResourceType.ORE,
}


class PortType(enum.StrEnum):
    """Port types: generic 3:1 or specific resource 2:1."""

    GENERIC = 'generic'
    WOOD = 'wood'
    BRICK = 'brick'
    WHEAT = 'wheat'
    SHEEP = 'sheep'
    ORE = 'ore'


class StructureKind(enum.StrEnum):
    """Pieces a player can put on the board."""

    SETTLEMENT = 'settlement'
    CITY = 'city'
    ROAD = 'road'


# Six neighbour directions in cube coordinate space, indexed 0–5.
HEX_DIRECTIONS: tuple[tuple[int, int, int], ...] = (
    (1, -1, 0),
    (1, 0, -1),
    (0, 1, -1),
    (-1, 1, 0),
    (-1, 0, 1),
    (0, -1, 1),
)


class HexCoord(pydantic.BaseModel):
    """Cube coordinates for a hex tile. Invariant: q + r + s == 0."""

    model_config = pydantic.ConfigDict(frozen=True)

    q: int
    r: int
    s: int

    @pydantic.model_validator(mode='after')
    def _check_cube_invariant(self) -> HexCoord:
        if self.q + self.r + self.s != 0:
            raise ValueError(
                f'Cube coordinates must sum to zero, got ({self.q}, {self.r}, {self.s})'
            )
        return self

    def as_tuple(self) -> tuple[int, int, int]:
        """Return ``(q, r, s)``."""
        return (self.q, self.r, self.s)

    def neighbor(self, direction: int) -> HexCoord:
        """Return the neighbouring hex in *direction* (taken modulo 6)."""
        dq, dr, ds = HEX_DIRECTIONS[direction % 6]
        return HexCoord(q=self.q + dq, r=self.r + dr, s=self.s + ds)

    def neighbors(self) -> list[HexCoord]:
        """Return the 6 neighbouring cube coordinates in order."""
        return [self.neighbor(i) for i in range(6)]


class VertexCoord(pydantic.BaseModel):
    """A hex corner, named by one of the (up to three) hexes that share it.

    Vertex ``d`` of hex H is the corner H shares with its neighbours in
    directions ``d`` and ``(d + 1) % 6``.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    q: int
    r: int
    s: int
    direction: int = pydantic.Field(ge=0, lt=6)

    @pydantic.model_validator(mode='after')
    def _check_cube_invariant(self) -> VertexCoord:
        if self.q + self.r + self.s != 0:
            raise ValueError(
                f'Cube coordinates must sum to zero, got ({self.q}, {self.r}, {self.s})'
            )
        return self

    @property
    def hex(self) -> HexCoord:
        """The hex this encoding is anchored on."""
        return HexCoord(q=self.q, r=self.r, s=self.s)


class EdgeCoord(pydantic.BaseModel):
    """A hex side, named by one of the (up to two) hexes that share it.

    Edge ``d`` of hex H is the side H shares with its neighbour in direction
    ``d``; it runs from vertex ``(d - 1) % 6`` to vertex ``d`` of H.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    q: int
    r: int
    s: int
    direction: int = pydantic.Field(ge=0, lt=6)

    @pydantic.model_validator(mode='after')
    def _check_cube_invariant(self) -> EdgeCoord:
        if self.q + self.r + self.s != 0:
            raise ValueError(
                f'Cube coordinates must sum to zero, got ({self.q}, {self.r}, {self.s})'
            )
        return self

    @property
    def hex(self) -> HexCoord:
        """The hex this encoding is anchored on."""
        return HexCoord(q=self.q, r=self.r, s=self.s)


class Tile(pydantic.BaseModel):
    """A single terrain hex tile on the Catan board."""

    tile_id: str
    coord: HexCoord
    tile_type: TileType
    number_token: int | None = None  # None for desert; 2–12 excluding 7
    has_robber: bool = False

    @property
    def resource(self) -> ResourceType | None:
        """The resource this tile produces, or None for the desert."""
        return TILE_RESOURCE.get(self.tile_type)


class Port(pydantic.BaseModel):
    """A trading port on one coastal edge, usable from that edge's two vertices."""

    port_id: str
    port_type: PortType
    coord: HexCoord
    edge_direction: int = pydantic.Field(ge=0, lt=6)
    vertices: tuple[VertexCoord, VertexCoord]


class Board(pydantic.BaseModel):
    """The tiles and ports of a game, plus the robber's position.

    Only the robber moves after generation.  Exactly one tile carries
    ``has_robber`` and it is the tile named by ``robber_tile_id``.
    """

    tiles: list[Tile]
    ports: list[Port]
    robber_tile_id: str

    def tile_by_id(self, tile_id: str) -> Tile | None:
        """Return the tile with *tile_id*, or None."""
        return next((t for t in self.tiles if t.tile_id == tile_id), None)

    def move_robber(self, tile_id: str) -> None:
        """Move the robber to *tile_id*, keeping the per-tile flags in step."""
        for tile in self.tiles:
            tile.has_robber = tile.tile_id == tile_id
        self.robber_tile_id = tile_id
