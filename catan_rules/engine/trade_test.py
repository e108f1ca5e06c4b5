"""Unit tests for Catan bank trading."""

from __future__ import annotations

import unittest

from catan_rules.engine import trade
from catan_rules.engine.errors import RuleViolation
from catan_rules.engine.turn_manager import create_initial_game_state
from catan_rules.models.actions import ErrorKind
from catan_rules.models.board import PortType, ResourceType, StructureKind
from catan_rules.models.game_state import GameState, Structure
from catan_rules.models.player import Resources


def _make_2p_state() -> GameState:
    """Create a fresh 2-player game state for testing."""
    return create_initial_game_state(['Alice', 'Bob'], ['red', 'blue'], seed=42)


def _settle_on_port(state: GameState, player_index: int, port_type: PortType) -> None:
    """Give *player_index* a settlement on the first port, set to *port_type*."""
    port = state.board.ports[0]
    port.port_type = port_type
    state.structures.append(
        Structure(
            structure_id=f'settlement-{len(state.structures)}',
            kind=StructureKind.SETTLEMENT,
            player_index=player_index,
            vertex=port.vertices[1],
        )
    )


class TestTradingRatio(unittest.TestCase):
    """Tests for trading_ratio and ports_owned."""

    def test_default_ratio(self) -> None:
        """Without a port every resource trades at 4:1."""
        state = _make_2p_state()
        for r in ResourceType:
            self.assertEqual(trade.trading_ratio(state, 0, r), 4)

    def test_generic_port(self) -> None:
        """A generic port gives 3:1 for everything."""
        state = _make_2p_state()
        _settle_on_port(state, 0, PortType.GENERIC)
        self.assertEqual(trade.ports_owned(state, 0), {PortType.GENERIC})
        self.assertEqual(trade.trading_ratio(state, 0, ResourceType.ORE), 3)
        self.assertEqual(trade.trading_ratio(state, 1, ResourceType.ORE), 4)

    def test_specific_port(self) -> None:
        """A resource port gives 2:1 for that resource only."""
        state = _make_2p_state()
        _settle_on_port(state, 0, PortType.BRICK)
        self.assertEqual(trade.trading_ratio(state, 0, ResourceType.BRICK), 2)
        self.assertEqual(trade.trading_ratio(state, 0, ResourceType.WOOD), 4)


class TestBankTrade(unittest.TestCase):
    """Tests for bank_trade."""

    def test_four_to_one(self) -> None:
        """Four wood buys one ore; the bank takes the wood."""
        state = _make_2p_state()
        state.players[0].resources = Resources(wood=4)
        ratio = trade.bank_trade(state, 0, ResourceType.WOOD, ResourceType.ORE)
        self.assertEqual(ratio, 4)
        self.assertEqual(state.players[0].resources, Resources(ore=1))
        self.assertEqual(state.bank.wood, 23)
        self.assertEqual(state.bank.ore, 18)

    def test_port_trade(self) -> None:
        """A 2:1 port halves the price."""
        state = _make_2p_state()
        _settle_on_port(state, 0, PortType.SHEEP)
        state.players[0].resources = Resources(sheep=2)
        self.assertEqual(
            trade.bank_trade(state, 0, ResourceType.SHEEP, ResourceType.WHEAT), 2
        )
        self.assertEqual(state.players[0].resources, Resources(wheat=1))

    def test_insufficient(self) -> None:
        """Three wood is not enough at 4:1."""
        state = _make_2p_state()
        state.players[0].resources = Resources(wood=3)
        with self.assertRaises(RuleViolation) as ctx:
            trade.bank_trade(state, 0, ResourceType.WOOD, ResourceType.ORE)
        self.assertEqual(ctx.exception.kind, ErrorKind.INSUFFICIENT_RESOURCES)

    def test_same_resource(self) -> None:
        """Trading a resource for itself is rejected."""
        state = _make_2p_state()
        state.players[0].resources = Resources(wood=4)
        with self.assertRaises(RuleViolation) as ctx:
            trade.bank_trade(state, 0, ResourceType.WOOD, ResourceType.WOOD)
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_ARGUMENT)

    def test_bank_out_of_stock(self) -> None:
        """Nothing changes when the bank lacks the wanted card."""
        state = _make_2p_state()
        state.players[0].resources = Resources(wood=4)
        state.bank = state.bank.with_resource(ResourceType.ORE, 0)
        with self.assertRaises(RuleViolation) as ctx:
            trade.bank_trade(state, 0, ResourceType.WOOD, ResourceType.ORE)
        self.assertEqual(ctx.exception.kind, ErrorKind.BANK_DEPLETED)
        self.assertEqual(state.players[0].resources.wood, 4)


if __name__ == '__main__':
    unittest.main()
