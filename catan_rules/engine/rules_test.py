"""Unit tests for Catan rule queries."""

from __future__ import annotations

import unittest

from catan_rules import coords
from catan_rules.engine import buildings, rules
from catan_rules.engine.turn_manager import create_initial_game_state
from catan_rules.models import actions
from catan_rules.models.actions import ActionType
from catan_rules.models.board import ResourceType, StructureKind, VertexCoord
from catan_rules.models.game_state import GamePhase, GameState, PendingActionType
from catan_rules.models.player import DevCardHand, Resources

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _v(d: int) -> VertexCoord:
    return VertexCoord(q=0, r=0, s=0, direction=d)


def _make_2p_state() -> GameState:
    """Create a fresh 2-player game state for testing."""
    return create_initial_game_state(['Alice', 'Bob'], ['red', 'blue'], seed=42)


def _make_main_state() -> GameState:
    """Player 0 has rolled, with one settlement on the centre's corner 0."""
    state = _make_2p_state()
    buildings.place_settlement(state, 0, _v(0))
    state.phase = GamePhase.MAIN
    state.turn_number = 1
    state.turn_state.dice = (3, 3)
    state.turn_state.pending_action = PendingActionType.BUILD_OR_TRADE
    return state


def _types(legal: list[actions.Action]) -> set[ActionType]:
    return {a.action_type for a in legal}


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestGetLegalActionsSetup(unittest.TestCase):
    """Tests for get_legal_actions during setup."""

    def test_first_settlement_anywhere(self) -> None:
        """The first settlement may go on any of the 54 vertices."""
        legal = rules.get_legal_actions(_make_2p_state(), 0)
        self.assertEqual(len(legal), 54)
        self.assertEqual(_types(legal), {ActionType.PLACE_SETTLEMENT})

    def test_other_player_has_nothing(self) -> None:
        """Only the active player gets actions."""
        self.assertEqual(rules.get_legal_actions(_make_2p_state(), 1), [])

    def test_setup_road_touches_settlement(self) -> None:
        """After the settlement, the road choices are the edges at that corner."""
        state = _make_2p_state()
        buildings.place_settlement(state, 0, _v(0))
        state.turn_state.setup_vertex = _v(0)
        state.turn_state.pending_action = PendingActionType.PLACE_ROAD
        legal = rules.get_legal_actions(state, 0)
        self.assertEqual(len(legal), 3)
        key = coords.vertex_key_for(_v(0))
        topo = buildings.topology(state)
        for action in legal:
            assert isinstance(action, actions.PlaceRoad)
            self.assertIn(key, topo.edge_vertices[coords.edge_key_for(action.edge)])

    def test_distance_rule_shrinks_choices(self) -> None:
        """A settlement removes itself and its neighbours from the choices."""
        state = _make_2p_state()
        buildings.place_settlement(state, 0, _v(0))
        state.turn_state.player_index = 1
        self.assertEqual(len(rules.get_legal_actions(state, 1)), 54 - 4)


class TestGetLegalActionsMain(unittest.TestCase):
    """Tests for get_legal_actions during the main game."""

    def test_roll_or_knight(self) -> None:
        """Before rolling, the player may roll or play a Knight."""
        state = _make_main_state()
        state.turn_state.dice = None
        state.turn_state.pending_action = PendingActionType.ROLL_DICE
        self.assertEqual(_types(rules.get_legal_actions(state, 0)), {ActionType.ROLL_DICE})
        state.players[0].dev_cards = DevCardHand(knight=1)
        self.assertEqual(
            _types(rules.get_legal_actions(state, 0)),
            {ActionType.ROLL_DICE, ActionType.PLAY_KNIGHT},
        )

    def test_road_building_needs_road_pieces(self) -> None:
        """Road Building is only offered while road pieces remain."""
        state = _make_main_state()
        state.players[0].dev_cards = DevCardHand(road_building=1)
        self.assertIn(
            ActionType.PLAY_ROAD_BUILDING, _types(rules.get_legal_actions(state, 0))
        )
        state.players[0].build_inventory.roads_remaining = 0
        self.assertNotIn(
            ActionType.PLAY_ROAD_BUILDING, _types(rules.get_legal_actions(state, 0))
        )

    def test_broke_player_can_only_end(self) -> None:
        """With no cards the only move is ending the turn."""
        legal = rules.get_legal_actions(_make_main_state(), 0)
        self.assertEqual(legal, [actions.EndTurn(player_index=0)])

    def test_affordable_builds_offered(self) -> None:
        """Roads, cities, cards and trades appear once affordable."""
        state = _make_main_state()
        state.players[0].resources = Resources(wood=4, brick=1, wheat=2, sheep=1, ore=3)
        types = _types(rules.get_legal_actions(state, 0))
        self.assertIn(ActionType.PLACE_ROAD, types)
        self.assertIn(ActionType.UPGRADE_TO_CITY, types)
        self.assertIn(ActionType.BUY_DEVELOPMENT_CARD, types)
        self.assertIn(ActionType.BANK_TRADE, types)
        # No road yet, so nowhere to settle.
        self.assertNotIn(ActionType.PLACE_SETTLEMENT, types)

    def test_every_offer_is_accepted(self) -> None:
        """Each legal action applies successfully."""
        from catan_rules.engine.processor import apply_action

        state = _make_main_state()
        state.players[0].resources = Resources(wood=4, brick=1, wheat=2, sheep=1, ore=3)
        state.players[0].dev_cards = DevCardHand(monopoly=1, year_of_plenty=1)
        for action in rules.get_legal_actions(state, 0):
            result = apply_action(state, action)
            self.assertTrue(result.success, f'{action}: {result.error_message}')

    def test_query_does_not_mutate(self) -> None:
        """Asking twice gives the same answer and leaves the state alone."""
        state = _make_main_state()
        state.players[0].resources = Resources(wood=4, brick=4)
        snapshot = state.model_copy(deep=True)
        first = rules.get_legal_actions(state, 0)
        self.assertEqual(first, rules.get_legal_actions(state, 0))
        self.assertEqual(state, snapshot)

    def test_discard_offer(self) -> None:
        """A listed player is offered a discard of half their hand."""
        state = _make_main_state()
        state.players[1].resources = Resources(wood=6, ore=3)
        state.turn_state.pending_action = PendingActionType.DISCARD_RESOURCES
        state.turn_state.discard_player_indices = [1]
        legal = rules.get_legal_actions(state, 1)
        self.assertEqual(len(legal), 1)
        discard = legal[0]
        assert isinstance(discard, actions.DiscardResources)
        self.assertEqual(sum(discard.resources.values()), 4)
        self.assertEqual(discard.resources, {'wood': 4})
        self.assertEqual(rules.get_legal_actions(state, 0), [])

    def test_robber_targets(self) -> None:
        """The robber may go anywhere except where it stands."""
        state = _make_main_state()
        state.turn_state.pending_action = PendingActionType.MOVE_ROBBER
        legal = rules.get_legal_actions(state, 0)
        self.assertEqual(len(legal), 18)
        tile_ids = {a.tile_id for a in legal if isinstance(a, actions.MoveRobber)}
        self.assertNotIn(state.board.robber_tile_id, tile_ids)

    def test_year_of_plenty_skips_empty_bank(self) -> None:
        """Year of Plenty is not offered for resources the bank lacks."""
        state = _make_main_state()
        state.players[0].dev_cards = DevCardHand(year_of_plenty=1)
        state.bank = state.bank.with_resource(ResourceType.ORE, 0)
        legal = [
            a
            for a in rules.get_legal_actions(state, 0)
            if isinstance(a, actions.PlayYearOfPlenty)
        ]
        # 15 pairs from 5 resources, minus the 5 that include ore.
        self.assertEqual(len(legal), 10)


class TestBuildQueries(unittest.TestCase):
    """Tests for legal_build_locations and can_build."""

    def test_city_locations_are_settlements(self) -> None:
        """Cities can only go where the player has a settlement."""
        state = _make_main_state()
        locations = rules.legal_build_locations(state, 0, StructureKind.CITY)
        self.assertEqual(
            [coords.vertex_key_for(v) for v in locations],
            [coords.vertex_key_for(_v(0))],
        )

    def test_can_build_needs_resources(self) -> None:
        """can_build checks cost as well as location."""
        state = _make_main_state()
        self.assertFalse(rules.can_build(state, 0, StructureKind.ROAD))
        state.players[0].resources = Resources(wood=1, brick=1)
        self.assertTrue(rules.can_build(state, 0, StructureKind.ROAD))

    def test_free_road_counts_as_paid(self) -> None:
        """Road Building roads need no resources."""
        state = _make_main_state()
        state.turn_state.free_roads_remaining = 2
        self.assertTrue(rules.can_build(state, 0, StructureKind.ROAD))


class TestCheckVictoryCondition(unittest.TestCase):
    """Tests for check_victory_condition."""

    def test_no_winner(self) -> None:
        """Nobody wins at the start."""
        self.assertIsNone(rules.check_victory_condition(_make_2p_state()))

    def test_winner(self) -> None:
        """A player at the target wins."""
        state = _make_main_state()
        state.victory_points_to_win = 3
        state.players[0].dev_cards = DevCardHand(victory_point=2)
        self.assertEqual(rules.check_victory_condition(state), 0)


if __name__ == '__main__':
    unittest.main()
