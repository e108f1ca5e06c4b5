"""Unit tests for catan model serialization helpers."""

from __future__ import annotations

import json
import unittest

import pydantic

from catan_rules.engine import turn_manager
from catan_rules.models import actions, player, serializers


def _make_player() -> player.Player:
    """Return a simple Player instance for testing."""
    return player.Player(player_index=0, name='Alice', color='red')


class TestSerializeModel(unittest.TestCase):
    """Tests for serialize_model and serialize_to_json."""

    def test_returns_plain_dict(self) -> None:
        """serialize_model returns JSON-ready primitives."""
        data = serializers.serialize_model(_make_player())
        self.assertEqual(data['name'], 'Alice')
        self.assertEqual(data['resources']['wood'], 0)

    def test_valid_json(self) -> None:
        """serialize_to_json output parses as JSON."""
        parsed = json.loads(serializers.serialize_to_json(_make_player()))
        self.assertEqual(parsed['color'], 'red')


class TestGameStateRoundTrip(unittest.TestCase):
    """Tests for saving and restoring a whole game."""

    def test_json_round_trip(self) -> None:
        """A game survives game_state_to_json → game_state_from_json."""
        state = turn_manager.create_initial_game_state(
            ['Alice', 'Bob'], ['red', 'blue'], seed=42
        )
        restored = serializers.game_state_from_json(
            serializers.game_state_to_json(state)
        )
        self.assertEqual(restored, state)

    def test_deserialize_player(self) -> None:
        """deserialize_player rebuilds a Player from a dict."""
        data = serializers.serialize_model(_make_player())
        self.assertEqual(serializers.deserialize_player(data), _make_player())


class TestDeserializeAction(unittest.TestCase):
    """Tests for deserialize_action."""

    def test_selects_model_by_type(self) -> None:
        """action_type picks the concrete action class."""
        action = serializers.deserialize_action(
            {'action_type': 'bank_trade', 'player_index': 1,
             'giving': 'wood', 'receiving': 'ore'}
        )
        self.assertIsInstance(action, actions.BankTrade)
        self.assertEqual(action.player_index, 1)

    def test_nested_coordinates(self) -> None:
        """Placement actions carry their coordinates."""
        action = serializers.deserialize_action(
            {'action_type': 'place_road', 'player_index': 0,
             'edge': {'q': 0, 'r': 0, 's': 0, 'direction': 2}}
        )
        self.assertIsInstance(action, actions.PlaceRoad)
        assert isinstance(action, actions.PlaceRoad)
        self.assertEqual(action.edge.direction, 2)

    def test_unknown_type_rejected(self) -> None:
        """Unknown action types fail validation."""
        with self.assertRaises(pydantic.ValidationError):
            serializers.deserialize_action({'action_type': 'fly', 'player_index': 0})


if __name__ == '__main__':
    unittest.main()
