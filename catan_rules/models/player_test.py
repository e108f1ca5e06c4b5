"""Unit tests for catan player data models."""

from __future__ import annotations

import unittest

import pydantic

from catan_rules.models import board, player


class TestResources(unittest.TestCase):
    """Tests for Resources model."""

    def test_total(self) -> None:
        """total() sums all resource counts."""
        res = player.Resources(wood=1, brick=2, wheat=3, sheep=4, ore=5)
        self.assertEqual(res.total(), 15)

    def test_full_bank(self) -> None:
        """The bank starts with 19 of each resource."""
        bank = player.Resources.full_bank()
        for r in board.ResourceType:
            self.assertEqual(bank.get(r), 19)

    def test_can_afford(self) -> None:
        """can_afford compares every resource in the cost."""
        self.assertTrue(player.Resources(wood=1, brick=1).can_afford(player.ROAD_COST))
        self.assertFalse(player.Resources(wood=1).can_afford(player.ROAD_COST))

    def test_subtract_leaves_original(self) -> None:
        """subtract returns a new Resources with the cost removed."""
        res = player.Resources(wheat=3, ore=4)
        result = res.subtract(player.CITY_COST)
        self.assertEqual((result.wheat, result.ore), (1, 1))
        self.assertEqual(res.ore, 4)

    def test_negative_counts_rejected(self) -> None:
        """Resource counts can never go below zero."""
        with self.assertRaises(pydantic.ValidationError):
            player.Resources(wood=1).subtract(player.ROAD_COST)

    def test_add_dict(self) -> None:
        """add accepts a plain dict as well as Resources."""
        res = player.Resources(sheep=1).add({'sheep': 2, 'ore': 1})
        self.assertEqual((res.sheep, res.ore), (3, 1))

    def test_with_resource(self) -> None:
        """with_resource replaces a single count."""
        res = player.Resources(ore=2).with_resource(board.ResourceType.ORE, 0)
        self.assertEqual(res.ore, 0)

    def test_as_cards(self) -> None:
        """as_cards lists one entry per card."""
        cards = player.Resources(wood=2, ore=1).as_cards()
        self.assertEqual(
            cards,
            [board.ResourceType.WOOD, board.ResourceType.WOOD, board.ResourceType.ORE],
        )


class TestDevCardHand(unittest.TestCase):
    """Tests for DevCardHand model."""

    def test_add_and_remove(self) -> None:
        """add and remove return adjusted copies."""
        hand = player.DevCardHand().add(player.DevCardType.KNIGHT, 2)
        self.assertEqual(hand.get(player.DevCardType.KNIGHT), 2)
        hand = hand.remove(player.DevCardType.KNIGHT)
        self.assertEqual(hand.knight, 1)
        self.assertEqual(hand.total(), 1)

    def test_deck_composition(self) -> None:
        """The standard deck holds 25 cards."""
        self.assertEqual(sum(player.DEV_CARD_COUNTS.values()), 25)
        self.assertEqual(player.DEV_CARD_COUNTS[player.DevCardType.KNIGHT], 14)


class TestPlayer(unittest.TestCase):
    """Tests for Player and BuildInventory."""

    def test_starting_inventory(self) -> None:
        """Players start with 5 settlements, 4 cities and 15 roads."""
        inv = player.Player(player_index=0, name='Alice', color='red').build_inventory
        self.assertEqual(inv.remaining(board.StructureKind.SETTLEMENT), 5)
        self.assertEqual(inv.remaining(board.StructureKind.CITY), 4)
        self.assertEqual(inv.remaining(board.StructureKind.ROAD), 15)

    def test_victory_point_cards_include_new_cards(self) -> None:
        """Victory point cards count as soon as they are bought."""
        p = player.Player(
            player_index=0,
            name='Alice',
            color='red',
            dev_cards=player.DevCardHand(victory_point=1),
            new_dev_cards=player.DevCardHand(victory_point=1),
        )
        self.assertEqual(p.victory_point_cards(), 2)


if __name__ == '__main__':
    unittest.main()
