"""Easy (random) AI for Catan.

Selects a random legal action, preferring anything over ending the turn
early so that games make progress.  Useful as a baseline and for
stress-testing the rules engine.
"""

from __future__ import annotations

import random

from ..models import actions, game_state
from ..models.actions import ActionType
from . import base

# Chance of ending the turn when something else is possible.
_END_TURN_PROBABILITY = 0.3

# Moves that score or grow the network are taken whenever offered.
_PRIORITY_ACTIONS = frozenset(
    {
        ActionType.UPGRADE_TO_CITY,
        ActionType.PLACE_SETTLEMENT,
    }
)


class EasyAI(base.CatanAI):
    """Random-action AI with a bias towards building over ending the turn."""

    def __init__(self, seed: int | None = None) -> None:
        """Initialise with an optional RNG seed for reproducibility."""
        self._rng = random.Random(seed)

    def choose_action(
        self,
        state: game_state.GameState,
        player_index: int,
        legal_actions: list[actions.Action],
    ) -> actions.Action:
        """Return a random action from legal_actions."""
        priority = [a for a in legal_actions if a.action_type in _PRIORITY_ACTIONS]
        if priority:
            return self._rng.choice(priority)

        others = [a for a in legal_actions if a.action_type != ActionType.END_TURN]
        if not others or self._rng.random() < _END_TURN_PROBABILITY:
            ending = [a for a in legal_actions if a.action_type == ActionType.END_TURN]
            if ending:
                return ending[0]
        return self._rng.choice(others)
