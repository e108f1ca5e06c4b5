"""AI vs AI simulation runner.

Plays full games between automated players through the public move and
query API and reports:

- Average game length (in actions)
- Win rates by seat
- How many games hit the action cap

Usage::

    python -m catan_rules.simulate --games 20 --players 3
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time

from . import log
from .ai import base as ai_base
from .ai import easy
from .engine import processor, rules, turn_manager
from .models import game_state

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

_DEFAULT_NUM_GAMES = 20
_DEFAULT_NUM_PLAYERS = 2
_MAX_ACTIONS_PER_GAME = 5000  # hard cap to detect stuck games

_PLAYER_COLORS = ['red', 'blue', 'white', 'orange']


# ---------------------------------------------------------------------------
# Game runner
# ---------------------------------------------------------------------------


def make_ais(num_players: int, seed_offset: int = 0) -> list[ai_base.CatanAI]:
    """Create one seeded EasyAI per player."""
    return [easy.EasyAI(seed=seed_offset + i) for i in range(num_players)]


def run_one_game(
    ais: list[ai_base.CatanAI],
    seed: int,
    max_actions: int = _MAX_ACTIONS_PER_GAME,
) -> tuple[game_state.GameState, int]:
    """Play one game and return ``(final_state, action_count)``.

    The game stops early when it reaches *max_actions* or no
    player has a legal move; ``final_state.winner_index`` is None then.
    """
    num_players = len(ais)
    names = [f'Player{i}' for i in range(num_players)]
    colors = _PLAYER_COLORS[:num_players]
    rng = random.Random(seed)
    state = turn_manager.create_initial_game_state(names, colors, rng=rng)

    action_count = 0
    while state.phase != game_state.GamePhase.ENDED:
        if action_count >= max_actions:
            logger.warning('Game %d hit the action cap', seed)
            break

        acted = False
        for p_idx in _acting_order(state):
            legal = rules.get_legal_actions(state, p_idx)
            if not legal:
                continue
            action = ais[p_idx].choose_action(state, p_idx, legal)
            result = processor.apply_action(state, action, rng=rng)
            if result.success and result.updated_state is not None:
                state = result.updated_state
                action_count += 1
                acted = True
                break
            logger.error(
                'Legal %s rejected for player %d: %s',
                action.action_type,
                p_idx,
                result.error_message,
            )

        if not acted:
            logger.warning('Game %d is stuck after %d actions', seed, action_count)
            break

    return state, action_count


def _acting_order(state: game_state.GameState) -> list[int]:
    ts = state.turn_state
    if ts.pending_action == game_state.PendingActionType.DISCARD_RESOURCES:
        return list(ts.discard_player_indices)
    return [ts.player_index]


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run_simulation(
    num_games: int = _DEFAULT_NUM_GAMES,
    num_players: int = _DEFAULT_NUM_PLAYERS,
    start_seed: int = 0,
    verbose: bool = False,
    report: bool = False,
    max_actions: int = _MAX_ACTIONS_PER_GAME,
) -> dict[str, object]:
    """Run *num_games* simulated games and return a results dict.

    Returns a dict with keys:
    - ``wins``: list of win counts per player index.
    - ``action_counts``: list of actions per completed game.
    - ``timeouts``: number of games that ended without a winner.
    - ``elapsed``: total wall-clock time in seconds.

    With *report*, a summary table is printed as well.
    """
    ais = make_ais(num_players, seed_offset=start_seed)
    wins: list[int] = [0] * num_players
    action_counts: list[int] = []
    timeouts = 0

    t0 = time.monotonic()
    for game_idx in range(num_games):
        final, actions_taken = run_one_game(
            ais, seed=start_seed + game_idx, max_actions=max_actions
        )
        winner = final.winner_index
        if winner is None:
            timeouts += 1
        else:
            wins[winner] += 1
            action_counts.append(actions_taken)
        if verbose:
            status = f'winner={winner}' if winner is not None else 'TIMEOUT'
            print(f'  game {game_idx + 1:4d}: {status} ({actions_taken} actions)')
    elapsed = time.monotonic() - t0

    if report:
        _print_report(wins, action_counts, timeouts, num_games, elapsed)
    return {
        'wins': wins,
        'action_counts': action_counts,
        'timeouts': timeouts,
        'elapsed': elapsed,
    }


def _print_report(
    wins: list[int],
    action_counts: list[int],
    timeouts: int,
    num_games: int,
    elapsed: float,
) -> None:
    """Print a summary report to stdout."""
    total_finished = num_games - timeouts
    print('=' * 50)
    print('Catan Simulation Results')
    print('=' * 50)
    print(f'Games played:    {num_games}')
    print(f'Games finished:  {total_finished}')
    print(f'Timed out:       {timeouts}')
    print(f'Elapsed:         {elapsed:.1f}s')
    if action_counts:
        avg_actions = sum(action_counts) / len(action_counts)
        print(f'Avg actions/game:{avg_actions:.1f}')
    print()
    print('Win rates by seat:')
    for i, count in enumerate(wins):
        pct = (count / total_finished * 100) if total_finished > 0 else 0.0
        print(f'  Player {i}: {count:4d} wins  ({pct:.1f}%)')
    print('=' * 50)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='Catan AI simulation runner')
    parser.add_argument(
        '--games', type=int, default=_DEFAULT_NUM_GAMES, help='Number of games to run'
    )
    parser.add_argument(
        '--players', type=int, default=_DEFAULT_NUM_PLAYERS, help='Number of players'
    )
    parser.add_argument('--seed', type=int, default=0, help='Starting RNG seed')
    parser.add_argument(
        '--max-actions',
        type=int,
        default=_MAX_ACTIONS_PER_GAME,
        help='Action cap per game',
    )
    parser.add_argument(
        '-v', '--verbose', action='store_true', help='Print per-game results'
    )
    return parser.parse_args(argv)


if __name__ == '__main__':
    args = _parse_args(sys.argv[1:])
    logging.basicConfig()
    log.configure_logging(quiet_rejections=True)
    run_simulation(
        num_games=args.games,
        num_players=args.players,
        start_seed=args.seed,
        verbose=args.verbose,
        report=True,
        max_actions=args.max_actions,
    )
