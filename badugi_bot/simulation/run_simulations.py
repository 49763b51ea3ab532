"""Run Badugi simulations to exercise the DecisionMaker.

Plays a session of six CPU seats against one random stand-in and prints
summary statistics plus the biggest pot of the session.
"""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from pathlib import Path

import numpy as np

from badugi_bot.simulation.badugi_game import BadugiGame, HandRecord
from badugi_bot.strategy.config import DEFAULT_CONFIG, StrategyConfig, load_strategy_config
from badugi_bot.utils.constants import STARTING_STACK, Action, PositionCategory

logger = logging.getLogger("badugi_bot.simulation")


def run_simulation(
    num_hands: int = 1000,
    seed: int | None = None,
    config: StrategyConfig = DEFAULT_CONFIG,
) -> list[HandRecord]:
    """Play num_hands hands, print the results and return the hand records."""
    game = BadugiGame(config=config, seed=seed)
    players = game.state.players
    names = {p.id: p.name for p in players}

    records: list[HandRecord] = []
    for _ in range(num_hands):
        # Reset chips each hand so nobody busts
        for p in players:
            p.chips = STARTING_STACK
        record = game.play_hand()
        if record is not None:
            records.append(record)

    logger.info("Simulation finished: %d hands", len(records))
    _print_report(records, names)
    return records


def _print_report(records: list[HandRecord], names: dict[str, str]) -> None:
    if not records:
        print("No hands played.")
        return

    wins: Counter[str] = Counter()
    for r in records:
        for w in r.winners:
            wins[w] += 1

    pots = np.array([r.pot_size for r in records], dtype=float)
    deltas = {
        pid: np.array([r.chip_deltas.get(pid, 0) for r in records], dtype=float)
        for pid in names
    }

    openings: dict[PositionCategory, list[Action]] = {pos: [] for pos in PositionCategory}
    for r in records:
        for pos, action in r.opening_actions:
            openings[pos].append(action)

    showdowns = sum(1 for r in records if r.winning_hand is not None)
    snows = sum(r.snow_count for r in records)
    breaks = sum(r.break_count for r in records)

    n = len(records)
    print("=" * 60)
    print(f"  BADUGI CPU SIMULATION - {n} hands")
    print("=" * 60)
    print()
    print(f"  Avg pot size:     {pots.mean():.0f} (sd {pots.std():.0f})")
    print(f"  Biggest pot:      {pots.max():.0f}")
    print(f"  Showdowns:        {showdowns} ({showdowns / n:.1%})")
    print(f"  Snow plays:       {snows}")
    print(f"  Hands broken:     {breaks}")
    print()
    print("  Seat        Wins     Avg result/hand")
    for pid, name in names.items():
        print(f"  {name:<10}  {wins[name]:>5}    {deltas[pid].mean():+10.1f}")
    print()
    print("  Pre-draw fold rate by position")
    for pos, actions in openings.items():
        if not actions:
            continue
        folds = sum(1 for a in actions if a == Action.FOLD)
        print(f"  {pos:<8}  {folds / len(actions):.1%} of {len(actions)} decisions")
    print()

    biggest = max(records, key=lambda r: r.pot_size)
    print("-" * 60)
    print(f"  Biggest pot (Hand #{biggest.hand_number})")
    print(f"  Pot:       {biggest.pot_size}")
    print(f"  Winners:   {', '.join(biggest.winners)}", end="")
    if biggest.winning_hand:
        print(f" ({biggest.winning_hand})")
    else:
        print()
    print("  Actions:")
    for line in biggest.actions_summary:
        print(f"    {line}")
    print()
    print("=" * 60)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Play CPU Badugi hands and print session statistics.",
    )
    parser.add_argument(
        "--hands", type=int, default=1000,
        help="Number of hands to play (default: 1000)",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for the deck and the stand-in player",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Strategy config JSON (default: ~/.badugi_bot/strategy_config.json)",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log every CPU decision",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    run_simulation(args.hands, args.seed, load_strategy_config(args.config))


if __name__ == "__main__":
    main()
