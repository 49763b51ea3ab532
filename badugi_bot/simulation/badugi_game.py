"""Hand-by-hand Badugi game driver for simulation.

Runs complete hands on a GameState, asking the DecisionMaker for every
CPU seat and a seeded random stand-in for the human seat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from badugi_bot.core.game_state import GameState, PlayerState
from badugi_bot.core.hand_evaluator import HandEvaluator
from badugi_bot.strategy.config import DEFAULT_CONFIG, StrategyConfig
from badugi_bot.strategy.decision_maker import DecisionMaker, default_discards
from badugi_bot.strategy.profiles import get_position_category
from badugi_bot.utils.card import Card, Deck
from badugi_bot.utils.constants import (
    Action,
    GamePhase,
    HandClass,
    PositionCategory,
)

logger = logging.getLogger("badugi_bot.simulation")

MAX_ACTIONS_PER_HAND = 1000


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass
class HandRecord:
    """Record of a single played hand."""

    hand_number: int
    winners: list[str]
    pot_size: int
    player_hands: dict[str, list[str]]
    winning_hand: str | None  # None when everyone else folded
    actions_summary: list[str]
    chip_deltas: dict[str, int] = field(default_factory=dict)
    opening_actions: list[tuple[PositionCategory, Action]] = field(default_factory=list)
    snow_count: int = 0
    break_count: int = 0


# ---------------------------------------------------------------------------
# Game driver
# ---------------------------------------------------------------------------


class BadugiGame:
    """Plays full hands of Badugi with CPU seats driven by the DecisionMaker."""

    def __init__(
        self,
        state: GameState | None = None,
        config: StrategyConfig = DEFAULT_CONFIG,
        seed: int | None = None,
    ) -> None:
        self.rng = np.random.default_rng(seed)
        self.state = state or GameState.create_table(deck=Deck(rng=self.rng))
        self.state.raise_cap = config.raise_cap
        self.decision_maker = DecisionMaker(config)
        self.hand_number = 0

    def play_hand(self) -> HandRecord | None:
        """Play one hand to completion. None when fewer than two seats have chips."""
        gs = self.state
        if sum(1 for p in gs.players if p.chips > 0) < 2:
            return None

        starting_chips = {p.id: p.chips for p in gs.players}
        gs.start_hand()

        self.hand_number += 1
        record = HandRecord(
            hand_number=self.hand_number,
            winners=[],
            pot_size=0,
            player_hands={},
            winning_hand=None,
            actions_summary=[f"--- {GamePhase.BETTING_1} ---"],
        )
        phase = gs.phase

        for _ in range(MAX_ACTIONS_PER_HAND):
            if not gs.hand_in_progress:
                break
            if gs.phase != phase:
                phase = gs.phase
                record.actions_summary.append(f"--- {phase} ---")

            player = gs.current_player
            if player.is_cpu:
                self._cpu_turn(gs, player, record)
            else:
                self._stand_in_turn(gs, player, record)
        else:
            raise RuntimeError(f"Hand {self.hand_number} did not finish")

        self._finish_record(gs, record, starting_chips)
        return record

    # -- turns --------------------------------------------------------------

    def _cpu_turn(self, gs: GameState, player: PlayerState, record: HandRecord) -> None:
        view = gs.snapshot()
        decision = self.decision_maker.make_decision(view)

        if decision.action == Action.DRAW:
            discards = self.decision_maker.decide_discards(view)
            hand = HandEvaluator.evaluate(player.hand)
            if not discards and hand.hand_class != HandClass.FOUR_CARD:
                record.snow_count += 1
            if len(discards) == 1 and hand.hand_class == HandClass.FOUR_CARD:
                record.break_count += 1
            self._apply_draw(gs, player, discards, record)
            return

        if gs.phase == GamePhase.BETTING_1:
            position = get_position_category(
                view.acting_index, view.dealer_index, view.active_player_count,
            )
            record.opening_actions.append((position, decision.action))

        record.actions_summary.append(
            f"  {player.name}: {decision.action} ({decision.reasoning})"
        )
        self._apply_bet(gs, decision.action, snow=decision.snow)

    def _stand_in_turn(self, gs: GameState, player: PlayerState, record: HandRecord) -> None:
        """Simple random strategy for the human seat."""
        if gs.is_draw_phase:
            self._apply_draw(gs, player, default_discards(player.hand), record)
            return

        owed = gs.current_bet - player.current_round_bet
        can_raise = gs.raises_in_round < gs.raise_cap
        roll = self.rng.random()

        if owed <= 0:
            action = Action.RAISE if roll >= 0.70 and can_raise else Action.CALL
        elif roll < 0.30:
            action = Action.FOLD
        elif roll < 0.80 or not can_raise:
            action = Action.CALL
        else:
            action = Action.RAISE

        record.actions_summary.append(f"  {player.name}: {action}")
        self._apply_bet(gs, action)

    @staticmethod
    def _apply_bet(gs: GameState, action: Action, snow: bool = False) -> None:
        match action:
            case Action.FOLD:
                gs.fold()
            case Action.CALL:
                gs.call(snow=snow)
            case Action.RAISE:
                gs.bet_or_raise()
            case _:
                raise ValueError(f"Not a betting action: {action}")

    @staticmethod
    def _apply_draw(
        gs: GameState,
        player: PlayerState,
        discards: list[Card],
        record: HandRecord,
    ) -> None:
        if discards:
            record.actions_summary.append(
                f"  {player.name}: draws {len(discards)} ({' '.join(str(c) for c in discards)})"
            )
            gs.draw(discards)
        else:
            record.actions_summary.append(f"  {player.name}: stands pat")
            gs.stand_pat()

    # -- results ------------------------------------------------------------

    def _finish_record(
        self,
        gs: GameState,
        record: HandRecord,
        starting_chips: dict[str, int],
    ) -> None:
        log = gs.hand_logs[0]
        record.winners = list(log.winners)
        record.pot_size = log.pot
        record.player_hands = {
            name: cards for name, cards in log.final_hands.items() if cards
        }
        record.chip_deltas = {p.id: p.chips - starting_chips[p.id] for p in gs.players}

        contenders = [p for p in gs.players if not p.has_folded]
        if len(contenders) > 1:
            best = max(HandEvaluator.evaluate(p.hand) for p in contenders)
            record.winning_hand = str(best)
            record.actions_summary.append(
                f"Showdown: {', '.join(record.winners)} win {record.pot_size} with {best}"
            )
        else:
            record.actions_summary.append(
                f"{record.winners[0]} wins pot of {record.pot_size} (everyone else folded)"
            )

        logger.debug(
            "Hand %d: %s won %d",
            record.hand_number,
            ", ".join(record.winners),
            record.pot_size,
        )
