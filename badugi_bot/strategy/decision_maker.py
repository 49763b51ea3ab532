"""Core decision engine for CPU Badugi players.

Maps a frozen table snapshot to one action per turn. Nothing is carried
between calls: every decision is recomputed from the snapshot, and every
"random" choice comes from a fixed hash of the visible table numbers, so
the same table always produces the same action.

Architecture:
  TableView (hand, pot, bets, dealer, draw histories)
    -> Pre-draw module (opening ranges x position x profile)
    -> Post-draw module (draw-count reads, snow, value bets, breaking, pot odds)
    -> Discard module (keep the best Badugi, break or snow when flagged)
    -> Decision(action, reasoning)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from badugi_bot.core.game_state import GameState, SeatView, TableView
from badugi_bot.core.hand_evaluator import HandEvaluator, HandResult
from badugi_bot.strategy.config import DEFAULT_CONFIG, StrategyConfig
from badugi_bot.strategy.opening_ranges import adjusted_threshold, get_opening_criteria
from badugi_bot.strategy.profiles import (
    StrategyProfile,
    get_position_category,
    get_strategy_profile,
)
from badugi_bot.utils.card import Card
from badugi_bot.utils.constants import (
    BETTING_ROUNDS,
    DRAW_ROUNDS,
    LAST_COMPLETED_DRAW,
    Action,
    GamePhase,
    HandClass,
)

logger = logging.getLogger("badugi_bot.strategy")


class StrategyError(Exception):
    """Raised when the engine is asked to decide in a state it must not guess in.

    Deciding for a human seat, betting outside a betting round and
    discarding outside a draw round are programming errors in the caller.
    """


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Decision:
    """The engine's chosen action with reasoning."""

    action: Action
    reasoning: str
    breaking: bool = False  # Made hand flagged to throw its high card next draw
    snow: bool = False  # Three-card hand represented as made; stand pat in the last draw


# ---------------------------------------------------------------------------
# Deterministic roll
# ---------------------------------------------------------------------------

_MASK64 = (1 << 64) - 1
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15  # 2**64 / golden ratio, splitmix64 increment
_MIX_1 = 0xBF58476D1CE4E5B9
_MIX_2 = 0x94D049BB133111EB
_STACK_PRIME = 0x100000001B3  # FNV-1a 64-bit prime
_BET_PRIME = 0xC2B2AE3D27D4EB4F


def state_roll(pot: int, stack: int, current_bet: int) -> float:
    """Hash (pot, stack, current bet) onto [0, 1).

    The three integers are folded into one 64-bit seed and passed through
    the splitmix64 finalizer; the top 53 bits become the fraction.
    """
    seed = (
        int(pot) * _GOLDEN_GAMMA
        + int(stack) * _STACK_PRIME
        + int(current_bet) * _BET_PRIME
    ) & _MASK64
    z = (seed + _GOLDEN_GAMMA) & _MASK64
    z = ((z ^ (z >> 30)) * _MIX_1) & _MASK64
    z = ((z ^ (z >> 27)) * _MIX_2) & _MASK64
    z ^= z >> 31
    return (z >> 11) / float(1 << 53)


def _roll_for(view: TableView) -> float:
    return state_roll(view.pot, view.actor.chips, view.current_bet)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _cap_reached(view: TableView, config: StrategyConfig) -> bool:
    return view.raises_in_round >= config.raise_cap


def _raise_or_call(
    view: TableView,
    profile: StrategyProfile,
    config: StrategyConfig,
    reason: str,
) -> Decision:
    """Raise with probability aggression_factor, capped by the raise limit."""
    if _cap_reached(view, config):
        return Decision(Action.CALL, f"{reason}; raise cap reached, calling")
    roll = _roll_for(view)
    if roll < profile.raise_probability:
        return Decision(
            Action.RAISE,
            f"{reason}; roll {roll:.2f} < aggression {profile.raise_probability:.2f}",
        )
    return Decision(
        Action.CALL,
        f"{reason}; roll {roll:.2f} >= aggression {profile.raise_probability:.2f}",
    )


def _latest_draws(opponents: tuple[SeatView, ...], draw_index: int) -> list[int]:
    return [o.draw_history[draw_index] for o in opponents]


def calculate_pot_odds(pot: int, bet_to_call: int) -> float | None:
    """Pot-to-call ratio, or None when nothing is owed."""
    if bet_to_call <= 0:
        return None
    return pot / bet_to_call


def required_equity(pot_odds: float) -> float:
    """Minimum win probability that justifies a call at these pot odds."""
    return 1.0 / (pot_odds + 1.0)


def estimate_win_probability(
    hand: HandResult,
    active_player_count: int,
    config: StrategyConfig = DEFAULT_CONFIG,
) -> float:
    """Outs over the cards not held by the active players."""
    cards_remaining = max(1, config.deck_size - config.hand_size * active_player_count)
    return min(1.0, config.outs_for(hand.hand_class) / cards_remaining)


def default_discards(cards: list[Card] | tuple[Card, ...]) -> list[Card]:
    """Keep the best Badugi and throw everything else."""
    best = HandEvaluator.evaluate(cards)
    return [c for c in cards if c not in best.cards]


# ---------------------------------------------------------------------------
# Opponent signals
# ---------------------------------------------------------------------------


def is_break_candidate(
    view: TableView,
    hand: HandResult,
    config: StrategyConfig = DEFAULT_CONFIG,
) -> bool:
    """Whether a made hand should throw its high card at the next draw.

    Only rough four-card hands above the strong-hand cutoff qualify, and
    only when at least ``min_strength_signals`` opponents drew zero or one
    card in the latest draw. Betting and discard decisions share this
    predicate, so the break flagged while betting is carried out in the
    following draw without storing anything.
    """
    draw_index = LAST_COMPLETED_DRAW.get(view.phase)
    if draw_index is None or hand.hand_class != HandClass.FOUR_CARD:
        return False
    if hand.high_rank <= config.strong_hand_cutoff:
        return False
    if HandEvaluator.calculate_breakability(hand).score < config.break_threshold:
        return False
    strong = sum(1 for d in _latest_draws(view.opponents, draw_index) if d <= 1)
    return strong >= config.min_strength_signals


def _snow_available(view: TableView, hand: HandResult, draw_index: int) -> bool:
    """Three-card hand and every remaining opponent drew in the latest draw."""
    if hand.hand_class != HandClass.THREE_CARD:
        return False
    draws = _latest_draws(view.opponents, draw_index)
    return bool(draws) and all(d > 0 for d in draws)


# ---------------------------------------------------------------------------
# Pre-draw decision logic
# ---------------------------------------------------------------------------


class PreDrawEngine:
    """First betting round: opening ranges adjusted for position and profile."""

    @staticmethod
    def decide(
        view: TableView,
        profile: StrategyProfile,
        config: StrategyConfig = DEFAULT_CONFIG,
    ) -> Decision:
        hand = HandEvaluator.evaluate(view.actor.hand)
        position = get_position_category(
            view.acting_index, view.dealer_index, view.active_player_count,
        )
        criteria = get_opening_criteria(position, hand.hand_class, config.opening_table)
        if criteria is None:
            return Decision(Action.FOLD, f"Fold: {hand} never opens from {position}")

        threshold = adjusted_threshold(criteria, profile.tightness_factor)
        if hand.high_rank > threshold:
            return Decision(
                Action.FOLD,
                f"Fold: {hand} high card {hand.high_rank.name} above "
                f"{position} threshold {threshold:.2f}",
            )

        if criteria.smoothness_required and not HandEvaluator.is_smooth(hand, config.max_smooth_gap):
            return Decision(Action.FOLD, f"Fold: {hand} too rough for {position}")

        if criteria.baseline_action == Action.RAISE:
            return _raise_or_call(view, profile, config, f"Open {hand} from {position}")

        return Decision(criteria.baseline_action, f"{criteria.baseline_action}: {hand} from {position}")


# ---------------------------------------------------------------------------
# Post-draw decision logic
# ---------------------------------------------------------------------------


class PostDrawEngine:
    """Betting rounds after a draw, led by what opponents drew."""

    @staticmethod
    def decide(
        view: TableView,
        profile: StrategyProfile,
        config: StrategyConfig = DEFAULT_CONFIG,
    ) -> Decision:
        hand = HandEvaluator.evaluate(view.actor.hand)
        draw_index = LAST_COMPLETED_DRAW[view.phase]
        opponents = view.opponents

        # Drew fewer than every opponent: bet for value unconditionally
        own_draw = view.actor.draw_history[draw_index]
        opponent_draws = _latest_draws(opponents, draw_index)
        if (
            opponent_draws
            and all(d > own_draw for d in opponent_draws)
            and not _cap_reached(view, config)
        ):
            return Decision(
                Action.RAISE,
                f"Value bet: drew {own_draw}, every opponent drew more",
            )

        # Snow: represent a made hand once the second draw is done
        if BETTING_ROUNDS[view.phase] >= 3 and _snow_available(view, hand, draw_index):
            roll = _roll_for(view)
            if roll < profile.bluff_frequency:
                return Decision(
                    Action.CALL,
                    f"Snow: {hand} vs drawing field, roll {roll:.2f} < {profile.bluff_frequency:.2f}",
                    snow=True,
                )

        if hand.hand_class == HandClass.FOUR_CARD:
            return PostDrawEngine._made_hand(view, hand, profile, config)

        return PostDrawEngine._drawing_hand(view, hand, config)

    @staticmethod
    def _made_hand(
        view: TableView,
        hand: HandResult,
        profile: StrategyProfile,
        config: StrategyConfig,
    ) -> Decision:
        if hand.high_rank <= config.strong_hand_cutoff:
            return _raise_or_call(view, profile, config, f"Value {hand}")

        breakability = HandEvaluator.calculate_breakability(hand)
        if breakability.score < config.break_threshold:
            return Decision(
                Action.CALL,
                f"Call: {hand} rough but breakability {breakability.score} "
                f"< {config.break_threshold}, keeping it",
            )

        if is_break_candidate(view, hand, config):
            return Decision(
                Action.CALL,
                f"Call: {hand} facing strength, breaking {breakability.breakable_card} next draw",
                breaking=True,
            )

        return Decision(Action.CALL, f"Call: {hand} rough, no strength shown, keeping it")

    @staticmethod
    def _drawing_hand(
        view: TableView,
        hand: HandResult,
        config: StrategyConfig,
    ) -> Decision:
        pot_odds = calculate_pot_odds(view.pot, view.bet_to_call)
        if pot_odds is None:
            return Decision(Action.CALL, f"Check: {hand} drawing for free")

        win_probability = estimate_win_probability(hand, view.active_player_count, config)
        needed = required_equity(pot_odds)
        if win_probability >= needed:
            return Decision(
                Action.CALL,
                f"Call: {hand} {win_probability:.0%} to improve vs {needed:.0%} required",
            )
        return Decision(
            Action.FOLD,
            f"Fold: {hand} {win_probability:.0%} to improve vs {needed:.0%} required",
        )


# ---------------------------------------------------------------------------
# Discard logic
# ---------------------------------------------------------------------------


class DiscardEngine:
    """Draw rounds: which cards to throw."""

    @staticmethod
    def decide(
        view: TableView,
        config: StrategyConfig = DEFAULT_CONFIG,
    ) -> list[Card]:
        cards = view.actor.hand
        hand = HandEvaluator.evaluate(cards)

        if hand.hand_class == HandClass.FOUR_CARD:
            if is_break_candidate(view, hand, config):
                breakable = HandEvaluator.calculate_breakability(hand).breakable_card
                return [breakable]
            return []

        # The table marks a seat that called as a snow; follow it through
        if view.phase == GamePhase.DRAW_3 and view.actor.snowing:
            return []

        return [c for c in cards if c not in hand.cards]


# ---------------------------------------------------------------------------
# Main decision engine
# ---------------------------------------------------------------------------


class DecisionMaker:
    """Top-level engine combining pre-draw, post-draw and discard logic.

    Usage:
        maker = DecisionMaker()
        action = maker.decide_action(game_state)
        discards = maker.decide_discards(game_state)
    """

    def __init__(self, config: StrategyConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def profile_for(self, seat: SeatView) -> StrategyProfile:
        return get_strategy_profile(seat.id, self.config.profiles)

    def make_decision(self, state: TableView | GameState) -> Decision:
        """Produce a betting decision for the acting CPU seat.

        Draw phases return Action.DRAW; the caller then asks
        decide_discards() for the cards.

        Raises:
            StrategyError: If the acting seat is not a CPU or the phase
                has no betting decision.
        """
        view = _as_view(state)
        actor = view.actor
        if not actor.is_cpu:
            raise StrategyError(f"Seat {actor.id} is not a CPU player")

        if view.phase in DRAW_ROUNDS:
            decision = Decision(Action.DRAW, f"{view.phase}: discard selection")
        elif view.phase == GamePhase.BETTING_1:
            decision = PreDrawEngine.decide(view, self.profile_for(actor), self.config)
        elif view.phase in BETTING_ROUNDS:
            decision = PostDrawEngine.decide(view, self.profile_for(actor), self.config)
        else:
            raise StrategyError(f"No betting decision exists for phase {view.phase}")

        logger.debug(
            "%s %s -> %s (%s)",
            view.phase,
            actor.id,
            decision.action,
            decision.reasoning,
        )
        return decision

    def decide_action(self, state: TableView | GameState) -> Action:
        return self.make_decision(state).action

    def decide_discards(self, state: TableView | GameState) -> list[Card]:
        """Cards the acting CPU seat throws this draw (empty means stand pat).

        Raises:
            StrategyError: If the acting seat is not a CPU or the phase is
                not a draw phase.
        """
        view = _as_view(state)
        actor = view.actor
        if not actor.is_cpu:
            raise StrategyError(f"Seat {actor.id} is not a CPU player")
        if view.phase not in DRAW_ROUNDS:
            raise StrategyError(f"No discard decision exists for phase {view.phase}")

        discards = DiscardEngine.decide(view, self.config)
        logger.debug(
            "%s %s discards %s",
            view.phase,
            actor.id,
            " ".join(str(c) for c in discards) or "nothing",
        )
        return discards


def _as_view(state: TableView | GameState) -> TableView:
    if isinstance(state, GameState):
        return state.snapshot()
    return state
