"""Badugi hand evaluation: classification, comparison and breakability."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations

from badugi_bot.utils.card import Card
from badugi_bot.utils.constants import (
    HAND_CLASS_BY_SIZE,
    HAND_CLASS_SIZES,
    HAND_SIZE,
    HandClass,
    Rank,
)

# Largest possible breakability: sum of (14 - r) over all 13 ranks
MAX_BREAKABILITY = sum(14 - r for r in Rank)

DEFAULT_MAX_SMOOTH_GAP = 3.0


@dataclass(frozen=True)
class HandResult:
    """Result of classifying a Badugi hand.

    Ordering follows hand quality: ``a > b`` means ``a`` is the better hand.
    More playing cards always win; equal sizes compare the highest rank
    first, and the lower rank wins. Suits never matter.
    """

    hand_class: HandClass
    cards: tuple[Card, ...]

    @property
    def size(self) -> int:
        return HAND_CLASS_SIZES[self.hand_class]

    @property
    def ranks_descending(self) -> tuple[int, ...]:
        return tuple(sorted((c.value for c in self.cards), reverse=True))

    @property
    def high_rank(self) -> Rank:
        """Rank of the highest playing card."""
        return Rank(self.ranks_descending[0])

    def _key(self) -> tuple[int, tuple[int, ...]]:
        # Bigger is better: size ascending, ranks inverted
        return (self.size, tuple(-r for r in self.ranks_descending))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self._key() < other._key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __le__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        cards = sorted(self.cards, key=lambda c: c.value)
        return f"{self.hand_class} ({','.join(str(c) for c in cards)})"


@dataclass(frozen=True)
class Breakability:
    """How attractive it is to break a made four-card hand.

    Attributes:
        score: Sum of (14 - r) over ranks missing from the hand, in [0, 91].
        breakable_card: The card to throw when breaking (highest rank),
            or None when the hand is not a four-card hand.
        improving_ranks: Ranks the replacement card could take.
    """

    score: int
    breakable_card: Card | None
    improving_ranks: frozenset[Rank]


NO_BREAKABILITY = Breakability(score=0, breakable_card=None, improving_ranks=frozenset())


class HandEvaluator:
    """Classifies Badugi hands and scores them for drawing decisions."""

    @staticmethod
    def evaluate(cards: list[Card] | tuple[Card, ...]) -> HandResult:
        """Find the best valid Badugi subset of 1 to 4 cards.

        A subset is valid when no two cards share a rank and no two share
        a suit. The largest valid size wins; among equal sizes the lowest
        descending rank sequence wins.

        Raises:
            ValueError: If no cards or more than four cards are given.
        """
        if not cards:
            raise ValueError("Need at least 1 card to evaluate")
        if len(cards) > HAND_SIZE:
            raise ValueError(f"Badugi hands hold at most {HAND_SIZE} cards, got {len(cards)}")

        for size in range(len(cards), 0, -1):
            valid = [
                combo for combo in combinations(cards, size)
                if HandEvaluator.is_valid_badugi(combo)
            ]
            if valid:
                best = min(
                    valid,
                    key=lambda combo: sorted((c.value for c in combo), reverse=True),
                )
                return HandResult(hand_class=HAND_CLASS_BY_SIZE[size], cards=tuple(best))

        # Unreachable for non-empty input: any single card is valid
        lowest = min(cards, key=lambda c: c.value)
        return HandResult(hand_class=HandClass.ONE_CARD, cards=(lowest,))

    classify = evaluate

    @staticmethod
    def compare(a: HandResult, b: HandResult) -> int:
        """Return 1 if ``a`` is better, -1 if ``b`` is better, 0 on a tie."""
        if a > b:
            return 1
        if b > a:
            return -1
        return 0

    @staticmethod
    def is_valid_badugi(cards: list[Card] | tuple[Card, ...]) -> bool:
        """Check that no rank and no suit repeats."""
        ranks = {c.rank for c in cards}
        suits = {c.suit for c in cards}
        return len(ranks) == len(cards) and len(suits) == len(cards)

    @staticmethod
    def calculate_breakability(result: HandResult) -> Breakability:
        """Score a made four-card hand for breaking.

        Every rank absent from the hand is a possible improving rank;
        low ranks weigh more because drawing into them improves the hand
        the most. Anything other than a four-card hand scores zero.
        """
        if result.hand_class != HandClass.FOUR_CARD:
            return NO_BREAKABILITY

        present = {c.rank for c in result.cards}
        improving = frozenset(r for r in Rank if r not in present)
        score = sum(14 - r for r in improving)
        score = max(0, min(score, MAX_BREAKABILITY))

        breakable = max(result.cards, key=lambda c: c.value)
        return Breakability(
            score=score,
            breakable_card=breakable,
            improving_ranks=improving,
        )

    @staticmethod
    def is_smooth(result: HandResult, max_gap: float = DEFAULT_MAX_SMOOTH_GAP) -> bool:
        """Whether the average gap between consecutive ranks is at most ``max_gap``.

        Needs at least two playing cards.
        """
        ranks = sorted(c.value for c in result.cards)
        if len(ranks) < 2:
            return False
        gaps = [hi - lo for lo, hi in zip(ranks, ranks[1:])]
        return sum(gaps) / len(gaps) <= max_gap
