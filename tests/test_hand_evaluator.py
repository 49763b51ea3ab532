"""Tests for the Badugi hand evaluator."""

from itertools import combinations

import pytest

from badugi_bot.core.hand_evaluator import MAX_BREAKABILITY, HandEvaluator, HandResult
from badugi_bot.utils.card import Card
from badugi_bot.utils.constants import HandClass, Rank


def _cards(s: str) -> list[Card]:
    """Helper: parse space-separated card strings like 'As 2h 3d 4c'."""
    return [Card.from_str(c) for c in s.split()]


def _ev(s: str) -> HandResult:
    return HandEvaluator.evaluate(_cards(s))


class TestClassification:
    def test_four_card_badugi(self) -> None:
        result = _ev("As 2h 3d 4c")
        assert result.hand_class == HandClass.FOUR_CARD
        assert result.high_rank == Rank.FOUR

    def test_suit_conflict_drops_to_three_cards(self) -> None:
        result = _ev("As 2s 3d 4c")
        assert result.hand_class == HandClass.THREE_CARD
        # A-3-4 beats 2-3-4
        assert result.ranks_descending == (4, 3, 1)

    def test_rank_conflict_drops_to_three_cards(self) -> None:
        result = _ev("As Ah 2d 3c")
        assert result.hand_class == HandClass.THREE_CARD
        assert result.ranks_descending == (3, 2, 1)

    def test_two_card_hand(self) -> None:
        result = _ev("As 2s 3h 4h")
        assert result.hand_class == HandClass.TWO_CARD
        assert result.ranks_descending == (3, 1)

    def test_quads_are_one_card(self) -> None:
        result = _ev("Ks Kh Kd Kc")
        assert result.hand_class == HandClass.ONE_CARD
        assert result.high_rank == Rank.KING

    def test_four_flush_keeps_lowest_card(self) -> None:
        result = _ev("5s 2s 9s Ks")
        assert result.hand_class == HandClass.ONE_CARD
        assert result.cards == (Card.from_str("2s"),)

    def test_fewer_than_four_cards(self) -> None:
        result = _ev("As 2h")
        assert result.hand_class == HandClass.TWO_CARD

    def test_classify_alias(self) -> None:
        assert HandEvaluator.classify(_cards("As 2h 3d 4c")) == _ev("As 2h 3d 4c")

    def test_empty_hand_raises(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            HandEvaluator.evaluate([])

    def test_five_cards_raise(self) -> None:
        with pytest.raises(ValueError, match="at most 4"):
            HandEvaluator.evaluate(_cards("As 2h 3d 4c 5s"))

    @pytest.mark.parametrize("hand", [
        "As 2h 3d 4c", "As 2s 3d 4c", "Ks Kh Kd Kc", "As Ah 2s 2h",
        "7d 7c 8d 9h", "Qs Js Td 9d", "3c 5c 5h Kd", "2h 4h 6h 8s",
    ])
    def test_result_is_valid_and_maximal(self, hand: str) -> None:
        cards = _cards(hand)
        result = HandEvaluator.evaluate(cards)
        assert HandEvaluator.is_valid_badugi(result.cards)
        assert all(c in cards for c in result.cards)
        largest = max(
            size for size in range(1, len(cards) + 1)
            if any(HandEvaluator.is_valid_badugi(s) for s in combinations(cards, size))
        )
        assert result.size == largest


class TestComparison:
    def test_more_cards_always_win(self) -> None:
        assert HandEvaluator.compare(_ev("Ks Qh Jd Tc"), _ev("As 2s 3d 4c")) == 1

    def test_lower_high_card_wins(self) -> None:
        assert HandEvaluator.compare(_ev("As 2h 3d 5c"), _ev("As 2h 3d 4c")) == -1

    def test_second_card_breaks_tie(self) -> None:
        assert _ev("As 2h 4d 7c") > _ev("As 3h 4d 7c")

    def test_suits_do_not_matter(self) -> None:
        a = _ev("As 2h 3d 4c")
        b = _ev("Ah 2d 3c 4s")
        assert HandEvaluator.compare(a, b) == 0
        assert a == b

    def test_transitive(self) -> None:
        a = _ev("As 2h 3d 3c")
        b = _ev("As 2h 5d 5c")
        c = _ev("2s 3h 6d 6c")
        assert a > b
        assert b > c
        assert a > c


class TestBreakability:
    def test_wheel_badugi(self) -> None:
        result = HandEvaluator.calculate_breakability(_ev("As 2h 3d 4c"))
        # Missing ranks 5..K: 9 + 8 + ... + 1
        assert result.score == 45
        assert result.breakable_card == Card.from_str("4c")
        assert result.improving_ranks == frozenset(r for r in Rank if r >= Rank.FIVE)

    def test_rough_badugi_scores_high(self) -> None:
        result = HandEvaluator.calculate_breakability(_ev("9s Th Jd Qc"))
        assert result.score == 77
        assert result.breakable_card == Card.from_str("Qc")
        assert Rank.ACE in result.improving_ranks
        assert Rank.NINE not in result.improving_ranks

    def test_non_four_card_scores_zero(self) -> None:
        result = HandEvaluator.calculate_breakability(_ev("As 2s 3d 4c"))
        assert result.score == 0
        assert result.breakable_card is None
        assert result.improving_ranks == frozenset()

    def test_bounds(self) -> None:
        for hand in ("As 2h 3d 4c", "Ts Jh Qd Kc", "As 5h 9d Kc", "6s 7h 8d 9c"):
            score = HandEvaluator.calculate_breakability(_ev(hand)).score
            assert 0 <= score <= MAX_BREAKABILITY


class TestSmoothness:
    def test_consecutive_ranks_smooth(self) -> None:
        assert HandEvaluator.is_smooth(_ev("As 2h 3d 4c"))

    def test_wide_gaps_not_smooth(self) -> None:
        # Mean gap 4
        assert not HandEvaluator.is_smooth(_ev("As 5h 9d Kc"))

    def test_gap_of_three_is_smooth(self) -> None:
        assert HandEvaluator.is_smooth(_ev("As 4h"))

    def test_single_card_not_smooth(self) -> None:
        assert not HandEvaluator.is_smooth(_ev("Ks Kh Kd Kc"))

    def test_custom_gap(self) -> None:
        assert not HandEvaluator.is_smooth(_ev("As 4h"), max_gap=2.0)
