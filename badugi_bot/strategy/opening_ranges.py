"""Pre-draw opening ranges for Badugi.

Each (position, hand class) pair names the worst high card worth
playing, whether the hand must also be smooth, and the default action.
Pairs missing from the table (every one-card hand, two-card hands
outside late position) are folds.

    Position  4-card          3-card                 2-card
    EARLY     8-high, raise   5-high smooth, call    -
    MIDDLE    Q-high, raise   6-high smooth, call    -
    LATE      K-high, raise   7-high, call           3-high smooth, call
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from badugi_bot.utils.constants import Action, HandClass, PositionCategory, Rank


@dataclass(frozen=True)
class OpeningCriteria:
    """Entry requirements for one (position, hand class) pair."""

    threshold_rank: Rank
    smoothness_required: bool
    baseline_action: Action

    def __post_init__(self) -> None:
        if self.baseline_action not in (Action.FOLD, Action.CALL, Action.RAISE):
            raise ValueError(f"Invalid baseline action: {self.baseline_action}")


OpeningTable = Mapping[tuple[PositionCategory, HandClass], OpeningCriteria]

OPENING_CRITERIA: OpeningTable = MappingProxyType({
    (PositionCategory.EARLY, HandClass.FOUR_CARD): OpeningCriteria(Rank.EIGHT, False, Action.RAISE),
    (PositionCategory.EARLY, HandClass.THREE_CARD): OpeningCriteria(Rank.FIVE, True, Action.CALL),
    (PositionCategory.MIDDLE, HandClass.FOUR_CARD): OpeningCriteria(Rank.QUEEN, False, Action.RAISE),
    (PositionCategory.MIDDLE, HandClass.THREE_CARD): OpeningCriteria(Rank.SIX, True, Action.CALL),
    (PositionCategory.LATE, HandClass.FOUR_CARD): OpeningCriteria(Rank.KING, False, Action.RAISE),
    (PositionCategory.LATE, HandClass.THREE_CARD): OpeningCriteria(Rank.SEVEN, False, Action.CALL),
    (PositionCategory.LATE, HandClass.TWO_CARD): OpeningCriteria(Rank.THREE, True, Action.CALL),
})


def get_opening_criteria(
    position: PositionCategory,
    hand_class: HandClass,
    table: OpeningTable = OPENING_CRITERIA,
) -> OpeningCriteria | None:
    """Look up the opening requirements, or None when the hand never opens."""
    return table.get((position, hand_class))


def adjusted_threshold(criteria: OpeningCriteria, tightness_factor: float) -> float:
    """Opening threshold scaled by a profile's tightness.

    Tight profiles (factor above 1) get a lower threshold, so they need a
    lower high card to play.
    """
    return criteria.threshold_rank / tightness_factor
