"""CPU personalities and seat-position categories.

Six fixed profiles give the computer players different temperaments.
A seat identity always maps to the same profile, hand after hand.
"""

from __future__ import annotations

import math
import re
import zlib
from dataclasses import dataclass

from badugi_bot.utils.constants import PositionCategory

_AGGRESSION_RANGE = (0.8, 1.2)
_BLUFF_RANGE = (0.10, 0.25)
_TIGHTNESS_RANGE = (0.8, 1.2)

_TRAILING_NUMBER = re.compile(r"(\d+)$")


@dataclass(frozen=True)
class StrategyProfile:
    """Personality multipliers for one CPU identity.

    Attributes:
        name: Short label used in logs.
        aggression_factor: Probability weight for raising with a raise-worthy
            hand (clamped to 1.0 when used as a probability).
        bluff_frequency: Probability of a snow play when one is available.
        tightness_factor: Divides opening thresholds; above 1.0 plays tighter.
    """

    name: str
    aggression_factor: float
    bluff_frequency: float
    tightness_factor: float

    def __post_init__(self) -> None:
        for attr, (lo, hi) in (
            ("aggression_factor", _AGGRESSION_RANGE),
            ("bluff_frequency", _BLUFF_RANGE),
            ("tightness_factor", _TIGHTNESS_RANGE),
        ):
            value = getattr(self, attr)
            if not lo <= value <= hi:
                raise ValueError(
                    f"{attr} must be in [{lo}, {hi}] for profile '{self.name}', got {value}"
                )

    @property
    def raise_probability(self) -> float:
        return max(0.0, min(1.0, self.aggression_factor))


STRATEGY_PROFILES: tuple[StrategyProfile, ...] = (
    StrategyProfile("solid", aggression_factor=0.9, bluff_frequency=0.10, tightness_factor=1.1),
    StrategyProfile("balanced", aggression_factor=1.0, bluff_frequency=0.15, tightness_factor=1.0),
    StrategyProfile("pressure", aggression_factor=1.1, bluff_frequency=0.15, tightness_factor=0.9),
    StrategyProfile("rock", aggression_factor=0.8, bluff_frequency=0.10, tightness_factor=1.2),
    StrategyProfile("maniac", aggression_factor=1.2, bluff_frequency=0.20, tightness_factor=0.8),
    StrategyProfile("trickster", aggression_factor=1.0, bluff_frequency=0.25, tightness_factor=0.9),
)


def get_position_category(
    seat_index: int,
    dealer_index: int,
    active_player_count: int,
) -> PositionCategory:
    """Classify a seat as early, middle or late relative to the dealer.

    The first third of seats after the dealer (rounded up) is early and
    the last third (from floor(2n/3)) is late.

    Raises:
        ValueError: If there are no active players.
    """
    if active_player_count < 1:
        raise ValueError(f"Need at least 1 active player, got {active_player_count}")

    n = active_player_count
    relative = (seat_index - dealer_index + n) % n
    early_bound = math.ceil(n / 3)
    late_bound = (n * 2) // 3

    if relative < early_bound:
        return PositionCategory.EARLY
    if relative >= late_bound:
        return PositionCategory.LATE
    return PositionCategory.MIDDLE


def profile_index(identity: str, num_profiles: int = len(STRATEGY_PROFILES)) -> int:
    """Stable profile slot for a seat identity.

    'cpu1' maps to slot 0, 'cpu2' to slot 1, and so on. Identities
    without a trailing number fall back to a CRC-32 of the identity.
    """
    match = _TRAILING_NUMBER.search(identity)
    if match:
        return (int(match.group(1)) - 1) % num_profiles
    return zlib.crc32(identity.encode("utf-8")) % num_profiles


def get_strategy_profile(
    identity: str,
    profiles: tuple[StrategyProfile, ...] = STRATEGY_PROFILES,
) -> StrategyProfile:
    return profiles[profile_index(identity, len(profiles))]
