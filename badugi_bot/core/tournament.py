"""Tournament blind schedule.

Levels are read from a tab-separated table with a header row:

    level	small_blind	big_blind	duration_sec
    1	10	20	300
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class BlindLevel:
    """A single blind level in a tournament structure."""

    level: int
    small_blind: int
    big_blind: int
    duration_sec: int

    @property
    def small_bet(self) -> int:
        """Fixed-limit bet size for the first two betting rounds."""
        return self.big_blind

    @property
    def big_bet(self) -> int:
        """Fixed-limit bet size for the last two betting rounds."""
        return self.big_blind * 2


FALLBACK_LEVEL = BlindLevel(level=1, small_blind=10, big_blind=20, duration_sec=300)

DEFAULT_BLINDS_TSV = """\
level	small_blind	big_blind	duration_sec
1	10	20	300
2	20	40	300
3	30	60	300
4	50	100	300
5	75	150	300
6	100	200	300
7	150	300	300
8	200	400	300
9	300	600	300
10	500	1000	300
"""


def parse_blind_levels(tsv: str) -> list[BlindLevel]:
    """Parse a blind table, skipping the header and short rows."""
    levels: list[BlindLevel] = []
    for line in tsv.strip().splitlines()[1:]:
        parts = line.split("\t")
        if len(parts) < 4:
            continue
        levels.append(BlindLevel(
            level=int(parts[0]),
            small_blind=int(parts[1]),
            big_blind=int(parts[2]),
            duration_sec=int(parts[3]),
        ))
    return levels


class TournamentStructure:
    """Time-driven blind schedule.

    Usage:
        structure = TournamentStructure()
        structure.start()
        level = structure.current_level()
    """

    def __init__(
        self,
        levels: list[BlindLevel] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.levels = levels if levels is not None else parse_blind_levels(DEFAULT_BLINDS_TSV)
        self._clock = clock
        self._start_time: float | None = None

    def start(self) -> None:
        self._start_time = self._clock()

    @property
    def started(self) -> bool:
        return self._start_time is not None

    def _elapsed(self) -> float:
        assert self._start_time is not None
        return self._clock() - self._start_time

    def current_level(self) -> BlindLevel:
        """The level in force now; the first level before start, the last after the end."""
        if not self.levels:
            return FALLBACK_LEVEL
        if not self.started:
            return self.levels[0]

        elapsed = self._elapsed()
        accumulated = 0
        for level in self.levels:
            accumulated += level.duration_sec
            if elapsed < accumulated:
                return level
        return self.levels[-1]

    def time_remaining(self) -> int:
        """Whole seconds left in the current level (0 before start or past the end)."""
        if not self.started:
            return 0
        elapsed = self._elapsed()
        accumulated = 0
        for level in self.levels:
            accumulated += level.duration_sec
            if elapsed < accumulated:
                return math.ceil(accumulated - elapsed)
        return 0

    def next_level(self) -> BlindLevel | None:
        current = self.current_level()
        if current not in self.levels:
            return None
        index = self.levels.index(current)
        if index < len(self.levels) - 1:
            return self.levels[index + 1]
        return None
