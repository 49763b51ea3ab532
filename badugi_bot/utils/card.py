"""Card and Deck classes for Badugi."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering

import numpy as np

from badugi_bot.utils.constants import RANK_SYMBOLS, SYMBOL_RANKS, Rank, Suit


@total_ordering
@dataclass(frozen=True)
class Card:
    """A playing card on the low-ball scale (Ace plays lowest)."""

    rank: Rank
    suit: Suit

    @classmethod
    def from_str(cls, s: str) -> Card:
        """Parse rank symbol plus suit letter, e.g. "As", "Td" or "kh".

        Raises:
            ValueError: On anything other than one rank symbol followed by
                one suit letter.
        """
        if len(s) != 2:
            raise ValueError(f"Expected rank and suit like 'As', got '{s}'")
        rank = SYMBOL_RANKS.get(s[0].upper())
        if rank is None:
            raise ValueError(f"Unknown rank symbol '{s[0]}' in '{s}'")
        try:
            suit = Suit(s[1].lower())
        except ValueError:
            raise ValueError(f"Unknown suit letter '{s[1]}' in '{s}'")
        return cls(rank=rank, suit=suit)

    @property
    def value(self) -> int:
        """Numeric value of the card's rank (Ace=1 .. King=13)."""
        return int(self.rank)

    def __str__(self) -> str:
        return f"{RANK_SYMBOLS[self.rank]}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card('{self}')"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.value < other.value


def full_deck() -> list[Card]:
    """All 52 cards in suit-major order."""
    return [Card(rank=rank, suit=suit) for suit in Suit for rank in Rank]


@dataclass
class Deck:
    """Standard 52-card deck with a discard pile for draw games.

    Shuffling uses a numpy Generator so a seeded deck deals the same
    sequence every run.
    """

    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    _cards: list[Card] = field(default_factory=list, init=False, repr=False)
    _discards: list[Card] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Restore all 52 cards (unshuffled) and clear the discard pile."""
        self._cards = full_deck()
        self._discards = []

    def shuffle(self) -> None:
        """Shuffle whatever is left in the stock."""
        order = self.rng.permutation(len(self._cards))
        self._cards = [self._cards[i] for i in order]

    def deal(self, n: int = 1) -> list[Card]:
        """Take n cards off the stock. ValueError when the stock is too short."""
        if n > len(self._cards):
            raise ValueError(f"Cannot deal {n} cards from a stock of {len(self._cards)}")
        dealt, self._cards = self._cards[:n], self._cards[n:]
        return dealt

    def deal_with_change(self, discards: list[Card]) -> list[Card]:
        """Replace discarded cards with fresh ones.

        When the stock cannot cover the draw, the discard pile collected
        so far is shuffled back under the stock first. The new discards
        join the pile only afterwards, so a player never redraws their
        own cards.
        """
        if len(discards) > len(self._cards):
            order = self.rng.permutation(len(self._discards))
            self._cards.extend(self._discards[i] for i in order)
            self._discards = []
        self._discards.extend(discards)
        return self.deal(len(discards))

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the stock."""
        return len(self._cards)

    @property
    def discarded(self) -> int:
        """Number of cards waiting in the discard pile."""
        return len(self._discards)
