"""Constants for the Badugi bot."""

from enum import IntEnum, StrEnum


class Suit(StrEnum):
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"


class Rank(IntEnum):
    """Card ranks on the low-ball scale (Ace plays lowest)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


RANK_SYMBOLS: dict[Rank, str] = {
    Rank.ACE: "A",
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
}

SYMBOL_RANKS: dict[str, Rank] = {s: r for r, s in RANK_SYMBOLS.items()}


class HandClass(StrEnum):
    """Size tier of a Badugi hand: the number of cards that play."""

    FOUR_CARD = "FOUR_CARD"
    THREE_CARD = "THREE_CARD"
    TWO_CARD = "TWO_CARD"
    ONE_CARD = "ONE_CARD"


HAND_CLASS_SIZES: dict[HandClass, int] = {
    HandClass.FOUR_CARD: 4,
    HandClass.THREE_CARD: 3,
    HandClass.TWO_CARD: 2,
    HandClass.ONE_CARD: 1,
}

HAND_CLASS_BY_SIZE: dict[int, HandClass] = {n: c for c, n in HAND_CLASS_SIZES.items()}


class Action(StrEnum):
    FOLD = "FOLD"
    CALL = "CALL"  # Check when nothing is owed
    RAISE = "RAISE"  # Bet when nothing is owed
    DRAW = "DRAW"


class GamePhase(StrEnum):
    BETTING_1 = "BETTING_1"
    DRAW_1 = "DRAW_1"
    BETTING_2 = "BETTING_2"
    DRAW_2 = "DRAW_2"
    BETTING_3 = "BETTING_3"
    DRAW_3 = "DRAW_3"
    BETTING_4 = "BETTING_4"
    SHOWDOWN = "SHOWDOWN"
    GAME_OVER = "GAME_OVER"


class PositionCategory(StrEnum):
    EARLY = "EARLY"
    MIDDLE = "MIDDLE"
    LATE = "LATE"


# Phase progression within a single hand
PHASE_ORDER: list[GamePhase] = [
    GamePhase.BETTING_1,
    GamePhase.DRAW_1,
    GamePhase.BETTING_2,
    GamePhase.DRAW_2,
    GamePhase.BETTING_3,
    GamePhase.DRAW_3,
    GamePhase.BETTING_4,
    GamePhase.SHOWDOWN,
]

# 1-based betting round number
BETTING_ROUNDS: dict[GamePhase, int] = {
    GamePhase.BETTING_1: 1,
    GamePhase.BETTING_2: 2,
    GamePhase.BETTING_3: 3,
    GamePhase.BETTING_4: 4,
}

# Slot in the draw history written while the phase is in progress
DRAW_ROUNDS: dict[GamePhase, int] = {
    GamePhase.DRAW_1: 0,
    GamePhase.DRAW_2: 1,
    GamePhase.DRAW_3: 2,
}

# Slot of the most recently completed draw as seen from each phase
LAST_COMPLETED_DRAW: dict[GamePhase, int] = {
    GamePhase.BETTING_2: 0,
    GamePhase.DRAW_2: 0,
    GamePhase.BETTING_3: 1,
    GamePhase.DRAW_3: 1,
    GamePhase.BETTING_4: 2,
}

NUM_DRAWS = 3
HAND_SIZE = 4
DECK_SIZE = 52
RAISE_CAP = 5
STARTING_STACK = 30000
