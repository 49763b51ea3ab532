"""Table state and turn management for a Badugi hand.

GameState is the only object that mutates the table. The decision engine
reads a frozen TableView produced by GameState.snapshot().
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from badugi_bot.core.hand_evaluator import HandEvaluator, HandResult
from badugi_bot.core.tournament import TournamentStructure
from badugi_bot.utils.card import Card, Deck
from badugi_bot.utils.constants import (
    BETTING_ROUNDS,
    DRAW_ROUNDS,
    HAND_SIZE,
    NUM_DRAWS,
    PHASE_ORDER,
    RAISE_CAP,
    STARTING_STACK,
    GamePhase,
)

logger = logging.getLogger("badugi_bot.core.game")

MAX_HAND_LOGS = 100


# ---------------------------------------------------------------------------
# Players and read-only views
# ---------------------------------------------------------------------------


@dataclass
class PlayerState:
    """State of a single seat at the table."""

    id: str
    name: str
    is_cpu: bool
    chips: int
    hand: list[Card] = field(default_factory=list)
    current_round_bet: int = 0
    has_folded: bool = False
    is_all_in: bool = False
    last_action: str | None = None
    draw_history: list[int] = field(default_factory=lambda: [0] * NUM_DRAWS)
    snowing: bool = False  # Called as a snow; stands pat in the last draw

    @property
    def is_busted(self) -> bool:
        return self.chips <= 0 and not self.is_all_in

    def reset_for_hand(self) -> None:
        """Reset player state for a new hand. Busted seats sit out as folded."""
        self.hand = []
        self.has_folded = self.chips <= 0
        self.current_round_bet = 0
        self.is_all_in = False
        self.last_action = None
        self.draw_history = [0] * NUM_DRAWS
        self.snowing = False

    def view(self) -> SeatView:
        return SeatView(
            id=self.id,
            name=self.name,
            is_cpu=self.is_cpu,
            chips=self.chips,
            hand=tuple(self.hand),
            current_round_bet=self.current_round_bet,
            has_folded=self.has_folded,
            is_all_in=self.is_all_in,
            draw_history=tuple(self.draw_history),
            snowing=self.snowing,
        )


@dataclass(frozen=True)
class SeatView:
    """Immutable copy of one seat as the decision engine sees it."""

    id: str
    name: str
    is_cpu: bool
    chips: int
    hand: tuple[Card, ...]
    current_round_bet: int = 0
    has_folded: bool = False
    is_all_in: bool = False
    draw_history: tuple[int, ...] = (0,) * NUM_DRAWS
    snowing: bool = False


@dataclass(frozen=True)
class TableView:
    """Immutable snapshot of the table for one decision."""

    seats: tuple[SeatView, ...]
    acting_index: int
    pot: int
    current_bet: int
    dealer_index: int
    raises_in_round: int
    phase: GamePhase

    @property
    def actor(self) -> SeatView:
        return self.seats[self.acting_index]

    @property
    def opponents(self) -> tuple[SeatView, ...]:
        """Seats other than the actor that are still in the hand."""
        return tuple(
            s for i, s in enumerate(self.seats)
            if i != self.acting_index and not s.has_folded
        )

    @property
    def active_player_count(self) -> int:
        """Seats still in the hand, all-in seats included."""
        return sum(1 for s in self.seats if not s.has_folded)

    @property
    def bet_to_call(self) -> int:
        return max(0, self.current_bet - self.actor.current_round_bet)


# ---------------------------------------------------------------------------
# Hand history
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActionLog:
    player_name: str
    action: str
    amount: int | None = None


@dataclass
class RoundLog:
    phase: str
    actions: list[ActionLog] = field(default_factory=list)
    hands: dict[str, list[str]] = field(default_factory=dict)  # Snapshot at round start


@dataclass
class HandLog:
    level: int
    timestamp: float = field(default_factory=time.time)
    pot: int = 0
    winners: list[str] = field(default_factory=list)
    final_hands: dict[str, list[str]] = field(default_factory=dict)
    results: dict[str, str] = field(default_factory=dict)
    rounds: list[RoundLog] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Game state
# ---------------------------------------------------------------------------


@dataclass
class GameState:
    """Complete state of a Badugi table across hands."""

    players: list[PlayerState]
    tournament: TournamentStructure = field(default_factory=TournamentStructure)
    deck: Deck = field(default_factory=Deck)
    pot: int = 0
    current_bet: int = 0  # Total each seat must have in for the round
    dealer_index: int = 0
    current_player_index: int = 0
    phase: GamePhase = GamePhase.GAME_OVER
    raises_in_round: int = 0
    raise_cap: int = RAISE_CAP
    hand_logs: list[HandLog] = field(default_factory=list)  # Newest first
    _acted: set[str] = field(default_factory=set, init=False, repr=False)
    _hand_log: HandLog | None = field(default=None, init=False, repr=False)
    _round_log: RoundLog | None = field(default=None, init=False, repr=False)

    @classmethod
    def create_table(
        cls,
        num_cpus: int = 6,
        starting_stack: int = STARTING_STACK,
        tournament: TournamentStructure | None = None,
        deck: Deck | None = None,
    ) -> GameState:
        """Seat the human player 'p1' followed by CPU seats cpu1..cpuN."""
        players = [PlayerState(id="p1", name="You", is_cpu=False, chips=starting_stack)]
        for i in range(1, num_cpus + 1):
            players.append(
                PlayerState(id=f"cpu{i}", name=f"CPU {i}", is_cpu=True, chips=starting_stack)
            )
        return cls(
            players=players,
            tournament=tournament or TournamentStructure(),
            deck=deck or Deck(),
        )

    # -- queries ------------------------------------------------------------

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def is_betting_phase(self) -> bool:
        return self.phase in BETTING_ROUNDS

    @property
    def is_draw_phase(self) -> bool:
        return self.phase in DRAW_ROUNDS

    @property
    def hand_in_progress(self) -> bool:
        return self.is_betting_phase or self.is_draw_phase

    @property
    def active_players(self) -> list[PlayerState]:
        """Players still in the hand (all-in players included)."""
        return [p for p in self.players if not p.has_folded]

    def snapshot(self) -> TableView:
        """Freeze the table for the decision engine."""
        return TableView(
            seats=tuple(p.view() for p in self.players),
            acting_index=self.current_player_index,
            pot=self.pot,
            current_bet=self.current_bet,
            dealer_index=self.dealer_index,
            raises_in_round=self.raises_in_round,
            phase=self.phase,
        )

    # -- hand lifecycle -----------------------------------------------------

    def start_hand(self) -> None:
        """Rotate the dealer, deal four cards each and post the blinds."""
        level = self.tournament.current_level()
        self.deck.reset()
        self.deck.shuffle()
        self.phase = GamePhase.BETTING_1
        self.pot = 0
        self.current_bet = 0
        self.raises_in_round = 0
        self._acted.clear()
        self.dealer_index = (self.dealer_index + 1) % len(self.players)

        for p in self.players:
            p.reset_for_hand()
            if p.chips > 0:
                p.hand = self.deck.deal(HAND_SIZE)

        self._hand_log = HandLog(level=level.level)
        self._round_log = None
        self._start_round_log()

        if sum(1 for p in self.players if p.chips > 0) < 2:
            self.phase = GamePhase.GAME_OVER
            return

        sb_index = self._next_seated(self.dealer_index)
        bb_index = self._next_seated(sb_index)
        self._post_blind(self.players[sb_index], level.small_blind)
        self._post_blind(self.players[bb_index], level.big_blind)
        self.current_bet = level.big_blind

        logger.info(
            "Hand started: dealer=%s, blinds %d/%d, %d players",
            self.players[self.dealer_index].name,
            level.small_blind,
            level.big_blind,
            len(self.active_players),
        )

        self.current_player_index = self._find_actor(bb_index + 1)
        if self._is_round_complete():
            self._next_phase()

    def _post_blind(self, player: PlayerState, amount: int) -> None:
        actual = min(player.chips, amount)
        player.chips -= actual
        player.current_round_bet += actual
        self.pot += actual
        if player.chips == 0:
            player.is_all_in = True
        self._log_action(player, "Post Blind", actual)

    # -- betting actions ----------------------------------------------------

    def fold(self) -> None:
        self._require_betting()
        player = self.current_player
        player.has_folded = True
        player.last_action = "Fold"
        self._log_action(player, "Fold")

        remaining = self.active_players
        if len(remaining) == 1:
            self._award_pot(remaining)
            self.phase = GamePhase.GAME_OVER
        else:
            self._advance_turn()

    def check(self) -> None:
        self._require_betting()
        player = self.current_player
        if player.current_round_bet < self.current_bet:
            raise ValueError("Cannot check, must call")
        player.last_action = "Check"
        self._log_action(player, "Check")
        self._advance_turn()

    def call(self, snow: bool = False) -> None:
        """Match the current bet; with nothing owed this is a check.

        Args:
            snow: The seat is representing a made hand it does not hold.
                The mark lasts for the rest of the hand.
        """
        self._require_betting()
        player = self.current_player
        if snow:
            player.snowing = True
        owed = self.current_bet - player.current_round_bet
        if owed <= 0:
            self.check()
            return

        actual = min(player.chips, owed)
        player.chips -= actual
        player.current_round_bet += actual
        self.pot += actual
        if player.chips == 0:
            player.is_all_in = True

        player.last_action = "Call"
        self._log_action(player, "Call", actual)
        self._advance_turn()

    def bet_or_raise(self) -> None:
        """Fixed-limit bet or raise; a short stack goes all-in.

        Raises:
            ValueError: If the round already holds the maximum number of raises.
        """
        self._require_betting()
        if self.raises_in_round >= self.raise_cap:
            raise ValueError("Raise cap reached")

        player = self.current_player
        level = self.tournament.current_level()
        bet_size = level.small_bet if BETTING_ROUNDS[self.phase] <= 2 else level.big_bet
        label = "Bet" if self.current_bet == 0 else "Raise"

        new_total = self.current_bet + bet_size
        needed = new_total - player.current_round_bet

        if player.chips < needed:
            all_in = player.chips
            player.chips = 0
            player.current_round_bet += all_in
            self.pot += all_in
            player.is_all_in = True
            if player.current_round_bet > self.current_bet:
                self.current_bet = player.current_round_bet
                self.raises_in_round += 1
            self._log_action(player, f"All-In {label}", all_in)
        else:
            player.chips -= needed
            player.current_round_bet += needed
            self.pot += needed
            self.current_bet = new_total
            self.raises_in_round += 1
            self._log_action(player, label, needed)

        player.last_action = label
        self._advance_turn()

    # -- drawing actions ----------------------------------------------------

    def draw(self, discards: list[Card]) -> None:
        """Replace the given cards and record how many were thrown."""
        self._require_draw()
        player = self.current_player
        for card in discards:
            if card not in player.hand:
                raise ValueError(f"Card {card} is not in {player.name}'s hand")

        player.draw_history[DRAW_ROUNDS[self.phase]] = len(discards)
        player.hand = [c for c in player.hand if c not in discards]
        player.hand.extend(self.deck.deal_with_change(list(discards)))

        player.last_action = f"Drew {len(discards)}"
        self._log_action(player, f"Draw {len(discards)}")
        self._advance_turn()

    def stand_pat(self) -> None:
        self._require_draw()
        player = self.current_player
        player.draw_history[DRAW_ROUNDS[self.phase]] = 0
        player.last_action = "Stand Pat"
        self._log_action(player, "Stand Pat")
        self._advance_turn()

    # -- turn rotation ------------------------------------------------------

    def _require_betting(self) -> None:
        if not self.is_betting_phase:
            raise ValueError(f"Betting action not allowed in phase {self.phase}")

    def _require_draw(self) -> None:
        if not self.is_draw_phase:
            raise ValueError(f"Draw action not allowed in phase {self.phase}")

    def _can_act(self, player: PlayerState) -> bool:
        if player.has_folded or player.is_busted:
            return False
        if self.is_betting_phase and player.is_all_in:
            return False
        return True

    def _next_seated(self, index: int) -> int:
        """Next seat after ``index`` that still has chips."""
        n = len(self.players)
        nxt = (index + 1) % n
        for _ in range(n):
            if self.players[nxt].chips > 0:
                return nxt
            nxt = (nxt + 1) % n
        return nxt

    def _find_actor(self, start: int) -> int:
        """First seat from ``start`` (inclusive) that can act this phase."""
        n = len(self.players)
        index = start % n
        for _ in range(n):
            if self._can_act(self.players[index]):
                return index
            index = (index + 1) % n
        return start % n

    def _advance_turn(self) -> None:
        self._acted.add(self.current_player.id)
        if self._is_round_complete():
            self._next_phase()
            return

        self.current_player_index = self._find_actor(self.current_player_index + 1)
        if self._is_round_complete():
            self._next_phase()

    def _is_round_complete(self) -> bool:
        in_hand = self.active_players
        can_act = [p for p in in_hand if self._can_act(p)]
        if not can_act:
            return True

        all_acted = all(p.id in self._acted for p in can_act)
        bets_match = True
        if self.is_betting_phase:
            bets_match = all(
                p.current_round_bet == self.current_bet or p.is_all_in
                for p in in_hand
            )
        return all_acted and bets_match

    def _next_phase(self) -> None:
        self._acted.clear()
        self.raises_in_round = 0
        self.current_bet = 0
        for p in self.players:
            p.current_round_bet = 0

        self.phase = PHASE_ORDER[PHASE_ORDER.index(self.phase) + 1]
        if self.phase == GamePhase.SHOWDOWN:
            self._handle_showdown()
            return

        self._start_round_log()
        self.current_player_index = self._find_actor(self.dealer_index + 1)
        if self._is_round_complete():
            self._next_phase()

    # -- showdown -----------------------------------------------------------

    def _handle_showdown(self) -> None:
        self._start_round_log()
        contenders = self.active_players

        if len(contenders) == 1:
            self._award_pot(contenders)
            self.phase = GamePhase.GAME_OVER
            return

        results: dict[str, HandResult] = {
            p.id: HandEvaluator.evaluate(p.hand) for p in contenders
        }
        best = max(results.values())
        winners = [p for p in contenders if results[p.id] == best]
        logger.info(
            "Showdown: %s win %d with %s",
            ", ".join(w.name for w in winners),
            self.pot,
            best,
        )
        self._award_pot(winners)

    def _award_pot(self, winners: list[PlayerState]) -> None:
        share, remainder = divmod(self.pot, len(winners))
        for w in winners:
            w.chips += share
            w.last_action = "Win" if len(winners) == 1 else "Tie"
        winners[0].chips += remainder

        self._save_hand_log(winners)
        self.pot = 0

    # -- logging ------------------------------------------------------------

    def _start_round_log(self) -> None:
        if self._hand_log is None:
            return
        if self._round_log is not None:
            self._hand_log.rounds.append(self._round_log)
        self._round_log = RoundLog(
            phase=self.phase.value,
            hands={
                p.name: [str(c) for c in p.hand]
                for p in self.players
                if not p.has_folded
            },
        )

    def _log_action(self, player: PlayerState, action: str, amount: int | None = None) -> None:
        if self._round_log is not None:
            self._round_log.actions.append(ActionLog(player.name, action, amount))

    def _save_hand_log(self, winners: list[PlayerState]) -> None:
        if self._hand_log is None:
            return
        if self._round_log is not None:
            self._hand_log.rounds.append(self._round_log)

        self._hand_log.pot = self.pot
        self._hand_log.winners = [w.name for w in winners]
        self._hand_log.final_hands = {p.name: [str(c) for c in p.hand] for p in self.players}
        self._hand_log.results = {p.name: p.last_action or "" for p in self.players}

        self.hand_logs.insert(0, self._hand_log)
        del self.hand_logs[MAX_HAND_LOGS:]
        self._hand_log = None
        self._round_log = None
