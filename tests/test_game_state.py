"""Tests for table bookkeeping and turn rotation."""

import numpy as np
import pytest

from badugi_bot.core.game_state import GameState, PlayerState
from badugi_bot.utils.card import Card, Deck
from badugi_bot.utils.constants import GamePhase


def _cards(s: str) -> list[Card]:
    return [Card.from_str(c) for c in s.split()]


def _table(num_cpus: int = 6, seed: int = 42) -> GameState:
    return GameState.create_table(num_cpus=num_cpus, deck=Deck(rng=np.random.default_rng(seed)))


def _play_out_passively(gs: GameState) -> None:
    """Check or call every bet and stand pat in every draw."""
    while gs.hand_in_progress:
        if gs.is_draw_phase:
            gs.stand_pat()
        else:
            gs.call()


class TestCreateTable:
    def test_seats(self) -> None:
        gs = _table()
        assert [p.id for p in gs.players] == ["p1", "cpu1", "cpu2", "cpu3", "cpu4", "cpu5", "cpu6"]
        assert not gs.players[0].is_cpu
        assert all(p.is_cpu for p in gs.players[1:])
        assert all(p.chips == 30000 for p in gs.players)
        assert gs.phase == GamePhase.GAME_OVER


class TestStartHand:
    def test_deal_and_blinds(self) -> None:
        gs = _table()
        gs.start_hand()
        assert gs.phase == GamePhase.BETTING_1
        assert gs.dealer_index == 1
        assert gs.players[2].current_round_bet == 10
        assert gs.players[3].current_round_bet == 20
        assert gs.pot == 30
        assert gs.current_bet == 20
        assert gs.current_player_index == 4
        assert all(len(p.hand) == 4 for p in gs.players)
        assert all(p.draw_history == [0, 0, 0] for p in gs.players)

    def test_busted_seat_sits_out(self) -> None:
        gs = _table(num_cpus=2)
        gs.players[1].chips = 0
        gs.start_hand()
        assert gs.players[1].has_folded
        assert gs.players[1].hand == []

    def test_needs_two_seated_players(self) -> None:
        gs = _table(num_cpus=1)
        gs.players[1].chips = 0
        gs.start_hand()
        assert gs.phase == GamePhase.GAME_OVER

    def test_snapshot_is_frozen_copy(self) -> None:
        gs = _table()
        gs.start_hand()
        view = gs.snapshot()
        assert view.actor.id == "cpu4"
        assert view.bet_to_call == 20
        assert view.active_player_count == 7
        assert len(view.opponents) == 6
        gs.players[4].draw_history[0] = 3
        assert view.actor.draw_history == (0, 0, 0)


class TestBetting:
    def test_check_facing_bet_raises(self) -> None:
        gs = _table()
        gs.start_hand()
        with pytest.raises(ValueError, match="Cannot check"):
            gs.check()

    def test_call(self) -> None:
        gs = _table()
        gs.start_hand()
        gs.call()
        assert gs.players[4].chips == 30000 - 20
        assert gs.pot == 50
        assert gs.current_player_index == 5

    def test_raise_uses_small_bet_early(self) -> None:
        gs = _table()
        gs.start_hand()
        gs.bet_or_raise()
        assert gs.current_bet == 40
        assert gs.raises_in_round == 1
        assert gs.players[4].current_round_bet == 40

    def test_raise_cap(self) -> None:
        gs = _table()
        gs.start_hand()
        gs.raises_in_round = 5
        with pytest.raises(ValueError, match="Raise cap"):
            gs.bet_or_raise()

    def test_short_stack_goes_all_in(self) -> None:
        gs = _table()
        gs.start_hand()
        gs.players[4].chips = 15
        gs.bet_or_raise()
        assert gs.players[4].is_all_in
        assert gs.players[4].chips == 0
        assert gs.raises_in_round == 0

    def test_all_in_above_the_bet_counts_as_raise(self) -> None:
        gs = _table()
        gs.start_hand()
        gs.players[4].chips = 30  # Owes 20, a full raise needs 40
        gs.bet_or_raise()
        assert gs.players[4].is_all_in
        assert gs.current_bet == 30
        assert gs.raises_in_round == 1

    def test_table_raise_cap_is_configurable(self) -> None:
        gs = _table()
        gs.raise_cap = 8
        gs.start_hand()
        gs.raises_in_round = 5
        gs.bet_or_raise()
        assert gs.raises_in_round == 6
        gs.raises_in_round = 8
        with pytest.raises(ValueError, match="Raise cap"):
            gs.bet_or_raise()

    def test_snow_call_marks_seat(self) -> None:
        gs = _table()
        gs.start_hand()
        gs.call(snow=True)
        gs.call()
        assert gs.players[4].snowing
        assert not gs.players[5].snowing

    def test_everyone_folds_to_big_blind(self) -> None:
        gs = _table()
        gs.start_hand()
        for _ in range(6):
            gs.fold()
        assert gs.phase == GamePhase.GAME_OVER
        assert gs.players[3].chips == 30000 - 20 + 30
        assert gs.hand_logs[0].winners == ["CPU 3"]

    def test_draw_not_allowed_while_betting(self) -> None:
        gs = _table()
        gs.start_hand()
        with pytest.raises(ValueError, match="Draw action not allowed"):
            gs.stand_pat()


class TestDrawing:
    def _to_first_draw(self) -> GameState:
        gs = _table()
        gs.start_hand()
        while gs.phase == GamePhase.BETTING_1:
            gs.call()
        return gs

    def test_phase_advances_after_betting(self) -> None:
        gs = self._to_first_draw()
        assert gs.phase == GamePhase.DRAW_1
        assert gs.current_player_index == 2
        assert gs.current_bet == 0
        assert gs.pot == 140

    def test_draw_records_count(self) -> None:
        gs = self._to_first_draw()
        player = gs.current_player
        kept = player.hand[2:]
        gs.draw(player.hand[:2])
        assert player.draw_history == [2, 0, 0]
        assert len(player.hand) == 4
        assert all(c in player.hand for c in kept)

    def test_stand_pat_records_zero(self) -> None:
        gs = self._to_first_draw()
        player = gs.current_player
        hand = list(player.hand)
        gs.stand_pat()
        assert player.draw_history == [0, 0, 0]
        assert player.hand == hand

    def test_discard_must_be_in_hand(self) -> None:
        gs = self._to_first_draw()
        outsider = next(c for c in _cards("As Ah Ad Ac 2s 2h") if c not in gs.current_player.hand)
        with pytest.raises(ValueError, match="not in"):
            gs.draw([outsider])

    def test_betting_not_allowed_while_drawing(self) -> None:
        gs = self._to_first_draw()
        with pytest.raises(ValueError, match="Betting action not allowed"):
            gs.call()


class TestShowdown:
    def _heads_up(self, human: str, cpu: str) -> GameState:
        gs = _table(num_cpus=1)
        gs.start_hand()
        gs.players[0].hand = _cards(human)
        gs.players[1].hand = _cards(cpu)
        _play_out_passively(gs)
        return gs

    def test_best_badugi_wins(self) -> None:
        gs = self._heads_up("As 2h 3d 4c", "Ks Kh Kd Kc")
        assert gs.phase == GamePhase.SHOWDOWN
        assert gs.players[0].chips == 30000 + 20
        assert gs.players[1].chips == 30000 - 20
        assert gs.hand_logs[0].winners == ["You"]
        assert gs.pot == 0

    def test_tie_splits_pot(self) -> None:
        gs = self._heads_up("As 2h 3d 4c", "Ah 2d 3c 4s")
        assert gs.players[0].chips == 30000
        assert gs.players[1].chips == 30000
        assert gs.players[0].last_action == "Tie"

    def test_hand_log_records_rounds(self) -> None:
        gs = self._heads_up("As 2h 3d 4c", "Ks Kh Kd Kc")
        log = gs.hand_logs[0]
        assert log.pot == 40
        phases = [r.phase for r in log.rounds]
        assert phases[0] == "BETTING_1"
        assert "DRAW_3" in phases


class TestPlayerState:
    def test_reset_for_hand(self) -> None:
        player = PlayerState(id="cpu1", name="CPU 1", is_cpu=True, chips=100)
        player.draw_history = [1, 2, 3]
        player.has_folded = True
        player.snowing = True
        player.reset_for_hand()
        assert player.draw_history == [0, 0, 0]
        assert not player.has_folded
        assert not player.snowing

    def test_busted_player_marked_folded(self) -> None:
        player = PlayerState(id="cpu1", name="CPU 1", is_cpu=True, chips=0)
        player.reset_for_hand()
        assert player.has_folded
        assert player.is_busted
