"""Smoke tests for the self-play simulation."""

from dataclasses import replace

from badugi_bot.simulation.badugi_game import BadugiGame
from badugi_bot.simulation.run_simulations import run_simulation
from badugi_bot.strategy.config import DEFAULT_CONFIG
from badugi_bot.utils.constants import Action


class TestBadugiGame:
    def test_hands_complete_and_conserve_chips(self) -> None:
        game = BadugiGame(seed=3)
        for _ in range(10):
            record = game.play_hand()
            assert record is not None
            assert record.winners
            assert record.pot_size > 0
            assert sum(record.chip_deltas.values()) == 0
        assert sum(p.chips for p in game.state.players) == 7 * 30000

    def test_cpu_opening_actions_recorded(self) -> None:
        game = BadugiGame(seed=5)
        records = [game.play_hand() for _ in range(10)]
        actions = [a for r in records for _, a in r.opening_actions]
        assert actions
        assert all(a in (Action.FOLD, Action.CALL, Action.RAISE) for a in actions)

    def test_same_seed_same_session(self) -> None:
        a = BadugiGame(seed=9)
        b = BadugiGame(seed=9)
        for _ in range(5):
            ra = a.play_hand()
            rb = b.play_hand()
            assert ra.winners == rb.winners
            assert ra.actions_summary == rb.actions_summary

    def test_no_hand_without_two_stacks(self) -> None:
        game = BadugiGame(seed=1)
        for p in game.state.players[1:]:
            p.chips = 0
        assert game.play_hand() is None

    def test_configured_raise_cap_reaches_the_table(self) -> None:
        game = BadugiGame(config=replace(DEFAULT_CONFIG, raise_cap=8), seed=1)
        assert game.state.raise_cap == 8
        for _ in range(200):
            for p in game.state.players:
                p.chips = 30000
            record = game.play_hand()
            assert sum(record.chip_deltas.values()) == 0


class TestRunSimulation:
    def test_report(self, capsys) -> None:
        records = run_simulation(num_hands=5, seed=7)
        assert len(records) == 5
        out = capsys.readouterr().out
        assert "BADUGI CPU SIMULATION" in out
        assert "fold rate by position" in out
