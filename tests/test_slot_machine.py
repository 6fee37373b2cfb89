"""Tests for the slot machine pity mechanic and deferred settlement."""

import random

import pytest

from racecore.config.slot_machine import PENALTY_SYMBOL, SLOT_SYMBOLS, THANKS_SYMBOL
from racecore.events import SlotSettledEvent
from racecore.simulation.state import SlotMachinePhase, SlotMachineState
from racecore.systems.slot_machine import (
    SETTLE_TASK_KEY,
    add_coin_to_slot_machine,
    calculate_payout,
    resolve_spin,
    spin_probability,
)


def fill(engine, value: int = 100) -> None:
    for _ in range(3):
        assert engine.slot_machine.add_coin(value)


class TestCards:
    def test_cards_fill_in_order(self) -> None:
        slot = SlotMachineState()
        assert slot.phase == SlotMachinePhase.IDLE

        add_coin_to_slot_machine(slot, 100)
        assert slot.cards == [100, None, None]
        assert slot.phase == SlotMachinePhase.LOADED

        add_coin_to_slot_machine(slot, 200)
        add_coin_to_slot_machine(slot, 100)
        assert slot.is_active
        assert slot.pool_amount == 400
        assert slot.phase == SlotMachinePhase.READY

    def test_full_machine_refuses_coins(self) -> None:
        slot = SlotMachineState()
        for _ in range(3):
            add_coin_to_slot_machine(slot, 100)
        assert add_coin_to_slot_machine(slot, 100) is False
        assert slot.pool_amount == 300


class TestPity:
    def test_probability_grows_with_streak(self) -> None:
        assert spin_probability(0) == 0.0
        assert spin_probability(3) == pytest.approx(0.3)
        assert spin_probability(10) == 1.0
        assert spin_probability(25) == 1.0

    def test_zero_streak_always_loses(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            symbols, won = resolve_spin(0, rng)
            assert not won
            assert len(set(symbols)) == 3
            assert set(symbols) <= set(SLOT_SYMBOLS)

    def test_ten_losses_force_a_win(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            symbols, won = resolve_spin(10, rng)
            assert won
            assert len(set(symbols)) == 1


class TestPayout:
    @pytest.mark.parametrize(
        "symbol, expected",
        [(100, 150), (200, 300), (500, 600), (THANKS_SYMBOL, 50), (PENALTY_SYMBOL, -150)],
    )
    def test_triples(self, symbol, expected) -> None:
        assert calculate_payout([symbol] * 3, 300) == expected

    def test_mixed_symbols_pay_nothing(self) -> None:
        assert calculate_payout([100, 200, 500], 300) == 0

    def test_penalty_rounds_down(self) -> None:
        assert calculate_payout([PENALTY_SYMBOL] * 3, 301) == -150


class TestSettlement:
    """Spins settle on simulation time through the engine's scheduler."""

    def test_settles_after_delay(self, playing_engine) -> None:
        settled = []
        playing_engine.events.subscribe(SlotSettledEvent, settled.append)
        slot = playing_engine.state.slot_machine
        slot.failure_streak = 0
        fill(playing_engine)

        playing_engine.tick()
        assert slot.is_spinning
        assert playing_engine.scheduler.pending(SETTLE_TASK_KEY) is not None

        playing_engine.run_ticks(140)
        assert settled == []
        assert slot.phase == SlotMachinePhase.SPINNING

        playing_engine.run_ticks(20)
        assert len(settled) == 1
        assert settled[0].won is False
        assert slot.failure_streak == 1
        assert slot.cards == [None, None, None]
        assert slot.phase == SlotMachinePhase.IDLE
        assert playing_engine.save_data.failure_streak == 1

    def test_coins_refused_while_spinning(self, playing_engine) -> None:
        fill(playing_engine)
        playing_engine.tick()
        assert playing_engine.slot_machine.add_coin(100) is False

    def test_win_resets_streak_and_pays(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 0
        state.slot_machine.failure_streak = 10
        fill(playing_engine)

        playing_engine.tick()
        results = list(state.slot_machine.results)
        playing_engine.run_ticks(200)

        assert state.slot_machine.failure_streak == 0
        assert state.coins == max(0, calculate_payout(results, 300))

    def test_reset_discards_pending_settlement(self, playing_engine) -> None:
        settled = []
        playing_engine.events.subscribe(SlotSettledEvent, settled.append)
        fill(playing_engine)
        playing_engine.tick()

        playing_engine.reset()
        playing_engine.start(now_ms=0.0)
        playing_engine.run_ticks(300)

        assert settled == []
        assert playing_engine.scheduler.pending(SETTLE_TASK_KEY) is None
        assert playing_engine.state.slot_machine.cards == [None, None, None]

    def test_game_over_settles_pending_spin(self, playing_engine) -> None:
        settled = []
        playing_engine.events.subscribe(SlotSettledEvent, settled.append)
        slot = playing_engine.state.slot_machine
        slot.failure_streak = 0
        fill(playing_engine)
        playing_engine.tick()
        assert slot.is_spinning

        playing_engine.end_game()

        assert len(settled) == 1
        assert settled[0].won is False
        assert playing_engine.scheduler.pending(SETTLE_TASK_KEY) is None
        assert playing_engine.save_data.failure_streak == 1

        playing_engine.start(now_ms=0.0)
        assert playing_engine.state.slot_machine.failure_streak == 1

    def test_manual_trigger_when_auto_spin_off(self, save_data) -> None:
        from racecore.config import GameConfig
        from racecore.config.vehicles import get_preset
        from racecore.simulation import SimulationEngine

        engine = SimulationEngine(
            GameConfig(auto_spin_slot_machine=False), seed=1, save_data=save_data
        )
        engine.load_vehicle(get_preset("sedan"))
        engine.set_system_enabled("Spawn", False)
        engine.start(now_ms=0.0)
        fill(engine)

        engine.tick()
        assert not engine.state.slot_machine.is_spinning

        assert engine.trigger_slot_machine() is True
        assert engine.state.slot_machine.is_spinning
        assert engine.trigger_slot_machine() is False
