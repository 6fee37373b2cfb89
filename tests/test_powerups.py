"""Tests for the power-up queue, combos, purchases and expiry effects."""

import pytest

from racecore.config.powerups import PowerUpType, get_effect
from racecore.simulation.state import MAX_HEARTS
from racecore.systems.powerups import (
    activate,
    collect_into_queue,
    decay,
    find_combo,
    get_coin_multiplier,
    get_obstacle_time_scale,
    get_speed_multiplier,
    get_speed_override,
)


def queue_of(*types):
    return [activate(t, 0.0) for t in types]


class TestComboQueue:
    """Pure queue rules."""

    def test_combo_pairs_with_last_entry_only(self) -> None:
        """An older matching entry never crafts; only the newest one does."""
        active = queue_of(PowerUpType.INVINCIBILITY, PowerUpType.SPEED_BOOST)

        assert find_combo(active, PowerUpType.MAGNET) is None
        assert find_combo(active, PowerUpType.SPEED_BOOST) == PowerUpType.HYPER_SPEED

    def test_crafting_replaces_last_entry(self) -> None:
        active = queue_of(PowerUpType.SPEED_BOOST, PowerUpType.MAGNET)

        combo = collect_into_queue(active, PowerUpType.INVINCIBILITY, 500.0)

        assert combo == PowerUpType.GOLDEN_BELL
        assert [e.type for e in active] == [PowerUpType.SPEED_BOOST, PowerUpType.GOLDEN_BELL]
        assert active[-1].start_time == 500.0
        assert active[-1].remaining_time == get_effect(PowerUpType.GOLDEN_BELL).duration_ms

    def test_recipe_is_unordered(self) -> None:
        assert find_combo(queue_of(PowerUpType.MAGNET), PowerUpType.INVINCIBILITY) == (
            find_combo(queue_of(PowerUpType.INVINCIBILITY), PowerUpType.MAGNET)
        )

    def test_repeat_pickup_banks_duration(self) -> None:
        """A type already queued, but not last, is extended instead of duplicated."""
        active = queue_of(PowerUpType.SPEED_BOOST, PowerUpType.MAGNET)
        active[0].remaining_time = 1000.0

        combo = collect_into_queue(active, PowerUpType.SPEED_BOOST, 0.0)

        assert combo is None
        assert len(active) == 2
        assert active[0].remaining_time == 4000.0
        assert active[0].total_duration == 6000.0

    def test_new_type_is_appended(self) -> None:
        active = queue_of(PowerUpType.MAGNET)
        collect_into_queue(active, PowerUpType.SCORE_MULTIPLIER, 0.0)
        assert [e.type for e in active] == [PowerUpType.MAGNET, PowerUpType.SCORE_MULTIPLIER]

    def test_instant_types_never_enter_queue(self) -> None:
        active = []
        assert collect_into_queue(active, PowerUpType.COIN, 0.0) is None
        assert collect_into_queue(active, PowerUpType.HEART, 0.0) is None
        assert active == []

    def test_stale_copy_of_combo_is_dropped(self) -> None:
        active = queue_of(PowerUpType.HYPER_SPEED, PowerUpType.SPEED_BOOST)

        collect_into_queue(active, PowerUpType.SPEED_BOOST, 100.0)

        assert [e.type for e in active] == [PowerUpType.HYPER_SPEED]
        assert active[0].start_time == 100.0

    def test_decay_removes_expired_entry_once(self) -> None:
        active = queue_of(PowerUpType.SPEED_BOOST, PowerUpType.MAGNET)
        active[0].remaining_time = 10.0

        expired = decay(active, 16.0)

        assert [e.type for e in expired] == [PowerUpType.SPEED_BOOST]
        assert [e.type for e in active] == [PowerUpType.MAGNET]
        assert decay(active, 16.0) == []


class TestEffectAggregation:
    def test_speed_multipliers_stack(self) -> None:
        active = queue_of(PowerUpType.SPEED_BOOST, PowerUpType.HYPER_SPEED)
        assert get_speed_multiplier(active) == pytest.approx(4.5)

    def test_highest_override_wins(self) -> None:
        active = queue_of(PowerUpType.NITRO_BOOST, PowerUpType.ROCKET_FUEL)
        assert get_speed_override(active) == 2.0
        assert get_speed_override(queue_of(PowerUpType.MAGNET)) is None

    def test_time_scale_and_coin_multiplier(self) -> None:
        assert get_obstacle_time_scale([]) == 1.0
        assert get_obstacle_time_scale(queue_of(PowerUpType.TIME_DILATION)) == 0.5
        assert get_coin_multiplier(queue_of(PowerUpType.DOUBLE_COIN)) == 2.0


class TestPowerUpSystem:
    """Pickups applied through a running engine."""

    def test_coin_craft_with_score_multiplier(self, playing_engine) -> None:
        """A 100 coin on top of score_multiplier crafts double_coin and credits 200."""
        state = playing_engine.state
        state.active_power_ups = queue_of(PowerUpType.SCORE_MULTIPLIER)
        state.coins = 0

        combo = playing_engine.power_ups.apply(PowerUpType.COIN, 0.0, 0, coin_value=100)

        assert combo == PowerUpType.DOUBLE_COIN
        assert state.coins == 200
        assert state.active_types() == [PowerUpType.DOUBLE_COIN]
        assert state.slot_machine.cards == [None, None, None]
        assert state.statistics.stat_for(PowerUpType.DOUBLE_COIN).combo_crafted == 1

    def test_plain_coin_is_credited_and_forwarded(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 0

        playing_engine.power_ups.apply(PowerUpType.COIN, 0.0, 0, coin_value=100)

        assert state.coins == 100
        assert state.slot_machine.cards == [100, None, None]
        assert state.statistics.total_coins_collected == 100

    def test_double_coin_doubles_credit(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = queue_of(PowerUpType.DOUBLE_COIN)
        state.coins = 0

        playing_engine.power_ups.apply(PowerUpType.COIN, 0.0, 0, coin_value=100)

        assert state.coins == 200

    def test_coin_credit_is_clamped(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 9950

        playing_engine.power_ups.apply(PowerUpType.COIN, 0.0, 0, coin_value=100)

        assert state.coins == 9999

    def test_double_heart_heals_two(self, playing_engine) -> None:
        state = playing_engine.state
        state.hearts = 1
        state.active_power_ups = queue_of(PowerUpType.SCORE_MULTIPLIER)

        playing_engine.power_ups.apply(PowerUpType.HEART, 0.0, 0)

        assert state.hearts == 3
        assert state.active_types() == [PowerUpType.DOUBLE_HEART]

    def test_heart_never_exceeds_max(self, playing_engine) -> None:
        playing_engine.power_ups.apply(PowerUpType.HEART, 0.0, 0)
        assert playing_engine.state.hearts == MAX_HEARTS

    def test_golden_bell_banks_and_pays_double(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = queue_of(PowerUpType.GOLDEN_BELL)
        state.coins = 0

        playing_engine.power_ups.apply(PowerUpType.COIN, 0.0, 0, coin_value=100)
        assert state.coins == 0
        assert state.golden_bell_coin_value == 100
        assert state.slot_machine.cards == [None, None, None]

        state.active_power_ups[0].remaining_time = 1.0
        playing_engine.tick()

        assert state.coins == 200
        assert state.golden_bell_coin_value == 0
        assert not state.has_active(PowerUpType.GOLDEN_BELL)

    def test_breached_golden_bell_pays_nothing(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = queue_of(PowerUpType.GOLDEN_BELL)
        state.golden_bell_coin_value = 300
        state.golden_bell_breached = True
        state.active_power_ups[0].remaining_time = 1.0
        state.coins = 0

        playing_engine.tick()

        assert state.coins == 0
        assert state.golden_bell_breached is False

    def test_weapon_expiry_starts_recovery(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = queue_of(PowerUpType.MACHINE_GUN)
        state.active_power_ups[0].remaining_time = 1.0

        playing_engine.tick()

        assert state.is_recovering
        assert state.recovery_end_time > playing_engine.now_ms

    def test_machine_gun_fires_bullets(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = queue_of(PowerUpType.QUAD_MACHINE_GUN)

        playing_engine.tick()

        assert len(state.bullets) == 4
        assert all(b.y < state.vehicle.y for b in state.bullets)


class TestPurchases:
    """Shop purchases return Ok/Err results."""

    def test_refused_without_funds(self, playing_engine) -> None:
        playing_engine.state.coins = 100

        result = playing_engine.purchase_power_up(PowerUpType.MACHINE_GUN)

        assert result.is_err()
        assert playing_engine.state.coins == 100

    def test_purchase_deducts_and_activates(self, playing_engine) -> None:
        playing_engine.state.coins = 1000

        result = playing_engine.purchase_power_up(PowerUpType.MACHINE_GUN)

        assert result.is_ok()
        assert result.unwrap() == 200
        assert playing_engine.state.has_active(PowerUpType.MACHINE_GUN)
        assert playing_engine.save_data.coins == 200

    def test_purchase_can_craft(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 2000
        state.active_power_ups = queue_of(PowerUpType.NITRO_BOOST)

        assert playing_engine.purchase_power_up(PowerUpType.ROCKET_FUEL).is_ok()
        assert state.active_types() == [PowerUpType.TURBO_OVERLOAD]

    def test_invincibility_refused_during_shield_combo(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 1000
        state.active_power_ups = queue_of(PowerUpType.IRON_BODY)

        assert playing_engine.purchase_power_up(PowerUpType.INVINCIBILITY).is_err()
        assert state.coins == 1000

    def test_full_recovery_needs_full_balance_and_missing_hearts(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 9999
        assert playing_engine.purchase_power_up(PowerUpType.FULL_RECOVERY).is_err()

        state.hearts = 1
        result = playing_engine.purchase_power_up(PowerUpType.FULL_RECOVERY)

        assert result.is_ok()
        assert state.hearts == MAX_HEARTS
        assert state.coins == 0

    def test_basic_items_are_not_sold(self, playing_engine) -> None:
        playing_engine.state.coins = 9999
        assert playing_engine.purchase_power_up(PowerUpType.MAGNET).is_err()

    def test_refused_when_idle(self, engine) -> None:
        engine.state.coins = 5000
        assert engine.purchase_power_up(PowerUpType.MACHINE_GUN).is_err()
