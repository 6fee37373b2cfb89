"""Slot machine with a pity mechanic.

Coins picked up on the road fill three card slots. A full machine spins;
the win probability grows by ``PITY_STEP`` with every consecutive loss,
so the tenth loss in a row guarantees the next win. Settlement is
deferred on the simulation clock to leave room for the spin animation.
"""

import logging
import math
import random
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from racecore.config.slot_machine import (
    CARD_COUNT,
    PENALTY_SYMBOL,
    PITY_STEP,
    SLOT_MULTIPLIERS,
    SLOT_SYMBOLS,
    SLOT_WIN_WEIGHTS,
    THANKS_REWARD,
    THANKS_SYMBOL,
    SlotSymbol,
)
from racecore.events import SlotSettledEvent
from racecore.simulation.state import SlotMachineState, add_coins
from racecore.systems.base import BaseSystem, SystemResult
from racecore.update_phases import TickContext, UpdatePhase, runs_in_phase

if TYPE_CHECKING:
    from racecore.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)

SETTLE_TASK_KEY = "slot_machine.settle"


def add_coin_to_slot_machine(slot: SlotMachineState, coin_value: int) -> bool:
    """Fill the first empty card. Returns False if the machine cannot take coins."""
    if slot.is_spinning or slot.is_active:
        return False
    for index, card in enumerate(slot.cards):
        if card is None:
            slot.cards[index] = coin_value
            slot.pool_amount += coin_value
            if all(c is not None for c in slot.cards):
                slot.is_active = True
            return True
    return False


def spin_probability(failure_streak: int) -> float:
    return min(max(failure_streak, 0) * PITY_STEP, 1.0)


def resolve_spin(failure_streak: int, rng: random.Random) -> Tuple[List[SlotSymbol], bool]:
    """Draw the symbols of one spin.

    A win shows one weighted symbol three times. A loss shows three
    distinct symbols, so it can never look like a match.

    Returns:
        (symbols, won)
    """
    if rng.random() < spin_probability(failure_streak):
        symbols = [symbol for symbol, _ in SLOT_WIN_WEIGHTS]
        weights = [weight for _, weight in SLOT_WIN_WEIGHTS]
        shared = rng.choices(symbols, weights=weights, k=1)[0]
        return [shared] * CARD_COUNT, True
    return rng.sample(SLOT_SYMBOLS, CARD_COUNT), False


def calculate_payout(results: Sequence[SlotSymbol], pool_amount: int) -> int:
    """Coins gained (or lost, if negative) for a spin result."""
    if len(results) != CARD_COUNT or len(set(results)) != 1:
        return 0
    symbol = results[0]
    if symbol == THANKS_SYMBOL:
        return THANKS_REWARD
    if symbol == PENALTY_SYMBOL:
        return -(pool_amount // 2)
    multiplier = SLOT_MULTIPLIERS.get(symbol)
    if multiplier is None:
        return 0
    return int(math.floor(pool_amount / 2 * (multiplier - 1)))


def reset_cards(slot: SlotMachineState) -> None:
    slot.cards = [None] * CARD_COUNT
    slot.pool_amount = 0
    slot.is_active = False
    slot.is_spinning = False


@runs_in_phase(UpdatePhase.FRAME_END)
class SlotMachineSystem(BaseSystem):
    """Auto-spins a full machine and settles spins after the delay."""

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "SlotMachine")
        self._spins = 0
        self._wins = 0

    def add_coin(self, coin_value: int) -> bool:
        return add_coin_to_slot_machine(self.engine.state.slot_machine, coin_value)

    def trigger(self, now_ms: float) -> bool:
        """Start a spin if the machine is ready.

        Returns:
            True if a spin started
        """
        slot = self.engine.state.slot_machine
        if not slot.is_active or slot.is_spinning:
            return False

        results, won = resolve_spin(slot.failure_streak, self.engine.rng)
        slot.results = results
        slot.is_spinning = True
        self._spins += 1

        delay = self.engine.config.slot_settle_delay_ms
        self.engine.scheduler.schedule(
            SETTLE_TASK_KEY, now_ms + delay, lambda: self._settle(won)
        )
        logger.debug(f"Slot machine spinning: {results} (streak {slot.failure_streak})")
        return True

    def _settle(self, won: bool) -> None:
        state = self.engine.state
        slot = state.slot_machine
        payout = calculate_payout(slot.results, slot.pool_amount)
        applied = add_coins(state, payout)
        if applied > 0:
            state.statistics.total_coins_collected += applied

        slot.failure_streak = 0 if won else slot.failure_streak + 1
        if won:
            self._wins += 1
        reset_cards(slot)
        self.engine.save_data.set_failure_streak(slot.failure_streak)

        logger.info(
            f"Slot machine settled: {slot.results} payout={payout} "
            f"streak={slot.failure_streak}"
        )
        self.engine.events.emit(
            SlotSettledEvent(
                results=tuple(slot.results),
                won=won,
                payout=payout,
                failure_streak=slot.failure_streak,
                frame=self.engine.frame_count,
            )
        )

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        if not self.engine.config.auto_spin_slot_machine:
            return None
        spun = self.trigger(ctx.now_ms)
        return SystemResult(details={"spun": spun})

    def get_debug_info(self):
        info = super().get_debug_info()
        info["spins"] = self._spins
        info["wins"] = self._wins
        return info
