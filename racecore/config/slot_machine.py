"""Slot machine configuration.

The failure streak drives the pity mechanic: every losing spin adds
``PITY_STEP`` to the win probability of the next one.
"""

from typing import Dict, List, Tuple, Union

SlotSymbol = Union[str, int]

THANKS_SYMBOL = "thanks"
PENALTY_SYMBOL = "penalty"

SLOT_SYMBOLS: List[SlotSymbol] = [PENALTY_SYMBOL, THANKS_SYMBOL, 100, 200, 500]

# Numeric tier -> multiplier applied to half the pool
SLOT_MULTIPLIERS: Dict[int, int] = {100: 2, 200: 3, 500: 5}

# Weighted distribution of the shared symbol on a winning spin
SLOT_WIN_WEIGHTS: List[Tuple[SlotSymbol, int]] = [
    (THANKS_SYMBOL, 30),
    (100, 35),
    (200, 20),
    (500, 5),
    (PENALTY_SYMBOL, 10),
]

THANKS_REWARD = 50
PITY_STEP = 0.1
CARD_COUNT = 3
SPIN_SETTLE_DELAY_MS = 2500.0
