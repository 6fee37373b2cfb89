"""Coin economy constants."""

COIN_VALUE = 100  # Value of a single coin pickup
MAX_COINS = 9999  # Ceiling for the coin balance


def clamp_coins(value: float) -> int:
    """Clamp a coin balance to [0, MAX_COINS].

    Every write to a coin balance goes through here.
    """
    return int(max(0, min(MAX_COINS, value)))
