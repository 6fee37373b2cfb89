"""Lane Rush exception hierarchy.

Centralised base classes so callers can catch domain failures narrowly.
Gameplay conditions (game over, insufficient coins) are states or
``Result`` values, not exceptions.
"""


class RaceError(Exception):
    """Root of all Lane Rush domain exceptions."""


class SimulationError(RaceError):
    """Errors during simulation execution (engine, systems, entities)."""


class InvalidTransitionError(SimulationError, ValueError):
    """A state machine was asked to make a transition it does not allow."""


class PersistenceError(RaceError):
    """Errors while reading or writing durable save data or records."""


class ConfigurationError(RaceError):
    """Invalid or missing configuration."""
