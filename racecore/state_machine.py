"""State machine abstractions for explicit state management.

The game session and the boss battle both move through a small, fixed set
of states. Encoding the valid transitions once means an illegal jump (for
example ``GAME_OVER -> PAUSED``) is caught where it happens instead of
surfacing later as inconsistent state.

Usage:
------
    status = create_game_status_machine()
    status.transition(GameStatus.PLAYING)   # OK
    status.transition(GameStatus.IDLE)      # Raises InvalidTransitionError
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, List, TypeVar

from racecore.exceptions import InvalidTransitionError
from racecore.result import Err, Ok, Result

S = TypeVar("S", bound=Enum)


@dataclass
class StateTransition(Generic[S]):
    """Record of a state transition for debugging.

    Attributes:
        from_state: The state before transition
        to_state: The state after transition
        frame: The simulation frame when transition occurred
        reason: Optional description of why transition happened
    """

    from_state: S
    to_state: S
    frame: int
    reason: str = ""


class StateMachine(Generic[S]):
    """A generic state machine with explicit transition validation."""

    def __init__(
        self,
        initial_state: S,
        valid_transitions: Dict[S, List[S]],
        track_history: bool = False,
        max_history: int = 100,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: The starting state
            valid_transitions: Map of state -> list of valid target states
            track_history: Whether to record transition history
            max_history: Maximum number of transitions to keep in history
        """
        self._state = initial_state
        self._transitions = valid_transitions
        self._track_history = track_history
        self._max_history = max_history
        self._history: List[StateTransition[S]] = []

        if initial_state not in valid_transitions:
            raise ValueError(
                f"Initial state {initial_state} not in valid_transitions. "
                f"Valid states: {list(valid_transitions.keys())}"
            )

    @property
    def state(self) -> S:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> List[StateTransition[S]]:
        """Get transition history (empty if tracking disabled)."""
        return self._history.copy()

    def can_transition(self, target: S) -> bool:
        """Check if transition to target state is valid."""
        return target in self._transitions.get(self._state, [])

    def try_transition(self, target: S, frame: int = 0, reason: str = "") -> Result[S, str]:
        """Attempt to transition to a new state.

        Returns:
            Ok(new_state) if successful, Err(message) if the transition is invalid
        """
        if not self.can_transition(target):
            valid_targets = self._transitions.get(self._state, [])
            return Err(
                f"Invalid transition: {self._state.name} -> {target.name}. "
                f"Valid targets from {self._state.name}: {[t.name for t in valid_targets]}"
            )

        old_state = self._state
        self._state = target

        if self._track_history:
            self._record_transition(old_state, target, frame, reason)

        return Ok(target)

    def transition(self, target: S, frame: int = 0, reason: str = "") -> S:
        """Transition to a new state, raising on invalid transition.

        Raises:
            InvalidTransitionError: If the transition is invalid
        """
        result = self.try_transition(target, frame, reason)
        if result.is_err():
            raise InvalidTransitionError(result.error)
        return result.unwrap()

    def force_state(self, state: S, frame: int = 0, reason: str = "forced") -> None:
        """Force a state change without validation (used by reset)."""
        old_state = self._state
        self._state = state

        if self._track_history:
            self._record_transition(old_state, state, frame, f"[FORCED] {reason}")

    def _record_transition(self, from_state: S, to_state: S, frame: int, reason: str) -> None:
        self._history.append(
            StateTransition(from_state=from_state, to_state=to_state, frame=frame, reason=reason)
        )
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history :]

    def __repr__(self) -> str:
        return f"StateMachine(state={self._state.name})"


# ============================================================================
# Game Session State Machine
# ============================================================================


class GameStatus(str, Enum):
    """Session status; only PLAYING executes ticks."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


GAME_STATUS_TRANSITIONS: Dict[GameStatus, List[GameStatus]] = {
    GameStatus.IDLE: [GameStatus.PLAYING],
    GameStatus.PLAYING: [GameStatus.PAUSED, GameStatus.GAME_OVER],
    GameStatus.PAUSED: [GameStatus.PLAYING],
    GameStatus.GAME_OVER: [],  # Terminal until reset
}


def create_game_status_machine(track_history: bool = False) -> StateMachine[GameStatus]:
    """Create a state machine for the session lifecycle."""
    return StateMachine(
        initial_state=GameStatus.IDLE,
        valid_transitions=GAME_STATUS_TRANSITIONS,
        track_history=track_history,
    )


# ============================================================================
# Boss Battle State Machine
# ============================================================================


class BossBattleStatus(str, Enum):
    """Coarse boss battle lifecycle; the numeric phase lives on the boss."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    RESOLVED = "resolved"


BOSS_BATTLE_TRANSITIONS: Dict[BossBattleStatus, List[BossBattleStatus]] = {
    BossBattleStatus.INACTIVE: [BossBattleStatus.ACTIVE],
    BossBattleStatus.ACTIVE: [BossBattleStatus.RESOLVED],
    BossBattleStatus.RESOLVED: [BossBattleStatus.INACTIVE],
}


def create_boss_battle_machine(track_history: bool = True) -> StateMachine[BossBattleStatus]:
    """Create a state machine for boss battle flow."""
    return StateMachine(
        initial_state=BossBattleStatus.INACTIVE,
        valid_transitions=BOSS_BATTLE_TRANSITIONS,
        track_history=track_history,
    )
