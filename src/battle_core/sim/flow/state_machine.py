"""Game flow state machine -- enforces legal macro-state transitions.

Run flow::

    menu -> starter_select -> opponent_select -> team_prep -> battle
         -> rewards -> [equipment] -> recruit -> [roster_management]
         -> opponent_select (loop)

Defeat flow (permadeath)::

    battle -> defeat -> menu

There is no terminal state.  Illegal transitions and corrupt snapshots are
reported through :class:`~battle_core.sim.core.result.Err` values rather
than exceptions, and leave the machine exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ValidationError, model_validator

from battle_core.sim.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class GameFlowState(str, Enum):
    MENU = "menu"
    STARTER_SELECT = "starter_select"
    OPPONENT_SELECT = "opponent_select"
    TEAM_PREP = "team_prep"
    BATTLE = "battle"
    REWARDS = "rewards"
    EQUIPMENT = "equipment"
    RECRUIT = "recruit"
    ROSTER_MANAGEMENT = "roster_management"
    DEFEAT = "defeat"


INITIAL_STATE = GameFlowState.MENU

STATE_TRANSITIONS: dict[GameFlowState, frozenset[GameFlowState]] = {
    GameFlowState.MENU: frozenset({GameFlowState.STARTER_SELECT}),
    GameFlowState.STARTER_SELECT: frozenset({GameFlowState.OPPONENT_SELECT}),
    GameFlowState.OPPONENT_SELECT: frozenset({GameFlowState.TEAM_PREP}),
    GameFlowState.TEAM_PREP: frozenset({GameFlowState.BATTLE}),
    # Win, lose, or draw (a draw restarts immediately).
    GameFlowState.BATTLE: frozenset(
        {GameFlowState.REWARDS, GameFlowState.DEFEAT, GameFlowState.MENU}
    ),
    GameFlowState.REWARDS: frozenset({GameFlowState.RECRUIT, GameFlowState.EQUIPMENT}),
    GameFlowState.EQUIPMENT: frozenset({GameFlowState.RECRUIT}),
    GameFlowState.RECRUIT: frozenset(
        {GameFlowState.OPPONENT_SELECT, GameFlowState.ROSTER_MANAGEMENT}
    ),
    GameFlowState.ROSTER_MANAGEMENT: frozenset({GameFlowState.OPPONENT_SELECT}),
    GameFlowState.DEFEAT: frozenset({GameFlowState.MENU}),
}


@dataclass(frozen=True)
class InvalidTransition:
    source: GameFlowState
    target: str

    def __str__(self) -> str:
        return f"Invalid transition: {self.source.value} -> {self.target}"


@dataclass(frozen=True)
class MalformedSnapshot:
    reason: str

    def __str__(self) -> str:
        return f"Failed to deserialize state machine: {self.reason}"


class StateMachineSnapshot(BaseModel):
    """Persisted form: the current state plus ordered history."""

    current: GameFlowState
    history: list[GameFlowState] = []

    @model_validator(mode="after")
    def _history_is_legal_path(self) -> StateMachineSnapshot:
        path = [*self.history, self.current]
        for source, target in zip(path, path[1:]):
            if target not in STATE_TRANSITIONS[source]:
                raise ValueError(
                    f"Illegal step in history: {source.value} -> {target.value}"
                )
        return self


class GameStateMachine:
    """Tracks the current macro-state and the path taken to reach it."""

    def __init__(self) -> None:
        self._current = INITIAL_STATE
        self._history: tuple[GameFlowState, ...] = ()

    @property
    def state(self) -> GameFlowState:
        return self._current

    @property
    def history(self) -> tuple[GameFlowState, ...]:
        """States left so far, oldest first."""
        return self._history

    def get_state(self) -> GameFlowState:
        return self._current

    def get_history(self) -> tuple[GameFlowState, ...]:
        return self._history

    def can_transition_to(self, next_state: GameFlowState | str) -> bool:
        try:
            target = GameFlowState(next_state)
        except ValueError:
            return False
        return target in STATE_TRANSITIONS[self._current]

    def transition_to(self, next_state: GameFlowState | str) -> Result[None, InvalidTransition]:
        """Move to *next_state* if the transition table allows it."""
        if not self.can_transition_to(next_state):
            error = InvalidTransition(source=self._current, target=_state_name(next_state))
            logger.warning("%s", error)
            return Err(error)

        target = GameFlowState(next_state)
        self._history = self._history + (self._current,)
        logger.debug("Transition %s -> %s", self._current.value, target.value)
        self._current = target
        return Ok(None)

    def reset(self) -> None:
        """Return to the menu and discard the run's history (permadeath)."""
        logger.debug("Reset from %s, dropping %d history entries", self._current.value, len(self._history))
        self._current = INITIAL_STATE
        self._history = ()

    def get_previous_state(self) -> GameFlowState | None:
        return self._history[-1] if self._history else None

    # -- persistence ---------------------------------------------------------

    def to_snapshot(self) -> StateMachineSnapshot:
        return StateMachineSnapshot(current=self._current, history=list(self._history))

    def serialize(self) -> str:
        return self.to_snapshot().model_dump_json()

    def deserialize(self, data: str | bytes) -> Result[None, MalformedSnapshot]:
        """Restore from :meth:`serialize` output.

        Nothing is committed unless the whole snapshot parses, every state
        in it is known, and each recorded step is a legal transition.
        """
        try:
            snapshot = StateMachineSnapshot.model_validate_json(data)
        except ValidationError as exc:
            error = MalformedSnapshot(reason=_describe_validation_error(exc))
            logger.warning("%s", error)
            return Err(error)

        self._current = snapshot.current
        self._history = tuple(snapshot.history)
        return Ok(None)


def _state_name(state: GameFlowState | str) -> str:
    return state.value if isinstance(state, GameFlowState) else str(state)


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    if first["type"] == "enum":
        return f"Invalid state in save data: {first['input']!r}"
    location = ".".join(str(part) for part in first["loc"]) or "snapshot"
    return f"{location}: {first['msg']}"
