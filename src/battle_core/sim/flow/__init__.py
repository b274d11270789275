"""Macro game flow (menu -> battle -> rewards loop)."""

from battle_core.sim.flow.state_machine import (
    INITIAL_STATE,
    STATE_TRANSITIONS,
    GameFlowState,
    GameStateMachine,
    InvalidTransition,
    MalformedSnapshot,
    StateMachineSnapshot,
)

__all__ = [
    "INITIAL_STATE",
    "STATE_TRANSITIONS",
    "GameFlowState",
    "GameStateMachine",
    "InvalidTransition",
    "MalformedSnapshot",
    "StateMachineSnapshot",
]
