"""Shared fixtures for simulation tests."""

from __future__ import annotations

import pytest

from battle_core.sim.core.entities import BattleUnit
from battle_core.sim.core.rng import create_rng
from battle_core.sim.core.rng_streams import RngStreams
from battle_core.sim.flow.state_machine import GameStateMachine


@pytest.fixture
def fsm() -> GameStateMachine:
    """A fresh state machine sitting in the menu."""
    return GameStateMachine()


@pytest.fixture
def streams() -> RngStreams:
    """Default stream registry from root seed 42."""
    return RngStreams(create_rng(42))


@pytest.fixture
def unit() -> BattleUnit:
    """An unbuffed unit with distinct base stats."""
    return BattleUnit(
        id="isaac", name="Isaac", max_hp=100, current_hp=100,
        attack=12, defense=8, speed=10,
    )
