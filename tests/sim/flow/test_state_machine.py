"""Tests for GameStateMachine -- transitions, history, reset, persistence."""

import json

import pytest

from battle_core.sim.core.result import Err, Ok
from battle_core.sim.flow.state_machine import (
    STATE_TRANSITIONS,
    GameFlowState,
    GameStateMachine,
    InvalidTransition,
    MalformedSnapshot,
)

S = GameFlowState


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _walk(machine: GameStateMachine, *states) -> None:
    for state in states:
        assert machine.transition_to(state).ok, f"could not enter {state}"


def _machine_in_battle() -> GameStateMachine:
    machine = GameStateMachine()
    _walk(machine, S.STARTER_SELECT, S.OPPONENT_SELECT, S.TEAM_PREP, S.BATTLE)
    return machine


# ---------------------------------------------------------------------------
# Initialization / table
# ---------------------------------------------------------------------------

class TestInitialization:
    def test_starts_in_menu(self, fsm):
        assert fsm.get_state() is S.MENU
        assert fsm.state == "menu"

    def test_history_empty(self, fsm):
        assert fsm.get_history() == ()
        assert fsm.get_previous_state() is None

    def test_every_state_has_an_exit(self):
        assert set(STATE_TRANSITIONS) == set(GameFlowState)
        assert all(STATE_TRANSITIONS[state] for state in GameFlowState)


# ---------------------------------------------------------------------------
# Valid transitions
# ---------------------------------------------------------------------------

class TestValidTransitions:
    def test_menu_to_starter_select(self, fsm):
        result = fsm.transition_to(S.STARTER_SELECT)
        assert result == Ok(None)
        assert fsm.get_state() is S.STARTER_SELECT

    def test_accepts_string_names(self, fsm):
        assert fsm.transition_to("starter_select").ok
        assert fsm.get_state() is S.STARTER_SELECT

    def test_run_loop(self, fsm):
        _walk(
            fsm,
            S.STARTER_SELECT, S.OPPONENT_SELECT, S.TEAM_PREP, S.BATTLE,
            S.REWARDS, S.RECRUIT, S.OPPONENT_SELECT,
        )
        assert fsm.get_state() is S.OPPONENT_SELECT

    def test_optional_screens(self):
        machine = _machine_in_battle()
        _walk(machine, S.REWARDS, S.EQUIPMENT, S.RECRUIT, S.ROSTER_MANAGEMENT, S.OPPONENT_SELECT)
        assert machine.get_state() is S.OPPONENT_SELECT

    def test_defeat_returns_to_menu(self):
        machine = _machine_in_battle()
        _walk(machine, S.DEFEAT, S.MENU)
        assert machine.get_state() is S.MENU

    def test_draw_returns_to_menu(self):
        machine = _machine_in_battle()
        assert machine.transition_to(S.MENU).ok


# ---------------------------------------------------------------------------
# Invalid transitions
# ---------------------------------------------------------------------------

class TestInvalidTransitions:
    def test_menu_to_battle_rejected(self, fsm):
        result = fsm.transition_to(S.BATTLE)

        assert isinstance(result, Err)
        assert result.error == InvalidTransition(source=S.MENU, target="battle")
        assert str(result.error) == "Invalid transition: menu -> battle"
        assert fsm.get_state() is S.MENU
        assert fsm.get_history() == ()

    def test_rejection_keeps_history(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT)
        before = fsm.get_history()

        assert not fsm.transition_to(S.BATTLE).ok
        assert fsm.get_state() is S.OPPONENT_SELECT
        assert fsm.get_history() == before

    def test_rewards_cannot_skip_recruit(self):
        machine = _machine_in_battle()
        _walk(machine, S.REWARDS)
        assert not machine.transition_to(S.OPPONENT_SELECT).ok
        assert machine.get_state() is S.REWARDS

    def test_defeat_must_go_through_menu(self):
        machine = _machine_in_battle()
        _walk(machine, S.DEFEAT)
        assert not machine.transition_to(S.OPPONENT_SELECT).ok
        assert machine.get_state() is S.DEFEAT

    def test_self_transition_rejected(self, fsm):
        assert not fsm.transition_to(S.MENU).ok

    def test_unknown_state_name(self, fsm):
        result = fsm.transition_to("shop")
        assert not result.ok
        assert "menu -> shop" in str(result.error)
        assert fsm.get_state() is S.MENU

    def test_rejection_logged(self, fsm, caplog):
        with caplog.at_level("WARNING", logger="battle_core.sim.flow.state_machine"):
            fsm.transition_to(S.BATTLE)
        assert "Invalid transition: menu -> battle" in caplog.text


# ---------------------------------------------------------------------------
# can_transition_to
# ---------------------------------------------------------------------------

class TestCanTransitionTo:
    def test_valid(self, fsm):
        assert fsm.can_transition_to(S.STARTER_SELECT) is True

    def test_invalid(self, fsm):
        assert fsm.can_transition_to(S.BATTLE) is False
        assert fsm.can_transition_to("nowhere") is False

    def test_follows_current_state(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT, S.TEAM_PREP)
        assert fsm.can_transition_to("battle") is True

    @pytest.mark.parametrize("source", list(GameFlowState))
    def test_matches_table(self, source):
        machine = GameStateMachine()
        machine._current = source
        for target in GameFlowState:
            assert machine.can_transition_to(target) == (target in STATE_TRANSITIONS[source])


# ---------------------------------------------------------------------------
# History / reset
# ---------------------------------------------------------------------------

class TestHistory:
    def test_appends_in_order(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT)
        assert fsm.get_history() == (S.MENU, S.STARTER_SELECT)
        assert fsm.get_state() is S.OPPONENT_SELECT

    def test_previous_state(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT)
        assert fsm.get_previous_state() is S.STARTER_SELECT

    def test_history_is_immutable_view(self, fsm):
        _walk(fsm, S.STARTER_SELECT)
        history = fsm.history
        _walk(fsm, S.OPPONENT_SELECT)
        assert history == (S.MENU,)

    def test_history_continues_after_defeat(self):
        machine = _machine_in_battle()
        _walk(machine, S.DEFEAT, S.MENU)
        assert machine.get_history()[-2:] == (S.BATTLE, S.DEFEAT)


class TestReset:
    def test_reset_clears_history(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT)
        fsm.reset()

        assert fsm.get_state() is S.MENU
        assert fsm.get_history() == ()
        assert fsm.get_previous_state() is None

    def test_reset_from_battle(self):
        machine = _machine_in_battle()
        machine.reset()
        assert machine.can_transition_to(S.STARTER_SELECT)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestSerialization:
    def test_serialize_format(self, fsm):
        _walk(fsm, S.STARTER_SELECT)
        assert json.loads(fsm.serialize()) == {"current": "starter_select", "history": ["menu"]}

    def test_round_trip(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT, S.TEAM_PREP)

        restored = GameStateMachine()
        result = restored.deserialize(fsm.serialize())

        assert result.ok
        assert restored.get_state() is S.TEAM_PREP
        assert restored.get_history() == (S.MENU, S.STARTER_SELECT, S.OPPONENT_SELECT)

    def test_round_trip_bytes(self, fsm):
        _walk(fsm, S.STARTER_SELECT)
        restored = GameStateMachine()
        assert restored.deserialize(fsm.serialize().encode("utf-8")).ok
        assert restored.get_state() is S.STARTER_SELECT

    def test_restored_machine_keeps_running(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT, S.TEAM_PREP)
        restored = GameStateMachine()
        restored.deserialize(fsm.serialize())
        assert restored.transition_to(S.BATTLE).ok

    def test_unknown_current_rejected(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT)

        result = fsm.deserialize(json.dumps({"current": "invalid_state", "history": []}))

        assert isinstance(result, Err)
        assert isinstance(result.error, MalformedSnapshot)
        assert "Invalid state" in str(result.error)
        assert fsm.get_state() is S.OPPONENT_SELECT
        assert fsm.get_history() == (S.MENU, S.STARTER_SELECT)

    @pytest.mark.parametrize(
        "snapshot",
        [
            {"current": "battle", "history": ["menu"]},
            {"current": "opponent_select", "history": ["menu", "team_prep"]},
            {"current": "menu", "history": ["rewards", "defeat"]},
        ],
    )
    def test_illegal_history_path_rejected(self, snapshot):
        machine = _machine_in_battle()
        before = (machine.get_state(), machine.get_history())

        result = machine.deserialize(json.dumps(snapshot))

        assert isinstance(result, Err)
        assert "Illegal step in history" in str(result.error)
        assert (machine.get_state(), machine.get_history()) == before

    def test_legal_path_after_defeat_accepted(self, fsm):
        snapshot = {
            "current": "starter_select",
            "history": ["menu", "starter_select", "opponent_select", "team_prep",
                        "battle", "defeat", "menu"],
        }
        assert fsm.deserialize(json.dumps(snapshot)).ok
        assert fsm.get_previous_state() is S.MENU

    def test_unknown_history_state_rejected(self, fsm):
        result = fsm.deserialize(json.dumps({"current": "menu", "history": ["menu", "shop"]}))
        assert not result.ok

    @pytest.mark.parametrize(
        "payload",
        ["not valid json", "", "[]", "null", '{"history": []}', '{"current": 3}'],
    )
    def test_malformed_rejected(self, fsm, payload):
        assert not fsm.deserialize(payload).ok

    def test_failure_leaves_state_untouched(self, fsm):
        _walk(fsm, S.STARTER_SELECT, S.OPPONENT_SELECT)
        before = (fsm.get_state(), fsm.get_history())

        fsm.deserialize(json.dumps({"current": "battle", "history": ["menu", "bogus"]}))
        fsm.deserialize("{broken")

        assert (fsm.get_state(), fsm.get_history()) == before
