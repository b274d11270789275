"""Demo script: show that a seed plus a decision log replays identically.

Usage:
    uv run python scripts/demo_replay.py [--seed 42] [--turns 4]
"""

from __future__ import annotations

import argparse
import json

from battle_core.config import configure_logging, load_config
from battle_core.sim.core.entities import (
    Ability,
    AbilityEffect,
    AbilityEffectType,
    BattleUnit,
    BuffStat,
)
from battle_core.sim.flow.state_machine import GameFlowState, GameStateMachine
from battle_core.sim.mechanics.buffs import apply_buff, decay_all_buffs, get_buff_summary

RUN_PATH = [
    GameFlowState.STARTER_SELECT,
    GameFlowState.OPPONENT_SELECT,
    GameFlowState.TEAM_PREP,
    GameFlowState.BATTLE,
]

WAR_CRY = Ability(
    id="war_cry",
    name="War Cry",
    effect=AbilityEffect(
        type=AbilityEffectType.BUFF,
        buff_stat=BuffStat.ATTACK,
        buff_amount=5,
        buff_duration=2,
    ),
)


def simulate(seed: int, turns: int) -> list[int]:
    """Walk to battle, then roll damage each turn with the battle stream."""
    config = load_config().model_copy(update={"root_seed": seed})
    streams = config.build_streams()
    battle_rng = streams.get("battle")

    machine = GameStateMachine()
    for state in RUN_PATH:
        result = machine.transition_to(state)
        if not result.ok:
            raise SystemExit(str(result.error))

    team = (
        BattleUnit(id="isaac", name="Isaac", max_hp=100, current_hp=100, attack=12, defense=8, speed=10),
        BattleUnit(id="garet", name="Garet", max_hp=120, current_hp=120, attack=15, defense=10, speed=7),
    )
    team = (apply_buff(team[0], WAR_CRY), team[1])

    rolls: list[int] = []
    for turn in range(1, turns + 1):
        for unit in team:
            bonus = get_buff_summary(unit)["attack"]
            rolls.append(battle_rng.random_int(unit.attack, unit.attack + 5) + bonus)
        team = decay_all_buffs(team)
        print(f"turn {turn}: rolls so far {rolls}")

    print("streams:", json.dumps(streams.describe_streams(), indent=2))
    print("flow snapshot:", machine.serialize())
    return rolls


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a seeded battle twice")
    parser.add_argument("--seed", type=int, default=42, help="Root seed")
    parser.add_argument("--turns", type=int, default=4, help="Turns to simulate")
    args = parser.parse_args()

    configure_logging(load_config())

    first = simulate(args.seed, args.turns)
    second = simulate(args.seed, args.turns)
    print()
    print("identical replay:", first == second)


if __name__ == "__main__":
    main()
