"""Buff ledger -- apply, decay, query and cleanse timed stat modifiers.

Every function here is pure: the input unit is left untouched and a new
unit is returned.  Buffs stack additively (two +5 attack buffs give +10)
and no cap is applied; caps belong to the ability policy that calls in.

Decay must run once per turn boundary on every unit still in play, or
buff lifetimes drift from what players are shown.
"""

from __future__ import annotations

from typing import Sequence

from battle_core.sim.core.entities import (
    Ability,
    AbilityEffectType,
    ActiveBuff,
    BattleUnit,
    BuffStat,
    BuffState,
)
from battle_core.sim.core.ids import make_id


def _with_buffs(unit: BattleUnit, buffs: tuple[ActiveBuff, ...]) -> BattleUnit:
    return unit.model_copy(update={"buff_state": BuffState(buffs=buffs)})


def apply_buff(unit: BattleUnit, ability: Ability, duration: int | None = None) -> BattleUnit:
    """Attach the buff described by *ability* to *unit*.

    Abilities whose effect is not buff-shaped (wrong type, missing stat, or
    zero amount) leave the unit unchanged, so any ability can be routed
    through here.

    Parameters
    ----------
    unit:
        The unit receiving the buff.
    ability:
        The resolving ability; its id and name are recorded as provenance.
    duration:
        Turns the buff lasts.  Defaults to the effect's ``buff_duration``.
    """
    effect = ability.effect
    if effect.type != AbilityEffectType.BUFF or not effect.buff_stat or not effect.buff_amount:
        return unit

    if duration is None:
        duration = effect.buff_duration
    if duration is None:
        raise ValueError(f"No duration given for buff from ability {ability.id!r}")

    new_buff = ActiveBuff(
        id=make_id("buff"),
        stat=effect.buff_stat,
        amount=effect.buff_amount,
        duration=duration,
        source=ability.id,
        source_name=ability.name,
    )
    return _with_buffs(unit, unit.buff_state.buffs + (new_buff,))


def decay_buffs(unit: BattleUnit) -> BattleUnit:
    """Tick every buff down by one turn and drop those that hit 0."""
    remaining = tuple(
        decayed
        for decayed in (
            buff.model_copy(update={"duration": buff.duration - 1})
            for buff in unit.buff_state.buffs
        )
        if decayed.duration > 0
    )
    return _with_buffs(unit, remaining)


def decay_all_buffs(units: Sequence[BattleUnit]) -> tuple[BattleUnit, ...]:
    """Decay each unit independently."""
    return tuple(decay_buffs(unit) for unit in units)


def get_buff_modifier(unit: BattleUnit, stat: BuffStat | str) -> int:
    """Sum of all buff amounts on *stat* (negative for net debuffs)."""
    return sum(buff.amount for buff in unit.buff_state.buffs if buff.stat == stat)


def get_effective_stat(unit: BattleUnit, stat: BuffStat | str) -> int:
    """Base stat plus buff modifier -- the value combat math should read."""
    return unit.base_stat(stat) + get_buff_modifier(unit, stat)


def get_active_buffs(unit: BattleUnit) -> tuple[ActiveBuff, ...]:
    return unit.buff_state.buffs


def has_active_buffs(unit: BattleUnit) -> bool:
    return len(unit.buff_state.buffs) > 0


def remove_all_buffs(unit: BattleUnit) -> BattleUnit:
    """Cleanse: drop every buff and debuff."""
    return _with_buffs(unit, ())


def get_buff_summary(unit: BattleUnit) -> dict[str, int]:
    """Net modifier per tracked stat, for display."""
    return {stat.value: get_buff_modifier(unit, stat) for stat in BuffStat}
