"""Value models for abilities, buffs and battle units.

All models are frozen Pydantic v2 BaseModels: every change produces a new
instance via ``model_copy``, never an in-place update.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BuffStat(str, Enum):
    """Combat stats that buffs can modify."""

    ATTACK = "attack"
    DEFENSE = "defense"
    SPEED = "speed"


class AbilityEffectType(str, Enum):
    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"
    DEBUFF_REMOVE = "debuff_remove"


class AbilityTarget(str, Enum):
    SINGLE_ENEMY = "single_enemy"
    ALL_ENEMIES = "all_enemies"
    SINGLE_ALLY = "single_ally"
    ALL_ALLIES = "all_allies"
    SELF = "self"


# ---------------------------------------------------------------------------
# Abilities
# ---------------------------------------------------------------------------

class AbilityEffect(BaseModel):
    """What an ability does when it resolves."""

    model_config = ConfigDict(frozen=True)

    type: AbilityEffectType
    target: AbilityTarget = AbilityTarget.SELF
    power: int = 0
    element: str | None = None
    buff_stat: BuffStat | None = None
    buff_amount: int | None = None
    """Signed modifier; negative values are debuffs."""

    buff_duration: int | None = None
    """Default duration in turns, used when the caller does not pass one."""


class Ability(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    mp_cost: int = 0
    effect: AbilityEffect


# ---------------------------------------------------------------------------
# Buffs
# ---------------------------------------------------------------------------

class ActiveBuff(BaseModel):
    """A timed, signed modifier to one combat stat."""

    model_config = ConfigDict(frozen=True)

    id: str
    stat: BuffStat
    amount: int
    duration: int
    """Remaining turns.  The buff is dropped once this reaches 0."""

    source: str
    """Id of the ability that created this buff."""

    source_name: str
    """Display name of that ability."""


class BuffState(BaseModel):
    """All buffs on one unit.  Order carries no meaning; stacking is allowed."""

    model_config = ConfigDict(frozen=True)

    buffs: tuple[ActiveBuff, ...] = ()


# ---------------------------------------------------------------------------
# Battle unit
# ---------------------------------------------------------------------------

class BattleUnit(BaseModel):
    """A combatant's battle-time state."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    max_hp: int
    current_hp: int
    attack: int
    defense: int
    speed: int
    is_player: bool = True
    buff_state: BuffState = Field(default_factory=BuffState)

    @property
    def is_dead(self) -> bool:
        return self.current_hp <= 0

    def base_stat(self, stat: BuffStat | str) -> int:
        """Return the unbuffed value of *stat*."""
        return getattr(self, BuffStat(stat).value)
