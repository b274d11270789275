"""Core simulation primitives: deterministic RNG, results, and value models."""

from battle_core.sim.core.entities import (
    Ability,
    AbilityEffect,
    AbilityEffectType,
    AbilityTarget,
    ActiveBuff,
    BattleUnit,
    BuffStat,
    BuffState,
)
from battle_core.sim.core.result import Err, Ok, Result
from battle_core.sim.core.rng import GameRNG, InvalidSeedError, RngSnapshot, create_rng
from battle_core.sim.core.rng_streams import (
    DEFAULT_STREAMS,
    RngStreams,
    StreamNotInitializedError,
)

__all__ = [
    # rng
    "GameRNG",
    "RngSnapshot",
    "InvalidSeedError",
    "create_rng",
    # rng_streams
    "DEFAULT_STREAMS",
    "RngStreams",
    "StreamNotInitializedError",
    # result
    "Ok",
    "Err",
    "Result",
    # entities
    "BuffStat",
    "AbilityEffectType",
    "AbilityTarget",
    "AbilityEffect",
    "Ability",
    "ActiveBuff",
    "BuffState",
    "BattleUnit",
]
