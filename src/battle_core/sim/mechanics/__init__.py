"""Combat mechanics.

Usage::

    from battle_core.sim.mechanics import (
        apply_buff, decay_buffs, decay_all_buffs,
        get_buff_modifier, get_effective_stat, get_buff_summary,
    )
"""

# -- buffs -------------------------------------------------------------------
from .buffs import (
    apply_buff,
    decay_all_buffs,
    decay_buffs,
    get_active_buffs,
    get_buff_modifier,
    get_buff_summary,
    get_effective_stat,
    has_active_buffs,
    remove_all_buffs,
)

__all__ = [
    "apply_buff",
    "decay_buffs",
    "decay_all_buffs",
    "get_buff_modifier",
    "get_effective_stat",
    "get_active_buffs",
    "has_active_buffs",
    "remove_all_buffs",
    "get_buff_summary",
]
