"""Unique ids for transient runtime objects (buff instances, ...)."""

from __future__ import annotations

import itertools

_counter = itertools.count(1)


def make_id(prefix: str = "id") -> str:
    """Return a process-unique id such as ``"buff_12"``.

    Ids never draw from an RNG stream, so generating one cannot shift any
    replayed roll.
    """
    return f"{prefix}_{next(_counter)}"
