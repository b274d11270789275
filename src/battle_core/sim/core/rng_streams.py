"""Centralized management of independent RNG streams.

Every game sub-system gets its own stream, forked exactly once from the
same root at construction time:

- ``route``: route generation and node placement
- ``battle``: combat mechanics and damage rolls
- ``economy``: reward generation
- ``map``: map generation and procedural content
- ``unit``: unit spawning and AI decisions
- ``save``: checksum and validation seeds
- ``events``: random events and triggers
- ``loot``: item drops and treasure

Usage::

    streams = RngStreams(create_rng(42))
    battle_rng = streams.get("battle")
    damage = battle_rng.random_int(10, 20)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from battle_core.sim.core.rng import GameRNG

logger = logging.getLogger(__name__)

DEFAULT_STREAMS: tuple[str, ...] = (
    "route",
    "battle",
    "economy",
    "map",
    "unit",
    "save",
    "events",
    "loot",
)


class StreamNotInitializedError(KeyError):
    """Raised when a stream label was never registered."""


class RngStreams:
    """Owns one forked child stream per named sub-system.

    Streams are never created lazily: asking for an unregistered label is
    an integration bug and raises :class:`StreamNotInitializedError`.
    """

    def __init__(self, root: GameRNG, labels: Iterable[str] = DEFAULT_STREAMS) -> None:
        self._streams: dict[str, GameRNG] = {}
        for label in labels:
            if label in self._streams:
                raise ValueError(f"Duplicate RNG stream label: {label!r}")
            self._streams[label] = root.fork(label)
        logger.debug("Initialized %d RNG streams from seed=%d", len(self._streams), root.seed)

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._streams)

    def get(self, label: str) -> GameRNG:
        """Return the stream registered under *label*."""
        try:
            return self._streams[label]
        except KeyError:
            raise StreamNotInitializedError(f"RNG stream {label!r} not initialized") from None

    def sample_distinct(self, n: int = 3) -> bool:
        """Check that no two streams produce the same first *n* draws.

        Samples are taken from clones, so live streams are left untouched.
        Diagnostic only.
        """
        samples = {
            tuple(clone.random_int(0, 10**9) for _ in range(n))
            for clone in (stream.clone() for stream in self._streams.values())
        }
        return len(samples) == len(self._streams)

    def describe_streams(self) -> dict[str, dict[str, Any]]:
        return {label: stream.describe() for label, stream in self._streams.items()}

    def __contains__(self, label: object) -> bool:
        return label in self._streams

    def __len__(self) -> int:
        return len(self._streams)

    def __repr__(self) -> str:
        return f"RngStreams(labels={list(self._streams)})"
