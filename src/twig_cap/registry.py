"""Index of twig-grade blocks per building."""

from __future__ import annotations

import logging
from typing import Callable

from twig_cap.storage import StoredData

PersistCallback = Callable[[StoredData], None]


class TwigRegistry:
    """Tracks which twig blocks each building currently contains.

    A building is present only while it has at least one twig block, and a
    block is filed under at most one building. ``None`` ids are ignored rather
    than rejected, since world events routinely arrive for entities that are
    already gone. Every change hands a full snapshot to ``on_change``.
    """

    def __init__(
        self,
        *,
        on_change: PersistCallback | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._twigs: dict[int, set[int]] = {}
        self._building_of: dict[int, int] = {}
        self._on_change = on_change
        self._logger = logger or logging.getLogger("twig_cap.registry")

    @classmethod
    def from_snapshot(
        cls,
        snapshot: StoredData,
        *,
        on_change: PersistCallback | None = None,
        logger: logging.Logger | None = None,
    ) -> TwigRegistry:
        registry = cls(on_change=on_change, logger=logger)
        for building_id, block_ids in snapshot.building_twigs.items():
            for block_id in block_ids:
                registry._insert(building_id, block_id)
        return registry

    def __len__(self) -> int:
        return len(self._twigs)

    def __contains__(self, building_id: object) -> bool:
        return building_id in self._twigs

    def record(self, building_id: int | None, block_id: int | None) -> bool:
        """File a twig block under its building. Returns whether anything changed."""
        if building_id is None or block_id is None:
            return False
        if self._building_of.get(block_id) == building_id:
            return False

        self._insert(building_id, block_id)
        self._logger.info(
            "twig_recorded",
            extra={"building_id": building_id, "block_id": block_id, "count": self.count_for(building_id)},
        )
        self._persist()
        return True

    def release(self, building_id: int | None, block_id: int | None) -> bool:
        """Drop a block from its building. Returns whether anything changed."""
        if building_id is None or block_id is None:
            return False
        members = self._twigs.get(building_id)
        if members is None or block_id not in members:
            return False

        self._discard(building_id, block_id)
        self._logger.info(
            "twig_released",
            extra={"building_id": building_id, "block_id": block_id, "count": self.count_for(building_id)},
        )
        self._persist()
        return True

    def count_for(self, building_id: int | None) -> int:
        if building_id is None:
            return 0
        return len(self._twigs.get(building_id, ()))

    def members(self, building_id: int) -> frozenset[int]:
        return frozenset(self._twigs.get(building_id, ()))

    def buildings(self) -> list[int]:
        return sorted(self._twigs)

    def snapshot(self) -> StoredData:
        return StoredData(building_twigs={building_id: set(blocks) for building_id, blocks in self._twigs.items()})

    def _insert(self, building_id: int, block_id: int) -> None:
        previous = self._building_of.get(block_id)
        if previous is not None and previous != building_id:
            # Block ids are world-unique; a block seen under a new building was regrouped.
            self._discard(previous, block_id)
        self._twigs.setdefault(building_id, set()).add(block_id)
        self._building_of[block_id] = building_id

    def _discard(self, building_id: int, block_id: int) -> None:
        members = self._twigs[building_id]
        members.discard(block_id)
        if not members:
            del self._twigs[building_id]
        if self._building_of.get(block_id) == building_id:
            del self._building_of[block_id]

    def _persist(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())
