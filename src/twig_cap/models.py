from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BuildingGrade(str, Enum):
    TWIGS = "twigs"
    WOOD = "wood"
    STONE = "stone"
    METAL = "metal"
    TOP_TIER = "top_tier"


@dataclass(slots=True)
class Player:
    user_id: int
    display_name: str = ""
    language: str | None = None

    @property
    def user_id_string(self) -> str:
        return str(self.user_id)


@dataclass(slots=True)
class BuildingBlock:
    """One placed structural block instance."""

    block_id: int
    building_id: int
    grade: BuildingGrade = BuildingGrade.TWIGS
    owner_id: int = 0


@dataclass(slots=True)
class Construction:
    """Prefab the planner is about to place."""

    full_name: str


@dataclass(slots=True)
class BuildingPrivilege:
    """A privilege claim (tool cupboard) and the players authorised on it."""

    authorized_user_ids: set[int] = field(default_factory=set)

    def is_authed(self, player: Player) -> bool:
        return player.user_id in self.authorized_user_ids


@dataclass(slots=True)
class Building:
    building_id: int
    block_ids: set[int] = field(default_factory=set)
    privileges: list[BuildingPrivilege] = field(default_factory=list)

    def has_building_privileges(self) -> bool:
        return len(self.privileges) > 0


@dataclass(slots=True)
class PlacementIntent:
    """Everything the world knows when a player tries to place a construction."""

    player: Player | None
    prefab: Construction | None
    target: object | None
