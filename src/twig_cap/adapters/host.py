"""Boundary contracts for the host world and in-memory stand-ins.

The host game owns buildings, teams, permissions and chat delivery. The plugin
only talks to it through these protocols so the cap logic can be exercised
without a live server.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Protocol

from twig_cap.models import Building, Player


class BuildingResolver(Protocol):
    """Looks up a building by id."""

    def get_building(self, building_id: int) -> Building | None:
        """Return the building or ``None`` when the id is unknown."""


class TeamDirectory(Protocol):
    """Answers team membership questions."""

    def are_teammates(self, first_user_id: int, second_user_id: int) -> bool:
        """Return whether ``second_user_id`` is on ``first_user_id``'s team."""


class PermissionService(Protocol):
    """Registers permission names and checks grants."""

    def register_permission(self, name: str, owner: str) -> None:
        """Declare a permission owned by a plugin."""

    def user_has_permission(self, user_id: str, name: str) -> bool:
        """Return whether the user holds the permission."""


class MessageSink(Protocol):
    """Delivers chat replies to a player."""

    def send_reply(self, player: Player, message: str) -> None:
        """Show ``message`` to ``player``."""


class InMemoryBuildingIndex:
    """Dictionary-backed building resolver."""

    def __init__(self, buildings: list[Building] | None = None) -> None:
        self._buildings: dict[int, Building] = {}
        for building in buildings or []:
            self.add(building)

    def add(self, building: Building) -> None:
        self._buildings[building.building_id] = building

    def get_building(self, building_id: int) -> Building | None:
        return self._buildings.get(building_id)


class InMemoryTeamDirectory:
    """Team directory keyed by member id."""

    def __init__(self) -> None:
        self._team_of: dict[int, frozenset[int]] = {}

    def add_team(self, *member_ids: int) -> None:
        members = frozenset(member_ids)
        for member_id in members:
            self._team_of[member_id] = members

    def are_teammates(self, first_user_id: int, second_user_id: int) -> bool:
        team = self._team_of.get(first_user_id)
        return team is not None and second_user_id in team


class UnknownPermissionError(KeyError):
    """Raised when granting a permission nobody registered."""


class InMemoryPermissionService:
    def __init__(self) -> None:
        self._registered: dict[str, str] = {}
        self._grants: defaultdict[str, set[str]] = defaultdict(set)

    @property
    def registered(self) -> dict[str, str]:
        return dict(self._registered)

    def register_permission(self, name: str, owner: str) -> None:
        self._registered[name.lower()] = owner

    def grant(self, user_id: str, name: str) -> None:
        key = name.lower()
        if key not in self._registered:
            raise UnknownPermissionError(f"Permission is not registered: {name}")
        self._grants[user_id].add(key)

    def revoke(self, user_id: str, name: str) -> None:
        self._grants[user_id].discard(name.lower())

    def user_has_permission(self, user_id: str, name: str) -> bool:
        return name.lower() in self._grants.get(user_id, ())


@dataclass(slots=True)
class RecordingMessageSink:
    """Collects replies instead of delivering them."""

    sent: list[tuple[int, str]] = field(default_factory=list)

    def send_reply(self, player: Player, message: str) -> None:
        self.sent.append((player.user_id, message))
