"""Placement admission for twig-grade building cores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from twig_cap.adapters.host import BuildingResolver, PermissionService, TeamDirectory
from twig_cap.models import Building, BuildingBlock, PlacementIntent, Player
from twig_cap.permissions import PERMISSION_IGNORE
from twig_cap.registry import TwigRegistry

BUILDING_CORE_MARKER = "building core"


class AdmissionOutcome(str, Enum):
    """Every way an evaluation can end. Only ``LIMIT_REACHED`` blocks placement."""

    ABSTAIN_UNRESOLVED = "abstain_unresolved"
    ABSTAIN_NOT_BUILDING_CORE = "abstain_not_building_core"
    EXEMPT = "exempt"
    ABSTAIN_INELIGIBLE = "abstain_ineligible"
    UNDER_LIMIT = "under_limit"
    LIMIT_REACHED = "limit_reached"


@dataclass(slots=True, frozen=True)
class Decision:
    outcome: AdmissionOutcome
    building_id: int | None = None
    current_count: int | None = None
    maximum: int | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is not AdmissionOutcome.LIMIT_REACHED


def try_get_building_for_entity(
    resolver: BuildingResolver,
    entity: object,
    *,
    minimum_building_blocks: int,
    must_have_building_privilege: bool = True,
) -> Building | None:
    """Resolve the building an entity belongs to, subject to size and privilege requirements."""
    building_id = getattr(entity, "building_id", None)
    if building_id is None:
        return None

    building = resolver.get_building(building_id)
    if building is None or len(building.block_ids) < minimum_building_blocks:
        return None
    if must_have_building_privilege and not building.has_building_privileges():
        return None
    return building


class AdmissionController:
    """Decides whether a twig building core may be placed against a building."""

    def __init__(
        self,
        *,
        registry: TwigRegistry,
        maximum: int,
        buildings: BuildingResolver,
        teams: TeamDirectory,
        permissions: PermissionService,
    ) -> None:
        self._registry = registry
        self._maximum = maximum
        self._buildings = buildings
        self._teams = teams
        self._permissions = permissions

    @property
    def maximum(self) -> int:
        return self._maximum

    def evaluate(self, intent: PlacementIntent) -> Decision:
        player = intent.player
        if player is None or intent.prefab is None or intent.target is None:
            return Decision(AdmissionOutcome.ABSTAIN_UNRESOLVED)
        if BUILDING_CORE_MARKER not in intent.prefab.full_name:
            return Decision(AdmissionOutcome.ABSTAIN_NOT_BUILDING_CORE)

        target = intent.target
        if not isinstance(target, BuildingBlock):
            return Decision(AdmissionOutcome.ABSTAIN_UNRESOLVED)
        building_id = target.building_id

        if self._permissions.user_has_permission(player.user_id_string, PERMISSION_IGNORE):
            return Decision(AdmissionOutcome.EXEMPT, building_id=building_id)

        if not self._is_owner_or_teammate(player, target) and not self._is_authorized(player, target):
            return Decision(AdmissionOutcome.ABSTAIN_INELIGIBLE, building_id=building_id)

        count = self._registry.count_for(building_id)
        outcome = AdmissionOutcome.LIMIT_REACHED if count >= self._maximum else AdmissionOutcome.UNDER_LIMIT
        return Decision(outcome, building_id=building_id, current_count=count, maximum=self._maximum)

    def _is_owner_or_teammate(self, player: Player, block: BuildingBlock) -> bool:
        if block.owner_id == player.user_id:
            return True
        return self._teams.are_teammates(block.owner_id, player.user_id)

    def _is_authorized(self, player: Player, block: BuildingBlock) -> bool:
        building = try_get_building_for_entity(
            self._buildings,
            block,
            minimum_building_blocks=1,
            must_have_building_privilege=True,
        )
        if building is None:
            return False
        return any(privilege.is_authed(player) for privilege in building.privileges)
