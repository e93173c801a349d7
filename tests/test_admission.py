from __future__ import annotations

from twig_cap.adapters import InMemoryBuildingIndex, InMemoryPermissionService, InMemoryTeamDirectory
from twig_cap.admission import AdmissionController, AdmissionOutcome, try_get_building_for_entity
from twig_cap.models import (
    Building,
    BuildingBlock,
    BuildingPrivilege,
    Construction,
    PlacementIntent,
    Player,
)
from twig_cap.permissions import PERMISSION_IGNORE, register_permissions
from twig_cap.registry import TwigRegistry

OWNER = Player(user_id=1)
TEAMMATE = Player(user_id=2)
STRANGER = Player(user_id=3)
AUTHED = Player(user_id=4)

CORE = Construction(full_name="assets/prefabs/building core/foundation/foundation.prefab")
DEPLOYABLE = Construction(full_name="assets/prefabs/deployable/woodenbox/box.wooden.prefab")


def _controller(maximum: int = 16, registry: TwigRegistry | None = None, privileged: bool = True):
    buildings = InMemoryBuildingIndex()
    privileges = [BuildingPrivilege(authorized_user_ids={AUTHED.user_id})] if privileged else []
    buildings.add(Building(building_id=7, block_ids={100}, privileges=privileges))
    teams = InMemoryTeamDirectory()
    teams.add_team(OWNER.user_id, TEAMMATE.user_id)
    permissions = InMemoryPermissionService()
    register_permissions(permissions, "TwigCap")
    controller = AdmissionController(
        registry=registry if registry is not None else TwigRegistry(),
        maximum=maximum,
        buildings=buildings,
        teams=teams,
        permissions=permissions,
    )
    return controller, permissions


def _target() -> BuildingBlock:
    return BuildingBlock(block_id=100, building_id=7, owner_id=OWNER.user_id)


def _filled_registry(count: int) -> TwigRegistry:
    registry = TwigRegistry()
    for block_id in range(count):
        registry.record(7, 1_000 + block_id)
    return registry


def test_unresolved_intent_abstains() -> None:
    controller, _ = _controller()

    for intent in (
        PlacementIntent(player=None, prefab=CORE, target=_target()),
        PlacementIntent(player=OWNER, prefab=None, target=_target()),
        PlacementIntent(player=OWNER, prefab=CORE, target=None),
        PlacementIntent(player=OWNER, prefab=CORE, target=object()),
    ):
        decision = controller.evaluate(intent)
        assert decision.outcome is AdmissionOutcome.ABSTAIN_UNRESOLVED
        assert decision.allowed


def test_non_building_core_prefab_abstains() -> None:
    controller, _ = _controller(registry=_filled_registry(16))

    decision = controller.evaluate(PlacementIntent(player=OWNER, prefab=DEPLOYABLE, target=_target()))

    assert decision.outcome is AdmissionOutcome.ABSTAIN_NOT_BUILDING_CORE
    assert decision.allowed


def test_owner_with_empty_building_is_allowed() -> None:
    controller, _ = _controller()

    decision = controller.evaluate(PlacementIntent(player=OWNER, prefab=CORE, target=_target()))

    assert decision.outcome is AdmissionOutcome.UNDER_LIMIT
    assert decision.current_count == 0


def test_last_slot_allowed_then_denied() -> None:
    registry = _filled_registry(15)
    controller, _ = _controller(registry=registry)
    intent = PlacementIntent(player=OWNER, prefab=CORE, target=_target())

    assert controller.evaluate(intent).allowed
    registry.record(7, 9_999)

    decision = controller.evaluate(intent)
    assert decision.outcome is AdmissionOutcome.LIMIT_REACHED
    assert not decision.allowed
    assert decision.maximum == 16
    assert decision.current_count == 16


def test_exempt_player_bypasses_full_building() -> None:
    controller, permissions = _controller(registry=_filled_registry(16))
    permissions.grant(OWNER.user_id_string, PERMISSION_IGNORE)

    decision = controller.evaluate(PlacementIntent(player=OWNER, prefab=CORE, target=_target()))

    assert decision.outcome is AdmissionOutcome.EXEMPT
    assert decision.allowed


def test_stranger_is_not_governed() -> None:
    controller, _ = _controller(registry=_filled_registry(16))

    decision = controller.evaluate(PlacementIntent(player=STRANGER, prefab=CORE, target=_target()))

    assert decision.outcome is AdmissionOutcome.ABSTAIN_INELIGIBLE
    assert decision.allowed


def test_teammate_and_authorized_player_are_capped() -> None:
    controller, _ = _controller(registry=_filled_registry(16))

    for player in (TEAMMATE, AUTHED):
        decision = controller.evaluate(PlacementIntent(player=player, prefab=CORE, target=_target()))
        assert decision.outcome is AdmissionOutcome.LIMIT_REACHED


def test_authorization_requires_privilege_claim() -> None:
    controller, _ = _controller(registry=_filled_registry(16), privileged=False)

    decision = controller.evaluate(PlacementIntent(player=AUTHED, prefab=CORE, target=_target()))

    assert decision.outcome is AdmissionOutcome.ABSTAIN_INELIGIBLE


def test_try_get_building_for_entity_filters() -> None:
    index = InMemoryBuildingIndex([Building(building_id=1), Building(building_id=2, block_ids={5})])

    assert try_get_building_for_entity(index, BuildingBlock(1, 1), minimum_building_blocks=1) is None
    assert try_get_building_for_entity(index, BuildingBlock(5, 2), minimum_building_blocks=1) is None
    found = try_get_building_for_entity(
        index,
        BuildingBlock(5, 2),
        minimum_building_blocks=1,
        must_have_building_privilege=False,
    )
    assert found is not None and found.building_id == 2
    assert try_get_building_for_entity(index, object(), minimum_building_blocks=0) is None


def test_exempt_stranger_skips_eligibility_gate() -> None:
    controller, permissions = _controller(registry=_filled_registry(16))
    permissions.grant(STRANGER.user_id_string, PERMISSION_IGNORE)

    decision = controller.evaluate(PlacementIntent(player=STRANGER, prefab=CORE, target=_target()))

    assert decision.outcome is AdmissionOutcome.EXEMPT
    assert decision.building_id == 7


def test_zero_maximum_denies_even_without_recorded_twigs() -> None:
    controller, _ = _controller(maximum=0)

    decision = controller.evaluate(PlacementIntent(player=OWNER, prefab=CORE, target=_target()))

    assert decision.outcome is AdmissionOutcome.LIMIT_REACHED
    assert decision.current_count == 0
    assert decision.maximum == 0
