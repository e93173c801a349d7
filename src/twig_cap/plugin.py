"""Session-owned plugin context wiring world events to the twig cap."""

from __future__ import annotations

import logging
from pathlib import Path

from twig_cap.adapters.host import BuildingResolver, MessageSink, PermissionService, TeamDirectory
from twig_cap.admission import AdmissionController, Decision
from twig_cap.config import PLUGIN_NAME, PLUGIN_VERSION, PluginConfig, config_path_for, load_config
from twig_cap.localization import CANNOT_BUILD_TWIG, DEFAULT_MESSAGES, MessageCatalog
from twig_cap.models import BuildingBlock, BuildingGrade, PlacementIntent, Player
from twig_cap.permissions import register_permissions
from twig_cap.registry import TwigRegistry
from twig_cap.storage import DataStore, StoredData


class PluginNotLoadedError(RuntimeError):
    """Raised when an event arrives before ``init`` or after ``unload``."""


class TwigCapPlugin:
    """Owns configuration, registry and collaborators for one host session.

    Call :meth:`init` once the host is ready, route world events to the
    ``on_*`` handlers and :meth:`can_build`, then :meth:`unload` on shutdown.
    """

    name = PLUGIN_NAME
    version = PLUGIN_VERSION

    def __init__(
        self,
        *,
        store: DataStore,
        buildings: BuildingResolver,
        teams: TeamDirectory,
        permissions: PermissionService,
        messages: MessageSink,
        config_dir: str | Path | None = None,
        config: PluginConfig | None = None,
        default_language: str = "en",
        logger: logging.Logger | None = None,
    ) -> None:
        if config_dir is None and config is None:
            raise ValueError("Provide either config_dir or an explicit config")
        self._store = store
        self._buildings = buildings
        self._teams = teams
        self._permissions = permissions
        self._messages = messages
        self._config_dir = config_dir
        self._explicit_config = config
        self._logger = logger or logging.getLogger("twig_cap.plugin")

        self.catalog = MessageCatalog(default_language=default_language)
        self._config: PluginConfig | None = None
        self._registry: TwigRegistry | None = None
        self._controller: AdmissionController | None = None

    @property
    def config(self) -> PluginConfig:
        if self._config is None:
            raise PluginNotLoadedError(f"{self.name} is not loaded")
        return self._config

    @property
    def registry(self) -> TwigRegistry:
        if self._registry is None:
            raise PluginNotLoadedError(f"{self.name} is not loaded")
        return self._registry

    @property
    def controller(self) -> AdmissionController:
        if self._controller is None:
            raise PluginNotLoadedError(f"{self.name} is not loaded")
        return self._controller

    @property
    def loaded(self) -> bool:
        return self._registry is not None

    def init(self) -> None:
        register_permissions(self._permissions, self.name)
        self.catalog.register_messages(DEFAULT_MESSAGES, "en")

        if self._explicit_config is not None:
            self._config = self._explicit_config
        else:
            self._config = load_config(config_path_for(self._config_dir, self.name), self.version)

        snapshot = self._store.load_or_create(self.name, StoredData)
        self._registry = TwigRegistry.from_snapshot(snapshot, on_change=self._save_data)
        self._controller = AdmissionController(
            registry=self._registry,
            maximum=self._config.maximum_twigs_per_building,
            buildings=self._buildings,
            teams=self._teams,
            permissions=self._permissions,
        )
        self._logger.info(
            "plugin_loaded",
            extra={
                "plugin": self.name,
                "buildings_tracked": len(self._registry),
                "maximum": self._config.maximum_twigs_per_building,
            },
        )

    def unload(self) -> None:
        if self._registry is not None:
            self._save_data(self._registry.snapshot())
        self._controller = None
        self._registry = None
        self._config = None
        self._logger.info("plugin_unloaded", extra={"plugin": self.name})

    def on_entity_built(self, player: Player | None, entity: object | None) -> None:
        """A planner finished placing ``entity`` on behalf of ``player``."""
        registry = self.registry
        if player is None or not isinstance(entity, BuildingBlock):
            return
        if entity.grade is not BuildingGrade.TWIGS:
            return
        registry.record(entity.building_id, entity.block_id)

    def on_structure_upgrade(
        self,
        block: BuildingBlock | None,
        player: Player | None,
        grade: BuildingGrade,
    ) -> None:
        """A block is being upgraded to ``grade``; anything above twigs leaves the count."""
        registry = self.registry
        if block is None or player is None or grade is BuildingGrade.TWIGS:
            return
        registry.release(block.building_id, block.block_id)

    def on_entity_kill(self, block: BuildingBlock | None) -> None:
        registry = self.registry
        if block is None or block.grade is not BuildingGrade.TWIGS:
            return
        registry.release(block.building_id, block.block_id)

    def can_build(self, intent: PlacementIntent) -> Decision:
        """Evaluate a placement and tell the player when the cap blocks it."""
        decision = self.controller.evaluate(intent)
        if not decision.allowed and intent.player is not None:
            self._logger.info(
                "twig_placement_denied",
                extra={
                    "user_id": intent.player.user_id,
                    "building_id": decision.building_id,
                    "current_count": decision.current_count,
                    "maximum": decision.maximum,
                },
            )
            message = self.catalog.format_for(intent.player, CANNOT_BUILD_TWIG, decision.maximum)
            self._messages.send_reply(intent.player, message)
        return decision

    def _save_data(self, snapshot: StoredData) -> None:
        self._store.save(self.name, snapshot)
