"""Host world adapters."""

from .host import (
    BuildingResolver,
    InMemoryBuildingIndex,
    InMemoryPermissionService,
    InMemoryTeamDirectory,
    MessageSink,
    PermissionService,
    RecordingMessageSink,
    TeamDirectory,
    UnknownPermissionError,
)

__all__ = [
    "BuildingResolver",
    "InMemoryBuildingIndex",
    "InMemoryPermissionService",
    "InMemoryTeamDirectory",
    "MessageSink",
    "PermissionService",
    "RecordingMessageSink",
    "TeamDirectory",
    "UnknownPermissionError",
]
