"""Whole-record persistence for plugin data files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

ModelT = TypeVar("ModelT", bound=BaseModel)

_logger = logging.getLogger("twig_cap.storage")


class StoredData(BaseModel):
    """Durable form of the twig registry."""

    model_config = ConfigDict(populate_by_name=True)

    building_twigs: dict[int, set[int]] = Field(default_factory=dict, alias="Building Twigs")

    @field_serializer("building_twigs")
    def _sorted_twigs(self, value: dict[int, set[int]]) -> dict[int, list[int]]:
        return {building_id: sorted(blocks) for building_id, blocks in sorted(value.items())}


class DataStore(Protocol):
    """Persistence contract for named records."""

    def exists(self, key: str) -> bool:
        """Return whether a record is stored under ``key``."""

    def load_or_create(self, key: str, model: type[ModelT]) -> ModelT:
        """Return the stored record, or a fresh default one."""

    def save(self, key: str, record: BaseModel) -> None:
        """Replace the record stored under ``key``."""

    def delete(self, key: str) -> None:
        """Remove the record stored under ``key`` if present."""


class InMemoryDataStore:
    """Keeps serialized records in a dict; used by tests and dry runs."""

    def __init__(self) -> None:
        self._records: dict[str, str] = {}
        self.save_count = 0

    def exists(self, key: str) -> bool:
        return key in self._records

    def load_or_create(self, key: str, model: type[ModelT]) -> ModelT:
        if key not in self._records:
            return model()
        return model.model_validate_json(self._records[key])

    def save(self, key: str, record: BaseModel) -> None:
        self._records[key] = record.model_dump_json(by_alias=True)
        self.save_count += 1

    def delete(self, key: str) -> None:
        self._records.pop(key, None)

    def raw(self, key: str) -> dict:
        return json.loads(self._records[key])


class JsonDataStore:
    """One ``<key>.json`` file per record under a data directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def file_path(self, key: str) -> Path:
        return self._root / f"{key}.json"

    def list_keys(self) -> list[str]:
        return sorted(path.stem for path in self._root.glob("*.json"))

    def exists(self, key: str) -> bool:
        return self.file_path(key).exists()

    def load(self, key: str, model: type[ModelT]) -> ModelT:
        text = self.file_path(key).read_text(encoding="utf-8")
        if not text.strip():
            return model()
        return model.model_validate_json(text)

    def load_if_exists(self, key: str, model: type[ModelT]) -> ModelT | None:
        if not self.exists(key):
            return None
        return self.load(key, model)

    def load_or_create(self, key: str, model: type[ModelT]) -> ModelT:
        record = self.load_if_exists(key, model)
        if record is None:
            _logger.info("data_record_created", extra={"key": key})
            record = model()
        return record

    def save(self, key: str, record: BaseModel) -> None:
        path = self.file_path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(record.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        self.file_path(key).unlink(missing_ok=True)
