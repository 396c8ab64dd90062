"""
Packaging Store

CRUD over packaging.json. Same naming rules as items, plus positive
dimensions and a non-negative cost. The internal volume is derived from the
dimensions when it is not given.
"""

import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from postage_service.core.errors import NotFoundError, StoreError, ValidationError
from postage_service.schemas.catalog import Packaging, PackagingCreate, PackagingUpdate
from postage_service.stores.json_store import JsonFileStore

logger = logging.getLogger(__name__)


def _positive_or(value: Optional[int], fallback: int) -> int:
    return value if value is not None and value > 0 else fallback


class PackagingStore(JsonFileStore):
    """File-backed packaging repository."""

    file_name = "packaging.json"

    def _load(self) -> List[Packaging]:
        raw = self._read(default=[]) or []
        try:
            return [Packaging.model_validate(entry) for entry in raw]
        except (PydanticValidationError, TypeError) as e:
            logger.error(f"Corrupt packaging record in {self.path}: {e}")
            raise StoreError("Unable to read packaging", details={"path": str(self.path)})

    def _save(self, packagings: List[Packaging]) -> None:
        self._write([packaging.model_dump(mode="json", by_alias=True) for packaging in packagings])

    def find_all(self) -> List[Packaging]:
        with self._lock:
            return self._load()

    def find_by_id(self, packaging_id: str) -> Optional[Packaging]:
        if packaging_id is None or not packaging_id.strip():
            raise ValidationError("Id must not be blank")
        with self._lock:
            return next((p for p in self._load() if p.id == packaging_id), None)

    def create(self, payload: PackagingCreate) -> Packaging:
        """
        Add a packaging option.

        Raises:
            ValidationError: Blank name, a dimension <= 0, negative cost or a
                duplicate name
        """
        if payload.name is None or not payload.name.strip():
            raise ValidationError("Packaging name is required")
        if payload.length_cm <= 0 or payload.height_cm <= 0 or payload.width_cm <= 0:
            raise ValidationError("Packaging dimensions (length, height, width) must be greater than 0")
        if payload.packaging_cost_aud < 0:
            raise ValidationError("Packaging cost must not be negative")

        with self._lock:
            packagings = self._load()
            if any(p.name == payload.name for p in packagings):
                raise ValidationError(f"Packaging with name {payload.name} already exists")

            packaging = Packaging(
                id=str(uuid.uuid4()),
                name=payload.name,
                description=payload.description,
                length_cm=payload.length_cm,
                height_cm=payload.height_cm,
                width_cm=payload.width_cm,
                internal_volume_cubic_cm=max(payload.internal_volume_cubic_cm, 0),
                packaging_cost_aud=payload.packaging_cost_aud,
            )
            packagings.append(packaging)
            self._save(packagings)

        logger.info(
            f"Created packaging {packaging.id} ({packaging.name}), "
            f"volume: {packaging.internal_volume_cubic_cm}cm3"
        )
        return packaging

    def update(self, packaging_id: str, payload: PackagingUpdate) -> Packaging:
        """
        Partially update packaging.

        Unset or non-positive dimensions and volume keep the stored values;
        an unset cost keeps the stored cost.

        Raises:
            ValidationError: Duplicate name or negative cost
            NotFoundError: No packaging has this id
        """
        if packaging_id is None or not packaging_id.strip():
            raise ValidationError("Id must not be blank")
        if payload.packaging_cost_aud is not None and payload.packaging_cost_aud < 0:
            raise ValidationError("Packaging cost must not be negative")
        renamed = payload.name is not None and bool(payload.name.strip())

        with self._lock:
            packagings = self._load()
            if renamed and any(p.name == payload.name and p.id != packaging_id for p in packagings):
                raise ValidationError(f"Packaging with name {payload.name} already exists")

            index = next((i for i, p in enumerate(packagings) if p.id == packaging_id), None)
            if index is None:
                raise NotFoundError(f"Packaging with id {packaging_id} not found")

            existing = packagings[index]
            updated = Packaging(
                id=existing.id,
                name=payload.name if renamed else existing.name,
                description=payload.description if payload.description is not None else existing.description,
                length_cm=_positive_or(payload.length_cm, existing.length_cm),
                height_cm=_positive_or(payload.height_cm, existing.height_cm),
                width_cm=_positive_or(payload.width_cm, existing.width_cm),
                internal_volume_cubic_cm=_positive_or(
                    payload.internal_volume_cubic_cm, existing.internal_volume_cubic_cm
                ),
                packaging_cost_aud=(
                    payload.packaging_cost_aud
                    if payload.packaging_cost_aud is not None
                    else existing.packaging_cost_aud
                ),
            )
            packagings[index] = updated
            self._save(packagings)

        logger.info(f"Updated packaging {packaging_id}")
        return updated

    def delete(self, packaging_id: str) -> None:
        """Remove packaging; unknown ids are ignored."""
        if packaging_id is None or not packaging_id.strip():
            raise ValidationError("Id must not be blank")
        with self._lock:
            packagings = self._load()
            remaining = [p for p in packagings if p.id != packaging_id]
            if len(remaining) == len(packagings):
                return
            self._save(remaining)
        logger.info(f"Deleted packaging {packaging_id}")
