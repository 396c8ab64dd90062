"""
Item Store

CRUD over items.json. Names are unique; ids are uuid4 strings.
"""

import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from postage_service.core.errors import NotFoundError, StoreError, ValidationError
from postage_service.schemas.catalog import Item, ItemCreate, ItemUpdate
from postage_service.stores.json_store import JsonFileStore

logger = logging.getLogger(__name__)


def _require_id(item_id: Optional[str]) -> str:
    if item_id is None or not item_id.strip():
        raise ValidationError("Id must not be blank")
    return item_id


class ItemStore(JsonFileStore):
    """File-backed item repository."""

    file_name = "items.json"

    def _load(self) -> List[Item]:
        raw = self._read(default=[]) or []
        try:
            return [Item.model_validate(entry) for entry in raw]
        except (PydanticValidationError, TypeError) as e:
            logger.error(f"Corrupt item record in {self.path}: {e}")
            raise StoreError("Unable to read items", details={"path": str(self.path)})

    def _save(self, items: List[Item]) -> None:
        self._write([item.model_dump(mode="json", by_alias=True) for item in items])

    # ==================== Queries ====================

    def find_all(self) -> List[Item]:
        with self._lock:
            return self._load()

    def find_by_id(self, item_id: str) -> Optional[Item]:
        _require_id(item_id)
        with self._lock:
            return next((item for item in self._load() if item.id == item_id), None)

    # ==================== Commands ====================

    def create(self, payload: ItemCreate) -> Item:
        """
        Add a new item.

        Raises:
            ValidationError: Blank name, weight <= 0 or a name already in use
        """
        if payload.name is None or not payload.name.strip():
            raise ValidationError("Item name is required")
        if payload.unit_weight_grams <= 0:
            raise ValidationError("Item unit weight must be greater than 0")

        with self._lock:
            items = self._load()
            if any(item.name == payload.name for item in items):
                raise ValidationError(f"Item with name {payload.name} already exists")

            item = Item(
                id=str(uuid.uuid4()),
                name=payload.name,
                description=payload.description,
                unit_weight_grams=payload.unit_weight_grams,
            )
            items.append(item)
            self._save(items)

        logger.info(f"Created item {item.id} ({item.name})")
        return item

    def update(self, item_id: str, payload: ItemUpdate) -> Item:
        """
        Partially update an item.

        A blank name or a weight <= 0 keeps the stored value; a missing
        description keeps the stored description.

        Raises:
            ValidationError: The new name belongs to another item
            NotFoundError: No item has this id
        """
        _require_id(item_id)
        renamed = payload.name is not None and bool(payload.name.strip())

        with self._lock:
            items = self._load()
            if renamed and any(item.name == payload.name and item.id != item_id for item in items):
                raise ValidationError(f"Item with name {payload.name} already exists")

            index = next((i for i, item in enumerate(items) if item.id == item_id), None)
            if index is None:
                raise NotFoundError(f"Item with id {item_id} not found")

            existing = items[index]
            updated = Item(
                id=existing.id,
                name=payload.name if renamed else existing.name,
                description=payload.description if payload.description is not None else existing.description,
                unit_weight_grams=(
                    payload.unit_weight_grams if payload.unit_weight_grams > 0 else existing.unit_weight_grams
                ),
            )
            items[index] = updated
            self._save(items)

        logger.info(f"Updated item {item_id}")
        return updated

    def delete(self, item_id: str) -> None:
        """Remove an item; unknown ids are ignored."""
        _require_id(item_id)
        with self._lock:
            items = self._load()
            remaining = [item for item in items if item.id != item_id]
            if len(remaining) == len(items):
                return
            self._save(remaining)
        logger.info(f"Deleted item {item_id}")
