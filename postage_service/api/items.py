"""
Items API Endpoints

Endpoints:
- GET    /api/items       - List items
- POST   /api/items       - Create an item
- GET    /api/items/{id}  - Read an item
- PUT    /api/items/{id}  - Partially update an item
- DELETE /api/items/{id}  - Delete an item (idempotent)

Handlers are plain functions: the JSON stores block on file I/O, so FastAPI
runs them in its threadpool.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from postage_service.api.deps import get_item_store
from postage_service.core.errors import NotFoundError
from postage_service.schemas.catalog import Item, ItemCreate, ItemUpdate
from postage_service.stores.items import ItemStore

router = APIRouter()


@router.get("", response_model=List[Item], response_model_by_alias=True)
def list_items(store: ItemStore = Depends(get_item_store)):
    return store.find_all()


@router.post("", response_model=Item, response_model_by_alias=True, status_code=status.HTTP_201_CREATED)
def create_item(payload: ItemCreate, store: ItemStore = Depends(get_item_store)):
    return store.create(payload)


@router.get("/{item_id}", response_model=Item, response_model_by_alias=True)
def get_item(item_id: str, store: ItemStore = Depends(get_item_store)):
    item = store.find_by_id(item_id)
    if item is None:
        raise NotFoundError(f"Item with id {item_id} not found")
    return item


@router.put("/{item_id}", response_model=Item, response_model_by_alias=True)
def update_item(item_id: str, payload: ItemUpdate, store: ItemStore = Depends(get_item_store)):
    return store.update(item_id, payload)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: str, store: ItemStore = Depends(get_item_store)):
    store.delete(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
