"""
Packaging API Endpoints

Endpoints:
- GET    /api/packaging       - List packaging options
- POST   /api/packaging       - Create packaging
- GET    /api/packaging/{id}  - Read packaging
- PUT    /api/packaging/{id}  - Partially update packaging
- DELETE /api/packaging/{id}  - Delete packaging (idempotent)

Handlers are plain functions: the JSON stores block on file I/O, so FastAPI
runs them in its threadpool.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from postage_service.api.deps import get_packaging_store
from postage_service.core.errors import NotFoundError
from postage_service.schemas.catalog import Packaging, PackagingCreate, PackagingUpdate
from postage_service.stores.packaging import PackagingStore

router = APIRouter()


@router.get("", response_model=List[Packaging], response_model_by_alias=True)
def list_packaging(store: PackagingStore = Depends(get_packaging_store)):
    return store.find_all()


@router.post("", response_model=Packaging, response_model_by_alias=True, status_code=status.HTTP_201_CREATED)
def create_packaging(payload: PackagingCreate, store: PackagingStore = Depends(get_packaging_store)):
    return store.create(payload)


@router.get("/{packaging_id}", response_model=Packaging, response_model_by_alias=True)
def get_packaging(packaging_id: str, store: PackagingStore = Depends(get_packaging_store)):
    packaging = store.find_by_id(packaging_id)
    if packaging is None:
        raise NotFoundError(f"Packaging with id {packaging_id} not found")
    return packaging


@router.put("/{packaging_id}", response_model=Packaging, response_model_by_alias=True)
def update_packaging(
    packaging_id: str,
    payload: PackagingUpdate,
    store: PackagingStore = Depends(get_packaging_store)
):
    return store.update(packaging_id, payload)


@router.delete("/{packaging_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_packaging(packaging_id: str, store: PackagingStore = Depends(get_packaging_store)):
    store.delete(packaging_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
