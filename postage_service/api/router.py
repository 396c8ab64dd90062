"""
Central API Router

Aggregates every endpoint router under /api.
"""

import importlib
import logging
from fastapi import APIRouter

logger = logging.getLogger(__name__)

# Main API router
api_router = APIRouter(prefix="/api")

# Router configurations: (module_name, prefix, tags)
ROUTER_CONFIGS = [
    ("quotes", "/quotes", ["Quotes"]),
    ("providers", "/providers", ["Providers"]),
    ("items", "/items", ["Items"]),
    ("packaging", "/packaging", ["Packaging"]),
    ("settings", "/settings", ["Settings"]),
]


def _include_router(module_name: str, prefix: str, tags: list) -> None:
    """Import postage_service.api.<module_name> and mount its router."""
    module = importlib.import_module(f"postage_service.api.{module_name}")
    api_router.include_router(module.router, prefix=prefix, tags=tags)
    logger.info(f"Registered {module_name} router at /api{prefix}")


for module_name, prefix, tags in ROUTER_CONFIGS:
    _include_router(module_name, prefix, tags)

logger.info(f"API router initialized with {len(api_router.routes)} routes")
