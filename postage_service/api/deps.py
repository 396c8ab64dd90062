"""
API Dependencies

Lazily created singletons handed to endpoints through FastAPI Depends().
Tests swap them with app.dependency_overrides or reset them with
clear_instances().
"""

import logging
from typing import Optional

from fastapi import Request

from postage_service.algorithms.weight_brackets import load_brackets
from postage_service.core.config import settings
from postage_service.orchestrator.quote_orchestrator import QuoteOrchestrator
from postage_service.providers.base import ProviderConfig
from postage_service.providers.registry import get_registry
from postage_service.stores.items import ItemStore
from postage_service.stores.packaging import PackagingStore
from postage_service.stores.settings import SettingsStore

logger = logging.getLogger(__name__)

_item_store: Optional[ItemStore] = None
_packaging_store: Optional[PackagingStore] = None
_settings_store: Optional[SettingsStore] = None
_orchestrator: Optional[QuoteOrchestrator] = None


def get_trace_id(request: Request) -> str:
    """Trace ID assigned by the request middleware."""
    return getattr(request.state, "trace_id", None) or request.headers.get("x-request-id", "-")


def get_item_store() -> ItemStore:
    global _item_store
    if _item_store is None:
        _item_store = ItemStore()
    return _item_store


def get_packaging_store() -> PackagingStore:
    global _packaging_store
    if _packaging_store is None:
        _packaging_store = PackagingStore()
    return _packaging_store


def get_settings_store() -> SettingsStore:
    global _settings_store
    if _settings_store is None:
        _settings_store = SettingsStore()
    return _settings_store


def get_provider_config() -> ProviderConfig:
    """Allow-list from the <NAME>_ENABLED variables."""
    return ProviderConfig.from_env()


def get_orchestrator() -> QuoteOrchestrator:
    """
    Shared QuoteOrchestrator.

    The bracket table (WEIGHT_BRACKETS_PATH or built-in) is loaded once here.
    """
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = QuoteOrchestrator(
            registry=get_registry(),
            item_store=get_item_store(),
            packaging_store=get_packaging_store(),
            settings_store=get_settings_store(),
            brackets=load_brackets(settings.WEIGHT_BRACKETS_PATH),
            provider_config=get_provider_config(),
        )
        logger.info(f"Initialized quote orchestrator (primary carrier: {_orchestrator.primary_carrier})")
    return _orchestrator


def clear_instances() -> None:
    """Drop every cached dependency. Useful for testing."""
    global _item_store, _packaging_store, _settings_store, _orchestrator
    _item_store = None
    _packaging_store = None
    _settings_store = None
    _orchestrator = None
