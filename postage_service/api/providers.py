"""
Providers API Endpoints

Endpoints:
- GET /api/providers - Registered carriers with their enabled flag and
  whether credentials are configured (secrets are never returned)
"""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import Field

from postage_service.api.deps import get_orchestrator
from postage_service.orchestrator.quote_orchestrator import QuoteOrchestrator
from postage_service.providers.registry import list_providers
from postage_service.schemas.base import ApiModel

router = APIRouter()


class ProviderStatus(ApiModel):
    name: str = Field(..., description="Provider identifier")
    carrier: str = Field(..., description="Carrier label on quotes")
    enabled: bool
    credentials_configured: bool
    primary: bool = Field(False, description="Receives the rules fallback line")


@router.get("", response_model=List[ProviderStatus], response_model_by_alias=True)
async def get_providers(orchestrator: QuoteOrchestrator = Depends(get_orchestrator)):
    entries = list_providers(orchestrator.provider_config, orchestrator.registry)
    return [
        ProviderStatus(**entry, primary=entry["name"] == orchestrator.primary_carrier)
        for entry in entries
    ]
