"""
Quotes API Endpoints

Endpoints:
- POST /api/quotes - Quote a shipment across the enabled carriers

Errors are rendered by core.errors handlers: 400 for validation problems and
unpriceable shipments, 500 when no origin is configured.
"""

import logging

from fastapi import APIRouter, Depends, Request

from postage_service.api.deps import get_orchestrator, get_trace_id
from postage_service.orchestrator.quote_orchestrator import QuoteOrchestrator
from postage_service.schemas.quotes import QuoteResult
from postage_service.schemas.shipment import ShipmentRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=QuoteResult, response_model_by_alias=True)
async def calculate_quote(
    payload: ShipmentRequest,
    request: Request,
    orchestrator: QuoteOrchestrator = Depends(get_orchestrator)
):
    """
    Quote a shipment.

    Returns every carrier line in provider order. When the primary carrier
    has no live quote, its line is priced from the weight brackets and marked
    ruleFallbackUsed.
    """
    trace_id = get_trace_id(request)
    logger.info(f"[{trace_id[:8]}] Quote request to {payload.destination_postcode}, {len(payload.items)} item line(s)")

    result = await orchestrator.calculate_quote(payload)

    logger.info(f"[{trace_id[:8]}] Returned {len(result.carrier_quotes)} carrier quote(s)")
    return result
