"""
Orchestrator Package

QuoteOrchestrator fans a shipment out to the enabled carrier providers and
falls back to bracket pricing for the primary carrier.
"""

from postage_service.orchestrator.quote_orchestrator import QuoteOrchestrator, validate_request

__all__ = ["QuoteOrchestrator", "validate_request"]
