"""
Tools Package

Carrier HTTP plumbing shared by the providers.

NOTE: Clients are NOT created at import time.
Import as needed: `from postage_service.tools import carrier_http`
"""

from postage_service.tools.carrier_http import aclose_all_clients

__all__ = ["aclose_all_clients"]
