"""
API Package

FastAPI routers for quoting, the item/packaging catalog and settings.
All routers are mounted under /api by router.api_router.
"""
