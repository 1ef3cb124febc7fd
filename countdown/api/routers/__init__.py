"""API Routers package

Routers are organized by audience: admin timer management, the
unauthenticated storefront endpoint and the health probes.
"""

from . import public_router, system_router, timers_router

__all__ = [
    "public_router",
    "system_router",
    "timers_router",
]
