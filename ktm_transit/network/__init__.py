"""
Transit Network Module

Read-only access to the bus network tables: routes, stops, the route-stop
join, transfer points, fare bands and the bus fleet.

Key Components:
- service.py: NetworkDataProvider, in-memory tables loaded once at startup
- seed.py: JSON fixture loading and database seeding
- geo.py: Haversine distance helper
- router.py: FastAPI endpoints for stop and route lookup
- schemas.py: Pydantic records for the network tables
"""

from .router import router
from .service import NetworkDataProvider
from .seed import seed_network, load_fixtures
from .schemas import (
    Stop, StopFacilities, Route, RouteStop, TransferPoint, FareStructure, Bus,
    StopOnRoute, NearbyStop
)

__all__ = [
    "router",
    "NetworkDataProvider",
    "seed_network",
    "load_fixtures",
    "Stop",
    "StopFacilities",
    "Route",
    "RouteStop",
    "TransferPoint",
    "FareStructure",
    "Bus",
    "StopOnRoute",
    "NearbyStop"
]
