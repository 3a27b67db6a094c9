"""
Real-time Module

Mock live data for the bus network: arrivals, service alerts, bus tracking,
occupancy and overall system status, served with simulated latency. A
periodic update loop jitters delays and occupancy to mimic a live feed.

Key Components:
- service.py: RealTimeService and the default mock snapshot
- router.py: FastAPI endpoints for live data
- schemas.py: Pydantic models for tracking, alerts and arrivals
"""

from .router import router
from .service import RealTimeService, default_bus_tracking, default_service_alerts
from .schemas import (
    BusTracking, ServiceAlert, LiveArrival, BusOccupancy, SystemStatus,
    RealTimeSnapshot, OccupancyLevel, AlertSeverity
)

__all__ = [
    "router",
    "RealTimeService",
    "default_bus_tracking",
    "default_service_alerts",
    "BusTracking",
    "ServiceAlert",
    "LiveArrival",
    "BusOccupancy",
    "SystemStatus",
    "RealTimeSnapshot",
    "OccupancyLevel",
    "AlertSeverity"
]
