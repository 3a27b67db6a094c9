from pydantic import BaseModel
from typing import List, Optional, Literal
from datetime import datetime
from enum import Enum

class OccupancyLevel(str, Enum):
    """Bus occupancy levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    FULL = "full"

class AlertSeverity(str, Enum):
    """Service alert severity levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class BusTracking(BaseModel):
    """Last known position of a tracked bus"""
    id: int
    route_id: int
    route_number: str
    bus_number: str
    current_stop_id: int
    current_stop_name: str
    next_stop_id: int
    next_stop_name: str
    estimated_arrival_time: datetime
    delay_minutes: int
    occupancy_level: OccupancyLevel
    last_updated: datetime

class ServiceAlert(BaseModel):
    """Service alert/disruption information"""
    id: str
    type: Literal["delay", "disruption", "maintenance", "weather", "accident"]
    severity: AlertSeverity
    title: str
    description: str
    affected_routes: List[str] = []
    affected_stops: List[str] = []
    start_time: datetime
    end_time: Optional[datetime] = None
    is_active: bool = True

class LiveArrival(BaseModel):
    route_number: str
    bus_number: str
    estimated_minutes: int
    delay_minutes: int
    occupancy_level: OccupancyLevel
    is_real_time: bool

class BusOccupancy(BaseModel):
    occupancy_level: OccupancyLevel
    percentage: int
    last_updated: datetime

class SystemStatus(BaseModel):
    total_buses_tracked: int
    active_alerts: int
    system_health: Literal["good", "degraded", "poor"]
    last_updated: datetime

class RealTimeSnapshot(BaseModel):
    """Payload pushed to update subscribers"""
    bus_tracking: List[BusTracking]
    alerts: List[ServiceAlert]
