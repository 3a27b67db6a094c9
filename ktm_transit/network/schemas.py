from pydantic import BaseModel
from typing import List, Optional
from datetime import date

class StopFacilities(BaseModel):
    wheelchair_accessible: Optional[bool] = None
    shelter: Optional[bool] = None
    seating: Optional[bool] = None
    restrooms: Optional[bool] = None

    class Config:
        frozen = True

class Stop(BaseModel):
    """Physical bus stop"""
    id: int
    stop_name: str
    stop_code: str
    latitude: float
    longitude: float
    address: str = ""
    landmarks: str = ""
    district: Optional[str] = None
    zone: Optional[str] = None
    is_major_stop: bool = False
    facilities: StopFacilities = StopFacilities()

    class Config:
        frozen = True
        from_attributes = True

class Route(BaseModel):
    """Fixed bus line running one direction along an ordered list of stops"""
    id: int
    route_number: str
    route_name: str
    start_location: str
    end_location: str
    total_distance_km: float
    estimated_duration_minutes: int
    operating_hours_start: Optional[str] = None
    operating_hours_end: Optional[str] = None
    frequency_minutes: int

    class Config:
        frozen = True
        from_attributes = True

class RouteStop(BaseModel):
    """Position of a stop on a route with cumulative values from the route start"""
    route_id: int
    stop_id: int
    stop_sequence: int
    distance_from_start_km: float
    estimated_travel_time_minutes: int
    fare_from_start: float

    class Config:
        frozen = True
        from_attributes = True

class TransferPoint(BaseModel):
    stop_id: int
    connecting_routes: List[int] = []
    transfer_time_minutes: int
    is_major_hub: bool = False

    class Config:
        frozen = True
        from_attributes = True

class FareStructure(BaseModel):
    """Fare band for a distance range on one route"""
    id: int
    route_id: int
    distance_range_start_km: float
    distance_range_end_km: float
    base_fare: int
    student_fare: int
    senior_fare: int
    effective_from: date
    effective_until: Optional[date] = None
    is_active: bool = True

    class Config:
        frozen = True
        from_attributes = True

class Bus(BaseModel):
    id: int
    bus_number: str
    route_id: int
    bus_type: Optional[str] = None
    capacity: Optional[int] = None
    operator: Optional[str] = None
    status: str = "active"

    class Config:
        frozen = True
        from_attributes = True

class StopOnRoute(BaseModel):
    """A stop as seen from one route: the base stop plus its cumulative values"""
    stop: Stop
    route_id: int
    sequence: int
    distance_from_start_km: float
    estimated_travel_time_minutes: int
    fare: float

    class Config:
        frozen = True

class NearbyStop(BaseModel):
    stop: Stop
    distance_km: float
