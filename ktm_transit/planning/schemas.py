from pydantic import BaseModel, Field
from typing import List, Optional, Literal

from ktm_transit.network.schemas import Stop, Route

PassengerType = Literal["regular", "student", "senior"]

class RouteSegment(BaseModel):
    """One ride on one route between two of its stops"""
    route: Route
    from_stop: Stop
    to_stop: Stop
    from_sequence: int
    to_sequence: int
    duration_minutes: float
    distance_km: float
    fare: float

    class Config:
        frozen = True

class JourneyOption(BaseModel):
    """Complete candidate itinerary between an origin and a destination"""
    id: str
    segments: List[RouteSegment]
    total_duration_minutes: float
    total_fare: float
    total_distance_km: float
    transfer_count: int
    transfer_points: List[Stop] = []
    route_complexity: Literal["direct", "simple", "complex"]
    recommended_score: int = 0

    class Config:
        frozen = True

class JourneyRequest(BaseModel):
    """Request schema for journey planning"""
    from_stop_id: int
    to_stop_id: int

class JourneyPlanResponse(BaseModel):
    """Response schema for journey planning"""
    from_stop: Stop
    to_stop: Stop
    options: List[JourneyOption]
    total_options: int
    calculation_time_ms: int

class JourneyValidationError(BaseModel):
    """Journey request validation error details"""
    error_code: str
    error_message: str
    field: Optional[str] = None

# Fares

class FareSegmentInput(BaseModel):
    """Per-route ride that the fare calculator prices"""
    route_id: int
    route_number: str = ""
    route_name: str = ""
    distance_km: float = Field(..., ge=0)

class FareBreakdown(BaseModel):
    base_fare: int
    student_fare: int
    senior_fare: int
    distance_km: float
    route_number: str
    route_name: str

class FareSavings(BaseModel):
    student_savings: int
    senior_savings: int
    student_percentage: int
    senior_percentage: int

class FareZone(BaseModel):
    zone_name: str
    distance_range: str
    base_fare: int

class JourneyFareCalculation(BaseModel):
    """Fare breakdown of a whole journey for every passenger class"""
    total_base_fare: int
    total_student_fare: int
    total_senior_fare: int
    segments: List[FareBreakdown]
    savings: FareSavings
    fare_zones: List[FareZone]

class FareCalculationRequest(BaseModel):
    segments: List[FareSegmentInput]

class FareJourneyInput(BaseModel):
    id: str
    segments: List[FareSegmentInput]

class FareComparisonRequest(BaseModel):
    journeys: List[FareJourneyInput]

class FareComparison(BaseModel):
    journey_id: str
    fare_calculation: JourneyFareCalculation
    is_cheapest: bool
    savings_vs_most_expensive: int

class DistanceFareEstimate(BaseModel):
    base: int
    student: int
    senior: int

class DiscountInfo(BaseModel):
    passenger_type: PassengerType
    discount_percentage: int
    description: str
    requirements: List[str]

class JourneyFareResponse(BaseModel):
    """Best journey between two stops together with its fare"""
    journey: JourneyOption
    fare_calculation: JourneyFareCalculation
    passenger_type: PassengerType
    fare: int
    savings: int
