"""
Journey Planning Module

This module provides journey planning and fare calculation for the Kathmandu
Valley bus network. It includes:

- Direct, one-transfer and two-transfer itinerary search
- Heuristic ranking of journey options
- Tiered fare calculation for regular, student and senior passengers
- Fare comparison across journey options

Key Components:
- service.py: RoutePlanningEngine, itinerary enumeration and ranking
- fare_service.py: FareCalculator, fare bands with a distance-based fallback
- validation.py: Journey request validation
- router.py: FastAPI endpoints for journeys and fares
- schemas.py: Pydantic models for journeys, segments and fare breakdowns
"""

from .router import journeys_router, fares_router
from .service import RoutePlanningEngine
from .fare_service import FareCalculator, fare_segments_from_journey
from .validation import JourneyValidator
from .schemas import (
    RouteSegment, JourneyOption, JourneyRequest, JourneyPlanResponse,
    FareSegmentInput, FareBreakdown, JourneyFareCalculation, FareComparison,
    DiscountInfo
)

__all__ = [
    "journeys_router",
    "fares_router",
    "RoutePlanningEngine",
    "FareCalculator",
    "fare_segments_from_journey",
    "JourneyValidator",
    "RouteSegment",
    "JourneyOption",
    "JourneyRequest",
    "JourneyPlanResponse",
    "FareSegmentInput",
    "FareBreakdown",
    "JourneyFareCalculation",
    "FareComparison",
    "DiscountInfo"
]
