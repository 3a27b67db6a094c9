from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List
import logging
import time

from ktm_transit.dependencies import get_network, get_planning_engine, get_fare_calculator
from ktm_transit.network.schemas import FareStructure
from ktm_transit.network.service import NetworkDataProvider
from ktm_transit.planning.schemas import (
    JourneyRequest, JourneyPlanResponse, JourneyFareResponse, PassengerType,
    FareCalculationRequest, JourneyFareCalculation, FareComparisonRequest,
    FareComparison, DiscountInfo, DistanceFareEstimate
)
from ktm_transit.planning.service import RoutePlanningEngine
from ktm_transit.planning.fare_service import FareCalculator, fare_segments_from_journey
from ktm_transit.planning.validation import JourneyValidator

logger = logging.getLogger(__name__)

journeys_router = APIRouter()
fares_router = APIRouter()

def _validated_stops(request: JourneyRequest, network: NetworkDataProvider):
    validator = JourneyValidator(network)
    validation_errors = validator.validate_journey_request(request)

    if validation_errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Journey request validation failed",
                "errors": [
                    {
                        "code": error.error_code,
                        "message": error.error_message,
                        "field": error.field
                    }
                    for error in validation_errors
                ]
            }
        )

    return network.get_stop_by_id(request.from_stop_id), network.get_stop_by_id(request.to_stop_id)

@journeys_router.post("/plan", response_model=JourneyPlanResponse)
def plan_journey(
    request: JourneyRequest,
    network: NetworkDataProvider = Depends(get_network),
    engine: RoutePlanningEngine = Depends(get_planning_engine)
):
    """Plan up to five journeys between two stops, best first"""

    start_time = time.time()
    from_stop, to_stop = _validated_stops(request, network)

    options = engine.find_journey_options(from_stop, to_stop)
    calculation_time = int((time.time() - start_time) * 1000)

    logger.info(
        "Planned %s -> %s: %d options in %dms",
        from_stop.stop_code, to_stop.stop_code, len(options), calculation_time
    )

    return JourneyPlanResponse(
        from_stop=from_stop,
        to_stop=to_stop,
        options=options,
        total_options=len(options),
        calculation_time_ms=calculation_time
    )

@fares_router.post("/calculate", response_model=JourneyFareCalculation)
def calculate_fare(
    request: FareCalculationRequest,
    calculator: FareCalculator = Depends(get_fare_calculator)
):
    """Calculate the fare breakdown for explicit journey segments"""

    if not request.segments:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Journey segments are required for fare calculation"
        )

    return calculator.calculate_journey_fare(request.segments)

@fares_router.get("/journey", response_model=JourneyFareResponse)
def get_journey_fare(
    from_stop_id: int = Query(..., description="Origin stop ID"),
    to_stop_id: int = Query(..., description="Destination stop ID"),
    passenger_type: PassengerType = Query("regular", description="Passenger type"),
    network: NetworkDataProvider = Depends(get_network),
    engine: RoutePlanningEngine = Depends(get_planning_engine),
    calculator: FareCalculator = Depends(get_fare_calculator)
):
    """Fare of the best journey between two stops"""

    from_stop, to_stop = _validated_stops(
        JourneyRequest(from_stop_id=from_stop_id, to_stop_id=to_stop_id), network
    )

    options = engine.find_journey_options(from_stop, to_stop)
    if not options:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No routes found between selected locations"
        )

    best_journey = options[0]
    calculation = calculator.calculate_journey_fare(fare_segments_from_journey(best_journey))
    fare = calculator.get_fare_for_passenger_type(calculation, passenger_type)

    return JourneyFareResponse(
        journey=best_journey,
        fare_calculation=calculation,
        passenger_type=passenger_type,
        fare=fare,
        savings=calculation.total_base_fare - fare
    )

@fares_router.post("/compare", response_model=List[FareComparison])
def compare_fares(
    request: FareComparisonRequest,
    calculator: FareCalculator = Depends(get_fare_calculator)
):
    """Compare fares across several journeys"""

    if len(request.journeys) > 10:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot compare more than 10 journeys at once"
        )

    return calculator.compare_fares(request.journeys)

@fares_router.get("/discounts", response_model=List[DiscountInfo])
def get_discounts(calculator: FareCalculator = Depends(get_fare_calculator)):
    """Available passenger discounts and their requirements"""
    return calculator.get_discount_info()

@fares_router.get("/routes/{route_id}", response_model=List[FareStructure])
def get_route_fare_structure(
    route_id: int,
    network: NetworkDataProvider = Depends(get_network),
    calculator: FareCalculator = Depends(get_fare_calculator)
):
    if not network.get_route_by_id(route_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Route with ID {route_id} not found"
        )
    return calculator.get_route_fare_structure(route_id)

@fares_router.get("/estimate", response_model=DistanceFareEstimate)
def estimate_fare(
    distance_km: float = Query(..., ge=0, le=200, description="Journey distance in kilometers"),
    calculator: FareCalculator = Depends(get_fare_calculator)
):
    return calculator.calculate_distance_based_fare(distance_km)
