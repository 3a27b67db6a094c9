from typing import List, Iterable
import logging
import math

from ktm_transit.network.schemas import FareStructure
from ktm_transit.planning.schemas import (
    JourneyOption, FareSegmentInput, FareBreakdown, FareSavings, FareZone,
    JourneyFareCalculation, FareJourneyInput, FareComparison, DistanceFareEstimate,
    DiscountInfo
)

logger = logging.getLogger(__name__)

FALLBACK_FARE_PER_KM = 2.5
MINIMUM_FALLBACK_FARE = 10
STUDENT_FARE_RATIO = 0.7
SENIOR_FARE_RATIO = 0.85

# Display-only zone table keyed on total journey distance
FARE_ZONES = [
    FareZone(zone_name="Zone 1", distance_range="0-5 km", base_fare=15),
    FareZone(zone_name="Zone 2", distance_range="5-10 km", base_fare=20),
    FareZone(zone_name="Zone 3", distance_range="10-15 km", base_fare=25),
    FareZone(zone_name="Zone 4", distance_range="15+ km", base_fare=30),
]

DISTANCE_FARE_TIERS = [(5, 15), (10, 20), (15, 25), (20, 30)]
DISTANCE_FARE_MAX = 35


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def fare_segments_from_journey(option: JourneyOption) -> List[FareSegmentInput]:
    """Per-route fare inputs for the segments of a planned journey"""
    return [
        FareSegmentInput(
            route_id=segment.route.id,
            route_number=segment.route.route_number,
            route_name=segment.route.route_name,
            distance_km=segment.distance_km
        )
        for segment in option.segments
    ]


class FareCalculator:
    """Prices journeys for regular, student and senior passengers"""

    def __init__(self, fare_structures: Iterable[FareStructure]):
        self.fare_structures: List[FareStructure] = list(fare_structures)

    def calculate_segment_fare(
        self,
        route_id: int,
        distance_km: float,
        route_number: str = "",
        route_name: str = ""
    ) -> FareBreakdown:
        """Fare for one ride; first matching active band wins, else distance fallback"""
        for band in self.fare_structures:
            if (
                band.route_id == route_id
                and band.is_active
                and band.distance_range_start_km <= distance_km <= band.distance_range_end_km
            ):
                return FareBreakdown(
                    base_fare=band.base_fare,
                    student_fare=band.student_fare,
                    senior_fare=band.senior_fare,
                    distance_km=distance_km,
                    route_number=route_number,
                    route_name=route_name
                )

        logger.debug("No fare band for route %s at %.2f km, using fallback", route_id, distance_km)
        base_fare = max(MINIMUM_FALLBACK_FARE, math.ceil(distance_km * FALLBACK_FARE_PER_KM))
        return FareBreakdown(
            base_fare=base_fare,
            student_fare=math.ceil(base_fare * STUDENT_FARE_RATIO),
            senior_fare=math.ceil(base_fare * SENIOR_FARE_RATIO),
            distance_km=distance_km,
            route_number=route_number,
            route_name=route_name
        )

    def calculate_journey_fare(self, segments: List[FareSegmentInput]) -> JourneyFareCalculation:
        """Total fare, savings and display zones for a multi-segment journey"""
        breakdowns = []
        total_base_fare = 0
        total_student_fare = 0
        total_senior_fare = 0

        for segment in segments:
            segment_fare = self.calculate_segment_fare(
                segment.route_id,
                segment.distance_km,
                segment.route_number,
                segment.route_name
            )
            breakdowns.append(segment_fare)
            total_base_fare += segment_fare.base_fare
            total_student_fare += segment_fare.student_fare
            total_senior_fare += segment_fare.senior_fare

        student_savings = total_base_fare - total_student_fare
        senior_savings = total_base_fare - total_senior_fare

        if total_base_fare > 0:
            student_percentage = round_half_up(student_savings / total_base_fare * 100)
            senior_percentage = round_half_up(senior_savings / total_base_fare * 100)
        else:
            student_percentage = 0
            senior_percentage = 0

        total_distance = sum(segment.distance_km for segment in segments)

        return JourneyFareCalculation(
            total_base_fare=total_base_fare,
            total_student_fare=total_student_fare,
            total_senior_fare=total_senior_fare,
            segments=breakdowns,
            savings=FareSavings(
                student_savings=student_savings,
                senior_savings=senior_savings,
                student_percentage=student_percentage,
                senior_percentage=senior_percentage
            ),
            fare_zones=self._generate_fare_zones(total_distance)
        )

    def get_fare_for_passenger_type(
        self,
        fare_calculation: JourneyFareCalculation,
        passenger_type: str
    ) -> int:
        if passenger_type == "student":
            return fare_calculation.total_student_fare
        elif passenger_type == "senior":
            return fare_calculation.total_senior_fare
        else:
            return fare_calculation.total_base_fare

    def compare_fares(self, journeys: List[FareJourneyInput]) -> List[FareComparison]:
        """Price each journey and flag the cheapest ones by base fare"""
        if not journeys:
            return []

        calculations = [
            (journey.id, self.calculate_journey_fare(journey.segments))
            for journey in journeys
        ]
        base_fares = [calculation.total_base_fare for _, calculation in calculations]
        min_fare = min(base_fares)
        max_fare = max(base_fares)

        return [
            FareComparison(
                journey_id=journey_id,
                fare_calculation=calculation,
                is_cheapest=calculation.total_base_fare == min_fare,
                savings_vs_most_expensive=max_fare - calculation.total_base_fare
            )
            for journey_id, calculation in calculations
        ]

    def get_route_fare_structure(self, route_id: int) -> List[FareStructure]:
        """Active fare bands of a route ordered by starting distance"""
        bands = [fs for fs in self.fare_structures if fs.route_id == route_id and fs.is_active]
        return sorted(bands, key=lambda fs: fs.distance_range_start_km)

    def calculate_distance_based_fare(self, distance_km: float) -> DistanceFareEstimate:
        """Route-independent estimate from a fixed distance tier table"""
        base_fare = DISTANCE_FARE_MAX
        for limit_km, tier_fare in DISTANCE_FARE_TIERS:
            if distance_km <= limit_km:
                base_fare = tier_fare
                break

        return DistanceFareEstimate(
            base=base_fare,
            student=math.ceil(base_fare * STUDENT_FARE_RATIO),
            senior=math.ceil(base_fare * SENIOR_FARE_RATIO)
        )

    def _generate_fare_zones(self, total_distance_km: float) -> List[FareZone]:
        if total_distance_km <= 5:
            zone_count = 1
        elif total_distance_km <= 10:
            zone_count = 2
        elif total_distance_km <= 15:
            zone_count = 3
        else:
            zone_count = 4
        return FARE_ZONES[:zone_count]

    def get_discount_info(self) -> List[DiscountInfo]:
        return [
            DiscountInfo(
                passenger_type="student",
                discount_percentage=30,
                description="Student Discount",
                requirements=[
                    "Valid student ID card",
                    "Currently enrolled in educational institution",
                    "Age limit: Under 25 years",
                ]
            ),
            DiscountInfo(
                passenger_type="senior",
                discount_percentage=15,
                description="Senior Citizen Discount",
                requirements=[
                    "Age 60 years and above",
                    "Valid citizenship certificate or senior citizen card",
                    "Applicable on all routes",
                ]
            ),
        ]
