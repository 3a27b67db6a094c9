from typing import List, Dict, Optional
import logging
import math

from ktm_transit.network.schemas import Stop, Route, RouteStop, TransferPoint, StopOnRoute
from ktm_transit.network.service import NetworkDataProvider
from ktm_transit.planning.schemas import RouteSegment, JourneyOption

logger = logging.getLogger(__name__)

MAX_JOURNEY_OPTIONS = 5

BASE_SCORE = 100
COMPLEXITY_SCORE = {"direct": 30, "simple": 10, "complex": -20}
TRANSFER_PENALTY = 15
MAJOR_STOP_BONUS = 5
FREQUENT_SERVICE_THRESHOLD_MINUTES = 20


class RoutePlanningEngine:
    """Enumerates and ranks itineraries with up to two transfers"""

    def __init__(self, network: NetworkDataProvider):
        self.network = network
        self.routes: List[Route] = network.get_bus_routes()
        self.transfer_points: List[TransferPoint] = network.get_transfer_points()

        # (route_id, stop_id) -> first RouteStop row for that pair
        self._route_stop_index: Dict[tuple, RouteStop] = {}
        for rs in network.get_route_stops():
            self._route_stop_index.setdefault((rs.route_id, rs.stop_id), rs)

    def find_journey_options(self, from_stop: Stop, to_stop: Stop) -> List[JourneyOption]:
        """Find up to five journey options between two stops, best first"""
        journey_options: List[JourneyOption] = []

        journey_options.extend(self._find_direct_routes(from_stop, to_stop))
        journey_options.extend(self._find_one_transfer_routes(from_stop, to_stop))
        journey_options.extend(self._find_two_transfer_routes(from_stop, to_stop))

        ranked = self._rank_journey_options(journey_options)
        logger.debug(
            "Journey %s -> %s: %d candidates", from_stop.id, to_stop.id, len(ranked)
        )
        return ranked[:MAX_JOURNEY_OPTIONS]

    def _find_direct_routes(self, from_stop: Stop, to_stop: Stop) -> List[JourneyOption]:
        """Single-route options where the route visits from_stop before to_stop"""
        direct_options = []

        for route in self.routes:
            from_rs = self._route_stop_index.get((route.id, from_stop.id))
            to_rs = self._route_stop_index.get((route.id, to_stop.id))

            if not from_rs or not to_rs or from_rs.stop_sequence >= to_rs.stop_sequence:
                continue

            segment = RouteSegment(
                route=route,
                from_stop=from_stop,
                to_stop=to_stop,
                from_sequence=from_rs.stop_sequence,
                to_sequence=to_rs.stop_sequence,
                duration_minutes=to_rs.estimated_travel_time_minutes - from_rs.estimated_travel_time_minutes,
                distance_km=to_rs.distance_from_start_km - from_rs.distance_from_start_km,
                fare=to_rs.fare_from_start - from_rs.fare_from_start
            )

            direct_options.append(JourneyOption(
                id=f"direct-{route.id}-{from_stop.id}-{to_stop.id}",
                segments=[segment],
                # Half the headway is the expected wait for a random arrival
                total_duration_minutes=segment.duration_minutes + route.frequency_minutes / 2,
                total_fare=segment.fare,
                total_distance_km=segment.distance_km,
                transfer_count=0,
                transfer_points=[],
                route_complexity="direct"
            ))

        return direct_options

    def _find_one_transfer_routes(self, from_stop: Stop, to_stop: Stop) -> List[JourneyOption]:
        one_transfer_options = []

        for transfer_point in self.transfer_points:
            transfer_stop = self.network.get_stop_by_id(transfer_point.stop_id)
            if not transfer_stop:
                continue

            first_legs = self._find_direct_routes(from_stop, transfer_stop)
            second_legs = self._find_direct_routes(transfer_stop, to_stop)

            for first in first_legs:
                for second in second_legs:
                    first_route_id = first.segments[0].route.id
                    second_route_id = second.segments[0].route.id
                    if first_route_id == second_route_id:
                        continue

                    one_transfer_options.append(JourneyOption(
                        id=f"transfer-{first_route_id}-{second_route_id}-{from_stop.id}-{to_stop.id}",
                        segments=first.segments + second.segments,
                        total_duration_minutes=(
                            first.total_duration_minutes
                            + second.total_duration_minutes
                            + transfer_point.transfer_time_minutes
                        ),
                        total_fare=first.total_fare + second.total_fare,
                        total_distance_km=first.total_distance_km + second.total_distance_km,
                        transfer_count=1,
                        transfer_points=[transfer_stop],
                        route_complexity="simple"
                    ))

        return one_transfer_options

    def _find_two_transfer_routes(self, from_stop: Stop, to_stop: Stop) -> List[JourneyOption]:
        """Origin -> hub -> hub -> destination, restricted to major hubs"""
        two_transfer_options = []
        major_hubs = [tp for tp in self.transfer_points if tp.is_major_hub]

        for i, first_hub in enumerate(major_hubs):
            for second_hub in major_hubs[i + 1:]:
                first_transfer = self.network.get_stop_by_id(first_hub.stop_id)
                second_transfer = self.network.get_stop_by_id(second_hub.stop_id)
                if not first_transfer or not second_transfer:
                    continue

                first_legs = self._find_direct_routes(from_stop, first_transfer)
                second_legs = self._find_direct_routes(first_transfer, second_transfer)
                third_legs = self._find_direct_routes(second_transfer, to_stop)

                for first in first_legs:
                    for second in second_legs:
                        for third in third_legs:
                            route_ids = [
                                first.segments[0].route.id,
                                second.segments[0].route.id,
                                third.segments[0].route.id,
                            ]
                            if len(set(route_ids)) != 3:
                                continue

                            two_transfer_options.append(JourneyOption(
                                id="complex-{}-{}-{}".format(
                                    "-".join(str(r) for r in route_ids), from_stop.id, to_stop.id
                                ),
                                segments=first.segments + second.segments + third.segments,
                                total_duration_minutes=(
                                    first.total_duration_minutes
                                    + second.total_duration_minutes
                                    + third.total_duration_minutes
                                    + first_hub.transfer_time_minutes
                                    + second_hub.transfer_time_minutes
                                ),
                                total_fare=first.total_fare + second.total_fare + third.total_fare,
                                total_distance_km=(
                                    first.total_distance_km
                                    + second.total_distance_km
                                    + third.total_distance_km
                                ),
                                transfer_count=2,
                                transfer_points=[first_transfer, second_transfer],
                                route_complexity="complex"
                            ))

        return two_transfer_options

    def _calculate_recommended_score(self, option: JourneyOption) -> int:
        score = BASE_SCORE + COMPLEXITY_SCORE[option.route_complexity]

        score -= math.floor(option.total_duration_minutes / 10)
        score -= math.floor(option.total_fare / 5)
        score -= option.transfer_count * TRANSFER_PENALTY

        for segment in option.segments:
            if segment.from_stop.is_major_stop:
                score += MAJOR_STOP_BONUS
            if segment.to_stop.is_major_stop:
                score += MAJOR_STOP_BONUS
            score += max(0, FREQUENT_SERVICE_THRESHOLD_MINUTES - segment.route.frequency_minutes)

        return max(0, score)

    def _rank_journey_options(self, options: List[JourneyOption]) -> List[JourneyOption]:
        """Score every option and sort best first; ties keep discovery order"""
        scored = [
            option.model_copy(update={"recommended_score": self._calculate_recommended_score(option)})
            for option in options
        ]
        return sorted(scored, key=lambda option: option.recommended_score, reverse=True)

    def get_route_details(self, route_number: str) -> Optional[Route]:
        for route in self.routes:
            if route.route_number == route_number:
                return route
        return None

    def get_route_stops(self, route_id: int) -> List[StopOnRoute]:
        """Stops of a route ordered by sequence, with cumulative fare"""
        return self.network.get_stops_for_route(route_id)

    def find_nearby_stops(self, latitude: float, longitude: float, radius_km: float = 1.0) -> List[Stop]:
        """Stops within radius_km of a point, nearest first"""
        return self.network.get_nearby_stops(latitude, longitude, radius_km)
