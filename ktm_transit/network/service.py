from typing import List, Dict, Optional, Iterable, Tuple
from collections import defaultdict
import logging

from sqlalchemy.orm import Session
from ktm_transit import models
from ktm_transit.exceptions import NetworkDataError
from ktm_transit.network.geo import haversine_km
from ktm_transit.network.schemas import (
    Stop, Route, RouteStop, TransferPoint, FareStructure, Bus, StopOnRoute
)
from ktm_transit.network.seed import load_fixtures

logger = logging.getLogger(__name__)


class NetworkDataProvider:
    """Read-only, in-memory view of the bus network tables.

    Loaded once at startup and shared by the planning engine, the fare
    calculator and the lookup endpoints. Nothing here mutates after
    construction.
    """

    def __init__(
        self,
        routes: Iterable[Route],
        stops: Iterable[Stop],
        route_stops: Iterable[RouteStop],
        transfer_points: Iterable[TransferPoint],
        fare_structures: Iterable[FareStructure] = (),
        buses: Iterable[Bus] = (),
    ):
        self._routes = tuple(routes)
        self._stops = tuple(stops)
        self._route_stops = tuple(route_stops)
        self._transfer_points = tuple(transfer_points)
        self._fare_structures = tuple(fare_structures)
        self._buses = tuple(buses)

        self._routes_by_id: Dict[int, Route] = {route.id: route for route in self._routes}
        self._stops_by_id: Dict[int, Stop] = {stop.id: stop for stop in self._stops}

        by_route: Dict[int, List[RouteStop]] = defaultdict(list)
        for rs in self._route_stops:
            by_route[rs.route_id].append(rs)
        self._route_stops_by_route: Dict[int, List[RouteStop]] = {
            route_id: sorted(rows, key=lambda rs: rs.stop_sequence)
            for route_id, rows in by_route.items()
        }

    @classmethod
    def from_session(cls, db: Session) -> "NetworkDataProvider":
        """Build the provider from the ORM tables and check its invariants"""
        provider = cls(
            routes=[Route.model_validate(r) for r in db.query(models.BusRoute).order_by(models.BusRoute.id).all()],
            stops=[Stop.model_validate(s) for s in db.query(models.BusStop).order_by(models.BusStop.id).all()],
            route_stops=[
                RouteStop.model_validate(rs)
                for rs in db.query(models.RouteStop).order_by(models.RouteStop.id).all()
            ],
            transfer_points=[
                TransferPoint.model_validate(tp)
                for tp in db.query(models.TransferPoint).order_by(models.TransferPoint.id).all()
            ],
            fare_structures=[
                FareStructure.model_validate(fs)
                for fs in db.query(models.FareStructure).order_by(models.FareStructure.id).all()
            ],
            buses=[Bus.model_validate(b) for b in db.query(models.Bus).order_by(models.Bus.id).all()],
        )
        provider.check_integrity()
        logger.info(
            "Network loaded: %d routes, %d stops, %d transfer points",
            len(provider._routes), len(provider._stops), len(provider._transfer_points)
        )
        return provider

    @classmethod
    def from_json_dir(cls, data_dir: str) -> "NetworkDataProvider":
        """Build the provider straight from the fixture files, bypassing the database"""
        tables = load_fixtures(data_dir)
        provider = cls(
            routes=[Route(**row) for row in tables["routes"]],
            stops=[Stop(**row) for row in tables["stops"]],
            route_stops=[RouteStop(**row) for row in tables["route_stops"]],
            transfer_points=[TransferPoint(**row) for row in tables["transfer_points"]],
            fare_structures=[FareStructure(**row) for row in tables["fare_structures"]],
            buses=[Bus(**row) for row in tables["buses"]],
        )
        provider.check_integrity()
        return provider

    def check_integrity(self):
        """Raise NetworkDataError if a route's stop sequence is not strictly ordered"""
        for route_id, rows in self._route_stops_by_route.items():
            for previous, current in zip(rows, rows[1:]):
                if current.stop_sequence == previous.stop_sequence:
                    raise NetworkDataError(
                        f"Route {route_id} has duplicate stop sequence {current.stop_sequence}"
                    )
                if (
                    current.distance_from_start_km < previous.distance_from_start_km
                    or current.estimated_travel_time_minutes < previous.estimated_travel_time_minutes
                    or current.fare_from_start < previous.fare_from_start
                ):
                    raise NetworkDataError(
                        f"Route {route_id} cumulative values decrease at sequence {current.stop_sequence}"
                    )

        seen = set()
        for tp in self._transfer_points:
            if tp.stop_id in seen:
                raise NetworkDataError(f"Stop {tp.stop_id} has more than one transfer point")
            seen.add(tp.stop_id)

    # Consumed interface of the planning core

    def get_bus_routes(self) -> List[Route]:
        return list(self._routes)

    def get_bus_stops(self) -> List[Stop]:
        return list(self._stops)

    def get_route_stops(self) -> List[RouteStop]:
        return list(self._route_stops)

    def get_transfer_points(self) -> List[TransferPoint]:
        return list(self._transfer_points)

    def get_fare_structure(self) -> List[FareStructure]:
        return list(self._fare_structures)

    def get_bus_fleet(self) -> List[Bus]:
        return list(self._buses)

    # Lookups

    def get_route_by_id(self, route_id: int) -> Optional[Route]:
        return self._routes_by_id.get(route_id)

    def get_stop_by_id(self, stop_id: int) -> Optional[Stop]:
        return self._stops_by_id.get(stop_id)

    def get_route_stops_for_route(self, route_id: int) -> List[RouteStop]:
        """RouteStop rows of one route ordered by sequence"""
        return list(self._route_stops_by_route.get(route_id, []))

    def get_stops_for_route(self, route_id: int) -> List[StopOnRoute]:
        """Stops of a route in travel order, with their cumulative values"""
        stops_on_route = []
        for rs in self._route_stops_by_route.get(route_id, []):
            stop = self._stops_by_id.get(rs.stop_id)
            if stop is None:
                continue
            stops_on_route.append(StopOnRoute(
                stop=stop,
                route_id=rs.route_id,
                sequence=rs.stop_sequence,
                distance_from_start_km=rs.distance_from_start_km,
                estimated_travel_time_minutes=rs.estimated_travel_time_minutes,
                fare=rs.fare_from_start
            ))
        return stops_on_route

    def get_routes_for_stop(self, stop_id: int) -> List[Route]:
        route_ids = {rs.route_id for rs in self._route_stops if rs.stop_id == stop_id}
        return [route for route in self._routes if route.id in route_ids]

    def get_buses_for_route(self, route_id: int) -> List[Bus]:
        return [bus for bus in self._buses if bus.route_id == route_id and bus.status == "active"]

    def get_bus_by_number(self, bus_number: str) -> Optional[Bus]:
        for bus in self._buses:
            if bus.bus_number == bus_number:
                return bus
        return None

    # Search

    def search_stops(self, query: str) -> List[Stop]:
        """Case-insensitive match on stop name, address or landmarks"""
        term = query.lower()
        return [
            stop for stop in self._stops
            if term in stop.stop_name.lower()
            or term in stop.address.lower()
            or term in stop.landmarks.lower()
        ]

    def search_routes(self, query: str) -> List[Route]:
        term = query.lower()
        return [
            route for route in self._routes
            if term in route.route_number.lower()
            or term in route.route_name.lower()
            or term in route.start_location.lower()
            or term in route.end_location.lower()
        ]

    def get_nearby_stops_with_distance(
        self, lat: float, lng: float, radius_km: float = 2.0
    ) -> List[Tuple[float, Stop]]:
        """(distance_km, stop) pairs within radius_km of a point, nearest first"""
        with_distance = [
            (haversine_km(lat, lng, stop.latitude, stop.longitude), stop)
            for stop in self._stops
        ]
        within = [pair for pair in with_distance if pair[0] <= radius_km]
        within.sort(key=lambda pair: pair[0])
        return within

    def get_nearby_stops(self, lat: float, lng: float, radius_km: float = 2.0) -> List[Stop]:
        """Stops within radius_km of a point, nearest first"""
        return [stop for _, stop in self.get_nearby_stops_with_distance(lat, lng, radius_km)]
