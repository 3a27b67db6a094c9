import os

# Keep the API fast and quiet under test; must be set before settings load
os.environ.setdefault("SIMULATE_LATENCY", "false")
os.environ.setdefault("REALTIME_UPDATE_INTERVAL_SECONDS", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from ktm_transit.config import PACKAGE_DATA_DIR
from ktm_transit.network import (
    NetworkDataProvider, Stop, Route, RouteStop, TransferPoint, FareStructure
)


def make_stop(stop_id, major=False, lat=27.70, lon=85.30):
    return Stop(
        id=stop_id,
        stop_name=f"Stop {stop_id}",
        stop_code=f"S{stop_id:03d}",
        latitude=lat,
        longitude=lon,
        is_major_stop=major
    )


def make_route(route_id, frequency_minutes=10):
    return Route(
        id=route_id,
        route_number=f"T-{route_id:02d}",
        route_name=f"Test Route {route_id}",
        start_location="Start",
        end_location="End",
        total_distance_km=10.0,
        estimated_duration_minutes=30,
        frequency_minutes=frequency_minutes
    )


def make_route_stops(route_id, stop_ids, step_km=1.0, step_minutes=5, step_fare=5):
    """RouteStop rows with evenly spaced cumulative values"""
    return [
        RouteStop(
            route_id=route_id,
            stop_id=stop_id,
            stop_sequence=i + 1,
            distance_from_start_km=i * step_km,
            estimated_travel_time_minutes=i * step_minutes,
            fare_from_start=i * step_fare
        )
        for i, stop_id in enumerate(stop_ids)
    ]


def make_transfer(stop_id, minutes=5, major=False, routes=()):
    return TransferPoint(
        stop_id=stop_id,
        connecting_routes=list(routes),
        transfer_time_minutes=minutes,
        is_major_hub=major
    )


def make_band(band_id, route_id, start_km, end_km, base, student, senior, active=True):
    return FareStructure(
        id=band_id,
        route_id=route_id,
        distance_range_start_km=start_km,
        distance_range_end_km=end_km,
        base_fare=base,
        student_fare=student,
        senior_fare=senior,
        effective_from="2024-01-01",
        is_active=active
    )


@pytest.fixture
def factories():
    """Builders for synthetic network records"""
    class Factories:
        stop = staticmethod(make_stop)
        route = staticmethod(make_route)
        route_stops = staticmethod(make_route_stops)
        transfer = staticmethod(make_transfer)
        band = staticmethod(make_band)
    return Factories


@pytest.fixture(scope="session")
def network():
    """Provider over the shipped Kathmandu fixtures"""
    return NetworkDataProvider.from_json_dir(PACKAGE_DATA_DIR)


@pytest.fixture(scope="module")
def client():
    from fastapi.testclient import TestClient
    from ktm_transit.main import app

    with TestClient(app) as test_client:
        yield test_client
