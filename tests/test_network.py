import pytest
from sqlalchemy.orm import sessionmaker

from ktm_transit.config import PACKAGE_DATA_DIR
from ktm_transit.database import Base, build_engine
from ktm_transit.exceptions import NetworkDataError
from ktm_transit.network import NetworkDataProvider, seed_network, load_fixtures
from ktm_transit.network.geo import haversine_km


@pytest.fixture
def db():
    """Fresh in-memory database per test"""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def test_fixtures_load_every_table():
    tables = load_fixtures(PACKAGE_DATA_DIR)

    assert len(tables["routes"]) == 5
    assert len(tables["stops"]) == 16
    assert len(tables["transfer_points"]) == 7
    assert tables["buses"]


def test_cumulative_values_never_decrease(network):
    for route in network.get_bus_routes():
        rows = network.get_route_stops_for_route(route.id)
        assert [rs.stop_sequence for rs in rows] == sorted({rs.stop_sequence for rs in rows})
        for previous, current in zip(rows, rows[1:]):
            assert current.distance_from_start_km >= previous.distance_from_start_km
            assert current.estimated_travel_time_minutes >= previous.estimated_travel_time_minutes
            assert current.fare_from_start >= previous.fare_from_start


def test_at_most_one_transfer_point_per_stop(network):
    stop_ids = [tp.stop_id for tp in network.get_transfer_points()]
    assert len(stop_ids) == len(set(stop_ids))


def test_transfer_points_keep_declaration_order(network):
    assert [tp.stop_id for tp in network.get_transfer_points()] == [1, 11, 13, 2, 12, 16, 7]


def test_seed_and_load_from_database(db, network):
    assert seed_network(db, PACKAGE_DATA_DIR) is True

    provider = NetworkDataProvider.from_session(db)

    assert provider.get_bus_routes() == network.get_bus_routes()
    assert provider.get_bus_stops() == network.get_bus_stops()
    assert provider.get_transfer_points() == network.get_transfer_points()
    assert provider.get_fare_structure() == network.get_fare_structure()
    assert provider.get_stop_by_id(1).facilities.restrooms is True


def test_seed_is_idempotent(db):
    assert seed_network(db, PACKAGE_DATA_DIR) is True
    assert seed_network(db, PACKAGE_DATA_DIR) is False

    provider = NetworkDataProvider.from_session(db)
    assert len(provider.get_bus_routes()) == 5


def test_duplicate_sequence_is_rejected(factories):
    f = factories
    rows = f.route_stops(1, [1, 2, 3])
    rows[2] = rows[2].model_copy(update={"stop_sequence": 2})
    provider = NetworkDataProvider([f.route(1)], [f.stop(1), f.stop(2), f.stop(3)], rows, [])

    with pytest.raises(NetworkDataError, match="duplicate stop sequence"):
        provider.check_integrity()


def test_decreasing_fare_is_rejected(factories):
    f = factories
    rows = f.route_stops(1, [1, 2, 3])
    rows[2] = rows[2].model_copy(update={"fare_from_start": 1})
    provider = NetworkDataProvider([f.route(1)], [f.stop(1), f.stop(2), f.stop(3)], rows, [])

    with pytest.raises(NetworkDataError, match="decrease"):
        provider.check_integrity()


def test_duplicate_transfer_point_is_rejected(factories):
    f = factories
    provider = NetworkDataProvider(
        [f.route(1)], [f.stop(1), f.stop(2)], f.route_stops(1, [1, 2]),
        [f.transfer(2), f.transfer(2, minutes=3)]
    )

    with pytest.raises(NetworkDataError):
        provider.check_integrity()


def test_route_stops_are_sorted_by_sequence(factories):
    f = factories
    rows = list(reversed(f.route_stops(1, [3, 2, 1])))
    provider = NetworkDataProvider([f.route(1)], [f.stop(1), f.stop(2), f.stop(3)], rows, [])

    assert [s.stop.id for s in provider.get_stops_for_route(1)] == [3, 2, 1]


def test_lookups(network):
    assert network.get_route_by_id(3).route_number == "KTM-03"
    assert network.get_route_by_id(99) is None
    assert network.get_stop_by_id(11).stop_name == "Thapathali"
    assert network.get_stop_by_id(99) is None
    assert network.get_stops_for_route(99) == []


def test_routes_for_stop(network):
    # Ratna Park is on KTM-01, KTM-02 and KTM-03
    assert [route.id for route in network.get_routes_for_stop(1)] == [1, 2, 3]


def test_search_stops_matches_landmarks(network):
    assert [stop.id for stop in network.search_stops("zoo")] == [14]
    assert [stop.id for stop in network.search_stops("BHAKTAPUR")] == [3, 15]


def test_search_routes(network):
    assert [route.id for route in network.search_routes("ktm-04")] == [4]
    assert network.search_routes("nowhere") == []


def test_buses_for_route_skip_maintenance(network):
    assert network.get_buses_for_route(4) == []
    assert {bus.bus_number for bus in network.get_buses_for_route(2)} == {
        "BA-1-PA-5678", "BA-1-PA-1357"
    }
    assert network.get_bus_by_number("BA-2-KHA-4411").status == "maintenance"
    assert network.get_bus_by_number("XX") is None


def test_nearby_stops_nearest_first(network):
    stops = network.get_nearby_stops(27.7172, 85.324, radius_km=2.0)

    distances = [haversine_km(27.7172, 85.324, s.latitude, s.longitude) for s in stops]
    assert stops[0].id == 1
    assert distances == sorted(distances)
    assert all(distance <= 2.0 for distance in distances)


def test_haversine():
    assert haversine_km(27.7, 85.3, 27.7, 85.3) == 0
    # One degree of latitude is about 111 km
    assert haversine_km(27.0, 85.0, 28.0, 85.0) == pytest.approx(111.19, abs=0.05)


def test_nearby_stops_with_distance(network):
    pairs = network.get_nearby_stops_with_distance(27.7172, 85.324, radius_km=2.0)

    assert [stop for _, stop in pairs] == network.get_nearby_stops(27.7172, 85.324, radius_km=2.0)
    for distance, stop in pairs:
        assert distance == haversine_km(27.7172, 85.324, stop.latitude, stop.longitude)
