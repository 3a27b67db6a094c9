import pytest

from ktm_transit.network import NetworkDataProvider
from ktm_transit.planning import RoutePlanningEngine


def build_engine(routes, stops, route_stops, transfer_points=()):
    network = NetworkDataProvider(routes, stops, route_stops, transfer_points)
    return RoutePlanningEngine(network)


@pytest.fixture
def engine(network):
    return RoutePlanningEngine(network)


# Shipped network

def test_direct_route_ratna_park_to_bhaktapur(engine, network):
    options = engine.find_journey_options(network.get_stop_by_id(1), network.get_stop_by_id(3))

    direct = options[0]
    assert direct.id == "direct-1-1-3"
    assert direct.route_complexity == "direct"
    assert direct.transfer_count == 0
    assert direct.segments[0].from_sequence == 1
    assert direct.segments[0].to_sequence == 6
    assert direct.total_distance_km == 14.5
    assert direct.total_fare == 25
    # 45 minutes riding plus half of the 15 minute headway
    assert direct.total_duration_minutes == 52.5
    assert direct.recommended_score == 135


def test_one_transfer_option_on_shipped_network(engine, network):
    options = engine.find_journey_options(network.get_stop_by_id(1), network.get_stop_by_id(3))

    assert [option.id for option in options] == ["direct-1-1-3", "transfer-2-1-1-3"]
    transfer = options[1]
    assert transfer.transfer_points[0].stop_name == "Thapathali"
    assert transfer.total_duration_minutes == 60.5
    assert transfer.total_fare == 24
    assert transfer.recommended_score == 110


def test_wrong_direction_is_not_direct(engine, network):
    options = engine.find_journey_options(network.get_stop_by_id(11), network.get_stop_by_id(1))

    assert options == []


def test_segments_always_run_forward(engine, network):
    options = engine.find_journey_options(network.get_stop_by_id(2), network.get_stop_by_id(7))

    assert options
    for option in options:
        for segment in option.segments:
            assert segment.from_sequence < segment.to_sequence


def test_results_capped_and_sorted(engine, network):
    options = engine.find_journey_options(network.get_stop_by_id(2), network.get_stop_by_id(7))

    assert len(options) == 5
    scores = [option.recommended_score for option in options]
    assert scores == sorted(scores, reverse=True)
    assert all(score >= 0 for score in scores)


def test_two_transfer_options_use_distinct_routes(engine, network):
    # New Bus Park -> Koteshwor has complex options via Ratna Park then Thapathali or Kalimati
    candidates = (
        engine._find_direct_routes(network.get_stop_by_id(2), network.get_stop_by_id(7))
        + engine._find_two_transfer_routes(network.get_stop_by_id(2), network.get_stop_by_id(7))
    )
    complex_options = [option for option in candidates if option.route_complexity == "complex"]

    assert {option.id for option in complex_options} == {"complex-2-1-5-2-7", "complex-2-3-5-2-7"}
    for option in complex_options:
        assert option.transfer_count == 2
        assert len({segment.route.id for segment in option.segments}) == 3


def test_no_itinerary_returns_empty_list(engine, network):
    # Bhaktapur is the terminus of the only route that serves it
    options = engine.find_journey_options(network.get_stop_by_id(3), network.get_stop_by_id(1))

    assert options == []


def test_get_route_stops_in_sequence(engine):
    stops = engine.get_route_stops(2)

    assert [s.stop.id for s in stops] == [2, 12, 1, 11, 4]
    assert [s.sequence for s in stops] == [1, 2, 3, 4, 5]
    assert stops[-1].fare == 18


def test_get_route_details(engine):
    assert engine.get_route_details("KTM-03").id == 3
    assert engine.get_route_details("KTM-99") is None


def test_find_nearby_stops_sorted_by_distance(engine):
    stops = engine.find_nearby_stops(27.7172, 85.324, radius_km=1.0)

    ids = [stop.id for stop in stops]
    assert ids[0] == 1
    assert 12 in ids
    assert 3 not in ids


# Synthetic networks

def test_direct_score_breakdown(factories):
    f = factories
    engine = build_engine(
        routes=[f.route(1, frequency_minutes=10)],
        stops=[f.stop(1, major=True), f.stop(2)],
        route_stops=f.route_stops(1, [1, 2])
    )

    options = engine.find_journey_options(f.stop(1, major=True), f.stop(2))

    # 100 + 30 direct - 1 duration - 1 fare + 5 major stop + 10 frequency
    assert options[0].recommended_score == 143
    assert options[0].total_duration_minutes == 10


def test_one_transfer_assembly(factories):
    f = factories
    stops = [f.stop(1), f.stop(2), f.stop(3)]
    engine = build_engine(
        routes=[f.route(1, frequency_minutes=10), f.route(2, frequency_minutes=20)],
        stops=stops,
        route_stops=f.route_stops(1, [1, 2]) + f.route_stops(2, [2, 3]),
        transfer_points=[f.transfer(2, minutes=4)]
    )

    options = engine.find_journey_options(stops[0], stops[2])

    assert len(options) == 1
    option = options[0]
    assert option.id == "transfer-1-2-1-3"
    assert option.transfer_count == 1
    assert option.route_complexity == "simple"
    assert len(option.segments) == 2
    assert [stop.id for stop in option.transfer_points] == [2]
    # (5 + 10/2) + (5 + 20/2) + 4 minute transfer
    assert option.total_duration_minutes == 29
    assert option.total_fare == 10
    assert option.total_distance_km == 2


def test_same_route_on_both_legs_is_not_a_transfer(factories):
    f = factories
    stops = [f.stop(1), f.stop(2), f.stop(3)]
    engine = build_engine(
        routes=[f.route(1)],
        stops=stops,
        route_stops=f.route_stops(1, [1, 2, 3]),
        transfer_points=[f.transfer(2)]
    )

    options = engine.find_journey_options(stops[0], stops[2])

    assert [option.route_complexity for option in options] == ["direct"]


def test_two_transfer_assembly_through_major_hubs(factories):
    f = factories
    stops = [f.stop(1), f.stop(4), f.stop(5), f.stop(6)]
    engine = build_engine(
        routes=[f.route(1, 10), f.route(2, 12), f.route(3, 20)],
        stops=stops,
        route_stops=(
            f.route_stops(1, [1, 5]) + f.route_stops(2, [5, 6]) + f.route_stops(3, [6, 4])
        ),
        transfer_points=[f.transfer(5, minutes=3, major=True), f.transfer(6, minutes=2, major=True)]
    )

    options = engine.find_journey_options(f.stop(1), f.stop(4))

    assert len(options) == 1
    option = options[0]
    assert option.id == "complex-1-2-3-1-4"
    assert option.transfer_count == 2
    assert [stop.id for stop in option.transfer_points] == [5, 6]
    # (5 + 5) + (5 + 6) + (5 + 10) + 3 + 2
    assert option.total_duration_minutes == 41
    assert option.total_fare == 15


def test_two_transfer_hubs_follow_declaration_order(factories):
    f = factories
    stops = [f.stop(1), f.stop(4), f.stop(5), f.stop(6)]
    engine = build_engine(
        routes=[f.route(1), f.route(2), f.route(3)],
        stops=stops,
        route_stops=(
            f.route_stops(1, [1, 5]) + f.route_stops(2, [5, 6]) + f.route_stops(3, [6, 4])
        ),
        transfer_points=[f.transfer(6, major=True), f.transfer(5, major=True)]
    )

    assert engine.find_journey_options(f.stop(1), f.stop(4)) == []


def test_two_transfer_requires_three_distinct_routes(factories):
    f = factories
    stops = [f.stop(1), f.stop(4), f.stop(5), f.stop(6)]
    engine = build_engine(
        routes=[f.route(1), f.route(3)],
        stops=stops,
        route_stops=f.route_stops(1, [1, 5, 6]) + f.route_stops(3, [6, 4]),
        transfer_points=[f.transfer(5, major=True), f.transfer(6, major=True)]
    )

    options = engine.find_journey_options(f.stop(1), f.stop(4))

    assert [option.route_complexity for option in options] == ["simple"]


def test_minor_transfer_points_skip_two_transfer_search(factories):
    f = factories
    stops = [f.stop(1), f.stop(4), f.stop(5), f.stop(6)]
    engine = build_engine(
        routes=[f.route(1), f.route(2), f.route(3)],
        stops=stops,
        route_stops=(
            f.route_stops(1, [1, 5]) + f.route_stops(2, [5, 6]) + f.route_stops(3, [6, 4])
        ),
        transfer_points=[f.transfer(5), f.transfer(6)]
    )

    assert engine.find_journey_options(f.stop(1), f.stop(4)) == []


def test_score_is_floored_at_zero(factories):
    f = factories
    engine = build_engine(
        routes=[f.route(1, frequency_minutes=60)],
        stops=[f.stop(1), f.stop(2)],
        route_stops=f.route_stops(1, [1, 2], step_minutes=2000, step_fare=1000)
    )

    options = engine.find_journey_options(f.stop(1), f.stop(2))

    assert options[0].recommended_score == 0


def test_equal_scores_keep_route_order(factories):
    f = factories
    engine = build_engine(
        routes=[f.route(1), f.route(2)],
        stops=[f.stop(1), f.stop(2)],
        route_stops=f.route_stops(1, [1, 2]) + f.route_stops(2, [1, 2])
    )

    options = engine.find_journey_options(f.stop(1), f.stop(2))

    assert [option.id for option in options] == ["direct-1-1-2", "direct-2-1-2"]
    assert options[0].recommended_score == options[1].recommended_score


def test_unknown_transfer_stop_is_ignored(factories):
    f = factories
    stops = [f.stop(1), f.stop(2)]
    engine = build_engine(
        routes=[f.route(1)],
        stops=stops,
        route_stops=f.route_stops(1, [1, 2]),
        transfer_points=[f.transfer(42, major=True)]
    )

    options = engine.find_journey_options(stops[0], stops[1])

    assert [option.id for option in options] == ["direct-1-1-2"]
