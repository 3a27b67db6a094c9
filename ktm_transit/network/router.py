from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Optional

from ktm_transit.dependencies import get_network
from ktm_transit.network.schemas import Stop, Route, StopOnRoute, Bus, NearbyStop
from ktm_transit.network.service import NetworkDataProvider

router = APIRouter()

def _get_route_or_404(network: NetworkDataProvider, route_id: int) -> Route:
    route = network.get_route_by_id(route_id)
    if not route:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Route with ID {route_id} not found"
        )
    return route

@router.get("/stops", response_model=List[Stop])
def get_stops(
    q: Optional[str] = Query(None, min_length=1, description="Search by name, address or landmark"),
    network: NetworkDataProvider = Depends(get_network)
):
    """List all stops, or those matching a search query"""
    if q:
        return network.search_stops(q)
    return network.get_bus_stops()

@router.get("/stops/nearby", response_model=List[NearbyStop])
def get_nearby_stops(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude"),
    radius_km: float = Query(2.0, gt=0, le=50, description="Search radius in kilometers"),
    limit: int = Query(10, ge=1, le=50, description="Maximum number of results"),
    network: NetworkDataProvider = Depends(get_network)
):
    """Stops within a radius of the given coordinates, nearest first"""
    nearby = network.get_nearby_stops_with_distance(lat, lng, radius_km)[:limit]
    return [
        NearbyStop(stop=stop, distance_km=round(distance, 3))
        for distance, stop in nearby
    ]

@router.get("/stops/{stop_id}", response_model=Stop)
def get_stop(stop_id: int, network: NetworkDataProvider = Depends(get_network)):
    stop = network.get_stop_by_id(stop_id)
    if not stop:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Stop with ID {stop_id} not found"
        )
    return stop

@router.get("/stops/{stop_id}/routes", response_model=List[Route])
def get_routes_for_stop(stop_id: int, network: NetworkDataProvider = Depends(get_network)):
    """Routes that serve a stop"""
    if not network.get_stop_by_id(stop_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Stop with ID {stop_id} not found"
        )
    return network.get_routes_for_stop(stop_id)

@router.get("/routes", response_model=List[Route])
def get_routes(
    q: Optional[str] = Query(None, min_length=1, description="Search by number, name or terminus"),
    network: NetworkDataProvider = Depends(get_network)
):
    if q:
        return network.search_routes(q)
    return network.get_bus_routes()

@router.get("/routes/{route_id}", response_model=Route)
def get_route(route_id: int, network: NetworkDataProvider = Depends(get_network)):
    return _get_route_or_404(network, route_id)

@router.get("/routes/{route_id}/stops", response_model=List[StopOnRoute])
def get_route_stops(route_id: int, network: NetworkDataProvider = Depends(get_network)):
    """Stops of a route in travel order with cumulative distance, time and fare"""
    _get_route_or_404(network, route_id)
    return network.get_stops_for_route(route_id)

@router.get("/routes/{route_id}/buses", response_model=List[Bus])
def get_route_buses(route_id: int, network: NetworkDataProvider = Depends(get_network)):
    """Active buses assigned to a route"""
    _get_route_or_404(network, route_id)
    return network.get_buses_for_route(route_id)
