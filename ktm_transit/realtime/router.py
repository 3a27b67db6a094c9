from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Optional

from ktm_transit.dependencies import get_realtime_service
from ktm_transit.realtime.schemas import (
    LiveArrival, ServiceAlert, BusTracking, BusOccupancy, SystemStatus
)
from ktm_transit.realtime.service import RealTimeService

router = APIRouter()

@router.get("/arrivals/{stop_id}", response_model=List[LiveArrival])
async def get_live_arrivals(
    stop_id: int,
    service: RealTimeService = Depends(get_realtime_service)
):
    """Live and scheduled arrivals at a stop"""
    return await service.get_live_arrivals(stop_id)

@router.get("/alerts", response_model=List[ServiceAlert])
async def get_service_alerts(
    routes: Optional[str] = Query(None, description="Comma-separated route numbers"),
    service: RealTimeService = Depends(get_realtime_service)
):
    """Active service alerts, most severe first"""
    route_numbers = None
    if routes:
        route_numbers = [r.strip() for r in routes.split(",") if r.strip()]
    return await service.get_service_alerts(route_numbers)

@router.get("/tracking/{route_number}", response_model=List[BusTracking])
async def get_bus_tracking(
    route_number: str,
    service: RealTimeService = Depends(get_realtime_service)
):
    return await service.get_bus_tracking(route_number)

@router.get("/occupancy/{bus_number}", response_model=BusOccupancy)
async def get_bus_occupancy(
    bus_number: str,
    service: RealTimeService = Depends(get_realtime_service)
):
    occupancy = await service.get_bus_occupancy(bus_number)
    if occupancy is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bus {bus_number} is not being tracked"
        )
    return occupancy

@router.get("/status", response_model=SystemStatus)
async def get_system_status(service: RealTimeService = Depends(get_realtime_service)):
    return await service.get_system_status()
