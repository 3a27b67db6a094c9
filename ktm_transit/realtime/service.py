from typing import List, Optional, Callable, Iterable
from datetime import datetime, timedelta
import asyncio
import logging
import math
import random

from ktm_transit.realtime.schemas import (
    BusTracking, ServiceAlert, LiveArrival, BusOccupancy, SystemStatus,
    RealTimeSnapshot, OccupancyLevel, AlertSeverity
)

logger = logging.getLogger(__name__)

OCCUPANCY_PERCENTAGES = {
    OccupancyLevel.LOW: 25,
    OccupancyLevel.MEDIUM: 55,
    OccupancyLevel.HIGH: 80,
    OccupancyLevel.FULL: 95,
}

SEVERITY_ORDER = {
    AlertSeverity.CRITICAL: 4,
    AlertSeverity.HIGH: 3,
    AlertSeverity.MEDIUM: 2,
    AlertSeverity.LOW: 1,
}

# Simulated round-trip latency per call, in seconds
LATENCY = {
    "arrivals": 0.5,
    "alerts": 0.3,
    "tracking": 0.4,
    "occupancy": 0.2,
    "status": 0.1,
}

# Timetabled arrivals shown next to the tracked buses
SCHEDULED_ARRIVALS = [
    LiveArrival(
        route_number="KTM-01",
        bus_number="BA-1-PA-2468",
        estimated_minutes=25,
        delay_minutes=0,
        occupancy_level=OccupancyLevel.LOW,
        is_real_time=False
    ),
    LiveArrival(
        route_number="KTM-02",
        bus_number="BA-1-PA-1357",
        estimated_minutes=32,
        delay_minutes=2,
        occupancy_level=OccupancyLevel.MEDIUM,
        is_real_time=False
    ),
]


def default_bus_tracking(now: Optional[datetime] = None) -> List[BusTracking]:
    """Mock GPS snapshot; stands in for a tracking feed"""
    now = now or datetime.now()
    return [
        BusTracking(
            id=1, route_id=1, route_number="KTM-01", bus_number="BA-1-PA-1234",
            current_stop_id=1, current_stop_name="Ratna Park",
            next_stop_id=11, next_stop_name="Thapathali",
            estimated_arrival_time=now + timedelta(minutes=12),
            delay_minutes=3, occupancy_level=OccupancyLevel.MEDIUM, last_updated=now
        ),
        BusTracking(
            id=2, route_id=2, route_number="KTM-02", bus_number="BA-1-PA-5678",
            current_stop_id=2, current_stop_name="New Bus Park",
            next_stop_id=12, next_stop_name="Lainchaur",
            estimated_arrival_time=now + timedelta(minutes=8),
            delay_minutes=0, occupancy_level=OccupancyLevel.HIGH, last_updated=now
        ),
        BusTracking(
            id=3, route_id=3, route_number="KTM-03", bus_number="BA-1-PA-9012",
            current_stop_id=5, current_stop_name="Maharajgunj",
            next_stop_id=12, next_stop_name="Lainchaur",
            estimated_arrival_time=now + timedelta(minutes=18),
            delay_minutes=5, occupancy_level=OccupancyLevel.LOW, last_updated=now
        ),
    ]


def default_service_alerts(now: Optional[datetime] = None) -> List[ServiceAlert]:
    now = now or datetime.now()
    return [
        ServiceAlert(
            id="alert-001",
            type="delay",
            severity=AlertSeverity.MEDIUM,
            title="Traffic Congestion on Ring Road",
            description="Heavy traffic causing 10-15 minute delays on routes passing through Ring Road area.",
            affected_routes=["KTM-04", "KTM-05"],
            affected_stops=["Kalanki", "Koteshwor"],
            start_time=now - timedelta(minutes=30),
            is_active=True
        ),
        ServiceAlert(
            id="alert-002",
            type="maintenance",
            severity=AlertSeverity.LOW,
            title="Bus Stop Maintenance",
            description="Temporary shelter maintenance at Ratna Park. All services operating normally.",
            affected_routes=["KTM-01", "KTM-02", "KTM-03"],
            affected_stops=["Ratna Park"],
            start_time=now,
            end_time=now + timedelta(hours=2),
            is_active=True
        ),
    ]


class RealTimeService:
    """Mock real-time feed for arrivals, alerts and bus tracking.

    Holds the only mutable state in the application. The planning and fare
    core never read from it.
    """

    def __init__(
        self,
        bus_tracking: Optional[Iterable[BusTracking]] = None,
        service_alerts: Optional[Iterable[ServiceAlert]] = None,
        simulate_latency: bool = True,
        rng: Optional[random.Random] = None
    ):
        self.bus_tracking: List[BusTracking] = list(
            bus_tracking if bus_tracking is not None else default_bus_tracking()
        )
        self.service_alerts: List[ServiceAlert] = list(
            service_alerts if service_alerts is not None else default_service_alerts()
        )
        self.simulate_latency = simulate_latency
        self._random = rng or random.Random()
        self._update_task: Optional[asyncio.Task] = None

    async def _simulate_latency(self, operation: str):
        if self.simulate_latency:
            await asyncio.sleep(LATENCY[operation])

    async def get_live_arrivals(self, stop_id: int) -> List[LiveArrival]:
        """Tracked buses heading to a stop plus timetabled arrivals, soonest first"""
        await self._simulate_latency("arrivals")

        now = datetime.now()
        arrivals = []
        for tracking in self.bus_tracking:
            if tracking.next_stop_id != stop_id:
                continue
            minutes_away = (tracking.estimated_arrival_time - now).total_seconds() / 60
            arrivals.append(LiveArrival(
                route_number=tracking.route_number,
                bus_number=tracking.bus_number,
                estimated_minutes=max(1, math.floor(minutes_away)),
                delay_minutes=tracking.delay_minutes,
                occupancy_level=tracking.occupancy_level,
                is_real_time=True
            ))

        arrivals.extend(SCHEDULED_ARRIVALS)
        return sorted(arrivals, key=lambda arrival: arrival.estimated_minutes)

    async def get_service_alerts(self, route_numbers: Optional[List[str]] = None) -> List[ServiceAlert]:
        """Active alerts, optionally limited to some routes, most severe first"""
        await self._simulate_latency("alerts")

        alerts = [alert for alert in self.service_alerts if alert.is_active]
        if route_numbers:
            alerts = [
                alert for alert in alerts
                if any(route in route_numbers for route in alert.affected_routes)
            ]

        return sorted(alerts, key=lambda alert: SEVERITY_ORDER[alert.severity], reverse=True)

    async def get_bus_tracking(self, route_number: str) -> List[BusTracking]:
        await self._simulate_latency("tracking")
        return [tracking for tracking in self.bus_tracking if tracking.route_number == route_number]

    async def get_bus_occupancy(self, bus_number: str) -> Optional[BusOccupancy]:
        await self._simulate_latency("occupancy")

        for tracking in self.bus_tracking:
            if tracking.bus_number == bus_number:
                return BusOccupancy(
                    occupancy_level=tracking.occupancy_level,
                    percentage=OCCUPANCY_PERCENTAGES[tracking.occupancy_level],
                    last_updated=tracking.last_updated
                )
        return None

    async def get_system_status(self) -> SystemStatus:
        await self._simulate_latency("status")

        active_alerts = [alert for alert in self.service_alerts if alert.is_active]
        critical_alerts = [alert for alert in active_alerts if alert.severity == AlertSeverity.CRITICAL]

        if critical_alerts:
            system_health = "poor"
        elif len(active_alerts) > 2:
            system_health = "degraded"
        else:
            system_health = "good"

        return SystemStatus(
            total_buses_tracked=len(self.bus_tracking),
            active_alerts=len(active_alerts),
            system_health=system_health,
            last_updated=datetime.now()
        )

    def snapshot(self) -> RealTimeSnapshot:
        return RealTimeSnapshot(bus_tracking=list(self.bus_tracking), alerts=list(self.service_alerts))

    def apply_random_update(self):
        """Jitter delays and occupancy of every tracked bus"""
        now = datetime.now()
        levels = list(OccupancyLevel)
        self.bus_tracking = [
            tracking.model_copy(update={
                "delay_minutes": max(0, tracking.delay_minutes + (1 if self._random.random() > 0.7 else -1)),
                "occupancy_level": self._random.choice(levels),
                "last_updated": now,
            })
            for tracking in self.bus_tracking
        ]

    def start_updates(
        self,
        callback: Callable[[RealTimeSnapshot], None],
        interval_seconds: float = 30
    ) -> asyncio.Task:
        """Start the periodic update loop on the running event loop"""
        if self._update_task and not self._update_task.done():
            return self._update_task

        async def _run():
            while True:
                await asyncio.sleep(interval_seconds)
                try:
                    self.apply_random_update()
                    callback(self.snapshot())
                except Exception:
                    logger.exception("Real-time update failed")

        self._update_task = asyncio.create_task(_run())
        logger.info("Real-time updates started (every %ss)", interval_seconds)
        return self._update_task

    async def stop_updates(self):
        """Cancel the update loop and wait for it to finish"""
        task, self._update_task = self._update_task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Real-time updates stopped")
