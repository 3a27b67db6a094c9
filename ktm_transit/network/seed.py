from typing import Dict, List
from datetime import date
import json
import logging
import os

from sqlalchemy.orm import Session
from ktm_transit.models import BusRoute, BusStop, RouteStop, TransferPoint, FareStructure, Bus

logger = logging.getLogger(__name__)

FIXTURE_FILES = {
    "routes": "bus-routes.json",
    "stops": "bus-stops.json",
    "route_stops": "route-stops.json",
    "transfer_points": "transfer-points.json",
    "fare_structures": "fare-structure.json",
    "buses": "bus-fleet.json",
}

def load_fixtures(data_dir: str) -> Dict[str, List[dict]]:
    """Read every network fixture file from a data directory"""
    tables = {}
    for table, filename in FIXTURE_FILES.items():
        path = os.path.join(data_dir, filename)
        with open(path, encoding="utf-8") as fh:
            tables[table] = json.load(fh)
    logger.debug("Loaded fixtures from %s", data_dir)
    return tables

def _parse_date(value):
    return date.fromisoformat(value) if value else None

def seed_network(db: Session, data_dir: str) -> bool:
    """Load the fixture tables into an empty database; returns False if already seeded"""
    if db.query(BusRoute).first() is not None:
        logger.info("Network tables already populated, skipping seed")
        return False

    tables = load_fixtures(data_dir)

    db.add_all([BusRoute(**row) for row in tables["routes"]])
    db.add_all([BusStop(**row) for row in tables["stops"]])
    db.flush()

    db.add_all([RouteStop(**row) for row in tables["route_stops"]])
    db.add_all([TransferPoint(**row) for row in tables["transfer_points"]])

    for row in tables["fare_structures"]:
        fare = dict(row)
        fare["effective_from"] = _parse_date(fare["effective_from"])
        fare["effective_until"] = _parse_date(fare.get("effective_until"))
        db.add(FareStructure(**fare))

    db.add_all([Bus(**row) for row in tables["buses"]])
    db.commit()

    logger.info(
        "Seeded %d routes, %d stops, %d route stops, %d transfer points",
        len(tables["routes"]), len(tables["stops"]),
        len(tables["route_stops"]), len(tables["transfer_points"])
    )
    return True
