#!/usr/bin/env python3

import sys

from ktm_transit.config import settings
from ktm_transit.database import Base, engine, SessionLocal
from ktm_transit.exceptions import NetworkDataError
from ktm_transit.network import NetworkDataProvider, seed_network

def create_seed_data():
    if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        print("DATABASE_URL points at an in-memory database; set it to a file or server to keep the seed.")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        print(f"🚀 Seeding network tables from {settings.DATA_DIR}...")
        if not seed_network(db, settings.DATA_DIR):
            print("Network tables already contain data, nothing to do.")

        provider = NetworkDataProvider.from_session(db)

        print("✅ Seed data ready!")
        print(f"   Routes: {len(provider.get_bus_routes())}")
        print(f"   Stops: {len(provider.get_bus_stops())}")
        print(f"   Route stops: {len(provider.get_route_stops())}")
        print(f"   Transfer points: {len(provider.get_transfer_points())}")
        print(f"   Fare bands: {len(provider.get_fare_structure())}")
        print(f"   Buses: {len(provider.get_bus_fleet())}")
    except NetworkDataError as e:
        db.rollback()
        print(f"❌ Network data is inconsistent: {e}")
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
