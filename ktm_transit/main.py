from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from ktm_transit.config import settings
from ktm_transit.database import Base, engine, SessionLocal
from ktm_transit.logger import setup_logging
from ktm_transit.network import router as network_router
from ktm_transit.network import NetworkDataProvider, seed_network
from ktm_transit.planning import journeys_router, fares_router, RoutePlanningEngine, FareCalculator
from ktm_transit.realtime import router as realtime_router
from ktm_transit.realtime import RealTimeService

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
logger = logging.getLogger("ktm_transit.main")

def load_network() -> NetworkDataProvider:
    """Create tables, seed the fixtures if needed and load the network into memory"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if settings.SEED_ON_STARTUP:
            seed_network(db, settings.DATA_DIR)
        return NetworkDataProvider.from_session(db)
    finally:
        db.close()

@asynccontextmanager
async def lifespan(app: FastAPI):
    network = load_network()
    app.state.network = network
    app.state.planning_engine = RoutePlanningEngine(network)
    app.state.fare_calculator = FareCalculator(network.get_fare_structure())
    app.state.realtime_service = RealTimeService(simulate_latency=settings.SIMULATE_LATENCY)

    if settings.REALTIME_UPDATE_INTERVAL_SECONDS > 0:
        app.state.realtime_service.start_updates(
            lambda snapshot: logger.debug(
                "Real-time update: %d buses, %d alerts",
                len(snapshot.bus_tracking), len(snapshot.alerts)
            ),
            interval_seconds=settings.REALTIME_UPDATE_INTERVAL_SECONDS
        )

    logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield

    await app.state.realtime_service.stop_updates()

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Kathmandu Valley bus journey planning and fare API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(
    network_router,
    prefix=f"{settings.API_V1_STR}/network",
    tags=["Network"]
)

app.include_router(
    journeys_router,
    prefix=f"{settings.API_V1_STR}/journeys",
    tags=["Journey Planning"]
)

app.include_router(
    fares_router,
    prefix=f"{settings.API_V1_STR}/fares",
    tags=["Fares"]
)

app.include_router(
    realtime_router,
    prefix=f"{settings.API_V1_STR}/live",
    tags=["Real-time"]
)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Kathmandu Valley Bus Transit API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
