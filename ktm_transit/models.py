from sqlalchemy import Column, Integer, String, Boolean, Date, Text, ForeignKey, Float, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from ktm_transit.database import Base

# ================================
# Bus Routes & Stops
# ================================
class BusRoute(Base):
    __tablename__ = "bus_routes"

    id = Column(Integer, primary_key=True, index=True)
    route_number = Column(String(20), nullable=False, unique=True, index=True)
    route_name = Column(String(255), nullable=False)
    start_location = Column(String(255), nullable=False)
    end_location = Column(String(255), nullable=False)
    total_distance_km = Column(Float, nullable=False)
    estimated_duration_minutes = Column(Integer, nullable=False)
    operating_hours_start = Column(String(5))
    operating_hours_end = Column(String(5))
    frequency_minutes = Column(Integer, nullable=False)

    # Relationships
    route_stops = relationship("RouteStop", back_populates="route", order_by="RouteStop.stop_sequence")
    fare_structures = relationship("FareStructure", back_populates="route")
    buses = relationship("Bus", back_populates="route")

class BusStop(Base):
    __tablename__ = "bus_stops"

    id = Column(Integer, primary_key=True, index=True)
    stop_name = Column(String(255), nullable=False, index=True)
    stop_code = Column(String(20), nullable=False, unique=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(255), default="")
    landmarks = Column(Text, default="")
    district = Column(String(100))
    zone = Column(String(50))
    is_major_stop = Column(Boolean, default=False, index=True)
    facilities = Column(JSON, default=dict)

    # Relationships
    route_stops = relationship("RouteStop", back_populates="stop")
    transfer_point = relationship("TransferPoint", back_populates="stop", uselist=False)

# ================================
# Route-Stop Join (cumulative values from route start)
# ================================
class RouteStop(Base):
    __tablename__ = "route_stops"
    __table_args__ = (
        UniqueConstraint("route_id", "stop_sequence", name="uq_route_stop_sequence"),
    )

    id = Column(Integer, primary_key=True, index=True)
    route_id = Column(Integer, ForeignKey("bus_routes.id"), nullable=False, index=True)
    stop_id = Column(Integer, ForeignKey("bus_stops.id"), nullable=False, index=True)
    stop_sequence = Column(Integer, nullable=False)
    distance_from_start_km = Column(Float, nullable=False)
    estimated_travel_time_minutes = Column(Integer, nullable=False)
    fare_from_start = Column(Float, nullable=False)

    # Relationships
    route = relationship("BusRoute", back_populates="route_stops")
    stop = relationship("BusStop", back_populates="route_stops")

# ================================
# Transfer Points
# ================================
class TransferPoint(Base):
    __tablename__ = "transfer_points"

    id = Column(Integer, primary_key=True, index=True)
    stop_id = Column(Integer, ForeignKey("bus_stops.id"), nullable=False, unique=True)
    connecting_routes = Column(JSON, default=list)
    transfer_time_minutes = Column(Integer, default=5)
    is_major_hub = Column(Boolean, default=False, index=True)

    # Relationships
    stop = relationship("BusStop", back_populates="transfer_point")

# ================================
# Fare Bands
# ================================
class FareStructure(Base):
    __tablename__ = "fare_structures"

    id = Column(Integer, primary_key=True, index=True)
    route_id = Column(Integer, ForeignKey("bus_routes.id"), nullable=False, index=True)
    distance_range_start_km = Column(Float, nullable=False)
    distance_range_end_km = Column(Float, nullable=False)
    base_fare = Column(Integer, nullable=False)
    student_fare = Column(Integer, nullable=False)
    senior_fare = Column(Integer, nullable=False)
    effective_from = Column(Date, nullable=False)
    effective_until = Column(Date)
    is_active = Column(Boolean, default=True, index=True)

    # Relationships
    route = relationship("BusRoute", back_populates="fare_structures")

# ================================
# Bus Fleet
# ================================
class Bus(Base):
    __tablename__ = "buses"

    id = Column(Integer, primary_key=True, index=True)
    bus_number = Column(String(50), nullable=False, unique=True, index=True)
    route_id = Column(Integer, ForeignKey("bus_routes.id"), nullable=False)
    bus_type = Column(String(50))
    capacity = Column(Integer)
    operator = Column(String(255))
    status = Column(String(50), default="active")

    # Relationships
    route = relationship("BusRoute", back_populates="buses")
