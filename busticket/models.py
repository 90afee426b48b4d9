from sqlalchemy import Column, Integer, BigInteger, String, Boolean, DateTime, Text, ForeignKey, Numeric, Float, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from busticket.database import Base

# SQLite only autoincrements INTEGER primary keys
Identifier = BigInteger().with_variant(Integer, "sqlite")

# ================================
# Users
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(Identifier, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), unique=True, nullable=False, index=True)
    wallet_balance = Column(Numeric(10, 2), nullable=False, default=0)
    total_bookings = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    tickets = relationship("Ticket", back_populates="user")
    transactions = relationship("Transaction", back_populates="user")

# ================================
# Tickets & Payments
# ================================
class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Identifier, primary_key=True, index=True)
    ticket_id = Column(String(40), unique=True, nullable=False, index=True)
    user_id = Column(Identifier, ForeignKey("users.id"), nullable=True, index=True)

    # Passenger contact snapshot taken at booking time
    user_name = Column(String(255), nullable=False, default="Guest")
    user_email = Column(String(255), nullable=False, default="")
    user_phone = Column(String(32), nullable=False, default="")

    from_stop = Column(String(255), nullable=False)
    to_stop = Column(String(255), nullable=False)
    passengers = Column(Integer, nullable=False)
    fare = Column(Numeric(10, 2), nullable=False)
    gateway_order_id = Column(String(64), unique=True, nullable=False, index=True)
    gateway_payment_id = Column(String(64))
    payment_status = Column(String(20), nullable=False, default="pending", index=True)
    booking_time = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    travel_date = Column(DateTime(timezone=True), server_default=func.now())
    qr_code_data = Column(Text)
    seat_numbers = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)

    # Relationships
    user = relationship("User", back_populates="tickets")

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Identifier, primary_key=True, index=True)
    transaction_id = Column(String(40), unique=True, nullable=False, index=True)
    user_id = Column(Identifier, ForeignKey("users.id"), nullable=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(String(30), nullable=False)
    gateway_order_id = Column(String(64), unique=True, index=True)
    gateway_payment_id = Column(String(64))
    status = Column(String(20), nullable=False, default="pending", index=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="transactions")

# ================================
# Fleet & Stops
# ================================
class Bus(Base):
    __tablename__ = "buses"

    id = Column(Identifier, primary_key=True, index=True)
    bus_id = Column(String(20), unique=True, nullable=False, index=True)
    route = Column(String(100), nullable=False)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    next_stop = Column(String(255))
    last_stop = Column(String(255))
    eta = Column(Integer, default=5)
    capacity = Column(Integer, nullable=False, default=50)
    current_passengers = Column(Integer, nullable=False, default=0)
    available_seats = Column(Integer, nullable=False, default=50)
    occupancy_rate = Column(Float, nullable=False, default=0.0)
    speed = Column(Float, default=30)
    status = Column(String(20), default="active", index=True)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class BusStop(Base):
    __tablename__ = "bus_stops"

    id = Column(Identifier, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    crowd_level = Column(String(10), default="Medium")
    vendor_blocked = Column(Boolean, default=False)
    amenities = Column(JSON, default=list)
    bus_routes = Column(JSON, default=list)
    ticket_counter = Column(Boolean, default=True)
