from pydantic import Field
from typing import List, Optional, Literal
from datetime import datetime
from enum import Enum

from busticket.schemas import CamelModel

class CrowdLevel(str, Enum):
    """Crowd level at a stop"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

class BusStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"

class LiveBus(CamelModel):
    id: str
    route: str
    lat: float
    lon: float
    eta: Optional[int] = None
    next_stop: Optional[str] = None
    available_seats: int
    capacity: int
    occupancy_rate: float
    status: BusStatus

class LiveBusesResponse(CamelModel):
    success: bool = True
    timestamp: datetime
    count: int
    buses: List[LiveBus]

class Stop(CamelModel):
    id: int
    name: str
    lat: float
    lon: float
    crowd_level: CrowdLevel
    vendor_blocked: bool
    amenities: List[str] = []

class StopsResponse(CamelModel):
    success: bool = True
    count: int
    stops: List[Stop]

class ReportRequest(CamelModel):
    """Rider report about conditions at a stop"""
    type: Literal["crowd", "vendor", "other"] = "other"
    stop: str = Field(..., min_length=1)
    description: Optional[str] = None
    user_id: Optional[int] = None

class ReportResponse(CamelModel):
    success: bool = True
    message: str = "Report submitted successfully"
    report_id: str
    stop_updated: bool

class SimulationResponse(CamelModel):
    success: bool = True
    message: str
    updated_count: int
    time_of_day: Optional[str] = None

class SeedResponse(CamelModel):
    success: bool = True
    message: str = "Database seeded with initial data"
    stops_count: int
    buses_count: int
    sample_user_id: int
    sample_ticket_id: str
