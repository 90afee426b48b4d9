import logging
import random
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from busticket.fleet.schemas import BusStatus, CrowdLevel
from busticket.models import Bus, BusStop

logger = logging.getLogger(__name__)

# Bengaluru bounding box for simulated positions
LAT_BOUNDS = (12.80, 13.10)
LON_BOUNDS = (77.50, 77.80)
POSITION_JITTER = 0.01

MORNING_RUSH = (8, 11)
EVENING_RUSH = (17, 20)

def clamp(value, low, high):
    return max(low, min(high, value))

def is_rush_hour(hour: int) -> bool:
    return MORNING_RUSH[0] <= hour <= MORNING_RUSH[1] or EVENING_RUSH[0] <= hour <= EVENING_RUSH[1]

def apply_occupancy(bus: Bus, passengers: int):
    """Set the passenger count and keep seats and occupancy consistent with it"""
    capacity = max(0, bus.capacity or 0)
    passengers = clamp(passengers, 0, capacity)
    bus.current_passengers = passengers
    bus.available_seats = capacity - passengers
    bus.occupancy_rate = passengers / capacity if capacity else 0.0

class FleetService:
    """Buses and stops: listings, rider reports and demo simulators"""

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng or random.Random()

    def get_live_buses(self, limit: int = 15) -> List[Bus]:
        return self.db.query(Bus).filter(
            Bus.status == BusStatus.ACTIVE.value
        ).order_by(Bus.bus_id).limit(limit).all()

    def get_stops(self) -> List[BusStop]:
        return self.db.query(BusStop).order_by(BusStop.id).all()

    def submit_report(self, report_type: str, stop_name: str) -> Tuple[str, bool]:
        """Record a rider report; crowd and vendor reports flag the stop"""

        report_id = f"REP{uuid.uuid4().hex[:8].upper()}"
        stop = self.db.query(BusStop).filter(BusStop.name == stop_name).first()

        updated = False
        if stop:
            if report_type == "crowd":
                stop.crowd_level = CrowdLevel.HIGH.value
                updated = True
            elif report_type == "vendor":
                stop.vendor_blocked = True
                updated = True

        if updated:
            self.db.commit()

        logger.info("Report %s (%s) for stop %s, stop updated: %s", report_id, report_type, stop_name, updated)
        return report_id, updated

    def simulate_bus_movement(self) -> int:
        """Nudge every active bus and advance it towards its next stop"""

        buses = self.db.query(Bus).filter(Bus.status == BusStatus.ACTIVE.value).all()
        stop_names = [name for (name,) in self.db.query(BusStop.name).all()]
        now = datetime.now(timezone.utc)

        for bus in buses:
            bus.lat = clamp(bus.lat + (self.rng.random() - 0.5) * POSITION_JITTER, *LAT_BOUNDS)
            bus.lon = clamp(bus.lon + (self.rng.random() - 0.5) * POSITION_JITTER, *LON_BOUNDS)

            if (bus.eta or 0) <= 1 and stop_names:
                bus.last_stop = bus.next_stop
                bus.next_stop = self.rng.choice(stop_names)
                bus.eta = 5 + self.rng.randrange(15)
            else:
                bus.eta = max(1, (bus.eta or 1) - 1)

            bus.last_updated = now

        self.db.commit()
        return len(buses)

    def simulate_capacity(self, hour: Optional[int] = None) -> Tuple[int, int]:
        """Board and alight passengers; buses fill up during rush hours"""

        hour = datetime.now().hour if hour is None else hour
        buses = self.db.query(Bus).filter(Bus.status == BusStatus.ACTIVE.value).all()
        now = datetime.now(timezone.utc)

        for bus in buses:
            if is_rush_hour(hour):
                change = self.rng.randint(3, 7)
            else:
                change = self.rng.randint(-3, 2)

            apply_occupancy(bus, (bus.current_passengers or 0) + change)
            bus.last_updated = now

        self.db.commit()
        return len(buses), hour
