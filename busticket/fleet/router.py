from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from busticket.database import get_db
from busticket.dependencies import get_qr_encoder
from busticket.fleet.schemas import (
    LiveBus, LiveBusesResponse, Stop, StopsResponse, ReportRequest,
    ReportResponse, SimulationResponse, SeedResponse
)
from busticket.fleet.seed import seed_reference_data
from busticket.fleet.service import FleetService

router = APIRouter()

@router.get("/live-buses", response_model=LiveBusesResponse)
def get_live_buses(db: Session = Depends(get_db)):
    """Active buses with their current position and load"""

    buses = FleetService(db).get_live_buses()

    return LiveBusesResponse(
        timestamp=datetime.now(timezone.utc),
        count=len(buses),
        buses=[
            LiveBus(
                id=bus.bus_id,
                route=bus.route,
                lat=bus.lat,
                lon=bus.lon,
                eta=bus.eta,
                next_stop=bus.next_stop,
                available_seats=bus.available_seats,
                capacity=bus.capacity,
                occupancy_rate=bus.occupancy_rate,
                status=bus.status
            )
            for bus in buses
        ]
    )

@router.get("/bus-stops", response_model=StopsResponse)
def get_bus_stops(db: Session = Depends(get_db)):
    """All stops with crowd and vendor flags"""

    stops = FleetService(db).get_stops()
    return StopsResponse(count=len(stops), stops=[Stop.model_validate(stop) for stop in stops])

@router.post("/submit-report", response_model=ReportResponse)
def submit_report(report: ReportRequest, db: Session = Depends(get_db)):
    """Rider report about a stop"""

    report_id, updated = FleetService(db).submit_report(report.type, report.stop)
    return ReportResponse(report_id=report_id, stop_updated=updated)

@router.post("/admin/simulate-buses", response_model=SimulationResponse)
def simulate_buses(db: Session = Depends(get_db)):
    """Move the demo fleet one step"""

    updated = FleetService(db).simulate_bus_movement()
    return SimulationResponse(message="Bus locations updated", updated_count=updated)

@router.post("/simulate-capacity", response_model=SimulationResponse)
def simulate_capacity(db: Session = Depends(get_db)):
    """Board and alight passengers on the demo fleet"""

    updated, hour = FleetService(db).simulate_capacity()
    return SimulationResponse(
        message="Bus capacity simulated",
        updated_count=updated,
        time_of_day=f"{hour}:00"
    )

@router.post("/admin/seed-data", response_model=SeedResponse)
def seed_data(db: Session = Depends(get_db), qr_encoder=Depends(get_qr_encoder)):
    """Reset demo stops and buses"""

    return SeedResponse(**seed_reference_data(db, qr_encoder))
