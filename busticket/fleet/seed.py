import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from busticket.models import Bus, BusStop, Ticket, Transaction, User
from busticket.schemas import PaymentStatus, TransactionStatus, TransactionType
from busticket.fleet.service import apply_occupancy

logger = logging.getLogger(__name__)

SAMPLE_TICKET_ID = "TKTSAMPLE123"
SAMPLE_ORDER_ID = "order_sample_123"
SAMPLE_PAYMENT_ID = "pay_sample_123"

STOPS = [
    {
        "name": "Majestic Bus Stand", "lat": 12.9774, "lon": 77.5711, "crowd_level": "High",
        "amenities": ["Ticket Counter", "Waiting Area", "Food Court", "Restrooms"],
        "bus_routes": ["Vajra 1", "Vajra 2", "Big 10", "Big 5", "Airport"],
    },
    {
        "name": "Shivajinagar", "lat": 12.9915, "lon": 77.6037, "crowd_level": "Medium",
        "amenities": ["Ticket Counter", "Waiting Area"],
        "bus_routes": ["Vajra 1", "Vajra 2", "Vajra 3"],
    },
    {
        "name": "Electronic City", "lat": 12.8459, "lon": 77.6633, "crowd_level": "Low",
        "amenities": ["Ticket Counter", "Restrooms"],
        "bus_routes": ["Airport", "Big 10", "Vajra 4"],
    },
    {
        "name": "Whitefield", "lat": 12.9698, "lon": 77.7500, "crowd_level": "Medium",
        "amenities": ["Ticket Counter", "Food Court", "Restrooms"],
        "bus_routes": ["Big 5", "Vajra 2", "City Circular"],
    },
    {
        "name": "Jayanagar", "lat": 12.9279, "lon": 77.5939, "crowd_level": "Low",
        "amenities": ["Ticket Counter", "Waiting Area"],
        "bus_routes": ["Big 10", "Vajra 1", "Express 1"],
    },
]

BUSES = [
    {"bus_id": "KA01AB1234", "route": "Vajra 1", "lat": 12.9774, "lon": 77.5711, "next_stop": "Majestic Bus Stand",
     "last_stop": "Jayanagar", "eta": 5, "capacity": 50, "current_passengers": 35, "speed": 30},
    {"bus_id": "KA01CD5678", "route": "Vajra 2", "lat": 12.9816, "lon": 77.6046, "next_stop": "Shivajinagar",
     "last_stop": "Majestic Bus Stand", "eta": 8, "capacity": 50, "current_passengers": 20, "speed": 28},
    {"bus_id": "KA01EF9012", "route": "Big 10", "lat": 12.9616, "lon": 77.5846, "next_stop": "Whitefield",
     "last_stop": "Electronic City", "eta": 12, "capacity": 40, "current_passengers": 38, "speed": 35},
    {"bus_id": "KA01GH3456", "route": "Big 5", "lat": 12.9916, "lon": 77.6146, "next_stop": "Majestic Bus Stand",
     "last_stop": "Koramangala", "eta": 3, "capacity": 40, "current_passengers": 10, "speed": 25},
    {"bus_id": "KA01IJ7890", "route": "Airport", "lat": 12.9516, "lon": 77.5746, "next_stop": "Electronic City",
     "last_stop": "Airport", "eta": 15, "capacity": 60, "current_passengers": 45, "speed": 32},
]

SAMPLE_USER = {"name": "Abhishek Yadav", "email": "abhishek@example.com", "phone": "9876543210"}

def seed_reference_data(db: Session, qr_encoder) -> dict:
    """Reset stops and buses, and make sure the sample rider and paid ticket exist"""

    try:
        db.query(Bus).delete()
        db.query(BusStop).delete()

        stops = [BusStop(vendor_blocked=False, ticket_counter=True, **stop) for stop in STOPS]
        db.add_all(stops)

        buses = []
        for data in BUSES:
            bus = Bus(status="active", **{k: v for k, v in data.items() if k != "current_passengers"})
            apply_occupancy(bus, data["current_passengers"])
            buses.append(bus)
        db.add_all(buses)

        user = db.query(User).filter(User.email == SAMPLE_USER["email"]).first()
        if not user:
            user = User(wallet_balance=Decimal("500"), total_bookings=1, **SAMPLE_USER)
            db.add(user)
            db.flush()

        ticket = db.query(Ticket).filter(Ticket.ticket_id == SAMPLE_TICKET_ID).first()
        if not ticket:
            fare = Decimal("50")
            db.add(Ticket(
                ticket_id=SAMPLE_TICKET_ID,
                user_id=user.id,
                user_name=user.name,
                user_email=user.email,
                user_phone=user.phone,
                from_stop="Majestic Bus Stand",
                to_stop="Electronic City",
                passengers=2,
                fare=fare,
                gateway_order_id=SAMPLE_ORDER_ID,
                gateway_payment_id=SAMPLE_PAYMENT_ID,
                payment_status=PaymentStatus.PAID.value,
                qr_code_data=qr_encoder.encode(SAMPLE_TICKET_ID),
                seat_numbers=[],
                is_active=True
            ))
            db.add(Transaction(
                transaction_id="TXNSAMPLE123",
                user_id=user.id,
                amount=fare,
                type=TransactionType.TICKET_PURCHASE.value,
                gateway_order_id=SAMPLE_ORDER_ID,
                gateway_payment_id=SAMPLE_PAYMENT_ID,
                status=TransactionStatus.COMPLETED.value,
                description="Bus ticket from Majestic Bus Stand to Electronic City for 2 passenger(s)"
            ))

        db.commit()
    except Exception:
        logger.exception("Seeding failed")
        db.rollback()
        raise

    logger.info("Seeded %d stops and %d buses", len(stops), len(buses))
    return {
        "stops_count": len(stops),
        "buses_count": len(buses),
        "sample_user_id": user.id,
        "sample_ticket_id": SAMPLE_TICKET_ID,
    }
