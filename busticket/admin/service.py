from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, desc
from sqlalchemy.orm import Session

from busticket.models import Bus, BusStop, Ticket, User
from busticket.schemas import PaymentStatus
from busticket.fleet.schemas import BusStatus
from busticket.tickets.schemas import TicketSummary
from busticket.admin.schemas import SystemStats, Dashboard

class StatsService:
    """Aggregate read projections for operators"""

    def __init__(self, db: Session):
        self.db = db

    def get_system_stats(self) -> SystemStats:
        return SystemStats(
            total_tickets=self.db.query(Ticket).count(),
            total_revenue=self._paid_revenue(),
            active_buses=self._active_buses(),
            total_users=self.db.query(User).count(),
            active_stops=self.db.query(BusStop).count()
        )

    def get_dashboard(self, now: Optional[datetime] = None) -> Dashboard:
        now = now or datetime.now(timezone.utc)
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        day_end = day_start + timedelta(days=1)

        todays_tickets = self.db.query(Ticket).filter(
            Ticket.booking_time >= day_start,
            Ticket.booking_time < day_end
        ).count()

        recent = self.db.query(Ticket).order_by(desc(Ticket.booking_time), desc(Ticket.id)).limit(10).all()

        return Dashboard(
            todays_tickets=todays_tickets,
            todays_revenue=self._paid_revenue(day_start, day_end),
            total_users=self.db.query(User).count(),
            active_buses=self._active_buses(),
            recent_tickets=[TicketSummary.model_validate(ticket) for ticket in recent]
        )

    def _paid_revenue(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Decimal:
        query = self.db.query(func.sum(Ticket.fare)).filter(Ticket.payment_status == PaymentStatus.PAID.value)
        if start is not None:
            query = query.filter(Ticket.booking_time >= start, Ticket.booking_time < end)
        return Decimal(query.scalar() or 0)

    def _active_buses(self) -> int:
        return self.db.query(Bus).filter(Bus.status == BusStatus.ACTIVE.value).count()
