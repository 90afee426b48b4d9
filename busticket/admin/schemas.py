from typing import List

from busticket.schemas import CamelModel, Money
from busticket.tickets.schemas import TicketSummary

class SystemStats(CamelModel):
    total_tickets: int
    total_revenue: Money
    active_buses: int
    total_users: int
    active_stops: int

class StatsResponse(CamelModel):
    success: bool = True
    stats: SystemStats

class Dashboard(CamelModel):
    todays_tickets: int
    todays_revenue: Money
    total_users: int
    active_buses: int
    recent_tickets: List[TicketSummary]

class DashboardResponse(CamelModel):
    success: bool = True
    dashboard: Dashboard
