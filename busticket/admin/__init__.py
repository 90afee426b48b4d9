from .router import router
from .service import StatsService

__all__ = ["router", "StatsService"]
