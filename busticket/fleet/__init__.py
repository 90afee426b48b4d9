from .router import router
from .service import FleetService
from .seed import seed_reference_data

__all__ = ["router", "FleetService", "seed_reference_data"]
