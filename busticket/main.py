from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from busticket.config import settings
from busticket.database import init_db
from busticket.logging_config import setup_logging
from busticket.users import router as users_router
from busticket.payments import router as payments_router
from busticket.tickets import router as tickets_router
from busticket.fleet import router as fleet_router
from busticket.admin import router as admin_router

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.enforce_gateway_secret_baseline()
    init_db()
    yield

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Bengaluru Bus System API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users_router, prefix=settings.API_PREFIX, tags=["Users"])
app.include_router(payments_router.router, prefix=settings.API_PREFIX, tags=["Payments"])
app.include_router(tickets_router, prefix=settings.API_PREFIX, tags=["Tickets"])
app.include_router(fleet_router, prefix=settings.API_PREFIX, tags=["Fleet"])
app.include_router(admin_router, prefix=settings.API_PREFIX, tags=["Admin"])

@app.get(f"{settings.API_PREFIX}/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": f"{settings.PROJECT_NAME} API",
        "paymentGateway": "Razorpay"
    }

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": f"{settings.PROJECT_NAME} API",
        "version": "1.0.0",
        "docs": "/docs"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
