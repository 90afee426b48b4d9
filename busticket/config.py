from pydantic_settings import BaseSettings
from decimal import Decimal
from typing import Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./bus_ticketing.db"

    # Application
    PROJECT_NAME: str = "Bengaluru Bus System"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    PUBLIC_BASE_URL: str = ""

    # Fares
    BASE_FARE: Decimal = Decimal("25")
    CURRENCY: str = "INR"
    CURRENCY_SUBUNIT: int = 100
    DISPLAY_TIMEZONE: str = "Asia/Kolkata"

    # Payment gateway (Razorpay)
    RAZORPAY_KEY_ID: str = "rzp_test_example"
    RAZORPAY_KEY_SECRET: str = "example_secret"
    RAZORPAY_WEBHOOK_SECRET: Optional[str] = None
    RAZORPAY_BASE_URL: str = "https://api.razorpay.com/v1"
    RAZORPAY_TIMEOUT_SECONDS: float = 10.0

    # Email
    EMAIL_HOST: Optional[str] = None
    EMAIL_PORT: int = 587
    EMAIL_USER: Optional[str] = None
    EMAIL_PASS: Optional[str] = None
    EMAIL_FROM: Optional[str] = None
    EMAIL_USE_TLS: bool = True

    @property
    def webhook_secret(self) -> str:
        return self.RAZORPAY_WEBHOOK_SECRET or self.RAZORPAY_KEY_SECRET

    @property
    def email_sender(self) -> Optional[str]:
        return self.EMAIL_FROM or self.EMAIL_USER

    def enforce_gateway_secret_baseline(self) -> None:
        """Refuse to start outside dev/test with the example gateway secret."""
        if self.ENVIRONMENT.lower() not in ("development", "dev", "test") and self.RAZORPAY_KEY_SECRET == "example_secret":
            raise RuntimeError("RAZORPAY_KEY_SECRET must be set in non-dev environments")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()
