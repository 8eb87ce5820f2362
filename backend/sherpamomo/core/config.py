from pydantic_settings import BaseSettings
from typing import List, Optional
from datetime import timedelta
from decimal import Decimal


class Settings(BaseSettings):
    ENV: str = "development"
    SECRET_KEY: str = "change-me-in-production"
    OTP_SECRET: str = "dev-otp-secret"
    DATABASE_URL: str = "sqlite:///./sherpamomo.db"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:3001,http://localhost:8081"

    # Reverse proxies whose X-Forwarded-For is trusted (comma-separated IPs); empty trusts none
    TRUSTED_PROXIES: str = ""

    # JWT
    JWT_ACCESS_EXPIRES_DAYS: int = 7

    # Checkout
    TAX_RATE: Decimal = Decimal("0.08")
    SHIPPING_FEE: Decimal = Decimal("5.00")
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("50")

    # Phone verification
    VERIFICATION_TTL_MINUTES: int = 5
    VERIFICATION_MAX_ATTEMPTS: int = 5
    CODE_REQUEST_LIMIT: int = 3
    CODE_REQUEST_WINDOW_SECONDS: int = 60
    VERIFY_LIMIT: int = 10
    VERIFY_WINDOW_SECONDS: int = 15 * 60
    TEST_PHONE: Optional[str] = None
    TEST_CODE: Optional[str] = None

    # Admin access
    ADMIN_AUTO_PROMOTE: bool = True
    ADMIN_DEV_BYPASS: bool = False

    # Admin seed
    ADMIN_PHONE: Optional[str] = None
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_NAME: str = "Admin"

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def trusted_proxies_list(self) -> List[str]:
        return [ip.strip() for ip in self.TRUSTED_PROXIES.split(",") if ip.strip()]

    @property
    def jwt_expires_delta(self) -> timedelta:
        return timedelta(days=self.JWT_ACCESS_EXPIRES_DAYS)

    @property
    def verification_ttl(self) -> timedelta:
        return timedelta(minutes=self.VERIFICATION_TTL_MINUTES)

    class Config:
        env_file = ".env"


settings = Settings()
