# gradebook/config.py
from pydantic_settings import BaseSettings
from pydantic import Field

from gradebook.schemas.performance import PerformancePolicy

class Settings(BaseSettings):
    SECRET_KEY: str = Field("change-me-in-production")
    ALGORITHM: str = Field("HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(7)

    DATABASE_URL: str = Field("sqlite+aiosqlite:///./gradebook.db")
    SQL_ECHO: bool = Field(False)

    # Grading policy. Competency averages and overall averages share the 0-100 scale.
    APPROVAL_THRESHOLD: float = Field(70.0)
    IN_PROGRESS_THRESHOLD: float = Field(50.0)
    CERTIFICATE_MIN_AVERAGE: float = Field(70.0)
    TREND_WINDOW: int = Field(3, ge=1)
    TREND_TOLERANCE: float = Field(2.0, ge=0)

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def async_database_url(self) -> str:
        url = self.DATABASE_URL
        # Ensure asyncpg is used
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @property
    def performance_policy(self) -> PerformancePolicy:
        return PerformancePolicy(
            approval_threshold=self.APPROVAL_THRESHOLD,
            in_progress_threshold=self.IN_PROGRESS_THRESHOLD,
            certificate_min_average=self.CERTIFICATE_MIN_AVERAGE,
            trend_window=self.TREND_WINDOW,
            trend_tolerance=self.TREND_TOLERANCE,
        )

settings = Settings()
