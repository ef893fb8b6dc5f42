"""Application configuration with comprehensive validation."""
from typing import Optional, Literal, List
from functools import lru_cache
from pydantic import Field, model_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Mentor Reputation Service"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"
    SECRET_KEY: SecretStr = SecretStr("development-secret-key")

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Snowflake
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL_REPUTATION: int = 3600    # 1 hour

    # Per-mentor recomputation guard
    REPUTATION_LOCK_TIMEOUT: int = Field(default=30, ge=1, le=300)
    REPUTATION_LOCK_BLOCKING_TIMEOUT: int = Field(default=10, ge=1, le=120)
    REPUTATION_MAX_RETRIES: int = Field(default=3, ge=1, le=10)

    # Scoring Parameters
    DECAY_HALF_LIFE_MONTHS: float = Field(default=6.0, gt=0, le=60)
    PRIOR_MEAN: float = Field(default=5.5, ge=1.0, le=6.0)
    PRIOR_WEIGHT: float = Field(default=3.0, ge=0, le=50)
    WILSON_Z: float = Field(default=1.96, gt=0, le=4.0)
    ENGAGEMENT_REFERENCE_SESSIONS: int = Field(default=50, ge=1, le=10000)
    TENURE_SATURATION_MONTHS: float = Field(default=24.0, gt=0, le=240)
    CONSISTENCY_SIGMA_DIVISOR: float = Field(default=2.0, gt=0, le=6.0)
    TENURE_FLOOR: float = Field(default=0.1, ge=0, le=1)
    SUSPICION_RECENCY_MINUTES: int = Field(default=60, ge=0, le=1440)

    # Level Thresholds
    LEVEL_4_MIN_REVIEWS: int = Field(default=25, ge=0)
    LEVEL_4_MIN_RATING: float = Field(default=4.5, ge=0.0, le=6.0)
    LEVEL_3_MIN_REVIEWS: int = Field(default=10, ge=0)
    LEVEL_3_MIN_RATING: float = Field(default=4.0, ge=0.0, le=6.0)
    LEVEL_2_MIN_REVIEWS: int = Field(default=3, ge=0)
    LEVEL_2_MIN_RATING: float = Field(default=3.5, ge=0.0, le=6.0)

    # Badge Thresholds
    STAR_MENTOR_MIN_RATING: float = Field(default=4.8, ge=0.0, le=6.0)
    STAR_MENTOR_MIN_REVIEWS: int = Field(default=30, ge=0)
    EXPERIENCED_MENTOR_MIN_REVIEWS: int = Field(default=50, ge=0)
    TRUSTED_MENTOR_MIN_REVIEWS: int = Field(default=5, ge=0)
    TRUSTED_MENTOR_RECENT_WINDOW: int = Field(default=3, ge=1)
    TRUSTED_MENTOR_MIN_RECENT_AVERAGE: float = Field(default=4.5, ge=1.0, le=6.0)
    COMPLETE_PROFILE_MIN_BIO_LENGTH: int = Field(default=150, ge=0)

    # Composite Weights
    W_WILSON: float = Field(default=0.45, ge=0.0, le=1.0)
    W_BAYESIAN: float = Field(default=0.35, ge=0.0, le=1.0)
    W_ENGAGEMENT: float = Field(default=0.10, ge=0.0, le=1.0)
    W_CONSISTENCY: float = Field(default=0.05, ge=0.0, le=1.0)
    W_ACTIVITY: float = Field(default=0.05, ge=0.0, le=1.0)
    W_TENURE: float = Field(default=0.01, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_composite_weights(self):
        """Validate composite weights sum to 1.0 (reference table sums to 1.01)."""
        total = sum(self.composite_weights)
        if abs(total - 1.0) > 0.0101:
            raise ValueError(f"Composite weights must sum to 1.0 (±0.01), got {total}")
        return self

    @model_validator(mode="after")
    def validate_level_thresholds(self):
        """Higher levels must not be easier to reach than lower ones."""
        if not (self.LEVEL_4_MIN_REVIEWS >= self.LEVEL_3_MIN_REVIEWS >= self.LEVEL_2_MIN_REVIEWS):
            raise ValueError("Level review thresholds must not decrease from level 2 to level 4")
        if not (self.LEVEL_4_MIN_RATING >= self.LEVEL_3_MIN_RATING >= self.LEVEL_2_MIN_RATING):
            raise ValueError("Level rating thresholds must not decrease from level 2 to level 4")
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has required security settings."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if len(self.SECRET_KEY.get_secret_value()) < 32:
                raise ValueError("SECRET_KEY must be ≥32 characters in production")
            if not self.SNOWFLAKE_ACCOUNT:
                raise ValueError("SNOWFLAKE_ACCOUNT required in production")
        return self

    @property
    def composite_weights(self) -> List[float]:
        """Get composite weights as list."""
        return [
            self.W_WILSON, self.W_BAYESIAN, self.W_ENGAGEMENT,
            self.W_CONSISTENCY, self.W_ACTIVITY, self.W_TENURE,
        ]

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
