from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings with environment variable support
    """
    # Project info
    PROJECT_NAME: str = "Weather Edge"
    PROJECT_DESCRIPTION: str = "City name to current weather, backed by Open-Meteo"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Environment
    ENV: str = "dev"  # dev, uat, prod, preprod

    # === UPSTREAM SERVICES ===

    GEOCODING_BASE_URL: str = Field(
        default="https://geocoding-api.open-meteo.com",
        description="Base URL of the geocoding API (city name -> coordinates)"
    )

    WEATHER_BASE_URL: str = Field(
        default="https://api.open-meteo.com",
        description="Base URL of the forecast API (coordinates -> current weather)"
    )

    UPSTREAM_USER_AGENT: str = Field(
        default="opal-weather-vercel/1.0",
        description="User-Agent sent to the forecast API"
    )

    UPSTREAM_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        description="Timeout applied to each outbound call"
    )

    DATA_SOURCE: str = Field(
        default="open-meteo",
        description="Value of the 'source' field in weather responses"
    )

    # === CACHING HEADERS ===

    WEATHER_EDGE_MAX_AGE: int = Field(
        default=600,
        description="Seconds shared caches may keep weather data (s-maxage, upstream freshness)"
    )

    BROWSER_MAX_AGE: int = Field(
        default=60,
        description="Seconds private caches may keep weather responses (max-age)"
    )

    # === LOGGING CONFIGURATION ===

    LOG_FORMAT: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'pretty' for human-readable"
    )

    LOG_PRETTY: bool = Field(
        default=False,
        description="Enable pretty/human-readable logging format"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    LOG_COLOR: bool = Field(
        default=True,
        description="Enable colored console output"
    )

    # Correlation tracking
    ENABLE_CORRELATION_ID: bool = Field(
        default=True,
        description="Enable automatic correlation ID generation and propagation"
    )

    CORRELATION_ID_HEADER: str = Field(
        default="X-Correlation-ID",
        description="Header name for correlation ID"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }

    # === VALIDATION METHODS ===

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {valid_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is supported"""
        valid_formats = ["json", "pretty"]
        if v.lower() not in valid_formats:
            raise ValueError(f"LOG_FORMAT must be one of: {valid_formats}")
        return v.lower()

    @field_validator("UPSTREAM_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("UPSTREAM_TIMEOUT_SECONDS must be greater than 0")
        return v

    @field_validator("GEOCODING_BASE_URL", "WEATHER_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def weather_cache_control(self) -> str:
        """Cache-Control value attached to successful weather responses"""
        return f"public, s-maxage={self.WEATHER_EDGE_MAX_AGE}, max-age={self.BROWSER_MAX_AGE}"


# Create settings instance
settings = Settings()
