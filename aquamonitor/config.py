"""
Application configuration
Manages environment variables and application settings using Pydantic
"""

from typing import List
from pydantic import validator
from pydantic_settings import BaseSettings
import json


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./aquamonitor.db"
    ENABLE_JOURNAL: bool = True

    # Security Settings
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    ALGORITHM: str = "HS256"

    # Application Settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_HOSTS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Measurement index ceilings
    POND_INDEX_CAPACITY: int = 1000
    CRITICAL_INDEX_CAPACITY: int = 100

    # Default safety thresholds, fixed-point encoded like the measurements
    DEFAULT_MIN_TEMPERATURE: int = 150
    DEFAULT_MAX_TEMPERATURE: int = 320
    DEFAULT_MIN_PH: int = 65
    DEFAULT_MAX_PH: int = 90
    DEFAULT_MIN_OXYGEN: int = 50
    DEFAULT_MAX_AMMONIA: int = 50
    DEFAULT_MAX_NITRITE: int = 10
    DEFAULT_MAX_NITRATE: int = 500

    @validator('ALLOWED_HOSTS', pre=True)
    def parse_allowed_hosts(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        return v

    @validator('DEBUG', 'ENABLE_JOURNAL', pre=True)
    def parse_flags(cls, v):
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on')
        return v

    @validator('LOG_LEVEL', pre=True)
    def parse_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    def default_thresholds(self) -> dict:
        """Default threshold values keyed by ThresholdConfig field name"""
        return {
            "min_temperature": self.DEFAULT_MIN_TEMPERATURE,
            "max_temperature": self.DEFAULT_MAX_TEMPERATURE,
            "min_ph": self.DEFAULT_MIN_PH,
            "max_ph": self.DEFAULT_MAX_PH,
            "min_oxygen": self.DEFAULT_MIN_OXYGEN,
            "max_ammonia": self.DEFAULT_MAX_AMMONIA,
            "max_nitrite": self.DEFAULT_MAX_NITRITE,
            "max_nitrate": self.DEFAULT_MAX_NITRATE,
        }

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # This allows extra fields in .env without validation errors


# Fixed-point encoding of each measured parameter (as constants)
PARAMETER_UNITS = {
    "temperature": {"unit": "°C", "scale": 10, "signed": True},
    "ph": {"unit": "pH", "scale": 10, "signed": True},
    "dissolved_oxygen": {"unit": "mg/L", "scale": 10, "signed": False},
    "ammonia": {"unit": "mg/L", "scale": 100, "signed": False},
    "nitrite": {"unit": "mg/L", "scale": 100, "signed": False},
    "nitrate": {"unit": "mg/L", "scale": 10, "signed": False},
    "turbidity": {"unit": "NTU", "scale": 1, "signed": False},
}


def decode_parameter(parameter: str, value: int) -> float:
    """Convert an encoded reading back into its display unit"""
    return value / PARAMETER_UNITS[parameter]["scale"]


# Create settings instance
settings = Settings()
