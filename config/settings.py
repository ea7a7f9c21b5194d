"""
Chain Intelligence Engine - Configuration

Loads settings from environment variables with sensible defaults.
"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    @property
    def project_root(self) -> Path:
        """Return project root directory."""
        return PROJECT_ROOT

    # Application
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: str = Field(default=str(PROJECT_ROOT / "logs"))

    # Pattern tables (known chains, franchise vocabulary, role keywords)
    CHAIN_PATTERNS_PATH: str = Field(
        default=str(PROJECT_ROOT / "config" / "chain_patterns.yaml")
    )

    # Confidence increments
    CHAIN_KNOWN_CHAIN_WEIGHT: float = Field(default=0.4)
    CHAIN_FRANCHISE_INDICATOR_WEIGHT: float = Field(default=0.2)
    CHAIN_SIMILAR_NAME_WEIGHT: float = Field(default=0.15)
    CHAIN_SHARED_PHONE_WEIGHT: float = Field(default=0.1)
    CHAIN_SHARED_DOMAIN_WEIGHT: float = Field(default=0.25)
    CHAIN_PROXIMITY_WEIGHT: float = Field(default=0.1)

    # Decision thresholds
    CHAIN_NAME_SIMILARITY_THRESHOLD: float = Field(default=0.75)
    CHAIN_CONFIDENCE_THRESHOLD: float = Field(default=0.5)
    CHAIN_MIN_MATCHES: int = Field(default=2)

    # Length constants
    CHAIN_PHONE_PREFIX_LENGTH: int = Field(default=7)  # Area code + exchange
    CHAIN_PROXIMITY_RADIUS_MILES: float = Field(default=50.0)

    # Batch behaviour
    CHAIN_CLUSTERING_MODE: str = Field(default="sweep")
    CHAIN_USE_BLOCKING: bool = Field(default=False)
    CHAIN_WORKERS: int = Field(default=1)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
