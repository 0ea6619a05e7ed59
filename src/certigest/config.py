"""
Configuration module for CertiGest.
Loads environment variables and provides configuration settings.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from the package directory
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return float(raw)


class Config:
    """Configuration settings for certificate generation."""

    # Where relative template/image references are resolved
    ASSETS_DIR: Path = Path(os.getenv("CERTIGEST_ASSETS_DIR", "public"))
    # Where generated PDFs are saved ("downloaded")
    OUTPUT_DIR: Path = Path(os.getenv("CERTIGEST_OUTPUT_DIR", "generated"))
    # One JSON file per city
    CITIES_DIR: Path = Path(os.getenv("CERTIGEST_CITIES_DIR", str(BASE_DIR / "data" / "cities")))
    # None keeps the HTTP client's own default
    FETCH_TIMEOUT: float | None = _optional_float("CERTIGEST_FETCH_TIMEOUT")
    LOG_LEVEL: str = os.getenv("CERTIGEST_LOG_LEVEL", "INFO").upper()

    SUPPORTED_LOG_LEVELS: list[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    @classmethod
    def validate(cls) -> None:
        """Validate that configuration values are usable."""
        if cls.LOG_LEVEL not in cls.SUPPORTED_LOG_LEVELS:
            raise ValueError(f"CERTIGEST_LOG_LEVEL must be one of {cls.SUPPORTED_LOG_LEVELS}")
        if cls.FETCH_TIMEOUT is not None and cls.FETCH_TIMEOUT <= 0:
            raise ValueError("CERTIGEST_FETCH_TIMEOUT must be a positive number of seconds")
        if not cls.CITIES_DIR.is_dir():
            raise ValueError(f"CERTIGEST_CITIES_DIR does not exist: {cls.CITIES_DIR}")


config = Config()
