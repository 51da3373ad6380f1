"""
Configuration for the claimfill engine.

Settings are read from environment variables (optionally from a .env file via
python-dotenv), prefixed with CLAIMFILL_:

- CLAIMFILL_TWO_DIGIT_YEAR_PIVOT: two-digit years below this map to 20xx (default 50)
- CLAIMFILL_SENTINEL_UNDERSCORE_MIN: shortest run of underscores treated as "no data" (default 3)
- CLAIMFILL_PAN_MIN_LENGTH / CLAIMFILL_PIN_MIN_LENGTH: identifier length floors (10 / 6)
- CLAIMFILL_DATE_OUTPUT_FORMAT: strftime format for normalised dates (default %d/%m/%Y)
- CLAIMFILL_LOG_LEVEL: level used by configure_logging (default INFO)
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


class MappingSettings(BaseModel):
    two_digit_year_pivot: int = Field(default=50, ge=0, le=99)
    sentinel_underscore_min: int = Field(default=3, ge=1)
    pan_min_length: int = Field(default=10, ge=1)
    pin_min_length: int = Field(default=6, ge=1)
    date_output_format: str = "%d/%m/%Y"
    log_level: str = "INFO"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def load_settings() -> MappingSettings:
    """
    Loads settings from .env and the environment.
    Called once by the caller (the CLI) and passed to the engine, which never
    reads the environment itself.
    """
    load_dotenv()
    defaults = MappingSettings()
    return MappingSettings(
        two_digit_year_pivot=_int_from_env("CLAIMFILL_TWO_DIGIT_YEAR_PIVOT", defaults.two_digit_year_pivot),
        sentinel_underscore_min=_int_from_env("CLAIMFILL_SENTINEL_UNDERSCORE_MIN", defaults.sentinel_underscore_min),
        pan_min_length=_int_from_env("CLAIMFILL_PAN_MIN_LENGTH", defaults.pan_min_length),
        pin_min_length=_int_from_env("CLAIMFILL_PIN_MIN_LENGTH", defaults.pin_min_length),
        date_output_format=os.getenv("CLAIMFILL_DATE_OUTPUT_FORMAT", defaults.date_output_format),
        log_level=os.getenv("CLAIMFILL_LOG_LEVEL", defaults.log_level).upper(),
    )


def configure_logging(level: Optional[str] = None) -> None:
    """Configures root logging for command-line use. Library code never calls this."""
    level_name = (level or load_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
