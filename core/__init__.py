"""
Core package — canonical field tables, configuration, and cell coercion helpers.
No business logic lives here.
"""

from .schema import (
    CanonicalField,
    VALIDATOR_FIELDS,
    INGEST_FIELDS,
    US_STATE_CODES,
    STATUS_ALIASES,
)
from .config import (
    ValidationConfig,
    IngestionConfig,
    DEFAULT_VALIDATION_CONFIG,
    DEFAULT_INGESTION_CONFIG,
)
from .utils import is_blank, cell_text, parse_float, parse_int, parse_date, round_half_up

__all__ = [
    "CanonicalField",
    "VALIDATOR_FIELDS",
    "INGEST_FIELDS",
    "US_STATE_CODES",
    "STATUS_ALIASES",
    "ValidationConfig",
    "IngestionConfig",
    "DEFAULT_VALIDATION_CONFIG",
    "DEFAULT_INGESTION_CONFIG",
    "is_blank",
    "cell_text",
    "parse_float",
    "parse_int",
    "parse_date",
    "round_half_up",
]
