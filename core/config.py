"""
Validation and ingestion thresholds.
Every public operation takes one of these as an optional keyword; the module
defaults below reproduce the production rules.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationConfig:
    # principal
    max_principal: float = 10_000_000.0  # above this -> warning, not error

    # rate, in percent (12.5 means 12.5%)
    high_rate_warning: float = 36.0
    max_rate: float = 100.0

    # FICO, inclusive bounds
    fico_min: int = 300
    fico_max: int = 850

    # issue row numbers are 1-based and skip the header row
    row_number_offset: int = 2


@dataclass(frozen=True)
class IngestionConfig:
    max_reported_errors: int = 20
    default_term_months: int = 36
    max_rate: float = 100.0

    # truncation lengths for stored text fields
    state_length: int = 2
    zip_length: int = 10

    row_number_offset: int = 2


DEFAULT_VALIDATION_CONFIG = ValidationConfig()
DEFAULT_INGESTION_CONFIG = IngestionConfig()
