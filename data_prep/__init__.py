"""
Data preparation — loading tapes, mapping columns, validation, cleaning, ingestion.
"""

from .loader import load_tape_file
from .column_mapper import (
    map_columns,
    resolve_mapping,
    normalize_header,
    normalize_header_loose,
)
from .validators import quick_validate
from .summary import (
    ValidationIssue,
    ValidationSummary,
    validation_score,
    score_grade,
    issues_frame,
)
from .cleaner import clean_rows
from .ingest import (
    LoanRecord,
    IngestionResult,
    map_ingest_columns,
    strict_ingest,
    preview_ingestion,
)

__all__ = [
    "load_tape_file",
    "map_columns",
    "resolve_mapping",
    "normalize_header",
    "normalize_header_loose",
    "quick_validate",
    "ValidationIssue",
    "ValidationSummary",
    "validation_score",
    "score_grade",
    "issues_frame",
    "clean_rows",
    "LoanRecord",
    "IngestionResult",
    "map_ingest_columns",
    "strict_ingest",
    "preview_ingestion",
]
