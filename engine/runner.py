"""
Tape check runner — orchestrates mapping, validation and cleaning for one tape.

Data flows one way:
  (rows, headers) -> column mapping -> validator  -> ValidationSummary
                                    -> cleaner    -> cleaned rows

The validator and the cleaner read the same mapped view of the raw rows and
never see each other's output. Persisting or batching the results is the
caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from core.config import DEFAULT_VALIDATION_CONFIG, ValidationConfig
from data_prep.cleaner import clean_rows
from data_prep.column_mapper import ColumnMapping, resolve_mapping
from data_prep.loader import load_tape_file
from data_prep.summary import ValidationSummary, score_grade, validation_score
from data_prep.validators import quick_validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TapeCheckResult:
    mapping: ColumnMapping
    summary: ValidationSummary
    cleaned_rows: List[Dict[str, Any]]

    @property
    def score(self) -> Optional[int]:
        """Percent of valid rows, or None for an empty tape."""
        if self.summary.total_rows == 0:
            return None
        return validation_score(self.summary)

    @property
    def grade(self) -> Optional[str]:
        score = self.score
        return None if score is None else score_grade(score)


def run_tape_check(
    rows: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    existing_mapping: Optional[Mapping[str, str]] = None,
    *,
    config: ValidationConfig = DEFAULT_VALIDATION_CONFIG,
) -> TapeCheckResult:
    """
    Run the full quick-check pipeline on an in-memory tape.

    Parameters
    ----------
    rows : sequence of dict
        Raw rows keyed by source column name
    headers : sequence of str
        Source column names, in file order
    existing_mapping : dict, optional
        Canonical field -> column name; wins over auto-mapping for the fields it names

    Returns
    -------
    TapeCheckResult with the mapping used, the validation report, and cleaned
    rows index-aligned with `rows`.
    """
    mapping = resolve_mapping(headers, existing_mapping)
    logger.info(f"[Tape Check] mapped {len(mapping)} fields: {dict(mapping)}")

    summary = quick_validate(rows, mapping, config=config)
    cleaned = clean_rows(rows, mapping)
    return TapeCheckResult(mapping=mapping, summary=summary, cleaned_rows=cleaned)


def check_tape_file(
    path: Union[str, Path],
    existing_mapping: Optional[Mapping[str, str]] = None,
    *,
    config: ValidationConfig = DEFAULT_VALIDATION_CONFIG,
) -> TapeCheckResult:
    """Load a CSV/Excel tape from disk and run `run_tape_check` on it."""
    headers, rows = load_tape_file(path)
    return run_tape_check(rows, headers, existing_mapping, config=config)
