"""
Row-by-row quality checks for an uploaded loan tape.

Unlike strict ingestion, nothing here rejects the tape: every problem becomes
an issue tied to a row and a field, and the row stays in the output.
  - error:   the row is not usable as-is (counts against valid_rows)
  - warning: worth a look, row is still valid

Checks only run for fields the mapping found. Malformed cells never raise.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from core.config import DEFAULT_VALIDATION_CONFIG, ValidationConfig
from core.schema import US_STATE_CODES, VALIDATOR_FIELDS
from core.utils import cell_text, is_blank, parse_float, parse_int

from .summary import ERROR, WARNING, ValidationIssue, ValidationSummary, build_summary

logger = logging.getLogger(__name__)


def _check_loan_id(
    value: Any, row_num: int, seen_ids: Dict[str, int]
) -> List[ValidationIssue]:
    """`seen_ids` maps trimmed loan id -> first row it appeared on; updated in place."""
    loan_id = cell_text(value).strip()
    if not loan_id:
        return [ValidationIssue(row_num, "loan_id", value, ERROR, "Missing loan ID")]
    if loan_id in seen_ids:
        return [ValidationIssue(
            row_num, "loan_id", loan_id, WARNING,
            f"Duplicate loan ID (also on row {seen_ids[loan_id]})",
        )]
    seen_ids[loan_id] = row_num
    return []


def _check_principal(value: Any, row_num: int, cfg: ValidationConfig) -> List[ValidationIssue]:
    principal = parse_float(value)
    if principal is None:
        return [ValidationIssue(row_num, "principal", value, ERROR, "Invalid principal amount")]
    if principal <= 0:
        return [ValidationIssue(
            row_num, "principal", value, ERROR, "Principal must be greater than 0"
        )]
    if principal > cfg.max_principal:
        return [ValidationIssue(
            row_num, "principal", value, WARNING,
            f"Unusually high principal (> ${cfg.max_principal / 1_000_000:g}M)",
        )]
    return []


def _check_rate(value: Any, row_num: int, cfg: ValidationConfig) -> List[ValidationIssue]:
    rate = parse_float(value)
    if rate is None:
        return []
    if rate < 0:
        return [ValidationIssue(row_num, "rate", value, ERROR, "Interest rate cannot be negative")]
    if rate > cfg.max_rate:
        return [ValidationIssue(
            row_num, "rate", value, ERROR, f"Interest rate exceeds {cfg.max_rate:g}%"
        )]
    if rate > cfg.high_rate_warning:
        return [ValidationIssue(
            row_num, "rate", value, WARNING, f"High interest rate (> {cfg.high_rate_warning:g}%)"
        )]
    return []


def _check_fico(value: Any, row_num: int, cfg: ValidationConfig) -> List[ValidationIssue]:
    # Only an absent or empty cell is "missing"; whitespace goes on to the parse.
    if cell_text(value) == "":
        return [ValidationIssue(row_num, "fico", value, WARNING, "Missing FICO score")]
    fico = parse_int(value)
    if fico is None:
        return [ValidationIssue(row_num, "fico", value, WARNING, "Invalid FICO score format")]
    if fico < cfg.fico_min or fico > cfg.fico_max:
        return [ValidationIssue(
            row_num, "fico", value, ERROR,
            f"FICO score out of range ({cfg.fico_min}-{cfg.fico_max}): {fico}",
        )]
    return []


def _check_state(value: Any, row_num: int) -> List[ValidationIssue]:
    state = cell_text(value).strip().upper()
    if state and state not in US_STATE_CODES:
        return [ValidationIssue(
            row_num, "state", value, ERROR, f"Invalid state code: {cell_text(value)}"
        )]
    return []


def _check_origination_date(value: Any, row_num: int) -> List[ValidationIssue]:
    # Textual heuristic only: "Jan 5 2023" style dates get flagged, nothing is parsed.
    if is_blank(value):
        return []
    text = cell_text(value)
    if " " in text and "-" not in text:
        return [ValidationIssue(
            row_num, "origination_date", value, WARNING, "Non-standard date format"
        )]
    return []


def validate_row(
    row: Mapping[str, Any],
    row_num: int,
    mapping: Mapping[str, str],
    seen_ids: Dict[str, int],
    *,
    config: ValidationConfig = DEFAULT_VALIDATION_CONFIG,
) -> List[ValidationIssue]:
    """All checks for one row, in fixed order. Unmapped fields are skipped."""
    def cell(name: str) -> Any:
        return row.get(mapping[name])

    issues: List[ValidationIssue] = []
    if "loan_id" in mapping:
        issues += _check_loan_id(cell("loan_id"), row_num, seen_ids)
    if "principal" in mapping:
        issues += _check_principal(cell("principal"), row_num, config)
    if "rate" in mapping:
        issues += _check_rate(cell("rate"), row_num, config)
    if "fico" in mapping:
        issues += _check_fico(cell("fico"), row_num, config)
    if "state" in mapping:
        issues += _check_state(cell("state"), row_num)
    if "origination_date" in mapping:
        issues += _check_origination_date(cell("origination_date"), row_num)
    return issues


def quick_validate(
    rows: Sequence[Mapping[str, Any]],
    mapping: Mapping[str, str],
    *,
    config: ValidationConfig = DEFAULT_VALIDATION_CONFIG,
) -> ValidationSummary:
    """
    Validate every row and return the tape report.
    Every input row is counted; none are dropped.
    """
    seen_ids: Dict[str, int] = {}
    row_issues = [
        validate_row(row, idx + config.row_number_offset, mapping, seen_ids, config=config)
        for idx, row in enumerate(rows)
    ]
    summary = build_summary(row_issues, mapping, fields=VALIDATOR_FIELDS)
    logger.info(
        f"[Tape Validator] {summary.valid_rows}/{summary.total_rows} rows valid "
        f"({summary.error_count} errors, {summary.warning_count} warnings)"
    )
    return summary
