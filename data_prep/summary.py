"""
Fold per-row validation issues into the tape-level report.

The report answers three questions for whoever uploaded the tape:
  - How many rows are usable?        -> total_rows / valid_rows
  - What exactly is wrong, and where? -> issues (row order, then check order)
  - Which columns did we recognise?   -> column_stats
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from core.schema import VALIDATOR_FIELDS, CanonicalField
from core.utils import round_half_up

ERROR = "error"
WARNING = "warning"

GOOD_SCORE = 90
FAIR_SCORE = 70


@dataclass(frozen=True)
class ValidationIssue:
    row: int
    field: str
    value: Any
    severity: str  # ERROR | WARNING
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "field": self.field,
            "value": self.value,
            "severity": self.severity,
            "message": self.message,
        }


@dataclass(frozen=True)
class ColumnStat:
    field: str
    mapped: bool
    mapped_to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"field": self.field, "mapped": self.mapped}
        if self.mapped_to is not None:
            out["mappedTo"] = self.mapped_to
        return out


@dataclass(frozen=True)
class ValidationSummary:
    total_rows: int
    valid_rows: int
    error_count: int
    warning_count: int
    issues: Tuple[ValidationIssue, ...] = field(default_factory=tuple)
    column_stats: Tuple[ColumnStat, ...] = field(default_factory=tuple)

    @property
    def invalid_rows(self) -> int:
        return self.total_rows - self.valid_rows

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == WARNING]

    def to_dict(self) -> Dict[str, Any]:
        """Report shape handed to storage / the browser."""
        return {
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "issues": [i.to_dict() for i in self.issues],
            "columnStats": [c.to_dict() for c in self.column_stats],
        }

    def summary(self) -> str:
        lines = [f"{self.valid_rows}/{self.total_rows} rows valid."]
        if self.error_count:
            lines.append(f"ERRORS ({self.error_count}):")
            for e in self.errors:
                lines.append(f"  ✗ row {e.row} [{e.field}] {e.message}")
        if self.warning_count:
            lines.append(f"WARNINGS ({self.warning_count}):")
            for w in self.warnings:
                lines.append(f"  ⚠ row {w.row} [{w.field}] {w.message}")
        if not self.issues:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def build_summary(
    row_issues: Sequence[Sequence[ValidationIssue]],
    mapping: Mapping[str, str],
    *,
    fields: Tuple[CanonicalField, ...] = VALIDATOR_FIELDS,
) -> ValidationSummary:
    """
    Build the report from one issue list per input row (empty list = clean row).
    A row is valid iff none of its issues is an error.
    """
    issues = tuple(i for per_row in row_issues for i in per_row)
    valid_rows = sum(
        1 for per_row in row_issues if not any(i.severity == ERROR for i in per_row)
    )
    column_stats = tuple(
        ColumnStat(field=f.name, mapped=f.name in mapping, mapped_to=mapping.get(f.name))
        for f in fields
    )
    return ValidationSummary(
        total_rows=len(row_issues),
        valid_rows=valid_rows,
        error_count=sum(1 for i in issues if i.severity == ERROR),
        warning_count=sum(1 for i in issues if i.severity == WARNING),
        issues=issues,
        column_stats=column_stats,
    )


def validation_score(summary: ValidationSummary) -> int:
    """Percent of valid rows, rounded half-up. Empty tapes have no score."""
    if summary.total_rows == 0:
        raise ValueError("Tape is empty (0 rows).")
    return int(round_half_up(summary.valid_rows / summary.total_rows * 100))


def score_grade(score: int) -> str:
    if score >= GOOD_SCORE:
        return "good"
    if score >= FAIR_SCORE:
        return "fair"
    return "poor"


def issues_frame(summary: ValidationSummary) -> pd.DataFrame:
    """Issues as a table (one row per issue), in report order."""
    columns = ["row", "field", "value", "severity", "message"]
    return pd.DataFrame([i.to_dict() for i in summary.issues], columns=columns)


def issue_counts_by_field(summary: ValidationSummary) -> pd.DataFrame:
    """
    Error/warning counts per canonical field, for a quick "where does it hurt" view.
    Fields without issues are left out.
    """
    df = issues_frame(summary)
    if df.empty:
        return pd.DataFrame(columns=["field", ERROR, WARNING])
    counts = (
        df.groupby(["field", "severity"], sort=False)
        .size()
        .unstack(fill_value=0)
        .reindex(columns=[ERROR, WARNING], fill_value=0)
        .reset_index()
    )
    counts.columns.name = None
    return counts
