"""
Cosmetic clean-up of tape rows.

Only two things change: state codes are trimmed/upper-cased, and parseable
origination dates become YYYY-MM-DD. Semantic problems (negative principal,
bad state code, ...) are left for the validator to report, never "fixed".
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from core.utils import cell_text, is_blank, parse_date


def clean_row(row: Mapping[str, Any], mapping: Mapping[str, str]) -> Dict[str, Any]:
    cleaned = dict(row)

    state_col = mapping.get("state")
    if state_col is not None and cell_text(cleaned.get(state_col)) != "":
        cleaned[state_col] = cell_text(cleaned[state_col]).strip().upper()

    date_col = mapping.get("origination_date")
    if date_col is not None and not is_blank(cleaned.get(date_col)):
        parsed = parse_date(cleaned[date_col])
        if parsed is not None:
            cleaned[date_col] = parsed.isoformat()

    return cleaned


def clean_rows(
    rows: Sequence[Mapping[str, Any]], mapping: Mapping[str, str]
) -> List[Dict[str, Any]]:
    """Shallow-copy and clean every row; output is index-aligned with input."""
    return [clean_row(row, mapping) for row in rows]
