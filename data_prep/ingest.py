"""
Strict loan-tape ingestion: raw tape rows -> typed loan records for a pool.

All-or-nothing, unlike data_prep.validators:
  1. Every required field must have a mapped column, else the whole batch is
     rejected with the list of missing columns and no row is looked at.
  2. Every row is coerced and checked (id, principal > 0, balance >= 0,
     0 <= rate <= 100, term > 0). Any failing row rejects the whole batch;
     the first N row errors are returned plus a count of the rest.

Known quirk kept on purpose: an origination/maturity date that can't be read
is replaced by today's date. Each substitution is logged and listed in
IngestionResult.date_fallbacks so the caller can surface it.
"""

from __future__ import annotations

import logging
import numbers
import re
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from core.schema import DEFAULT_LOAN_STATUS, INGEST_FIELDS, STATUS_ALIASES, required_fields
from core.utils import cell_text, is_blank, missing_fields, parse_date, parse_float, parse_int

from .column_mapper import ColumnMapping, map_columns, normalize_header_loose, resolve_mapping

logger = logging.getLogger(__name__)

# Plain decimal literal; no digit separators, no nan/inf words.
_NUMBER_TEXT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass
class LoanRecord:
    """One loan as stored in a pool."""
    loan_id: str
    principal: Optional[float]
    balance: Optional[float]
    rate: Optional[float]
    term_months: Optional[int]
    origination_date: str  # ISO YYYY-MM-DD

    state: Optional[str] = None
    borrower_zip: Optional[str] = None
    maturity_date: Optional[str] = None
    fico: Optional[int] = None
    dti_ratio: Optional[float] = None
    monthly_payment: Optional[float] = None
    payments_made: int = 0
    payments_remaining: Optional[int] = None
    status: str = DEFAULT_LOAN_STATUS
    days_delinquent: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class IngestionResult:
    mapping: ColumnMapping
    records: List[LoanRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    missing_fields: Tuple[str, ...] = ()
    total_errors: int = 0
    date_fallbacks: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.total_errors == 0

    def summary(self) -> str:
        if self.accepted:
            return f"✓ {len(self.records)} loans ready to import."
        lines = [f"REJECTED ({self.total_errors} problems):"]
        lines += [f"  ✗ {e}" for e in self.errors]
        return "\n".join(lines)


@dataclass(frozen=True)
class IngestionPreview:
    columns_found: int
    columns_required: int
    formatting_errors: int
    records_passed: int
    total_records: int


def map_ingest_columns(headers: Sequence[str]) -> ColumnMapping:
    """Auto-map with the ingestion alias table and the alphanumeric-only normalizer."""
    return map_columns(headers, fields=INGEST_FIELDS, normalize=normalize_header_loose)


def normalize_status(value: Any) -> str:
    return STATUS_ALIASES.get(cell_text(value).strip().lower(), DEFAULT_LOAN_STATUS)


def coerce_date(value: Any, today: date) -> Tuple[str, bool]:
    """
    Return (iso_date, fell_back). Tries a generic parse, then a strict
    MM/DD/YYYY split, then gives up and returns today.
    """
    if not is_blank(value):
        parsed = parse_date(value)
        if parsed is not None:
            return parsed.isoformat(), False

        parts = cell_text(value).strip().split("/")
        if len(parts) == 3 and all(p.isdigit() for p in parts):
            month, day, year = (int(p) for p in parts)
            try:
                return date(year, month, day).isoformat(), False
            except ValueError:
                pass

    return today.isoformat(), True


def _optional(row: Mapping[str, Any], mapping: Mapping[str, str], name: str) -> Any:
    """Cell value for an optional field, or None when unmapped or blank."""
    column = mapping.get(name)
    if column is None:
        return None
    value = row.get(column)
    return None if is_blank(value) else value


def transform_row(
    row: Mapping[str, Any],
    mapping: Mapping[str, str],
    today: date,
    *,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
) -> Tuple[LoanRecord, List[str]]:
    """Coerce one raw row. Returns the record and the fields that fell back to today."""
    fallbacks: List[str] = []

    def required_number(name: str) -> Optional[float]:
        value = row.get(mapping[name])
        return 0.0 if is_blank(value) else parse_float(value)

    rate_raw = _optional(row, mapping, "rate")
    term_raw = _optional(row, mapping, "term_months")

    if "origination_date" in mapping:
        origination, fell_back = coerce_date(row.get(mapping["origination_date"]), today)
        if fell_back:
            fallbacks.append("origination_date")
    else:
        origination = today.isoformat()

    record = LoanRecord(
        loan_id=cell_text(row.get(mapping["loan_id"])),
        principal=required_number("principal"),
        balance=required_number("balance"),
        rate=0.0 if rate_raw is None else parse_float(rate_raw),
        term_months=config.default_term_months if term_raw is None else parse_int(term_raw),
        origination_date=origination,
    )

    state = _optional(row, mapping, "state")
    if state is not None:
        record.state = cell_text(state).strip()[: config.state_length].upper()
    zip_code = _optional(row, mapping, "borrower_zip")
    if zip_code is not None:
        record.borrower_zip = cell_text(zip_code).strip()[: config.zip_length]
    maturity = _optional(row, mapping, "maturity_date")
    if maturity is not None:
        record.maturity_date, fell_back = coerce_date(maturity, today)
        if fell_back:
            fallbacks.append("maturity_date")

    for name in ("fico", "payments_remaining"):
        value = _optional(row, mapping, name)
        if value is not None:
            setattr(record, name, parse_int(value))
    for name in ("dti_ratio", "monthly_payment"):
        value = _optional(row, mapping, name)
        if value is not None:
            setattr(record, name, parse_float(value))
    for name in ("payments_made", "days_delinquent"):
        value = _optional(row, mapping, name)
        if value is not None:
            setattr(record, name, parse_int(value) or 0)

    status = _optional(row, mapping, "status")
    if status is not None:
        record.status = normalize_status(status)

    return record, fallbacks


def check_record(
    record: LoanRecord,
    row_num: int,
    *,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
) -> List[str]:
    errors: List[str] = []
    if not record.loan_id.strip():
        errors.append(f"Row {row_num}: missing loan ID")
    if record.principal is None or not record.principal > 0:
        errors.append(f"Row {row_num}: principal must be greater than 0")
    if record.balance is None or not record.balance >= 0:
        errors.append(f"Row {row_num}: balance cannot be negative or missing")
    if record.rate is None or not 0 <= record.rate <= config.max_rate:
        errors.append(f"Row {row_num}: interest rate must be between 0 and {config.max_rate:g}")
    if record.term_months is None or not record.term_months > 0:
        errors.append(f"Row {row_num}: term must be greater than 0 months")
    return errors


def _cap_errors(errors: List[str], limit: int) -> List[str]:
    if len(errors) <= limit:
        return list(errors)
    return errors[:limit] + [f"... and {len(errors) - limit} more errors"]


def strict_ingest(
    rows: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    existing_mapping: Optional[Mapping[str, str]] = None,
    *,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
    today: Optional[date] = None,
) -> IngestionResult:
    """
    Turn a raw tape into LoanRecords, or reject it entirely.

    `today` is the fallback date for unreadable dates (defaults to date.today()).
    """
    today = today or date.today()
    mapping = resolve_mapping(
        headers, existing_mapping, fields=INGEST_FIELDS, normalize=normalize_header_loose
    )

    required = required_fields(INGEST_FIELDS)
    missing = missing_fields(mapping, [f.name for f in required])
    if missing:
        labels = {f.name: f.label for f in required}
        errors = [f"Missing required column: {labels[name]} ({name})" for name in missing]
        logger.warning(f"[Ingest] Rejected: missing required columns {missing}")
        return IngestionResult(
            mapping=mapping,
            errors=errors,
            missing_fields=tuple(missing),
            total_errors=len(errors),
        )

    records: List[LoanRecord] = []
    row_errors: List[str] = []
    fallbacks: List[Tuple[int, str]] = []
    for idx, row in enumerate(rows):
        row_num = idx + config.row_number_offset
        record, fell_back = transform_row(row, mapping, today, config=config)
        for name in fell_back:
            logger.warning(f"[Ingest] Row {row_num}: unreadable {name}, using {today.isoformat()}")
            fallbacks.append((row_num, name))
        row_errors += check_record(record, row_num, config=config)
        records.append(record)

    if row_errors:
        logger.warning(f"[Ingest] Rejected: {len(row_errors)} row errors in {len(rows)} rows")
        return IngestionResult(
            mapping=mapping,
            errors=_cap_errors(row_errors, config.max_reported_errors),
            total_errors=len(row_errors),
            date_fallbacks=fallbacks,
        )

    logger.info(f"[Ingest] {len(records)} loans accepted")
    return IngestionResult(mapping=mapping, records=records, date_fallbacks=fallbacks)


def preview_ingestion(
    rows: Sequence[Mapping[str, Any]],
    mapping: Mapping[str, str],
) -> IngestionPreview:
    """
    Quick pre-upload check: are the required columns there, and how many rows
    have a loan id plus numeric principal and balance?
    """
    required = [f.name for f in required_fields(INGEST_FIELDS)]

    def is_empty(value: Any) -> bool:
        # a numeric zero counts as not filled in
        return is_blank(value) or (isinstance(value, numbers.Real) and value == 0)

    def is_number(value: Any) -> bool:
        return _NUMBER_TEXT.match(cell_text(value).strip()) is not None

    failed = 0
    for row in rows:
        values = {name: row.get(mapping[name]) if name in mapping else None for name in required}
        if any(is_empty(v) for v in values.values()):
            failed += 1
        elif not (is_number(values["principal"]) and is_number(values["balance"])):
            failed += 1

    return IngestionPreview(
        columns_found=len(required) - len(missing_fields(mapping, required)),
        columns_required=len(required),
        formatting_errors=failed,
        records_passed=len(rows) - failed,
        total_records=len(rows),
    )
