"""
Canonical loan-tape fields and the lookup tables used to recognise them.

Two alias tables exist because two call sites match headers differently:
  - VALIDATOR_FIELDS: quick tape validation (reports issues, keeps every row)
  - INGEST_FIELDS:    strict pool ingestion (all-or-nothing typed records)

Alias order matters. The mapper tries aliases first-to-last and the first
alias that hits any header wins, so put the most specific spelling first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple


@dataclass(frozen=True)
class CanonicalField:
    name: str
    label: str
    aliases: Tuple[str, ...]
    required: bool = False


VALIDATOR_FIELDS: Tuple[CanonicalField, ...] = (
    CanonicalField(
        "loan_id", "Loan ID",
        ("loan_id", "loan_reference", "loanid", "id", "reference", "loan_number", "loan_ref"),
    ),
    CanonicalField(
        "principal", "Original Principal",
        ("principal", "original_principal", "loan_amount", "amount", "original_amount"),
    ),
    CanonicalField(
        "balance", "Current Balance",
        ("balance", "current_balance", "outstanding_balance", "remaining_balance"),
    ),
    CanonicalField(
        "rate", "Interest Rate",
        ("rate", "interest_rate", "apr", "interest", "int_rate"),
    ),
    CanonicalField(
        "fico", "FICO Score",
        ("fico", "fico_score", "credit_score", "score", "fico_at_origination"),
    ),
    CanonicalField(
        "state", "Borrower State",
        ("state", "borrower_state", "st", "state_code"),
    ),
    CanonicalField(
        "origination_date", "Origination Date",
        ("origination_date", "orig_date", "start_date", "issue_date", "loan_date"),
    ),
    CanonicalField(
        "status", "Loan Status",
        ("status", "loan_status", "current_status"),
    ),
)


INGEST_FIELDS: Tuple[CanonicalField, ...] = (
    CanonicalField(
        "loan_id", "Loan ID",
        ("loan_reference", "loan_id", "loanid", "id", "reference", "loan_number"),
        required=True,
    ),
    CanonicalField(
        "principal", "Original Principal",
        ("original_principal", "principal", "original_amount", "loan_amount", "amount"),
        required=True,
    ),
    CanonicalField(
        "balance", "Current Balance",
        ("current_balance", "balance", "outstanding_balance", "remaining_balance"),
        required=True,
    ),
    CanonicalField("rate", "Interest Rate", ("interest_rate", "rate", "apr", "interest")),
    CanonicalField("term_months", "Term (Months)", ("term_months", "term", "months", "loan_term")),
    CanonicalField(
        "origination_date", "Origination Date",
        ("origination_date", "orig_date", "start_date", "issue_date"),
    ),
    CanonicalField("maturity_date", "Maturity Date", ("maturity_date", "end_date", "due_date")),
    CanonicalField("fico", "FICO Score", ("fico_score", "fico", "credit_score", "score")),
    CanonicalField("dti_ratio", "DTI Ratio", ("dti_ratio", "dti", "debt_to_income")),
    CanonicalField("state", "Borrower State", ("borrower_state", "state", "st")),
    CanonicalField("borrower_zip", "Borrower ZIP", ("borrower_zip", "zip", "zipcode", "postal_code")),
    CanonicalField("monthly_payment", "Monthly Payment", ("monthly_payment", "payment", "monthly_pmt")),
    CanonicalField("payments_made", "Payments Made", ("payments_made", "pmts_made", "payments_completed")),
    CanonicalField("payments_remaining", "Payments Remaining", ("payments_remaining", "pmts_remaining")),
    CanonicalField("status", "Loan Status", ("status", "loan_status", "current_status")),
    CanonicalField("days_delinquent", "Days Delinquent", ("days_delinquent", "delinquent_days", "dpd")),
)


# 50 states + DC
US_STATE_CODES: FrozenSet[str] = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC",
})


LOAN_STATUSES: Tuple[str, ...] = (
    "current",
    "delinquent_30",
    "delinquent_60",
    "delinquent_90",
    "default",
    "charged_off",
    "paid_off",
)

DEFAULT_LOAN_STATUS = "current"

# Free-text status (lower-cased) -> stored status.
STATUS_ALIASES: Dict[str, str] = {
    "current": "current",
    "delinquent": "delinquent_30",
    "30": "delinquent_30",
    "30+": "delinquent_30",
    "60": "delinquent_60",
    "60+": "delinquent_60",
    "90": "delinquent_90",
    "90+": "delinquent_90",
    "default": "default",
    "charged off": "charged_off",
    "chargedoff": "charged_off",
    "charged_off": "charged_off",
    "paid off": "paid_off",
    "paidoff": "paid_off",
    "paid_off": "paid_off",
}

# Statuses counted as delinquent in pool statistics.
DELINQUENT_STATUSES: FrozenSet[str] = frozenset(
    {"delinquent_30", "delinquent_60", "delinquent_90", "default"}
)


def field_names(fields: Tuple[CanonicalField, ...]) -> Tuple[str, ...]:
    return tuple(f.name for f in fields)


def required_fields(fields: Tuple[CanonicalField, ...]) -> Tuple[CanonicalField, ...]:
    return tuple(f for f in fields if f.required)
