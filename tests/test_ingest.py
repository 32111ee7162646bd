from __future__ import annotations

import logging
from datetime import date

import pytest

from core.config import IngestionConfig
from data_prep.ingest import (
    coerce_date,
    map_ingest_columns,
    normalize_status,
    preview_ingestion,
    strict_ingest,
)


def test_accepts_clean_tape(ingest_rows, ingest_headers, today):
    result = strict_ingest(ingest_rows, ingest_headers, today=today)

    assert result.accepted
    assert result.errors == []
    assert len(result.records) == 2

    first, second = result.records
    assert first.loan_id == "A-1"
    assert first.principal == 10000.0
    assert first.balance == 8000.0
    assert first.rate == 12.5
    assert first.term_months == 36
    assert first.origination_date == "2023-01-15"
    assert first.fico == 700
    assert first.state == "TX"
    assert first.status == "current"
    assert first.payments_made == 0
    assert first.days_delinquent == 0
    assert first.maturity_date is None

    assert second.origination_date == "2022-03-01"
    assert second.status == "delinquent_60"


def test_missing_required_columns_rejects_before_rows(today):
    headers = ["Loan Reference", "Interest Rate"]
    rows = [{"Loan Reference": "", "Interest Rate": "900"}]

    result = strict_ingest(rows, headers, today=today)

    assert not result.accepted
    assert result.records == []
    assert result.missing_fields == ("principal", "balance")
    assert result.errors == [
        "Missing required column: Original Principal (principal)",
        "Missing required column: Current Balance (balance)",
    ]


def test_one_bad_row_rejects_the_batch(ingest_rows, ingest_headers, today):
    ingest_rows[1]["Current Balance"] = "-1"

    result = strict_ingest(ingest_rows, ingest_headers, today=today)

    assert not result.accepted
    assert result.records == []
    assert result.errors == ["Row 3: balance cannot be negative or missing"]


@pytest.mark.parametrize(
    "column, value, message",
    [
        ("Loan Reference", "  ", "Row 2: missing loan ID"),
        ("Original Principal", "0", "Row 2: principal must be greater than 0"),
        ("Original Principal", "", "Row 2: principal must be greater than 0"),
        ("Original Principal", "abc", "Row 2: principal must be greater than 0"),
        ("Interest Rate", "100.5", "Row 2: interest rate must be between 0 and 100"),
        ("Interest Rate", "-1", "Row 2: interest rate must be between 0 and 100"),
        ("Term Months", "0", "Row 2: term must be greater than 0 months"),
        ("Term Months", "n/a", "Row 2: term must be greater than 0 months"),
    ],
)
def test_structural_checks(ingest_rows, ingest_headers, today, column, value, message):
    ingest_rows[0][column] = value
    result = strict_ingest(ingest_rows[:1], ingest_headers, today=today)
    assert result.errors == [message]


def test_boundaries_accepted(ingest_rows, ingest_headers, today):
    ingest_rows[0]["Interest Rate"] = "0"
    ingest_rows[0]["Current Balance"] = "0"
    ingest_rows[1]["Interest Rate"] = "100"

    assert strict_ingest(ingest_rows, ingest_headers, today=today).accepted


def test_error_list_is_capped(today):
    headers = ["loan_id", "principal", "balance"]
    rows = [{"loan_id": f"L{i}", "principal": "-1", "balance": "5"} for i in range(25)]

    result = strict_ingest(rows, headers, today=today)

    assert result.total_errors == 25
    assert len(result.errors) == 21
    assert result.errors[0] == "Row 2: principal must be greater than 0"
    assert result.errors[19] == "Row 21: principal must be greater than 0"
    assert result.errors[-1] == "... and 5 more errors"


def test_custom_error_cap(today):
    headers = ["loan_id", "principal", "balance"]
    rows = [{"loan_id": "", "principal": "1", "balance": "1"}] * 3

    result = strict_ingest(rows, headers, config=IngestionConfig(max_reported_errors=1), today=today)

    assert result.errors == ["Row 2: missing loan ID", "... and 2 more errors"]


def test_defaults_when_optional_columns_missing(today):
    headers = ["id", "amount", "balance"]
    rows = [{"id": "7", "amount": "1000", "balance": "900"}]

    record = strict_ingest(rows, headers, today=today).records[0]

    assert record.rate == 0.0
    assert record.term_months == 36
    assert record.origination_date == "2024-06-30"
    assert record.state is None
    assert record.status == "current"


def test_optional_fields_are_coerced(today):
    headers = [
        "loan_id", "principal", "balance", "zip", "dti", "monthly_payment",
        "payments_made", "pmts_remaining", "dpd", "maturity_date", "state",
    ]
    rows = [{
        "loan_id": "Z", "principal": "5000", "balance": "4000", "zip": "12345-678901",
        "dti": "0.35", "monthly_payment": "152.30", "payments_made": "12.0",
        "pmts_remaining": "24", "dpd": "", "maturity_date": "2027-01-01", "state": " texas",
    }]

    result = strict_ingest(rows, headers, today=today)
    record = result.records[0]

    assert result.mapping["borrower_zip"] == "zip"
    assert record.borrower_zip == "12345-6789"
    assert record.dti_ratio == 0.35
    assert record.monthly_payment == 152.30
    assert record.payments_made == 12
    assert record.payments_remaining == 24
    assert record.days_delinquent == 0
    assert record.maturity_date == "2027-01-01"
    assert record.state == "TE"


def test_unreadable_dates_fall_back_to_today_and_are_reported(ingest_rows, ingest_headers, today, caplog):
    ingest_rows[0]["Origination Date"] = "sometime in spring"

    with caplog.at_level(logging.WARNING, logger="data_prep.ingest"):
        result = strict_ingest(ingest_rows, ingest_headers, today=today)

    assert result.accepted
    assert result.records[0].origination_date == "2024-06-30"
    assert result.date_fallbacks == [(2, "origination_date")]
    assert "unreadable origination_date" in caplog.text


def test_existing_mapping_is_honoured(today):
    headers = ["ref", "orig", "bal"]
    rows = [{"ref": "Q1", "orig": "100", "bal": "50"}]

    result = strict_ingest(
        rows, headers, {"loan_id": "ref", "principal": "orig", "balance": "bal"}, today=today
    )

    assert result.accepted
    assert result.records[0].principal == 100.0


def test_ingest_mapping_drops_underscores():
    mapping = map_ingest_columns(["Loan_Ref", "Orig-Principal", "CURRENT BALANCE"])

    assert mapping["loan_id"] == "Loan_Ref"
    assert mapping["balance"] == "CURRENT BALANCE"


@pytest.mark.parametrize(
    "raw, status",
    [
        ("Current", "current"),
        ("delinquent", "delinquent_30"),
        ("30+", "delinquent_30"),
        ("90", "delinquent_90"),
        (" Charged Off ", "charged_off"),
        ("PAIDOFF", "paid_off"),
        ("default", "default"),
        ("in forbearance", "current"),
        (60, "delinquent_60"),
    ],
)
def test_status_vocabulary(raw, status):
    assert normalize_status(raw) == status


@pytest.mark.parametrize(
    "raw, expected, fell_back",
    [
        ("2023-04-05", "2023-04-05", False),
        ("4/5/2023", "2023-04-05", False),
        (date(2020, 1, 2), "2020-01-02", False),
        ("", "2024-06-30", True),
        (None, "2024-06-30", True),
        ("13/45/2023", "2024-06-30", True),
        ("garbage", "2024-06-30", True),
    ],
)
def test_coerce_date(raw, expected, fell_back, today):
    assert coerce_date(raw, today) == (expected, fell_back)


def test_preview_counts(ingest_headers):
    rows = [
        {"Loan Reference": "A", "Original Principal": "10", "Current Balance": "5"},
        {"Loan Reference": "", "Original Principal": "10", "Current Balance": "5"},
        {"Loan Reference": "C", "Original Principal": "$10", "Current Balance": "5"},
    ]
    preview = preview_ingestion(rows, map_ingest_columns(ingest_headers))

    assert preview.columns_found == 3
    assert preview.columns_required == 3
    assert preview.formatting_errors == 2
    assert preview.records_passed == 1
    assert preview.total_records == 3


def test_preview_without_required_columns_fails_every_row():
    preview = preview_ingestion([{"x": 1}, {"x": 2}], {})

    assert preview.columns_found == 0
    assert preview.formatting_errors == 2
    assert preview.records_passed == 0


def test_status_aliases_only_produce_known_statuses():
    from core.schema import LOAN_STATUSES, STATUS_ALIASES

    assert set(STATUS_ALIASES.values()) <= set(LOAN_STATUSES)


def test_preview_treats_zero_and_separators_as_formatting_errors(ingest_headers):
    rows = [
        {"Loan Reference": "A", "Original Principal": 0, "Current Balance": "5"},
        {"Loan Reference": "B", "Original Principal": "10", "Current Balance": 0.0},
        {"Loan Reference": "C", "Original Principal": "1_000", "Current Balance": "5"},
        {"Loan Reference": "D", "Original Principal": "nan", "Current Balance": "inf"},
        {"Loan Reference": "E", "Original Principal": "0", "Current Balance": 2500.5},
    ]
    preview = preview_ingestion(rows, map_ingest_columns(ingest_headers))

    assert preview.formatting_errors == 4
    assert preview.records_passed == 1
