from __future__ import annotations

from datetime import date

import pytest

BASIC_HEADERS = ["loan_id", "principal", "rate", "fico", "state"]


@pytest.fixture
def basic_headers():
    return list(BASIC_HEADERS)


@pytest.fixture
def basic_rows():
    return [
        {"loan_id": "", "principal": 50000, "rate": 12.5, "fico": 720, "state": "TX"},
        {"loan_id": "L002", "principal": 75000, "rate": 150, "fico": 680, "state": "CA"},
    ]


@pytest.fixture
def clean_row():
    return {"loan_id": "L001", "principal": "25000", "rate": "9.5", "fico": "700", "state": "NY"}


@pytest.fixture
def ingest_headers():
    return [
        "Loan Reference", "Original Principal", "Current Balance", "Interest Rate",
        "Term Months", "Origination Date", "FICO Score", "Borrower State", "Status",
    ]


@pytest.fixture
def ingest_rows():
    return [
        {
            "Loan Reference": "A-1", "Original Principal": "10000", "Current Balance": "8000",
            "Interest Rate": "12.5", "Term Months": "36", "Origination Date": "2023-01-15",
            "FICO Score": "700", "Borrower State": "tx", "Status": "Current",
        },
        {
            "Loan Reference": "A-2", "Original Principal": "30000", "Current Balance": "30000",
            "Interest Rate": "8.5", "Term Months": "60", "Origination Date": "03/01/2022",
            "FICO Score": "760", "Borrower State": "CA", "Status": "60+",
        },
    ]


@pytest.fixture
def today():
    return date(2024, 6, 30)
