from __future__ import annotations

import pandas as pd
import pytest

from data_prep.loader import load_tape_file


def test_csv_keeps_text_and_drops_blank_rows(tmp_path):
    path = tmp_path / "tape.csv"
    path.write_text(
        "Loan ID,Principal,State\n"
        "00123,50000,tx\n"
        ",,\n"
        "L2,,CA\n",
        encoding="utf-8",
    )

    headers, rows = load_tape_file(path)

    assert headers == ["Loan ID", "Principal", "State"]
    assert rows == [
        {"Loan ID": "00123", "Principal": "50000", "State": "tx"},
        {"Loan ID": "L2", "Principal": "", "State": "CA"},
    ]


def test_excel_first_sheet(tmp_path):
    path = tmp_path / "tape.xlsx"
    pd.DataFrame(
        {"loan_id": ["A", "B"], "principal": [1000, None], "orig_date": pd.to_datetime(["2023-01-15", "2022-06-01"])}
    ).to_excel(path, index=False)

    headers, rows = load_tape_file(path)

    assert headers == ["loan_id", "principal", "orig_date"]
    assert rows[0]["loan_id"] == "A"
    assert rows[0]["principal"] == 1000
    assert rows[1]["principal"] == ""
    assert pd.Timestamp(rows[0]["orig_date"]) == pd.Timestamp("2023-01-15")


def test_unsupported_extension(tmp_path):
    path = tmp_path / "tape.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported file type"):
        load_tape_file(path)


def test_header_only_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("loan_id,principal\n", encoding="utf-8")

    with pytest.raises(ValueError, match="No data found"):
        load_tape_file(path)
