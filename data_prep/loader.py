from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import pandas as pd

from core.utils import is_blank

EXCEL_SUFFIXES = (".xlsx", ".xls")


def load_tape_file(
    path: Union[str, Path], *, sheet_name: Union[int, str] = 0
) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Read a CSV or Excel loan tape into (headers, rows).

    CSV cells stay text; Excel cells keep their types (dates come back as
    Timestamps). Blank cells become '' and fully blank rows are dropped.
    """
    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    elif suffix in EXCEL_SUFFIXES:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype=object)
    else:
        raise ValueError("Unsupported file type. Please upload a CSV or Excel file.")

    headers = [str(c) for c in df.columns]
    df.columns = headers
    df = df.astype(object).where(df.notna(), "")

    if not df.empty:
        blank_rows = df.apply(lambda col: col.map(is_blank)).all(axis=1)
        df = df.loc[~blank_rows]
    if df.empty:
        raise ValueError("No data found in file")

    return headers, df.to_dict(orient="records")
