"""
Pool-level statistics over ingested loans.

Everything is principal-weighted, so a $500k loan moves the averages more
than a $5k one:
  weighted_avg_x = Σ(x_i × principal_i) / Σ(principal_i)

FICO and DTI averages only use loans that report them; when none do, the
figure is None rather than 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import pandas as pd

from core.schema import DELINQUENT_STATUSES
from core.utils import round_half_up
from data_prep.ingest import LoanRecord

TOP_STATES = 5


@dataclass(frozen=True)
class PoolStats:
    total_loans: int
    total_principal: float
    total_outstanding_balance: float
    weighted_avg_apr: float
    weighted_avg_term_months: int
    weighted_avg_fico: Optional[int]
    weighted_avg_dti: Optional[float]
    current_delinquency_rate: float
    top_states: Dict[str, float] = field(default_factory=dict)  # state -> share of loans

    def to_frame(self) -> pd.DataFrame:
        """Display-friendly table."""
        rows = [
            {"Metric": "Loans", "Value": f"{self.total_loans:,}"},
            {"Metric": "Total Principal", "Value": f"${self.total_principal:,.0f}"},
            {"Metric": "Outstanding Balance", "Value": f"${self.total_outstanding_balance:,.0f}"},
            {"Metric": "WA APR", "Value": f"{self.weighted_avg_apr:.2f}%"},
            {"Metric": "WA Term", "Value": f"{self.weighted_avg_term_months} mo"},
            {"Metric": "WA FICO", "Value": "n/a" if self.weighted_avg_fico is None else str(self.weighted_avg_fico)},
            {"Metric": "WA DTI", "Value": "n/a" if self.weighted_avg_dti is None else f"{self.weighted_avg_dti:.2f}"},
            {"Metric": "Delinquency Rate", "Value": f"{self.current_delinquency_rate:.2%}"},
        ]
        return pd.DataFrame(rows)


def _weighted(values: pd.Series, weights: pd.Series) -> Optional[float]:
    mask = values.notna() & (values != 0)
    if not mask.any():
        return None
    return float((values[mask] * weights[mask]).sum() / weights[mask].sum())


def compute_pool_stats(records: Sequence[LoanRecord]) -> PoolStats:
    """Aggregate accepted loan records into pool statistics."""
    if not records:
        raise ValueError("No loans to summarize.")

    df = pd.DataFrame([r.to_dict() for r in records])
    principal = pd.to_numeric(df["principal"], errors="coerce").fillna(0.0)
    total_principal = float(principal.sum())
    if total_principal <= 0:
        raise ValueError("Pool has no principal; weighted averages are undefined.")

    n = len(df)
    rate = pd.to_numeric(df["rate"], errors="coerce").fillna(0.0)
    term = pd.to_numeric(df["term_months"], errors="coerce").fillna(0.0)
    fico = pd.to_numeric(df["fico"], errors="coerce")
    dti = pd.to_numeric(df["dti_ratio"], errors="coerce")

    wa_fico = _weighted(fico, principal)
    wa_dti = _weighted(dti, principal)

    delinquent = int(df["status"].isin(sorted(DELINQUENT_STATUSES)).sum())

    state_counts = (
        df["state"].dropna().groupby(df["state"].dropna(), sort=False).size()
        .sort_values(ascending=False, kind="stable")
        .head(TOP_STATES)
    )

    return PoolStats(
        total_loans=n,
        total_principal=total_principal,
        total_outstanding_balance=float(pd.to_numeric(df["balance"], errors="coerce").fillna(0.0).sum()),
        weighted_avg_apr=round_half_up(float((rate * principal).sum()) / total_principal, 2),
        weighted_avg_term_months=int(round_half_up(float((term * principal).sum()) / total_principal)),
        weighted_avg_fico=None if wa_fico is None else int(round_half_up(wa_fico)),
        weighted_avg_dti=None if wa_dti is None else round_half_up(wa_dti, 2),
        current_delinquency_rate=round_half_up(delinquent / n, 4),
        top_states={str(s): int(c) / n for s, c in state_counts.items()},
    )
