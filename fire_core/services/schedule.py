from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from fire_core.domain.models import EngineConfig, FinanceSnapshot
from fire_core.services import target


def _default_years(snapshot: FinanceSnapshot, config: EngineConfig) -> int:
    horizon_age = max(snapshot.target_retirement_age, config.pension_access_age)
    return horizon_age - snapshot.current_age


def wealth_schedule(
    snapshot: FinanceSnapshot,
    years: Optional[int] = None,
    config: EngineConfig = EngineConfig(),
) -> pd.DataFrame:
    """
    Year-end balances per wrapper, compounded monthly.

    Each wrapper grows at the snapshot's expected return with its own monthly
    contribution; the GIA takes none. Row 0 is the starting position.
    """
    if years is None:
        years = _default_years(snapshot, config)
    max_years = config.max_horizon_months // 12
    years = int(min(max(years, 1), max_years))
    months = years * 12

    holdings = snapshot.holdings()
    monthly_rate = snapshot.expected_annual_return_percent / 100 / 12

    balances = np.zeros((3, months + 1))
    balances[:, 0] = [holdings.isa, holdings.pension, holdings.gia]
    contributions = np.array([holdings.isa_contribution, holdings.pension_contribution, 0.0])

    for t in range(1, months + 1):
        balances[:, t] = balances[:, t - 1] * (1 + monthly_rate) + contributions

    year_end = balances[:, ::12]
    goal = target.fire_number(
        snapshot.monthly_spending_in_retirement, snapshot.withdrawal_rate_percent
    )
    df = pd.DataFrame(
        {
            "year": np.arange(years + 1),
            "age": snapshot.current_age + np.arange(years + 1),
            "isa": year_end[0],
            "pension": year_end[1],
            "gia": year_end[2],
        }
    )
    df["total"] = df["isa"] + df["pension"] + df["gia"]
    df["fire_number"] = goal
    df["reached"] = df["total"] >= goal
    return df
