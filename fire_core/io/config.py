from __future__ import annotations

import dataclasses
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from fire_core.domain.models import (
    MAX_HORIZON_MONTHS,
    PENSION_ACCESS_AGE,
    EngineConfig,
    FinanceSnapshot,
    SnapshotDelta,
)

PENSION_AGE_ENV = "FIRE_PENSION_ACCESS_AGE"

# camelCase names used by saved browser inputs and older exports
KEY_ALIASES = {
    "currentAge": "current_age",
    "targetRetirementAge": "target_retirement_age",
    "monthlySpending": "monthly_spending_in_retirement",
    "monthlySpendingInRetirement": "monthly_spending_in_retirement",
    "withdrawalRate": "withdrawal_rate_percent",
    "withdrawalRatePercent": "withdrawal_rate_percent",
    "currentNetWorth": "current_net_worth",
    "isaBalance": "isa_balance",
    "pensionBalance": "pension_balance",
    "giaBalance": "gia_balance",
    "monthlyIncome": "monthly_gross_income",
    "monthlyGrossIncome": "monthly_gross_income",
    "monthlyContributions": "monthly_contributions",
    "monthlyISAContributions": "monthly_isa_contributions",
    "monthlyPensionContributions": "monthly_pension_contributions",
    "expectedReturn": "expected_annual_return_percent",
    "expectedAnnualReturnPercent": "expected_annual_return_percent",
}

_INT_FIELDS = {"current_age", "target_retirement_age"}
_REQUIRED_FIELDS = (
    "current_age",
    "target_retirement_age",
    "monthly_spending_in_retirement",
    "withdrawal_rate_percent",
)


def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {KEY_ALIASES.get(key, key): value for key, value in data.items()}


def snapshot_from_dict(data: Dict[str, Any]) -> FinanceSnapshot:
    known = {f.name for f in dataclasses.fields(FinanceSnapshot)}
    values = {k: v for k, v in normalize_keys(data).items() if k in known}

    missing = [name for name in _REQUIRED_FIELDS if values.get(name) is None]
    if missing:
        raise ValueError(f"Missing snapshot fields: {missing}")

    coerced: Dict[str, Any] = {}
    for name, raw in values.items():
        if raw is None:
            coerced[name] = None
            continue
        try:
            coerced[name] = int(raw) if name in _INT_FIELDS else float(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {name}: {raw!r}") from exc
    return FinanceSnapshot(**coerced)


def load_snapshot(path: str | Path) -> FinanceSnapshot:
    return snapshot_from_dict(_read_json(path))


def load_engine_config(path: Optional[str | Path] = None) -> EngineConfig:
    data = _read_json(path) if path else {}
    pension_age = os.environ.get(PENSION_AGE_ENV) or data.get("pension_access_age", PENSION_ACCESS_AGE)
    try:
        return EngineConfig(
            pension_access_age=int(pension_age),
            max_horizon_months=int(data.get("max_horizon_months", MAX_HORIZON_MONTHS)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid engine config: {exc}") from exc


def load_scenario_delta(path: str | Path) -> SnapshotDelta:
    data = _read_json(path)
    retire_age = data.get("target_retirement_age")
    return SnapshotDelta(
        spending_delta=float(data.get("spending_delta", 0.0)),
        isa_contribution_delta=float(data.get("isa_contribution_delta", 0.0)),
        pension_contribution_delta=float(data.get("pension_contribution_delta", 0.0)),
        return_delta_percent=float(data.get("return_delta_percent", 0.0)),
        target_retirement_age=int(retire_age) if retire_age is not None else None,
    )


def _read_json(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
