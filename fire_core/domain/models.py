from __future__ import annotations

import dataclasses
import datetime as dt
import math
from typing import Any, Dict, Optional, Union

PENSION_ACCESS_AGE = 57
MAX_HORIZON_MONTHS = 100 * 12


@dataclasses.dataclass(frozen=True)
class EngineConfig:
    pension_access_age: int = PENSION_ACCESS_AGE
    max_horizon_months: int = MAX_HORIZON_MONTHS


@dataclasses.dataclass(frozen=True)
class Holdings:
    """Canonical per-wrapper view of a snapshot's wealth and contributions."""

    isa: float = 0.0
    pension: float = 0.0
    gia: float = 0.0
    isa_contribution: float = 0.0
    pension_contribution: float = 0.0

    @property
    def total_net_worth(self) -> float:
        return self.isa + self.pension + self.gia

    @property
    def total_contribution(self) -> float:
        return self.isa_contribution + self.pension_contribution

    @property
    def accessible(self) -> float:
        return self.isa + self.gia


_BALANCE_FIELDS = ("isa_balance", "pension_balance", "gia_balance")
_CONTRIBUTION_FIELDS = ("monthly_isa_contributions", "monthly_pension_contributions")


@dataclasses.dataclass(frozen=True)
class FinanceSnapshot:
    current_age: int
    target_retirement_age: int
    monthly_spending_in_retirement: float
    withdrawal_rate_percent: float
    monthly_gross_income: float = 0.0
    expected_annual_return_percent: float = 0.0
    current_net_worth: Optional[float] = None
    isa_balance: Optional[float] = None
    pension_balance: Optional[float] = None
    gia_balance: Optional[float] = None
    monthly_contributions: Optional[float] = None
    monthly_isa_contributions: Optional[float] = None
    monthly_pension_contributions: Optional[float] = None

    @property
    def has_balance_breakdown(self) -> bool:
        return any(getattr(self, name) is not None for name in _BALANCE_FIELDS)

    @property
    def has_contribution_split(self) -> bool:
        return any(getattr(self, name) is not None for name in _CONTRIBUTION_FIELDS)

    def holdings(self) -> Holdings:
        """
        Reconcile the two input shapes into one Holdings record.

        The breakdown fields win whenever any of them is set. An aggregate-only
        figure is booked as pension wealth, matching the stored-input migration.
        """
        if self.has_balance_breakdown:
            isa = self.isa_balance or 0.0
            pension = self.pension_balance or 0.0
            gia = self.gia_balance or 0.0
        else:
            isa, gia = 0.0, 0.0
            pension = self.current_net_worth or 0.0

        if self.has_contribution_split:
            isa_c = self.monthly_isa_contributions or 0.0
            pension_c = self.monthly_pension_contributions or 0.0
        else:
            isa_c = 0.0
            pension_c = self.monthly_contributions or 0.0

        return Holdings(
            isa=float(isa),
            pension=float(pension),
            gia=float(gia),
            isa_contribution=float(isa_c),
            pension_contribution=float(pension_c),
        )

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True)
class Reached:
    years: float


@dataclasses.dataclass(frozen=True)
class Unreachable:
    def __repr__(self) -> str:
        return "UNREACHABLE"


UNREACHABLE = Unreachable()

YearsToTarget = Union[Reached, Unreachable]


def _finite(value: float) -> Optional[float]:
    # JSON has no infinity; an unfundable target serialises as null
    return value if math.isfinite(value) else None


@dataclasses.dataclass(frozen=True)
class BridgeAnalysis:
    gap_years: int
    amount_needed: float
    projected_isa_at_retirement: float
    projected_gia_at_retirement: float
    projected_accessible_at_retirement: float
    is_viable: bool
    shortfall: float


@dataclasses.dataclass(frozen=True)
class ProjectionResult:
    annual_expenses: float
    fire_number: float
    total_net_worth: float
    total_monthly_contributions: float
    gap_to_target: float
    progress_percent: float
    savings_rate_percent: float
    years_to_target: YearsToTarget
    projected_target_date: Optional[dt.date]
    already_at_target: bool
    years_to_retirement: int
    years_until_pension_access: int
    requires_bridge: bool
    bridge: Optional[BridgeAnalysis] = None

    @property
    def reachable(self) -> bool:
        return isinstance(self.years_to_target, Reached)

    @property
    def years(self) -> Optional[float]:
        if isinstance(self.years_to_target, Reached):
            return self.years_to_target.years
        return None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "annual_expenses": self.annual_expenses,
            "fire_number": _finite(self.fire_number),
            "total_net_worth": self.total_net_worth,
            "total_monthly_contributions": self.total_monthly_contributions,
            "gap_to_target": _finite(self.gap_to_target),
            "progress_percent": self.progress_percent,
            "savings_rate_percent": self.savings_rate_percent,
            "years_to_target": self.years,
            "reachable": self.reachable,
            "projected_target_date": (
                self.projected_target_date.isoformat() if self.projected_target_date else None
            ),
            "already_at_target": self.already_at_target,
            "years_to_retirement": self.years_to_retirement,
            "years_until_pension_access": self.years_until_pension_access,
            "requires_bridge": self.requires_bridge,
        }
        if self.bridge is not None:
            payload.update(
                {
                    "bridge_gap_years": self.bridge.gap_years,
                    "bridge_amount_needed": self.bridge.amount_needed,
                    "projected_isa_at_retirement": self.bridge.projected_isa_at_retirement,
                    "projected_gia_at_retirement": self.bridge.projected_gia_at_retirement,
                    "projected_accessible_at_retirement": self.bridge.projected_accessible_at_retirement,
                    "bridge_is_viable": self.bridge.is_viable,
                    "bridge_shortfall": self.bridge.shortfall,
                }
            )
        return payload


@dataclasses.dataclass(frozen=True)
class SnapshotDelta:
    spending_delta: float = 0.0
    isa_contribution_delta: float = 0.0
    pension_contribution_delta: float = 0.0
    return_delta_percent: float = 0.0
    target_retirement_age: Optional[int] = None  # override, not a delta


@dataclasses.dataclass
class ScenarioComparison:
    baseline: ProjectionResult
    scenario: ProjectionResult
    delta: Dict[str, Optional[float]]
