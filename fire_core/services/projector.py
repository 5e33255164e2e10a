from __future__ import annotations

import datetime as dt
from typing import Optional

from dateutil.relativedelta import relativedelta

from fire_core.domain.models import EngineConfig, FinanceSnapshot, ProjectionResult, Reached, YearsToTarget
from fire_core.services import bridge as bridge_service
from fire_core.services import growth, target


def _projected_date(years: YearsToTarget, already: bool, today: dt.date) -> Optional[dt.date]:
    if already:
        return today
    if isinstance(years, Reached):
        try:
            return today + relativedelta(months=growth.round_half_up(years.years * 12))
        except (OverflowError, ValueError):
            # beyond the last representable calendar date
            return None
    return None


def project(
    snapshot: FinanceSnapshot,
    config: EngineConfig = EngineConfig(),
    today: Optional[dt.date] = None,
) -> ProjectionResult:
    """
    Run every calculation for one snapshot and assemble the result.

    Degenerate inputs never raise: they surface as infinity, UNREACHABLE or
    zeroed rates in the returned record. Pass `today` to pin the projected date.
    """
    today = today or dt.date.today()
    holdings = snapshot.holdings()
    net_worth = holdings.total_net_worth
    contribution = holdings.total_contribution
    rate = snapshot.expected_annual_return_percent / 100

    annual = target.annual_expenses(snapshot.monthly_spending_in_retirement)
    fire_number = target.fire_number(
        snapshot.monthly_spending_in_retirement, snapshot.withdrawal_rate_percent
    )
    already = net_worth >= fire_number
    gap = max(0.0, fire_number - net_worth)
    progress = min(100.0, max(0.0, net_worth / fire_number * 100)) if fire_number > 0 else 0.0

    savings = target.savings_rate(contribution, snapshot.monthly_gross_income)
    years = growth.years_to_target(
        net_worth, contribution, rate, fire_number, max_months=config.max_horizon_months
    )

    bridge = bridge_service.analyze_bridge(
        holdings,
        annual_expenses=annual,
        current_age=snapshot.current_age,
        target_retirement_age=snapshot.target_retirement_age,
        annual_return_rate=rate,
        pension_access_age=config.pension_access_age,
    )

    return ProjectionResult(
        annual_expenses=annual,
        fire_number=fire_number,
        total_net_worth=net_worth,
        total_monthly_contributions=contribution,
        gap_to_target=gap,
        progress_percent=progress,
        savings_rate_percent=savings,
        years_to_target=years,
        projected_target_date=_projected_date(years, already, today),
        already_at_target=already,
        years_to_retirement=snapshot.target_retirement_age - snapshot.current_age,
        years_until_pension_access=config.pension_access_age - snapshot.target_retirement_age,
        requires_bridge=bridge is not None,
        bridge=bridge,
    )
