from __future__ import annotations

import logging
from typing import Optional

from fire_core.domain.models import BridgeAnalysis, Holdings
from fire_core.services.growth import future_value

logger = logging.getLogger(__name__)


def requires_bridge(target_retirement_age: int, pension_access_age: int) -> bool:
    return target_retirement_age < pension_access_age


def analyze_bridge(
    holdings: Holdings,
    annual_expenses: float,
    current_age: int,
    target_retirement_age: int,
    annual_return_rate: float,
    pension_access_age: int,
) -> Optional[BridgeAnalysis]:
    """
    Check whether ISA + GIA wealth at retirement covers spending until the
    pension unlocks.

    Spending is held constant through the bridge and the GIA receives no
    further contributions. Returns None when retirement is at or after the
    pension access age.
    """
    if not requires_bridge(target_retirement_age, pension_access_age):
        return None

    gap_years = pension_access_age - target_retirement_age
    amount_needed = gap_years * annual_expenses

    years_to_retirement = target_retirement_age - current_age
    projected_isa = future_value(
        holdings.isa, holdings.isa_contribution, annual_return_rate, years_to_retirement
    )
    projected_gia = future_value(holdings.gia, 0.0, annual_return_rate, years_to_retirement)
    accessible = projected_isa + projected_gia

    shortfall = max(0.0, amount_needed - accessible)
    if shortfall > 0:
        logger.debug("Bridge short by %.2f over %d years", shortfall, gap_years)

    return BridgeAnalysis(
        gap_years=gap_years,
        amount_needed=amount_needed,
        projected_isa_at_retirement=projected_isa,
        projected_gia_at_retirement=projected_gia,
        projected_accessible_at_retirement=accessible,
        is_viable=accessible >= amount_needed,
        shortfall=shortfall,
    )
