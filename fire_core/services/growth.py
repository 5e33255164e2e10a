from __future__ import annotations

import logging
import math

from fire_core.domain.models import MAX_HORIZON_MONTHS, UNREACHABLE, Reached, YearsToTarget

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def years_to_target(
    current_value: float,
    monthly_contribution: float,
    annual_return_rate: float,
    target_value: float,
    max_months: int = MAX_HORIZON_MONTHS,
) -> YearsToTarget:
    """
    Years until the portfolio first meets the target.

    Growth is simulated month by month, compounding at annual_return_rate / 12
    before each contribution lands. Zero return is linear accumulation. The
    simulation stops after max_months (100 years by default) and reports
    UNREACHABLE instead of running on.
    """
    if current_value >= target_value:
        return Reached(0.0)

    if math.isinf(target_value):
        logger.debug("Target is infinite; cannot be reached")
        return UNREACHABLE

    if annual_return_rate == 0:
        if monthly_contribution <= 0:
            logger.debug("Zero return and no contributions; target unreachable")
            return UNREACHABLE
        gap = target_value - current_value
        return Reached(gap / monthly_contribution / 12)

    monthly_rate = annual_return_rate / 12
    portfolio = current_value
    for month in range(1, max_months + 1):
        portfolio = portfolio * (1 + monthly_rate) + monthly_contribution
        if portfolio >= target_value:
            return Reached(month / 12)

    logger.debug("Target %.2f not reached within %d months", target_value, max_months)
    return UNREACHABLE


def future_value(
    present_value: float,
    monthly_contribution: float,
    annual_return_rate: float,
    years: float,
) -> float:
    """Closed-form compound value with a level monthly contribution."""
    if years <= 0:
        return present_value

    months = round_half_up(years * 12)
    monthly_rate = annual_return_rate / 12
    if monthly_rate == 0:
        return present_value + monthly_contribution * months

    growth = math.pow(1 + monthly_rate, months)
    return present_value * growth + monthly_contribution * (growth - 1) / monthly_rate
