from __future__ import annotations

import math


def annual_expenses(monthly_spending: float) -> float:
    return monthly_spending * 12


def fire_number(monthly_spending: float, withdrawal_rate_percent: float) -> float:
    """
    Portfolio value whose withdrawals at the given rate cover annual spending:

        fire_number = monthly_spending * 12 * (100 / withdrawal_rate_percent)

    A non-positive withdrawal rate can never be funded, so it maps to infinity.
    """
    if withdrawal_rate_percent <= 0:
        return math.inf
    multiplier = 100 / withdrawal_rate_percent
    return annual_expenses(monthly_spending) * multiplier


def savings_rate(monthly_contribution: float, monthly_income: float) -> float:
    """Contribution as a percentage of gross monthly income; 0 when income <= 0."""
    if monthly_income <= 0:
        return 0.0
    return monthly_contribution / monthly_income * 100
