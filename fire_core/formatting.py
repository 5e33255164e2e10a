from __future__ import annotations

import datetime as dt
import math

from fire_core.domain.models import Reached, YearsToTarget
from fire_core.services.growth import round_half_up


def format_currency(value: float, symbol: str = "£") -> str:
    """Whole pounds, thousands separated, e.g. £600,000."""
    if math.isinf(value):
        return f"-{symbol}∞" if value < 0 else f"{symbol}∞"
    rounded = round_half_up(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_month_year(date: dt.date) -> str:
    return date.strftime("%B %Y")


def format_years(years: YearsToTarget) -> str:
    if not isinstance(years, Reached):
        return "Never"
    if years.years == 0:
        return "Now"
    return f"{years.years:.1f} years"
