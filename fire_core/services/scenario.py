from __future__ import annotations

import dataclasses

from fire_core.domain.models import FinanceSnapshot, SnapshotDelta


def apply_scenario(snapshot: FinanceSnapshot, delta: SnapshotDelta) -> FinanceSnapshot:
    """
    Applies spending/contribution/return adjustments and an optional
    retirement-age override. Contribution changes land on the split fields, so
    an aggregate-only snapshot is moved onto the split shape first.
    """
    holdings = snapshot.holdings()
    changes = {
        "monthly_spending_in_retirement": max(
            0.0, snapshot.monthly_spending_in_retirement + delta.spending_delta
        ),
        "expected_annual_return_percent": snapshot.expected_annual_return_percent
        + delta.return_delta_percent,
    }

    if delta.isa_contribution_delta or delta.pension_contribution_delta:
        changes["monthly_isa_contributions"] = max(
            0.0, holdings.isa_contribution + delta.isa_contribution_delta
        )
        changes["monthly_pension_contributions"] = max(
            0.0, holdings.pension_contribution + delta.pension_contribution_delta
        )
        changes["monthly_contributions"] = None

    if delta.target_retirement_age is not None:
        changes["target_retirement_age"] = delta.target_retirement_age

    return dataclasses.replace(snapshot, **changes)
