from __future__ import annotations

import dataclasses
import datetime as dt
import math
from typing import Dict, Iterable, Optional

import pandas as pd

from fire_core.domain.models import EngineConfig, FinanceSnapshot, ScenarioComparison, SnapshotDelta
from fire_core.services import projector
from fire_core.services import scenario as scenario_service

COMPARED_FIELDS = (
    "fire_number",
    "gap_to_target",
    "progress_percent",
    "savings_rate_percent",
    "total_monthly_contributions",
    "years_to_target",
)

SWEEP_COLUMNS = (
    "fire_number",
    "progress_percent",
    "savings_rate_percent",
    "years_to_target",
    "reachable",
    "projected_target_date",
    "bridge_is_viable",
    "bridge_shortfall",
)


def compare_scenario(
    snapshot: FinanceSnapshot,
    delta: SnapshotDelta,
    config: EngineConfig = EngineConfig(),
    today: Optional[dt.date] = None,
) -> ScenarioComparison:
    today = today or dt.date.today()
    baseline = projector.project(snapshot, config, today=today)
    scenario = projector.project(scenario_service.apply_scenario(snapshot, delta), config, today=today)

    base_row = baseline.to_dict()
    scen_row = scenario.to_dict()
    diff: Dict[str, Optional[float]] = {}
    for key in COMPARED_FIELDS:
        base, scen = base_row[key], scen_row[key]
        # unreachable years, or inf - inf, have no meaningful difference
        if base is None or scen is None or (math.isinf(base) and math.isinf(scen)):
            diff[key] = None
        else:
            diff[key] = scen - base

    return ScenarioComparison(baseline=baseline, scenario=scenario, delta=diff)


def sweep(
    snapshot: FinanceSnapshot,
    field: str,
    values: Iterable[float],
    config: EngineConfig = EngineConfig(),
    today: Optional[dt.date] = None,
) -> pd.DataFrame:
    """
    Project the snapshot once per value of `field`, one row per run.
    """
    names = {f.name for f in dataclasses.fields(FinanceSnapshot)}
    if field not in names:
        raise ValueError(f"Unknown snapshot field: {field}")

    today = today or dt.date.today()
    rows = []
    for value in values:
        varied = dataclasses.replace(snapshot, **{field: value})
        payload = projector.project(varied, config, today=today).to_dict()
        row = {field: value}
        row.update({col: payload.get(col) for col in SWEEP_COLUMNS})
        rows.append(row)
    return pd.DataFrame(rows, columns=[field, *SWEEP_COLUMNS])
