from fire_core.domain.models import (  # noqa: F401
    MAX_HORIZON_MONTHS,
    PENSION_ACCESS_AGE,
    UNREACHABLE,
    BridgeAnalysis,
    EngineConfig,
    FinanceSnapshot,
    Holdings,
    ProjectionResult,
    Reached,
    ScenarioComparison,
    SnapshotDelta,
    Unreachable,
    YearsToTarget,
)

__all__ = [
    "MAX_HORIZON_MONTHS",
    "PENSION_ACCESS_AGE",
    "UNREACHABLE",
    "BridgeAnalysis",
    "EngineConfig",
    "FinanceSnapshot",
    "Holdings",
    "ProjectionResult",
    "Reached",
    "ScenarioComparison",
    "SnapshotDelta",
    "Unreachable",
    "YearsToTarget",
]
