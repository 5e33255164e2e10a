from fire_core.services.bridge import analyze_bridge  # noqa: F401
from fire_core.services.growth import future_value, years_to_target  # noqa: F401
from fire_core.services.pipeline import compare_scenario, sweep  # noqa: F401
from fire_core.services.projector import project  # noqa: F401
from fire_core.services.scenario import apply_scenario  # noqa: F401
from fire_core.services.schedule import wealth_schedule  # noqa: F401
from fire_core.services.target import fire_number, savings_rate  # noqa: F401

__all__ = [
    "analyze_bridge",
    "apply_scenario",
    "compare_scenario",
    "fire_number",
    "future_value",
    "project",
    "savings_rate",
    "sweep",
    "wealth_schedule",
    "years_to_target",
]
