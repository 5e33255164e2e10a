from fire_core.io.config import (  # noqa: F401
    load_engine_config,
    load_scenario_delta,
    load_snapshot,
    snapshot_from_dict,
)
from fire_core.io.storage import clear_inputs, load_inputs, save_inputs  # noqa: F401

__all__ = [
    "clear_inputs",
    "load_engine_config",
    "load_inputs",
    "load_scenario_delta",
    "load_snapshot",
    "save_inputs",
    "snapshot_from_dict",
]
