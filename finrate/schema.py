from __future__ import annotations
from typing import Dict, Any

# Solver settings schema: units, type, min/max ranges, default and description.
SETTINGS_SCHEMA: Dict[str, Dict[str, Any]] = {
    "irr_max_tries":       {"unit": "evaluations", "type": "int",   "min": 1,      "max": 10_000_000, "default": 10_000, "desc": "NPV evaluations allowed per IRR call"},
    "xirr_max_iterations": {"unit": "iterations",  "type": "int",   "min": 1,      "max": 100_000,    "default": 100,    "desc": "Newton steps allowed per XIRR call"},
    "default_guess":       {"unit": "fraction",    "type": "float", "min": -0.99,  "max": 100.0,      "default": 0.0,    "desc": "XIRR seed when a scenario has none"},
    "discount_rate":       {"unit": "percent",     "type": "float", "min": -99.0,  "max": 1000.0,     "default": 10.0,   "desc": "Rate for the reported NPV"},
}

# Scenario keys: required in every mode, extra ones per run mode, and the rest allowed.
SCENARIO_REQUIRED = {"cashflows"}
SCENARIO_REQUIRED_BY_MODE: Dict[str, set] = {
    "irr": set(),
    "xirr": {"dates"},
    "sweep": {"dates"},
}
SCENARIO_OPTIONAL = {"name", "dates", "guess", "max_tries", "discount_rate", "notes"}

# Per-scenario overrides share the settings bounds.
SCENARIO_BOUNDS: Dict[str, Dict[str, Any]] = {
    "max_tries": SETTINGS_SCHEMA["irr_max_tries"],
    "guess": SETTINGS_SCHEMA["default_guess"],
    "discount_rate": SETTINGS_SCHEMA["discount_rate"],
}
