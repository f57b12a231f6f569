from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional
import io
import logging
import os
import yaml

from .schema import SETTINGS_SCHEMA

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverSettings:
    irr_max_tries: int = int(SETTINGS_SCHEMA["irr_max_tries"]["default"])
    xirr_max_iterations: int = int(SETTINGS_SCHEMA["xirr_max_iterations"]["default"])
    default_guess: float = float(SETTINGS_SCHEMA["default_guess"]["default"])
    discount_rate: float = float(SETTINGS_SCHEMA["discount_rate"]["default"])


def _flatten_grouped(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten shallow groups like {'solver': {...}} into one level.
    Prefers top-level keys if collisions occur.
    """
    flat: Dict[str, Any] = dict(cfg)
    for k, v in list(cfg.items()):
        if isinstance(v, dict):
            flat.pop(k)
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def _coerce(key: str, value: Any) -> Any:
    spec = SETTINGS_SCHEMA[key]
    try:
        v = int(value) if spec["type"] == "int" else float(value)
    except (TypeError, ValueError):
        raise SystemExit(f"{key} must be {spec['type']}, got {value!r}")
    if not (spec["min"] <= v <= spec["max"]):
        raise SystemExit(f"{key} outside allowed range [{spec['min']}, {spec['max']}]: {v}")
    return v


def settings_from_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> SolverSettings:
    """Build SolverSettings from a (possibly grouped) mapping; unknown keys fail in strict mode."""
    flat = _flatten_grouped(data or {})
    unknown = sorted(k for k in flat if k not in SETTINGS_SCHEMA)
    if unknown:
        if mode == "strict":
            raise SystemExit(f"unknown solver settings (strict mode): {unknown}")
        logger.warning("Ignoring unknown solver settings: %s", unknown)
    values = {k: _coerce(k, v) for k, v in flat.items() if k in SETTINGS_SCHEMA}
    return replace(SolverSettings(), **values)


def load_solver_settings(
    source: Optional[str | os.PathLike | io.StringIO] = None,
    *,
    mode: str = "relaxed",
) -> SolverSettings:
    """
    Load solver settings from a YAML path or text stream.
    Returns defaults when `source` is None.
    """
    if source is None:
        return SolverSettings()

    text: str
    if hasattr(source, "read"):
        text = str(source.read())
    else:
        p = os.fspath(source)
        with open(p, "r", encoding="utf-8") as f:
            text = f.read()

    try:
        cfg = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise SystemExit(f"invalid solver settings YAML: {e}")
    if not isinstance(cfg, dict):
        raise SystemExit("solver settings must be a mapping")

    settings = settings_from_dict(cfg, mode=mode)
    logger.info("Loaded solver settings: %s", settings)
    return settings
