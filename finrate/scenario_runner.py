# finrate/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
from datetime import datetime
import json
import logging

import pandas as pd

from .adapters import RUNNERS
from .config import SolverSettings
from .errors import InvalidInputError
from .finance.cashflow import build_dated
from .sweep import seed_grid, sweep_xirr
from .validate import (
    iter_input_files,
    load_params_from_file,
    mode_from_env_or_flag,
    scenarios_from_document,
    validate_scenario_dict,
)

logger = logging.getLogger(__name__)

MODES = ("irr", "xirr", "sweep")
SWEEP_SEEDS = 21

@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None
    rows: List[Dict[str, Any]] = field(default_factory=list)

def _write_results(path: Path, rows: List[Dict[str, Any]], fmt: str) -> None:
    df = pd.DataFrame(rows)
    if fmt == "jsonl":
        df.to_json(path, orient="records", lines=True)
    elif fmt == "csv":
        df.to_csv(path, index=False)
    else:
        raise SystemExit(f"unknown fmt: {fmt}")

def collect_scenarios(
    config: str | Path,
    *,
    run_mode: str = "irr",
    validation_mode: Optional[str] = None,
) -> List[Tuple[str, Dict[str, Any]]]:
    """Load and validate every scenario under a file or directory; raise on violations."""
    cfg_path = Path(config)
    if not cfg_path.exists():
        raise SystemExit(f"{cfg_path}: no such file or directory")
    mode = mode_from_env_or_flag(validation_mode)

    out: List[Tuple[str, Dict[str, Any]]] = []
    seen: Dict[str, Path] = {}
    for f in iter_input_files(cfg_path):
        doc = load_params_from_file(f)
        for name, sc in scenarios_from_document(doc, default_name=f.stem):
            try:
                validate_scenario_dict(sc, mode=mode, run_mode=run_mode)
            except SystemExit as e:
                raise SystemExit(f"{f} [{name}]: {e}")
            if name in seen:
                raise SystemExit(f"{f}: duplicate scenario name {name!r} (first seen in {seen[name]})")
            seen[name] = f
            out.append((name, sc))
    if not out:
        raise SystemExit(f"{cfg_path}: no scenario files found")
    return out

def _sweep_row(name: str, scenario: Dict[str, Any], settings: SolverSettings) -> Dict[str, Any]:
    try:
        dated = build_dated(scenario.get("cashflows"), scenario.get("dates"))
        dated.require_sign_change("sweep cash flows")
    except InvalidInputError as e:
        logger.warning("Scenario %s: sweep skipped (%s)", name, e)
        return {
            "name": name,
            "status": "invalid_input",
            "error": str(e),
            "seeds": 0,
            "converged_share": 0.0,
            "distinct_roots": [],
        }
    df = sweep_xirr(dated.amounts, dated.dates, seed_grid(SWEEP_SEEDS),
                    max_iterations=settings.xirr_max_iterations)
    return {
        "name": name,
        "status": "ok",
        "error": None,
        "seeds": len(df),
        "converged_share": df.attrs["converged_share"],
        "distinct_roots": df.attrs["distinct_roots"],
    }

def run_scenarios(
    scenarios: List[Tuple[str, Dict[str, Any]]],
    *,
    mode: str = "irr",
    settings: Optional[SolverSettings] = None,
) -> List[Dict[str, Any]]:
    settings = settings or SolverSettings()
    rows: List[Dict[str, Any]] = []
    for name, sc in scenarios:
        logger.info("Running %s scenario %s", mode, name)
        if mode == "sweep":
            rows.append(_sweep_row(name, sc, settings))
        else:
            rows.append(RUNNERS[mode](name, sc, settings))
    return rows

def run_dir(
    config: str | Path,
    out_dir: str | Path,
    *,
    mode: str = "irr",
    fmt: str = "jsonl",
    save_results: bool = False,
    settings: Optional[SolverSettings] = None,
    validation_mode: Optional[str] = None,
) -> RunResult:
    """
    Solve every scenario in a YAML/JSON file or directory and write:
      - <out_dir>/summary.json  ({mode, count, scenarios: {name: row}})
      - <out_dir>/<stem>_results_<stamp>.<fmt> when save_results is set
    """
    if mode not in MODES:
        raise SystemExit(f"unknown mode: {mode} (expected one of {list(MODES)})")
    if fmt not in ("csv", "jsonl"):
        raise SystemExit(f"unknown fmt: {fmt}")

    cfg_path = Path(config)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    scenarios = collect_scenarios(cfg_path, run_mode=mode, validation_mode=validation_mode)
    rows = run_scenarios(scenarios, mode=mode, settings=settings)

    summary = {
        "mode": mode,
        "count": len(rows),
        "scenarios": {row["name"]: row for row in rows},
    }
    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    logger.info("Wrote %s (%d scenarios)", summary_path, len(rows))

    results_path: Optional[Path] = None
    if save_results:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_path = out / f"{cfg_path.stem}_results_{stamp}.{fmt}"
        _write_results(results_path, rows, fmt)
        logger.info("Wrote %s", results_path)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path, rows=rows)
