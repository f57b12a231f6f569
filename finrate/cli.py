# finrate/cli.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import load_solver_settings
from .scenario_runner import MODES, run_dir


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="finrate",
        description="IRR / XIRR solver for cash-flow scenarios",
    )
    p.add_argument(
        "--mode",
        default="irr",
        choices=list(MODES),
        help="Solver to run (default: irr). 'sweep' reruns XIRR over a grid of seeds.",
    )
    p.add_argument(
        "--config",
        required=True,
        help="Path to a scenario YAML/JSON, or a directory of them.",
    )
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for the per-scenario results file (default: csv).",
    )
    p.add_argument(
        "--save-results",
        action="store_true",
        help="If set, write one row per scenario alongside summary.json.",
    )
    p.add_argument(
        "--settings",
        default=None,
        help="Solver settings YAML (irr_max_tries, xirr_max_iterations, default_guess, discount_rate).",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (unknown keys raise, names required).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (unknown keys ignored).",
    )
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"
    # else: respect existing environment


def main(argv: list[str] | None = None) -> int:
    try:
        ns = _parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors and 0 on --help
        return int(e.code) if isinstance(e.code, int) else 2
    _apply_validation_mode(ns)
    logging.basicConfig(level=getattr(logging, ns.log_level), format="%(levelname)s: %(name)s: %(message)s")

    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path = Path(ns.config).resolve()

    try:
        settings = load_solver_settings(ns.settings, mode=os.environ.get("VALIDATION_MODE", "relaxed").lower())
        result = run_dir(cfg_path, outputs_dir, mode=ns.mode, fmt=ns.fmt, save_results=ns.save_results, settings=settings)
    except SystemExit as e:
        # Validation failures carry a message; report it and exit 2
        if isinstance(e.code, int):
            return e.code
        print(f"INVALID: {e.code}", file=sys.stderr)
        return 2
    except Exception as e:
        # Fail noisily with non-zero; keep the message for debugging
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    for name, row in result.summary["scenarios"].items():
        print(_format_row(ns.mode, name, row))
    return 0


def _format_row(mode: str, name: str, row: dict) -> str:
    if mode == "sweep":
        if row.get("status") != "ok":
            return f"{name}: {row['status']} ({row['error']})"
        return f"{name}: converged {row['converged_share']:.0%} of seeds, roots {row['distinct_roots']}"
    key = "irr_pct" if mode == "irr" else "xirr_pct"
    value = row.get(key)
    if value is None:
        return f"{name}: {row['status']}" + (f" ({row['error']})" if row.get("error") else "")
    return f"{name}: {value:.2f}%"


__all__ = ["main"]
