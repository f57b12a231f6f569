# finrate/validate.py
from __future__ import annotations
import os, sys, json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple
import yaml

from .schema import SCENARIO_BOUNDS, SCENARIO_OPTIONAL, SCENARIO_REQUIRED, SCENARIO_REQUIRED_BY_MODE

def mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"

def _is_number(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    try:
        float(v)
    except (TypeError, ValueError):
        return False
    return True

def validate_scenario_dict(data: Dict[str, Any], *, mode: str = "relaxed", run_mode: str = "irr") -> None:
    """
    Guardrails for one scenario mapping:
      - relaxed: require {cashflows} (+ dates for xirr/sweep)
      - strict : also require {name} and reject unknown keys
    """
    if not isinstance(data, dict):
        raise SystemExit(f"scenario must be a mapping, got {type(data).__name__}")

    required = set(SCENARIO_REQUIRED) | SCENARIO_REQUIRED_BY_MODE.get(run_mode, set())
    if mode == "strict":
        required |= {"name"}

    missing = sorted(k for k in required if k not in data)
    if missing:
        raise SystemExit(f"missing required keys: {missing}")

    if mode == "strict":
        allowed = required | SCENARIO_OPTIONAL
        unknown = sorted(k for k in data.keys() if k not in allowed)
        if unknown:
            raise SystemExit(f"unknown scenario keys (strict mode): {unknown}")

    cfs = data.get("cashflows")
    if not isinstance(cfs, list) or not cfs:
        raise SystemExit("cashflows must be a non-empty list")
    bad = [i for i, v in enumerate(cfs) if not _is_number(v)]
    if bad:
        raise SystemExit(f"cashflows entries are not numbers at positions {bad}")

    dates = data.get("dates")
    if dates is not None:
        if not isinstance(dates, list):
            raise SystemExit("dates must be a list")
        if len(dates) != len(cfs):
            raise SystemExit(f"dates and cashflows must have the same length ({len(dates)} != {len(cfs)})")

    for k, spec in SCENARIO_BOUNDS.items():
        if k in data and data[k] is not None:
            if not _is_number(data[k]):
                raise SystemExit(f"{k} must be a number")
            v = float(data[k])
            if not (spec["min"] <= v <= spec["max"]):
                raise SystemExit(f"{k} outside allowed range [{spec['min']}, {spec['max']}]: {v}")

def scenarios_from_document(doc: Any, *, default_name: str) -> List[Tuple[str, Any]]:
    """
    A document holds either one scenario mapping or {'scenarios': [...]}.
    Returns (name, scenario) pairs; unnamed scenarios are named after the file.
    """
    if isinstance(doc, dict) and isinstance(doc.get("scenarios"), list):
        items = list(doc["scenarios"])
    else:
        items = [doc]
    out: List[Tuple[str, Any]] = []
    for i, item in enumerate(items):
        name = item.get("name") if isinstance(item, dict) else None
        if not name:
            name = default_name if len(items) == 1 else f"{default_name}_{i + 1}"
        out.append((str(name), item))
    return out

def load_params_from_file(path: Path) -> Any:
    p = Path(path)
    if p.is_dir():
        # scenario_runner handles directories; keep this function file-only
        raise SystemExit(f"{p} is a directory (expected a file)")
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return json.loads(text or "{}")

def iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))

def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="finrate.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON scenario files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    parser.add_argument("--run-mode", choices=sorted(SCENARIO_REQUIRED_BY_MODE), default="irr",
                        help="solver the scenarios are meant for (xirr/sweep require dates)")
    args = parser.parse_args(argv)

    mode = mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in iter_input_files(target):
            if not f.is_file():
                continue
            any_seen = True
            try:
                doc = load_params_from_file(f)
                for _, sc in scenarios_from_document(doc, default_name=f.stem):
                    validate_scenario_dict(sc, mode=mode, run_mode=args.run_mode)
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except (OSError, ValueError, yaml.YAMLError) as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0

if __name__ == "__main__":
    raise SystemExit(_main())
