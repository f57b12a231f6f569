from __future__ import annotations
import json, os, subprocess, sys
from pathlib import Path

SCENARIO = Path("finrate/inputs/scenarios/release_case.yaml")
SCENARIO_NAME = "staged_exit"
BASELINE = Path("tests/golden/summary.json")
FROZEN_KEYS = {"irr_pct": "irr", "xirr_pct": "xirr"}

def _run(mode: str) -> dict:
    outdir = Path(f"_out_golden_baseline_{mode}")
    outdir.mkdir(parents=True, exist_ok=True)
    env = os.environ.copy()
    env["VALIDATION_MODE"] = "relaxed"

    cmd = [
        sys.executable, "-m", "finrate",
        "--mode", mode,
        "--config", str(SCENARIO),
        "--outputs-dir", str(outdir),
        "--format", "csv",
    ]
    subprocess.run(cmd, check=True, env=env)

    sj = outdir / "summary.json"
    if not sj.exists():
        raise FileNotFoundError(f"{sj} not produced; check CLI/run_dir")
    return json.loads(sj.read_text(encoding="utf-8"))["scenarios"][SCENARIO_NAME]

def main() -> int:
    if not SCENARIO.exists():
        print(f"[x] Missing scenario: {SCENARIO}", file=sys.stderr)
        return 2

    minimal = {}
    for key, mode in FROZEN_KEYS.items():
        row = _run(mode)
        if row.get(key) is None:
            print(f"[x] {mode} produced no {key} (status={row.get('status')})", file=sys.stderr)
            return 4
        minimal[key] = float(row[key])

    BASELINE.parent.mkdir(parents=True, exist_ok=True)
    BASELINE.write_text(json.dumps(minimal, indent=2, sort_keys=True), encoding="utf-8")
    print(f"[ok] Wrote baseline {BASELINE}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
