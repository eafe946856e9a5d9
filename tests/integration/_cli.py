from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[2] / "src"
PLANS = Path(__file__).resolve().parents[1] / "fixtures" / "plans"


def cli_env(**overrides: str) -> dict[str, str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC), env.get("PYTHONPATH")) if p)
    env.pop("STEPSCRIPT_TRACE_OUTPUT", None)
    env.update(overrides)
    return env


def run_cli(*args: str, env: dict[str, str] | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "stepscript.cli", *args],
        env=env or cli_env(),
        capture_output=True,
        text=True,
    )


def run_json(*args: str, env: dict[str, str] | None = None, expect_ok: bool = True) -> dict:
    p = run_cli(*args, env=env)
    out = json.loads(p.stdout)
    if expect_ok:
        assert p.returncode == 0, p.stderr
        assert out["ok"] is True
    else:
        assert p.returncode != 0
        assert out["ok"] is False
    return out
