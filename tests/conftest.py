# pytest configuration hooks.
#
# Policy: No skipped tests. If something cannot run in this environment, use xfail with a clear reason.

from __future__ import annotations

import os
from pathlib import Path
import pytest

from stepscript.core import config as config_core

# Register pytest-bdd step definitions as a pytest plugin so fixtures are discoverable.
pytest_plugins = ["tests.bdd.steps"]

_SKIP_COUNT = 0


def pytest_configure() -> None:
    # Never pick up the developer's own config file.
    if "STEPSCRIPT_CONFIG_PATH" not in os.environ:
        path = Path(__file__).resolve().parents[1] / ".stepscript-test-config.toml"
        os.environ["STEPSCRIPT_CONFIG_PATH"] = str(path)


@pytest.fixture(autouse=True)
def _fresh_config():
    config_core.reset_config_cache()
    yield
    config_core.reset_config_cache()


def pytest_runtest_logreport(report: pytest.TestReport) -> None:
    global _SKIP_COUNT
    if report.when == "setup" and report.outcome == "skipped":
        _SKIP_COUNT += 1


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    if _SKIP_COUNT > 0:
        pytest.exit(f"Skipped tests are not allowed (skipped={_SKIP_COUNT}).", returncode=2)
