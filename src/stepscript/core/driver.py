from __future__ import annotations

import logging

from stepscript.core.plan import Plan, PlannedScenario
from stepscript.core.recorder import TraceRecorder
from stepscript.core.steps import StepRegistry, registry as default_registry

log = logging.getLogger(__name__)


def run_scenario(scenario: PlannedScenario, recorder: TraceRecorder, registry: StepRegistry) -> None:
    recorder.before_scenario(scenario.context)
    for step in scenario.steps:
        match = registry.match(step.kind, step.text)
        recorder.before_scenario_block(step.kind)
        recorder.before_step(step.kind)
        match.run(recorder, step.table)
        recorder.after_step()
        recorder.after_scenario_block()
    recorder.after_scenario()


def replay(plan: Plan, recorder: TraceRecorder, registry: StepRegistry | None = None) -> None:
    """Drive `recorder` through the full lifecycle of `plan`.

    Steps are matched before their block opens, so an unknown step stops the
    run without leaving a dangling block in the trace.
    """
    registry = registry if registry is not None else default_registry
    recorder.before_test_run()
    for feature in plan.features:
        log.info("feature %r: %d scenario(s)", feature.context.title, len(feature.scenarios))
        recorder.before_feature(feature.context)
        for scenario in feature.scenarios:
            run_scenario(scenario, recorder, registry)
        recorder.after_feature()
    recorder.after_test_run()
