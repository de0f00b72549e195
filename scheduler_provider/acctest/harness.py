"""Test cases as step sequences: apply, check, plan, import-verify, then destroy."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import logging

import pytest

from scheduler_provider.acctest.checks import CheckError, CheckFunc, primary
from scheduler_provider.acctest.engine import Engine
from scheduler_provider.acctest.state import ResourceState, State
from scheduler_provider.errors import is_skip_error

LOG = logging.getLogger(__name__)

ErrorCheckFunc = Callable[[BaseException], None]


class StepError(Exception):
    """A test step failed; the message names the step."""

    def __init__(self, step: int, message: str) -> None:
        self.step = step
        super().__init__(f"Step {step} error: {message}")


@dataclass
class TestStep:
    """Either a config step (config set) or an import step (import_state set)."""

    __test__ = False

    config: str | None = None
    check: CheckFunc | None = None
    expect_non_empty_plan: bool = False

    resource_name: str | None = None
    import_state: bool = False
    import_state_id: str | None = None
    import_state_verify: bool = False
    import_state_verify_ignore: list[str] = field(default_factory=list)


@dataclass
class TestCase:
    __test__ = False

    steps: list[TestStep]
    pre_check: Callable[[], None] | None = None
    check_destroy: CheckFunc | None = None
    error_check: ErrorCheckFunc | None = None


def default_error_check(err: BaseException) -> None:
    """Skip, rather than fail, when the service isn't offered here."""
    cause: BaseException | None = err
    while cause is not None:
        if is_skip_error(cause):
            pytest.skip(f"skipping test: service not supported: {cause}")
        cause = cause.__cause__


def verify_import(address: str, existing: ResourceState, imported: ResourceState, ignore: list[str]) -> None:
    """Imported attributes must equal the applied ones, apart from ignored prefixes."""

    def keep(key: str) -> bool:
        return not any(key == prefix or key.startswith(f"{prefix}.") for prefix in ignore)

    want = {k: v for k, v in existing.attributes.items() if keep(k)}
    got = {k: v for k, v in imported.attributes.items() if keep(k)}
    if want == got:
        return

    lines = [f"{address}: ImportStateVerify attributes not equivalent. Difference is shown below:"]
    for key in sorted(set(want) | set(got)):
        if want.get(key) != got.get(key):
            lines.append(f"  {key}: state={want.get(key)!r} imported={got.get(key)!r}")
    raise CheckError("\n".join(lines))


def _run_config_step(engine: Engine, step: TestStep) -> None:
    if step.config is None:
        raise CheckError("config step requires config")
    engine.apply(step.config)
    if step.check is not None:
        step.check(engine.state())

    plan = engine.plan(step.config)
    if not plan.empty and not step.expect_non_empty_plan:
        raise CheckError(f"After applying this test step, the plan was not empty.\n{plan.describe()}")
    if plan.empty and step.expect_non_empty_plan:
        raise CheckError("Expected a non-empty plan, but got an empty plan")


def _run_import_step(engine: Engine, step: TestStep) -> None:
    if not step.resource_name:
        raise CheckError("import step requires resource_name")
    existing = primary(engine.state(), step.resource_name)
    import_id = step.import_state_id or existing.id
    LOG.debug("importing %s as %s", step.resource_name, import_id)
    imported = engine.import_resource(existing.type, import_id)
    if step.import_state_verify:
        verify_import(step.resource_name, existing, imported, step.import_state_verify_ignore)


def run_test_case(case: TestCase, engine: Engine) -> None:
    """Run every step in order, then always destroy and run the destroy check.

    The destroy check sees the state as it was just before destroy.
    """
    error_check = case.error_check or default_error_check
    if case.pre_check is not None:
        case.pre_check()

    try:
        for i, step in enumerate(case.steps, 1):
            try:
                if step.import_state:
                    _run_import_step(engine, step)
                else:
                    _run_config_step(engine, step)
            except Exception as e:
                error_check(e)
                raise StepError(i, str(e)) from e
    finally:
        state_pre_destroy: State = engine.state()
        engine.destroy()
        if case.check_destroy is not None:
            case.check_destroy(state_pre_destroy)
