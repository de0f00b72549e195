"""Engine backed by the Pulumi Automation API and a throwaway local file backend."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
import tempfile

from pulumi import automation as auto

from scheduler_provider import naming
from scheduler_provider.acctest.engine import Engine, EngineError, Plan
from scheduler_provider.acctest.render import ConfigDocument, parse_config
from scheduler_provider.acctest.state import ResourceState, State
from scheduler_provider.config import ProviderConfig
from scheduler_provider.registry import lookup

LOG = logging.getLogger(__name__)

PROJECT_NAME = "scheduler-provider-acctest"
DYNAMIC_RESOURCE_TYPE = "pulumi-python:dynamic:Resource"

# Preview operations that don't change anything.
_NO_OP = {"same", "read", "refresh", "discard"}


def _op_name(op: object) -> str:
    return str(getattr(op, "value", op))


class PulumiEngine(Engine):
    """Runs each configuration as an inline Pulumi program on its own stack.

    Resources are declared with their address (type.name) as the logical
    name, so state can be mapped back to addresses from the URN.
    """

    def __init__(self, config: ProviderConfig, work_dir: str | None = None) -> None:
        super().__init__(config)
        self._work_dir = Path(work_dir or tempfile.mkdtemp(prefix="scheduler-acc-"))
        self._stack_name = naming.random_with_prefix("acc")
        self._doc = ConfigDocument()
        self._stack: auto.Stack | None = None

    def _program(self, doc: ConfigDocument):
        config = self.config

        def program() -> None:
            for resource in doc.resources:
                lookup(resource.type).declare(resource.address, config, resource.properties)

        return program

    def _get_stack(self) -> auto.Stack:
        if self._stack is not None:
            self._stack.workspace.program = self._program(self._doc)
            return self._stack

        backend = self._work_dir / "state"
        backend.mkdir(parents=True, exist_ok=True)
        self._stack = auto.create_or_select_stack(
            stack_name=self._stack_name,
            project_name=PROJECT_NAME,
            program=self._program(self._doc),
            opts=auto.LocalWorkspaceOptions(
                work_dir=str(self._work_dir),
                project_settings=auto.ProjectSettings(
                    name=PROJECT_NAME,
                    runtime="python",
                    backend=auto.ProjectBackend(url=backend.as_uri()),
                ),
                secrets_provider="passphrase",
                env_vars={"PULUMI_CONFIG_PASSPHRASE": os.environ.get("PULUMI_CONFIG_PASSPHRASE", "")},
            ),
        )
        return self._stack

    def apply(self, config_text: str) -> None:
        self._doc = parse_config(config_text)
        stack = self._get_stack()
        try:
            stack.up(on_output=LOG.debug)
        except auto.CommandError as e:
            raise EngineError(f"pulumi up failed: {e}") from e

    def plan(self, config_text: str) -> Plan:
        self._doc = parse_config(config_text)
        stack = self._get_stack()
        try:
            result = stack.preview(refresh=True, on_output=LOG.debug)
        except auto.CommandError as e:
            raise EngineError(f"pulumi preview failed: {e}") from e

        plan = Plan()
        for op, count in (result.change_summary or {}).items():
            name = _op_name(op)
            if name not in _NO_OP and count:
                plan.summary[name] = count
        return plan

    def state(self) -> State:
        if self._stack is None:
            return State()
        deployment = self._stack.export_stack().deployment or {}
        resources = {}
        for r in deployment.get("resources", []):
            if not r.get("custom") or r.get("type") != DYNAMIC_RESOURCE_TYPE:
                continue
            address = r["urn"].split("::")[-1]
            resources[address] = ResourceState(
                type=address.split(".", 1)[0],
                id=r.get("id", ""),
                outputs=dict(r.get("outputs") or {}),
            )
        return State(resources=resources)

    def destroy(self) -> None:
        if self._stack is None:
            return
        try:
            self._stack.destroy(refresh=True, on_output=LOG.debug)
            self._stack.workspace.remove_stack(self._stack_name)
        except auto.CommandError as e:
            raise EngineError(f"Error running post-test destroy, there may be dangling resources: {e}") from e
        finally:
            self._stack = None
        shutil.rmtree(self._work_dir, ignore_errors=True)
