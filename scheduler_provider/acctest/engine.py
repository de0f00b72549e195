"""Lifecycle engines: apply, plan, import, and destroy a configuration document."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
from typing import Any

from scheduler_provider.acctest.render import ConfigDocument, ResourceConfig, parse_config
from scheduler_provider.acctest.state import ResourceState, State
from scheduler_provider.config import ProviderConfig
from scheduler_provider.registry import ResourceTypeDef, lookup

LOG = logging.getLogger(__name__)

ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_REPLACE = "replace"
ACTION_DELETE = "delete"


class EngineError(Exception):
    """An apply, import, or destroy operation failed."""


@dataclass
class Plan:
    """Pending changes: action -> count, plus a readable line per change."""

    summary: dict[str, int] = field(default_factory=dict)
    details: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not any(self.summary.values())

    def add(self, address: str, action: str) -> None:
        self.summary[action] = self.summary.get(action, 0) + 1
        self.details.append(f"  {action}: {address}")

    def describe(self) -> str:
        if self.details:
            return "\n".join(self.details)
        return "\n".join(f"  {action}: {count}" for action, count in sorted(self.summary.items()) if count)


class Engine(ABC):
    """Drives resources through their lifecycle for one test case."""

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    @abstractmethod
    def apply(self, config_text: str) -> None:
        """Converge real infrastructure and state on the configuration."""

    @abstractmethod
    def plan(self, config_text: str) -> Plan:
        """Refresh (without saving) and report what apply would change."""

    @abstractmethod
    def state(self) -> State:
        ...

    @abstractmethod
    def destroy(self) -> None:
        """Delete everything in state."""

    def import_resource(self, type_name: str, id_: str) -> ResourceState:
        """Read a resource by identifier with no prior state, as an import would."""
        provider = lookup(type_name).provider(self.config)
        result = provider.read(id_, {})
        if not result.id:
            raise EngineError(f"Cannot import non-existent remote object: {type_name} ({id_})")
        return ResourceState(type=type_name, id=result.id, outputs=dict(result.outs or {}))


@dataclass
class _Entry:
    type_def: ResourceTypeDef
    id: str
    inputs: dict[str, Any]
    outputs: dict[str, Any]


class LocalEngine(Engine):
    """In-process reconciler calling the dynamic providers directly.

    State lives in memory. Every apply and plan refreshes from the provider
    first, so out-of-band deletions show up as drift.
    """

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        self._entries: dict[str, _Entry] = {}

    def _refresh(self, entry: _Entry) -> dict[str, Any] | None:
        provider = entry.type_def.provider(self.config)
        result = provider.read(entry.id, entry.outputs)
        if not result.id:
            return None
        return dict(result.outs or {})

    def _check(self, resource: ResourceConfig, olds: dict[str, Any]) -> dict[str, Any]:
        provider = lookup(resource.type).provider(self.config)
        result = provider.check(olds, dict(resource.properties))
        if result.failures:
            problems = "; ".join(f"{f.property}: {f.reason}" for f in result.failures)
            raise EngineError(f"{resource.address}: invalid configuration: {problems}")
        return dict(result.inputs)

    def _create(self, resource: ResourceConfig, inputs: dict[str, Any]) -> None:
        type_def = lookup(resource.type)
        result = type_def.provider(self.config).create(inputs)
        LOG.debug("%s: created %s", resource.address, result.id)
        self._entries[resource.address] = _Entry(type_def, result.id, inputs, dict(result.outs or {}))

    def _delete(self, address: str) -> None:
        entry = self._entries[address]
        entry.type_def.provider(self.config).delete(entry.id, entry.outputs)
        del self._entries[address]
        LOG.debug("%s: deleted %s", address, entry.id)

    def _delete_if_present(self, address: str) -> None:
        """Delete after a refresh; a resource already gone is just dropped from state."""
        if self._refresh(self._entries[address]) is None:
            LOG.debug("%s: already gone, dropping from state", address)
            del self._entries[address]
            return
        self._delete(address)

    def apply(self, config_text: str) -> None:
        doc = parse_config(config_text)

        for address in [a for a in self._entries if a not in doc.addresses]:
            self._delete_if_present(address)

        for resource in doc.resources:
            entry = self._entries.get(resource.address)
            if entry is not None:
                outputs = self._refresh(entry)
                if outputs is None:
                    del self._entries[resource.address]
                    entry = None
                else:
                    entry.outputs = outputs

            inputs = self._check(resource, entry.outputs if entry else {})
            if entry is None:
                self._create(resource, inputs)
                continue

            diff = entry.type_def.provider(self.config).diff(entry.id, entry.outputs, inputs)
            if diff.replaces:
                self._delete(resource.address)
                self._create(resource, inputs)
            elif diff.changes:
                result = entry.type_def.provider(self.config).update(entry.id, entry.outputs, inputs)
                entry.inputs = inputs
                entry.outputs = dict(result.outs or {})
                LOG.debug("%s: updated %s", resource.address, entry.id)

    def plan(self, config_text: str) -> Plan:
        doc: ConfigDocument = parse_config(config_text)
        plan = Plan()

        for address in self._entries:
            if address not in doc.addresses:
                plan.add(address, ACTION_DELETE)

        for resource in doc.resources:
            entry = self._entries.get(resource.address)
            outputs = self._refresh(entry) if entry is not None else None
            if entry is None or outputs is None:
                plan.add(resource.address, ACTION_CREATE)
                continue
            inputs = self._check(resource, outputs)
            diff = entry.type_def.provider(self.config).diff(entry.id, outputs, inputs)
            if diff.replaces:
                plan.add(resource.address, ACTION_REPLACE)
            elif diff.changes:
                plan.add(resource.address, ACTION_UPDATE)
        return plan

    def state(self) -> State:
        return State(
            resources={
                address: ResourceState(type=entry.type_def.type_name, id=entry.id, outputs=dict(entry.outputs))
                for address, entry in self._entries.items()
            }
        )

    def destroy(self) -> None:
        errors = []
        for address in reversed(list(self._entries)):
            try:
                self._delete_if_present(address)
            except Exception as e:
                LOG.error("%s: destroy failed: %s", address, e)
                errors.append(f"{address}: {e}")
        if errors:
            raise EngineError("Error running post-test destroy, there may be dangling resources:\n" + "\n".join(errors))
