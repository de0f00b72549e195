"""Framework state snapshots with flattened attributes (e.g. tags.% and tags.key1)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

COUNT_MAP = "%"
COUNT_LIST = "#"


def flatten(outputs: dict[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested outputs into string attributes.

    Maps gain a `<key>.%` count and lists a `<key>.#` count. None values
    and internal keys (leading double underscore) are dropped.
    """
    attributes: dict[str, str] = {}
    for key, value in outputs.items():
        if not prefix and key.startswith("__"):
            continue
        path = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, dict):
            attributes[f"{path}.{COUNT_MAP}"] = str(len(value))
            attributes.update(flatten(value, prefix=f"{path}."))
        elif isinstance(value, (list, tuple)):
            attributes[f"{path}.{COUNT_LIST}"] = str(len(value))
            attributes.update(flatten({str(i): v for i, v in enumerate(value)}, prefix=f"{path}."))
        elif isinstance(value, bool):
            attributes[path] = "true" if value else "false"
        else:
            attributes[path] = str(value)
    return attributes


@dataclass
class ResourceState:
    """One managed resource as recorded in framework state."""

    type: str
    id: str
    outputs: dict[str, Any] = field(default_factory=dict)

    @property
    def attributes(self) -> dict[str, str]:
        return {"id": self.id, **flatten(self.outputs)}


@dataclass
class State:
    """Snapshot of every resource in the root module, keyed by address (type.name)."""

    resources: dict[str, ResourceState] = field(default_factory=dict)

    def root_module(self) -> dict[str, ResourceState]:
        return self.resources

    def of_type(self, type_name: str) -> list[tuple[str, ResourceState]]:
        return [(address, rs) for address, rs in self.resources.items() if rs.type == type_name]
