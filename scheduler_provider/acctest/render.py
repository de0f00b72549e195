"""Resource configuration documents: YAML text in, validated resource blocks out."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any

import yaml

from scheduler_provider.spec.validator import validate_resource_config


@dataclass
class ResourceConfig:
    """A resource block: address is `<type>.<name>`."""

    address: str
    type: str
    name: str
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class ConfigDocument:
    resources: list[ResourceConfig] = field(default_factory=list)

    @property
    def addresses(self) -> list[str]:
        return [r.address for r in self.resources]


def quote(value: str) -> str:
    """Quote a value for interpolation into a YAML template."""
    return json.dumps(value)


def parse_config(text: str) -> ConfigDocument:
    """Parse and validate a configuration document.

    Raises:
        jsonschema.ValidationError: If the document or a resource block is invalid.
    """
    data = yaml.safe_load(text) or {}
    validate_resource_config(data)

    resources = []
    for address, block in data["resources"].items():
        type_name, name = address.split(".", 1)
        resources.append(ResourceConfig(address=address, type=type_name, name=name, properties=dict(block or {})))
    return ConfigDocument(resources=resources)
