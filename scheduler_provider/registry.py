"""Resource type registry: maps configuration type names to dynamic resources and providers."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import pulumi.dynamic

from scheduler_provider.config import ProviderConfig

R = TypeVar("R", bound=type[pulumi.dynamic.Resource])


@dataclass
class ResourceTypeDef:
    """Registered resource type: the Pulumi resource class and a factory for its provider."""

    type_name: str
    resource_class: type[pulumi.dynamic.Resource]
    provider_factory: Callable[[ProviderConfig], pulumi.dynamic.ResourceProvider]

    def provider(self, config: ProviderConfig) -> pulumi.dynamic.ResourceProvider:
        return self.provider_factory(config)

    def declare(
        self,
        logical_name: str,
        config: ProviderConfig,
        properties: dict[str, Any],
        opts: pulumi.ResourceOptions | None = None,
    ) -> pulumi.dynamic.Resource:
        """Declare the resource inside a running Pulumi program."""
        return self.resource_class(logical_name, config=config, opts=opts, **properties)


RESOURCE_TYPES: dict[str, ResourceTypeDef] = {}


def register(
    type_name: str,
    provider_factory: Callable[[ProviderConfig], pulumi.dynamic.ResourceProvider],
) -> Callable[[R], R]:
    """Decorator to register a dynamic resource class in RESOURCE_TYPES."""

    def decorator(cls: R) -> R:
        RESOURCE_TYPES[type_name] = ResourceTypeDef(
            type_name=type_name,
            resource_class=cls,
            provider_factory=provider_factory,
        )
        return cls

    return decorator


def lookup(type_name: str) -> ResourceTypeDef:
    """Return the registered type; raise KeyError listing known types if missing."""
    # Importing the resource modules registers their types.
    import scheduler_provider.scheduler.schedule_group  # noqa: F401

    if type_name not in RESOURCE_TYPES:
        available = ", ".join(sorted(RESOURCE_TYPES)) or "(none)"
        raise KeyError(f"unknown resource type: {type_name!r}. Available types: {available}")
    return RESOURCE_TYPES[type_name]
