"""Tests for the resource type registry (register, lookup, RESOURCE_TYPES)."""

from unittest.mock import MagicMock

import pulumi.dynamic
import pytest

from scheduler_provider.config import ProviderConfig
from scheduler_provider.registry import RESOURCE_TYPES, ResourceTypeDef, lookup, register


def test_register_adds_to_resource_types() -> None:
    """A class decorated with @register appears in RESOURCE_TYPES."""
    # Use a unique name to avoid clashing with other tests
    name = "test_foo_resource"
    factory = MagicMock()

    @register(name, provider_factory=factory)
    class FooResource(pulumi.dynamic.Resource):
        pass

    assert name in RESOURCE_TYPES
    type_def = RESOURCE_TYPES[name]
    assert isinstance(type_def, ResourceTypeDef)
    assert type_def.resource_class is FooResource
    assert lookup(name) is type_def

    config = ProviderConfig(region="us-east-1")
    assert type_def.provider(config) is factory.return_value
    factory.assert_called_once_with(config)

    # Clean up so other tests don't see this
    del RESOURCE_TYPES[name]


def test_declare_passes_properties_as_keywords() -> None:
    """declare() instantiates the resource class with the config and block properties."""
    resource_class = MagicMock()
    type_def = ResourceTypeDef("test_bar_resource", resource_class, MagicMock())
    config = ProviderConfig(region="us-east-1")

    type_def.declare("test_bar_resource.x", config, {"name": "n", "tags": {"a": "b"}})

    resource_class.assert_called_once_with("test_bar_resource.x", config=config, opts=None, name="n", tags={"a": "b"})


def test_lookup_unknown_type_lists_available() -> None:
    """lookup() of an unregistered type raises KeyError naming the known types."""
    with pytest.raises(KeyError) as exc_info:
        lookup("aws_nonexistent")
    message = str(exc_info.value)
    assert "aws_nonexistent" in message
    assert "aws_scheduler_schedule_group" in message

