"""Acceptance fixtures: Pulumi against a real account when enabled, otherwise in-process against moto."""

from collections.abc import Iterator
from pathlib import Path

from moto import mock_aws
import pytest

from scheduler_provider.acctest.engine import Engine, LocalEngine
from scheduler_provider.config import ProviderConfig, acceptance_enabled, load_provider_config
from scheduler_provider.conns import AWSClient


@pytest.fixture
def acc_config(request: pytest.FixtureRequest) -> Iterator[ProviderConfig]:
    if acceptance_enabled():
        yield load_provider_config()
        return
    request.getfixturevalue("aws_env")
    with mock_aws():
        yield load_provider_config()


@pytest.fixture
def acc_conn(acc_config: ProviderConfig) -> AWSClient:
    return AWSClient(acc_config)


@pytest.fixture
def engine(acc_config: ProviderConfig, tmp_path: Path) -> Engine:
    if acceptance_enabled():
        from scheduler_provider.acctest.pulumi_engine import PulumiEngine

        return PulumiEngine(acc_config, work_dir=str(tmp_path / "pulumi"))
    return LocalEngine(acc_config)
