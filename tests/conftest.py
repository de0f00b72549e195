"""Shared fixtures: fake AWS credentials and moto-backed clients."""

from collections.abc import Iterator

from moto import mock_aws
import pytest

from scheduler_provider.config import ProviderConfig
from scheduler_provider.conns import AWSClient

REGION = "us-east-1"
ACCOUNT_ID = "123456789012"


def set_fake_aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point boto3 at fake credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    for name in ("AWS_PROFILE", "AWS_ENDPOINT_URL", "SCHEDULER_PROVIDER_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    set_fake_aws_env(monkeypatch)


@pytest.fixture
def mocked_aws(aws_env: None) -> Iterator[None]:
    with mock_aws():
        yield


@pytest.fixture
def provider_config(aws_env: None) -> ProviderConfig:
    return ProviderConfig(region=REGION)


@pytest.fixture
def conn(mocked_aws: None, provider_config: ProviderConfig) -> AWSClient:
    return AWSClient(provider_config)
