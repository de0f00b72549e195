"""Tests for provider config loading and validation."""

from pathlib import Path

import pytest

from scheduler_provider.config import (
    ProviderConfig,
    acceptance_enabled,
    default_config_path,
    load_provider_config,
    save_provider_config,
)


def test_provider_config_from_file(tmp_path: Path, aws_env: None) -> None:
    """Test loading a valid config file."""
    yaml_content = """
region: eu-west-1
profile: sandbox
default_tags:
  team: platform
"""
    yaml_file = tmp_path / "config.yaml"
    yaml_file.write_text(yaml_content)

    config = ProviderConfig.from_file(str(yaml_file))

    assert config.region == "eu-west-1"
    assert config.profile == "sandbox"
    assert config.endpoint_url is None
    assert config.default_tags == {"team": "platform"}


def test_provider_config_region_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Env vars fill fields the file leaves unset."""
    monkeypatch.setenv("AWS_REGION", "us-west-2")
    monkeypatch.setenv("AWS_ENDPOINT_URL", "http://localhost:4566")
    yaml_file = tmp_path / "config.yaml"
    yaml_file.write_text("default_tags: {}\n")

    config = ProviderConfig.from_file(str(yaml_file))

    assert config.region == "us-west-2"
    assert config.endpoint_url == "http://localhost:4566"


def test_provider_config_missing_region(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test error when neither the file nor the environment gives a region."""
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
    yaml_file = tmp_path / "config.yaml"
    yaml_file.write_text("profile: sandbox\n")

    with pytest.raises(SystemExit, match="region missing"):
        ProviderConfig.from_file(str(yaml_file))


def test_provider_config_file_not_found_from_file() -> None:
    """Test error when file does not exist in from_file."""
    with pytest.raises(SystemExit):
        ProviderConfig.from_file("/nonexistent/config.yaml")


def test_provider_config_invalid_fails_validation(tmp_path: Path, aws_env: None) -> None:
    """Test that a config failing the schema raises SystemExit."""
    yaml_file = tmp_path / "config.yaml"
    yaml_file.write_text("region: us-east-1\nregoin: typo\n")

    with pytest.raises(SystemExit) as exc_info:
        ProviderConfig.from_file(str(yaml_file))
    assert "regoin" in str(exc_info.value)


def test_provider_config_dict_round_trip() -> None:
    """to_dict output is plain data that from_dict accepts."""
    config = ProviderConfig(region="us-east-1", profile="p", default_tags={"a": "b"})
    assert ProviderConfig.from_dict(config.to_dict()) == config


def test_load_provider_config_from_env_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, aws_env: None) -> None:
    """SCHEDULER_PROVIDER_CONFIG points at the file to load."""
    yaml_file = tmp_path / "custom.yaml"
    yaml_file.write_text("region: ap-southeast-2\n")
    monkeypatch.setenv("SCHEDULER_PROVIDER_CONFIG", str(yaml_file))

    assert load_provider_config().region == "ap-southeast-2"


def test_load_provider_config_env_path_not_found(monkeypatch: pytest.MonkeyPatch, aws_env: None) -> None:
    """Test error when SCHEDULER_PROVIDER_CONFIG names a missing file."""
    monkeypatch.setenv("SCHEDULER_PROVIDER_CONFIG", "/nonexistent/config.yaml")
    with pytest.raises(SystemExit):
        load_provider_config()


def test_load_provider_config_from_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, aws_env: None
) -> None:
    """The saved config in the working directory is used when no path is given."""
    monkeypatch.chdir(tmp_path)
    path = save_provider_config(ProviderConfig(region="ca-central-1", default_tags={"env": "dev"}))

    assert path == default_config_path()
    config = load_provider_config()
    assert config.region == "ca-central-1"
    assert config.default_tags == {"env": "dev"}


def test_load_provider_config_from_env_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, aws_env: None) -> None:
    """Without any file the environment is enough."""
    monkeypatch.chdir(tmp_path)
    config = load_provider_config()
    assert config.region == "us-east-1"
    assert config.default_tags == {}


def test_load_provider_config_missing_region(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, aws_env: None) -> None:
    """Test error when no file and no region env var."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AWS_REGION")
    monkeypatch.delenv("AWS_DEFAULT_REGION")
    with pytest.raises(SystemExit):
        load_provider_config()


def test_save_provider_config_omits_empty_fields(tmp_path: Path) -> None:
    """Unset fields aren't written."""
    path = save_provider_config(ProviderConfig(region="us-east-1"), tmp_path / "nested" / "config.yaml")
    assert path.read_text() == "region: us-east-1\n"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), ("true", True), ("YES", True), ("", False), ("0", False)],
)
def test_acceptance_enabled(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    """SCHEDULER_PROVIDER_ACC switches acceptance runs on."""
    monkeypatch.setenv("SCHEDULER_PROVIDER_ACC", value)
    assert acceptance_enabled() is expected
