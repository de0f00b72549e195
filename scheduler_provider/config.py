"""Provider configuration loading and validation."""

from dataclasses import asdict, dataclass, field
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from scheduler_provider.spec.validator import validate_provider_config

CONFIG_DIR = ".scheduler-provider"
CONFIG_FILENAME = "config.yaml"
CONFIG_PATH_ENV = "SCHEDULER_PROVIDER_CONFIG"
ACC_ENV = "SCHEDULER_PROVIDER_ACC"


@dataclass
class ProviderConfig:
    """Connection settings and default tags shared by every resource the provider manages."""

    region: str
    profile: str | None = None
    endpoint_url: str | None = None
    default_tags: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProviderConfig":
        return cls(
            region=data["region"],
            profile=data.get("profile"),
            endpoint_url=data.get("endpoint_url"),
            default_tags=dict(data.get("default_tags") or {}),
        )

    @classmethod
    def from_file(cls, path: str) -> "ProviderConfig":
        """Load and validate a provider config file; env vars fill unset fields."""
        if not Path(path).exists():
            raise SystemExit(f"provider config not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise SystemExit(f"provider config must be a mapping: {path}")

        try:
            validate_provider_config(data)
        except jsonschema.ValidationError as e:
            raise SystemExit(str(e)) from e

        env = _from_env()
        region = data.get("region") or env.get("region")
        if not region:
            raise SystemExit(f"region missing from {path} and AWS_REGION is not set")
        return cls.from_dict({**env, **data, "region": region})


def _from_env() -> dict[str, Any]:
    values: dict[str, Any] = {}
    region = os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION")
    if region:
        values["region"] = region
    if os.environ.get("AWS_PROFILE"):
        values["profile"] = os.environ["AWS_PROFILE"]
    if os.environ.get("AWS_ENDPOINT_URL"):
        values["endpoint_url"] = os.environ["AWS_ENDPOINT_URL"]
    return values


def default_config_path() -> Path:
    return Path.cwd() / CONFIG_DIR / CONFIG_FILENAME


def load_provider_config() -> ProviderConfig:
    """Load from SCHEDULER_PROVIDER_CONFIG, the working-directory config file, or env vars."""
    path = os.environ.get(CONFIG_PATH_ENV)
    if path:
        return ProviderConfig.from_file(path)
    if default_config_path().exists():
        return ProviderConfig.from_file(str(default_config_path()))
    env = _from_env()
    if not env.get("region"):
        raise SystemExit("AWS_REGION (or AWS_DEFAULT_REGION) environment variable required")
    return ProviderConfig.from_dict(env)


def save_provider_config(config: ProviderConfig, path: Path | None = None) -> Path:
    path = path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {k: v for k, v in config.to_dict().items() if v}
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False)
    return path


def acceptance_enabled() -> bool:
    """True when tests should run against a real account through Pulumi."""
    return os.environ.get(ACC_ENV, "").strip().lower() in ("1", "true", "yes")
