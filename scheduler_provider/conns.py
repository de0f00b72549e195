"""AWS session and service clients for one provider configuration."""

from __future__ import annotations

from functools import cached_property
import logging
from typing import Any

import boto3

from scheduler_provider.config import ProviderConfig

LOG = logging.getLogger(__name__)


class AWSClient:
    """Lazily-built boto3 clients plus the account, region, and partition they talk to."""

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    @cached_property
    def session(self) -> boto3.session.Session:
        return boto3.session.Session(profile_name=self.config.profile, region_name=self.config.region)

    def _client(self, service: str) -> Any:
        LOG.debug("creating %s client for region %s", service, self.region)
        return self.session.client(service, region_name=self.region, endpoint_url=self.config.endpoint_url)

    @cached_property
    def scheduler(self) -> Any:
        return self._client("scheduler")

    @cached_property
    def sts(self) -> Any:
        return self._client("sts")

    @property
    def region(self) -> str:
        return self.config.region

    @cached_property
    def partition(self) -> str:
        return self.session.get_partition_for_region(self.region)

    @cached_property
    def account_id(self) -> str:
        return self.sts.get_caller_identity()["Account"]

    def regional_arn(self, service: str, resource: str) -> str:
        return f"arn:{self.partition}:{service}:{self.region}:{self.account_id}:{resource}"

    def partition_has_service(self, service: str) -> bool:
        if self.session.get_available_regions(service, partition_name=self.partition):
            return True
        # No endpoint data in any partition means botocore can't tell; assume supported.
        return not any(
            self.session.get_available_regions(service, partition_name=p)
            for p in self.session.get_available_partitions()
        )


def scheduler_client(config: ProviderConfig) -> Any:
    """Build a standalone scheduler client (used by the dynamic provider process)."""
    return AWSClient(config).scheduler
