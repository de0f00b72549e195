"""Pre-checks run before any step: credentials, region, partition support."""

from __future__ import annotations

import pytest

from scheduler_provider.conns import AWSClient


def pre_check(conn: AWSClient) -> None:
    """Fail early when there is no usable session."""
    if not conn.region:
        pytest.fail("AWS_REGION (or a provider config region) must be set for acceptance tests")
    if conn.session.get_credentials() is None:
        pytest.fail("AWS credentials must be configured for acceptance tests")


def pre_check_partition_has_service(conn: AWSClient, service: str) -> None:
    """Skip when the current partition doesn't offer the service."""
    if not conn.partition_has_service(service):
        pytest.skip(f"skipping tests; partition {conn.partition} does not support {service} service")
