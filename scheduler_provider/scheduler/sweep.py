"""Sweeper: delete schedule groups left behind by interrupted acceptance runs."""

from __future__ import annotations

import logging
from typing import Any

from scheduler_provider import names, naming
from scheduler_provider.config import ProviderConfig
from scheduler_provider.conns import scheduler_client
from scheduler_provider.errors import ProviderError
from scheduler_provider.scheduler.schedule_group import delete_schedule_group

LOG = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = "default"


class SweepError(Exception):
    """One or more groups could not be swept."""

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = errors
        lines = [f"{len(errors)} error(s) sweeping schedule groups:"]
        lines.extend(f"  * {err}" for err in errors)
        super().__init__("\n".join(lines))


def list_schedule_groups(client: Any, name_prefix: str | None = None) -> list[dict[str, Any]]:
    """All schedule groups (optionally filtered server-side by name prefix)."""
    kwargs: dict[str, Any] = {}
    if name_prefix:
        kwargs["NamePrefix"] = name_prefix
    groups: list[dict[str, Any]] = []
    paginator = client.get_paginator("list_schedule_groups")
    for page in paginator.paginate(**kwargs):
        groups.extend(page.get("ScheduleGroups", []))
    return groups


def sweep_schedule_groups(
    config: ProviderConfig,
    prefix: str = naming.ACC_TEST_RESOURCE_PREFIX,
    client: Any = None,
) -> list[str]:
    """Delete every group whose name starts with prefix; never the default group.

    Returns the swept names. Errors are collected and raised together once
    every candidate has been tried.
    """
    client = client or scheduler_client(config)
    swept: list[str] = []
    errors: list[Exception] = []

    for group in list_schedule_groups(client, name_prefix=prefix):
        name = group["Name"]
        if name == DEFAULT_GROUP_NAME or not name.startswith(prefix):
            continue
        LOG.info("sweeping %s %s (%s)", names.SCHEDULER_HUMAN_FRIENDLY, names.RES_NAME_SCHEDULE_GROUP, name)
        try:
            delete_schedule_group(client, name)
        except ProviderError as e:
            errors.append(e)
            continue
        swept.append(name)

    if errors:
        raise SweepError(errors)
    return swept
