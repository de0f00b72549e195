"""Key-value resource tags: API conversion, default-tag merging, and in-place updates."""

from __future__ import annotations

import logging
from typing import Any

LOG = logging.getLogger(__name__)

AWS_TAG_PREFIX = "aws:"


def to_api(tags: dict[str, str]) -> list[dict[str, str]]:
    return [{"Key": k, "Value": v} for k, v in sorted(tags.items())]


def from_api(tags: list[dict[str, str]] | None) -> dict[str, str]:
    return {t["Key"]: t["Value"] for t in tags or []}


def ignore_aws(tags: dict[str, str]) -> dict[str, str]:
    """Drop tags in the reserved aws: namespace; they can't be managed."""
    return {k: v for k, v in tags.items() if not k.startswith(AWS_TAG_PREFIX)}


def merge_default_tags(default_tags: dict[str, str] | None, tags: dict[str, str] | None) -> dict[str, str]:
    """tags_all: resource tags win over provider default tags."""
    return {**(default_tags or {}), **(tags or {})}


def remove_default_tags(default_tags: dict[str, str] | None, tags_all: dict[str, str]) -> dict[str, str]:
    """Recover resource tags from tags_all; a default tag overridden with another value stays."""
    defaults = default_tags or {}
    return {k: v for k, v in tags_all.items() if defaults.get(k) != v}


def list_tags(client: Any, arn: str) -> dict[str, str]:
    resp = client.list_tags_for_resource(ResourceArn=arn)
    return ignore_aws(from_api(resp.get("Tags")))


def update_tags(client: Any, arn: str, old_tags: dict[str, str], new_tags: dict[str, str]) -> None:
    """Untag removed keys, then tag added and changed ones."""
    old_tags = ignore_aws(old_tags or {})
    new_tags = ignore_aws(new_tags or {})

    removed = sorted(k for k in old_tags if k not in new_tags)
    if removed:
        LOG.debug("untagging %s: %s", arn, removed)
        client.untag_resource(ResourceArn=arn, TagKeys=removed)

    updated = {k: v for k, v in new_tags.items() if old_tags.get(k) != v}
    if updated:
        LOG.debug("tagging %s: %s", arn, sorted(updated))
        client.tag_resource(ResourceArn=arn, Tags=to_api(updated))
