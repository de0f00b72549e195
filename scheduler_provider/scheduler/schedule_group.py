"""EventBridge Scheduler schedule group (Pulumi dynamic resource wrapping boto3)."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import time
from typing import Any

from botocore.exceptions import ClientError
import pulumi
import pulumi.dynamic

from scheduler_provider import names, naming, tagging
from scheduler_provider.config import ProviderConfig
from scheduler_provider.conns import scheduler_client
from scheduler_provider.errors import NotFoundError, ProviderError, WaitTimeoutError, is_not_found
from scheduler_provider.registry import register

LOG = logging.getLogger(__name__)

STATE_DELETING = "DELETING"

DELETE_TIMEOUT = 5 * 60
DELETE_POLL_INTERVAL = 5.0

# Properties whose change can't be applied in place.
FORCE_NEW = ("name", "name_prefix")


def format_rfc3339(value: datetime | None) -> str:
    """Format an API timestamp as RFC3339 in UTC, e.g. 2024-01-02T03:04:05Z."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def find_schedule_group_by_name(client: Any, name: str) -> dict[str, Any]:
    """Return the GetScheduleGroup response; raise NotFoundError if the group doesn't exist."""
    try:
        return client.get_schedule_group(Name=name)
    except ClientError as e:
        if is_not_found(e):
            raise NotFoundError(f"schedule group {name} not found", last_error=e) from e
        raise


def wait_schedule_group_deleted(
    client: Any,
    name: str,
    timeout: float = DELETE_TIMEOUT,
    poll_interval: float = DELETE_POLL_INTERVAL,
) -> None:
    """Poll until the group is gone. DELETING is the only state worth waiting on."""
    deadline = time.monotonic() + timeout
    last_state = ""
    while True:
        try:
            last_state = find_schedule_group_by_name(client, name).get("State", "")
        except NotFoundError:
            return
        if last_state != STATE_DELETING:
            raise RuntimeError(f"unexpected state '{last_state}', wanted target 'not found'")
        if time.monotonic() >= deadline:
            raise WaitTimeoutError(last_state, timeout)
        time.sleep(poll_interval)


def _error(action: str, id_: str, cause: BaseException | str) -> ProviderError:
    return ProviderError(names.SCHEDULER, action, names.RES_NAME_SCHEDULE_GROUP, id_, cause)


def delete_schedule_group(client: Any, name: str) -> None:
    """Delete the group and wait until it is gone; a group already gone is not an error."""
    LOG.info("deleting %s %s (%s)", names.SCHEDULER_HUMAN_FRIENDLY, names.RES_NAME_SCHEDULE_GROUP, name)
    try:
        client.delete_schedule_group(Name=name)
    except ClientError as e:
        if is_not_found(e):
            return
        raise _error(names.ERR_ACTION_DELETING, name, e) from e

    try:
        wait_schedule_group_deleted(client, name)
    except (ClientError, RuntimeError, WaitTimeoutError) as e:
        raise _error(names.ERR_ACTION_WAITING_FOR_DELETION, name, e) from e


def name_changed(olds: dict[str, Any], news: dict[str, Any]) -> bool:
    """True when the new inputs would produce a different group name.

    A group created without `name` stores the generated name, so an unset
    `name` compares the prefix (or the default prefix) instead.
    """
    if news.get("name"):
        return news["name"] != olds.get("name")
    old_prefix = olds.get("name_prefix") or ""
    new_prefix = news.get("name_prefix") or naming.UNIQUE_ID_PREFIX
    return old_prefix != new_prefix


class ScheduleGroupProvider(pulumi.dynamic.ResourceProvider):
    """Dynamic provider for schedule groups using boto3."""

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__()
        # Plain data only: the provider is serialized into the Pulumi state.
        self._config = config.to_dict()

    @property
    def default_tags(self) -> dict[str, str]:
        return dict(self._config.get("default_tags") or {})

    def _client(self) -> Any:
        return scheduler_client(ProviderConfig.from_dict(self._config))

    def _outs(self, group: dict[str, Any], tags_all: dict[str, str]) -> dict[str, Any]:
        name = group["Name"]
        return {
            "name": name,
            "name_prefix": naming.name_prefix_from_name(name) or "",
            "arn": group["Arn"],
            "creation_date": format_rfc3339(group.get("CreationDate")),
            "last_modification_date": format_rfc3339(group.get("LastModificationDate")),
            "state": group.get("State", ""),
            "tags": tagging.remove_default_tags(self.default_tags, tags_all),
            "tags_all": tags_all,
        }

    def _read(self, client: Any, name: str) -> dict[str, Any]:
        group = find_schedule_group_by_name(client, name)
        return self._outs(group, tagging.list_tags(client, group["Arn"]))

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> pulumi.dynamic.CheckResult:
        failures = []
        name = news.get("name")
        name_prefix = news.get("name_prefix")
        if name and name_prefix:
            failures.append(pulumi.dynamic.CheckFailure("name", '"name": conflicts with name_prefix'))
        if name:
            for problem in naming.validate_name(name):
                failures.append(pulumi.dynamic.CheckFailure("name", f"name {problem}"))
        if name_prefix:
            for problem in naming.validate_name_prefix(name_prefix):
                failures.append(pulumi.dynamic.CheckFailure("name_prefix", f"name_prefix {problem}"))
        for key, value in (news.get("tags") or {}).items():
            if not isinstance(value, str):
                failures.append(pulumi.dynamic.CheckFailure("tags", f"tags.{key} must be a string"))
        return pulumi.dynamic.CheckResult(news, failures)

    def diff(self, _id: str, olds: dict[str, Any], news: dict[str, Any]) -> pulumi.dynamic.DiffResult:
        replaces = list(FORCE_NEW) if name_changed(olds, news) else []
        new_tags_all = tagging.merge_default_tags(self.default_tags, news.get("tags"))
        tags_changed = new_tags_all != (olds.get("tags_all") or {})
        return pulumi.dynamic.DiffResult(
            changes=bool(replaces) or tags_changed,
            replaces=replaces,
            delete_before_replace=True,
        )

    def create(self, props: dict[str, Any]) -> pulumi.dynamic.CreateResult:
        client = self._client()
        name = naming.create_name(props.get("name"), props.get("name_prefix"))
        tags_all = tagging.merge_default_tags(self.default_tags, props.get("tags"))

        create_args: dict[str, Any] = {"Name": name}
        if tags_all:
            create_args["Tags"] = tagging.to_api(tags_all)

        try:
            client.create_schedule_group(**create_args)
        except ClientError as e:
            raise _error(names.ERR_ACTION_CREATING, name, e) from e
        LOG.info("created %s %s (%s)", names.SCHEDULER_HUMAN_FRIENDLY, names.RES_NAME_SCHEDULE_GROUP, name)

        try:
            outs = self._read(client, name)
        except (ClientError, NotFoundError) as e:
            raise _error(names.ERR_ACTION_READING, name, e) from e
        return pulumi.dynamic.CreateResult(id_=name, outs=outs)

    def read(self, id_: str, props: dict[str, Any]) -> pulumi.dynamic.ReadResult:
        client = self._client()
        try:
            outs = self._read(client, id_)
        except NotFoundError:
            LOG.warning(
                "%s %s (%s) not found, removing from state",
                names.SCHEDULER_HUMAN_FRIENDLY,
                names.RES_NAME_SCHEDULE_GROUP,
                id_,
            )
            return pulumi.dynamic.ReadResult(id_="", outs={})
        except ClientError as e:
            raise _error(names.ERR_ACTION_READING, id_, e) from e
        return pulumi.dynamic.ReadResult(id_=id_, outs=outs)

    def update(self, id_: str, olds: dict[str, Any], news: dict[str, Any]) -> pulumi.dynamic.UpdateResult:
        client = self._client()
        new_tags_all = tagging.merge_default_tags(self.default_tags, news.get("tags"))
        try:
            tagging.update_tags(client, olds["arn"], olds.get("tags_all") or {}, new_tags_all)
        except ClientError as e:
            raise _error(names.ERR_ACTION_UPDATING, id_, e) from e

        try:
            outs = self._read(client, id_)
        except (ClientError, NotFoundError) as e:
            raise _error(names.ERR_ACTION_READING, id_, e) from e
        return pulumi.dynamic.UpdateResult(outs=outs)

    def delete(self, id_: str, _props: dict[str, Any]) -> None:
        delete_schedule_group(self._client(), id_)


@register(names.RES_TYPE_SCHEDULE_GROUP, provider_factory=ScheduleGroupProvider)
class ScheduleGroup(pulumi.dynamic.Resource):
    """EventBridge Scheduler schedule group."""

    name: pulumi.Output[str]
    name_prefix: pulumi.Output[str]
    arn: pulumi.Output[str]
    creation_date: pulumi.Output[str]
    last_modification_date: pulumi.Output[str]
    state: pulumi.Output[str]
    tags: pulumi.Output[dict[str, str]]
    tags_all: pulumi.Output[dict[str, str]]

    def __init__(
        self,
        resource_name: str,
        config: ProviderConfig,
        name: str | None = None,
        name_prefix: str | None = None,
        tags: dict[str, str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(
            ScheduleGroupProvider(config),
            resource_name,
            {
                "name": name,
                "name_prefix": name_prefix,
                "tags": tags or {},
                "arn": None,
                "creation_date": None,
                "last_modification_date": None,
                "state": None,
                "tags_all": None,
            },
            opts,
        )
