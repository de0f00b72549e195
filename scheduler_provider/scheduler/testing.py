"""Schedule group checks for acceptance tests: existence, destruction, and pre-check."""

from __future__ import annotations

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
import pytest

from scheduler_provider import names
from scheduler_provider.acctest.checks import CheckFunc
from scheduler_provider.acctest.state import State
from scheduler_provider.conns import AWSClient
from scheduler_provider.errors import NotFoundError, ProviderError, is_skip_error
from scheduler_provider.scheduler.schedule_group import find_schedule_group_by_name


def _error(action: str, id_: str, cause: BaseException | str) -> ProviderError:
    return ProviderError(names.SCHEDULER, action, names.RES_NAME_SCHEDULE_GROUP, id_, cause)


def check_schedule_group_exists(conn: AWSClient, address: str, out: dict[str, Any]) -> CheckFunc:
    """Fetch the live group behind address and copy the response into out."""

    def check(state: State) -> None:
        rs = state.root_module().get(address)
        if rs is None:
            raise _error(names.ERR_ACTION_CHECKING_EXISTENCE, address, "not found")
        if not rs.id:
            raise _error(names.ERR_ACTION_CHECKING_EXISTENCE, address, "not set")

        try:
            resp = conn.scheduler.get_schedule_group(Name=rs.id)
        except ClientError as e:
            raise _error(names.ERR_ACTION_CHECKING_EXISTENCE, rs.id, e) from e

        out.clear()
        out.update(resp)

    return check


def check_schedule_group_destroy(conn: AWSClient) -> CheckFunc:
    """Every schedule group in state must be gone; a readable one is a failure."""

    def check(state: State) -> None:
        for _address, rs in state.of_type(names.RES_TYPE_SCHEDULE_GROUP):
            try:
                find_schedule_group_by_name(conn.scheduler, rs.id)
            except NotFoundError:
                continue
            except ClientError as e:
                raise _error(names.ERR_ACTION_CHECKING_DESTROYED, rs.id, e) from e
            raise _error(names.ERR_ACTION_CHECKING_DESTROYED, rs.id, "not destroyed")

    return check


def pre_check_scheduler(conn: AWSClient) -> None:
    """Make a no-op call to confirm the service answers in this account and region."""
    try:
        conn.scheduler.list_schedule_groups()
    except (BotoCoreError, ClientError) as e:
        if is_skip_error(e):
            pytest.skip(f"skipping acceptance testing: {e}")
        pytest.fail(f"unexpected PreCheck error: {e}")
