"""Tests for state check functions."""

from unittest.mock import MagicMock, patch

import pytest

from scheduler_provider.acctest import checks
from scheduler_provider.acctest.checks import CheckError
from scheduler_provider.acctest.state import ResourceState, State
from scheduler_provider.config import ProviderConfig

ADDRESS = "aws_scheduler_schedule_group.test"


def _state(**outputs: object) -> State:
    return State(
        resources={ADDRESS: ResourceState(type="aws_scheduler_schedule_group", id="g1", outputs=dict(outputs))}
    )


def test_primary_missing_resource() -> None:
    """A check against an address not in state fails."""
    with pytest.raises(CheckError, match="Not found: aws_scheduler_schedule_group.test in root module"):
        checks.primary(State(), ADDRESS)


def test_check_resource_attr() -> None:
    """Exact match passes; mismatch and absence fail."""
    state = _state(name="g1", tags={"key1": "value1"})
    checks.check_resource_attr(ADDRESS, "name", "g1")(state)
    checks.check_resource_attr(ADDRESS, "tags.%", "1")(state)
    checks.check_resource_attr(ADDRESS, "id", "g1")(state)

    with pytest.raises(CheckError, match="expected 'other', got 'g1'"):
        checks.check_resource_attr(ADDRESS, "name", "other")(state)
    with pytest.raises(CheckError, match="got no value"):
        checks.check_resource_attr(ADDRESS, "state", "ACTIVE")(state)


def test_check_resource_attr_zero_count_may_be_absent() -> None:
    """tags.% = 0 passes when no tags attribute was recorded at all."""
    checks.check_resource_attr(ADDRESS, "tags.%", "0")(_state(name="g1"))
    checks.check_resource_attr(ADDRESS, "tags.%", "0")(_state(name="g1", tags={}))


def test_check_no_resource_attr() -> None:
    """Absence passes; presence fails."""
    state = _state(tags={"key2": "value2"})
    checks.check_no_resource_attr(ADDRESS, "tags.key1")(state)
    with pytest.raises(CheckError, match="found when not expected"):
        checks.check_no_resource_attr(ADDRESS, "tags.key2")(state)


def test_check_resource_attr_with() -> None:
    """The callback fails the check by raising."""
    state = _state(state="ACTIVE")
    checks.check_resource_attr_with(ADDRESS, "state", lambda v: None)(state)

    def must_be_deleting(value: str) -> None:
        if value != "DELETING":
            raise ValueError("not deleting")

    with pytest.raises(CheckError, match="not deleting"):
        checks.check_resource_attr_with(ADDRESS, "state", must_be_deleting)(state)
    with pytest.raises(CheckError, match="expected to be set"):
        checks.check_resource_attr_with(ADDRESS, "arn", must_be_deleting)(state)


def test_match_resource_attr_regional_arn() -> None:
    """ARN must carry the connection's partition, region, and account."""
    conn = MagicMock(partition="aws", region="us-east-1", account_id="123456789012")
    state = _state(arn="arn:aws:scheduler:us-east-1:123456789012:schedule-group/g1")

    checks.match_resource_attr_regional_arn(conn, ADDRESS, "arn", "scheduler", "schedule-group/g1")(state)
    with pytest.raises(CheckError, match="didn't match"):
        checks.match_resource_attr_regional_arn(conn, ADDRESS, "arn", "scheduler", "schedule-group/g2")(state)

    conn.region = "eu-west-1"
    with pytest.raises(CheckError):
        checks.match_resource_attr_regional_arn(conn, ADDRESS, "arn", "scheduler", "schedule-group/g1")(state)


def test_check_resource_attr_name_generated() -> None:
    """Generated names are the default prefix plus a 26 character suffix."""
    checks.check_resource_attr_name_generated(ADDRESS, "name")(_state(name="terraform-2024010203040512340000000a"))
    with pytest.raises(CheckError):
        checks.check_resource_attr_name_generated(ADDRESS, "name")(_state(name="terraform-short"))


def test_check_resource_attr_name_from_prefix() -> None:
    """Prefixed names must start with the given prefix followed by the suffix."""
    check = checks.check_resource_attr_name_from_prefix(ADDRESS, "name", "tf-acc-test-prefix-")
    check(_state(name="tf-acc-test-prefix-2024010203040512340000000a"))
    with pytest.raises(CheckError):
        check(_state(name="terraform-2024010203040512340000000a"))


def test_compose_stops_at_first_failure() -> None:
    """compose reports which check failed and skips the rest."""
    after = MagicMock()
    composed = checks.compose(
        checks.check_resource_attr(ADDRESS, "name", "g1"),
        checks.check_resource_attr(ADDRESS, "name", "wrong"),
        after,
    )
    with pytest.raises(CheckError, match="Check 2/3 error"):
        composed(_state(name="g1"))
    after.assert_not_called()


def test_check_resource_disappears_deletes_through_provider() -> None:
    """disappears deletes the resource by id using its registered provider."""
    config = ProviderConfig(region="us-east-1")
    type_def = MagicMock()
    with patch("scheduler_provider.acctest.checks.lookup", return_value=type_def) as mock_lookup:
        checks.check_resource_disappears(config, ADDRESS)(_state(name="g1"))

    mock_lookup.assert_called_once_with("aws_scheduler_schedule_group")
    type_def.provider.assert_called_once_with(config)
    type_def.provider.return_value.delete.assert_called_once_with("g1", {"name": "g1"})
