"""Check functions run against a state snapshot after each apply."""

from __future__ import annotations

from collections.abc import Callable
import re

from scheduler_provider import naming
from scheduler_provider.acctest.state import COUNT_LIST, COUNT_MAP, ResourceState, State
from scheduler_provider.config import ProviderConfig
from scheduler_provider.conns import AWSClient
from scheduler_provider.registry import lookup

CheckFunc = Callable[[State], None]

_UNIQUE_ID_SUFFIX = r"\d{18}[0-9a-f]{8}"


class CheckError(AssertionError):
    """A check found state that doesn't match what the test expects."""


def compose(*checks: CheckFunc) -> CheckFunc:
    """Run checks in order, stopping at the first failure."""

    def check(state: State) -> None:
        for i, fn in enumerate(checks, 1):
            try:
                fn(state)
            except Exception as e:
                raise CheckError(f"Check {i}/{len(checks)} error: {e}") from e

    return check


def primary(state: State, address: str) -> ResourceState:
    """Resource at address; raise CheckError if it isn't in the root module."""
    rs = state.root_module().get(address)
    if rs is None:
        raise CheckError(f"Not found: {address} in root module")
    return rs


def _attr(state: State, address: str, key: str) -> str | None:
    return primary(state, address).attributes.get(key)


def check_resource_attr(address: str, key: str, value: str) -> CheckFunc:
    def check(state: State) -> None:
        actual = _attr(state, address, key)
        if actual is None:
            # An empty map or list may be absent rather than counted as zero.
            if value == "0" and key.endswith((f".{COUNT_MAP}", f".{COUNT_LIST}")):
                return
            raise CheckError(f"{address}: Attribute '{key}' expected {value!r}, got no value")
        if actual != value:
            raise CheckError(f"{address}: Attribute '{key}' expected {value!r}, got {actual!r}")

    return check


def check_no_resource_attr(address: str, key: str) -> CheckFunc:
    def check(state: State) -> None:
        actual = _attr(state, address, key)
        if actual is not None:
            raise CheckError(f"{address}: Attribute '{key}' found when not expected: {actual!r}")

    return check


def check_resource_attr_with(address: str, key: str, fn: Callable[[str], None]) -> CheckFunc:
    """Pass the attribute value to fn, which raises to fail the check."""

    def check(state: State) -> None:
        actual = _attr(state, address, key)
        if actual is None:
            raise CheckError(f"{address}: Attribute '{key}' expected to be set")
        try:
            fn(actual)
        except Exception as e:
            raise CheckError(f"{address}: Attribute '{key}' value {actual!r}: {e}") from e

    return check


def match_resource_attr(address: str, key: str, pattern: re.Pattern[str] | str) -> CheckFunc:
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(state: State) -> None:
        actual = _attr(state, address, key)
        if actual is None:
            raise CheckError(f"{address}: Attribute '{key}' expected to match {regex.pattern!r}, got no value")
        if not regex.search(actual):
            raise CheckError(f"{address}: Attribute '{key}' didn't match {regex.pattern!r}, got {actual!r}")

    return check


def match_resource_attr_regional_arn(
    conn: AWSClient,
    address: str,
    key: str,
    service: str,
    resource_pattern: re.Pattern[str] | str,
) -> CheckFunc:
    """Attribute must be an ARN in the current partition, region, and account."""
    resource_regex = resource_pattern.pattern if isinstance(resource_pattern, re.Pattern) else resource_pattern

    def check(state: State) -> None:
        arn_regex = f"^arn:{conn.partition}:{service}:{conn.region}:{conn.account_id}:{resource_regex}$"
        match_resource_attr(address, key, arn_regex)(state)

    return check


def check_resource_attr_name_generated(address: str, key: str) -> CheckFunc:
    return match_resource_attr(address, key, f"^{re.escape(naming.UNIQUE_ID_PREFIX)}{_UNIQUE_ID_SUFFIX}$")


def check_resource_attr_name_from_prefix(address: str, key: str, prefix: str) -> CheckFunc:
    return match_resource_attr(address, key, f"^{re.escape(prefix)}{_UNIQUE_ID_SUFFIX}$")


def check_resource_disappears(config: ProviderConfig, address: str) -> CheckFunc:
    """Delete the resource behind the framework's back, as out-of-band drift."""

    def check(state: State) -> None:
        rs = primary(state, address)
        if not rs.id:
            raise CheckError(f"{address}: resource ID missing")
        provider = lookup(rs.type).provider(config)
        provider.delete(rs.id, rs.outputs)

    return check
