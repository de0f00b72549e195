"""Resource name generation: unique-id suffixes, name prefixes, and validation."""

from __future__ import annotations

from datetime import datetime, timezone
import random
import re
import threading

UNIQUE_ID_PREFIX = "terraform-"
UNIQUE_ID_SUFFIX_LENGTH = 26
ACC_TEST_RESOURCE_PREFIX = "tf-acc-test"

NAME_MAX_LENGTH = 64
NAME_PREFIX_MAX_LENGTH = NAME_MAX_LENGTH - UNIQUE_ID_SUFFIX_LENGTH

_NAME_PATTERN = re.compile(r"^[0-9A-Za-z_.-]+$")
_UNIQUE_ID_SUFFIX_PATTERN = re.compile(r"^\d{18}[0-9a-f]{8}$")

_counter_lock = threading.Lock()
_counter = 0


def unique_id_suffix() -> str:
    """Timestamp (with 1/10000 s precision) plus an 8 hex digit counter, 26 chars."""
    global _counter
    with _counter_lock:
        _counter += 1
        counter = _counter
    now = datetime.now(timezone.utc)
    return f"{now:%Y%m%d%H%M%S}{now.microsecond // 100:04d}{counter:08x}"


def prefixed_unique_id(prefix: str) -> str:
    return f"{prefix}{unique_id_suffix()}"


def create_name(name: str | None, name_prefix: str | None) -> str:
    """Explicit name wins; otherwise prefix (or the default prefix) plus a unique suffix."""
    if name:
        return name
    if name_prefix:
        return prefixed_unique_id(name_prefix)
    return prefixed_unique_id(UNIQUE_ID_PREFIX)


def name_prefix_from_name(name: str) -> str | None:
    """Recover the prefix of a generated name, or None when the name was not generated."""
    index = len(name) - UNIQUE_ID_SUFFIX_LENGTH
    if index <= 0:
        return None
    if not _UNIQUE_ID_SUFFIX_PATTERN.match(name[index:]):
        return None
    return name[:index]


def has_generated_name(name: str) -> bool:
    return name_prefix_from_name(name) == UNIQUE_ID_PREFIX


def random_with_prefix(prefix: str) -> str:
    """Unique test resource name, e.g. 'tf-acc-test-5577006791947779410'."""
    return f"{prefix}-{random.SystemRandom().randrange(2**63)}"


def validate_name(name: str, max_length: int = NAME_MAX_LENGTH) -> list[str]:
    """Return a list of problems with a schedule group name (empty when valid)."""
    problems = []
    if not 1 <= len(name) <= max_length:
        problems.append(f"must be between 1 and {max_length} characters, got {len(name)}")
    if name and not _NAME_PATTERN.match(name):
        problems.append("may only contain alphanumerics, hyphens, underscores, and periods")
    return problems


def validate_name_prefix(name_prefix: str) -> list[str]:
    return validate_name(name_prefix, max_length=NAME_PREFIX_MAX_LENGTH)
