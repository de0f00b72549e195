"""Error kinds raised by the provider and the acceptance harness."""

from __future__ import annotations

from botocore.exceptions import ClientError, EndpointConnectionError

from scheduler_provider.names import full_human_friendly

ERR_CODE_RESOURCE_NOT_FOUND = "ResourceNotFoundException"

# (code, message fragment) pairs; an empty fragment matches any message.
_SKIP_ERRORS: list[tuple[str, str]] = [
    ("InvalidAction", ""),
    ("UnknownOperationException", ""),
    ("UnsupportedOperation", ""),
    ("InvalidInputException", "Unknown operation"),
]


class ProviderError(Exception):
    """A remote-call or state error wrapped with action and resource context."""

    def __init__(
        self,
        service: str,
        action: str,
        resource: str,
        id_: str,
        cause: BaseException | str | None = None,
    ) -> None:
        self.service = service
        self.action = action
        self.resource = resource
        self.id = id_
        self.cause = cause
        super().__init__(problem_message(service, action, resource, id_, cause))


class NotFoundError(Exception):
    """The requested remote resource does not exist."""

    def __init__(self, message: str = "couldn't find resource", last_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.last_error = last_error


class WaitTimeoutError(Exception):
    """A wait for a target state gave up."""

    def __init__(self, last_state: str, timeout: float) -> None:
        super().__init__(
            f"timeout while waiting for state to become 'not found' "
            f"(last state: '{last_state}', timeout: {timeout:g}s)"
        )
        self.last_state = last_state
        self.timeout = timeout


def problem_message(
    service: str,
    action: str,
    resource: str,
    id_: str,
    cause: BaseException | str | None = None,
) -> str:
    """Standard message, e.g. 'creating EventBridge Scheduler Schedule Group (name): boom'."""
    message = f"{action} {full_human_friendly(service)} {resource} ({id_})"
    if cause is None:
        return message
    return f"{message}: {cause}"


def error_code(err: BaseException | None) -> str:
    if isinstance(err, ClientError):
        return err.response.get("Error", {}).get("Code", "")
    return ""


def error_message(err: BaseException | None) -> str:
    if isinstance(err, ClientError):
        return err.response.get("Error", {}).get("Message", "")
    return ""


def is_not_found(err: BaseException | None) -> bool:
    """True for NotFoundError or a ResourceNotFoundException from the service."""
    if isinstance(err, NotFoundError):
        return True
    return error_code(err) == ERR_CODE_RESOURCE_NOT_FOUND


def is_skip_error(err: BaseException | None) -> bool:
    """True when the error means the service is not offered where we're running."""
    if err is None:
        return False
    # Missing regional endpoint (DNS failure)
    if isinstance(err, EndpointConnectionError):
        return True
    code = error_code(err)
    message = error_message(err)
    for skip_code, fragment in _SKIP_ERRORS:
        if code == skip_code and fragment in message:
            return True
    return False
