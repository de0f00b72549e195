"""Service, resource, and error-action names shared by the provider and tests."""

SCHEDULER = "scheduler"
SCHEDULER_ENDPOINT_ID = "scheduler"
SCHEDULER_HUMAN_FRIENDLY = "EventBridge Scheduler"

RES_TYPE_SCHEDULE_GROUP = "aws_scheduler_schedule_group"
RES_NAME_SCHEDULE_GROUP = "Schedule Group"

ERR_ACTION_CHECKING_DESTROYED = "checking destroyed"
ERR_ACTION_CHECKING_EXISTENCE = "checking existence"
ERR_ACTION_CREATING = "creating"
ERR_ACTION_DELETING = "deleting"
ERR_ACTION_READING = "reading"
ERR_ACTION_UPDATING = "updating"
ERR_ACTION_WAITING_FOR_DELETION = "waiting for delete"

_HUMAN_FRIENDLY = {
    SCHEDULER: SCHEDULER_HUMAN_FRIENDLY,
}


def full_human_friendly(service: str) -> str:
    """Return the display name for a service package, e.g. 'EventBridge Scheduler'."""
    try:
        return _HUMAN_FRIENDLY[service]
    except KeyError:
        raise ValueError(f"unknown service: {service!r}") from None
