# conformity/events.py
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

INSTANCE_IN_VPC = "instance_in_vpc"
INSTANCE_NOT_RUNNING = "instance_not_running"
INSTANCE_MISSING_TAGS = "instance_missing_tags"

_MISSING_TAGS_DETAIL = "Instance {instance_id} does not have all tags, missing {missing}."

_MESSAGES = {
    INSTANCE_IN_VPC: "Instance {instance_id} is in VPC {vpc_id} and is ignored.",
    INSTANCE_NOT_RUNNING: "Instance {instance_id} is not running, state is {state}.",
    INSTANCE_MISSING_TAGS: "Instance {instance_id} does not have all tags.",
}


class _Fields(dict):
    def __missing__(self, key):
        return "unknown"


@dataclass(frozen=True)
class ConformityEvent:
    """A diagnostic record emitted while fetching or evaluating instances."""

    kind: str
    instance_id: str
    detail: dict = field(default_factory=dict)

    def message(self):
        template = _MESSAGES.get(self.kind)
        if self.kind == INSTANCE_MISSING_TAGS and "missing" in self.detail:
            template = _MISSING_TAGS_DETAIL
        if template is None:
            return f"{self.kind}: instance {self.instance_id} {self.detail}"
        return template.format_map(_Fields({**self.detail, "instance_id": self.instance_id}))


def log_event(event):
    """Default event sink: write the event as an INFO record."""
    logger.info(
        event.message(),
        extra={
            "event_kind": event.kind,
            "instance_id": event.instance_id,
            "event_detail": dict(event.detail),
        },
    )
