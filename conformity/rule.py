# conformity/rule.py
import logging
from abc import ABC, abstractmethod

from conformity.events import INSTANCE_MISSING_TAGS, ConformityEvent, log_event
from conformity.models import Conformity, build_rule_config
from conformity.tag_fetcher import Ec2TagFetcher

logger = logging.getLogger(__name__)

RULE_NAME = "InstanceHasTag"


class ConformityRule(ABC):
    """Interface the conformity framework calls for each rule."""

    @abstractmethod
    def check(self, cluster):
        """Check a cluster and return a Conformity result."""

    @abstractmethod
    def get_name(self):
        """The rule id."""

    @abstractmethod
    def get_nonconforming_reason(self):
        """Human readable explanation of why a component fails the rule."""


def missing_tags(required_tags, tag_keys):
    """Required tags absent from tag_keys, sorted."""
    return sorted(set(required_tags) - set(tag_keys))


def has_required_tags(required_tags):
    """Build the default predicate: true iff every required tag key is present."""
    required = frozenset(required_tags)

    def predicate(tag_keys):
        return required.issubset(tag_keys)

    return predicate


class InstanceHasTags(ConformityRule):
    """Checks that every eligible instance of a cluster carries the required tag keys.

    The two steps are pluggable. ``fetch_tags(region, instance_ids)`` must
    return a mapping of instance id to tag keys containing only eligible
    instances; ``predicate(tag_keys)`` decides whether one instance conforms.
    Both default to the EC2 lookup and the required-tags check.
    """

    def __init__(self, config, fetch_tags=None, predicate=None, on_event=None):
        self.config = config
        self.on_event = on_event or log_event
        self.fetch_tags = fetch_tags or Ec2TagFetcher(config.session, self.on_event)
        self.predicate = predicate or has_required_tags(config.required_tags)
        self._reason = f"Instances do not have tags ({','.join(sorted(config.required_tags))})"

    @classmethod
    def from_tags(cls, *required_tags, session=None, **strategies):
        """Validate the tags and build a rule from them."""
        return cls(build_rule_config(*required_tags, session=session), **strategies)

    @property
    def required_tags(self):
        return self.config.required_tags

    def check(self, cluster):
        instance_ids = cluster.instance_ids()
        if not instance_ids:
            logger.info(f"Cluster {cluster.name} has no instances, skipping tag fetch")
            return Conformity(self.get_name(), ())

        instance_tags = self.fetch_tags(cluster.region, instance_ids)

        failed = []
        for iid, tags in instance_tags.items():
            if not self.predicate(tags):
                missing = missing_tags(self.required_tags, tags)
                detail = {"missing": ",".join(missing)} if missing else {}
                self.on_event(ConformityEvent(INSTANCE_MISSING_TAGS, iid, detail))
                failed.append(iid)

        logger.info(
            f"Rule {self.get_name()} on cluster {cluster.name}: "
            f"{len(failed)} of {len(instance_tags)} instances nonconforming"
        )
        return Conformity(self.get_name(), tuple(failed))

    def get_name(self):
        return RULE_NAME

    def get_nonconforming_reason(self):
        return self._reason
