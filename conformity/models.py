# conformity/models.py
import logging
from dataclasses import dataclass, field

import boto3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoScalingGroup:
    """A named group of instance ids."""

    name: str
    instances: tuple = ()
    suspended_processes: tuple = ()


@dataclass(frozen=True)
class Cluster:
    """A region-scoped collection of autoscaling groups under conformity check."""

    name: str
    region: str
    auto_scaling_groups: tuple = ()

    def instance_ids(self):
        """All instance ids across the cluster's ASGs, in order, duplicates kept."""
        ids = []
        for asg in self.auto_scaling_groups:
            ids.extend(asg.instances)
        return ids

    @classmethod
    def from_dict(cls, data, default_region=None):
        """Build a cluster from a plain mapping (e.g. a Lambda event)."""
        region = data.get("region") or default_region
        if not region:
            raise ValueError("Cluster region is not set")

        asgs = tuple(
            AutoScalingGroup(
                name=g.get("name", ""),
                instances=tuple(g.get("instances", [])),
                suspended_processes=tuple(g.get("suspendedProcesses", [])),
            )
            for g in data.get("autoScalingGroups", [])
        )
        return cls(name=data.get("name", ""), region=region, auto_scaling_groups=asgs)


@dataclass(frozen=True)
class Conformity:
    """Outcome of one rule check: the rule id and the instances that failed it."""

    rule_id: str
    failed_components: tuple = ()

    def to_dict(self):
        return {"ruleId": self.rule_id, "failedComponents": list(self.failed_components)}


@dataclass(frozen=True)
class RuleConfig:
    """Immutable configuration of an InstanceHasTags rule.

    ``session`` is the boto3 session supplying credentials for the EC2 calls.
    Use build_rule_config() rather than constructing this directly.
    """

    required_tags: frozenset
    session: object = field(default=None, compare=False)


def _normalize_tags(required_tags):
    if len(required_tags) == 1 and isinstance(required_tags[0], (list, tuple, set, frozenset)):
        required_tags = tuple(required_tags[0])
    elif len(required_tags) == 1 and required_tags[0] is None:
        raise ValueError("required_tags must not be None")

    normalized = set()
    for tag in required_tags:
        if tag is None:
            raise ValueError("required tag names must not be None")
        if not isinstance(tag, str):
            raise ValueError(f"required tag names must be strings, got {tag!r}")
        tag = tag.strip()
        if not tag:
            raise ValueError("required tag names must not be blank")
        normalized.add(tag)

    if not normalized:
        raise ValueError("at least one required tag must be given")
    return frozenset(normalized)


def build_rule_config(*required_tags, session=None):
    """Validate the required tags and build a RuleConfig.

    Tags may be passed variadically or as a single list/tuple/set. Names are
    trimmed and deduplicated. If no session is given, the default boto3
    credential chain (environment, shared config, instance role) is used.
    Raises ValueError on None or blank tag names.
    """
    tags = _normalize_tags(required_tags)
    if session is None:
        session = boto3.Session()
    logger.debug(f"Built rule config with required tags {sorted(tags)}")
    return RuleConfig(required_tags=tags, session=session)
