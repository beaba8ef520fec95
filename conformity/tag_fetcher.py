# conformity/tag_fetcher.py
import logging

from botocore.exceptions import BotoCoreError, ClientError

from conformity.events import (
    INSTANCE_IN_VPC,
    INSTANCE_NOT_RUNNING,
    ConformityEvent,
    log_event,
)
from utils.aws_helpers import get_ec2_client, tag_keys

logger = logging.getLogger(__name__)

RUNNING = "running"


def _describe_instances(ec2, instance_ids):
    """Yield every instance description for the given ids."""
    paginator = ec2.get_paginator("describe_instances")
    for page in paginator.paginate(InstanceIds=instance_ids):
        for reservation in page.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                yield instance


def get_instance_tags(region, instance_ids, session=None, on_event=None):
    """Get the tag keys of the eligible instances among instance_ids.

    Only running instances outside a VPC are returned. Instances in a VPC or
    in any other state are skipped and reported through on_event. AWS errors
    propagate to the caller.
    """
    result = {}
    if not instance_ids:
        return result

    emit = on_event or log_event
    unique_ids = list(dict.fromkeys(instance_ids))
    wanted = set(unique_ids)
    ec2 = get_ec2_client(region, session)

    logger.info(f"Fetching tags for {len(wanted)} instances in {region}")

    try:
        for instance in _describe_instances(ec2, unique_ids):
            iid = instance["InstanceId"]
            if iid not in wanted:
                logger.debug(f"Ignoring unrequested instance {iid}")
                continue

            vpc_id = instance.get("VpcId")
            if vpc_id:
                emit(ConformityEvent(INSTANCE_IN_VPC, iid, {"vpc_id": vpc_id}))
                continue

            state = instance.get("State", {}).get("Name")
            if state != RUNNING:
                emit(ConformityEvent(INSTANCE_NOT_RUNNING, iid, {"state": state}))
                continue

            result[iid] = tag_keys(instance.get("Tags"))
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error describing instances in {region}: {e}", exc_info=True)
        raise

    logger.info(f"Found {len(result)} eligible instances out of {len(wanted)}")
    return result


class Ec2TagFetcher:
    """Default fetch strategy: describe the instances through EC2."""

    def __init__(self, session=None, on_event=None):
        self.session = session
        self.on_event = on_event

    def __call__(self, region, instance_ids):
        return get_instance_tags(region, instance_ids, self.session, self.on_event)
