# lambda_handler.py
import logging
import os
from utils.logging_config import setup_logging

# Initialize logging first
logger = setup_logging()

from conformity.models import Cluster
from conformity.rule import InstanceHasTags
from utils.aws_helpers import default_region

# Default required tags (can be overridden via env var)
DEFAULT_REQUIRED_TAGS = ["owner", "env", "cost-center"]


def _get_required_tags():
    """Get required tags from environment or use defaults."""
    if "REQUIRED_TAGS" in os.environ:
        tags = [t.strip() for t in os.environ["REQUIRED_TAGS"].split(",") if t.strip()]
        logger.info(f"Using required tags from env: {tags}")
        return tags
    return DEFAULT_REQUIRED_TAGS


def handler(event, context):
    """Run the InstanceHasTag rule against the cluster described in the event."""
    logger.info(f"Event: {event}")

    cluster = Cluster.from_dict(event.get("cluster", event), default_region=default_region())
    rule = InstanceHasTags.from_tags(_get_required_tags())

    try:
        conformity = rule.check(cluster)
    except Exception as e:
        logger.error(f"Error checking cluster {cluster.name}: {e}", exc_info=True)
        raise

    result = conformity.to_dict()
    result.update({
        "reason": rule.get_nonconforming_reason(),
        "cluster": cluster.name,
        "region": cluster.region,
        "instances": len(cluster.instance_ids()),
        "status": "nonconforming" if conformity.failed_components else "conforming",
    })

    logger.info(f"Conformity check completed: {result}")
    return result
