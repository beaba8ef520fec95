# utils/aws_helpers.py
import boto3
import logging
import os
from botocore.config import Config

logger = logging.getLogger(__name__)

# Boto3 config with timeouts; retries stay at the botocore defaults
BOTO3_CONFIG = Config(
    connect_timeout=5,
    read_timeout=60,
)


def default_region():
    """Region from the environment, or None if unset."""
    return os.environ.get("AWS_REGION", os.environ.get("AWS_DEFAULT_REGION"))


def get_ec2_client(region, session=None):
    """Build an EC2 client for a region from a session (default credential chain if None)."""
    if session is None:
        session = boto3.Session()
    logger.debug(f"Creating EC2 client for region {region}")
    return session.client("ec2", region_name=region, config=BOTO3_CONFIG)


def tag_keys(tags):
    """Extract the set of keys from an AWS Tags list."""
    return {t["Key"] for t in tags or []}
