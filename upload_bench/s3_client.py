"""boto3 client construction for the benchmark endpoint.

The client signs with SigV4 (presigned URLs require it) and never retries:
a retried request would be timed as one slow sample, so failures surface
immediately instead. Path-style addressing is the default for local MinIO.
"""

import boto3
from botocore.client import Config

from upload_bench.models import StorageConfig

# One attempt per call, no botocore retries
RETRY_POLICY = {"total_max_attempts": 1, "mode": "standard"}


def build_s3_client(config: StorageConfig):
    """Build the S3 client used for control-plane calls and presigning.

    Args:
        config: Resolved storage configuration.

    Returns:
        A boto3 S3 client.
    """
    boto_config = Config(
        signature_version="s3v4",
        s3={"addressing_style": config.addressing_style},
        retries=RETRY_POLICY,
    )

    return boto3.client(
        "s3",
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        region_name=config.region_name,
        config=boto_config,
    )
