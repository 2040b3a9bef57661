"""
Publish the API configuration to a stage.
"""

import logging

from proxy_deploy.aws_client import AWSClient

logger = logging.getLogger(__name__)


def publish_stage(client: AWSClient, api_id: str, stage_name: str) -> str:
    """Create a new deployment of ``api_id`` on ``stage_name`` and return its id."""
    logger.info(f"Deploying API to {stage_name} stage...")
    response = client.create_deployment(api_id, stage_name)
    logger.info(f"✅ Deployed to {stage_name} stage")
    logger.info(f"Deployment ID: {response['id']}")
    return response['id']


def invoke_url(api_id: str, region: str, stage_name: str, resource_path: str) -> str:
    return f"https://{api_id}.execute-api.{region}.amazonaws.com/{stage_name}{resource_path}"
