"""
Find the REST API by name, creating it on first deployment.
"""

import logging
from typing import Any, Dict

from proxy_deploy.aws_client import AWSClient

logger = logging.getLogger(__name__)


def get_or_create_rest_api(client: AWSClient, name: str) -> Dict[str, Any]:
    for api in client.list_rest_apis():
        if api.get('name') == name:
            logger.info(f"Found existing API Gateway: {api['id']}")
            return api

    logger.info(f"Creating new API Gateway {name}...")
    api = client.create_rest_api(name)
    logger.info(f"✅ Created API Gateway: {api['id']}")
    return api
