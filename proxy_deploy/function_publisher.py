"""
Create or update the Lambda function that serves the proxy.
"""

import logging

from proxy_deploy.aws_client import AWSClient
from proxy_deploy.errors import RemoteError

logger = logging.getLogger(__name__)


def publish_function(client: AWSClient, name: str, role: str, code: bytes,
                     runtime: str, handler: str) -> str:
    """
    Upload ``code`` to the function ``name``, creating the function if needed.

    Returns:
        str: The function ARN.
    """
    try:
        response = client.update_function_code(name, code)
        logger.info(f"Updated code of existing function {name} ({len(code)} bytes)")
        return response['FunctionArn']
    except RemoteError as e:
        if not e.is_not_found:
            raise

    logger.info(f"Function {name} does not exist, creating...")
    response = client.create_function(name, role, runtime, handler, code)
    logger.info(f"✅ Created function: {name}")
    return response['FunctionArn']
