"""
Grant API Gateway permission to invoke the Lambda function.
"""

import json
import logging
import re
import uuid
from typing import Any, Dict, Optional

from proxy_deploy.aws_client import AWSClient
from proxy_deploy.errors import RemoteError

logger = logging.getLogger(__name__)

INVOKE_ACTION = 'lambda:InvokeFunction'
APIGATEWAY_PRINCIPAL = 'apigateway.amazonaws.com'

_PATH_VARIABLE = re.compile(r'\{[^/}]+\}')


def method_source_arn(region: str, account_id: str, api_id: str,
                      http_method: str, resource_path: str) -> str:
    """
    Build the execute-api ARN for a method, any stage.

    Path variables are replaced with wildcards, so ``/{spaceId}/entries``
    becomes ``/*/entries``.
    """
    path = _PATH_VARIABLE.sub('*', resource_path)
    return ':'.join([
        'arn:aws:execute-api',
        region,
        account_id,
        f"{api_id}/*/{http_method.upper()}{path}",
    ])


def region_from_arn(arn: str) -> str:
    parts = arn.split(':')
    if len(parts) < 4 or not parts[3]:
        raise ValueError(f"Cannot read region from ARN: {arn!r}")
    return parts[3]


def grants_expected_permission(statement: Dict[str, Any], source_arn: str) -> bool:
    """Check whether a policy statement already lets API Gateway invoke from ``source_arn``."""
    condition = statement.get('Condition') or {}
    arn_like = condition.get('ArnLike') or {}
    principal = statement.get('Principal') or {}
    if not isinstance(principal, dict):
        return False
    return (
        arn_like.get('AWS:SourceArn') == source_arn and
        principal.get('Service') == APIGATEWAY_PRINCIPAL and
        statement.get('Action') == INVOKE_ACTION and
        statement.get('Effect') == 'Allow'
    )


def grant_invoke(function_name: str, source_arn: str,
                 client: Optional[AWSClient] = None) -> bool:
    """
    Allow API Gateway calls matching ``source_arn`` to invoke ``function_name``.

    Nothing is added when an equivalent statement is already in the function
    policy, so repeated deployments do not pile up duplicate grants.

    Returns:
        bool: True if a new statement was added.
    """
    region = region_from_arn(source_arn)
    if client is None:
        client = AWSClient(region=region)
    elif client.region != region:
        # The grant must be made in the region the API calls the function from
        raise ValueError(f"Client region {client.region} does not match {source_arn}")

    try:
        policy = json.loads(client.get_policy(function_name))
        statements = policy.get('Statement', [])
    except RemoteError as e:
        if not e.is_not_found:
            raise
        statements = []

    if any(grants_expected_permission(s, source_arn) for s in statements):
        logger.info(f"Permission already exists for {function_name} from {source_arn}")
        return False

    client.add_permission(function_name,
                          statement_id=uuid.uuid4().hex,
                          action=INVOKE_ACTION,
                          principal=APIGATEWAY_PRINCIPAL,
                          source_arn=source_arn)
    logger.info(f"✅ Granted invoke permission on {function_name} to {source_arn}")
    return True
