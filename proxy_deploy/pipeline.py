"""
End-to-end deployment of the markdown proxy.

Each step feeds identifiers to the next one, so they run strictly in order
and the first failure aborts the rest. Every step is idempotent: after a
failure the whole pipeline can simply be run again.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from proxy_deploy.aws_client import AWSClient
from proxy_deploy.config import DeployConfig
from proxy_deploy.deployment import invoke_url, publish_stage
from proxy_deploy.function_publisher import publish_function
from proxy_deploy.method_wiring import (HTTP_METHOD, REQUEST_TEMPLATE,
                                        lambda_integration_uri, wire_get)
from proxy_deploy.permissions import grant_invoke, method_source_arn
from proxy_deploy.resource_tree import ensure_path
from proxy_deploy.rest_api import get_or_create_rest_api

logger = logging.getLogger(__name__)


@dataclass
class DeployResult:
    function_arn: str
    api_id: str
    resource_id: str
    source_arn: str
    deployment_id: str
    url: str


class MarkdownProxyDeployer:
    """Deploys the Lambda function and the API Gateway in front of it."""

    def __init__(self, config: DeployConfig, client: Optional[AWSClient] = None):
        self.client = client or AWSClient(region=config.region)
        if self.client.region != config.region:
            raise ValueError(f"Client region {self.client.region} does not match "
                             f"configured region {config.region}")
        if not config.account_id:
            config = config.with_account(self.client.get_account_id())
        elif not config.lambda_role:
            config = config.with_account(config.account_id)
        self.config = config

    def deploy(self) -> DeployResult:
        config = self.config
        logger.info("🚀 Starting deployment...")
        logger.info(f"Region: {config.region}")
        logger.info(f"Stage: {config.stage}")

        function_arn = publish_function(
            self.client,
            config.lambda_name,
            config.lambda_role,
            config.read_zip(),
            runtime=config.runtime,
            handler=config.handler,
        )
        logger.info(f"Published lambda function {config.lambda_name}")

        api_id = get_or_create_rest_api(self.client, config.api_name)['id']

        resource_id = ensure_path(self.client, api_id, config.resource_path)

        wire_get(self.client, api_id, resource_id,
                 lambda_integration_uri(config.region, function_arn),
                 REQUEST_TEMPLATE)

        source_arn = method_source_arn(config.region, config.account_id, api_id,
                                       HTTP_METHOD, config.resource_path)
        logger.info(f"Granting invoke permission to {source_arn}")
        grant_invoke(function_arn, source_arn, client=self.client)

        deployment_id = publish_stage(self.client, api_id, config.stage)

        url = invoke_url(api_id, config.region, config.stage, config.resource_path)
        logger.info("🎉 Deployment completed successfully!")
        logger.info(f"API URL: {url}")

        return DeployResult(
            function_arn=function_arn,
            api_id=api_id,
            resource_id=resource_id,
            source_arn=source_arn,
            deployment_id=deployment_id,
            url=url,
        )
