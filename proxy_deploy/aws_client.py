"""
Thin wrapper over the boto3 Lambda, API Gateway and STS clients.

Every call goes through ``_call`` so that botocore failures surface as a
``RemoteError`` tagged with its kind, and callers branch on
``error.kind`` instead of digging through ``error.response``.
"""

from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from proxy_deploy.errors import RemoteError

# No automatic retries: a failed call aborts the deployment.
CLIENT_CONFIG = Config(retries={'total_max_attempts': 1, 'mode': 'standard'})
PAGE_SIZE = 500


class AWSClient:
    """Remote operations used by the deployment reconciler."""

    def __init__(self, region: str, lambda_client=None, apigateway_client=None,
                 sts_client=None):
        self.region = region
        self.lambda_client = lambda_client or boto3.client(
            'lambda', region_name=region, config=CLIENT_CONFIG)
        self.apigateway_client = apigateway_client or boto3.client(
            'apigateway', region_name=region, config=CLIENT_CONFIG)
        self._sts_client = sts_client

    def _call(self, operation: str, fn: Callable[..., Dict[str, Any]],
              **kwargs) -> Dict[str, Any]:
        try:
            return fn(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError.from_botocore(e, operation) from e

    def _paginate(self, operation: str, fn: Callable[..., Dict[str, Any]],
                  **kwargs) -> List[Dict[str, Any]]:
        items = []
        position = None
        while True:
            if position:
                kwargs['position'] = position
            page = self._call(operation, fn, limit=PAGE_SIZE, **kwargs)
            items.extend(page.get('items', []))
            position = page.get('position')
            if not position:
                return items

    # Lambda

    def update_function_code(self, function_name: str, zip_bytes: bytes) -> Dict[str, Any]:
        return self._call('UpdateFunctionCode', self.lambda_client.update_function_code,
                          FunctionName=function_name, ZipFile=zip_bytes)

    def create_function(self, function_name: str, role: str, runtime: str,
                        handler: str, zip_bytes: bytes) -> Dict[str, Any]:
        return self._call('CreateFunction', self.lambda_client.create_function,
                          FunctionName=function_name,
                          Role=role,
                          Runtime=runtime,
                          Handler=handler,
                          Code={'ZipFile': zip_bytes})

    def get_policy(self, function_name: str) -> str:
        response = self._call('GetPolicy', self.lambda_client.get_policy,
                              FunctionName=function_name)
        return response['Policy']

    def add_permission(self, function_name: str, statement_id: str, action: str,
                       principal: str, source_arn: str) -> Dict[str, Any]:
        return self._call('AddPermission', self.lambda_client.add_permission,
                          FunctionName=function_name,
                          StatementId=statement_id,
                          Action=action,
                          Principal=principal,
                          SourceArn=source_arn)

    # API Gateway

    def list_rest_apis(self) -> List[Dict[str, Any]]:
        return self._paginate('GetRestApis', self.apigateway_client.get_rest_apis)

    def create_rest_api(self, name: str) -> Dict[str, Any]:
        return self._call('CreateRestApi', self.apigateway_client.create_rest_api,
                          name=name)

    def list_resources(self, rest_api_id: str) -> List[Dict[str, Any]]:
        return self._paginate('GetResources', self.apigateway_client.get_resources,
                              restApiId=rest_api_id)

    def create_resource(self, rest_api_id: str, parent_id: str,
                        path_part: str) -> Dict[str, Any]:
        return self._call('CreateResource', self.apigateway_client.create_resource,
                          restApiId=rest_api_id,
                          parentId=parent_id,
                          pathPart=path_part)

    def delete_method(self, rest_api_id: str, resource_id: str,
                      http_method: str) -> Dict[str, Any]:
        return self._call('DeleteMethod', self.apigateway_client.delete_method,
                          restApiId=rest_api_id,
                          resourceId=resource_id,
                          httpMethod=http_method)

    def put_method(self, rest_api_id: str, resource_id: str, http_method: str,
                   request_parameters: Dict[str, bool]) -> Dict[str, Any]:
        return self._call('PutMethod', self.apigateway_client.put_method,
                          restApiId=rest_api_id,
                          resourceId=resource_id,
                          httpMethod=http_method,
                          authorizationType='NONE',
                          apiKeyRequired=False,
                          requestParameters=request_parameters)

    def put_method_response(self, rest_api_id: str, resource_id: str,
                            http_method: str, status_code: str,
                            response_parameters: Dict[str, bool]) -> Dict[str, Any]:
        return self._call('PutMethodResponse', self.apigateway_client.put_method_response,
                          restApiId=rest_api_id,
                          resourceId=resource_id,
                          httpMethod=http_method,
                          statusCode=status_code,
                          responseModels={},
                          responseParameters=response_parameters)

    def put_integration(self, rest_api_id: str, resource_id: str, http_method: str,
                        integration_type: str, integration_http_method: str,
                        uri: str, request_templates: Dict[str, str]) -> Dict[str, Any]:
        return self._call('PutIntegration', self.apigateway_client.put_integration,
                          restApiId=rest_api_id,
                          resourceId=resource_id,
                          httpMethod=http_method,
                          type=integration_type,
                          integrationHttpMethod=integration_http_method,
                          uri=uri,
                          requestParameters={},
                          requestTemplates=request_templates)

    def put_integration_response(self, rest_api_id: str, resource_id: str,
                                 http_method: str, status_code: str,
                                 response_templates: Dict[str, str],
                                 response_parameters: Dict[str, str]) -> Dict[str, Any]:
        return self._call('PutIntegrationResponse',
                          self.apigateway_client.put_integration_response,
                          restApiId=rest_api_id,
                          resourceId=resource_id,
                          httpMethod=http_method,
                          statusCode=status_code,
                          responseTemplates=response_templates,
                          responseParameters=response_parameters)

    def create_deployment(self, rest_api_id: str, stage_name: str,
                          description: Optional[str] = None) -> Dict[str, Any]:
        kwargs = {'restApiId': rest_api_id, 'stageName': stage_name}
        if description:
            kwargs['description'] = description
        return self._call('CreateDeployment', self.apigateway_client.create_deployment,
                          **kwargs)

    # STS

    def get_account_id(self) -> str:
        """Get the AWS account ID of the current credentials."""
        if self._sts_client is None:
            self._sts_client = boto3.client('sts', region_name=self.region,
                                            config=CLIENT_CONFIG)
        identity = self._call('GetCallerIdentity', self._sts_client.get_caller_identity)
        return identity['Account']
