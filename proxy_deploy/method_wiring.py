"""
Wire a GET method on a resource to the Lambda function.

The method is always replaced rather than patched: any GET already on the
resource is deleted first, then the method, its 200 response, the Lambda
integration and the integration response are put from scratch.
"""

import logging

from proxy_deploy.aws_client import AWSClient
from proxy_deploy.errors import RemoteError

logger = logging.getLogger(__name__)

HTTP_METHOD = 'GET'
STATUS_OK = '200'
LAMBDA_API_VERSION = '2015-03-31'
CORS_HEADER = 'method.response.header.Access-Control-Allow-Origin'

REQUEST_PARAMETERS = {
    'method.request.header.Authorization': False,
    'method.request.path.spaceId': False,
}

# Velocity template turning the incoming request into the handler's event.
REQUEST_TEMPLATE = """{
  "spaceId": "$input.params('spaceId')",
  "query": "$input.params().querystring",
  "authorization": "$input.params('Authorization')"
}"""


def lambda_integration_uri(region: str, function_arn: str) -> str:
    return (f"arn:aws:apigateway:{region}:lambda:path/{LAMBDA_API_VERSION}"
            f"/functions/{function_arn}/invocations")


def wire_get(client: AWSClient, api_id: str, resource_id: str,
             target_uri: str, request_template: str = REQUEST_TEMPLATE) -> None:
    """Replace the GET method of ``resource_id`` with a Lambda-backed one."""
    try:
        client.delete_method(api_id, resource_id, HTTP_METHOD)
        logger.info(f"Deleted previous {HTTP_METHOD} method on {resource_id}")
    except RemoteError as e:
        if not e.is_not_found:
            raise

    client.put_method(api_id, resource_id, HTTP_METHOD, REQUEST_PARAMETERS)
    logger.info(f"Created method {HTTP_METHOD} on {resource_id}")

    client.put_method_response(api_id, resource_id, HTTP_METHOD, STATUS_OK,
                               {CORS_HEADER: False})

    # Lambda invocations are always POSTs, whatever the public verb is
    client.put_integration(api_id, resource_id, HTTP_METHOD,
                           integration_type='AWS',
                           integration_http_method='POST',
                           uri=target_uri,
                           request_templates={'application/json': request_template})

    client.put_integration_response(api_id, resource_id, HTTP_METHOD, STATUS_OK,
                                    response_templates={'application/json': ''},
                                    response_parameters={CORS_HEADER: "'*'"})

    logger.info(f"✅ Wired {HTTP_METHOD} {resource_id} → {target_uri}")
