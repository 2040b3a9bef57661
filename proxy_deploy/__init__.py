"""
Deployment reconciler for the Contentful markdown-to-HTML proxy.

Publishes the Lambda function, wires it behind an API Gateway REST API and
deploys the API to a stage.
"""

from proxy_deploy.errors import ErrorKind, RemoteError, ResourceTreeError

__all__ = ['ErrorKind', 'RemoteError', 'ResourceTreeError']
