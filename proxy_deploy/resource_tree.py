"""
Reconcile an API Gateway resource path.

API Gateway refuses to create a resource whose parent does not exist yet, so
the path is walked from the root down, reusing resources that are already
there and creating the missing ones in order.
"""

import logging
from typing import Any, Dict, List

from proxy_deploy.aws_client import AWSClient
from proxy_deploy.errors import ResourceTreeError

logger = logging.getLogger(__name__)

ROOT_PATH = '/'


def split_path(path: str) -> List[str]:
    """Split ``/a/{b}/c`` into ``['a', '{b}', 'c']``."""
    if not path.startswith(ROOT_PATH):
        raise ValueError(f"Resource path must start with '/': {path!r}")
    return [part for part in path.split('/')[1:] if part]


def ensure_path(client: AWSClient, api_id: str, path: str) -> str:
    """
    Make sure every segment of ``path`` exists as a resource of ``api_id``.

    The existing resources are listed once and treated as a snapshot for the
    whole walk.

    Returns:
        str: The resource id of the full path.
    """
    parts = split_path(path)

    existing: Dict[str, Dict[str, Any]] = {
        resource['path']: resource for resource in client.list_resources(api_id)
    }

    for i, part in enumerate(parts):
        sub_path = '/' + '/'.join(parts[:i + 1])
        parent_path = '/' + '/'.join(parts[:i])

        parent = existing.get(parent_path)
        if not (parent and parent.get('id')):
            raise ResourceTreeError(
                f"Parent resource {parent_path} must be created before {sub_path}")

        if sub_path in existing:
            logger.info(f"Resource {sub_path} already exists ({existing[sub_path]['id']})")
            continue

        created = client.create_resource(api_id, parent['id'], part)
        existing[sub_path] = created
        logger.info(f"✅ Created resource {sub_path} ({created['id']})")

    target = existing.get('/' + '/'.join(parts))
    if not target:
        raise ResourceTreeError(f"Root resource missing from API {api_id}")
    return target['id']
