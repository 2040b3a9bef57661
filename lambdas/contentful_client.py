"""
Minimal client for the Contentful Content Delivery API.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger("ContentfulClient")
logger.setLevel(logging.INFO)

CDN_URL = os.environ.get('CONTENTFUL_CDN_URL', 'https://cdn.contentful.com')
TEXT_FIELD_TYPE = 'Text'


class UpstreamError(Exception):
    """The Delivery API answered with an error object."""

    kind = 'UPSTREAM_ERROR'


def normalize_error(error: Dict[str, Any]) -> UpstreamError:
    """Turn an error object from the Delivery API into an exception Lambda can report."""
    sys_info = error.get('sys') or {}
    return UpstreamError(error.get('message') or sys_info.get('id') or 'Unknown error')


class ContentfulClient:
    """Authenticated GET requests against one space."""

    def __init__(self, space_id: str, access_token: str, base_url: str = CDN_URL,
                 session: Optional[requests.Session] = None):
        self.space_id = space_id
        self.access_token = access_token
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()

    def get(self, resource_path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/spaces/{self.space_id}/{resource_path}"
        headers = {'Authorization': f"Bearer {self.access_token}"}
        response = self.session.get(url, headers=headers, params=params or None)
        data = response.json()

        sys_info = data.get('sys') if isinstance(data, dict) else None
        if isinstance(sys_info, dict) and sys_info.get('type') == 'Error':
            logger.warning(f"Delivery API error on {resource_path}: {data.get('message')}")
            raise normalize_error(data)
        return data

    def text_fields(self) -> Dict[str, List[str]]:
        """Map each content type id to the ids of its Text fields."""
        content_types = self.get('content_types')
        return {
            content_type['sys']['id']: [
                field['id'] for field in content_type.get('fields', [])
                if field.get('type') == TEXT_FIELD_TYPE
            ]
            for content_type in content_types.get('items', [])
        }

    def entries(self, query: Optional[Dict[str, Any]] = None) -> Any:
        return self.get('entries', query)
