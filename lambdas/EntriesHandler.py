import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import parse_qsl

from contentful_client import ContentfulClient
from markdown_transform import render_text_fields
from text_field_cache import TextFieldCache

logger = logging.getLogger("EntriesHandler")
logger.setLevel(logging.INFO)

# Shared by every invocation served by this container
TEXT_FIELDS = TextFieldCache(ttl=30)


def parse_query(query: Optional[str]) -> Dict[str, Union[str, List[str]]]:
    """
    Parse the querystring API Gateway puts in the event.

    ``$input.params().querystring`` renders as ``{foo=1, bar=2}``, so the
    braces are stripped and ``", "`` is treated as ``&``. Repeated keys are
    collected into a list.
    """
    if not query:
        return {}
    inner = query[1:-1].replace(', ', '&')

    parsed: Dict[str, Union[str, List[str]]] = {}
    for key, value in parse_qsl(inner, keep_blank_values=True):
        if key not in parsed:
            parsed[key] = value
        elif isinstance(parsed[key], list):
            parsed[key].append(value)
        else:
            parsed[key] = [parsed[key], value]
    return parsed


def get_access_token(authorization: Optional[str], query: Dict[str, Any]) -> Optional[str]:
    if authorization:
        return authorization[len('Bearer '):] if authorization.startswith('Bearer ') else authorization
    token = query.get('access_token')
    if isinstance(token, list):
        token = token[0]
    return token


def handle(event: Dict[str, Any], cache: TextFieldCache = TEXT_FIELDS,
           client: Optional[ContentfulClient] = None) -> Any:
    """
    Fetch entries from the Delivery API and render their Text fields to HTML.

    The content types of a space are cached per (space, token) so only the
    entries request hits the Delivery API on most invocations.
    """
    space_id = event.get('spaceId')
    query = parse_query(event.get('query'))
    access_token = get_access_token(event.get('authorization'), query)

    if client is None:
        client = ContentfulClient(space_id, access_token)

    text_fields = cache.get_or_populate((space_id, access_token), client.text_fields)
    payload = client.entries(query)
    return render_text_fields(payload, text_fields)


def lambda_handler(event, context):
    """
    Handle GET /spaces/{spaceId}/entries.

    The event is built by the integration request template:
    {"spaceId": ..., "query": "{key=val, ...}", "authorization": "Bearer ..."}
    """
    try:
        return handle(event)
    except Exception as e:
        logger.error(f"Failed to render entries for space {event.get('spaceId')}: {e}")
        raise
