"""
Render the Text fields of Delivery API entries from markdown to HTML.
"""

from typing import Any, Dict, Iterator, List

import markdown


def render(text: Any) -> str:
    return markdown.markdown(text or '')


def _entries(payload: Any) -> Iterator[Dict[str, Any]]:
    """Yield every entry of a Delivery API payload, linked ones included."""
    if isinstance(payload, list):
        candidates = list(payload)
    elif isinstance(payload, dict):
        if 'fields' in payload and 'items' not in payload:
            candidates = [payload]
        else:
            candidates = list(payload.get('items') or [])
            candidates.extend((payload.get('includes') or {}).get('Entry') or [])
    else:
        candidates = []

    for item in candidates:
        content_type = ((item.get('sys') or {}).get('contentType') or {}).get('sys') or {}
        if content_type.get('id'):
            yield item


def render_entry(entry: Dict[str, Any], text_fields: Dict[str, List[str]]) -> Dict[str, Any]:
    content_type_id = entry['sys']['contentType']['sys']['id']
    fields = entry.setdefault('fields', {})
    for field_id in text_fields.get(content_type_id, []):
        value = fields.get(field_id)
        if isinstance(value, dict):
            # locale=* responses key each value by locale
            fields[field_id] = {locale: render(text) for locale, text in value.items()}
        else:
            fields[field_id] = render(value)
    return entry


def render_text_fields(payload: Any, text_fields: Dict[str, List[str]]) -> Any:
    """Render in place every Text field of every entry in ``payload``."""
    for entry in _entries(payload):
        render_entry(entry, text_fields)
    return payload
