"""
MockBuilders Body Content Extraction

Decodes request (or response) bodies into mappings for matching.
"""

import inspect
from typing import Any, Dict, Optional


def is_json_content_type(content_type: Optional[str]) -> bool:
    """
    True for ``application/json`` and vendor JSON types such as
    ``application/x-amz-json-1.1`` or ``application/vnd.api+json``.
    """
    if not content_type:
        return False
    if content_type == 'application/json':
        return True
    if not content_type.startswith('application/'):
        return False
    return 'json' in content_type.split('application/', 1)[1]


def is_form_content_type(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    return (
        content_type.startswith('multipart/form-data')
        or content_type.startswith('application/x-www-form-urlencoded')
    )


async def _call(method) -> Any:
    result = method()
    if inspect.isawaitable(result):
        result = await result
    return result


async def extract_body_content(source: Any) -> Dict[str, Any]:
    """
    Decode a body according to its Content-Type.

    - JSON content types are decoded with ``source.json()``
    - multipart and url-encoded forms are decoded with ``source.form()`` and
      flattened into a dict (last value wins for repeated fields)
    - any other content type yields an empty dict

    An unsupported content type is not an error: a body matcher configured
    against such a body simply never matches.

    Args:
        source: Object exposing ``headers`` and ``json()`` / ``form()``
            methods, sync or async (e.g. a Starlette Request). It must be
            re-readable; Starlette caches the body after the first read.

    Returns:
        Decoded body

    Raises:
        json.JSONDecodeError: If the body claims JSON but is malformed
    """
    content_type = source.headers.get('content-type')

    if is_json_content_type(content_type):
        return await _call(source.json)

    if is_form_content_type(content_type):
        form = await _call(source.form)
        items = form.multi_items() if hasattr(form, 'multi_items') else form.items()
        data: Dict[str, Any] = {}
        for key, value in items:
            data[key] = value
        return data

    return {}
