"""Shared fixtures for MockBuilders tests."""

import json
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import pytest
from fastapi import Request


def build_request(
    url: str,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    body: bytes = b"",
    json_body: Any = None
) -> Request:
    """
    Build a Starlette Request as an ASGI server would deliver it.

    The Host header carries the URL's host, so ``request.url`` equals ``url``.
    """
    headers = dict(headers or {})
    if json_body is not None:
        body = json.dumps(json_body).encode()
        if not any(k.lower() == 'content-type' for k in headers):
            headers['Content-Type'] = 'application/json'

    parsed = urlsplit(url)
    default_port = 443 if parsed.scheme == 'https' else 80
    raw_headers = [(b'host', parsed.netloc.encode('latin-1'))]
    raw_headers += [(k.lower().encode('latin-1'), v.encode('latin-1')) for k, v in headers.items()]

    scope = {
        'type': 'http',
        'http_version': '1.1',
        'method': method.upper(),
        'scheme': parsed.scheme,
        'server': (parsed.hostname, parsed.port or default_port),
        'client': ('testclient', 50000),
        'root_path': '',
        'path': parsed.path or '/',
        'raw_path': (parsed.path or '/').encode(),
        'query_string': parsed.query.encode(),
        'headers': raw_headers,
    }

    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {'type': 'http.disconnect'}
        sent = True
        return {'type': 'http.request', 'body': body, 'more_body': False}

    return Request(scope, receive)


@pytest.fixture
def make_request():
    """Factory fixture for Starlette requests."""
    return build_request
