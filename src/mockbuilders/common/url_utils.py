"""
MockBuilders URL Utilities

URL joining, URL pattern matching and query-string helpers.
"""

import re
from typing import Dict, Mapping, Optional
from urllib.parse import urlparse, urlunparse

# :name path parameters and * wildcards
_TOKEN_RE = re.compile(r'(:[A-Za-z_][A-Za-z0-9_]*|\*)')


def create_full_url(base_url: str, path: str) -> str:
    """
    Join a handler path onto a base URL.

    Trailing slashes of ``base_url`` and leading slashes of ``path`` are
    collapsed into a single separator. An empty path yields the base URL.

    Example:
        create_full_url('https://api.example.com/', '/users')
        # 'https://api.example.com/users'
    """
    if path == "":
        return base_url
    return base_url.rstrip('/') + '/' + path.lstrip('/')


def search_params_to_dict(query_params: Mapping[str, str]) -> Dict[str, str]:
    """
    Flatten query parameters into a plain dict.

    For multi-valued parameters the last value wins. Accepts anything with
    ``multi_items()`` (Starlette ``QueryParams``) or a plain mapping.
    """
    result: Dict[str, str] = {}
    items = query_params.multi_items() if hasattr(query_params, 'multi_items') else query_params.items()
    for key, value in items:
        result[key] = value
    return result


def _strip_trailing_slash(path: str) -> str:
    if len(path) > 1 and path.endswith('/'):
        return path.rstrip('/') or '/'
    return path


class URLPattern:
    """
    Matches request URLs against a handler URL pattern.

    Supported syntax:
    - ``:name`` captures one path segment as a path parameter
    - ``*`` matches anything (including slashes)

    Absolute patterns (``https://host/path``) compare scheme, host and path.
    Relative patterns (``/path``) compare the path only. Query strings and
    fragments of the request URL are ignored, as is a trailing slash.

    Example:
        pattern = URLPattern('https://api.example.com/users/:id')
        pattern.match('https://api.example.com/users/42?x=1')
        # {'id': '42'}
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        parsed = urlparse(pattern)
        self.absolute = bool(parsed.scheme and parsed.netloc)
        self._regex = self._compile(self._normalize(pattern))

    def _normalize(self, url: str) -> str:
        parsed = urlparse(url)
        path = _strip_trailing_slash(parsed.path or '/')
        if self.absolute:
            return urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), path, '', '', ''))
        return path

    @staticmethod
    def _compile(pattern: str) -> 're.Pattern[str]':
        parts = []
        for token in _TOKEN_RE.split(pattern):
            if not token:
                continue
            if token == '*':
                parts.append('.*')
            elif _TOKEN_RE.fullmatch(token):
                parts.append(f'(?P<{token[1:]}>[^/]+)')
            else:
                parts.append(re.escape(token))
        return re.compile('^' + ''.join(parts) + '$')

    def match(self, url: str) -> Optional[Dict[str, str]]:
        """
        Match a request URL.

        Returns:
            Dict of captured path parameters, or None if the URL does not match
        """
        result = self._regex.match(self._normalize(url))
        if result is None:
            return None
        return result.groupdict()

    def __repr__(self) -> str:
        return f"URLPattern({self.pattern!r})"
