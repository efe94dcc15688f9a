"""
MockBuilders Debug Output

Explains why a handler did not match, when debug mode is enabled on the
handler factory. The logger strategy is picked once per factory.
"""

import difflib
import json
import logging
from typing import Any, List

from .matcher import Exact, Predicate

logger = logging.getLogger("mockbuilders.debug")

FUNCTION_MATCHER_MESSAGE = "doesn't match function matcher"


def _pretty(value: Any) -> List[str]:
    try:
        text = json.dumps(value, indent=2, sort_keys=True, default=repr)
    except (TypeError, ValueError):
        text = repr(value)
    return text.splitlines()


def diff_values(expected: Any, actual: Any) -> str:
    """Unified diff of pretty-printed ``expected`` and ``actual``."""
    lines = difflib.unified_diff(
        _pretty(expected),
        _pretty(actual),
        fromfile='expected',
        tofile='actual',
        lineterm=''
    )
    return '\n'.join(lines)


def describe_mismatch(dimension: str, method: str, url: str, expected: Any, actual: Any) -> str:
    """
    Describe a failed match.

    Args:
        dimension: headers, searchParams, body or variables
        method: HTTP method, or the GraphQL operation kind
        url: Handler URL, or the GraphQL operation display name
        expected: Matcher (or raw expected value)
        actual: Actual value

    Returns:
        ``"<method> <url> <dimension> differ\\n<diff>"``
    """
    if isinstance(expected, Predicate) or callable(expected):
        difference = FUNCTION_MATCHER_MESSAGE
    else:
        difference = diff_values(expected.value if isinstance(expected, Exact) else expected, actual)
    return f"{method} {url} {dimension} differ\n{difference}"


class DebugLogger:
    """Debug message sink bound to a base URL."""

    def __call__(self, message: str) -> None:
        raise NotImplementedError


class NullDebugLogger(DebugLogger):
    """Discards every message."""

    def __call__(self, message: str) -> None:
        pass


class ConsoleDebugLogger(DebugLogger):
    """Logs messages at DEBUG level on the ``mockbuilders.debug`` logger."""

    def __init__(self, url: str):
        self.url = url

    def __call__(self, message: str) -> None:
        logger.debug(f"[mockbuilders] {{{self.url}}} - {message}")


def create_debug_logger(url: str, debug: bool) -> DebugLogger:
    return ConsoleDebugLogger(url) if debug else NullDebugLogger()
