"""
MockBuilders Resolution Pipeline

Decides, for one incoming request and one handler registration, whether the
handler matches and, if so, produces its response.

Checks run in a fixed order and stop at the first failing dimension:

1. headers (contains-mode, case-insensitive)
2. search params (REST only, equal-mode)
3. body (REST) or variables (GraphQL), equal-mode
4. on_called callback, then the response producer

Only the first failing dimension is reported to the debug logger. A failed
check is a NoMatch result, never an exception, so the runtime can move on
to the next handler.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from ..common.url_utils import search_params_to_dict
from .body import extract_body_content
from .debug import DebugLogger, describe_mismatch
from .matcher import Matcher, MatcherSet, match_headers, passes_matcher_equal
from .operation import OperationDescriptor


@dataclass
class MatchResult:
    """Outcome of running one handler against one request."""

    matched: bool
    response: Optional[Response] = None
    reason: str = ""
    handler: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'matched': self.matched,
            'reason': self.reason,
            'status': self.response.status_code if self.response is not None else None,
            'handler': self.handler.info if self.handler is not None else None
        }


def no_match(reason: str) -> MatchResult:
    return MatchResult(matched=False, reason=reason)


@dataclass(frozen=True)
class RequestContext:
    """What a REST response producer receives."""

    request: Request
    params: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)


def json_response(body: Any, status: int = 200, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    """JSON response with a status code (default 200)."""
    return JSONResponse(content=body, status_code=status, headers=dict(headers) if headers else None)


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def request_headers(request: Request) -> Dict[str, str]:
    """Request headers as a dict; repeated headers are joined with ', '."""
    headers: Dict[str, str] = {}
    for key, value in request.headers.items():
        if key in headers:
            headers[key] = f"{headers[key]}, {value}"
        else:
            headers[key] = value
    return headers


async def _respond(
    on_called: Optional[Callable[[], Any]],
    produce: Callable[[], Any]
) -> MatchResult:
    if on_called is not None:
        await maybe_await(on_called())

    result = await maybe_await(produce())
    if result is None:
        return no_match("passthrough")
    if not isinstance(result, Response):
        result = json_response(result)
    return MatchResult(matched=True, response=result)


async def resolve_rest(
    request: Request,
    *,
    method: str,
    url: str,
    matchers: MatcherSet,
    producer: Callable[[RequestContext], Any],
    context: RequestContext,
    debug_log: DebugLogger,
    on_called: Optional[Callable[[], Any]] = None
) -> MatchResult:
    """
    Run the REST pipeline for one handler.

    Args:
        request: Incoming request
        method: Handler method, for debug messages
        url: Handler URL, for debug messages
        matchers: Handler matchers
        producer: Response producer, sync or async, called with ``context``
        context: Request context passed to the producer
        debug_log: Debug logger strategy
        on_called: Call-tracking callback, sync or async

    Returns:
        MatchResult
    """
    actual_headers = request_headers(request)
    if matchers.headers is not None and not match_headers(matchers.headers, actual_headers):
        debug_log(describe_mismatch("headers", method, url, matchers.headers, actual_headers))
        return no_match("headers")

    actual_search_params = search_params_to_dict(request.query_params)
    if not passes_matcher_equal(matchers.search_params, actual_search_params):
        debug_log(describe_mismatch("searchParams", method, url, matchers.search_params, actual_search_params))
        return no_match("searchParams")

    if matchers.body is not None:
        # Starlette caches the bytes; every later json()/form() re-reads them
        await request.body()
        actual_body = await extract_body_content(request)
        if not passes_matcher_equal(matchers.body, actual_body):
            debug_log(describe_mismatch("body", method, url, matchers.body, actual_body))
            return no_match("body")

    return await _respond(on_called, lambda: producer(context))


async def resolve_graphql(
    request: Request,
    operation: OperationDescriptor,
    *,
    display_name: str,
    headers: Optional[Matcher],
    variables: Optional[Matcher],
    result: Any,
    debug_log: DebugLogger,
    on_called: Optional[Callable[[], Any]] = None
) -> MatchResult:
    """
    Run the GraphQL pipeline for one handler.

    ``result`` is either a static response payload or a callable receiving
    the request variables and returning the payload.
    """
    actual_headers = request_headers(request)
    if headers is not None and not match_headers(headers, actual_headers):
        debug_log(describe_mismatch("headers", operation.kind, display_name, headers, actual_headers))
        return no_match("headers")

    if not passes_matcher_equal(variables, operation.variables):
        debug_log(describe_mismatch("variables", operation.kind, display_name, variables, operation.variables))
        return no_match("variables")

    async def produce():
        payload = result(operation.variables) if callable(result) else result
        return json_response(await maybe_await(payload))

    return await _respond(on_called, produce)
