"""
MockBuilders Request Handlers

Handler objects bind a route (method + URL pattern, or GraphQL endpoint +
operation) to a resolution pipeline. They are created by the handler
factories and run by the mock runtime, which tries them in order and stops
at the first match.

Handlers are immutable after construction; running the same handler twice
against the same request gives the same result.
"""

import re
from typing import Any, Callable, Optional

from fastapi import Request

from ..common.url_utils import URLPattern
from .debug import DebugLogger, NullDebugLogger
from .matcher import MatcherSet, as_matcher
from .operation import OperationNameSource, operation_name_to_string, parse_graphql_request, resolve_name
from .options import HandlerOptions
from .pipeline import MatchResult, RequestContext, no_match, resolve_graphql, resolve_rest

HTTP_METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS', 'HEAD')
GRAPHQL_KINDS = ('query', 'mutation')


class RequestHandler:
    """Base class for handlers consumed by the mock runtime."""

    def __init__(self, options: Optional[HandlerOptions] = None, debug_log: Optional[DebugLogger] = None):
        self.options = options or HandlerOptions()
        self.debug_log = debug_log or NullDebugLogger()

    @property
    def once(self) -> bool:
        return bool(self.options.once)

    @property
    def info(self) -> str:
        raise NotImplementedError

    async def run(self, request: Request) -> MatchResult:
        """
        Run this handler against a request.

        Returns:
            MatchResult; ``matched`` is False when the route does not apply
            or any matcher fails
        """
        result = await self._run(request)
        result.handler = self
        return result

    async def _run(self, request: Request) -> MatchResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.info}>"


class RestHandler(RequestHandler):
    """Handler for one HTTP method and URL pattern."""

    def __init__(
        self,
        method: str,
        url: str,
        matchers: MatcherSet,
        producer: Callable[[RequestContext], Any],
        options: Optional[HandlerOptions] = None,
        debug_log: Optional[DebugLogger] = None
    ):
        super().__init__(options, debug_log)
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        self.method = method
        self.url = url
        self.pattern = URLPattern(url)
        self.matchers = matchers
        self.producer = producer

    @property
    def info(self) -> str:
        return f"{self.method} {self.url}"

    async def _run(self, request: Request) -> MatchResult:
        if request.method.upper() != self.method:
            return no_match("route")

        params = self.pattern.match(str(request.url))
        if params is None:
            return no_match("route")

        context = RequestContext(request=request, params=params, cookies=dict(request.cookies))
        return await resolve_rest(
            request,
            method=self.method,
            url=self.url,
            matchers=self.matchers,
            producer=self.producer,
            context=context,
            debug_log=self.debug_log,
            on_called=self.options.on_called
        )


class GraphQLHandler(RequestHandler):
    """
    Handler for GraphQL operations sent to one endpoint.

    ``kind`` is "query" or "mutation", or None to accept any operation.
    ``operation_name`` may be a bare name, operation text, a compiled
    regular expression or a parsed document; None accepts any name.
    Names from strings and documents are resolved when the handler is
    created, so a document without a matching named operation fails fast.
    """

    def __init__(
        self,
        kind: Optional[str],
        url: str,
        operation_name: Optional[OperationNameSource],
        expected_variables: Any,
        result: Any,
        options: Optional[HandlerOptions] = None,
        debug_log: Optional[DebugLogger] = None
    ):
        super().__init__(options, debug_log)
        if kind is not None and kind not in GRAPHQL_KINDS:
            raise ValueError(f"Unsupported GraphQL operation kind: {kind}")

        self.kind = kind
        self.url = url
        self.pattern = URLPattern(url)
        self.operation_name = operation_name
        self.variables = as_matcher(expected_variables)
        self.headers = as_matcher(self.options.headers)
        self.result = result

        self._expected_name: Optional[str] = None
        if operation_name is not None and not isinstance(operation_name, re.Pattern):
            self._expected_name = resolve_name(kind, operation_name)

        if operation_name is None:
            self.display_name = '(anonymous)'
        else:
            self.display_name = operation_name_to_string(operation_name, kind)

    @property
    def info(self) -> str:
        return f"{self.kind or 'operation'} {self.display_name} ({self.url})"

    def _name_matches(self, name: Optional[str]) -> bool:
        if self.operation_name is None:
            return True
        if name is None:
            return False
        if isinstance(self.operation_name, re.Pattern):
            return self.operation_name.search(name) is not None
        return name == self._expected_name

    async def _run(self, request: Request) -> MatchResult:
        if self.pattern.match(str(request.url)) is None:
            return no_match("route")

        operation = await parse_graphql_request(request)
        if operation is None:
            return no_match("route")

        if self.kind is not None and operation.kind != self.kind:
            return no_match("operation")

        if not self._name_matches(operation.name):
            return no_match("operation")

        return await resolve_graphql(
            request,
            operation,
            display_name=self.display_name,
            headers=self.headers,
            variables=self.variables,
            result=self.result,
            debug_log=self.debug_log,
            on_called=self.options.on_called
        )
