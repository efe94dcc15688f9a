"""
MockBuilders Mock Module

Builders for mock REST and GraphQL handlers and the runtime that serves them.

This module provides:
- Matchers (exact values or predicates) for headers, search params, body
  and GraphQL variables
- REST and GraphQL handler factories
- Resolution pipeline with call tracking and debug diffs
- FastAPI-based mock server
"""

from .matcher import Exact, Predicate, Matcher, MatcherSet, as_matcher
from .body import extract_body_content
from .operation import (
    OperationDescriptor,
    OperationNameError,
    GraphQLRequestError,
    resolve_name,
    operation_name_to_string,
    parse_graphql_request
)
from .debug import describe_mismatch, ConsoleDebugLogger, NullDebugLogger
from .options import Options, HandlerOptions
from .pipeline import MatchResult, RequestContext, json_response
from .handlers import RequestHandler, RestHandler, GraphQLHandler
from .rest import RestHandlersFactory, create_rest_handlers_factory
from .gql import GraphQLHandlersFactory, create_graphql_handlers_factory
from .server import MockServer, MockConfig, MockMetrics, create_mock_server

__all__ = [
    # Matchers
    'Exact',
    'Predicate',
    'Matcher',
    'MatcherSet',
    'as_matcher',

    # Body extraction
    'extract_body_content',

    # GraphQL operations
    'OperationDescriptor',
    'OperationNameError',
    'GraphQLRequestError',
    'resolve_name',
    'operation_name_to_string',
    'parse_graphql_request',

    # Debug output
    'describe_mismatch',
    'ConsoleDebugLogger',
    'NullDebugLogger',

    # Options
    'Options',
    'HandlerOptions',

    # Pipeline and handlers
    'MatchResult',
    'RequestContext',
    'json_response',
    'RequestHandler',
    'RestHandler',
    'GraphQLHandler',

    # Factories
    'RestHandlersFactory',
    'create_rest_handlers_factory',
    'GraphQLHandlersFactory',
    'create_graphql_handlers_factory',

    # Server
    'MockServer',
    'MockConfig',
    'MockMetrics',
    'create_mock_server',
]
