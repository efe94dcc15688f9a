"""
MockBuilders

Declare mock HTTP and GraphQL responses for tests, together with which
requests they should answer.
"""

from .mock import (
    Exact,
    Predicate,
    MatcherSet,
    Options,
    HandlerOptions,
    OperationNameError,
    GraphQLRequestError,
    MatchResult,
    RequestContext,
    json_response,
    create_rest_handlers_factory,
    create_graphql_handlers_factory,
    MockServer,
    MockConfig,
    create_mock_server
)

__all__ = [
    'Exact',
    'Predicate',
    'MatcherSet',
    'Options',
    'HandlerOptions',
    'OperationNameError',
    'GraphQLRequestError',
    'MatchResult',
    'RequestContext',
    'json_response',
    'create_rest_handlers_factory',
    'create_graphql_handlers_factory',
    'MockServer',
    'MockConfig',
    'create_mock_server',
]

__version__ = '1.0.0'
