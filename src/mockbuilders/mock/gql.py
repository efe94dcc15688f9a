"""
MockBuilders GraphQL Handlers

Factory for GraphQL handlers that respond to one operation on one endpoint,
only when the request variables (and optionally headers) match.

Example:
    graphql = create_graphql_handlers_factory('https://api.example.com/graphql')

    handler = graphql.query(
        'viewerQuery',
        {'id': 'user-123'},
        {'data': {'viewer': {'name': 'Jane'}}}
    )
"""

from typing import Any, Callable, Dict, Optional, Union

from .debug import create_debug_logger
from .handlers import GraphQLHandler
from .operation import OperationNameSource
from .options import HandlerOptions, Options

# A static payload such as {"data": ...}, or a function of the variables
ResultProvider = Union[Dict[str, Any], None, Callable[[Dict[str, Any]], Any]]


class GraphQLHandlersFactory:
    """Creates GraphQL handlers bound to the ``config.url`` endpoint."""

    def __init__(self, options: Options):
        self.config = options
        self.debug_log = create_debug_logger(options.url, options.debug)

    def _handler(
        self,
        kind: Optional[str],
        operation_name: Optional[OperationNameSource],
        expected_variables: Any,
        result: ResultProvider,
        options: Optional[HandlerOptions]
    ) -> GraphQLHandler:
        return GraphQLHandler(
            kind=kind,
            url=self.config.url,
            operation_name=operation_name,
            expected_variables=expected_variables,
            result=result,
            options=self.config.handler_options(options),
            debug_log=self.debug_log
        )

    def query(
        self,
        operation_name: OperationNameSource,
        expected_variables: Any,
        result: ResultProvider,
        options: Optional[HandlerOptions] = None
    ) -> GraphQLHandler:
        """
        Handler for a query.

        Args:
            operation_name: Name, operation text, regex or parsed document
            expected_variables: Exact variables matcher (dict or predicate)
            result: Response payload, or a function of the variables
            options: Handler options

        Raises:
            OperationNameError: If a document has no named query
        """
        return self._handler('query', operation_name, expected_variables, result, options)

    def mutation(
        self,
        operation_name: OperationNameSource,
        expected_variables: Any,
        result: ResultProvider,
        options: Optional[HandlerOptions] = None
    ) -> GraphQLHandler:
        """Handler for a mutation. Same arguments as :meth:`query`."""
        return self._handler('mutation', operation_name, expected_variables, result, options)

    def operation(
        self,
        expected_variables: Any,
        result: ResultProvider,
        options: Optional[HandlerOptions] = None
    ) -> GraphQLHandler:
        """Handler for any operation sent to the endpoint, matched on variables only."""
        return self._handler(None, None, expected_variables, result, options)


def create_graphql_handlers_factory(
    url: str,
    debug: bool = False,
    default_request_handler_options: Optional[HandlerOptions] = None
) -> GraphQLHandlersFactory:
    """Convenience function to create a GraphQL handlers factory for ``url``."""
    return GraphQLHandlersFactory(Options(
        url=url,
        debug=debug,
        default_request_handler_options=default_request_handler_options
    ))
