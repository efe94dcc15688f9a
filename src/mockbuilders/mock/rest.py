"""
MockBuilders REST Handlers

Factory for REST handlers that only respond when the request headers,
search params and body match what the test declared.

Example:
    rest = create_rest_handlers_factory('https://api.example.com', debug=True)

    handler = rest.post(
        '/users',
        {'headers': {'Authorization': 'Bearer token'}, 'body': {'name': 'Jane'}},
        lambda ctx: json_response({'id': 1}, status=201),
        HandlerOptions(on_called=spy)
    )
    server = MockServer([handler])
"""

from typing import Any, Callable, Dict, Optional, Union

from ..common.url_utils import create_full_url
from .debug import create_debug_logger
from .handlers import RestHandler
from .matcher import MatcherSet
from .options import HandlerOptions, Options
from .pipeline import RequestContext

Matchers = Union[MatcherSet, Dict[str, Any], None]
ResponseProducer = Callable[[RequestContext], Any]


class RestHandlersFactory:
    """Creates REST handlers rooted at ``config.url``."""

    def __init__(self, options: Options):
        self.config = options
        self.debug_log = create_debug_logger(options.url, options.debug)

    def _handler(
        self,
        method: str,
        path: str,
        matchers: Matchers,
        response: ResponseProducer,
        options: Optional[HandlerOptions]
    ) -> RestHandler:
        return RestHandler(
            method=method,
            url=create_full_url(self.config.url, path),
            matchers=MatcherSet.from_dict(matchers),
            producer=response,
            options=self.config.handler_options(options),
            debug_log=self.debug_log
        )

    def get(self, path: str, matchers: Matchers, response: ResponseProducer,
            options: Optional[HandlerOptions] = None) -> RestHandler:
        return self._handler('GET', path, matchers, response, options)

    def post(self, path: str, matchers: Matchers, response: ResponseProducer,
             options: Optional[HandlerOptions] = None) -> RestHandler:
        return self._handler('POST', path, matchers, response, options)

    def put(self, path: str, matchers: Matchers, response: ResponseProducer,
            options: Optional[HandlerOptions] = None) -> RestHandler:
        return self._handler('PUT', path, matchers, response, options)

    def patch(self, path: str, matchers: Matchers, response: ResponseProducer,
              options: Optional[HandlerOptions] = None) -> RestHandler:
        return self._handler('PATCH', path, matchers, response, options)

    def delete(self, path: str, matchers: Matchers, response: ResponseProducer,
               options: Optional[HandlerOptions] = None) -> RestHandler:
        return self._handler('DELETE', path, matchers, response, options)

    def options(self, path: str, matchers: Matchers, response: ResponseProducer,
                options: Optional[HandlerOptions] = None) -> RestHandler:
        return self._handler('OPTIONS', path, matchers, response, options)

    def head(self, path: str, matchers: Matchers, response: ResponseProducer,
             options: Optional[HandlerOptions] = None) -> RestHandler:
        return self._handler('HEAD', path, matchers, response, options)


def create_rest_handlers_factory(
    url: str,
    debug: bool = False,
    default_request_handler_options: Optional[HandlerOptions] = None
) -> RestHandlersFactory:
    """
    Convenience function to create a REST handlers factory.

    Args:
        url: Base URL that handler paths are joined onto
        debug: Log why handlers did not match
        default_request_handler_options: Options applied to every handler

    Returns:
        RestHandlersFactory
    """
    return RestHandlersFactory(Options(
        url=url,
        debug=debug,
        default_request_handler_options=default_request_handler_options
    ))
