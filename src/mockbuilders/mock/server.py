"""
MockBuilders Mock Server

FastAPI-based runtime that delivers incoming requests to registered handlers.

Features:
- Handlers tried in registration order, first match wins
- Runtime overrides with use() and reset_handlers()
- Single-use handlers (HandlerOptions.once)
- Fallback response for unhandled requests
- Admin API for metrics and handler listing
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

import uvicorn
import yaml
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from .handlers import RequestHandler
from .pipeline import MatchResult

SUPPORTED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


@dataclass
class MockConfig:
    """Configuration for mock server behavior."""

    # Fallback behavior
    fallback_status: int = 404
    fallback_body: str = '{"error": "No matching handler found"}'

    # Server options
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "info"

    # Admin API
    admin_enabled: bool = True
    admin_prefix: str = "/__admin__"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MockConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        return cls(**known)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'MockConfig':
        """Load config from a YAML file (optionally nested under ``server:``)."""
        with open(yaml_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {yaml_path}")

        return cls.from_dict(data.get('server', data))


@dataclass
class MockMetrics:
    """Track mock server metrics."""

    total_requests: int = 0
    matched_requests: int = 0
    unmatched_requests: int = 0
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        uptime_seconds = (datetime.now() - datetime.fromisoformat(self.start_time)).total_seconds()
        return {
            'total_requests': self.total_requests,
            'matched_requests': self.matched_requests,
            'unmatched_requests': self.unmatched_requests,
            'match_rate': round((self.matched_requests / self.total_requests * 100) if self.total_requests > 0 else 0, 2),
            'uptime_seconds': round(uptime_seconds, 2),
            'start_time': self.start_time
        }


class MockServer:
    """
    FastAPI-based mock server running handlers built by the factories.

    Example:
        rest = create_rest_handlers_factory('http://127.0.0.1:8080')
        server = MockServer([
            rest.get('/users/:id', {}, lambda ctx: json_response({'id': ctx.params['id']}))
        ])
        server.start()

        # In tests
        client = TestClient(server.app, base_url='https://api.example.com')
    """

    def __init__(
        self,
        handlers: Optional[List[RequestHandler]] = None,
        config: Optional[MockConfig] = None
    ):
        """
        Initialize mock server.

        Args:
            handlers: Initial handlers, tried in order
            config: Optional MockConfig for server behavior
        """
        self.config = config or MockConfig()
        self.metrics = MockMetrics()

        self.logger = logging.getLogger("mockbuilders.mock")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self._initial_handlers: List[RequestHandler] = list(handlers or [])
        self.handlers: List[RequestHandler] = list(self._initial_handlers)
        self._used: Set[RequestHandler] = set()
        # Serializes single-use handlers so each answers one request only
        self._once_lock = asyncio.Lock()

        self.app = self._create_app()

    def use(self, *handlers: RequestHandler) -> None:
        """Prepend runtime handlers; they take precedence over existing ones."""
        self.handlers = list(handlers) + self.handlers
        self.logger.info(f"Added {len(handlers)} runtime handlers")

    def reset_handlers(self, *handlers: RequestHandler) -> None:
        """
        Drop runtime handlers.

        With arguments, replace all handlers with the given ones. Without,
        restore the handlers the server was created with. Single-use
        handlers become usable again.
        """
        self.handlers = list(handlers) if handlers else list(self._initial_handlers)
        self._used.clear()
        self.logger.info(f"Reset handlers ({len(self.handlers)} active)")

    def list_handlers(self) -> List[RequestHandler]:
        return list(self.handlers)

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="MockBuilders Mock Server",
            description="Mock HTTP server serving responses from registered handlers",
            version="1.0.0"
        )

        if self.config.admin_enabled:
            @app.get(f"{self.config.admin_prefix}/metrics")
            async def get_metrics():
                """Get server metrics."""
                return JSONResponse(content=self.metrics.to_dict())

            @app.get(f"{self.config.admin_prefix}/handlers")
            async def get_handlers():
                """List handlers in resolution order."""
                return JSONResponse(content={
                    'total': len(self.handlers),
                    'handlers': [
                        {
                            'info': handler.info,
                            'once': handler.once,
                            'used': handler in self._used
                        }
                        for handler in self.handlers
                    ]
                })

            @app.post(f"{self.config.admin_prefix}/reset")
            async def reset_metrics():
                """Reset metrics."""
                self.metrics = MockMetrics()
                return JSONResponse(content={'status': 'reset'})

        # Main catch-all route for mocking
        @app.api_route("/{path:path}", methods=SUPPORTED_METHODS)
        async def mock_request(request: Request, path: str):
            """Handle incoming requests and serve mock responses."""
            return await self.handle(request)

        return app

    async def handle(self, request: Request) -> Response:
        """
        Resolve a request against the handlers.

        Handlers are tried in order; the first match produces the response.
        Used single-use handlers are skipped.

        Args:
            request: FastAPI Request object

        Returns:
            The matched handler's response, or the fallback response
        """
        self.metrics.total_requests += 1
        method = request.method
        url = str(request.url)
        self.logger.debug(f"Incoming: {method} {url}")

        # Materialize the body once so every handler can re-read it
        await request.body()

        for handler in list(self.handlers):
            if handler.once:
                result = await self._run_once(handler, request)
            else:
                result = await handler.run(request)

            if result is None:
                continue
            if not result.matched:
                self.logger.debug(f"Skipped: {method} {url} {result.to_dict()}")
                continue

            self.metrics.matched_requests += 1
            self.logger.debug(f"Matched: {method} {url} {result.to_dict()}")
            return result.response

        self.metrics.unmatched_requests += 1
        self.logger.warning(f"No handler matched {method} {url}")
        return Response(
            content=self.config.fallback_body,
            status_code=self.config.fallback_status,
            media_type="application/json",
            headers={'X-MockBuilders-Matched': 'false'}
        )

    async def _run_once(self, handler: RequestHandler, request: Request) -> Optional[MatchResult]:
        """Run a single-use handler; None if it has already answered a request."""
        async with self._once_lock:
            if handler in self._used:
                return None
            result = await handler.run(request)
            if result.matched:
                self._used.add(handler)
            return result

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        access_log: bool = True
    ):
        """
        Start the mock server.

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
            access_log: Enable access logging
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        print("MockBuilders Mock Server starting...")
        print(f"   Host: {actual_host}:{actual_port}")
        print(f"   Handlers registered: {len(self.handlers)}")

        if self.config.admin_enabled:
            print(f"   Admin API: http://{actual_host}:{actual_port}{self.config.admin_prefix}/metrics")

        print()

        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app


def create_mock_server(
    handlers: Optional[List[RequestHandler]] = None,
    host: str = "127.0.0.1",
    port: int = 8080,
    log_level: str = "info",
    fallback_status: int = 404,
    admin_enabled: bool = True
) -> MockServer:
    """
    Convenience function to create and configure a mock server.

    Args:
        handlers: Initial handlers
        host: Host to bind to
        port: Port to bind to
        log_level: Logging level for the server logger and uvicorn
        fallback_status: Status code for unhandled requests
        admin_enabled: Expose the admin API

    Returns:
        Configured MockServer instance
    """
    config = MockConfig(
        host=host,
        port=port,
        log_level=log_level,
        fallback_status=fallback_status,
        admin_enabled=admin_enabled
    )

    return MockServer(handlers, config=config)
