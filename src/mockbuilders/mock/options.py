"""
MockBuilders Options

Factory-level and handler-level configuration.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Optional

import yaml


@dataclass(frozen=True)
class HandlerOptions:
    """
    Per-handler options.

    Attributes:
        on_called: Called (and awaited, if it returns an awaitable) each time
            the handler matches, before the response is produced
        headers: Header matcher (used by GraphQL handlers; REST handlers take
            headers from their MatcherSet)
        once: Let the runtime use this handler for a single response only
    """

    on_called: Optional[Callable[[], Any]] = None
    headers: Any = None
    once: Optional[bool] = None

    def merged_with(self, other: Optional['HandlerOptions']) -> 'HandlerOptions':
        """Return a copy where every field set on ``other`` overrides this one."""
        if other is None:
            return self
        overrides = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **overrides)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'HandlerOptions':
        data = data or {}
        return cls(
            on_called=data.get('on_called', data.get('onCalled')),
            headers=data.get('headers'),
            once=data.get('once')
        )


def _coerce_handler_options(value: Any) -> Optional[HandlerOptions]:
    if value is None or isinstance(value, HandlerOptions):
        return value
    return HandlerOptions.from_dict(value)


@dataclass(frozen=True)
class Options:
    """
    Handler factory options.

    Attributes:
        url: Base URL for REST handlers, or the GraphQL endpoint
        debug: Log why handlers did not match
        default_request_handler_options: Options applied to every handler
            created by the factory, overridden per call
    """

    url: str
    debug: bool = False
    default_request_handler_options: Optional[HandlerOptions] = None

    def __post_init__(self):
        if not self.url:
            raise ValueError("Options.url is required")
        object.__setattr__(
            self,
            'default_request_handler_options',
            _coerce_handler_options(self.default_request_handler_options)
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Options':
        """Create Options from a dictionary (snake_case or camelCase keys)."""
        return cls(
            url=data.get('url', ''),
            debug=bool(data.get('debug', False)),
            default_request_handler_options=data.get(
                'default_request_handler_options',
                data.get('defaultRequestHandlerOptions')
            )
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'Options':
        """Load Options from a YAML file."""
        with open(yaml_path, 'r') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {yaml_path}")

        return cls.from_dict(data)

    def handler_options(self, options: Optional[HandlerOptions] = None) -> HandlerOptions:
        """Resolve the effective options for one handler."""
        defaults = self.default_request_handler_options or HandlerOptions()
        return defaults.merged_with(_coerce_handler_options(options))
