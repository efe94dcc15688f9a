"""
MockBuilders Request Matchers

Matchers describe which request a mock handler should respond to. A matcher
is either a literal value compared structurally against the actual request
data, or a predicate function whose boolean result is authoritative.

Two comparison modes are used:
- contains: the expected mapping must be a subset of the actual mapping
  (headers, compared case-insensitively)
- equal: expected and actual must be structurally identical
  (search params, request body, GraphQL variables)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..common.utils import is_equal, is_match, lower_keys


@dataclass(frozen=True)
class Exact:
    """Literal matcher value."""

    value: Any


@dataclass(frozen=True)
class Predicate:
    """Function matcher. ``fn`` receives the actual value as-is."""

    fn: Callable[[Any], bool]


Matcher = Union[Exact, Predicate]


def as_matcher(value: Any) -> Optional[Matcher]:
    """
    Convert a user-supplied matcher value into a Matcher.

    - None stays None (accept any value)
    - Exact / Predicate instances are returned unchanged
    - Any other callable becomes a Predicate
    - Everything else becomes an Exact

    Wrap a callable in ``Exact`` explicitly to compare it literally.
    """
    if value is None or isinstance(value, (Exact, Predicate)):
        return value
    if callable(value):
        return Predicate(value)
    return Exact(value)


def passes_matcher_contains(matcher: Optional[Matcher], actual: Mapping[str, Any]) -> bool:
    """Contains-mode evaluation. A missing matcher always passes."""
    if matcher is None:
        return True
    if isinstance(matcher, Predicate):
        return bool(matcher.fn(actual))
    if not isinstance(matcher.value, Mapping):
        return is_equal(matcher.value, actual)
    return is_match(actual, matcher.value)


def passes_matcher_equal(matcher: Optional[Matcher], actual: Any) -> bool:
    """Equal-mode evaluation. A missing matcher always passes."""
    if matcher is None:
        return True
    if isinstance(matcher, Predicate):
        return bool(matcher.fn(actual))
    return is_equal(matcher.value, actual)


def match_headers(matcher: Optional[Matcher], actual_headers: Mapping[str, Any]) -> bool:
    """
    Match request headers.

    Requests always carry ambient headers (user-agent, content-length, ...),
    so literal matchers use contains-mode. Keys of both sides are
    lower-cased first, so ``Auth`` matches ``AUTH``. Predicates receive the
    lower-cased headers.
    """
    actual = lower_keys(actual_headers)
    if isinstance(matcher, Exact) and isinstance(matcher.value, Mapping):
        matcher = Exact(lower_keys(matcher.value))
    return passes_matcher_contains(matcher, actual)


@dataclass(frozen=True)
class MatcherSet:
    """
    Matchers for one handler registration, keyed by dimension.

    Built once per registration and never mutated. A missing matcher means
    "accept any value" for that dimension.
    """

    headers: Optional[Matcher] = None
    search_params: Optional[Matcher] = None
    body: Optional[Matcher] = None

    @classmethod
    def from_dict(cls, data: Union['MatcherSet', Dict[str, Any], None]) -> 'MatcherSet':
        """
        Create a MatcherSet from a dict of raw matcher values.

        Accepted keys: ``headers``, ``search_params`` (or ``searchParams``)
        and ``body``.

        Raises:
            ValueError: If an unknown key is present
        """
        if isinstance(data, MatcherSet):
            return data

        data = dict(data or {})
        if 'searchParams' in data:
            data['search_params'] = data.pop('searchParams')

        unknown = set(data) - {'headers', 'search_params', 'body'}
        if unknown:
            raise ValueError(f"Unknown matcher keys: {sorted(unknown)}")

        return cls(
            headers=as_matcher(data.get('headers')),
            search_params=as_matcher(data.get('search_params')),
            body=as_matcher(data.get('body'))
        )
