"""
MockBuilders GraphQL Operations

Resolves GraphQL operation names from the different ways a handler can
declare them (bare name, operation text, regular expression, parsed
document) and extracts the operation sent by an incoming request.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Pattern, Union

from graphql import DocumentNode, GraphQLError, OperationDefinitionNode, get_operation_ast, parse

from .body import is_json_content_type

OperationNameSource = Union[str, Pattern, DocumentNode]

UNNAMED_OPERATION = '<unnamed operation>'

_NAME_PATTERNS = {
    'query': re.compile(r'query\s+([a-zA-Z0-9]+)', re.IGNORECASE),
    'mutation': re.compile(r'mutation\s+([a-zA-Z0-9]+)', re.IGNORECASE),
}


class OperationNameError(ValueError):
    """An operation name cannot be resolved from a handler's name source."""


class GraphQLRequestError(ValueError):
    """A request sent to a GraphQL endpoint carries an unparseable query."""


@dataclass(frozen=True)
class OperationDescriptor:
    """The GraphQL operation carried by a request."""

    kind: str
    name: Optional[str]
    variables: Dict[str, Any] = field(default_factory=dict)


def resolve_name(kind: str, source: Union[str, DocumentNode]) -> str:
    """
    Resolve the operation name for ``kind`` ("query" or "mutation").

    A string is searched for ``<kind> <Name>``; if found the captured name is
    returned, otherwise the whole string is taken as the literal name. This
    accepts both ``"viewerQuery"`` and ``"query viewerQuery { ... }"``.

    A parsed document yields the name of its first operation of ``kind``.

    Raises:
        OperationNameError: If the document has no operation of ``kind``,
            or that operation is anonymous
    """
    if isinstance(source, str):
        pattern = _NAME_PATTERNS.get(kind)
        match = pattern.search(source) if pattern else None
        if match is None:
            return source
        return match.group(1)

    if isinstance(source, DocumentNode):
        for definition in source.definitions:
            if isinstance(definition, OperationDefinitionNode) and definition.operation.value == kind:
                if definition.name is None:
                    raise OperationNameError(f"GraphQL document {kind} has no name")
                return definition.name.value
        raise OperationNameError(f"No {kind} found in GraphQL document")

    raise TypeError(f"Cannot resolve an operation name from {type(source).__name__}")


def operation_name_to_string(source: OperationNameSource, kind: Optional[str] = None) -> str:
    """
    Display string for an operation name source, used in debug messages.

    Regular expressions display as their pattern. Documents display the first
    named definition, or ``<unnamed operation>``.
    """
    if isinstance(source, str):
        return resolve_name(kind, source) if kind else source

    if isinstance(source, re.Pattern):
        return source.pattern

    names = [
        definition.name.value
        for definition in source.definitions
        if getattr(definition, 'name', None) is not None
    ]
    return names[0] if names else UNNAMED_OPERATION


async def parse_graphql_request(request) -> Optional[OperationDescriptor]:
    """
    Extract the GraphQL operation from a request.

    GET requests carry ``query``, ``variables`` (JSON text) and
    ``operationName`` as search params; POST requests carry them as a JSON
    payload.

    Args:
        request: Starlette Request

    Returns:
        OperationDescriptor, or None if this is not a GraphQL request

    Raises:
        GraphQLRequestError: If the query text cannot be parsed
        json.JSONDecodeError: If the payload or variables are malformed JSON
    """
    if request.method == 'GET':
        params = request.query_params
        query = params.get('query')
        raw_variables = params.get('variables')
        variables = json.loads(raw_variables) if raw_variables else None
        operation_name = params.get('operationName')
    elif request.method == 'POST':
        content_type = request.headers.get('content-type')
        if content_type and not is_json_content_type(content_type):
            return None
        body = await request.body()
        if not body:
            return None
        payload = json.loads(body)
        if not isinstance(payload, dict):
            return None
        query = payload.get('query')
        variables = payload.get('variables')
        operation_name = payload.get('operationName')
    else:
        return None

    if not isinstance(query, str):
        return None

    try:
        document = parse(query)
    except GraphQLError as e:
        raise GraphQLRequestError(
            f'Failed to parse GraphQL query sent to "{request.url}": {e.message}'
        ) from e

    definition = get_operation_ast(document, operation_name)
    if definition is None:
        return None

    return OperationDescriptor(
        kind=definition.operation.value,
        name=definition.name.value if definition.name else None,
        variables=variables or {}
    )
