"""
MockBuilders Common Utilities

Structural comparison helpers shared by the matcher and the handler factories.
"""

from typing import Any, Dict, Mapping


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_equal(expected: Any, actual: Any) -> bool:
    """
    Deep structural equality.

    - Mappings are equal when they have the same key set (order-independent)
      and recursively equal values.
    - Lists and tuples are equal when they have the same length and
      element-wise equal items.
    - Everything else is compared by value. Booleans never equal numbers,
      so ``True`` does not match ``1``.

    Args:
        expected: Expected value
        actual: Actual value

    Returns:
        True if both values are structurally equal
    """
    if isinstance(expected, Mapping) and isinstance(actual, Mapping):
        if set(expected.keys()) != set(actual.keys()):
            return False
        return all(is_equal(expected[key], actual[key]) for key in expected)

    if _is_sequence(expected) and _is_sequence(actual):
        if len(expected) != len(actual):
            return False
        return all(is_equal(e, a) for e, a in zip(expected, actual))

    if isinstance(expected, bool) != isinstance(actual, bool):
        return False

    if isinstance(expected, (Mapping, list, tuple)) or isinstance(actual, (Mapping, list, tuple)):
        return False

    return expected == actual


def is_match(source: Mapping[str, Any], matcher: Mapping[str, Any]) -> bool:
    """
    Containment check: every key of ``matcher`` must be present in ``source``
    with a deeply equal value. Extra keys in ``source`` are ignored.

    Args:
        source: Actual mapping
        matcher: Expected subset

    Returns:
        True if ``matcher`` is contained in ``source``
    """
    for key, expected in matcher.items():
        if key not in source:
            return False
        if not is_equal(expected, source[key]):
            return False
    return True


def lower_keys(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a fresh dict with every key lower-cased."""
    return {str(key).lower(): value for key, value in mapping.items()}
