"""
Tests for MockBuilders common utilities.

Tests structural equality, containment, key lower-casing, URL joining and
URL pattern matching.
"""

import pytest

from mockbuilders.common.utils import is_equal, is_match, lower_keys
from mockbuilders.common.url_utils import URLPattern, create_full_url, search_params_to_dict


class TestIsEqual:
    """Test deep structural equality."""

    def test_primitives(self):
        assert is_equal(1, 1)
        assert is_equal("a", "a")
        assert is_equal(None, None)
        assert not is_equal("1", 1)

    def test_bool_is_not_a_number(self):
        """True must not compare equal to 1."""
        assert not is_equal(True, 1)
        assert not is_equal(0, False)
        assert is_equal(True, True)

    def test_dicts_ignore_key_order(self):
        assert is_equal({'a': 1, 'b': 2}, {'b': 2, 'a': 1})

    def test_dicts_reject_extra_or_missing_keys(self):
        assert not is_equal({'a': 1}, {'a': 1, 'b': 2})
        assert not is_equal({'a': 1, 'b': 2}, {'a': 1})

    def test_nested_structures(self):
        expected = {'user': {'tags': ['a', 'b'], 'age': 3}}
        assert is_equal(expected, {'user': {'age': 3, 'tags': ['a', 'b']}})
        assert not is_equal(expected, {'user': {'age': 3, 'tags': ['b', 'a']}})

    def test_lists_compare_length(self):
        assert not is_equal([1, 2], [1, 2, 3])
        assert is_equal([1, 2], (1, 2))

    def test_mapping_never_equals_list(self):
        assert not is_equal({}, [])


class TestIsMatch:
    """Test containment matching."""

    def test_subset_matches(self):
        assert is_match({'a': 1, 'b': 2}, {'a': 1})

    def test_empty_matcher_matches_anything(self):
        assert is_match({'a': 1}, {})

    def test_missing_key_fails(self):
        assert not is_match({'a': 1}, {'b': 1})

    def test_different_value_fails(self):
        assert not is_match({'a': 1}, {'a': 2})

    def test_values_are_deeply_compared(self):
        assert is_match({'a': {'x': 1}, 'b': 2}, {'a': {'x': 1}})
        assert not is_match({'a': {'x': 1, 'y': 2}}, {'a': {'x': 1}})


def test_lower_keys():
    source = {'Auth': 'x', 'Content-Type': 'y'}

    result = lower_keys(source)

    assert result == {'auth': 'x', 'content-type': 'y'}
    assert source == {'Auth': 'x', 'Content-Type': 'y'}


class TestCreateFullUrl:
    """Test joining handler paths onto base URLs."""

    @pytest.mark.parametrize('base, path, expected', [
        ('https://www.example.org', '/test', 'https://www.example.org/test'),
        ('https://www.example.org/', '/test', 'https://www.example.org/test'),
        ('https://www.example.org//', 'test', 'https://www.example.org/test'),
        ('https://www.example.org/api', '//users/:id', 'https://www.example.org/api/users/:id'),
        ('https://www.example.org', '', 'https://www.example.org'),
    ])
    def test_joins(self, base, path, expected):
        assert create_full_url(base, path) == expected


def test_search_params_last_value_wins():
    class MultiParams(dict):
        def multi_items(self):
            return [('id', '1'), ('id', '2'), ('q', 'x')]

    assert search_params_to_dict(MultiParams()) == {'id': '2', 'q': 'x'}
    assert search_params_to_dict({'a': 'b'}) == {'a': 'b'}


class TestURLPattern:
    """Test URL pattern matching."""

    def test_exact_url(self):
        pattern = URLPattern('https://www.example.org/test')

        assert pattern.match('https://www.example.org/test') == {}
        assert pattern.match('https://www.example.org/test?id=1') == {}
        assert pattern.match('https://www.example.org/test/') == {}

    def test_other_host_does_not_match(self):
        pattern = URLPattern('https://www.example.org/test')

        assert pattern.match('https://www.other.org/test') is None

    def test_other_path_does_not_match(self):
        pattern = URLPattern('https://www.example.org/test')

        assert pattern.match('https://www.example.org/test/more') is None
        assert pattern.match('https://www.example.org/tes') is None

    def test_path_params(self):
        pattern = URLPattern('https://www.example.org/users/:userId/posts/:postId')

        params = pattern.match('https://www.example.org/users/42/posts/7')

        assert params == {'userId': '42', 'postId': '7'}

    def test_port_is_not_a_param(self):
        pattern = URLPattern('http://localhost:8080/users/:id')

        assert pattern.match('http://localhost:8080/users/1') == {'id': '1'}
        assert pattern.match('http://localhost:9090/users/1') is None

    def test_wildcard(self):
        pattern = URLPattern('https://www.example.org/files/*')

        assert pattern.match('https://www.example.org/files/a/b/c.txt') == {}

    def test_relative_pattern_matches_path_only(self):
        pattern = URLPattern('/api/users')

        assert pattern.match('https://anything.example.com/api/users') == {}
        assert pattern.match('https://anything.example.com/api/other') is None

    def test_host_is_case_insensitive(self):
        pattern = URLPattern('https://WWW.Example.org/test')

        assert pattern.match('https://www.example.org/test') == {}
