"""
MockBuilders Common Utilities

Shared utilities and helpers used across MockBuilders modules.
"""

from .utils import is_equal, is_match, lower_keys
from .url_utils import URLPattern, create_full_url, search_params_to_dict

__all__ = [
    'is_equal',
    'is_match',
    'lower_keys',
    'URLPattern',
    'create_full_url',
    'search_params_to_dict'
]
