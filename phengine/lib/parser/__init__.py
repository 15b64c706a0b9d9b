"""
Parser package for placeholder substitution.

Provides the token scanner/parser and the resolution pipeline that turns a
token into a typed value through the plugin registry.
"""

from .base import PlaceholderParser
from .resolvers import PlaceholderResolver, path_format

__all__ = ["PlaceholderParser", "PlaceholderResolver", "path_format"]
