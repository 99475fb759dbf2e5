"""
Jsonnet front-end: a lark grammar plus a builder producing the located node
model in `paramedit.parser.ast`.
"""

from __future__ import annotations

from . import ast
from .parser import decode_string_token, parse_source

__all__ = ["ast", "decode_string_token", "parse_source"]
