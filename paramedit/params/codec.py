# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reading parameter fields out of object nodes and rendering them back as text.

Params are plain `dict[str, str]` mappings from parameter name to the
source text of a scalar literal (`"a"`, `1.5`, `true`).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Mapping, Tuple

from paramedit.errors import StructureError, UnsupportedValueError
from paramedit.parser import parse_source
from paramedit.parser.ast import (
	Field,
	FieldKind,
	LiteralBoolean,
	LiteralNumber,
	LiteralString,
	Node,
	Object,
)

Params = Dict[str, str]

_ASCII_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

# Identifier-shaped words that are still not usable as bare field names.
_KEYWORDS = frozenset(
	{
		"assert",
		"else",
		"error",
		"false",
		"for",
		"function",
		"if",
		"import",
		"importstr",
		"in",
		"local",
		"null",
		"self",
		"super",
		"tailstrict",
		"then",
		"true",
	}
)


@dataclass(frozen=True)
class RenderLayout:
	"""Indentation, in columns, used when writing a component block."""

	component_indent: int = 4
	param_indent: int = 6

	def __post_init__(self) -> None:
		if self.component_indent < 0 or self.param_indent < 0:
			raise ValueError("indentation must be non-negative")


DEFAULT_LAYOUT = RenderLayout()


def is_ascii_identifier(name: str) -> bool:
	return bool(_ASCII_IDENTIFIER.match(name))


def sanitize_component(name: str) -> str:
	"""Quote `name` unless it can be written as a bare field name."""
	if is_ascii_identifier(name) and name not in _KEYWORDS:
		return name
	return json.dumps(name, ensure_ascii=False)


def field_key(field: Field) -> str:
	if field.kind is FieldKind.EXPR or field.key is None:
		raise StructureError("unsupported field key: computed [expr] keys cannot name a component or parameter", loc=field.loc.begin)
	return field.key


def fields_of(obj: Object) -> List[Tuple[str, Node]]:
	"""Return (key, value) for every field of `obj` in declaration order."""
	return [(field_key(field), field.value) for field in obj.fields]


def format_number(value: float) -> str:
	"""
	Shortest decimal text that reads back as `value`, in plain positional
	notation (no exponent, no trailing zeros).
	"""
	dec = Decimal(repr(value))
	if dec == dec.to_integral_value():
		return str(int(dec))
	return format(dec.normalize(), "f")


def decode_literal(node: Node) -> str:
	if isinstance(node, LiteralNumber):
		return format_number(node.value)
	if isinstance(node, LiteralBoolean):
		return "true" if node.value else "false"
	if isinstance(node, LiteralString):
		return json.dumps(node.value, ensure_ascii=False)
	raise UnsupportedValueError(
		f"unsupported param value: {type(node).__name__} (only string, number and boolean literals are allowed)",
		loc=node.loc.begin,
	)


def params_of(obj: Object) -> Params:
	params: Params = {}
	for field in obj.fields:
		key = field_key(field)
		if field.method is not None:
			raise UnsupportedValueError(f"param {key!r} is a method, not a value", loc=field.loc.begin)
		params[key] = decode_literal(field.value)
	return params


def normalize_value(key: str, text: str) -> str:
	"""
	Check that `text` is a single scalar literal and return it in the form
	`decode_literal` would read it back (`1.50` -> `1.5`, `'x'` -> `"x"`).
	"""
	return decode_literal(parse_source(text, name=f"value of {key!r}"))


def normalize_params(params: Mapping[str, str]) -> Params:
	return {key: normalize_value(key, text) for key, text in params.items()}


def encode_params(indent: int, params: Mapping[str, str]) -> str:
	"""
	Render `params` as `key: value,` lines sorted by key.

	The result starts and ends with a newline so it can sit directly between
	an object's braces.
	"""
	if not params:
		return "\n"
	pad = " " * indent
	lines = [f"{pad}{sanitize_component(key)}: {params[key]}," for key in sorted(params)]
	return "\n" + "\n".join(lines) + "\n"


__all__ = [
	"DEFAULT_LAYOUT",
	"Params",
	"RenderLayout",
	"decode_literal",
	"encode_params",
	"field_key",
	"fields_of",
	"format_number",
	"is_ascii_identifier",
	"normalize_params",
	"normalize_value",
	"params_of",
	"sanitize_component",
]
