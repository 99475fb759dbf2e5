# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Component-level params: read, append and update entries of the `components`
object of a params document.

Every call parses the text it is given and returns new text; nothing is
cached between calls.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Tuple

from paramedit.errors import DuplicateComponentError, NotFoundError, StructureError
from paramedit.parser import parse_source
from paramedit.parser.ast import Field, Location, LocationRange, Object
from paramedit.params.codec import (
	DEFAULT_LAYOUT,
	Params,
	RenderLayout,
	encode_params,
	field_key,
	normalize_params,
	params_of,
	sanitize_component,
)
from paramedit.params.locator import find_components_object
from paramedit.params.splice import (
	insert_at,
	insert_before_line,
	only_whitespace_before,
	replace_range,
	rewrite_object_body,
	skip_blanks_back,
	skip_closing_parens,
)

logger = logging.getLogger(__name__)


def find_component_field(components: Object, name: str) -> Optional[Field]:
	for field in components.fields:
		if field_key(field) == name:
			return field
	return None


def component_object(field: Field) -> Object:
	if field.method is not None or not isinstance(field.value, Object):
		raise StructureError(
			f"expected component {field_key(field)!r} to be an object",
			component=field_key(field),
			loc=field.loc.begin,
		)
	return field.value


def all_params(components: Object) -> Dict[str, Params]:
	result: Dict[str, Params] = {}
	for field in components.fields:
		result[field_key(field)] = params_of(component_object(field))
	return result


def component_params(components: Object, name: str) -> Tuple[Params, LocationRange]:
	field = find_component_field(components, name)
	if field is None:
		raise NotFoundError(f"could not find component identifier {name!r}", component=name)
	obj = component_object(field)
	return params_of(obj), obj.loc


def render_component_block(name: str, params: Mapping[str, str], layout: RenderLayout, *, merge: bool = False) -> str:
	pad = " " * layout.component_indent
	key = sanitize_component(name)
	head = f"{key} +: {{" if merge else f"{key}: {{"
	return f"{pad}{head}{encode_params(layout.param_indent, params)}{pad}}},"


def _last_member_end(obj: Object) -> Optional[Location]:
	ends = [f.loc.end for f in obj.fields]
	ends += [b.loc.end for b in obj.locals]
	ends += [a.loc.end for a in obj.asserts]
	if not ends:
		return None
	return max(ends, key=lambda loc: (loc.line, loc.column))


def insert_member(source: str, obj: Object, block: str) -> str:
	"""
	Insert `block` (whole lines, no trailing newline) as the last member of
	`obj`, right before its closing brace.
	"""
	close_brace = Location(obj.loc.end.line, obj.loc.end.column - 1)
	if only_whitespace_before(source, close_brace):
		out = insert_before_line(source, close_brace.line, block)
	else:
		out = replace_range(source, skip_blanks_back(source, close_brace), close_brace, "\n" + block + "\n")
	last = _last_member_end(obj)
	if last is not None and not obj.trailing_comma:
		# The separator sits before the insertion point, so its location is unaffected.
		out = insert_at(out, skip_closing_parens(out, last), ",")
	return out


def merged_params(current: Mapping[str, str], params: Mapping[str, str]) -> Params:
	merged = dict(current)
	merged.update(params)
	return merged


# ---------------------------------------------------------------------------
# Public operations


def get_all_component_params(source: str) -> Dict[str, Params]:
	return all_params(find_components_object(parse_source(source)))


def get_component_params(name: str, source: str) -> Tuple[Params, LocationRange]:
	return component_params(find_components_object(parse_source(source)), name)


def append_component(
	name: str,
	source: str,
	params: Mapping[str, str],
	*,
	layout: RenderLayout = DEFAULT_LAYOUT,
) -> str:
	components = find_components_object(parse_source(source))
	if find_component_field(components, name) is not None:
		raise DuplicateComponentError(f"component parameters for {name!r} already exist", component=name)
	block = render_component_block(name, normalize_params(params), layout)
	logger.debug("appending component %s before line %d", name, components.loc.end.line)
	return insert_member(source, components, block)


def set_component_params(
	name: str,
	source: str,
	params: Mapping[str, str],
	*,
	layout: RenderLayout = DEFAULT_LAYOUT,
) -> str:
	current, loc = get_component_params(name, source)
	merged = merged_params(current, normalize_params(params))
	logger.debug("rewriting component %s on lines %d-%d", name, loc.begin.line, loc.end.line)
	return rewrite_object_body(source, loc, encode_params(layout.param_indent, merged))


__all__ = [
	"append_component",
	"get_all_component_params",
	"get_component_params",
	"set_component_params",
]
