# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Environment-level params: per-environment overrides of component params.

An environment document usually wraps its overrides as
`params + { components +: { ... } }`. When it has no `components` field, the
document's root object holds the overrides directly.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Tuple

from paramedit.errors import NotFoundError
from paramedit.parser import ast as A
from paramedit.parser import parse_source
from paramedit.params.codec import DEFAULT_LAYOUT, Params, RenderLayout, encode_params, normalize_params, params_of
from paramedit.params.locator import COMPONENTS_ID, search_components
from paramedit.params.splice import rewrite_object_body
from paramedit.params.store import (
	all_params,
	component_object,
	component_params,
	find_component_field,
	insert_member,
	merged_params,
	render_component_block,
)

logger = logging.getLogger(__name__)


def root_object(node: A.Node) -> Optional[A.Object]:
	"""Find the object literal a document evaluates to, looking through wrappers."""
	if isinstance(node, A.Object):
		return node
	if isinstance(node, A.Local):
		return root_object(node.body)
	if isinstance(node, A.Assert):
		return root_object(node.rest)
	if isinstance(node, A.ApplyBrace):
		return root_object(node.right)
	if isinstance(node, A.Binary) and node.op == "+":
		return root_object(node.right) or root_object(node.left)
	return None


def environment_components(source: str) -> A.Object:
	root = parse_source(source)
	found = search_components(root)
	if found is None:
		found = root_object(root)
	if found is None:
		raise NotFoundError(f"could not find object node: {COMPONENTS_ID}", component=COMPONENTS_ID)
	return found


def get_all_environment_params(source: str) -> Dict[str, Params]:
	return all_params(environment_components(source))


def get_environment_params(name: str, source: str) -> Tuple[Params, A.LocationRange]:
	return component_params(environment_components(source), name)


def set_environment_params(
	name: str,
	source: str,
	params: Mapping[str, str],
	*,
	layout: RenderLayout = DEFAULT_LAYOUT,
) -> str:
	"""
	Write `params` for `name`, creating a `name +: { ... }` merge-patch entry
	if the environment does not override the component yet.
	"""
	components = environment_components(source)
	field = find_component_field(components, name)
	if field is None:
		logger.debug("adding override block for %s", name)
		block = render_component_block(name, normalize_params(params), layout, merge=True)
		return insert_member(source, components, block)
	obj = component_object(field)
	merged = merged_params(params_of(obj), normalize_params(params))
	logger.debug("rewriting override block for %s on lines %d-%d", name, obj.loc.begin.line, obj.loc.end.line)
	return rewrite_object_body(source, obj.loc, encode_params(layout.param_indent, merged))


def merge_param_maps(
	base: Mapping[str, Mapping[str, str]],
	overrides: Mapping[str, Mapping[str, str]],
) -> Dict[str, Params]:
	"""Two-level merge of component -> param -> value maps; overrides win per key."""
	merged: Dict[str, Params] = {component: dict(params) for component, params in base.items()}
	for component, params in overrides.items():
		if component in merged:
			merged[component].update(params)
		else:
			merged[component] = dict(params)
	return merged


__all__ = [
	"get_all_environment_params",
	"get_environment_params",
	"merge_param_maps",
	"set_environment_params",
]
