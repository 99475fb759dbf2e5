# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Depth-first search for the object bound to the `components` field.

Each step returns the object it found (or None) instead of threading an
accumulator through the recursion; the first hit short-circuits the walk.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from paramedit.errors import NotFoundError, StructureError, UnsupportedNodeError
from paramedit.parser import ast as A

logger = logging.getLogger(__name__)

COMPONENTS_ID = "components"

_OPAQUE = (
	A.Import,
	A.ImportStr,
	A.Self,
	A.Dollar,
	A.Var,
	A.LiteralString,
	A.LiteralNumber,
	A.LiteralBoolean,
	A.LiteralNull,
)


def find_components_object(root: A.Node) -> A.Object:
	found = search_components(root)
	if found is None:
		raise NotFoundError(f"could not find object node: {COMPONENTS_ID}", component=COMPONENTS_ID)
	logger.debug("located %s object at line %d", COMPONENTS_ID, found.loc.begin.line)
	return found


def search_components(node: Optional[A.Node]) -> Optional[A.Object]:
	if node is None:
		return None
	if isinstance(node, A.Object):
		direct = _own_components(node)
		if direct is not None:
			return direct
	return _first(children_of(node))


def _first(nodes: Iterable[Optional[A.Node]]) -> Optional[A.Object]:
	for child in nodes:
		found = search_components(child)
		if found is not None:
			return found
	return None


def _own_components(obj: A.Object) -> Optional[A.Object]:
	for field in obj.fields:
		if field.kind is A.FieldKind.EXPR or field.key != COMPONENTS_ID:
			continue
		if not isinstance(field.value, A.Object):
			raise StructureError(f"{COMPONENTS_ID} must be an object", loc=field.loc.begin)
		return field.value
	return None


def children_of(node: A.Node) -> Iterator[Optional[A.Node]]:
	"""Yield the sub-expressions of `node` in source order."""
	if isinstance(node, _OPAQUE):
		return
	if isinstance(node, A.Object):
		for field in node.fields:
			yield field.key_expr
			yield field.value
		for bind in node.locals:
			yield bind.body
		for check in node.asserts:
			yield check.cond
			yield check.message
	elif isinstance(node, A.DesugaredObject):
		yield from node.asserts
		for dfield in node.fields:
			yield dfield.name
			yield dfield.body
	elif isinstance(node, A.ObjectComp):
		for bind in node.locals:
			yield bind.body
		for field in node.fields:
			yield field.key_expr
			yield field.value
		yield from _spec_children(node.spec)
	elif isinstance(node, A.Array):
		yield from node.elements
	elif isinstance(node, A.ArrayComp):
		yield from _spec_children(node.spec)
		yield node.body
	elif isinstance(node, A.Apply):
		yield from node.positional
		for named in node.named:
			yield named.arg
		yield node.target
	elif isinstance(node, A.ApplyBrace):
		yield node.left
		yield node.right
	elif isinstance(node, A.Binary):
		yield node.left
		yield node.right
	elif isinstance(node, A.Unary):
		yield node.expr
	elif isinstance(node, A.Conditional):
		yield node.cond
		yield node.branch_true
		yield node.branch_false
	elif isinstance(node, A.Local):
		for bind in node.binds:
			yield bind.body
		yield node.body
	elif isinstance(node, A.Function):
		for param in node.params:
			yield param.default
		yield node.body
	elif isinstance(node, A.Index):
		yield node.target
		yield node.index
	elif isinstance(node, A.Slice):
		yield node.target
		yield node.begin_index
		yield node.end_index
		yield node.step
	elif isinstance(node, (A.SuperIndex, A.InSuper)):
		yield node.index
	elif isinstance(node, A.Assert):
		yield node.cond
		yield node.message
		yield node.rest
	elif isinstance(node, A.Error):
		yield node.expr
	else:
		raise UnsupportedNodeError(f"unsupported node type: {type(node).__name__}")


def _spec_children(spec: A.ForSpec) -> Iterator[A.Node]:
	if spec.outer is not None:
		yield from _spec_children(spec.outer)
	for cond in spec.conditions:
		yield cond.expr
	yield spec.expr


__all__ = ["COMPONENTS_ID", "children_of", "find_components_object", "search_components"]
