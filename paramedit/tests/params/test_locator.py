# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from paramedit.errors import NotFoundError, StructureError, UnsupportedNodeError
from paramedit.parser import ast as A
from paramedit.parser import parse_source
from paramedit.params.locator import children_of, find_components_object, search_components


def _found_keys(src: str) -> list[str | None]:
	found = find_components_object(parse_source(src))
	return [f.key for f in found.fields]


@pytest.mark.parametrize(
	"src",
	[
		"{ components: { hit: {} } }",
		"local x = 1; { components: { hit: {} } }",
		"params + { components +: { hit: {} } }",
		"base { components: { hit: {} } }",
		"[{ components: { hit: {} } }]",
		"f({ components: { hit: {} } })",
		"f(a={ components: { hit: {} } })",
		"if c then { components: { hit: {} } } else {}",
		"function(x) { components: { hit: {} } }",
		"assert true; { components: { hit: {} } }",
		"{ nested: { deeper: { components: { hit: {} } } } }",
		"{ local t = { components: { hit: {} } }, a: t }",
		"[x for x in [{ components: { hit: {} } }]]",
		"{ components:: { hit: {} } }",
		'{ "components": { hit: {} } }',
	],
)
def test_components_found_through_wrappers(src: str) -> None:
	assert _found_keys(src) == ["hit"]


def test_own_field_wins_over_nested_object() -> None:
	src = "{ nested: { components: { inner: {} } }, components: { outer: {} } }"
	assert _found_keys(src) == ["outer"]


def test_first_match_in_source_order() -> None:
	src = "[{ components: { first: {} } }, { components: { second: {} } }]"
	assert _found_keys(src) == ["first"]


def test_conditional_condition_searched_before_branches() -> None:
	src = "if { components: { c: {} } }.x then { components: { t: {} } } else {}"
	assert _found_keys(src) == ["c"]


def test_missing_components_is_not_found() -> None:
	with pytest.raises(NotFoundError) as excinfo:
		find_components_object(parse_source("{ a: 1, b: { c: 2 } }"))
	assert excinfo.value.component == "components"
	assert excinfo.value.reason_code == "not-found"


def test_computed_components_key_is_ignored() -> None:
	with pytest.raises(NotFoundError):
		find_components_object(parse_source("{ ['components']: { x: {} } }"))


@pytest.mark.parametrize("src", ["{ components: [] }", "{ components: 1 }", "{ components: base { a: 1 } }"])
def test_non_object_components_is_structure_error(src: str) -> None:
	with pytest.raises(StructureError):
		find_components_object(parse_source(src))


def test_desugared_object_is_searched() -> None:
	here = A.NO_LOCATION
	target = A.Object(loc=here)
	holder = A.Object(loc=here, fields=[A.Field(loc=here, kind=A.FieldKind.ID, value=target, key="components")])
	root = A.DesugaredObject(
		loc=here,
		fields=[A.DesugaredField(name=A.LiteralString(loc=here, value="wrapper"), body=holder)],
	)
	assert search_components(root) is target


def test_unknown_node_kind_is_rejected() -> None:
	class Foreign:
		pass

	with pytest.raises(UnsupportedNodeError):
		search_components(Foreign())  # type: ignore[arg-type]


def test_opaque_leaves_have_no_children() -> None:
	here = A.NO_LOCATION
	for leaf in (A.Var(loc=here, name="x"), A.Import(loc=here, file="a.libsonnet"), A.LiteralNull(loc=here)):
		assert list(children_of(leaf)) == []


def test_apply_children_order() -> None:
	node = parse_source("f(a, b=c)")
	names = [child.name for child in children_of(node) if isinstance(child, A.Var)]
	assert names == ["a", "c", "f"]
