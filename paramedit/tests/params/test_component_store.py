# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from paramedit.errors import DuplicateComponentError, NotFoundError, ParseError, StructureError, UnsupportedValueError
from paramedit.parser.ast import Location, LocationRange
from paramedit.params import (
	RenderLayout,
	append_component,
	get_all_component_params,
	get_component_params,
	set_component_params,
)

PARAMS = """{
  global: {
    replicas: 1,
  },
  components: {
    // Component-level parameters
    foo: {
      name: "foo",
      replicas: 1,
    },
    "bar-baz": {
      image: 'nginx:1.1',
      enabled: true,
    },
  },
}
"""


def test_get_all_component_params() -> None:
	assert get_all_component_params(PARAMS) == {
		"foo": {"name": '"foo"', "replicas": "1"},
		"bar-baz": {"image": '"nginx:1.1"', "enabled": "true"},
	}


def test_get_component_params_reports_object_range() -> None:
	params, loc = get_component_params("foo", PARAMS)
	assert params == {"name": '"foo"', "replicas": "1"}
	assert loc == LocationRange(Location(7, 10), Location(10, 6))


def test_get_unknown_component() -> None:
	with pytest.raises(NotFoundError) as excinfo:
		get_component_params("missing", PARAMS)
	assert excinfo.value.component == "missing"


def test_append_component_before_closing_brace() -> None:
	out = append_component("qux", PARAMS, {"replicas": "3", "name": '"qux"'})
	expected = PARAMS.replace(
		'      enabled: true,\n    },\n  },\n',
		'      enabled: true,\n    },\n    qux: {\n      name: "qux",\n      replicas: 3,\n    },\n  },\n',
	)
	assert out == expected
	assert get_component_params("qux", out)[0] == {"name": '"qux"', "replicas": "3"}


def test_append_to_inline_components_adds_separator() -> None:
	src = '{ components: { foo: { replicas: 1, name: "a" } } }'
	out = append_component("bar", src, {"replicas": "2"})
	assert out == '{ components: { foo: { replicas: 1, name: "a" },\n    bar: {\n      replicas: 2,\n    },\n} }'
	assert get_all_component_params(out) == {
		"foo": {"replicas": "1", "name": '"a"'},
		"bar": {"replicas": "2"},
	}


def test_append_after_member_without_trailing_comma() -> None:
	src = "{\n  components: {\n    foo: {}\n  }\n}\n"
	out = append_component("bar", src, {"a": "1"})
	assert out == "{\n  components: {\n    foo: {},\n    bar: {\n      a: 1,\n    },\n  }\n}\n"


def test_append_after_parenthesized_member() -> None:
	src = "{\n  components: {\n    foo: ({})\n  }\n}\n"
	out = append_component("bar", src, {})
	assert out == "{\n  components: {\n    foo: ({}),\n    bar: {\n    },\n  }\n}\n"


def test_append_quotes_component_name() -> None:
	src = "{\n  components: {\n  },\n}\n"
	out = append_component("my-app", src, {})
	assert '    "my-app": {\n    },\n' in out
	assert get_all_component_params(out) == {"my-app": {}}


def test_append_with_custom_layout() -> None:
	src = "{\n  components: {\n  },\n}\n"
	out = append_component("bar", src, {"a": "1"}, layout=RenderLayout(component_indent=2, param_indent=4))
	assert out == "{\n  components: {\n  bar: {\n    a: 1,\n  },\n  },\n}\n"


def test_append_duplicate_component() -> None:
	with pytest.raises(DuplicateComponentError) as excinfo:
		append_component("foo", PARAMS, {})
	assert excinfo.value.component == "foo"
	assert excinfo.value.reason_code == "duplicate-component"


def test_set_merges_and_rewrites_in_place() -> None:
	out = set_component_params("foo", PARAMS, {"replicas": "2"})
	assert out == PARAMS.replace("      replicas: 1,", "      replicas: 2,")
	assert get_component_params("foo", out)[0] == {"name": '"foo"', "replicas": "2"}
	assert get_component_params("bar-baz", out)[0] == get_component_params("bar-baz", PARAMS)[0]


def test_set_merge_keeps_untouched_keys() -> None:
	src = "{ components: { c: { a: 1, b: 2 } } }"
	out = set_component_params("c", src, {"b": "3", "z": "9"})
	assert get_component_params("c", out)[0] == {"a": "1", "b": "3", "z": "9"}


def test_reads_are_deterministic() -> None:
	assert get_component_params("foo", PARAMS) == get_component_params("foo", PARAMS)


def test_set_adds_new_keys_sorted() -> None:
	out = set_component_params("foo", PARAMS, {"image": '"app:2"'})
	assert '    foo: {\n      image: "app:2",\n      name: "foo",\n      replicas: 1,\n    },\n' in out


def test_set_is_idempotent() -> None:
	once = set_component_params("foo", PARAMS, {"replicas": "2"})
	assert set_component_params("foo", once, {"replicas": "2"}) == once


def test_set_normalizes_quote_style() -> None:
	out = set_component_params("bar-baz", PARAMS, {})
	assert "      image: \"nginx:1.1\",\n" in out
	assert "'nginx:1.1'" not in out


def test_set_inline_component() -> None:
	out = set_component_params("foo", "{ components: { foo: { replicas: 1 } } }", {"replicas": "2"})
	assert out == "{ components: { foo: {\n      replicas: 2,\n} } }"


def test_set_does_not_mutate_arguments() -> None:
	params = {"replicas": "2"}
	set_component_params("foo", PARAMS, params)
	assert params == {"replicas": "2"}


def test_set_unknown_component() -> None:
	with pytest.raises(NotFoundError):
		set_component_params("missing", PARAMS, {"a": "1"})


@pytest.mark.parametrize(
	"src",
	[
		"{ components: { foo: { replicas: 1 + 1 } } }",
		"{ components: { foo: { list: [1] } } }",
		"{ components: { foo: { ref: $.global.x } } }",
		"{ components: { foo: { empty: null } } }",
	],
)
def test_non_literal_values_are_unsupported(src: str) -> None:
	with pytest.raises(UnsupportedValueError):
		get_all_component_params(src)
	with pytest.raises(UnsupportedValueError):
		get_component_params("foo", src)


def test_append_round_trips_canonical_values() -> None:
	params = {"n": "1.5", "s": '"x"', "b": "false"}
	out = append_component("bar", "{ components: {} }", params)
	assert get_component_params("bar", out)[0] == params


def test_incoming_values_are_normalized() -> None:
	out = append_component("bar", "{ components: {} }", {"n": "1.50", "s": "'x'", "t": "@'a''b'"})
	assert get_component_params("bar", out)[0] == {"n": "1.5", "s": '"x"', "t": '"a\'b"'}
	out = set_component_params("foo", PARAMS, {"replicas": " 2.0 "})
	assert "      replicas: 2,\n" in out


@pytest.mark.parametrize("value", ["[1]", "{}", "null", "-1", "x", "1 + 1"])
def test_incoming_non_scalars_are_rejected(value: str) -> None:
	with pytest.raises(UnsupportedValueError):
		append_component("bar", PARAMS, {"a": value})
	with pytest.raises(UnsupportedValueError):
		set_component_params("foo", PARAMS, {"a": value})


@pytest.mark.parametrize("value", ["", "1,", "'open", "1 2"])
def test_incoming_unparsable_values_are_rejected(value: str) -> None:
	with pytest.raises(ParseError):
		set_component_params("foo", PARAMS, {"b": value})


@pytest.mark.parametrize(
	"src",
	[
		'{ components: { foo: "x" } }',
		"{ components: { foo: base { a: 1 } } }",
		"{ components: { foo(x): {} } }",
		"{ components: { [name]: {} } }",
	],
)
def test_malformed_component_entries(src: str) -> None:
	with pytest.raises(StructureError):
		get_all_component_params(src)


def test_parse_error_leaves_nothing_written() -> None:
	with pytest.raises(ParseError):
		append_component("foo", "{ components: { ", {})
