# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from paramedit.params import (
	append_component,
	component_params_template,
	environment_params_template,
	get_all_component_params,
)
from paramedit.parser import ast as A
from paramedit.parser import parse_source


def test_component_template_is_empty_params_document() -> None:
	src = component_params_template()
	assert get_all_component_params(src) == {}
	out = append_component("guestbook", src, {"replicas": "1"})
	assert get_all_component_params(out) == {"guestbook": {"replicas": "1"}}


def test_environment_template_imports_component_params() -> None:
	src = environment_params_template('../../components/my "params".libsonnet')
	root = parse_source(src)
	assert isinstance(root, A.Local)
	bind = root.binds[0]
	assert bind.name == "params"
	assert isinstance(bind.body, A.Import)
	assert bind.body.file == '../../components/my "params".libsonnet'
