"""
Structural editing of component params in Jsonnet params documents.
"""

from __future__ import annotations

from .codec import (
	DEFAULT_LAYOUT,
	Params,
	RenderLayout,
	decode_literal,
	encode_params,
	fields_of,
	sanitize_component,
)
from .environment import (
	get_all_environment_params,
	get_environment_params,
	merge_param_maps,
	set_environment_params,
)
from .locator import find_components_object
from .store import (
	append_component,
	get_all_component_params,
	get_component_params,
	set_component_params,
)
from .templates import component_params_template, environment_params_template

__all__ = [
	"DEFAULT_LAYOUT",
	"Params",
	"RenderLayout",
	"append_component",
	"component_params_template",
	"decode_literal",
	"encode_params",
	"environment_params_template",
	"fields_of",
	"find_components_object",
	"get_all_component_params",
	"get_all_environment_params",
	"get_component_params",
	"get_environment_params",
	"merge_param_maps",
	"sanitize_component",
	"set_component_params",
	"set_environment_params",
]
