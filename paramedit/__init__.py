"""
paramedit: read and rewrite component parameters inside Jsonnet params
documents without disturbing the surrounding text.
"""

from __future__ import annotations

from .errors import (
	DuplicateComponentError,
	NotFoundError,
	ParamsError,
	ParseError,
	StructureError,
	UnsupportedNodeError,
	UnsupportedValueError,
)
from .parser import parse_source
from .params import (
	RenderLayout,
	append_component,
	decode_literal,
	encode_params,
	fields_of,
	find_components_object,
	get_all_component_params,
	get_all_environment_params,
	get_component_params,
	get_environment_params,
	merge_param_maps,
	set_component_params,
	set_environment_params,
)

__all__ = [
	"DuplicateComponentError",
	"NotFoundError",
	"ParamsError",
	"ParseError",
	"RenderLayout",
	"StructureError",
	"UnsupportedNodeError",
	"UnsupportedValueError",
	"append_component",
	"decode_literal",
	"encode_params",
	"fields_of",
	"find_components_object",
	"get_all_component_params",
	"get_all_environment_params",
	"get_component_params",
	"get_environment_params",
	"merge_param_maps",
	"parse_source",
	"set_component_params",
	"set_environment_params",
]
