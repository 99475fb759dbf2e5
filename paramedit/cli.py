# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from paramedit.errors import ParamsError
from paramedit.params import (
	RenderLayout,
	append_component,
	component_params_template,
	environment_params_template,
	get_all_component_params,
	get_all_environment_params,
	get_component_params,
	get_environment_params,
	merge_param_maps,
	set_component_params,
	set_environment_params,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditOptions:
	path: Path
	environment: bool = False
	as_json: bool = False
	layout: RenderLayout = RenderLayout()


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="paramedit", description="Read and edit component params in Jsonnet params files")
	p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
	sub = p.add_subparsers(dest="cmd", required=True)

	def _common(cmd: argparse.ArgumentParser, *, env_flag: bool = True) -> None:
		cmd.add_argument("file", type=Path, help="Params file to read or edit")
		if env_flag:
			cmd.add_argument("--env", action="store_true", help="Treat the file as an environment override document")
		cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
		cmd.add_argument("--component-indent", type=int, default=4, help="Indent of generated component keys (default: 4)")
		cmd.add_argument("--param-indent", type=int, default=6, help="Indent of generated params (default: 6)")

	list_cmd = sub.add_parser("list", help="Print params of every component")
	_common(list_cmd)

	get_cmd = sub.add_parser("get", help="Print params of one component")
	_common(get_cmd)
	get_cmd.add_argument("component", help="Component name")

	set_cmd = sub.add_parser("set", help="Set params of an existing component (or add an environment override)")
	_common(set_cmd)
	set_cmd.add_argument("component", help="Component name")
	set_cmd.add_argument("assignments", nargs="+", metavar="KEY=VALUE", help="Param assignment; VALUE is Jsonnet literal text")

	append_cmd = sub.add_parser("append", help="Add params for a new component")
	_common(append_cmd, env_flag=False)
	append_cmd.add_argument("component", help="Component name")
	append_cmd.add_argument("assignments", nargs="*", metavar="KEY=VALUE", help="Param assignment; VALUE is Jsonnet literal text")

	effective = sub.add_parser("effective", help="Print component params with environment overrides applied")
	effective.add_argument("file", type=Path, help="Component params file")
	effective.add_argument("env_file", type=Path, help="Environment params file")
	effective.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

	init = sub.add_parser("init", help="Write a fresh params file")
	init.add_argument("file", type=Path, help="File to create (must not exist)")
	init.add_argument("--env", action="store_true", help="Write an environment override document")
	init.add_argument(
		"--component-params",
		default="../../components/params.libsonnet",
		help="Import path of the component params file (environment documents only)",
	)
	return p


def _options(args: argparse.Namespace) -> EditOptions:
	return EditOptions(
		path=args.file,
		environment=bool(getattr(args, "env", False)),
		as_json=bool(args.json),
		layout=RenderLayout(component_indent=args.component_indent, param_indent=args.param_indent),
	)


def parse_assignments(assignments: List[str]) -> Dict[str, str]:
	params: Dict[str, str] = {}
	for item in assignments:
		key, sep, value = item.partition("=")
		if not sep or not key:
			raise ValueError(f"expected KEY=VALUE, got: {item}")
		params[key] = value
	return params


def write_atomic(path: Path, text: str) -> None:
	tmp = path.with_name(path.name + f".tmp.{os.getpid()}")
	tmp.write_text(text)
	os.replace(tmp, path)


def _print_params(obj: object, as_json: bool) -> None:
	if as_json:
		print(json.dumps(obj, sort_keys=True, separators=(",", ":")))
	else:
		print(json.dumps(obj, indent=2, sort_keys=True))


def _run(args: argparse.Namespace) -> int:
	if args.cmd == "init":
		if args.file.exists():
			raise ValueError(f"refusing to overwrite existing file: {args.file}")
		text = environment_params_template(args.component_params) if args.env else component_params_template()
		write_atomic(args.file, text)
		return 0

	if args.cmd == "effective":
		base = get_all_component_params(args.file.read_text())
		overrides = get_all_environment_params(args.env_file.read_text())
		_print_params(merge_param_maps(base, overrides), bool(args.json))
		return 0

	opts = _options(args)
	source = opts.path.read_text()

	if args.cmd == "list":
		reader = get_all_environment_params if opts.environment else get_all_component_params
		_print_params(reader(source), opts.as_json)
		return 0

	if args.cmd == "get":
		getter = get_environment_params if opts.environment else get_component_params
		params, _loc = getter(args.component, source)
		_print_params(params, opts.as_json)
		return 0

	params = parse_assignments(args.assignments)
	if args.cmd == "set":
		setter = set_environment_params if opts.environment else set_component_params
		updated = setter(args.component, source, params, layout=opts.layout)
	else:
		updated = append_component(args.component, source, params, layout=opts.layout)
	write_atomic(opts.path, updated)
	logger.info("updated %s", opts.path)
	return 0


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)
	try:
		return _run(args)
	except ParamsError as err:
		print(f"error: {err.format_human()}", file=sys.stderr)
		return 1
	except (OSError, ValueError) as err:
		print(f"error: {err}", file=sys.stderr)
		return 1


if __name__ == "__main__":
	raise SystemExit(main())
