# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from paramedit.errors import NotFoundError, ParamsError, StructureError
from paramedit.parser.ast import Location


def test_format_human_with_and_without_location() -> None:
	err = StructureError("components must be an object", loc=Location(3, 5))
	assert err.format_human() == "[structure] components must be an object (line 3, column 5)"
	assert str(err) == err.format_human()
	assert NotFoundError("gone").format_human() == "[not-found] gone"


def test_to_dict() -> None:
	err = NotFoundError("could not find component identifier 'x'", component="x")
	assert err.to_dict() == {
		"reason_code": "not-found",
		"message": "could not find component identifier 'x'",
		"component": "x",
		"line": None,
		"column": None,
	}


def test_errors_share_base_class() -> None:
	err = StructureError("bad")
	assert isinstance(err, ParamsError)
	assert err.args == ("bad",)
