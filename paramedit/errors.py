# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error taxonomy for the params editor.

Every failure is a `ParamsError` carrying a stable `reason_code` so callers
(the CLI, tests, an environment manager) can branch on the kind of failure
without parsing messages. Operations never return half-edited text: an error
aborts the whole call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
	from paramedit.parser.ast import Location


@dataclass(eq=False)
class ParamsError(Exception):
	message: str
	component: str | None = None
	loc: Location | None = None

	reason_code: ClassVar[str] = "params"

	def __post_init__(self) -> None:
		super().__init__(self.message)

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"component": self.component,
			"line": self.loc.line if self.loc is not None else None,
			"column": self.loc.column if self.loc is not None else None,
		}

	def format_human(self) -> str:
		text = f"[{self.reason_code}] {self.message}"
		if self.loc is not None:
			text += f" (line {self.loc.line}, column {self.loc.column})"
		return text


class ParseError(ParamsError):
	"""Malformed source text."""

	reason_code = "parse"


class StructureError(ParamsError):
	"""Missing or ill-typed `components` object, component value, or field key."""

	reason_code = "structure"


class UnsupportedValueError(ParamsError):
	"""A parameter value that is not a scalar literal."""

	reason_code = "unsupported-value"


class UnsupportedNodeError(ParamsError):
	reason_code = "unsupported-node"


class NotFoundError(ParamsError):
	reason_code = "not-found"


class DuplicateComponentError(ParamsError):
	reason_code = "duplicate-component"


__all__ = [
	"ParamsError",
	"ParseError",
	"StructureError",
	"UnsupportedValueError",
	"UnsupportedNodeError",
	"NotFoundError",
	"DuplicateComponentError",
]
