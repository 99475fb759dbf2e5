# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Location-keyed text splicing.

All helpers address text by 1-based (line, column) pairs as reported by the
parser and return a new string; the input is never modified. Nothing here
knows about the node model, so ranges can be synthesized freely in tests.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import List

from paramedit.parser.ast import Location, LocationRange


def _line_starts(source: str) -> List[int]:
	starts = [0]
	for idx, ch in enumerate(source):
		if ch == "\n":
			starts.append(idx + 1)
	return starts


def offset_of(source: str, loc: Location) -> int:
	"""Translate a 1-based (line, column) into a string offset."""
	starts = _line_starts(source)
	if loc.line < 1 or loc.line > len(starts):
		raise IndexError(f"line {loc.line} out of range (1..{len(starts)})")
	offset = starts[loc.line - 1] + loc.column - 1
	line_end = starts[loc.line] - 1 if loc.line < len(starts) else len(source)
	if loc.column < 1 or offset > line_end:
		raise IndexError(f"column {loc.column} out of range on line {loc.line}")
	return offset


def line_text(source: str, line: int) -> str:
	return source.split("\n")[line - 1]


def line_indent(source: str, line: int) -> str:
	text = line_text(source, line)
	return text[: len(text) - len(text.lstrip(" \t"))]


def end_of_line(source: str, line: int) -> Location:
	return Location(line, len(line_text(source, line)) + 1)


def replace_range(source: str, begin: Location, end: Location, text: str) -> str:
	"""Replace the characters in [begin, end) with `text`."""
	start = offset_of(source, begin)
	stop = offset_of(source, end)
	if stop < start:
		raise ValueError(f"range end {end} precedes begin {begin}")
	return source[:start] + text + source[stop:]


def insert_at(source: str, loc: Location, text: str) -> str:
	return replace_range(source, loc, loc, text)


def insert_before_line(source: str, line: int, text: str) -> str:
	"""Insert `text` as one or more whole lines ahead of `line`."""
	return insert_at(source, Location(line, 1), text + "\n")


def only_whitespace_before(source: str, loc: Location) -> bool:
	return not line_text(source, loc.line)[: loc.column - 1].strip()


def only_comment_after(source: str, loc: Location) -> bool:
	"""True when the rest of the line from `loc` holds nothing but a line comment."""
	rest = line_text(source, loc.line)[loc.column - 1 :].strip()
	return not rest or rest.startswith(("//", "#"))


def location_of(source: str, offset: int) -> Location:
	starts = _line_starts(source)
	line = bisect_right(starts, offset)
	return Location(line, offset - starts[line - 1] + 1)


def skip_blanks_back(source: str, loc: Location) -> Location:
	"""Move `loc` back over spaces and tabs, staying on its line."""
	offset = offset_of(source, loc)
	while offset > 0 and source[offset - 1] in " \t":
		offset -= 1
	return location_of(source, offset)


def skip_closing_parens(source: str, loc: Location) -> Location:
	"""
	Move `loc` past any `)` that closes a parenthesized value ending there.

	Parenthesized expressions report the span of their inner expression, so
	the text after a value's end may still hold its closing parens.
	"""
	offset = offset_of(source, loc)
	best = offset
	probe = offset
	while probe < len(source) and source[probe] in " \t\r\n)":
		probe += 1
		if source[probe - 1] == ")":
			best = probe
	return location_of(source, best)


def rewrite_object_body(source: str, loc: LocationRange, body: str) -> str:
	"""
	Replace the contents between the braces of the object spanning `loc`.

	For an object laid out over several lines, the opening and closing lines
	are kept along with any comment trailing the `{`. A brace sharing its
	line with other text is cut at the brace itself, and the closing brace is
	re-indented to the opening line.
	"""
	open_brace = loc.begin
	close_brace = Location(loc.end.line, loc.end.column - 1)
	after_open = Location(open_brace.line, open_brace.column + 1)
	multiline = close_brace.line > open_brace.line

	if multiline and only_comment_after(source, after_open):
		start = end_of_line(source, open_brace.line)
	else:
		start = after_open
	if multiline and only_whitespace_before(source, close_brace):
		stop = Location(close_brace.line, 1)
		text = body
	else:
		stop = close_brace
		text = body + line_indent(source, open_brace.line)
	return replace_range(source, start, stop, text)


__all__ = [
	"end_of_line",
	"insert_at",
	"insert_before_line",
	"line_indent",
	"line_text",
	"location_of",
	"offset_of",
	"only_comment_after",
	"only_whitespace_before",
	"replace_range",
	"rewrite_object_body",
	"skip_blanks_back",
	"skip_closing_parens",
]
