from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from paramedit.errors import ParseError

from .ast import (
    NO_LOCATION,
    Apply,
    ApplyBrace,
    Array,
    ArrayComp,
    Assert,
    Binary,
    Bind,
    Conditional,
    Dollar,
    Error,
    Field,
    FieldKind,
    ForSpec,
    Function,
    IfSpec,
    Import,
    ImportStr,
    Index,
    InSuper,
    LiteralBoolean,
    LiteralNull,
    LiteralNumber,
    LiteralString,
    Local,
    Location,
    LocationRange,
    NamedArg,
    Node,
    Object,
    ObjectAssert,
    ObjectComp,
    Param,
    Self,
    Slice,
    StringKind,
    SuperIndex,
    Unary,
    Var,
    Visibility,
)

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    start="start",
    propagate_positions=True,
    maybe_placeholders=False,
)

_BINARY_OPS = {
    "op_or": "||",
    "op_and": "&&",
    "op_bitor": "|",
    "op_bitxor": "^",
    "op_bitand": "&",
    "op_eq": "==",
    "op_ne": "!=",
    "op_lt": "<",
    "op_le": "<=",
    "op_gt": ">",
    "op_ge": ">=",
    "op_in": "in",
    "op_shl": "<<",
    "op_shr": ">>",
    "op_add": "+",
    "op_sub": "-",
    "op_mul": "*",
    "op_div": "/",
    "op_mod": "%",
}

_UNARY_OPS = {
    "op_neg": "-",
    "op_pos": "+",
    "op_not": "!",
    "op_bitnot": "~",
}

_VISIBILITY = {
    "inherit": Visibility.INHERIT,
    "hidden": Visibility.HIDDEN,
    "visible": Visibility.VISIBLE,
}

_SIMPLE_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def parse_source(source: str, name: str = "<snippet>") -> Node:
    """
    Parse a Jsonnet document into the node model.

    Syntax errors from lark, and constructs the grammar accepts but the
    language does not (a comprehension with two bodies, say), surface as
    `ParseError` with the offending location.
    """
    try:
        tree = _PARSER.parse(source)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", -1)
        column = getattr(exc, "column", -1)
        summary = str(exc).strip().splitlines()[0] if str(exc).strip() else type(exc).__name__
        loc = Location(line, column) if line is not None and line > 0 else None
        raise ParseError(f"{name}: {summary}", loc=loc) from exc
    node = _build_expr(tree)
    logger.debug("parsed %s (%d characters) into %s", name, len(source), type(node).__name__)
    return node


def _name(tree: Tree) -> str:
    return str(tree.data)


def _loc(tree: Tree) -> LocationRange:
    meta = tree.meta
    if getattr(meta, "empty", True):
        return NO_LOCATION
    return LocationRange(
        begin=Location(meta.line, meta.column),
        end=Location(meta.end_line, meta.end_column),
    )


def _token_start(token: Token) -> Location:
    return Location(token.line, token.column)


def _loc_from_token(token: Token) -> LocationRange:
    return LocationRange(
        begin=_token_start(token),
        end=Location(token.end_line, token.end_column),
    )


def _trees(tree: Tree) -> List[Tree]:
    return [child for child in tree.children if isinstance(child, Tree)]


def _tokens(tree: Tree, kind: str) -> List[Token]:
    return [child for child in tree.children if isinstance(child, Token) and child.type == kind]


def _malformed(message: str, tree: Tree) -> ParseError:
    return ParseError(message, loc=_loc(tree).begin)


# ---------------------------------------------------------------------------
# Expressions


def _build_expr(node) -> Node:
    if not isinstance(node, Tree):
        raise TypeError(f"Unexpected node type: {type(node)}")
    kind = _name(node)
    if kind in _BINARY_OPS:
        left, right = _trees(node)
        return Binary(loc=_loc(node), op=_BINARY_OPS[kind], left=_build_expr(left), right=_build_expr(right))
    if kind in _UNARY_OPS:
        (operand,) = _trees(node)
        return Unary(loc=_loc(node), op=_UNARY_OPS[kind], expr=_build_expr(operand))
    builder = _EXPR_BUILDERS.get(kind)
    if builder is None:
        raise _malformed(f"unsupported expression node: {kind}", node)
    return builder(node)


def _build_null(tree: Tree) -> Node:
    return LiteralNull(loc=_loc(tree))


def _build_true(tree: Tree) -> Node:
    return LiteralBoolean(loc=_loc(tree), value=True)


def _build_false(tree: Tree) -> Node:
    return LiteralBoolean(loc=_loc(tree), value=False)


def _build_self(tree: Tree) -> Node:
    return Self(loc=_loc(tree))


def _build_dollar(tree: Tree) -> Node:
    return Dollar(loc=_loc(tree))


def _build_string(tree: Tree) -> Node:
    token = tree.children[0]
    value, kind = decode_string_token(token.value, _token_start(token))
    return LiteralString(loc=_loc_from_token(token), value=value, kind=kind, raw=token.value)


def _build_number(tree: Tree) -> Node:
    token = tree.children[0]
    value = float(token.value)
    if math.isinf(value):
        raise ParseError(f"number out of range: {token.value}", loc=_token_start(token))
    return LiteralNumber(loc=_loc_from_token(token), value=value, raw=token.value)


def _build_var(tree: Tree) -> Node:
    token = tree.children[0]
    return Var(loc=_loc_from_token(token), name=token.value)


def _build_in_super(tree: Tree) -> Node:
    (index,) = _trees(tree)
    return InSuper(loc=_loc(tree), index=_build_expr(index))


def _build_index_id(tree: Tree) -> Node:
    target = tree.children[0]
    (name,) = _tokens(tree, "NAME")
    return Index(loc=_loc(tree), target=_build_expr(target), id=name.value)


def _build_index(tree: Tree) -> Node:
    target, index = _trees(tree)
    return Index(loc=_loc(tree), target=_build_expr(target), index=_build_expr(index))


def _build_slice(tree: Tree) -> Node:
    children = _trees(tree)
    target = _build_expr(children[0])
    parts: Dict[str, Node] = {}
    for child in children[1:]:
        parts[_name(child)] = _build_expr(_trees(child)[0])
    return Slice(
        loc=_loc(tree),
        target=target,
        begin_index=parts.get("slice_begin"),
        end_index=parts.get("slice_end"),
        step=parts.get("slice_step"),
    )


def _build_apply(tree: Tree) -> Node:
    children = _trees(tree)
    target = _build_expr(children[0])
    positional: List[Node] = []
    named: List[NamedArg] = []
    tailstrict = False
    for child in children[1:]:
        kind = _name(child)
        if kind == "tailstrict":
            tailstrict = True
            continue
        for arg in _trees(child):
            if _name(arg) == "named_arg":
                (name,) = _tokens(arg, "NAME")
                named.append(NamedArg(name=name.value, arg=_build_expr(_trees(arg)[0])))
            else:
                if named:
                    raise _malformed("positional argument after named argument", arg)
                positional.append(_build_expr(arg))
    return Apply(loc=_loc(tree), target=target, positional=positional, named=named, tailstrict=tailstrict)


def _build_apply_brace(tree: Tree) -> Node:
    left, right = _trees(tree)
    return ApplyBrace(loc=_loc(tree), left=_build_expr(left), right=_build_object(right))


def _build_super_index_id(tree: Tree) -> Node:
    (name,) = _tokens(tree, "NAME")
    return SuperIndex(loc=_loc(tree), id=name.value)


def _build_super_index(tree: Tree) -> Node:
    (index,) = _trees(tree)
    return SuperIndex(loc=_loc(tree), index=_build_expr(index))


def _build_import(tree: Tree) -> Node:
    (token,) = _tokens(tree, "STRING")
    value, _kind = decode_string_token(token.value, _token_start(token))
    return Import(loc=_loc(tree), file=value)


def _build_importstr(tree: Tree) -> Node:
    (token,) = _tokens(tree, "STRING")
    value, _kind = decode_string_token(token.value, _token_start(token))
    return ImportStr(loc=_loc(tree), file=value)


def _build_local(tree: Tree) -> Node:
    children = _trees(tree)
    binds = [_build_bind(child) for child in children[:-1]]
    return Local(loc=_loc(tree), binds=binds, body=_build_expr(children[-1]))


def _build_if(tree: Tree) -> Node:
    children = [_build_expr(child) for child in _trees(tree)]
    branch_false = children[2] if len(children) > 2 else None
    return Conditional(loc=_loc(tree), cond=children[0], branch_true=children[1], branch_false=branch_false)


def _build_function(tree: Tree) -> Node:
    children = _trees(tree)
    params: List[Param] = []
    if len(children) > 1:
        params = _build_params(children[0])
    return Function(loc=_loc(tree), params=params, body=_build_expr(children[-1]))


def _build_assert(tree: Tree) -> Node:
    children = [_build_expr(child) for child in _trees(tree)]
    message = children[1] if len(children) > 2 else None
    return Assert(loc=_loc(tree), cond=children[0], message=message, rest=children[-1])


def _build_error(tree: Tree) -> Node:
    (expr,) = _trees(tree)
    return Error(loc=_loc(tree), expr=_build_expr(expr))


# ---------------------------------------------------------------------------
# Objects and arrays


def _object_loc(tree: Tree) -> LocationRange:
    (lbrace,) = _tokens(tree, "LBRACE")
    (rbrace,) = _tokens(tree, "RBRACE")
    return LocationRange(
        begin=Location(lbrace.line, lbrace.column),
        end=Location(rbrace.end_line, rbrace.end_column),
    )


def _build_object(tree: Tree) -> Node:
    loc = _object_loc(tree)
    fields: List[Field] = []
    binds: List[Bind] = []
    asserts: List[ObjectAssert] = []
    trailing_comma = False
    spec: Optional[ForSpec] = None
    for child in _trees(tree):
        kind = _name(child)
        if kind == "trailing_comma":
            trailing_comma = True
        elif kind == "comp_spec":
            spec = _build_comp_spec(child)
        elif kind == "obj_local":
            binds.append(_build_bind(_trees(child)[0]))
        elif kind == "obj_assert":
            parts = [_build_expr(part) for part in _trees(child)]
            asserts.append(ObjectAssert(loc=_loc(child), cond=parts[0], message=parts[1] if len(parts) > 1 else None))
        elif kind in ("field", "method_field"):
            fields.append(_build_field(child))
        else:
            raise _malformed(f"unexpected object member: {kind}", child)
    if spec is None:
        return Object(loc=loc, fields=fields, locals=binds, asserts=asserts, trailing_comma=trailing_comma)
    if asserts:
        raise ParseError("object comprehension cannot have asserts", loc=loc.begin)
    if len(fields) != 1:
        raise ParseError("object comprehension must have exactly one field", loc=loc.begin)
    if fields[0].kind is not FieldKind.EXPR:
        raise ParseError("object comprehension field must use a computed [key]", loc=loc.begin)
    return ObjectComp(loc=loc, fields=fields, spec=spec, locals=binds)


def _build_field(tree: Tree) -> Field:
    children = _trees(tree)
    key_tree = children[0]
    key_kind = _name(key_tree)
    key: Optional[str] = None
    key_expr: Optional[Node] = None
    if key_kind == "name_key":
        kind = FieldKind.ID
        key = key_tree.children[0].value
    elif key_kind == "string_key":
        kind = FieldKind.STR
        token = key_tree.children[0]
        key, string_kind = decode_string_token(token.value, _token_start(token))
        key_expr = LiteralString(loc=_loc_from_token(token), value=key, kind=string_kind, raw=token.value)
    else:
        kind = FieldKind.EXPR
        key_expr = _build_expr(_trees(key_tree)[0])

    plus = False
    params: Optional[List[Param]] = None
    visibility = Visibility.INHERIT
    for child in children[1:-1]:
        name = _name(child)
        if name == "plus":
            plus = True
        elif name == "params":
            params = _build_params(child)
        elif name in _VISIBILITY:
            visibility = _VISIBILITY[name]
    value = _build_expr(children[-1])

    method: Optional[Function] = None
    if _name(tree) == "method_field":
        method = Function(loc=_loc(tree), params=params or [], body=value)
        value = method
    return Field(
        loc=_loc(tree),
        kind=kind,
        value=value,
        key=key,
        key_expr=key_expr,
        visibility=visibility,
        plus=plus,
        method=method,
    )


def _build_array(tree: Tree) -> Node:
    elements: List[Node] = []
    spec: Optional[ForSpec] = None
    for child in _trees(tree):
        kind = _name(child)
        if kind == "trailing_comma":
            continue
        if kind == "comp_spec":
            spec = _build_comp_spec(child)
            continue
        elements.append(_build_expr(child))
    if spec is None:
        return Array(loc=_loc(tree), elements=elements)
    if len(elements) != 1:
        raise _malformed("array comprehension must have exactly one element", tree)
    return ArrayComp(loc=_loc(tree), body=elements[0], spec=spec)


def _build_comp_spec(tree: Tree) -> ForSpec:
    current: Optional[ForSpec] = None
    for child in _trees(tree):
        if _name(child) == "for_spec":
            (var,) = _tokens(child, "NAME")
            current = ForSpec(var=var.value, expr=_build_expr(_trees(child)[0]), outer=current)
        else:
            assert current is not None
            current.conditions.append(IfSpec(expr=_build_expr(_trees(child)[0])))
    assert current is not None
    return current


# ---------------------------------------------------------------------------
# Bindings


def _build_bind(tree: Tree) -> Bind:
    (name,) = _tokens(tree, "NAME")
    children = _trees(tree)
    body = _build_expr(children[-1])
    if _name(tree) == "function_bind":
        params = _build_params(children[0]) if len(children) > 1 else []
        fun = Function(loc=_loc(tree), params=params, body=body)
        return Bind(loc=_loc(tree), name=name.value, body=fun, fun=fun)
    return Bind(loc=_loc(tree), name=name.value, body=body)


def _build_params(tree: Tree) -> List[Param]:
    params: List[Param] = []
    for child in _trees(tree):
        (name,) = _tokens(child, "NAME")
        defaults = _trees(child)
        params.append(Param(name=name.value, default=_build_expr(defaults[0]) if defaults else None))
    return params


# ---------------------------------------------------------------------------
# String literals


def decode_string_token(raw: str, loc: Optional[Location] = None) -> tuple[str, StringKind]:
    """
    Return the decoded value and the quoting style of a STRING token.

    `loc` is where the token starts; it is attached to any `ParseError`
    raised for a malformed escape.
    """
    if raw.startswith("|||"):
        return _decode_text_block(raw), StringKind.BLOCK
    if raw.startswith('@"'):
        return raw[2:-1].replace('""', '"'), StringKind.VERBATIM_DOUBLE
    if raw.startswith("@'"):
        return raw[2:-1].replace("''", "'"), StringKind.VERBATIM_SINGLE
    kind = StringKind.DOUBLE if raw.startswith('"') else StringKind.SINGLE
    return _unescape(raw[1:-1], loc), kind


_HEX4 = re.compile(r"[0-9a-fA-F]{4}")


def _hex4(body: str, start: int, loc: Optional[Location]) -> int:
    digits = body[start : start + 4]
    if not _HEX4.fullmatch(digits):
        raise ParseError(f"malformed unicode escape \\u{digits}", loc=loc)
    return int(digits, 16)


def _unescape(body: str, loc: Optional[Location] = None) -> str:
    out: List[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        esc = body[i + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 2
        elif esc == "u":
            code = _hex4(body, i + 2, loc)
            i += 6
            # Surrogate pairs arrive as two consecutive \u escapes.
            if 0xD800 <= code < 0xDC00 and body[i : i + 2] == "\\u":
                low = _hex4(body, i + 2, loc)
                if 0xDC00 <= low < 0xE000:
                    code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                    i += 6
            out.append(chr(code))
        else:
            raise ParseError(f"unknown escape sequence \\{esc}", loc=loc)
    return "".join(out)


def _decode_text_block(raw: str) -> str:
    lines = raw.split("\n")[1:-1]
    indent = ""
    for line in lines:
        if line.strip():
            indent = line[: len(line) - len(line.lstrip(" \t"))]
            break
    stripped = [line[len(indent) :] if line.startswith(indent) else line.strip(" \t") for line in lines]
    return "\n".join(stripped) + "\n"


_EXPR_BUILDERS: Dict[str, Callable[[Tree], Node]] = {
    "null": _build_null,
    "true": _build_true,
    "false": _build_false,
    "self": _build_self,
    "dollar": _build_dollar,
    "string": _build_string,
    "number": _build_number,
    "var": _build_var,
    "in_super": _build_in_super,
    "index_id": _build_index_id,
    "index": _build_index,
    "slice": _build_slice,
    "apply": _build_apply,
    "apply_brace": _build_apply_brace,
    "super_index_id": _build_super_index_id,
    "super_index": _build_super_index,
    "import_expr": _build_import,
    "importstr_expr": _build_importstr,
    "local_expr": _build_local,
    "if_expr": _build_if,
    "function_expr": _build_function,
    "assert_expr": _build_assert,
    "error_expr": _build_error,
    "object": _build_object,
    "array": _build_array,
}
