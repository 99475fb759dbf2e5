from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


@dataclass(frozen=True)
class Location:
    line: int
    column: int


@dataclass(frozen=True)
class LocationRange:
    """Source span of a node. Lines and columns are 1-based; `end` is exclusive."""

    begin: Location
    end: Location


NO_LOCATION = LocationRange(Location(0, 0), Location(0, 0))


class StringKind(Enum):
    DOUBLE = "double"
    SINGLE = "single"
    VERBATIM_DOUBLE = "verbatim_double"
    VERBATIM_SINGLE = "verbatim_single"
    BLOCK = "block"


class FieldKind(Enum):
    ID = "id"
    STR = "str"
    EXPR = "expr"


class Visibility(Enum):
    INHERIT = ":"
    HIDDEN = "::"
    VISIBLE = ":::"


@dataclass
class Param:
    name: str
    default: Optional["Node"] = None


@dataclass
class Bind:
    loc: LocationRange
    name: str
    body: "Node"
    fun: Optional["Function"] = None


@dataclass
class NamedArg:
    name: str
    arg: "Node"


@dataclass
class IfSpec:
    expr: "Node"


@dataclass
class ForSpec:
    var: str
    expr: "Node"
    conditions: List[IfSpec] = field(default_factory=list)
    outer: Optional["ForSpec"] = None


@dataclass
class Field:
    loc: LocationRange
    kind: FieldKind
    value: "Node"
    key: Optional[str] = None
    key_expr: Optional["Node"] = None
    visibility: Visibility = Visibility.INHERIT
    plus: bool = False
    method: Optional["Function"] = None


@dataclass
class ObjectAssert:
    loc: LocationRange
    cond: "Node"
    message: Optional["Node"] = None


@dataclass
class Object:
    loc: LocationRange
    fields: List[Field] = field(default_factory=list)
    locals: List[Bind] = field(default_factory=list)
    asserts: List[ObjectAssert] = field(default_factory=list)
    trailing_comma: bool = False


@dataclass
class DesugaredField:
    name: "Node"
    body: "Node"
    plus: bool = False


@dataclass
class DesugaredObject:
    loc: LocationRange
    asserts: List["Node"] = field(default_factory=list)
    fields: List[DesugaredField] = field(default_factory=list)


@dataclass
class ObjectComp:
    loc: LocationRange
    fields: List[Field]
    spec: ForSpec
    locals: List[Bind] = field(default_factory=list)


@dataclass
class Array:
    loc: LocationRange
    elements: List["Node"] = field(default_factory=list)


@dataclass
class ArrayComp:
    loc: LocationRange
    body: "Node"
    spec: ForSpec


@dataclass
class Apply:
    loc: LocationRange
    target: "Node"
    positional: List["Node"] = field(default_factory=list)
    named: List[NamedArg] = field(default_factory=list)
    tailstrict: bool = False


@dataclass
class ApplyBrace:
    loc: LocationRange
    left: "Node"
    right: "Node"


@dataclass
class Binary:
    loc: LocationRange
    op: str
    left: "Node"
    right: "Node"


@dataclass
class Unary:
    loc: LocationRange
    op: str
    expr: "Node"


@dataclass
class Conditional:
    loc: LocationRange
    cond: "Node"
    branch_true: "Node"
    branch_false: Optional["Node"] = None


@dataclass
class Local:
    loc: LocationRange
    binds: List[Bind]
    body: "Node"


@dataclass
class Function:
    loc: LocationRange
    params: List[Param]
    body: "Node"


@dataclass
class Index:
    loc: LocationRange
    target: "Node"
    index: Optional["Node"] = None
    id: Optional[str] = None


@dataclass
class Slice:
    loc: LocationRange
    target: "Node"
    begin_index: Optional["Node"] = None
    end_index: Optional["Node"] = None
    step: Optional["Node"] = None


@dataclass
class SuperIndex:
    loc: LocationRange
    index: Optional["Node"] = None
    id: Optional[str] = None


@dataclass
class InSuper:
    loc: LocationRange
    index: "Node"


@dataclass
class Assert:
    loc: LocationRange
    cond: "Node"
    message: Optional["Node"]
    rest: "Node"


@dataclass
class Error:
    loc: LocationRange
    expr: "Node"


@dataclass
class Import:
    loc: LocationRange
    file: str


@dataclass
class ImportStr:
    loc: LocationRange
    file: str


@dataclass
class Self:
    loc: LocationRange


@dataclass
class Dollar:
    loc: LocationRange


@dataclass
class Var:
    loc: LocationRange
    name: str


@dataclass
class LiteralString:
    loc: LocationRange
    value: str
    kind: StringKind = StringKind.DOUBLE
    raw: str = ""


@dataclass
class LiteralNumber:
    loc: LocationRange
    value: float
    raw: str = ""


@dataclass
class LiteralBoolean:
    loc: LocationRange
    value: bool


@dataclass
class LiteralNull:
    loc: LocationRange


Node = Union[
    Object,
    DesugaredObject,
    ObjectComp,
    Array,
    ArrayComp,
    Apply,
    ApplyBrace,
    Binary,
    Unary,
    Conditional,
    Local,
    Function,
    Index,
    Slice,
    SuperIndex,
    InSuper,
    Assert,
    Error,
    Import,
    ImportStr,
    Self,
    Dollar,
    Var,
    LiteralString,
    LiteralNumber,
    LiteralBoolean,
    LiteralNull,
]
