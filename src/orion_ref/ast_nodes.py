"""AST node types produced by the parser and consumed by the evaluator.

Every node is a frozen dataclass, so a tree is immutable and hashable once
built. Multi-argument calls and lambdas are curried chains of single-argument
`Call`/`Lambda` nodes; `uncurry_call`/`uncurry_lambda` give the flat view back.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias


def _render_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


@dataclass(frozen=True)
class Var:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Call:
    """Single-argument application."""

    func: 'Expr'
    arg: 'Expr'

    def __str__(self) -> str:
        head, args = uncurry_call(self)
        return "(" + " ".join(str(part) for part in [head, *args]) + ")"


@dataclass(frozen=True)
class Lambda:
    """Single-parameter abstraction."""

    param: str
    body: 'Expr'

    def __str__(self) -> str:
        params, body = uncurry_lambda(self)
        return f"(lambda ({' '.join(params)}) {body})"


@dataclass(frozen=True)
class Integer:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Single:
    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class Boolean:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String:
    value: str

    def __str__(self) -> str:
        return _render_string(self.value)


@dataclass(frozen=True)
class Def:
    name: str
    value: 'Expr'

    def __str__(self) -> str:
        return f"(def {self.name} {self.value})"


@dataclass(frozen=True)
class Enum:
    """Algebraic type declaration.

    `variants[i]` declares `arities[i]` fields. Field names are not kept.
    """

    name: str
    variants: Tuple[str, ...]
    arities: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.variants) != len(self.arities):
            raise ValueError(
                f"enum {self.name}: {len(self.variants)} variants but {len(self.arities)} arities"
            )

    def __str__(self) -> str:
        parts = [f"(enum {self.name}"]
        for variant, arity in zip(self.variants, self.arities):
            parts.append("(" + " ".join([variant] + ["_"] * arity) + ")")
        return " ".join(parts) + ")"


@dataclass(frozen=True)
class Unit:
    def __str__(self) -> str:
        return "()"


Expr: TypeAlias = Union[Var, Call, Lambda, Integer, Single, Boolean, String, Def, Enum, Unit]


def uncurry_call(expr: Expr) -> Tuple[Expr, List[Expr]]:
    """Split a left-nested Call chain into (function, [args...])."""
    args: List[Expr] = []
    while isinstance(expr, Call):
        args.append(expr.arg)
        expr = expr.func
    args.reverse()
    return expr, args


def uncurry_lambda(expr: Expr) -> Tuple[List[str], Expr]:
    """Split a right-nested Lambda chain into ([params...], body)."""
    params: List[str] = []
    while isinstance(expr, Lambda):
        params.append(expr.param)
        expr = expr.body
    return params, expr


def to_tree(expr: Expr) -> Tree:
    """Convert an Expr into a lark Tree, mostly for `.pretty()` dumps."""
    match expr:
        case Var(name=name):
            return Tree('var', [Token('IDENT', name)])
        case Call(func=func, arg=arg):
            return Tree('call', [to_tree(func), to_tree(arg)])
        case Lambda(param=param, body=body):
            return Tree('lambda', [Token('IDENT', param), to_tree(body)])
        case Integer(value=value):
            return Tree('integer', [Token('NUMBER', str(value))])
        case Single(value=value):
            return Tree('single', [Token('FLOAT', repr(value))])
        case Boolean(value=value):
            return Tree('boolean', [Token('BOOL', str(expr))])
        case String(value=value):
            return Tree('string', [Token('STRING', value)])
        case Def(name=name, value=value):
            return Tree('def', [Token('IDENT', name), to_tree(value)])
        case Enum(name=name, variants=variants, arities=arities):
            children: List[Union[Tree, Token]] = [Token('IDENT', name)]
            for variant, arity in zip(variants, arities):
                children.append(Tree('variant', [Token('IDENT', variant), Token('ARITY', str(arity))]))
            return Tree('enum', children)
        case Unit():
            return Tree('unit', [])
        case _:
            raise TypeError(f"not an Expr: {expr!r}")


def pretty(exprs: Iterable[Expr]) -> str:
    """Pretty-print a parsed program, one tree per top-level form."""
    return "".join(to_tree(expr).pretty() for expr in exprs)
