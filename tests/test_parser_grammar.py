from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import pytest

from tests.support.harness import parse_source
from orion_ref.ast_nodes import (
    Call,
    Def,
    Enum,
    Expr,
    Integer,
    Lambda,
    Single,
    String,
    Unit,
    Var,
)


@dataclass(frozen=True)
class Case:
    """Source text and the program it must parse to."""

    name: str
    source: str
    expected: Tuple[Expr, ...]


LITERAL_CASES: List[Case] = [
    Case("integer", "42", (Integer(42),)),
    Case("integer-negative", "-7", (Integer(-7),)),
    Case("float", "3.5", (Single(3.5),)),
    Case("string", '"hello world"', (String("hello world"),)),
    Case("string-empty", '""', (String(""),)),
    Case("ident", "x", (Var("x"),)),
    Case("ident-symbolic", "+", (Var("+"),)),
    Case("unit", "()", (Unit(),)),
]

FORM_CASES: List[Case] = [
    Case("def-integer", "(def x 5)", (Def("x", Integer(5)),)),
    Case("def-string", '(def greeting "hi")', (Def("greeting", String("hi")),)),
    Case(
        "def-call",
        "(def y (+ x 1))",
        (Def("y", Call(Call(Var("+"), Var("x")), Integer(1))),),
    ),
    Case("call-no-args", "(f)", (Var("f"),)),
    Case("call-one-arg", "(f a)", (Call(Var("f"), Var("a")),)),
    Case(
        "call-left-nested",
        "(f a b c)",
        (Call(Call(Call(Var("f"), Var("a")), Var("b")), Var("c")),),
    ),
    Case(
        "call-nested-arg",
        "(f (g 1) 2)",
        (Call(Call(Var("f"), Call(Var("g"), Integer(1))), Integer(2)),),
    ),
    Case("call-unit-arg", "(f ())", (Call(Var("f"), Unit()),)),
    Case("lambda-one", "(lambda (x) x)", (Lambda("x", Var("x")),)),
    Case(
        "lambda-right-nested",
        "(lambda (x y) x)",
        (Lambda("x", Lambda("y", Var("x"))),),
    ),
    Case("lambda-no-params", "(lambda () 1)", (Integer(1),)),
    Case(
        "lambda-applied",
        "((lambda (x y) x) 1 2)",
        (Call(Call(Lambda("x", Lambda("y", Var("x"))), Integer(1)), Integer(2)),),
    ),
    Case("double-open", "((f))", (Var("f"),)),
    Case("triple-open", "(((f)))", (Var("f"),)),
    Case(
        "double-open-call",
        "((f a) b)",
        (Call(Call(Var("f"), Var("a")), Var("b")),),
    ),
    Case(
        "enum-nullary",
        "(enum Color (Red) (Green) (Blue))",
        (Enum("Color", ("Red", "Green", "Blue"), (0, 0, 0)),),
    ),
    Case("enum-fields", "(enum Pair (Mk a b))", (Enum("Pair", ("Mk",), (2,)),)),
    Case(
        "enum-mixed",
        "(enum Option (Some value) (None))",
        (Enum("Option", ("Some", "None"), (1, 0)),),
    ),
    Case("enum-empty", "(enum Never)", (Enum("Never", (), ()),)),
]

PROGRAM_CASES: List[Case] = [
    Case("empty", "", ()),
    Case(
        "several-forms",
        "(def x 5) (f x) 7",
        (Def("x", Integer(5)), Call(Var("f"), Var("x")), Integer(7)),
    ),
    Case(
        "multi-line",
        "(def id\n  (lambda (x) x))\n(id 1)",
        (Def("id", Lambda("x", Var("x"))), Call(Var("id"), Integer(1))),
    ),
]

# A missing final ')' is tolerated when the input ends.
UNCLOSED_AT_END_CASES: List[Case] = [
    Case("def", "(def x 5", (Def("x", Integer(5)),)),
    Case("call", "(f a b", (Call(Call(Var("f"), Var("a")), Var("b")),)),
    Case("lambda", "(lambda (x) x", (Lambda("x", Var("x")),)),
    Case("enum", "(enum Color (Red)", (Enum("Color", ("Red",), (0,)),)),
    Case("nested", "(f (g 1", (Call(Var("f"), Call(Var("g"), Integer(1))),)),
]


def _params(cases: List[Case]) -> list:
    return [pytest.param(case, id=case.name) for case in cases]


@pytest.mark.parametrize("case", _params(LITERAL_CASES))
def test_literals(case: Case) -> None:
    assert tuple(parse_source(case.source)) == case.expected


@pytest.mark.parametrize("case", _params(FORM_CASES))
def test_forms(case: Case) -> None:
    assert tuple(parse_source(case.source)) == case.expected


@pytest.mark.parametrize("case", _params(PROGRAM_CASES))
def test_programs(case: Case) -> None:
    assert tuple(parse_source(case.source)) == case.expected


@pytest.mark.parametrize("case", _params(UNCLOSED_AT_END_CASES))
def test_closing_paren_optional_at_end(case: Case) -> None:
    assert tuple(parse_source(case.source)) == case.expected


def test_double_open_matches_single_open() -> None:
    assert parse_source("((f))") == parse_source("(f)")


def test_enum_keeps_only_field_counts() -> None:
    (enum,) = parse_source("(enum Shape (Circle radius) (Rect width height))")

    assert isinstance(enum, Enum)
    assert enum.variants == ("Circle", "Rect")
    assert enum.arities == (1, 2)
    assert "radius" not in repr(enum)


def test_lambda_rightmost_param_is_innermost() -> None:
    (outer,) = parse_source("(lambda (a b c) b)")

    assert isinstance(outer, Lambda)
    assert outer.param == "a"
    assert isinstance(outer.body, Lambda)
    assert outer.body.param == "b"
    assert isinstance(outer.body.body, Lambda)
    assert outer.body.body.param == "c"
    assert outer.body.body.body == Var("b")
