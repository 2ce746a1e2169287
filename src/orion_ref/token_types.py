"""
Token Types for the Orion Parser

Shared between the external lexer and the parser to avoid circular
dependencies.
"""

from typing import Any, Dict, Iterable, List, Mapping
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Literals
    STRING = auto()
    FLOAT = auto()
    NUMBER = auto()
    IDENT = auto()

    # Punctuation
    LPAR = auto()
    RPAR = auto()

    # Keywords
    DEF = auto()
    ENUM = auto()
    LAMBDA = auto()

    # Special
    EOF = auto()


# Reserved spellings, for the lexer
KEYWORDS: Dict[str, TT] = {
    'def': TT.DEF,
    'enum': TT.ENUM,
    'lambda': TT.LAMBDA,
}

LITERAL_KINDS = frozenset({TT.STRING, TT.FLOAT, TT.NUMBER, TT.IDENT})

_DESCRIPTIONS: Dict[TT, str] = {
    TT.STRING: "String",
    TT.FLOAT: "Float",
    TT.NUMBER: "Integer",
    TT.IDENT: "Identifier",
    TT.LPAR: "Opening Parenthesis",
    TT.RPAR: "Closing Parenthesis",
    TT.DEF: "Def",
    TT.ENUM: "Enum",
    TT.LAMBDA: "Lambda",
    TT.EOF: "End Of File",
}


def describe(token_type: TT) -> str:
    """Human-readable kind name used in diagnostics"""
    return _DESCRIPTIONS[token_type]


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"


def eof_token(after: Tok) -> Tok:
    """Sentinel placed one column past `after`."""
    return Tok(TT.EOF, None, after.line, after.column + 1)


def _coerce_payload(kind: TT, value: Any) -> Any:
    """Check and convert a literal payload, never losing information."""
    if kind in (TT.STRING, TT.IDENT):
        if not isinstance(value, str):
            raise TypeError(f"expected text, got {type(value).__name__}")
        return value

    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")

    if kind == TT.NUMBER:
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{value!r} is not an integer")
        if not isinstance(value, (int, float, str)):
            raise TypeError(f"expected a number, got {type(value).__name__}")
        return int(value)

    if not isinstance(value, (int, float, str)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return float(value)


def tokens_from_json(records: Iterable[Mapping[str, Any]]) -> List[Tok]:
    """
    Build a token list from decoded JSON records of the form
    {"type": "IDENT", "value": "x", "line": 1, "column": 2}.

    Malformed records raise ValueError. The list always ends with an EOF
    sentinel.
    """
    tokens: List[Tok] = []

    for index, record in enumerate(records):
        try:
            kind_name = record["type"]
        except (KeyError, TypeError):
            raise ValueError(f"token record {index} has no 'type'") from None

        try:
            kind = TT[kind_name]
        except (KeyError, TypeError):
            raise ValueError(f"unknown token type {kind_name!r} in record {index}") from None

        value = record.get("value")
        if kind in LITERAL_KINDS:
            if value is None:
                raise ValueError(f"{kind.name} token in record {index} needs a value")
            try:
                value = _coerce_payload(kind, value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"bad {kind.name} payload {value!r} in record {index}: {exc}") from None
        else:
            value = None

        try:
            line = int(record.get("line", 0))
            column = int(record.get("column", 0))
        except (TypeError, ValueError):
            raise ValueError(f"token record {index} has a bad position") from None

        tokens.append(Tok(kind, value, line, column))

    if not tokens:
        tokens.append(Tok(TT.EOF, None, 1, 1))
    elif tokens[-1].type != TT.EOF:
        tokens.append(eof_token(tokens[-1]))

    return tokens
