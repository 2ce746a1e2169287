"""
Recursive Descent Parser for Orion

Turns the token stream produced by the lexer into a list of top-level `Expr`
nodes for the evaluator. Single pass, one token of lookahead.

Grammar (one form per top-level expression):

    expr    := STRING | FLOAT | NUMBER | IDENT | '(' form
    form    := ')'                                  -> Unit
             | 'def' IDENT expr ')'                 -> Def
             | 'enum' IDENT variant* ')'            -> Enum
             | 'lambda' '(' IDENT* ')' expr ')'     -> curried Lambda
             | IDENT expr* ')'                      -> curried Call
             | '(' form expr* ')'                   -> inner form, applied to args
    variant := '(' IDENT IDENT* ')'

The input always ends with a sentinel token that is never parsed as content.
A closing ')' of def/enum/lambda/call forms may be left implicit when the
sentinel is reached.
"""

from typing import Optional, List

from .ast_nodes import Call, Def, Enum, Expr, Integer, Lambda, Single, String, Unit, Var
from .token_types import TT, Tok, describe

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else 0
        self.column = token.column if token else 0
        super().__init__(
            f"{self.line}:{self.column} | {message}" if token else message
        )

class ParserBug(RuntimeError):
    """Raised when the parser reaches a state it assumes impossible"""

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Orion.

    The cursor is an index into an immutable token list. The last token is
    the sentinel, so "one before the end" is the logical end of input.
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.output: List[Expr] = []

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def is_at_end(self) -> bool:
        """True once the cursor sits on the sentinel"""
        return self.pos + 1 >= len(self.tokens)

    def peek(self) -> Optional[Tok]:
        """Look at the current token without consuming it"""
        if self.is_at_end():
            return None
        return self.tokens[self.pos]

    def pop(self) -> Tok:
        """Consume the current token and move to the next"""
        if self.is_at_end():
            raise ParseError("Unfinished expression.", self._previous())
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def advance(self, expected: TT) -> Tok:
        """Consume a token of the expected type or raise error"""
        tok = self.pop()
        if tok.type != expected:
            raise ParseError(
                f"Expected {describe(expected)}, found {describe(tok.type)}.", tok
            )
        return tok

    def advance_many(self, expected: TT) -> List[Tok]:
        """Consume the longest run of tokens of the expected type"""
        run: List[Tok] = []
        while not self.is_at_end() and self.tokens[self.pos].type == expected:
            run.append(self.advance(expected))
        return run

    def check(self, token_type: TT) -> bool:
        """Check if the current token matches, never true at the end"""
        tok = self.peek()
        return tok is not None and tok.type == token_type

    def _previous(self) -> Tok:
        if not self.tokens:
            return Tok(TT.EOF, None, 0, 0)
        if self.pos > 0:
            return self.tokens[self.pos - 1]
        return self.tokens[0]

    def _close(self) -> None:
        """Consume a closing ')' unless the input already ended"""
        if not self.is_at_end():
            self.advance(TT.RPAR)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Expr]:
        """Parse every top-level form up to the sentinel"""
        while not self.is_at_end():
            self.output.append(self.parse_expr())

        return list(self.output)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Expr:
        """
        Parse one expression.

        Literals and identifiers stand alone; everything else is a
        parenthesized form.
        """
        root = self.pop()

        if root.type == TT.STRING:
            return String(root.value)
        if root.type == TT.FLOAT:
            return Single(root.value)
        if root.type == TT.NUMBER:
            return Integer(root.value)
        if root.type == TT.IDENT:
            return Var(root.value)
        if root.type == TT.LPAR:
            return self.parse_form()
        if root.type == TT.RPAR:
            raise ParseError("Unexpected closing parenthesis.", root)

        raise ParseError("Unexpected keyword.", root)

    def parse_form(self) -> Expr:
        """Parse what follows an opening parenthesis"""
        head = self.pop()

        if head.type == TT.LPAR:
            # ((form) args...): the inner form is the applied function
            return self.parse_application(self.parse_form())
        if head.type == TT.DEF:
            return self.parse_def()
        if head.type == TT.ENUM:
            return self.parse_enum()
        if head.type == TT.LAMBDA:
            return self.parse_lambda()
        if head.type == TT.IDENT:
            return self.parse_application(Var(head.value))
        if head.type == TT.RPAR:
            return Unit()

        raise ParseError(
            "Expected closing parenthesis, opening parenthesis or identifier, "
            f"found {describe(head.type)}.",
            head,
        )

    def parse_def(self) -> Def:
        """def NAME value )"""
        name = self._ident_name(self.advance(TT.IDENT))
        value = self.parse_expr()
        self._close()
        return Def(name, value)

    def parse_enum(self) -> Enum:
        """
        enum Name (Variant field*)* )

        Field names are consumed and only counted.
        """
        name_tok = self.advance(TT.IDENT)
        name = self._ident_name(name_tok)
        self._require_capitalized(name, name_tok, "Enum names have to start with a capital letter.")

        variants: List[str] = []
        arities: List[int] = []

        while not self.is_at_end() and not self.check(TT.RPAR):
            self.advance(TT.LPAR)

            variant_tok = self.advance(TT.IDENT)
            variant = self._ident_name(variant_tok)
            self._require_capitalized(
                variant, variant_tok, "Enum variant names have to start with a capital letter."
            )

            fields = self.advance_many(TT.IDENT)
            variants.append(variant)
            arities.append(len(fields))

            self.advance(TT.RPAR)

        self._close()
        return Enum(name, tuple(variants), tuple(arities))

    def parse_lambda(self) -> Expr:
        """lambda ( param* ) body )  ->  Lambda(p1, Lambda(p2, ... body))"""
        self.advance(TT.LPAR)
        params = [self._ident_name(tok) for tok in self.advance_many(TT.IDENT)]
        self.advance(TT.RPAR)

        body = self.parse_expr()
        for param in reversed(params):
            body = Lambda(param, body)

        self._close()
        return body

    def parse_application(self, func: Expr) -> Expr:
        """func arg* )  ->  Call(Call(func, a1), a2) ..."""
        args: List[Expr] = []
        while not self.is_at_end() and not self.check(TT.RPAR):
            args.append(self.parse_expr())

        self._close()

        for arg in args:
            func = Call(func, arg)
        return func

    # ========================================================================
    # Helpers
    # ========================================================================

    @staticmethod
    def _ident_name(tok: Tok) -> str:
        if tok.type != TT.IDENT or not isinstance(tok.value, str):
            raise ParserBug(f"expected an identifier token, got {tok!r}")
        return tok.value

    @staticmethod
    def _require_capitalized(name: str, tok: Tok, message: str) -> None:
        if not 'A' <= name[:1] <= 'Z':
            raise ParseError(message, tok)


def parse_tokens(tokens: List[Tok]) -> List[Expr]:
    """Parse a finished token list (sentinel included) to top-level forms"""
    return Parser(tokens).parse()


# ============================================================================
# Main - Debug Dump
# ============================================================================

if __name__ == '__main__':
    import json
    import sys
    import traceback

    from .ast_nodes import pretty
    from .token_types import tokens_from_json
    from .utils import debug_py_trace

    args = [arg for arg in sys.argv[1:] if not arg.startswith('--')]

    try:
        # Read a JSON token array from file or stdin
        if len(args) > 0 and args[0] != '-':
            with open(args[0], 'r', encoding='utf-8') as f:
                records = json.load(f)
        else:
            records = json.load(sys.stdin)

        program = parse_tokens(tokens_from_json(records))
        print(pretty(program), end='')
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        if debug_py_trace():
            traceback.print_exc()
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if debug_py_trace():
            traceback.print_exc()
        sys.exit(1)
