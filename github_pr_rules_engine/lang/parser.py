"""Tokenizer and recursive descent parser for the rule language.

Grammar::

    expr    := or
    or      := and ("||" and)*
    and     := compare ("&&" compare)*
    compare := unary (("==" | "!=" | "<" | "<=" | ">" | ">=") unary)?
    unary   := "!" unary | primary
    primary := INT | STRING | "true" | "false"
             | "[" [expr ("," expr)*] "]"
             | "$" IDENT ["(" [expr ("," expr)*] ")"]
             | "(" expr ")"
"""

import re
from typing import NamedTuple

from github_pr_rules_engine.errors import ParseError

from .ast import (
    EQUALITY_OPERATORS,
    ORDER_OPERATORS,
    ArrayLiteral,
    BinaryOp,
    BoolConst,
    Expr,
    FunctionCall,
    IntConst,
    StringConst,
    UnaryOp,
    Variable,
)

TOKEN_SPECIFICATION = [
    ("WS", r"\s+"),
    ("INT", r"\d+"),
    ("STRING", r'"(?:[^"\\]|\\.)*"'),
    ("NAME", r"\$[A-Za-z_][A-Za-z0-9_]*"),
    ("BOOL", r"(?:true|false)(?![A-Za-z0-9_])"),
    ("OP", r"==|!=|<=|>=|&&|\|\||[<>!]"),
    ("PUNCT", r"[()\[\],]"),
    ("MISMATCH", r"."),
]
TOKEN_REGEX = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in TOKEN_SPECIFICATION), re.DOTALL)

STRING_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}


class Token(NamedTuple):
    kind: str
    text: str


class _SyntaxError(Exception):
    pass


def tokenize(code: str) -> list[Token]:
    """Split expression text into tokens, whitespace dropped."""
    tokens = []
    for match in TOKEN_REGEX.finditer(code):
        kind = match.lastgroup
        if kind == "WS":
            continue
        if kind == "MISMATCH":
            raise _SyntaxError(f"unexpected character {match.group()!r}")
        tokens.append(Token(kind, match.group()))
    return tokens


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r"\\(.)", lambda m: STRING_ESCAPES.get(m.group(1), m.group(1)), body, flags=re.DOTALL)


class Parser:
    """Builds an expression tree from a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def _peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise _SyntaxError("unexpected end of input")
        self.pos += 1
        return token

    def _accept(self, text: str) -> bool:
        token = self._peek()
        if token is not None and token.kind in ("OP", "PUNCT") and token.text == text:
            self.pos += 1
            return True
        return False

    def _expect(self, text: str) -> None:
        if not self._accept(text):
            raise _SyntaxError(f"expected {text!r}")

    def parse(self) -> Expr:
        expr = self._parse_or()
        if self._peek() is not None:
            raise _SyntaxError(f"unexpected token {self._peek().text!r}")
        return expr

    def _parse_or(self) -> Expr:
        left = self._parse_and()
        while self._accept("||"):
            left = BinaryOp("||", left, self._parse_and())
        return left

    def _parse_and(self) -> Expr:
        left = self._parse_compare()
        while self._accept("&&"):
            left = BinaryOp("&&", left, self._parse_compare())
        return left

    def _parse_compare(self) -> Expr:
        left = self._parse_unary()
        for op in EQUALITY_OPERATORS + ORDER_OPERATORS:
            if self._accept(op):
                return BinaryOp(op, left, self._parse_unary())
        return left

    def _parse_unary(self) -> Expr:
        if self._accept("!"):
            return UnaryOp("!", self._parse_unary())
        return self._parse_primary()

    def _parse_list(self, closing: str) -> tuple[Expr, ...]:
        items = []
        if self._accept(closing):
            return ()
        while True:
            items.append(self._parse_or())
            if self._accept(closing):
                return tuple(items)
            self._expect(",")

    def _parse_primary(self) -> Expr:
        token = self._next()

        if token.kind == "INT":
            return IntConst(int(token.text))
        if token.kind == "STRING":
            return StringConst(_unquote(token.text))
        if token.kind == "BOOL":
            return BoolConst(token.text == "true")
        if token.kind == "NAME":
            name = token.text[1:]
            if self._accept("("):
                return FunctionCall(name, self._parse_list(")"))
            return Variable(name)
        if token.kind == "PUNCT" and token.text == "[":
            return ArrayLiteral(self._parse_list("]"))
        if token.kind == "PUNCT" and token.text == "(":
            expr = self._parse_or()
            self._expect(")")
            return expr

        raise _SyntaxError(f"unexpected token {token.text!r}")


def parse(code: str) -> Expr:
    """Parse expression text into a tree.

    Args:
    ----
        code: Expression text

    Returns:
    -------
        Root of the expression tree

    Raises:
    ------
        ParseError: If the text is not a well formed expression

    """
    try:
        return Parser(tokenize(code)).parse()
    except _SyntaxError as e:
        raise ParseError(code) from e
