"""Tokenizer for BotScript source text.

The lexer is total: it never raises. Characters it cannot classify, and
string literals that are not closed on the line they start, come out as
INVALID tokens and are rejected by the parser with a positioned error.
Newlines are significant and produce NEWLINE tokens; every stream ends
with a single EOF token.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class TokenType(str, Enum):
    IDENTIFIER = 'IDENTIFIER'
    NUMBER = 'NUMBER'
    STRING = 'STRING'

    # keywords
    VAR = 'VAR'
    SET = 'SET'
    IF = 'IF'
    ELSE = 'ELSE'
    REPEAT = 'REPEAT'
    TRUE = 'TRUE'
    FALSE = 'FALSE'
    AND = 'AND'
    OR = 'OR'
    NOT = 'NOT'
    SAY = 'SAY'
    GOTO = 'GOTO'
    ATTACK = 'ATTACK'
    DIG = 'DIG'
    PLACE = 'PLACE'
    EQUIP = 'EQUIP'
    DROP = 'DROP'
    WAIT = 'WAIT'

    # operators
    ASSIGN = '='
    EQUALS = '=='
    NOT_EQUALS = '!='
    LESS = '<'
    GREATER = '>'
    LESS_EQUAL = '<='
    GREATER_EQUAL = '>='
    PLUS = '+'
    MINUS = '-'
    MULTIPLY = '*'
    DIVIDE = '/'

    # delimiters
    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'

    NEWLINE = 'NEWLINE'
    EOF = 'EOF'
    INVALID = 'INVALID'


KEYWORDS: Dict[str, TokenType] = {
    name: TokenType[name]
    for name in (
        'VAR', 'SET', 'IF', 'ELSE', 'REPEAT', 'TRUE', 'FALSE', 'AND', 'OR', 'NOT',
        'SAY', 'GOTO', 'ATTACK', 'DIG', 'PLACE', 'EQUIP', 'DROP', 'WAIT',
    )
}

TWO_CHAR_OPERATORS: Dict[str, TokenType] = {
    '==': TokenType.EQUALS,
    '!=': TokenType.NOT_EQUALS,
    '<=': TokenType.LESS_EQUAL,
    '>=': TokenType.GREATER_EQUAL,
}

SINGLE_CHAR_OPERATORS: Dict[str, TokenType] = {
    '=': TokenType.ASSIGN,
    '<': TokenType.LESS,
    '>': TokenType.GREATER,
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MULTIPLY,
    '/': TokenType.DIVIDE,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column} {self.type.name} {self.value!r}"


def _is_ident_start(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def _is_ident_char(c: str) -> bool:
    return _is_ident_start(c) or _is_digit(c)


def _is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def tokenize(source: str) -> List[Token]:
    """Convert source text into a list of tokens ending with EOF.

    Keywords are case-insensitive and are normalized to their upper-case
    spelling; identifiers keep their case. String values are stored without
    the surrounding quotes. Lines and columns are 1-based and point at the
    first character of each token.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    while i < length:
        c = source[i]

        if c in ' \t\r':
            i += 1
            col += 1
            continue

        if c == '\n':
            tokens.append(Token(TokenType.NEWLINE, '\n', line, col))
            i += 1
            line += 1
            col = 1
            continue

        # comment runs to end of line; the newline stays a token
        if c == '#':
            while i < length and source[i] != '\n':
                i += 1
                col += 1
            continue

        if _is_ident_start(c):
            start_i, start_col = i, col
            while i < length and _is_ident_char(source[i]):
                i += 1
                col += 1
            word = source[start_i:i]
            keyword = KEYWORDS.get(word.upper())
            if keyword is not None:
                tokens.append(Token(keyword, keyword.value, line, start_col))
            else:
                tokens.append(Token(TokenType.IDENTIFIER, word, line, start_col))
            continue

        if _is_digit(c):
            start_i, start_col = i, col
            while i < length and _is_digit(source[i]):
                i += 1
                col += 1
            # a '.' belongs to the number only when a digit follows it
            if i + 1 < length and source[i] == '.' and _is_digit(source[i + 1]):
                i += 1
                col += 1
                while i < length and _is_digit(source[i]):
                    i += 1
                    col += 1
            tokens.append(Token(TokenType.NUMBER, source[start_i:i], line, start_col))
            continue

        if c == '"':
            start_i, start_col = i, col
            i += 1
            col += 1
            while i < length and source[i] != '"' and source[i] != '\n':
                i += 1
                col += 1
            if i < length and source[i] == '"':
                tokens.append(Token(TokenType.STRING, source[start_i + 1:i], line, start_col))
                i += 1
                col += 1
            else:
                tokens.append(Token(TokenType.INVALID, source[start_i:i], line, start_col))
            continue

        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPERATORS:
            tokens.append(Token(TWO_CHAR_OPERATORS[pair], pair, line, col))
            i += 2
            col += 2
            continue

        if c in SINGLE_CHAR_OPERATORS:
            tokens.append(Token(SINGLE_CHAR_OPERATORS[c], c, line, col))
            i += 1
            col += 1
            continue

        tokens.append(Token(TokenType.INVALID, c, line, col))
        i += 1
        col += 1

    tokens.append(Token(TokenType.EOF, '', line, col))
    return tokens
