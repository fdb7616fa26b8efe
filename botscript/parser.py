"""Recursive-descent parser for BotScript.

Consumes the token list produced by :func:`botscript.lexer.tokenize` and
builds a :class:`botscript.ast.Program`. The first malformed construct
raises :class:`ParseError`; there is no recovery and no partial tree.
Binary operators are left-associative and built iteratively, one method
per precedence level:

    or < and < equality < relational < additive < multiplicative < unary
"""

from __future__ import annotations

from typing import List, Optional, Union

from .ast import (
    Node, Program,
    SayCommand, GotoCommand, AttackCommand, DigCommand,
    PlaceCommand, EquipCommand, DropCommand, WaitCommand,
    create_assignment, create_binary_expr, create_boolean_literal,
    create_command_statement, create_expression_statement, create_if_statement,
    create_number_literal, create_program, create_repeat_statement,
    create_string_literal, create_unary_expr, create_variable_declaration,
    create_variable_reference,
)
from .errors import ParseError
from .lexer import Token, TokenType, tokenize

# tokens that can begin an expression; decides whether an optional
# command argument is present
EXPRESSION_START = frozenset({
    TokenType.NUMBER,
    TokenType.STRING,
    TokenType.IDENTIFIER,
    TokenType.TRUE,
    TokenType.FALSE,
    TokenType.LPAREN,
    TokenType.NOT,
    TokenType.MINUS,
})

COMMAND_TOKENS = frozenset({
    TokenType.SAY, TokenType.GOTO, TokenType.ATTACK, TokenType.DIG,
    TokenType.PLACE, TokenType.EQUIP, TokenType.DROP, TokenType.WAIT,
})


def describe(token: Token) -> str:
    if token.type == TokenType.EOF:
        return 'end of input'
    if token.type == TokenType.NEWLINE:
        return 'newline'
    if token.type == TokenType.INVALID:
        return f"invalid token '{token.value}'"
    if token.type == TokenType.STRING:
        return f"string \"{token.value}\""
    return f"'{token.value}'"


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            last = tokens[-1] if tokens else None
            eof = Token(TokenType.EOF, '', last.line if last else 1, last.column if last else 1)
            tokens = list(tokens) + [eof]
        self.tokens = tokens
        self.pos = 0

    # Token helpers

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.peek()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, expected: Union[TokenType, List[TokenType]]) -> bool:
        token = self.peek()
        if isinstance(expected, list):
            return token.type in expected
        return token.type == expected

    def consume(self, expected: TokenType, what: str) -> Token:
        token = self.peek()
        if token.type != expected:
            raise self.error(token, f"Expected {what}, got {describe(token)}")
        return self.advance()

    def error(self, token: Token, message: str) -> ParseError:
        return ParseError(message, token.line, token.column)

    def skip_newlines(self) -> None:
        while self.match(TokenType.NEWLINE):
            self.advance()

    def can_parse_expression(self) -> bool:
        return self.peek().type in EXPRESSION_START

    # Statements

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while not self.match(TokenType.EOF):
            if self.match(TokenType.NEWLINE):
                self.advance()
                continue
            statements.append(self.parse_statement())
            self.expect_statement_end(in_block=False)
        return create_program(statements)

    def expect_statement_end(self, in_block: bool) -> None:
        token = self.peek()
        if token.type in (TokenType.NEWLINE, TokenType.EOF):
            return
        if in_block and token.type == TokenType.RBRACE:
            return
        raise self.error(token, f"Expected newline after statement, got {describe(token)}")

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == TokenType.VAR:
            return self.parse_var_decl()
        if token.type == TokenType.SET:
            return self.parse_assignment()
        if token.type == TokenType.IF:
            return self.parse_if_stmt()
        if token.type == TokenType.REPEAT:
            return self.parse_repeat_stmt()
        if token.type in COMMAND_TOKENS:
            command = self.parse_command()
            return create_command_statement(command, token.line, token.column)
        expr = self.parse_expression()
        return create_expression_statement(expr, token.line, token.column)

    def parse_var_decl(self) -> Node:
        keyword = self.consume(TokenType.VAR, "'var'")
        name = self.consume(TokenType.IDENTIFIER, 'variable name after var')
        self.consume(TokenType.ASSIGN, f"'=' after variable name '{name.value}'")
        value = self.parse_expression()
        return create_variable_declaration(name.value, value, keyword.line, keyword.column)

    def parse_assignment(self) -> Node:
        keyword = self.consume(TokenType.SET, "'set'")
        name = self.consume(TokenType.IDENTIFIER, 'variable name after set')
        self.consume(TokenType.ASSIGN, f"'=' after variable name '{name.value}'")
        value = self.parse_expression()
        return create_assignment(name.value, value, keyword.line, keyword.column)

    def parse_block(self, owner: str) -> List[Node]:
        self.consume(TokenType.LBRACE, f"'{{' after {owner}")
        statements: List[Node] = []
        while True:
            token = self.peek()
            if token.type == TokenType.NEWLINE:
                self.advance()
                continue
            if token.type == TokenType.RBRACE:
                self.advance()
                return statements
            if token.type == TokenType.EOF:
                raise self.error(token, f"Expected '}}' to close {owner} block, got end of input")
            statements.append(self.parse_statement())
            self.expect_statement_end(in_block=True)

    def parse_if_stmt(self) -> Node:
        keyword = self.consume(TokenType.IF, "'if'")
        condition = self.parse_expression()
        then_block = self.parse_block('if condition')
        else_block: Optional[List[Node]] = None
        # else may sit on a later line than the closing brace
        offset = 0
        while self.peek(offset).type == TokenType.NEWLINE:
            offset += 1
        if self.peek(offset).type == TokenType.ELSE:
            self.skip_newlines()
            self.advance()
            else_block = self.parse_block('else')
        return create_if_statement(condition, then_block, else_block, keyword.line, keyword.column)

    def parse_repeat_stmt(self) -> Node:
        keyword = self.consume(TokenType.REPEAT, "'repeat'")
        count = self.parse_expression()
        body = self.parse_block('repeat count')
        return create_repeat_statement(count, body, keyword.line, keyword.column)

    # Commands

    def parse_command(self) -> Node:
        token = self.advance()
        pos = {'line': token.line, 'column': token.column}
        kind = token.type
        if kind == TokenType.SAY:
            return SayCommand(self.parse_argument('say', 'message'), **pos)
        if kind == TokenType.GOTO:
            x = self.parse_argument('goto', 'x coordinate')
            y = self.parse_argument('goto', 'y coordinate')
            z = self.parse_argument('goto', 'z coordinate')
            return GotoCommand(x, y, z, **pos)
        if kind == TokenType.ATTACK:
            return AttackCommand(self.parse_argument('attack', 'target'), **pos)
        if kind == TokenType.DIG:
            block_type = self.parse_expression() if self.can_parse_expression() else None
            return DigCommand(block_type, **pos)
        if kind == TokenType.PLACE:
            item = self.parse_argument('place', 'item')
            if not self.can_parse_expression():
                return PlaceCommand(item, **pos)
            x = self.parse_argument('place', 'x coordinate')
            y = self.parse_argument('place', 'y coordinate')
            z = self.parse_argument('place', 'z coordinate')
            return PlaceCommand(item, x, y, z, **pos)
        if kind == TokenType.EQUIP:
            return EquipCommand(self.parse_argument('equip', 'item'), **pos)
        if kind == TokenType.DROP:
            item = self.parse_argument('drop', 'item')
            count = self.parse_expression() if self.can_parse_expression() else None
            return DropCommand(item, count, **pos)
        if kind == TokenType.WAIT:
            return WaitCommand(self.parse_argument('wait', 'seconds'), **pos)
        raise self.error(token, f"Expected command, got {describe(token)}")

    def parse_argument(self, command: str, what: str) -> Node:
        if not self.can_parse_expression():
            token = self.peek()
            raise self.error(token, f"Expected {what} for {command}, got {describe(token)}")
        return self.parse_expression()

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_logic_or()

    def parse_logic_or(self) -> Node:
        node = self.parse_logic_and()
        while self.match(TokenType.OR):
            op_token = self.advance()
            right = self.parse_logic_and()
            node = create_binary_expr(node, op_token.value, right, op_token.line, op_token.column)
        return node

    def parse_logic_and(self) -> Node:
        node = self.parse_equality()
        while self.match(TokenType.AND):
            op_token = self.advance()
            right = self.parse_equality()
            node = create_binary_expr(node, op_token.value, right, op_token.line, op_token.column)
        return node

    def parse_equality(self) -> Node:
        node = self.parse_relational()
        while self.match([TokenType.EQUALS, TokenType.NOT_EQUALS]):
            op_token = self.advance()
            right = self.parse_relational()
            node = create_binary_expr(node, op_token.value, right, op_token.line, op_token.column)
        return node

    def parse_relational(self) -> Node:
        node = self.parse_additive()
        while self.match([TokenType.LESS, TokenType.GREATER, TokenType.LESS_EQUAL, TokenType.GREATER_EQUAL]):
            op_token = self.advance()
            right = self.parse_additive()
            node = create_binary_expr(node, op_token.value, right, op_token.line, op_token.column)
        return node

    def parse_additive(self) -> Node:
        node = self.parse_multiplicative()
        while self.match([TokenType.PLUS, TokenType.MINUS]):
            op_token = self.advance()
            right = self.parse_multiplicative()
            node = create_binary_expr(node, op_token.value, right, op_token.line, op_token.column)
        return node

    def parse_multiplicative(self) -> Node:
        node = self.parse_unary()
        while self.match([TokenType.MULTIPLY, TokenType.DIVIDE]):
            op_token = self.advance()
            right = self.parse_unary()
            node = create_binary_expr(node, op_token.value, right, op_token.line, op_token.column)
        return node

    def parse_unary(self) -> Node:
        if self.match([TokenType.NOT, TokenType.MINUS]):
            op_token = self.advance()
            operand = self.parse_unary()
            return create_unary_expr(op_token.value, operand, op_token.line, op_token.column)
        return self.parse_primary()

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == TokenType.NUMBER:
            self.advance()
            return create_number_literal(token.value, token.line, token.column)
        if token.type == TokenType.STRING:
            self.advance()
            return create_string_literal(token.value, token.line, token.column)
        if token.type == TokenType.TRUE:
            self.advance()
            return create_boolean_literal(True, token.line, token.column)
        if token.type == TokenType.FALSE:
            self.advance()
            return create_boolean_literal(False, token.line, token.column)
        if token.type == TokenType.IDENTIFIER:
            self.advance()
            return create_variable_reference(token.value, token.line, token.column)
        if token.type == TokenType.LPAREN:
            self.advance()
            expr = self.parse_expression()
            self.consume(TokenType.RPAREN, "')' after expression")
            return expr
        raise self.error(token, f"Expected expression, got {describe(token)}")


def parse(tokens: List[Token]) -> Program:
    """Parse a token list into a Program."""
    return Parser(tokens).parse_program()


def parse_program(source: str) -> Program:
    """Tokenize and parse BotScript source text."""
    return parse(tokenize(source))
