"""Abstract Syntax Tree (AST) definitions for BotScript.

Every node records the line and column of the token it was built from.
Nodes are plain data; the builder functions at the bottom of the module
are what the parser calls to stamp positions and convert token text into
node values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class BinaryOperator(str, Enum):
    PLUS = '+'
    MINUS = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    EQUALS = '=='
    NOT_EQUALS = '!='
    LESS = '<'
    GREATER = '>'
    LESS_EQUAL = '<='
    GREATER_EQUAL = '>='
    AND = 'and'
    OR = 'or'


class UnaryOperator(str, Enum):
    NOT = 'not'
    MINUS = '-'


@dataclass
class Node:
    """Base class for all AST nodes."""
    line: int = field(default=0, kw_only=True)
    column: int = field(default=0, kw_only=True)


# Expressions

@dataclass
class NumberLiteral(Node):
    value: float


@dataclass
class StringLiteral(Node):
    value: str


@dataclass
class BooleanLiteral(Node):
    value: bool


@dataclass
class VariableReference(Node):
    name: str


@dataclass
class BinaryExpr(Node):
    left: Node
    op: BinaryOperator
    right: Node


@dataclass
class UnaryExpr(Node):
    op: UnaryOperator
    operand: Node


# Command payloads

@dataclass
class SayCommand(Node):
    message: Node


@dataclass
class GotoCommand(Node):
    x: Node
    y: Node
    z: Node


@dataclass
class AttackCommand(Node):
    target: Node


@dataclass
class DigCommand(Node):
    block_type: Optional[Node] = None


@dataclass
class PlaceCommand(Node):
    item: Node
    x: Optional[Node] = None
    y: Optional[Node] = None
    z: Optional[Node] = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None and self.z is not None


@dataclass
class EquipCommand(Node):
    item: Node


@dataclass
class DropCommand(Node):
    item: Node
    count: Optional[Node] = None


@dataclass
class WaitCommand(Node):
    seconds: Node


# Statements

@dataclass
class VariableDeclaration(Node):
    name: str
    initializer: Node


@dataclass
class Assignment(Node):
    target: str
    value: Node


@dataclass
class IfStatement(Node):
    condition: Node
    then_block: List[Node]
    else_block: Optional[List[Node]] = None


@dataclass
class RepeatStatement(Node):
    count: Node
    body: List[Node]


@dataclass
class CommandStatement(Node):
    command: Node


@dataclass
class ExpressionStatement(Node):
    expression: Node


@dataclass
class Program(Node):
    statements: List[Node]


COMMAND_NODES = (
    SayCommand, GotoCommand, AttackCommand, DigCommand,
    PlaceCommand, EquipCommand, DropCommand, WaitCommand,
)


###############################################################################
# Builders
###############################################################################


def create_number_literal(text: str, line: int, column: int) -> NumberLiteral:
    return NumberLiteral(float(text), line=line, column=column)


def create_string_literal(value: str, line: int, column: int) -> StringLiteral:
    return StringLiteral(value, line=line, column=column)


def create_boolean_literal(value: bool, line: int, column: int) -> BooleanLiteral:
    return BooleanLiteral(value, line=line, column=column)


def create_variable_reference(name: str, line: int, column: int) -> VariableReference:
    return VariableReference(name, line=line, column=column)


def create_binary_expr(left: Node, op: str, right: Node, line: int, column: int) -> BinaryExpr:
    """Build a binary node; ``op`` is the operator text as it appeared in source."""
    return BinaryExpr(left, BinaryOperator(op.lower()), right, line=line, column=column)


def create_unary_expr(op: str, operand: Node, line: int, column: int) -> UnaryExpr:
    return UnaryExpr(UnaryOperator(op.lower()), operand, line=line, column=column)


def create_variable_declaration(name: str, initializer: Node, line: int, column: int) -> VariableDeclaration:
    return VariableDeclaration(name, initializer, line=line, column=column)


def create_assignment(target: str, value: Node, line: int, column: int) -> Assignment:
    return Assignment(target, value, line=line, column=column)


def create_if_statement(condition: Node, then_block: List[Node], else_block: Optional[List[Node]],
                        line: int, column: int) -> IfStatement:
    return IfStatement(condition, then_block, else_block, line=line, column=column)


def create_repeat_statement(count: Node, body: List[Node], line: int, column: int) -> RepeatStatement:
    return RepeatStatement(count, body, line=line, column=column)


def create_command_statement(command: Node, line: int, column: int) -> CommandStatement:
    return CommandStatement(command, line=line, column=column)


def create_expression_statement(expression: Node, line: int, column: int) -> ExpressionStatement:
    return ExpressionStatement(expression, line=line, column=column)


def create_program(statements: List[Node]) -> Program:
    return Program(statements, line=1, column=1)
