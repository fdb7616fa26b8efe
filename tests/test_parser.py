import pytest

from botscript.ast import (
    Assignment, BinaryExpr, BinaryOperator, CommandStatement, DigCommand,
    DropCommand, ExpressionStatement, GotoCommand, IfStatement, NumberLiteral,
    PlaceCommand, RepeatStatement, SayCommand, UnaryExpr, UnaryOperator,
    VariableDeclaration, VariableReference,
)
from botscript.errors import ParseError
from botscript.parser import parse_program


def expr(source):
    program = parse_program(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def command(source):
    stmt = parse_program(source).statements[0]
    assert isinstance(stmt, CommandStatement)
    return stmt.command


def test_multiplication_binds_tighter_than_addition():
    node = expr('2 + 3 * 4')
    assert node.op == BinaryOperator.PLUS
    assert node.left == NumberLiteral(2.0, line=1, column=1)
    assert isinstance(node.right, BinaryExpr)
    assert node.right.op == BinaryOperator.MULTIPLY


def test_binary_operators_are_left_associative():
    node = expr('10 - 3 - 2')
    assert node.op == BinaryOperator.MINUS
    assert isinstance(node.left, BinaryExpr)
    assert node.left.op == BinaryOperator.MINUS
    assert node.right.value == 2.0


def test_logical_precedence():
    node = expr('a < 1 or b == 2 and c')
    assert node.op == BinaryOperator.OR
    assert node.left.op == BinaryOperator.LESS
    assert node.right.op == BinaryOperator.AND
    assert node.right.left.op == BinaryOperator.EQUALS
    assert isinstance(node.right.right, VariableReference)


def test_not_applies_before_and():
    node = expr('not a and b')
    assert node.op == BinaryOperator.AND
    assert isinstance(node.left, UnaryExpr)
    assert node.left.op == UnaryOperator.NOT


def test_parentheses_override_precedence():
    node = expr('(2 + 3) * 4')
    assert node.op == BinaryOperator.MULTIPLY
    assert node.left.op == BinaryOperator.PLUS


def test_nested_unary_minus():
    node = expr('- -5')
    assert node.op == UnaryOperator.MINUS
    assert node.operand.op == UnaryOperator.MINUS
    assert node.operand.operand.value == 5.0


def test_variable_declaration_and_assignment():
    program = parse_program('var speed = 3\nset speed = speed + 1')
    decl, assign = program.statements
    assert isinstance(decl, VariableDeclaration)
    assert decl.name == 'speed'
    assert (decl.line, decl.column) == (1, 1)
    assert isinstance(assign, Assignment)
    assert assign.target == 'speed'
    assert (assign.line, assign.column) == (2, 1)


def test_if_else_with_else_on_next_line():
    program = parse_program('if x > 1 {\n  say "big"\n}\nelse {\n  say "small"\n}\nsay "done"')
    assert len(program.statements) == 2
    stmt = program.statements[0]
    assert isinstance(stmt, IfStatement)
    assert len(stmt.then_block) == 1
    assert len(stmt.else_block) == 1


def test_if_without_else():
    stmt = parse_program('if true { say "x" }').statements[0]
    assert stmt.else_block is None
    assert isinstance(stmt.then_block[0].command, SayCommand)


def test_repeat_body():
    stmt = parse_program('repeat 3 {\n  say "a"\n  say "b"\n}').statements[0]
    assert isinstance(stmt, RepeatStatement)
    assert stmt.count.value == 3.0
    assert len(stmt.body) == 2


def test_goto_takes_three_expressions():
    node = command('goto x + 1 64 z')
    assert isinstance(node, GotoCommand)
    assert node.x.op == BinaryOperator.PLUS
    assert node.y.value == 64.0
    assert node.z.name == 'z'


def test_place_coordinates_are_optional():
    bare = command('place "stone"')
    assert isinstance(bare, PlaceCommand)
    assert not bare.has_position
    full = command('place "stone" 1 2 3')
    assert full.has_position


def test_drop_and_dig_optional_arguments():
    assert command('drop "dirt"').count is None
    assert command('drop "dirt" 5').count.value == 5.0
    assert command('dig').block_type is None
    assert command('dig "stone"').block_type.value == 'stone'


def test_optional_argument_stops_at_newline():
    program = parse_program('dig\nsay "x"')
    assert isinstance(program.statements[0].command, DigCommand)
    assert program.statements[0].command.block_type is None
    assert len(program.statements) == 2


def test_drop_count_absent_before_closing_brace():
    stmt = parse_program('if true { drop "dirt" }').statements[0]
    node = stmt.then_block[0].command
    assert isinstance(node, DropCommand)
    assert node.count is None


@pytest.mark.parametrize('source', [
    'var = 20',
    'if true then say "test"',
    'repeat 3 say "test"',
    'if true say "test" }',
])
def test_malformed_statements(source):
    with pytest.raises(ParseError, match='Expected'):
        parse_program(source)


def test_parse_error_carries_position():
    with pytest.raises(ParseError) as exc:
        parse_program('say "ok"\nvar = 20')
    assert exc.value.line == 2
    assert exc.value.column == 5
    assert str(exc.value).startswith('Parse error at line 2, column 5:')


def test_two_statements_on_one_line():
    with pytest.raises(ParseError, match='Expected newline'):
        parse_program('say "a" say "b"')


def test_stray_closing_brace_at_top_level():
    with pytest.raises(ParseError):
        parse_program('say "x" }')


def test_unclosed_block():
    with pytest.raises(ParseError, match="Expected '}'"):
        parse_program('if true {\n  say "x"\n')


def test_goto_missing_coordinate():
    with pytest.raises(ParseError, match='z coordinate'):
        parse_program('goto 1 2')


def test_invalid_token_is_named():
    with pytest.raises(ParseError) as exc:
        parse_program('say "abc')
    assert 'invalid token' in exc.value.message
    assert '"abc' in exc.value.message


def test_blank_lines_and_comments_are_ignored():
    program = parse_program('\n\n# header\n\nsay "x"  # trailing\n\n')
    assert len(program.statements) == 1


def test_negative_literal_joins_previous_argument():
    # `2 -3` is a subtraction, so goto only sees two coordinates
    with pytest.raises(ParseError, match='z coordinate'):
        parse_program('goto 1 2 -3')
    node = command('goto 1 2 (-3)')
    assert node.z.op == UnaryOperator.MINUS
