"""Tree-walking interpreter for BotScript.

The interpreter walks a parsed :class:`~botscript.ast.Program` against a
capability port (see :mod:`botscript.port`). Statements run in order;
``if`` branches and each ``repeat`` iteration get their own local scope.
World-effect commands are awaited, so a run suspends only inside port
calls and ``wait``. Any runtime error aborts the run and is reported as an
ERROR result; ``stop()`` is cooperative and is honoured between
statements and loop iterations.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .ast import (
    Node, Program,
    NumberLiteral, StringLiteral, BooleanLiteral, VariableReference,
    BinaryExpr, UnaryExpr, BinaryOperator, UnaryOperator,
    VariableDeclaration, Assignment, IfStatement, RepeatStatement,
    CommandStatement, ExpressionStatement,
    SayCommand, GotoCommand, AttackCommand, DigCommand,
    PlaceCommand, EquipCommand, DropCommand, WaitCommand,
)
from .config import InterpreterConfig
from .context import ExecutionContext, VariableScope
from .errors import (
    BotScriptRuntimeError, CommandFailureError, DivisionByZeroError,
    InvalidCommandArgumentError, StopSignal, TypeMismatchError,
)
from .parser import parse_program
from .port import UP, BotPort, Position
from .telemetry import collect_snapshot
from .types import BotScriptValue, format_number, is_number, is_truthy, to_string, type_name, values_equal

logger = logging.getLogger(__name__)

UNDIGGABLE_BLOCKS = frozenset({'air', 'water', 'lava'})

ARITHMETIC_OPERATORS = frozenset({
    BinaryOperator.MINUS, BinaryOperator.MULTIPLY, BinaryOperator.DIVIDE,
    BinaryOperator.LESS, BinaryOperator.GREATER,
    BinaryOperator.LESS_EQUAL, BinaryOperator.GREATER_EQUAL,
})


class ExecutionResultType(str, Enum):
    SUCCESS = 'SUCCESS'
    ERROR = 'ERROR'
    STOPPED = 'STOPPED'


class ExecutionState(str, Enum):
    IDLE = 'IDLE'
    RUNNING = 'RUNNING'
    COMPLETED = 'COMPLETED'
    FAILED = 'FAILED'
    STOPPED = 'STOPPED'


@dataclass
class ExecutionResult:
    type: ExecutionResultType
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.type == ExecutionResultType.SUCCESS


@dataclass
class CommandResult:
    success: bool
    message: str
    duration_ms: float = 0.0


class Interpreter:
    """Executes BotScript programs against an injected capability port."""

    def __init__(self, port: BotPort, context: Optional[ExecutionContext] = None,
                 config: Optional[InterpreterConfig] = None):
        self.port = port
        self.config = config or InterpreterConfig()
        self.context = context or ExecutionContext(self.config.bot_name, self.config.version)
        self.state = ExecutionState.IDLE
        self.last_command_result: Optional[CommandResult] = None
        self._running = False
        self._stop_requested = False

    # Public API

    async def execute(self, program: Program) -> ExecutionResult:
        """Run a program to completion, failure or stop."""
        if self._running:
            raise RuntimeError('Interpreter is already executing a program')
        self._running = True
        self._stop_requested = False
        self.state = ExecutionState.RUNNING
        self.context.mark_execution_start()
        logger.info("Executing program with %d statements", len(program.statements))
        try:
            self.refresh_system_variables()
            await self.execute_block(program.statements)
        except StopSignal:
            self.context.mark_execution_complete()
            self.state = ExecutionState.STOPPED
            logger.warning("Execution stopped")
            return ExecutionResult(ExecutionResultType.STOPPED, 'Execution stopped')
        except BotScriptRuntimeError as e:
            message = str(e)
            self.context.record_error(message)
            self.context.mark_execution_complete()
            self.state = ExecutionState.FAILED
            logger.warning(message)
            return ExecutionResult(ExecutionResultType.ERROR, message)
        finally:
            self._running = False
            if self.state == ExecutionState.RUNNING:
                self.state = ExecutionState.FAILED
        self.context.mark_execution_complete()
        self.state = ExecutionState.COMPLETED
        logger.info("Execution completed in %.0fms", self.context.execution_time_ms())
        return ExecutionResult(ExecutionResultType.SUCCESS)

    def stop(self) -> None:
        self._stop_requested = True

    def is_executing(self) -> bool:
        return self._running

    def get_context(self) -> ExecutionContext:
        return self.context

    def set_context(self, context: ExecutionContext) -> None:
        if self._running:
            raise RuntimeError('Cannot replace the context while a program is running')
        self.context = context

    def refresh_system_variables(self) -> None:
        try:
            snapshot = collect_snapshot(self.port)
        except Exception as e:
            logger.warning("Could not read telemetry, keeping previous system variables: %s", e)
            snapshot = None
        self.context.update_system_variables(snapshot)

    # Statements

    def check_stop(self) -> None:
        if self._stop_requested:
            raise StopSignal()

    async def execute_block(self, statements: List[Node]) -> None:
        for stmt in statements:
            self.check_stop()
            await self.execute_statement(stmt)

    async def execute_statement(self, node: Node) -> None:
        try:
            await self._execute_node(node)
        except BotScriptRuntimeError as e:
            raise e.locate(node.line, node.column)
        self.context.increment_statement_count()

    async def _execute_node(self, node: Node) -> None:
        logger.debug("line %d: %s", node.line, type(node).__name__)
        if isinstance(node, VariableDeclaration):
            value = self.evaluate(node.initializer)
            self.context.define_variable(node.name, value, VariableScope.LOCAL, False, node.line, node.column)
            return
        if isinstance(node, Assignment):
            value = self.evaluate(node.value)
            self.context.set_variable(node.target, value)
            return
        if isinstance(node, IfStatement):
            cond = self.evaluate(node.condition)
            branch = node.then_block if is_truthy(cond) else node.else_block
            self.context.enter_scope()
            try:
                if branch is not None:
                    await self.execute_block(branch)
            finally:
                self.context.exit_scope()
            return
        if isinstance(node, RepeatStatement):
            await self.execute_repeat(node)
            return
        if isinstance(node, CommandStatement):
            result = await self.execute_command(node.command)
            self.last_command_result = result
            self.context.increment_command_count()
            if not result.success:
                logger.warning("Command failed at line %d: %s", node.line, result.message)
                raise CommandFailureError(f"Command failed: {result.message}")
            logger.debug("%s (%.0fms)", result.message, result.duration_ms)
            return
        if isinstance(node, ExpressionStatement):
            self.evaluate(node.expression)
            return
        raise BotScriptRuntimeError(f"Unknown statement type: {type(node).__name__}")

    async def execute_repeat(self, node: RepeatStatement) -> None:
        count = self.evaluate(node.count)
        if not is_number(count):
            raise InvalidCommandArgumentError(f"Repeat count must be a number, got {type_name(count)}")
        if not math.isfinite(count):
            raise InvalidCommandArgumentError(f"Repeat count must be finite, got {format_number(count)}")
        times = math.floor(count)
        if times < 0:
            raise InvalidCommandArgumentError(f"Repeat count must be non-negative, got {format_number(count)}")
        for index in range(times):
            self.check_stop()
            self.context.enter_scope()
            try:
                self.context.define_variable('_loop_index', float(index), VariableScope.LOCAL)
                await self.execute_block(node.body)
            finally:
                self.context.exit_scope()

    # Expressions

    def evaluate(self, node: Node) -> BotScriptValue:
        if isinstance(node, (NumberLiteral, StringLiteral, BooleanLiteral)):
            return node.value
        try:
            if isinstance(node, VariableReference):
                return self.context.get_variable(node.name)
            if isinstance(node, BinaryExpr):
                left = self.evaluate(node.left)
                right = self.evaluate(node.right)
                return self.apply_binary_op(node.op, left, right)
            if isinstance(node, UnaryExpr):
                return self.apply_unary_op(node.op, self.evaluate(node.operand))
        except BotScriptRuntimeError as e:
            raise e.locate(node.line, node.column)
        raise BotScriptRuntimeError(f"Unknown expression type: {type(node).__name__}", node.line, node.column)

    def apply_binary_op(self, op: BinaryOperator, a: BotScriptValue, b: BotScriptValue) -> BotScriptValue:
        if op == BinaryOperator.PLUS:
            if is_number(a) and is_number(b):
                return a + b
            return to_string(a) + to_string(b)
        if op in ARITHMETIC_OPERATORS:
            if not (is_number(a) and is_number(b)):
                raise TypeMismatchError(
                    f"Operator '{op.value}' requires numbers, got {type_name(a)} and {type_name(b)}"
                )
            if op == BinaryOperator.MINUS:
                return a - b
            if op == BinaryOperator.MULTIPLY:
                return a * b
            if op == BinaryOperator.DIVIDE:
                if b == 0:
                    raise DivisionByZeroError()
                return a / b
            if op == BinaryOperator.LESS:
                return a < b
            if op == BinaryOperator.GREATER:
                return a > b
            if op == BinaryOperator.LESS_EQUAL:
                return a <= b
            return a >= b
        if op == BinaryOperator.EQUALS:
            return values_equal(a, b)
        if op == BinaryOperator.NOT_EQUALS:
            return not values_equal(a, b)
        # both operands are already evaluated; no short-circuit
        if op == BinaryOperator.AND:
            return is_truthy(a) and is_truthy(b)
        if op == BinaryOperator.OR:
            return is_truthy(a) or is_truthy(b)
        raise BotScriptRuntimeError(f"Unknown binary operator: {op}")

    def apply_unary_op(self, op: UnaryOperator, operand: BotScriptValue) -> BotScriptValue:
        if op == UnaryOperator.NOT:
            return not is_truthy(operand)
        if op == UnaryOperator.MINUS:
            if not is_number(operand):
                raise TypeMismatchError(f"Unary minus requires a number, got {type_name(operand)}")
            return -operand
        raise BotScriptRuntimeError(f"Unknown unary operator: {op}")

    # Commands

    async def execute_command(self, command: Node) -> CommandResult:
        start = time.monotonic()
        try:
            result = await self.dispatch_command(command)
        except BotScriptRuntimeError:
            raise
        except Exception as e:
            result = CommandResult(False, str(e) or type(e).__name__)
        result.duration_ms = (time.monotonic() - start) * 1000.0
        return result

    async def dispatch_command(self, command: Node) -> CommandResult:
        if isinstance(command, SayCommand):
            return self.execute_say(command)
        if isinstance(command, GotoCommand):
            return await self.execute_goto(command)
        if isinstance(command, AttackCommand):
            return await self.execute_attack(command)
        if isinstance(command, DigCommand):
            return await self.execute_dig(command)
        if isinstance(command, PlaceCommand):
            return await self.execute_place(command)
        if isinstance(command, EquipCommand):
            return await self.execute_equip(command)
        if isinstance(command, DropCommand):
            return await self.execute_drop(command)
        if isinstance(command, WaitCommand):
            return await self.execute_wait(command)
        raise BotScriptRuntimeError(f"Unknown command type: {type(command).__name__}")

    def evaluate_coordinate(self, node: Node, command: str) -> float:
        value = self.evaluate(node)
        if not is_number(value):
            raise InvalidCommandArgumentError(
                f"{command} coordinates must be numbers, got {type_name(value)}", node.line, node.column
            )
        return value

    def distance_from_bot(self, position: Position) -> float:
        return self.port.get_position().distance_to(position)

    def execute_say(self, node: SayCommand) -> CommandResult:
        message = to_string(self.evaluate(node.message))
        self.port.send_message(message)
        return CommandResult(True, f'Said: "{message}"')

    async def execute_goto(self, node: GotoCommand) -> CommandResult:
        x = self.evaluate_coordinate(node.x, 'GOTO')
        y = self.evaluate_coordinate(node.y, 'GOTO')
        z = self.evaluate_coordinate(node.z, 'GOTO')
        where = f"({format_number(x)}, {format_number(y)}, {format_number(z)})"
        try:
            await asyncio.wait_for(self.port.goto(x, y, z), timeout=self.config.goto_timeout)
        except asyncio.TimeoutError:
            return CommandResult(False, f"Goto failed: timed out after {format_number(self.config.goto_timeout)} seconds")
        except Exception as e:
            return CommandResult(False, f"Goto failed: {e}")
        return CommandResult(True, f"Successfully moved to {where}")

    async def execute_attack(self, node: AttackCommand) -> CommandResult:
        target = to_string(self.evaluate(node.target))
        entity = self.port.find_nearest_entity(lambda e: e.matches(target))
        if entity is None:
            return CommandResult(False, f"Target entity '{target}' not found")
        try:
            await self.port.attack(entity)
        except Exception as e:
            return CommandResult(False, f"Attack failed: {e}")
        return CommandResult(True, f"Attacked {target} ({entity.type})")

    async def execute_dig(self, node: DigCommand) -> CommandResult:
        block_type = to_string(self.evaluate(node.block_type)) if node.block_type is not None else None
        position = self.port.find_nearest_block(block_type)
        if position is None:
            wanted = f"'{block_type}' block" if block_type else 'block'
            return CommandResult(False, f"No {wanted} found nearby")
        block = self.port.block_at(position)
        if block is None or block.name in UNDIGGABLE_BLOCKS:
            name = block.name if block is not None else 'nothing'
            return CommandResult(False, f"Cannot dig {name}")
        distance = self.distance_from_bot(block.position)
        if distance > self.config.max_interaction_distance:
            return CommandResult(False, f"Block {block.name} is too far away ({distance:.1f} blocks)")
        try:
            tool = self.port.find_best_tool(block)
            if tool is not None:
                await self.port.equip(tool, self.config.equip_destination)
            await self.port.dig(block)
        except Exception as e:
            return CommandResult(False, f"Dig failed: {e}")
        return CommandResult(True, f"Dug {block.name}")

    async def execute_place(self, node: PlaceCommand) -> CommandResult:
        name = to_string(self.evaluate(node.item))
        if node.has_position:
            target = Position(
                self.evaluate_coordinate(node.x, 'PLACE'),
                self.evaluate_coordinate(node.y, 'PLACE'),
                self.evaluate_coordinate(node.z, 'PLACE'),
            )
        else:
            below = self.port.find_nearest_block(None)
            if below is None:
                return CommandResult(False, 'No block found to place against')
            target = below.offset(0, 1, 0)
        item = self.port.find_item(name)
        if item is None:
            return CommandResult(False, f"Item '{name}' not found in inventory")
        occupant = self.port.block_at(target)
        if occupant is not None and occupant.name != 'air':
            return CommandResult(False, f"Target position is occupied by {occupant.name}")
        reference = self.port.block_at(target.offset(0, -1, 0))
        if reference is None or reference.name == 'air':
            return CommandResult(False, 'No solid block below target position')
        distance = self.distance_from_bot(target)
        if distance > self.config.max_interaction_distance:
            return CommandResult(False, f"Target position is too far away ({distance:.1f} blocks)")
        try:
            await self.port.equip(item, self.config.equip_destination)
            await self.port.place_block(reference, UP)
        except Exception as e:
            return CommandResult(False, f"Place failed: {e}")
        where = f"({format_number(target.x)}, {format_number(target.y)}, {format_number(target.z)})"
        return CommandResult(True, f"Placed {name} at {where}")

    async def execute_equip(self, node: EquipCommand) -> CommandResult:
        name = to_string(self.evaluate(node.item))
        item = self.port.find_item(name)
        if item is None:
            return CommandResult(False, f"Item '{name}' not found in inventory")
        try:
            await self.port.equip(item, self.config.equip_destination)
        except Exception as e:
            return CommandResult(False, f"Equip failed: {e}")
        return CommandResult(True, f"Equipped {name}")

    async def execute_drop(self, node: DropCommand) -> CommandResult:
        name = to_string(self.evaluate(node.item))
        count = 1.0
        if node.count is not None:
            count = self.evaluate(node.count)
            if not is_number(count) or not math.isfinite(count) or count < 1:
                raise InvalidCommandArgumentError(
                    f"DROP count must be a number of at least 1, got {to_string(count)}",
                    node.count.line, node.count.column,
                )
        item = self.port.find_item(name)
        if item is None:
            return CommandResult(False, f"Item '{name}' not found in inventory")
        actual = min(math.floor(count), item.count)
        try:
            await self.port.toss(item.type, None, actual)
        except Exception as e:
            return CommandResult(False, f"Drop failed: {e}")
        return CommandResult(True, f"Dropped {actual} {name}")

    async def execute_wait(self, node: WaitCommand) -> CommandResult:
        seconds = self.evaluate(node.seconds)
        if not is_number(seconds) or not math.isfinite(seconds) or seconds < 0:
            raise InvalidCommandArgumentError(
                f"WAIT duration must be a non-negative number, got {to_string(seconds)}",
                node.seconds.line, node.seconds.column,
            )
        await asyncio.sleep(seconds)
        return CommandResult(True, f"Waited {format_number(seconds)} seconds")


async def run_program(source: str, port: BotPort, context: Optional[ExecutionContext] = None,
                      config: Optional[InterpreterConfig] = None) -> ExecutionResult:
    """Convenience coroutine to parse and run a BotScript program from source."""
    program = parse_program(source)
    interpreter = Interpreter(port, context=context, config=config)
    return await interpreter.execute(program)
