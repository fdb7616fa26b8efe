# BotScript language package
# A small scripting language for driving an autonomous game agent.
from .context import ExecutionContext, VariableScope
from .errors import BotScriptError, BotScriptRuntimeError, ParseError
from .interpreter import (
    CommandResult, ExecutionResult, ExecutionResultType, ExecutionState,
    Interpreter, run_program,
)
from .lexer import tokenize
from .parser import parse, parse_program

__all__ = [
    'tokenize',
    'parse',
    'parse_program',
    'run_program',
    'Interpreter',
    'ExecutionContext',
    'VariableScope',
    'ExecutionResult',
    'ExecutionResultType',
    'ExecutionState',
    'CommandResult',
    'BotScriptError',
    'BotScriptRuntimeError',
    'ParseError',
]
