"""Error taxonomy for BotScript.

Lexical problems never raise: they surface as INVALID tokens which the
parser rejects with a ParseError. Everything that goes wrong while a
program runs is a BotScriptRuntimeError subclass; the interpreter catches
those once at the top of execute() and turns them into an ERROR result.
"""

from typing import Optional


class BotScriptError(Exception):
    """Base class for all BotScript errors."""
    kind = 'BotScriptError'

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def has_position(self) -> bool:
        return self.line is not None and self.line > 0

    def locate(self, line: int, column: int) -> 'BotScriptError':
        """Attach a source position unless one is already known."""
        if not self.has_position():
            self.line = line
            self.column = column
        return self


class ParseError(BotScriptError):
    kind = 'ParseError'

    def __str__(self) -> str:
        if self.has_position():
            return f"Parse error at line {self.line}, column {self.column}: {self.message}"
        return f"Parse error: {self.message}"


class BotScriptRuntimeError(BotScriptError):
    kind = 'RuntimeError'

    def __str__(self) -> str:
        if self.has_position():
            return f"Execution error at line {self.line}, column {self.column}: {self.message}"
        return f"Execution error: {self.message}"


class UndefinedVariableError(BotScriptRuntimeError):
    kind = 'UndefinedVariable'

    def __init__(self, name: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(f"Undefined variable: {name}", line, column)
        self.name = name


class ReadonlyViolationError(BotScriptRuntimeError):
    kind = 'ReadonlyViolation'

    def __init__(self, name: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(f"Cannot modify readonly variable: {name}", line, column)
        self.name = name


class TypeMismatchError(BotScriptRuntimeError):
    kind = 'TypeMismatch'


class DivisionByZeroError(BotScriptRuntimeError):
    kind = 'DivisionByZero'

    def __init__(self, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__("Division by zero", line, column)


class InvalidCommandArgumentError(BotScriptRuntimeError):
    kind = 'InvalidCommandArgument'


class CommandFailureError(BotScriptRuntimeError):
    """A world effect was attempted and the port reported failure."""
    kind = 'CommandFailure'


class StopSignal(Exception):
    """Internal exception used to unwind a run after stop() was requested."""
    def __init__(self):
        super().__init__('stop')
