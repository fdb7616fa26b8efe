"""Variable storage for a BotScript run.

An :class:`ExecutionContext` holds one global frame and a stack of local
frames. Lookup walks the locals innermost-first and then the globals;
defining a name in an inner frame shadows the outer binding without
touching it. Readonly variables (the built-ins and the ``bot_*`` system
variables) can never be changed by script statements.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union

from .errors import ReadonlyViolationError, UndefinedVariableError
from .telemetry import SystemSnapshot
from .types import BotScriptValue, to_string, type_name


class VariableScope(str, Enum):
    GLOBAL = 'global'
    LOCAL = 'local'


@dataclass
class VariableInfo:
    name: str
    value: BotScriptValue
    scope: VariableScope
    readonly: bool = False
    line: int = 0
    column: int = 0


def now_ms() -> float:
    return time.time() * 1000.0


@dataclass
class ExecutionStats:
    statements_executed: int = 0
    variables_created: int = 0
    commands_executed: int = 0
    start_time: float = field(default_factory=now_ms)
    end_time: Optional[float] = None
    errors: List[str] = field(default_factory=list)


class ExecutionContext:
    """Global frame, local frame stack and run statistics."""

    def __init__(self, bot_name: str = 'BotScript', version: str = '1.0.0'):
        self.bot_name = bot_name
        self.version = version
        self.globals: Dict[str, VariableInfo] = {}
        self.scopes: List[Dict[str, VariableInfo]] = []
        self.stats = ExecutionStats()
        self._seed_builtins()

    def _seed_builtins(self) -> None:
        self._write_system('bot_name', self.bot_name)
        self._write_system('version', self.version)
        self._write_system('pi', math.pi)
        self._write_system('timestamp', now_ms())

    def _write_system(self, name: str, value: BotScriptValue) -> None:
        self.globals[name] = VariableInfo(name, value, VariableScope.GLOBAL, readonly=True)

    def _lookup(self, name: str) -> Optional[VariableInfo]:
        for frame in reversed(self.scopes):
            if name in frame:
                return frame[name]
        return self.globals.get(name)

    # Variables

    def define_variable(self, name: str, value: BotScriptValue,
                        scope: VariableScope = VariableScope.LOCAL,
                        readonly: bool = False, line: int = 0, column: int = 0) -> None:
        """Bind a name in the innermost frame, or in the global frame.

        A LOCAL definition with no local frame open lands in the global
        frame. Redefining a readonly name in the same frame is an error;
        shadowing it from an inner frame is not.
        """
        if scope == VariableScope.LOCAL and self.scopes:
            frame = self.scopes[-1]
            actual = VariableScope.LOCAL
        else:
            frame = self.globals
            actual = VariableScope.GLOBAL
        existing = frame.get(name)
        if existing is not None and existing.readonly:
            raise ReadonlyViolationError(name, line or None, column or None)
        frame[name] = VariableInfo(name, value, actual, readonly, line, column)
        self.stats.variables_created += 1

    def get_variable(self, name: str) -> BotScriptValue:
        info = self._lookup(name)
        if info is None:
            raise UndefinedVariableError(name)
        return info.value

    def set_variable(self, name: str, value: BotScriptValue) -> None:
        info = self._lookup(name)
        if info is None:
            raise UndefinedVariableError(name)
        if info.readonly:
            raise ReadonlyViolationError(name)
        info.value = value

    def has_variable(self, name: str) -> bool:
        return self._lookup(name) is not None

    def get_variable_info(self, name: str) -> Optional[VariableInfo]:
        info = self._lookup(name)
        return replace(info) if info is not None else None

    def get_all_variables(self) -> Dict[str, BotScriptValue]:
        """Every visible binding; an inner frame hides outer ones."""
        result = {name: info.value for name, info in self.globals.items()}
        for frame in self.scopes:
            for name, info in frame.items():
                result[name] = info.value
        return result

    # Scopes

    def enter_scope(self) -> None:
        self.scopes.append({})

    def exit_scope(self) -> None:
        if self.scopes:
            self.scopes.pop()

    @property
    def scope_depth(self) -> int:
        return len(self.scopes)

    # System variables

    def update_system_variables(self, snapshot: Union[SystemSnapshot, Mapping[str, object], None]) -> None:
        """Refresh the readonly ``bot_*`` globals and ``timestamp``."""
        if snapshot is not None:
            if not isinstance(snapshot, SystemSnapshot):
                snapshot = SystemSnapshot.from_dict(snapshot)
            for name, value in snapshot.to_variables().items():
                self._write_system(name, value)
        self._write_system('timestamp', now_ms())

    # Statistics

    def increment_statement_count(self) -> None:
        self.stats.statements_executed += 1

    def increment_command_count(self) -> None:
        self.stats.commands_executed += 1

    def record_error(self, message: str) -> None:
        self.stats.errors.append(message)

    def mark_execution_start(self) -> None:
        self.stats.start_time = now_ms()
        self.stats.end_time = None

    def mark_execution_complete(self) -> None:
        self.stats.end_time = now_ms()

    def execution_time_ms(self) -> float:
        end = self.stats.end_time if self.stats.end_time is not None else now_ms()
        return end - self.stats.start_time

    def get_stats(self) -> ExecutionStats:
        stats = replace(self.stats, errors=list(self.stats.errors))
        if stats.end_time is None:
            stats.end_time = now_ms()
        return stats

    def reset(self) -> None:
        self.globals = {}
        self.scopes = []
        self.stats = ExecutionStats()
        self._seed_builtins()

    def dump(self) -> str:
        """Human-readable report of variables, scopes and statistics."""
        lines = ['=== Execution Context ===', f'Scope depth: {self.scope_depth}', 'Global variables:']
        for info in sorted(self.globals.values(), key=lambda v: v.name):
            flag = ' (readonly)' if info.readonly else ''
            lines.append(f'  {info.name}: {type_name(info.value)} = {to_string(info.value)}{flag}')
        for depth, frame in enumerate(self.scopes, start=1):
            lines.append(f'Local scope {depth}:')
            for info in frame.values():
                lines.append(f'  {info.name}: {type_name(info.value)} = {to_string(info.value)}')
        stats = self.stats
        lines.append('Statistics:')
        lines.append(f'  statements executed: {stats.statements_executed}')
        lines.append(f'  commands executed: {stats.commands_executed}')
        lines.append(f'  variables created: {stats.variables_created}')
        lines.append(f'  execution time: {self.execution_time_ms():.0f}ms')
        if stats.errors:
            lines.append('Errors:')
            lines.extend(f'  {message}' for message in stats.errors)
        return '\n'.join(lines)
