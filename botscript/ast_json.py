"""JSON serialization/deserialization for BotScript AST.

This module converts between BotScript AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node object carries
its ``line`` and ``column`` so a reloaded tree reports errors at the same
source positions as the original.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Node,
    Program,
    VariableDeclaration,
    Assignment,
    IfStatement,
    RepeatStatement,
    CommandStatement,
    ExpressionStatement,
    NumberLiteral,
    StringLiteral,
    BooleanLiteral,
    VariableReference,
    BinaryExpr,
    UnaryExpr,
    BinaryOperator,
    UnaryOperator,
    SayCommand,
    GotoCommand,
    AttackCommand,
    DigCommand,
    PlaceCommand,
    EquipCommand,
    DropCommand,
    WaitCommand,
)


def _node(type_name: str, node: Node, **fields: Any) -> Dict[str, Any]:
    obj: Dict[str, Any] = {"type": type_name, "line": node.line, "column": node.column}
    obj.update(fields)
    return obj


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, (int, float, str, bool)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    if isinstance(node, Program):
        return _node("Program", node, statements=ast_to_obj(node.statements))
    if isinstance(node, VariableDeclaration):
        return _node("VariableDeclaration", node, name=node.name, initializer=ast_to_obj(node.initializer))
    if isinstance(node, Assignment):
        return _node("Assignment", node, target=node.target, value=ast_to_obj(node.value))
    if isinstance(node, IfStatement):
        return _node(
            "IfStatement", node,
            condition=ast_to_obj(node.condition),
            then_block=ast_to_obj(node.then_block),
            else_block=ast_to_obj(node.else_block),
        )
    if isinstance(node, RepeatStatement):
        return _node("RepeatStatement", node, count=ast_to_obj(node.count), body=ast_to_obj(node.body))
    if isinstance(node, CommandStatement):
        return _node("CommandStatement", node, command=ast_to_obj(node.command))
    if isinstance(node, ExpressionStatement):
        return _node("ExpressionStatement", node, expression=ast_to_obj(node.expression))

    if isinstance(node, NumberLiteral):
        return _node("NumberLiteral", node, value=node.value)
    if isinstance(node, StringLiteral):
        return _node("StringLiteral", node, value=node.value)
    if isinstance(node, BooleanLiteral):
        return _node("BooleanLiteral", node, value=node.value)
    if isinstance(node, VariableReference):
        return _node("VariableReference", node, name=node.name)
    if isinstance(node, BinaryExpr):
        return _node("BinaryExpr", node, op=node.op.value, left=ast_to_obj(node.left), right=ast_to_obj(node.right))
    if isinstance(node, UnaryExpr):
        return _node("UnaryExpr", node, op=node.op.value, operand=ast_to_obj(node.operand))

    if isinstance(node, SayCommand):
        return _node("SayCommand", node, message=ast_to_obj(node.message))
    if isinstance(node, GotoCommand):
        return _node("GotoCommand", node, x=ast_to_obj(node.x), y=ast_to_obj(node.y), z=ast_to_obj(node.z))
    if isinstance(node, AttackCommand):
        return _node("AttackCommand", node, target=ast_to_obj(node.target))
    if isinstance(node, DigCommand):
        return _node("DigCommand", node, block_type=ast_to_obj(node.block_type))
    if isinstance(node, PlaceCommand):
        return _node(
            "PlaceCommand", node,
            item=ast_to_obj(node.item),
            x=ast_to_obj(node.x), y=ast_to_obj(node.y), z=ast_to_obj(node.z),
        )
    if isinstance(node, EquipCommand):
        return _node("EquipCommand", node, item=ast_to_obj(node.item))
    if isinstance(node, DropCommand):
        return _node("DropCommand", node, item=ast_to_obj(node.item), count=ast_to_obj(node.count))
    if isinstance(node, WaitCommand):
        return _node("WaitCommand", node, seconds=ast_to_obj(node.seconds))

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    pos = {"line": int(obj.get("line", 0)), "column": int(obj.get("column", 0))}

    if t == "Program":
        return Program(statements=ast_from_obj(obj["statements"]), **pos)
    if t == "VariableDeclaration":
        return VariableDeclaration(name=obj["name"], initializer=ast_from_obj(obj["initializer"]), **pos)
    if t == "Assignment":
        return Assignment(target=obj["target"], value=ast_from_obj(obj["value"]), **pos)
    if t == "IfStatement":
        return IfStatement(
            condition=ast_from_obj(obj["condition"]),
            then_block=ast_from_obj(obj["then_block"]),
            else_block=ast_from_obj(obj.get("else_block")),
            **pos,
        )
    if t == "RepeatStatement":
        return RepeatStatement(count=ast_from_obj(obj["count"]), body=ast_from_obj(obj["body"]), **pos)
    if t == "CommandStatement":
        return CommandStatement(command=ast_from_obj(obj["command"]), **pos)
    if t == "ExpressionStatement":
        return ExpressionStatement(expression=ast_from_obj(obj["expression"]), **pos)

    if t == "NumberLiteral":
        return NumberLiteral(value=float(obj["value"]), **pos)
    if t == "StringLiteral":
        return StringLiteral(value=str(obj["value"]), **pos)
    if t == "BooleanLiteral":
        return BooleanLiteral(value=bool(obj["value"]), **pos)
    if t == "VariableReference":
        return VariableReference(name=obj["name"], **pos)
    if t == "BinaryExpr":
        return BinaryExpr(
            left=ast_from_obj(obj["left"]),
            op=BinaryOperator(obj["op"]),
            right=ast_from_obj(obj["right"]),
            **pos,
        )
    if t == "UnaryExpr":
        return UnaryExpr(op=UnaryOperator(obj["op"]), operand=ast_from_obj(obj["operand"]), **pos)

    if t == "SayCommand":
        return SayCommand(message=ast_from_obj(obj["message"]), **pos)
    if t == "GotoCommand":
        return GotoCommand(x=ast_from_obj(obj["x"]), y=ast_from_obj(obj["y"]), z=ast_from_obj(obj["z"]), **pos)
    if t == "AttackCommand":
        return AttackCommand(target=ast_from_obj(obj["target"]), **pos)
    if t == "DigCommand":
        return DigCommand(block_type=ast_from_obj(obj.get("block_type")), **pos)
    if t == "PlaceCommand":
        return PlaceCommand(
            item=ast_from_obj(obj["item"]),
            x=ast_from_obj(obj.get("x")),
            y=ast_from_obj(obj.get("y")),
            z=ast_from_obj(obj.get("z")),
            **pos,
        )
    if t == "EquipCommand":
        return EquipCommand(item=ast_from_obj(obj["item"]), **pos)
    if t == "DropCommand":
        return DropCommand(item=ast_from_obj(obj["item"]), count=ast_from_obj(obj.get("count")), **pos)
    if t == "WaitCommand":
        return WaitCommand(seconds=ast_from_obj(obj["seconds"]), **pos)

    raise ValueError(f"Unknown AST node type: {t}")
