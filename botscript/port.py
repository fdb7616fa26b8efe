"""Capability port consumed by the interpreter.

The interpreter never talks to a game client directly. Everything it needs
from the world (movement, combat, digging, inventory, telemetry) goes
through an object satisfying :class:`BotPort`. World effects are coroutines
and are awaited; lookups and telemetry are plain calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    z: float

    def offset(self, dx: float, dy: float, dz: float) -> 'Position':
        return Position(self.x + dx, self.y + dy, self.z + dz)

    def distance_to(self, other: 'Position') -> float:
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )


@dataclass
class Entity:
    name: str
    type: str
    position: Position
    display_name: Optional[str] = None
    username: Optional[str] = None

    def matches(self, target: str) -> bool:
        """True if the target names this entity by any of its identifiers."""
        return target in (self.name, self.display_name, self.type, self.username)


@dataclass
class Item:
    name: str
    type: int
    count: int
    metadata: Optional[int] = None


@dataclass
class Block:
    name: str
    position: Position


@dataclass
class VitalStats:
    health: float
    hunger: float
    saturation: float = 0.0
    oxygen: float = 20.0
    experience_level: int = 0
    experience_points: int = 0
    is_in_danger: bool = False


@dataclass
class EnvironmentInfo:
    position: Position
    light_level: int = 15
    is_night: bool = False
    time_of_day: int = 0
    is_raining: bool = False
    nearby_players: int = 0
    nearby_hostile_mobs: int = 0
    nearby_animals: int = 0


@dataclass
class InventoryInfo:
    used_slots: int
    total_slots: int
    empty_slots: int
    equipped_item: Optional[str] = None


EntityPredicate = Callable[[Entity], bool]

# Face vector used when placing onto the top of a reference block.
UP = Position(0, 1, 0)


class BotPort(Protocol):
    """Operations the interpreter may invoke on the agent."""

    # chat and movement
    def send_message(self, text: str) -> None: ...

    def get_position(self) -> Position: ...

    async def goto(self, x: float, y: float, z: float) -> None: ...

    # world queries
    def find_nearest_entity(self, predicate: EntityPredicate) -> Optional[Entity]: ...

    def find_nearest_block(self, block_type: Optional[str]) -> Optional[Position]: ...

    def block_at(self, position: Position) -> Optional[Block]: ...

    # inventory
    def find_item(self, name: str) -> Optional[Item]: ...

    def find_best_tool(self, block: Block) -> Optional[Item]: ...

    def is_full(self) -> bool: ...

    def get_inventory_info(self) -> InventoryInfo: ...

    # world effects
    async def attack(self, entity: Entity) -> None: ...

    async def dig(self, block: Block) -> None: ...

    async def place_block(self, reference_block: Block, face: Position) -> None: ...

    async def equip(self, item: Item, destination: str) -> None: ...

    async def toss(self, item_type: int, metadata: Any, count: int) -> None: ...

    # telemetry
    def get_vital_stats(self) -> VitalStats: ...

    def needs_to_eat(self) -> bool: ...

    def is_health_low(self) -> bool: ...

    def is_hunger_low(self) -> bool: ...

    def get_environment_info(self) -> EnvironmentInfo: ...
