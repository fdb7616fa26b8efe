"""System variable snapshot.

Before each run the interpreter reads the agent's telemetry once and
mirrors it into readonly global variables prefixed with ``bot_``. Fields
left as ``None`` are not written, so a partial snapshot keeps the previous
values of everything it does not mention.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from .types import BotScriptValue


SYSTEM_PREFIX = 'bot_'


@dataclass
class SystemSnapshot:
    health: Optional[float] = None
    food: Optional[float] = None
    saturation: Optional[float] = None
    oxygen: Optional[float] = None
    experience_level: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    light_level: Optional[float] = None
    time_of_day: Optional[float] = None
    is_night: Optional[bool] = None
    is_raining: Optional[bool] = None
    inventory_count: Optional[float] = None
    inventory_slots_total: Optional[float] = None
    inventory_slots_empty: Optional[float] = None
    inventory_full: Optional[bool] = None
    equipped_item: Optional[str] = None
    nearby_players: Optional[float] = None
    nearby_mobs: Optional[float] = None
    nearby_animals: Optional[float] = None
    is_in_danger: Optional[bool] = None
    needs_food: Optional[bool] = None
    health_low: Optional[bool] = None
    hunger_low: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SystemSnapshot':
        """Build a snapshot from a plain mapping.

        Keys are the field names above. A nested ``position`` mapping with
        x/y/z is accepted as well; unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {k: v for k, v in data.items() if k in known}
        position = data.get('position')
        if isinstance(position, Mapping):
            for axis in ('x', 'y', 'z'):
                if axis in position:
                    values[axis] = position[axis]
        return cls(**values)

    def to_variables(self) -> Dict[str, BotScriptValue]:
        """Return the ``bot_*`` variables this snapshot defines."""
        result: Dict[str, BotScriptValue] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, bool) or isinstance(value, str):
                result[SYSTEM_PREFIX + f.name] = value
            else:
                result[SYSTEM_PREFIX + f.name] = float(value)
        return result


def collect_snapshot(port: Any) -> SystemSnapshot:
    """Read the telemetry calls of a capability port into a snapshot."""
    vitals = port.get_vital_stats()
    env = port.get_environment_info()
    inventory = port.get_inventory_info()
    return SystemSnapshot(
        health=vitals.health,
        food=vitals.hunger,
        saturation=vitals.saturation,
        oxygen=vitals.oxygen,
        experience_level=vitals.experience_level,
        x=env.position.x,
        y=env.position.y,
        z=env.position.z,
        light_level=env.light_level,
        time_of_day=env.time_of_day,
        is_night=env.is_night,
        is_raining=env.is_raining,
        inventory_count=inventory.used_slots,
        inventory_slots_total=inventory.total_slots,
        inventory_slots_empty=inventory.empty_slots,
        inventory_full=port.is_full(),
        equipped_item=inventory.equipped_item or 'none',
        nearby_players=env.nearby_players,
        nearby_mobs=env.nearby_hostile_mobs,
        nearby_animals=env.nearby_animals,
        is_in_danger=vitals.is_in_danger,
        needs_food=port.needs_to_eat(),
        health_low=port.is_health_low(),
        hunger_low=port.is_hunger_low(),
    )
