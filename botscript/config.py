"""Interpreter settings and their YAML loader.

A config file may hold the settings at its top level or nested under a
``botscript:`` key:

    botscript:
      goto_timeout: 30
      max_interaction_distance: 4.5
      equip_destination: hand
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml


@dataclass
class InterpreterConfig:
    goto_timeout: float = 60.0
    max_interaction_distance: float = 6.0
    equip_destination: str = 'hand'
    bot_name: str = 'BotScript'
    version: str = '1.0.0'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'InterpreterConfig':
        defaults = cls()
        cfg = cls(
            goto_timeout=float(data.get('goto_timeout', defaults.goto_timeout)),
            max_interaction_distance=float(
                data.get('max_interaction_distance', defaults.max_interaction_distance)
            ),
            equip_destination=str(data.get('equip_destination', defaults.equip_destination)),
            bot_name=str(data.get('bot_name', defaults.bot_name)),
            version=str(data.get('version', defaults.version)),
        )
        if cfg.goto_timeout <= 0:
            raise ValueError(f"goto_timeout must be positive, got {cfg.goto_timeout}")
        if cfg.max_interaction_distance <= 0:
            raise ValueError(
                f"max_interaction_distance must be positive, got {cfg.max_interaction_distance}"
            )
        return cfg


def load_config(path: Union[str, Path]) -> InterpreterConfig:
    """Load an :class:`InterpreterConfig` from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at top level")

    section: Dict[str, Any] = data.get('botscript', data)
    if not isinstance(section, dict):
        raise ValueError(f"'botscript' section in {path} must be a mapping")
    return InterpreterConfig.from_dict(section)
