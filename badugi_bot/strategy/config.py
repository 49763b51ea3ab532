"""Tuning constants for the CPU strategy, with optional JSON overrides.

Default path: ~/.badugi_bot/strategy_config.json

Expected JSON format (every key optional):
    {
        "raise_cap": 5,
        "strong_hand_cutoff": 10,
        "break_threshold": 60,
        "min_strength_signals": 2,
        "max_smooth_gap": 3.0,
        "outs": {"THREE_CARD": 10, "TWO_CARD": 20, "ONE_CARD": 30},
        "profiles": [
            {"name": "rock", "aggression_factor": 0.8,
             "bluff_frequency": 0.1, "tightness_factor": 1.2}
        ]
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

from badugi_bot.strategy.opening_ranges import OPENING_CRITERIA, OpeningTable
from badugi_bot.strategy.profiles import STRATEGY_PROFILES, StrategyProfile
from badugi_bot.utils.constants import (
    DECK_SIZE,
    HAND_SIZE,
    RAISE_CAP,
    HandClass,
    Rank,
)

logger = logging.getLogger("badugi_bot.strategy.config")

DEFAULT_CONFIG_PATH = Path.home() / ".badugi_bot" / "strategy_config.json"

_DEFAULT_OUTS = MappingProxyType({
    HandClass.THREE_CARD: 10,
    HandClass.TWO_CARD: 20,
    HandClass.ONE_CARD: 30,
})


@dataclass(frozen=True)
class StrategyConfig:
    """Every number the decision engine relies on."""

    raise_cap: int = RAISE_CAP
    strong_hand_cutoff: Rank = Rank.TEN  # Post-draw value bets at or below this high card
    break_threshold: int = 60  # Minimum breakability before breaking is considered
    min_strength_signals: int = 2  # Opponents drawing 0-1 needed to break
    max_smooth_gap: float = 3.0
    outs: MappingProxyType = field(default_factory=lambda: _DEFAULT_OUTS)
    deck_size: int = DECK_SIZE
    hand_size: int = HAND_SIZE
    profiles: tuple[StrategyProfile, ...] = STRATEGY_PROFILES
    opening_table: OpeningTable = field(default_factory=lambda: OPENING_CRITERIA)

    def outs_for(self, hand_class: HandClass) -> int:
        return self.outs.get(hand_class, self.outs[HandClass.ONE_CARD])


DEFAULT_CONFIG = StrategyConfig()

_SCALAR_KEYS = {
    "raise_cap": int,
    "break_threshold": int,
    "min_strength_signals": int,
    "max_smooth_gap": float,
}


def load_strategy_config(config_path: Path | None = None) -> StrategyConfig:
    """Load strategy overrides from JSON on top of the defaults.

    A missing file gives the defaults silently. An unreadable file, or one
    with a malformed or out-of-range entry, is logged and also gives the
    defaults.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return DEFAULT_CONFIG

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read strategy config at %s: %s", path, e)
        return DEFAULT_CONFIG

    if not isinstance(data, dict):
        logger.warning("Strategy config at %s is not a JSON object", path)
        return DEFAULT_CONFIG

    try:
        return _apply_overrides(DEFAULT_CONFIG, data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Invalid strategy config at %s: %r", path, e)
        return DEFAULT_CONFIG


def _apply_overrides(base: StrategyConfig, data: dict[str, Any]) -> StrategyConfig:
    """Merge ``data`` onto ``base``.

    Raises:
        KeyError: If a profile entry is missing a required factor.
        TypeError: If a section or value has the wrong JSON type.
        ValueError: If a value is out of range or names an unknown hand class.
    """
    known = set(_SCALAR_KEYS) | {"strong_hand_cutoff", "outs", "profiles"}
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown strategy config key: %s", key)

    changes: dict[str, Any] = {
        key: convert(data[key]) for key, convert in _SCALAR_KEYS.items() if key in data
    }
    if changes.get("raise_cap", 1) < 1:
        raise ValueError("raise_cap must be at least 1")

    if "strong_hand_cutoff" in data:
        changes["strong_hand_cutoff"] = Rank(int(data["strong_hand_cutoff"]))

    if "outs" in data:
        outs = dict(base.outs)
        for name, value in _expect(data["outs"], dict, "outs").items():
            outs[HandClass(name)] = int(value)
        changes["outs"] = MappingProxyType(outs)

    if "profiles" in data:
        profiles = []
        for i, p in enumerate(_expect(data["profiles"], list, "profiles")):
            p = _expect(p, dict, f"profiles[{i}]")
            profiles.append(StrategyProfile(
                name=str(p.get("name", f"profile{i + 1}")),
                aggression_factor=float(p["aggression_factor"]),
                bluff_frequency=float(p["bluff_frequency"]),
                tightness_factor=float(p["tightness_factor"]),
            ))
        if not profiles:
            raise ValueError("Strategy config must define at least one profile")
        changes["profiles"] = tuple(profiles)

    return replace(base, **changes)


def _expect(value: Any, kind: type, where: str) -> Any:
    if not isinstance(value, kind):
        raise TypeError(f"{where} must be a JSON {'object' if kind is dict else 'array'}")
    return value
