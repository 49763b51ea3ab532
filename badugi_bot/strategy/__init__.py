"""CPU decision engine for Badugi.

Maps a frozen table snapshot to one action per turn, using opening
ranges before the first draw and opponents' draw counts afterwards.
Every choice is a pure function of the visible table state.

Key public API:
    DecisionMaker    -- Betting and discard decisions for CPU seats
    Decision         -- Chosen action with its reasoning
    StrategyConfig   -- Tuning constants (load_strategy_config for JSON overrides)
    StrategyProfile  -- Per-seat personality multipliers
    StrategyError    -- Engine invoked in a state it must not decide in
"""

from badugi_bot.strategy.config import DEFAULT_CONFIG, StrategyConfig, load_strategy_config
from badugi_bot.strategy.decision_maker import (
    Decision,
    DecisionMaker,
    StrategyError,
    state_roll,
)
from badugi_bot.strategy.profiles import StrategyProfile, get_position_category, get_strategy_profile

__all__ = [
    "DEFAULT_CONFIG",
    "Decision",
    "DecisionMaker",
    "StrategyConfig",
    "StrategyError",
    "StrategyProfile",
    "get_position_category",
    "get_strategy_profile",
    "load_strategy_config",
    "state_roll",
]
