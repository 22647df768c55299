"""Headless turn engine for Run.

IMPORTANT: This package must never import pygame.
"""

from .machine import FrameInput, GameMachine
from .rules import RuleBook, RulePool
from .scoring import fib, score, score_breakdown
from .session import GameConfig, GameSession, new_session
from .types import Card, GameState, RuleDefinition, RuleKey
from .validity import is_valid_extension, required_delta
from .view import GameView, build_view

__all__ = [
    "Card",
    "FrameInput",
    "GameConfig",
    "GameMachine",
    "GameSession",
    "GameState",
    "GameView",
    "RuleBook",
    "RuleDefinition",
    "RuleKey",
    "RulePool",
    "build_view",
    "fib",
    "is_valid_extension",
    "new_session",
    "required_delta",
    "score",
    "score_breakdown",
]
