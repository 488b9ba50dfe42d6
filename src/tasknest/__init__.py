"""Provide the public `tasknest` package exports."""

from __future__ import annotations

from .board.ordering import MoveIntent
from .engine import BoardEngine

__all__ = ["BoardEngine", "MoveIntent"]
