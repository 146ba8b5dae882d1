"""Generation engine: stage definitions and runners."""

from .types import StageRunner, StageSpec

__all__ = ["StageRunner", "StageSpec"]
