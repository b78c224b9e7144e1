"""Block version lifecycle state machine."""

from .engine import BlockDetails, LifecycleEngine, LifecycleOutcome

__all__ = ["BlockDetails", "LifecycleEngine", "LifecycleOutcome"]
