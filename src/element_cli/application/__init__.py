"""Application services for CLI and SDK callers."""

from .services import LifecycleService, build_engine, error_result

__all__ = ["LifecycleService", "build_engine", "error_result"]
