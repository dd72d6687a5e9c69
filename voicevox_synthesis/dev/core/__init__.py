from .mock import MockRuntime, MockSessionSet

__all__ = ["MockRuntime", "MockSessionSet"]
