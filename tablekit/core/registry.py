"""Engine registry mapping table modes to engine classes."""

from typing import TYPE_CHECKING, Dict, Type

if TYPE_CHECKING:
    from .base import BaseTableEngine

# Global registry mapping mode names to engine classes
_ENGINE_REGISTRY: Dict[str, Type["BaseTableEngine"]] = {}


def register_engine(mode: str):
    """
    Decorator to register an engine class under a table mode.

    Args:
        mode: Unique mode name (e.g., 'client', 'server')

    Returns:
        Decorator function

    Example:
        @register_engine("client")
        class ClientTableEngine(BaseTableEngine):
            ...
    """

    def decorator(cls: Type["BaseTableEngine"]) -> Type["BaseTableEngine"]:
        if mode in _ENGINE_REGISTRY:
            raise ValueError(
                f"Table mode '{mode}' is already registered to "
                f"{_ENGINE_REGISTRY[mode].__name__}"
            )
        _ENGINE_REGISTRY[mode] = cls
        cls._engine_mode = mode
        return cls

    return decorator


def get_engine_class(mode: str) -> Type["BaseTableEngine"]:
    """
    Get an engine class by its registered mode.

    Raises:
        KeyError: If no engine is registered for that mode
    """
    if mode not in _ENGINE_REGISTRY:
        available = list(_ENGINE_REGISTRY.keys())
        raise KeyError(
            f"No table engine registered for mode '{mode}'. "
            f"Available modes: {available}"
        )
    return _ENGINE_REGISTRY[mode]


def create_engine(mode: str, **kwargs) -> "BaseTableEngine":
    """
    Build an engine for ``mode``.

    Args:
        mode: Registered mode name
        **kwargs: Passed to the engine constructor

    Returns:
        The new engine
    """
    return get_engine_class(mode)(**kwargs)


def list_registered_engines() -> Dict[str, Type["BaseTableEngine"]]:
    return _ENGINE_REGISTRY.copy()


def is_registered(mode: str) -> bool:
    return mode in _ENGINE_REGISTRY
