"""Search mode registry used to resolve a table's column filter mode by name."""

from typing import TYPE_CHECKING, Dict, Type

if TYPE_CHECKING:
    from ..preprocessing.filtering import SearchMode

# Global registry mapping search mode names to their classes
_SEARCH_MODE_REGISTRY: Dict[str, Type["SearchMode"]] = {}


def register_search_mode(name: str):
    """
    Decorator to register a search mode class in the registry.

    Args:
        name: Unique name for the search mode (e.g., 'multiField')

    Returns:
        Decorator function

    Example:
        @register_search_mode("multiField")
        class MultiFieldSearch(SearchMode):
            ...
    """

    def decorator(cls: Type["SearchMode"]) -> Type["SearchMode"]:
        if name in _SEARCH_MODE_REGISTRY:
            raise ValueError(
                f"Search mode '{name}' is already registered to "
                f"{_SEARCH_MODE_REGISTRY[name].__name__}"
            )
        _SEARCH_MODE_REGISTRY[name] = cls
        cls.name = name
        return cls

    return decorator


def get_search_mode(name: str) -> Type["SearchMode"]:
    """
    Get a search mode class by its registered name.

    Args:
        name: The registered search mode name

    Returns:
        The search mode class

    Raises:
        KeyError: If no search mode is registered with that name
    """
    if name not in _SEARCH_MODE_REGISTRY:
        available = list(_SEARCH_MODE_REGISTRY.keys())
        raise KeyError(
            f"No search mode registered with name '{name}'. "
            f"Available search modes: {available}"
        )
    return _SEARCH_MODE_REGISTRY[name]


def list_search_modes() -> Dict[str, Type["SearchMode"]]:
    """Return a copy of all registered search modes."""
    return _SEARCH_MODE_REGISTRY.copy()


def is_registered(name: str) -> bool:
    """Check if a search mode name is registered."""
    return name in _SEARCH_MODE_REGISTRY
