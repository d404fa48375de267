"""Named sorter registry used by column definitions."""

from typing import Any, Callable, Dict

Comparator = Callable[[Any, Any], int]

# Global registry mapping sorter names to comparator functions
_SORTER_REGISTRY: Dict[str, Comparator] = {}


def register_sorter(name: str):
    """
    Decorator to register a comparator under a sorter name.

    Comparators receive two present (non-missing) values and return a
    negative number, zero or a positive number. Missing values never reach
    a comparator; the sort engine places them last on its own.

    Args:
        name: Unique name for the sorter (e.g., 'number', 'date')

    Returns:
        Decorator function

    Example:
        @register_sorter("casefold")
        def compare_casefold(a, b):
            ...
    """

    def decorator(func: Comparator) -> Comparator:
        if name in _SORTER_REGISTRY:
            raise ValueError(
                f"Sorter '{name}' is already registered to "
                f"{_SORTER_REGISTRY[name].__name__}"
            )
        _SORTER_REGISTRY[name] = func
        return func

    return decorator


def get_sorter(name: str) -> Comparator:
    """
    Get a comparator by its registered sorter name.

    Args:
        name: The registered sorter name

    Returns:
        The comparator function

    Raises:
        KeyError: If no sorter is registered with that name
    """
    if name not in _SORTER_REGISTRY:
        available = list(_SORTER_REGISTRY.keys())
        raise KeyError(
            f"No sorter registered with name '{name}'. "
            f"Available sorters: {available}"
        )
    return _SORTER_REGISTRY[name]


def list_registered_sorters() -> Dict[str, Comparator]:
    """Return a copy of the sorter registry."""
    return _SORTER_REGISTRY.copy()


def is_registered(name: str) -> bool:
    """Check if a sorter name is registered."""
    return name in _SORTER_REGISTRY
