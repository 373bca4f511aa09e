from typing import Any, Optional


def single_related(value: Any) -> Optional[Any]:
    """Flatten a joined relation that is expected to hold one row.

    A list or tuple yields its first element (None when empty); anything else
    is returned unchanged.
    """
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value
