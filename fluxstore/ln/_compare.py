from typing import Any

__all__ = ("strict_equal",)


def strict_equal(a: Any, b: Any) -> bool:
    """``a == b``, except that a bool never equals an int or float."""
    # True == 1 in python, but a flag is not a count
    return isinstance(a, bool) == isinstance(b, bool) and a == b
