from ._compare import strict_equal
from ._json import json_copy, json_dumpb, json_dumps

__all__ = (
    "json_copy",
    "json_dumpb",
    "json_dumps",
    "strict_equal",
)
