"""
Canonical JSON form used to compare records independently of key order
"""

import json
from typing import Any

from pydantic import BaseModel

def canonical_dumps(obj: Any) -> str:
    """Return canonical JSON with sorted keys and no whitespace"""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(mode="json", by_alias=True)
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )

def canonical_equal(left: Any, right: Any) -> bool:
    return canonical_dumps(left) == canonical_dumps(right)
