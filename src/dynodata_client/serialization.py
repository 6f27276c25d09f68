"""
JSON request body serialization
"""

import json
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_jsonable_python


def drop_none(value: Any) -> Any:
    """Recursively remove None-valued keys from mappings"""
    if isinstance(value, dict):
        return {k: drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [drop_none(item) for item in value]
    return value


def to_json_bytes(data: Any) -> bytes:
    """Serialize a request body as UTF-8 JSON, omitting null fields"""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(
        drop_none(data), default=to_jsonable_python, ensure_ascii=False, separators=(",", ":")
    ).encode("utf-8")
