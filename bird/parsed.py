"""
Parsed results and the tagged QueryResult wrapper.

A parsed birdc result is a plain dict whose values are scalars, nested
dicts or lists of dicts. The accessors below never raise on unexpected
shapes; they return None and let the caller skip or fall back.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

BIRD_ERROR = {"error": "bird unreachable"}


def get_mapping(data: Any, key: str) -> Optional[dict]:
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return value if isinstance(value, dict) else None


def get_list(data: Any, key: str) -> Optional[list]:
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return value if isinstance(value, list) else None


def get_str(data: Any, key: str) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return value if isinstance(value, str) else None


def get_int(data: Any, key: str) -> Optional[int]:
    """Integer field, accepting digit strings; bools are rejected."""
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class ResultState(Enum):
    """Outcome of a dispatched query."""
    OK = "ok"
    UNREACHABLE = "unreachable"    # birdc failed, never cached
    NOT_ADMITTED = "not_admitted"  # rejected by the rate limiter


@dataclass
class QueryResult:
    """
    A dispatched query outcome.

    Replaces comparing payloads against two magic sentinel mappings:
    callers branch on `state` (or `is_special`) before touching `data`.
    """
    state: ResultState
    data: dict = field(default_factory=dict)
    from_cache: bool = False

    @classmethod
    def ok(cls, data: dict, from_cache: bool = False) -> "QueryResult":
        return cls(ResultState.OK, data, from_cache)

    @classmethod
    def unreachable(cls) -> "QueryResult":
        return cls(ResultState.UNREACHABLE)

    @classmethod
    def not_admitted(cls) -> "QueryResult":
        return cls(ResultState.NOT_ADMITTED)

    @property
    def is_special(self) -> bool:
        return self.state is not ResultState.OK

    def get(self, key: str, default: Any = None) -> Any:
        """Top-level payload field; special results have no fields."""
        if self.is_special:
            return default
        return self.data.get(key, default)

    def to_dict(self) -> Optional[dict]:
        """Wire form: payload, the fixed error mapping, or None."""
        if self.state is ResultState.UNREACHABLE:
            return copy.deepcopy(BIRD_ERROR)
        if self.state is ResultState.NOT_ADMITTED:
            return None
        return self.data
