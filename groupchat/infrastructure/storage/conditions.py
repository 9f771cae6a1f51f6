"""
Write conditions evaluated by a backend against the currently stored record.

The record is None when nothing is stored under the key. Attribute paths may
be dotted to reach into nested documents ("sender.userId").
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

_MISSING = object()


def resolve_path(record: Optional[dict], path: str) -> Any:
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


class Condition(ABC):
    @abstractmethod
    def evaluate(self, record: Optional[dict]) -> bool: ...


@dataclass(frozen=True)
class AttributeExists(Condition):
    path: str

    def evaluate(self, record: Optional[dict]) -> bool:
        return resolve_path(record, self.path) is not _MISSING


@dataclass(frozen=True)
class AttributeNotExists(Condition):
    path: str

    def evaluate(self, record: Optional[dict]) -> bool:
        return resolve_path(record, self.path) is _MISSING


@dataclass(frozen=True)
class AttributeEquals(Condition):
    path: str
    value: Any

    def evaluate(self, record: Optional[dict]) -> bool:
        found = resolve_path(record, self.path)
        return found is not _MISSING and found == self.value
