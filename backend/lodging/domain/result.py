from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """Outcome of a service call: accumulated error messages plus an optional payload."""

    errors: List[str] = field(default_factory=list)
    payload: Optional[T] = None

    @property
    def is_success(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)
