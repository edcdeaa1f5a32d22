"""Result types produced by a refresh call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class SuccessOutcome:
    records: Tuple[Any, ...]
    served_from_cache: bool
    message: str = ""


@dataclass(frozen=True, slots=True)
class CooldownOutcome:
    minutes_remaining: int
    message: str = ""


@dataclass(frozen=True, slots=True)
class ErrorOutcome:
    message: str
    error: Optional[BaseException] = field(default=None, compare=False)


RefreshOutcome = Union[SuccessOutcome, CooldownOutcome, ErrorOutcome]


__all__ = ["SuccessOutcome", "CooldownOutcome", "ErrorOutcome", "RefreshOutcome"]
