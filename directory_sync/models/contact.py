"""Emergency contact reference entry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from directory_sync.models.coercion import as_str


@dataclass(frozen=True, slots=True)
class EmergencyContact:
    name: str = ""
    number: str = ""
    category: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "number": self.number, "category": self.category}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EmergencyContact":
        return cls(
            name=as_str(payload.get("name")),
            number=as_str(payload.get("number")),
            category=as_str(payload.get("category")),
        )

    @classmethod
    def from_snapshot(cls, key: Optional[str], payload: Mapping[str, Any]) -> "EmergencyContact":
        contact = cls.from_dict(payload)
        if not contact.name and key:
            return cls(name=key, number=contact.number, category=contact.category)
        return contact


__all__ = ["EmergencyContact"]
