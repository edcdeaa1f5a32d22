"""School / polling-centre record as published by the remote directory."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Mapping, Optional

from directory_sync.models.coercion import as_float, as_int, as_str

# Python attribute -> remote (camelCase) key.
_REMOTE_KEYS: Dict[str, str] = {
    "id": "id",
    "school_number": "schoolNumber",
    "school_name": "schoolName",
    "school_status": "schoolStatus",
    "union_name": "unionName",
    "address": "address",
    "latitude": "latitude",
    "longitude": "longitude",
    "male_students": "maleStudents",
    "female_students": "femaleStudents",
    "total_students": "totalStudents",
    "daily_attendance": "dailyAttendance",
    "headmaster_name": "headmasterName",
    "headmaster_mobile": "headmasterMobile",
    "asst_headmaster_name": "asstHeadmasterName",
    "asst_headmaster_mobile": "asstHeadmasterMobile",
    "police_name": "policeName",
    "police_mobile": "policeMobile",
    "last_updated": "lastUpdated",
}

# Attributes parsed as numbers; everything else is text.
_COERCERS: Dict[str, Callable[[Any, Any], Any]] = {
    "latitude": as_float,
    "longitude": as_float,
    "male_students": as_int,
    "female_students": as_int,
    "total_students": as_int,
    "daily_attendance": as_int,
}


@dataclass(frozen=True, slots=True)
class SchoolRecord:
    """One directory entry. Immutable; replaced wholesale on every refresh."""

    id: str = ""
    school_number: str = ""
    school_name: str = ""
    school_status: str = ""  # "good", "normal", "bad"

    union_name: str = ""
    address: str = ""
    latitude: float = 0.0
    longitude: float = 0.0

    male_students: int = 0
    female_students: int = 0
    total_students: int = 0
    daily_attendance: int = 0

    headmaster_name: str = ""
    headmaster_mobile: str = ""
    asst_headmaster_name: str = ""
    asst_headmaster_mobile: str = ""

    police_name: str = ""
    police_mobile: str = ""

    last_updated: str = ""

    @property
    def attendance_percentage(self) -> int:
        if self.total_students <= 0:
            return 0
        return int(self.daily_attendance / self.total_students * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {remote: getattr(self, attr) for attr, remote in _REMOTE_KEYS.items()}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SchoolRecord":
        values: Dict[str, Any] = {}
        for spec in fields(cls):
            coerce = _COERCERS.get(spec.name, as_str)
            values[spec.name] = coerce(payload.get(_REMOTE_KEYS[spec.name]), spec.default)
        return cls(**values)

    @classmethod
    def from_snapshot(cls, key: Optional[str], payload: Mapping[str, Any]) -> "SchoolRecord":
        """Build from a remote child node, using the child key when ``id`` is absent."""
        record = cls.from_dict(payload)
        if not record.id and key:
            return cls.from_dict({**payload, "id": key})
        return record


__all__ = ["SchoolRecord"]
