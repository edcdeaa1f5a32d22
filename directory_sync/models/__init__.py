"""Record types handled by the sync subsystem."""

from .contact import EmergencyContact
from .school import SchoolRecord

__all__ = ["EmergencyContact", "SchoolRecord"]
