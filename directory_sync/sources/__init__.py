"""Remote sources the refresh coordinator can fetch from."""

from .base import RemoteSource
from .firebase import FirebaseRestSource

__all__ = ["RemoteSource", "FirebaseRestSource"]
