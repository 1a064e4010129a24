"""Infrastructure models package exports."""
from .base import Base, metadata
from .subscriber import SubscriberModel

__all__ = [
    "Base",
    "metadata",
    "SubscriberModel",
]
