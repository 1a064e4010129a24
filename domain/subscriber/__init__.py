from .entity import SubscriberEntry
from .repository import SubscriberRepository

__all__ = ["SubscriberEntry", "SubscriberRepository"]
