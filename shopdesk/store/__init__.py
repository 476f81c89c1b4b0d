from .changes import ChangeEvent, ChangeFeed, Subscription

__all__ = ["ChangeEvent", "ChangeFeed", "Subscription"]
