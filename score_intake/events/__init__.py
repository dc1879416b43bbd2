from score_intake.events.bus import ProgressEventBus, Subscription
from score_intake.events.models import EventType, ProgressEvent

__all__ = ["EventType", "ProgressEvent", "ProgressEventBus", "Subscription"]
