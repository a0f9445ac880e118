from .sweeper import SlotSweeper
from .registry import SlotRegistry
from .service import SessionBroker

__all__ = ["SessionBroker", "SlotRegistry", "SlotSweeper"]
