from .broker import BrokerClient
from .reconnect import ReconnectPolicy
from .session import ClientSessionManager

__all__ = ["BrokerClient", "ClientSessionManager", "ReconnectPolicy"]
