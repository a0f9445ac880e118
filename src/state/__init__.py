from .slot import RelaySlot
from .close import CloseInfo
from .relay import RelayPhase
from .runtime import RuntimeDeps
from .settings import AppSettings
from .client import ClientSessionState
from .session import BrokerSession, UpstreamSession

__all__ = [
    "AppSettings",
    "BrokerSession",
    "ClientSessionState",
    "CloseInfo",
    "RelayPhase",
    "RelaySlot",
    "RuntimeDeps",
    "UpstreamSession",
]
