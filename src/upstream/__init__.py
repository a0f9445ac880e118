from .realtime import UpstreamConnector
from .sessions import UpstreamSessionClient

__all__ = ["UpstreamConnector", "UpstreamSessionClient"]
