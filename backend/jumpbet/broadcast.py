"""Outbound pushes from the game core to connected players.

The core only knows player handles. Whatever owns the connections
implements ``push``; pushes are fire-and-forget and must not block.
"""
import logging
from typing import Any, Iterable, Optional


class Broadcaster:
    def push(self, handle: str, event: str, payload: Any) -> None:
        raise NotImplementedError

    def push_all(self, handles: Iterable[str], event: str, payload: Any) -> None:
        for handle in handles:
            self.push(handle, event, payload)


class NullBroadcaster(Broadcaster):
    def push(self, handle, event, payload):
        pass


class SocketIOBroadcaster(Broadcaster):
    """Emit to a single Socket.IO sid on the game namespace."""

    def __init__(self, socketio, namespace: str = '/ws', logger: Optional[logging.Logger] = None):
        self.socketio = socketio
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)

    def push(self, handle, event, payload):
        try:
            self.socketio.emit(event, payload, to=handle, namespace=self.namespace)
        except Exception as exc:
            # A dead socket must never break the round for everyone else
            self.logger.warning(f"[push-failed] handle={handle} event={event} error={exc}")
