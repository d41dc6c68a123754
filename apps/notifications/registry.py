# apps/notifications/registry.py

import logging
import threading
from collections import defaultdict
from typing import Dict, Optional, Set

logger = logging.getLogger(__name__)


class ChannelRegistry:
    """
    Live connection -> user bindings for this process

    A user may hold many connections (tabs, devices); a connection belongs
    to at most one user. Nothing is persisted: bindings vanish with the
    process, so fan-out assumes a single serving instance.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._connections: Dict[str, Set[str]] = defaultdict(set)
        self._owners: Dict[str, str] = {}

    def bind(self, connection_id: str, user_id) -> bool:
        """
        Binds a connection to a user

        Idempotent. Declaring a different user moves the connection.
        Returns True when the binding changed.
        """
        user_id = str(user_id)

        with self._lock:
            previous = self._owners.get(connection_id)
            if previous == user_id:
                return False

            if previous is not None:
                self._discard(connection_id, previous)

            self._owners[connection_id] = user_id
            self._connections[user_id].add(connection_id)

        logger.info(f"🔗 Connection {connection_id} bound to user {user_id}")
        return True

    def unbind(self, connection_id: str) -> Optional[str]:
        """Releases a connection; returns the user it belonged to"""
        with self._lock:
            user_id = self._owners.pop(connection_id, None)
            if user_id is not None:
                self._discard(connection_id, user_id)

        if user_id is not None:
            logger.info(f"🔌 Connection {connection_id} released by user {user_id}")
        return user_id

    def connections_for(self, user_id) -> Set[str]:
        """Snapshot of the user's live connections"""
        with self._lock:
            return set(self._connections.get(str(user_id), ()))

    def user_for(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._owners.get(connection_id)

    def clear(self):
        with self._lock:
            self._connections.clear()
            self._owners.clear()

    def _discard(self, connection_id: str, user_id: str):
        connections = self._connections.get(user_id)
        if connections is None:
            return
        connections.discard(connection_id)
        if not connections:
            del self._connections[user_id]


# Process-wide registry
channel_registry = ChannelRegistry()
