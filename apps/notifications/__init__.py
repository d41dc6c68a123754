# apps/notifications/__init__.py

"""
Notifications - live task updates

- Process-local registry of websocket connections per user
- Fan-out of task events to every connection of a user
- WebSocket consumer speaking the join/ping protocol
"""
