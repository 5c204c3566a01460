"""
Heartbeat module for server-side liveness checks.

Handles:
- Periodic ping broadcast
- Eviction of silent sessions
"""
