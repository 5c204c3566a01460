"""
Session module for server-side connection identity.

Handles:
- Session id allocation
- Username and liveness state
- Concurrent session lookup and iteration
"""
