"""
Chat module for server-side messaging functionality.

Handles:
- Packet fan-out to connected sessions
- Slash-command dispatch
"""
