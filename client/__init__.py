"""
Client package for the LAN Chat Relay.

This package contains the terminal client:
- Turning typed lines into chat and command packets
- Rendering packets from the server
- Answering server pings
- Configuration and utilities
"""
