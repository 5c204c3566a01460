"""
Server package for the LAN Chat Relay.

This package contains all server-side functionality including:
- Session registry
- Chat broadcasting and command handling
- Heartbeat liveness monitoring
- Client connection management
- Configuration and utilities
"""
