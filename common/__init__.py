"""
Shared protocol code for the LAN Chat Relay.

Used by both server and client:
- Constants and packet types
- Length-prefixed framing
- Packet encoding/decoding
"""
