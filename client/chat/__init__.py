"""
Chat module for client-side messaging functionality.

Handles:
- Parsing typed input into packets
- Sending packets to the server
- Rendering received packets
- Ping replies
"""
