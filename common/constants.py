"""
Shared constants for the LAN Chat Relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 7777

# Framing
FRAME_HEADER_SIZE = 4  # bytes for the big-endian length prefix
MAX_MESSAGE_SIZE = 64 * 1024  # largest payload accepted or sent
SEND_BUFFER_LIMIT = 1024 * 1024  # unsent bytes allowed per session before it is dropped

# Timeouts
HEARTBEAT_INTERVAL = 10  # seconds between pings
HEARTBEAT_TIMEOUT = 30  # seconds of silence before eviction

# Sessions
GUEST_NAME_PREFIX = 'Guest'
SERVER_SENDER = 'SERVER'


# Packet Types
class PacketTypes:
    # Client to Server
    CHAT = 'chat'
    COMMAND = 'command'

    # Server to Client
    SYSTEM = 'system'

    # Either direction
    PING = 'ping'
    PONG = 'pong'

    ALL = (CHAT, SYSTEM, COMMAND, PING, PONG)


# Commands understood by the server
class Commands:
    NAME = 'name'
    WHO = 'who'
    HELP = 'help'
    QUIT = 'quit'


HELP_TEXT = (
    "Commands: /name <newname> - change your display name, "
    "/who - list connected users, "
    "/help - show this help, "
    "/quit - leave the chat"
)
