"""
Protocol definitions for the LAN Chat Relay.

This module defines the packet structure and the JSON encoding used in
communication between client and server components.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from common.constants import PacketTypes, SERVER_SENDER


# Wire field order; 'from' maps to Packet.sender
PACKET_FIELDS = ('type', 'from', 'text', 'name', 'args')


@dataclass(frozen=True)
class Packet:
    """Packet structure. Fields that do not apply to a type are None."""
    type: str
    sender: Optional[str] = None
    text: Optional[str] = None
    name: Optional[str] = None
    args: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation with absent fields omitted."""
        values = (self.type, self.sender, self.text, self.name, self.args)
        return {key: value for key, value in zip(PACKET_FIELDS, values) if value is not None}


def encode_packet(packet: Packet) -> bytes:
    """Encode a packet as compact UTF-8 JSON."""
    return json.dumps(packet.to_dict(), ensure_ascii=False, separators=(',', ':')).encode('utf-8')


def decode_packet(data: bytes) -> Optional[Packet]:
    """
    Decode a packet from its JSON payload.

    Returns None for anything that is not a well-formed packet object:
    bad UTF-8, bad JSON, a non-object document, a missing or empty type,
    or an optional field that is neither a string nor null. Unknown keys
    are ignored and unknown type strings are accepted.
    """
    try:
        message = json.loads(data.decode('utf-8'))
    except (UnicodeDecodeError, ValueError):
        return None

    if not isinstance(message, dict):
        return None

    msg_type = message.get('type')
    if not isinstance(msg_type, str) or not msg_type:
        return None

    optional = {}
    for key in PACKET_FIELDS[1:]:
        value = message.get(key)
        if value is not None and not isinstance(value, str):
            return None
        optional[key] = value

    return Packet(
        type=msg_type,
        sender=optional['from'],
        text=optional['text'],
        name=optional['name'],
        args=optional['args']
    )


def create_chat_packet(text: str, sender: Optional[str] = None) -> Packet:
    """Create a chat packet. Clients leave sender unset; the server fills it in."""
    return Packet(type=PacketTypes.CHAT, sender=sender, text=text)


def create_system_packet(text: str) -> Packet:
    """Create a server-authored system packet."""
    return Packet(type=PacketTypes.SYSTEM, sender=SERVER_SENDER, text=text)


def create_command_packet(name: str, args: str = '') -> Packet:
    """Create a command packet."""
    return Packet(type=PacketTypes.COMMAND, name=name, args=args)


def create_ping_packet(sender: Optional[str] = SERVER_SENDER) -> Packet:
    """Create a liveness check."""
    return Packet(type=PacketTypes.PING, sender=sender)


def create_pong_packet() -> Packet:
    """Create a liveness check response."""
    return Packet(type=PacketTypes.PONG)
