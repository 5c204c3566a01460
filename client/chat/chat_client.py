"""
Chat client module.

This module handles client-side chat messaging functionality.
"""

import asyncio
from typing import Callable, Optional

from common.constants import PacketTypes, Commands
from common.framing import FramingError, read_message, write_message
from common.protocol_definitions import (
    Packet, encode_packet, decode_packet,
    create_chat_packet, create_command_packet, create_pong_packet
)
from client.utils.logger import logger


def parse_input(line: str) -> Optional[Packet]:
    """
    Turn a typed line into a packet.

    '/name Alice' becomes a command packet (name='name', args='Alice');
    anything else becomes a chat packet. Blank lines produce nothing.
    """
    line = line.strip()
    if not line:
        return None

    if line.startswith('/'):
        parts = line[1:].split(None, 1)
        name = parts[0] if parts else ''
        args = parts[1] if len(parts) > 1 else ''
        return create_command_packet(name, args)

    return create_chat_packet(line)


def is_quit(packet: Optional[Packet]) -> bool:
    return (
        packet is not None
        and packet.type == PacketTypes.COMMAND
        and (packet.name or '').lower() == Commands.QUIT
    )


def format_packet(packet: Packet) -> Optional[str]:
    """Render a packet as a terminal line, or None if it is not for display."""
    if packet.type == PacketTypes.CHAT:
        return f"{packet.sender or '?'}: {packet.text or ''}"
    if packet.type == PacketTypes.SYSTEM:
        return f"[{packet.sender or 'SERVER'}] {packet.text or ''}"
    if packet.type in (PacketTypes.PING, PacketTypes.PONG):
        return None
    return f"[{packet.type}] {packet.text or ''}"


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, reader: Optional[asyncio.StreamReader] = None,
                 writer: Optional[asyncio.StreamWriter] = None,
                 output: Callable[[str], None] = print):
        self.reader = reader
        self.writer = writer
        self.output = output

    def set_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Set the stream pair used for sending and receiving."""
        self.reader = reader
        self.writer = writer

    async def send_packet(self, packet: Packet) -> bool:
        """Send a packet to the server."""
        if not self.writer:
            logger.error("Not connected to server")
            return False

        try:
            await write_message(self.writer, encode_packet(packet))
            return True
        except Exception as e:
            logger.error(f"Failed to send packet: {e}")
            return False

    async def send_line(self, line: str) -> Optional[Packet]:
        """Parse a typed line and send it. Returns the packet sent, if any."""
        packet = parse_input(line)
        if packet is not None:
            await self.send_packet(packet)
        return packet

    async def handle_packet(self, packet: Packet):
        """Handle a packet from the server."""
        if packet.type == PacketTypes.PING:
            await self.send_packet(create_pong_packet())
            return

        rendered = format_packet(packet)
        if rendered is not None:
            self.output(rendered)

    async def listen(self):
        """Receive and handle packets until the server closes the connection."""
        while True:
            try:
                data = await read_message(self.reader)
            except FramingError as e:
                logger.error(f"Protocol error from server: {e}")
                break
            except ConnectionError as e:
                logger.error(f"Connection lost: {e}")
                break

            if data is None:
                logger.info("Server closed connection")
                break

            packet = decode_packet(data)
            if packet is None:
                logger.warning(f"Ignoring malformed packet ({len(data)} bytes)")
                continue

            await self.handle_packet(packet)
