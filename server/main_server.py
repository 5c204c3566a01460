#!/usr/bin/env python3
"""
LAN Chat Relay Server - Main Entry Point

This is the main entry point for the server application.
It wires the session registry, broadcaster, command dispatcher and
heartbeat monitor together and runs one handler task per connection.
"""

import asyncio
import socket
from typing import Optional, Set

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.constants import PacketTypes
from common.framing import FramingError, read_message
from common.protocol_definitions import (
    Packet, decode_packet, create_chat_packet, create_system_packet, create_pong_packet
)
from server.chat.broadcaster import Broadcaster
from server.chat.command_dispatcher import CommandDispatcher
from server.heartbeat.heartbeat_monitor import HeartbeatMonitor
from server.session.session_registry import Session, SessionRegistry
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ChatRelayServer:
    """Main server class that integrates all functionality."""

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.registry = SessionRegistry()

        # Initialize modules
        self.broadcaster = Broadcaster(self.registry)
        self.dispatcher = CommandDispatcher(self.registry, self.broadcaster)
        self.heartbeat = HeartbeatMonitor(
            self.registry,
            self.broadcaster,
            self.config.heartbeat_interval,
            self.config.heartbeat_timeout
        )

        self.server: Optional[asyncio.AbstractServer] = None
        self.handler_tasks: Set[asyncio.Task] = set()

    @property
    def port(self) -> Optional[int]:
        """Port actually bound, useful when configured with port 0."""
        if self.server is None or not self.server.sockets:
            return None
        return self.server.sockets[0].getsockname()[1]

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual client connection."""
        addr = writer.get_extra_info('peername')
        task = asyncio.current_task()
        if task is not None:
            self.handler_tasks.add(task)

        sock = writer.get_extra_info('socket')
        if sock is not None:
            try:
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            except OSError as e:
                logger.debug(f"Could not set TCP_NODELAY for {addr}: {e}")

        session = await self.registry.allocate(writer, addr)
        logger.log_connection(addr, session.id)

        try:
            await self.broadcaster.send(
                session,
                create_system_packet(f"Welcome, {session.username}! Type /help for commands.")
            )
            await self.broadcaster.broadcast(
                create_system_packet(f"{session.username} joined the chat."),
                exclude_uid=session.id
            )

            while True:
                data = await read_message(reader, self.config.max_message_size)
                if data is None:
                    break

                packet = decode_packet(data)
                if packet is None:
                    # Malformed payloads are dropped; the connection stays open
                    logger.warning(f"Malformed packet from uid={session.id} ({len(data)} bytes)")
                    await self.broadcaster.send(session, create_system_packet("Malformed packet ignored."))
                    continue

                session.touch()
                await self.handle_packet(session, packet)

        except FramingError as e:
            logger.warning(f"Protocol error from uid={session.id}: {e}")
        except asyncio.CancelledError:
            logger.info(f"Connection cancelled for uid={session.id}")
            raise
        except ConnectionError as e:
            logger.debug(f"Connection lost for uid={session.id}: {e}")
        except Exception as e:
            logger.log_error(f"client handler uid={session.id}", e)
        finally:
            await self.disconnect_client(session)
            if task is not None:
                self.handler_tasks.discard(task)

    async def handle_packet(self, session: Session, packet: Packet):
        """Dispatch one decoded packet from a session."""
        logger.debug(f"Received from uid={session.id}: {packet.type}")

        if packet.type == PacketTypes.CHAT:
            await self.handle_chat(session, packet)
        elif packet.type == PacketTypes.COMMAND:
            await self.dispatcher.dispatch(session, packet)
        elif packet.type == PacketTypes.PONG:
            pass  # last_seen already refreshed
        elif packet.type == PacketTypes.PING:
            await self.broadcaster.send(session, create_pong_packet())
        else:
            logger.warning(f"Unknown packet type '{packet.type}' from uid={session.id}")
            await self.broadcaster.send(session, create_system_packet(f"Unknown packet type: {packet.type}"))

    async def handle_chat(self, session: Session, packet: Packet):
        """Rebroadcast chat text under the session's own username."""
        text = (packet.text or '').strip()
        if not text:
            return

        # Never trust the client's 'from'
        username = session.username
        logger.log_chat(username, session.id, text)
        await self.broadcaster.broadcast(create_chat_packet(text, sender=username))

    async def disconnect_client(self, session: Session):
        """Remove session, close its connection and notify the others."""
        username = session.username

        await self.registry.remove(session.id)
        session.close()

        logger.log_disconnect(username, session.id)
        await self.broadcaster.broadcast(create_system_packet(f"{username} left the chat."))

        # A peer that stopped reading can hold a graceful close open indefinitely
        try:
            await asyncio.wait_for(session.writer.wait_closed(), self.config.heartbeat_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Connection for uid={session.id} did not close in time, aborting")
            session.close(force=True)
        except Exception as e:
            logger.debug(f"Error waiting for close of uid={session.id}: {e}")

    async def start(self):
        """Bind the listener and start the heartbeat monitor."""
        self.server = await asyncio.start_server(
            self.handle_client,
            self.config.host,
            self.config.port
        )
        self.heartbeat.start()

        addr = ', '.join(str(sock.getsockname()) for sock in self.server.sockets)
        logger.info(f"Server listening on {addr}")

    async def serve_forever(self):
        """Start the server and run until cancelled."""
        await self.start()
        try:
            async with self.server:
                await self.server.serve_forever()
        finally:
            await self.stop()

    async def stop(self):
        """Stop accepting, stop the heartbeat and close every connection."""
        if self.server is not None:
            self.server.close()

        await self.heartbeat.stop()

        for session in await self.registry.snapshot():
            session.close(force=True)

        current = asyncio.current_task()
        pending = [task for task in self.handler_tasks if task is not current]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        if self.server is not None:
            await self.server.wait_closed()
            self.server = None

        logger.info("Server stopped")
